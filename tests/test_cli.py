"""
Command Line Tests
"""
import json
from pathlib import Path

import pytest

from show_setup.main import cli
from show_setup.show.stages import SHOW_SETUP_ORDER


CONFIG_DIR = Path(__file__).parent.parent / "config"


@pytest.fixture
def state_file(tmp_path):
    path = tmp_path / "state.json"
    path.write_text(json.dumps({"show_file_loaded": True}), encoding="utf-8")
    return path


class TestStatusCommand:

    def test_json_output(self, state_file, capsys):
        assert cli(["status", str(state_file), "--json"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert list(result) == list(SHOW_SETUP_ORDER)
        assert result["selectShowFile"] == "success"
        assert result["setupEnvironment"] == "next"

    def test_table_output(self, state_file, capsys):
        assert cli(["status", str(state_file)]) == 0

        out = capsys.readouterr().out
        assert "Select show file" in out
        assert "Next: setupEnvironment" in out

    def test_custom_stage_table(self, state_file, capsys):
        code = cli(["status", str(state_file), "--json", "--stages", str(CONFIG_DIR / "show_stages.yaml")])
        assert code == 0
        assert json.loads(capsys.readouterr().out)["setupEnvironment"] == "next"

    def test_invalid_state_exits_with_2(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text('{"show_file_loaded": "not really"}', encoding="utf-8")
        assert cli(["status", str(path)]) == 2

    def test_undecodable_state_exits_with_2(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_bytes(b'{"show_file_loaded": \xff}')
        assert cli(["status", str(path)]) == 2

    def test_missing_state_file_exits_with_2(self, tmp_path):
        assert cli(["status", str(tmp_path / "missing.json")]) == 2


class TestOrderCommand:

    def test_prints_builtin_order(self, capsys):
        assert cli(["order"]) == 0
        assert capsys.readouterr().out.split() == list(SHOW_SETUP_ORDER)

    def test_broken_stage_table_exits_with_2(self, tmp_path):
        path = tmp_path / "stages.yaml"
        path.write_text("stages:\n  - id: unknownPredicate\n", encoding="utf-8")
        assert cli(["order", "--stages", str(path)]) == 2

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli([])
