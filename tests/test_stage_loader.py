"""
Stage Table Loader Tests
YAML stage tables, schema validation and the predicate registry.
"""
from pathlib import Path

import pytest

from show_setup.core.ontology import Status
from show_setup.infrastructure.stage_loader import (
    PredicateRegistry,
    StageTableError,
    UnknownPredicateError,
    load_stage_graph,
    parse_stage_graph,
)
from show_setup.orchestration.stage_graph import (
    StageConfigurationError,
    StageOrderError,
)
from show_setup.orchestration.status_evaluator import StatusEvaluator
from show_setup.show.stages import SHOW_PREDICATES, SHOW_SETUP_ORDER, get_setup_stage_statuses
from show_setup.show.world_state import ShowState


CONFIG_DIR = Path(__file__).parent.parent / "config"


@pytest.fixture
def registry():
    reg = PredicateRegistry()

    @reg.register("done")
    def done(state):
        return True

    @reg.register("pending")
    def pending(state):
        return False

    return reg


class TestPredicateRegistry:

    def test_register_returns_function(self, registry):
        def extra(state):
            return Status.WAITING

        assert registry.register("extra")(extra) is extra
        assert registry.get("extra") is extra
        assert "extra" in registry
        assert len(registry) == 3

    def test_duplicate_registration_rejected(self, registry):
        with pytest.raises(StageConfigurationError, match="already registered"):
            registry.register("done")(lambda state: True)

    def test_unknown_predicate(self, registry):
        with pytest.raises(UnknownPredicateError, match="'missing'"):
            registry.get("missing")

    def test_names_sorted(self, registry):
        assert registry.names() == ["done", "pending"]


class TestParseStageGraph:

    def test_predicate_defaults_to_stage_id(self, registry):
        graph = parse_stage_graph({"stages": [{"id": "done"}]}, registry)
        assert StatusEvaluator(graph).evaluate(None) == {"done": Status.SUCCESS}

    def test_full_entry(self, registry):
        graph = parse_stage_graph({
            "stages": [
                {"id": "first", "predicate": "done", "title": "First step"},
                {"id": "second", "predicate": "pending", "requires": ["first"]},
                {"id": "third", "predicate": "pending", "suggests": ["second"]},
            ],
        }, registry)

        assert graph.get_stage("first").title == "First step"
        assert graph.get_stage("second").requires == ("first",)
        assert StatusEvaluator(graph).evaluate(None) == {
            "first": Status.SUCCESS,
            "second": Status.NEXT,
            "third": Status.OFF,
        }

    def test_explicit_order_validated(self, registry):
        document = {
            "stages": [
                {"id": "a", "predicate": "done"},
                {"id": "b", "predicate": "done", "requires": ["a"]},
            ],
            "order": ["b", "a"],
        }
        with pytest.raises(StageOrderError):
            parse_stage_graph(document, registry)

    def test_unknown_predicate_names_stage(self, registry):
        with pytest.raises(UnknownPredicateError) as exc_info:
            parse_stage_graph({"stages": [{"id": "a", "predicate": "nope"}]}, registry)
        assert exc_info.value.stage_id == "a"

    def test_undefined_dependency_keeps_stage_off(self, registry):
        graph = parse_stage_graph({"stages": [{"id": "done", "requires": ["ghost"]}]}, registry)
        assert StatusEvaluator(graph).evaluate(None) == {"done": Status.OFF}

    @pytest.mark.parametrize("document", [
        None,
        [],
        "stages",
        {},
        {"stages": "done"},
        {"stages": [{"predicate": "done"}]},
        {"stages": [{"id": ""}]},
        {"stages": [{"id": "done", "needs": ["x"]}]},
        {"stages": [{"id": "done"}], "extra": True},
    ])
    def test_malformed_documents(self, registry, document):
        with pytest.raises(StageTableError):
            parse_stage_graph(document, registry)


class TestLoadStageGraph:

    def test_bundled_show_table_matches_builtin(self):
        graph = load_stage_graph(CONFIG_DIR / "show_stages.yaml", SHOW_PREDICATES)

        assert graph.order == SHOW_SETUP_ORDER

        state = ShowState(show_file_loaded=True, has_origin=True, last_upload_result="cancelled")
        assert StatusEvaluator(graph).evaluate(state) == get_setup_stage_statuses(state)

    def test_invalid_yaml(self, tmp_path, registry):
        path = tmp_path / "broken.yaml"
        path.write_text("stages: [\n  - id: a\n", encoding="utf-8")
        with pytest.raises(StageTableError, match="Cannot parse"):
            load_stage_graph(path, registry)

    def test_empty_file(self, tmp_path, registry):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        with pytest.raises(StageTableError, match="mapping"):
            load_stage_graph(path, registry)

    def test_missing_file(self, tmp_path, registry):
        with pytest.raises(FileNotFoundError):
            load_stage_graph(tmp_path / "nope.yaml", registry)

    def test_loads_from_string_path(self, tmp_path, registry):
        path = tmp_path / "table.yaml"
        path.write_text("stages:\n  - id: pending\n", encoding="utf-8")
        graph = load_stage_graph(str(path), registry)
        assert graph.order == ("pending",)
