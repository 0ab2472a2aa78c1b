#!/usr/bin/env python3
"""
SHOW SETUP - Command Line Entry Point

Evaluates a world-state snapshot (JSON) against the show launch workflow
and prints the status of every stage.

Usage:
    show-setup status state.json
    show-setup status state.json --json
    show-setup status state.json --stages config/show_stages.yaml
    show-setup order
"""
import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from show_setup.infrastructure.stage_loader import load_stage_graph
from show_setup.orchestration.stage_graph import StageConfigurationError, StageGraph
from show_setup.orchestration.status_evaluator import StatusEvaluator, get_next_stages
from show_setup.show.stages import SHOW_PREDICATES, create_show_setup_graph
from show_setup.show.world_state import ShowState


LOG_FORMAT = '%(asctime)s | %(name)-20s | %(levelname)-7s | %(message)s'

logger = logging.getLogger("ShowSetup.Main")


def setup_logging(log_level: str = "INFO") -> None:
    """Configure root logging for command line use."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt='%H:%M:%S'
    )


def build_graph(stages_path: Optional[str]) -> StageGraph:
    """The built-in show workflow, or a YAML stage table using the show predicates."""
    if stages_path:
        return load_stage_graph(stages_path, SHOW_PREDICATES)
    return create_show_setup_graph()


def load_state(path: str) -> ShowState:
    """Read a world-state snapshot from a JSON file."""
    return ShowState.model_validate_json(Path(path).read_text(encoding="utf-8"))


def cmd_status(args) -> int:
    graph = build_graph(args.stages)
    state = load_state(args.state)
    result = StatusEvaluator(graph).evaluate(state)

    if args.json:
        print(json.dumps({stage_id: status.value for stage_id, status in result.items()}, indent=2))
        return 0

    width = max(len(stage_id) for stage_id in result) if result else 0
    for stage in graph:
        print(f"{stage.id.ljust(width)}  {result[stage.id].value:<8}  {stage.title}")

    next_stages = get_next_stages(result)
    if next_stages:
        print(f"\nNext: {', '.join(next_stages)}")
    return 0


def cmd_order(args) -> int:
    graph = build_graph(args.stages)
    for stage_id in graph.order:
        print(stage_id)
    return 0


def cli(argv: Optional[List[str]] = None) -> int:
    """Command line interface. Returns the process exit code."""
    parser = argparse.ArgumentParser(
        prog="show-setup",
        description="Show launch workflow - stage status evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  show-setup status state.json
  show-setup status state.json --json
  show-setup order --stages config/show_stages.yaml
        """
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("SHOW_SETUP_LOG_LEVEL", "INFO"),
        help="Logging level (default: $SHOW_SETUP_LOG_LEVEL or INFO)"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("status", help="Print the status of every stage")
    ps.add_argument("state", help="World-state snapshot (JSON)")
    ps.add_argument("--stages", help="YAML stage table (default: built-in show workflow)")
    ps.add_argument("--json", action="store_true", help="Print the result as JSON")
    ps.set_defaults(func=cmd_status)

    po = sub.add_parser("order", help="Print the stage evaluation order")
    po.add_argument("--stages", help="YAML stage table (default: built-in show workflow)")
    po.set_defaults(func=cmd_order)

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        return args.func(args)
    except (StageConfigurationError, ValidationError, OSError, UnicodeDecodeError) as e:
        logger.error(str(e))
        return 2


def main() -> None:
    sys.exit(cli())


if __name__ == "__main__":
    main()
