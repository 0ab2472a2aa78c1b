"""
Show Setup Infrastructure

- stage_loader: YAML stage tables and the predicate registry they refer to
"""
from show_setup.infrastructure.stage_loader import (
    PredicateRegistry,
    StageTableError,
    UnknownPredicateError,
    load_stage_graph,
    parse_stage_graph,
)

__all__ = [
    'PredicateRegistry',
    'StageTableError',
    'UnknownPredicateError',
    'load_stage_graph',
    'parse_stage_graph',
]
