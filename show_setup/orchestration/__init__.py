"""
Show Setup Orchestration Layer

- stage_graph: stage definitions and their topological order
- status_evaluator: single-pass status computation
- status_monitor: transition tracking across evaluations
"""
from show_setup.orchestration.stage_graph import (
    CyclicDependencyError,
    Stage,
    StageConfigurationError,
    StageGraph,
    StageOrderError,
    UnknownStageError,
)
from show_setup.orchestration.status_evaluator import (
    StatusEvaluator,
    evaluate_stage_statuses,
    get_blocking_requirements,
    get_next_stages,
    summarize,
)
from show_setup.orchestration.status_monitor import StatusChange, StatusMonitor

__all__ = [
    'CyclicDependencyError',
    'Stage',
    'StageConfigurationError',
    'StageGraph',
    'StageOrderError',
    'UnknownStageError',
    'StatusEvaluator',
    'evaluate_stage_statuses',
    'get_blocking_requirements',
    'get_next_stages',
    'summarize',
    'StatusChange',
    'StatusMonitor',
]
