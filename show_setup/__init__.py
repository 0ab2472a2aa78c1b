"""
SHOW SETUP STAGES
Dependency-aware status evaluation for the drone show launch workflow.

Public surface:
- show_setup.core.ontology: Status, is_done, coerce_outcome
- show_setup.orchestration.stage_graph: Stage, StageGraph
- show_setup.orchestration.status_evaluator: StatusEvaluator, evaluate_stage_statuses
- show_setup.show.stages: the built-in show launch workflow
"""
__all__ = ["__version__"]
__version__ = "0.3.0"
