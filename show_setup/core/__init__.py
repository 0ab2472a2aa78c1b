"""
Core vocabulary shared by the stage graph and its evaluators.
"""
from show_setup.core.ontology import Status, StageOutcome, is_done, coerce_outcome, DONE_STATUSES

__all__ = [
    'Status',
    'StageOutcome',
    'is_done',
    'coerce_outcome',
    'DONE_STATUSES',
]
