"""
The drone show launch workflow: world-state snapshot, selectors and stages.
"""
from show_setup.show.stages import (
    SHOW_PREDICATES,
    SHOW_SETUP_ORDER,
    SHOW_SETUP_STAGES,
    create_show_setup_graph,
    get_setup_stage_statuses,
)
from show_setup.show.world_state import ShowState

__all__ = [
    'SHOW_PREDICATES',
    'SHOW_SETUP_ORDER',
    'SHOW_SETUP_STAGES',
    'ShowState',
    'create_show_setup_graph',
    'get_setup_stage_statuses',
]
