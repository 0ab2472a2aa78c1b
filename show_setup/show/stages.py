"""
SHOW LAUNCH STAGES
The stages one needs to pass through in order to launch a drone show.

Each stage's evaluate function only looks at its own part of the world
state; the stage graph takes care of blocking stages whose requirements are
not done yet and of marking the suggested next step.
"""
from typing import Dict, List

from show_setup.core.ontology import Status, StageOutcome
from show_setup.infrastructure.stage_loader import PredicateRegistry
from show_setup.orchestration.stage_graph import Stage, StageGraph
from show_setup.orchestration.status_evaluator import StatusEvaluator
from show_setup.show.world_state import (
    ShowState,
    are_all_preflight_checks_ticked,
    are_all_uavs_in_mission_without_errors,
    are_manual_preflight_checks_signed_off,
    are_onboard_preflight_checks_signed_off,
    are_start_conditions_synced_with_server,
    did_start_condition_sync_fail,
    has_loaded_show_file,
    has_scheduled_start_time,
    has_show_origin,
    is_loading_show_file,
    is_mapping_complete,
    is_show_authorized_to_start,
    is_show_authorized_to_start_locally,
    is_takeoff_area_approved,
)


SHOW_PREDICATES = PredicateRegistry()


@SHOW_PREDICATES.register("selectShowFile")
def evaluate_select_show_file(state: ShowState) -> StageOutcome:
    if has_loaded_show_file(state):
        return Status.SUCCESS
    if is_loading_show_file(state):
        return Status.WAITING
    return Status.OFF


@SHOW_PREDICATES.register("setupEnvironment")
def evaluate_setup_environment(state: ShowState) -> StageOutcome:
    return has_loaded_show_file(state) and has_show_origin(state)


@SHOW_PREDICATES.register("setupTakeoffArea")
def evaluate_setup_takeoff_area(state: ShowState) -> StageOutcome:
    if not is_takeoff_area_approved(state):
        return Status.OFF
    # approved with gaps in the mapping counts as a deliberate bypass
    return Status.SUCCESS if is_mapping_complete(state) else Status.SKIPPED


@SHOW_PREDICATES.register("uploadShow")
def evaluate_upload_show(state: ShowState) -> StageOutcome:
    return {
        "error": Status.ERROR,
        "cancelled": Status.SKIPPED,
        "success": Status.SUCCESS,
    }.get(state.last_upload_result, Status.OFF)


@SHOW_PREDICATES.register("waitForOnboardPreflightChecks")
def evaluate_onboard_preflight_checks(state: ShowState) -> StageOutcome:
    if not are_onboard_preflight_checks_signed_off(state):
        return Status.OFF
    return Status.SUCCESS if are_all_uavs_in_mission_without_errors(state) else Status.SKIPPED


@SHOW_PREDICATES.register("performManualPreflightChecks")
def evaluate_manual_preflight_checks(state: ShowState) -> StageOutcome:
    if not are_manual_preflight_checks_signed_off(state):
        return Status.OFF
    return Status.SUCCESS if are_all_preflight_checks_ticked(state) else Status.SKIPPED


@SHOW_PREDICATES.register("setupStartTime")
def evaluate_setup_start_time(state: ShowState) -> StageOutcome:
    if did_start_condition_sync_fail(state):
        return Status.ERROR
    if not are_start_conditions_synced_with_server(state):
        return Status.WAITING
    return Status.SUCCESS if has_scheduled_start_time(state) else Status.OFF


@SHOW_PREDICATES.register("authorization")
def evaluate_authorization(state: ShowState) -> StageOutcome:
    if is_show_authorized_to_start(state):
        return Status.SUCCESS
    if did_start_condition_sync_fail(state):
        return Status.ERROR
    if is_show_authorized_to_start_locally(state):
        return Status.WAITING
    return Status.OFF


# =============================================================================
# STAGE TABLE
# =============================================================================

PREFLIGHT_STAGES = ("waitForOnboardPreflightChecks", "performManualPreflightChecks")

SHOW_SETUP_STAGES: List[Stage] = [
    Stage("selectShowFile", evaluate_select_show_file,
          title="Select show file"),
    Stage("setupEnvironment", evaluate_setup_environment,
          requires=("selectShowFile",),
          title="Set up environment"),
    Stage("setupTakeoffArea", evaluate_setup_takeoff_area,
          requires=("setupEnvironment",),
          title="Set up takeoff area"),
    Stage("uploadShow", evaluate_upload_show,
          requires=("selectShowFile", "setupEnvironment"),
          title="Upload show data"),
    Stage("waitForOnboardPreflightChecks", evaluate_onboard_preflight_checks,
          requires=("uploadShow",),
          title="Wait for onboard preflight checks"),
    Stage("performManualPreflightChecks", evaluate_manual_preflight_checks,
          requires=("uploadShow",),
          title="Perform manual preflight checks"),
    Stage("setupStartTime", evaluate_setup_start_time,
          requires=("selectShowFile",),
          suggests=PREFLIGHT_STAGES,
          title="Set up start time"),
    Stage("authorization", evaluate_authorization,
          requires=PREFLIGHT_STAGES,
          title="Give authorization to start"),
]

# Each stage has a higher index than any of the stages it depends on
SHOW_SETUP_ORDER = (
    "selectShowFile",
    "setupEnvironment",
    "setupTakeoffArea",
    "uploadShow",
    "waitForOnboardPreflightChecks",
    "performManualPreflightChecks",
    "setupStartTime",
    "authorization",
)


def create_show_setup_graph() -> StageGraph:
    """Build the stage graph of the show launch workflow."""
    return StageGraph(SHOW_SETUP_STAGES, order=SHOW_SETUP_ORDER)


_show_setup_evaluator = StatusEvaluator(create_show_setup_graph())


def get_setup_stage_statuses(state: ShowState) -> Dict[str, Status]:
    """
    Returns a mapping from each stage of the show setup process to its
    status, marking the stages the operator should perform next with NEXT.
    """
    return _show_setup_evaluator.evaluate(state)
