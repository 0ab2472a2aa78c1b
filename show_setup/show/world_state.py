"""
SHOW WORLD STATE
Read-only snapshot of everything the launch workflow inspects.

The ground station rebuilds a snapshot on every change (show file loaded,
upload finished, preflight signed off, ...) and hands it to the stage
evaluator. Selectors below are the only code that reads the snapshot.
"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


UploadResult = Literal["success", "error", "cancelled"]
StartConditionSync = Literal["synced", "in_progress", "failed"]


class ShowState(BaseModel):
    """World-state snapshot of the drone show being prepared."""

    # === Show file ===
    show_file_loaded: bool = False
    show_file_loading: bool = False
    has_origin: bool = Field(
        default=False,
        description="Whether the show coordinate system has an origin on the map"
    )

    # === Takeoff area ===
    takeoff_area_approved: bool = False
    empty_mapping_slots: List[int] = Field(
        default_factory=list,
        description="Indices of mapping slots with no UAV assigned"
    )
    missing_uav_ids: List[str] = Field(
        default_factory=list,
        description="UAVs in the mapping that the server does not see"
    )

    # === Upload ===
    last_upload_result: Optional[UploadResult] = None

    # === Preflight ===
    onboard_checks_signed_off: bool = False
    all_uavs_without_errors: bool = False
    manual_checks_signed_off: bool = False
    all_manual_checks_ticked: bool = False

    # === Start conditions ===
    start_condition_sync: StartConditionSync = "synced"
    scheduled_start_time: Optional[datetime] = None

    # === Authorization ===
    authorized_to_start: bool = False
    authorized_locally: bool = False

    class Config:
        frozen = True
        extra = "forbid"


# =============================================================================
# SELECTORS
# =============================================================================

def has_loaded_show_file(state: ShowState) -> bool:
    return state.show_file_loaded


def is_loading_show_file(state: ShowState) -> bool:
    return state.show_file_loading


def has_show_origin(state: ShowState) -> bool:
    return state.has_origin


def is_takeoff_area_approved(state: ShowState) -> bool:
    return state.takeoff_area_approved


def is_mapping_complete(state: ShowState) -> bool:
    """Every mapping slot is filled and every mapped UAV is present."""
    return not state.empty_mapping_slots and not state.missing_uav_ids


def are_onboard_preflight_checks_signed_off(state: ShowState) -> bool:
    return state.onboard_checks_signed_off


def are_all_uavs_in_mission_without_errors(state: ShowState) -> bool:
    return state.all_uavs_without_errors


def are_manual_preflight_checks_signed_off(state: ShowState) -> bool:
    return state.manual_checks_signed_off


def are_all_preflight_checks_ticked(state: ShowState) -> bool:
    return state.all_manual_checks_ticked


def are_start_conditions_synced_with_server(state: ShowState) -> bool:
    return state.start_condition_sync == "synced"


def did_start_condition_sync_fail(state: ShowState) -> bool:
    return state.start_condition_sync == "failed"


def has_scheduled_start_time(state: ShowState) -> bool:
    return state.scheduled_start_time is not None


def is_show_authorized_to_start(state: ShowState) -> bool:
    return state.authorized_to_start


def is_show_authorized_to_start_locally(state: ShowState) -> bool:
    """Authorized in the ground station but not yet confirmed by the server."""
    return state.authorized_locally
