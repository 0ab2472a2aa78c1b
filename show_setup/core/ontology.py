"""
STAGE ONTOLOGY - The Vocabulary of the Launch Workflow

Defines the closed set of statuses a stage can be in and the single place
where a stage's raw outcome (a boolean or a Status) is turned into a Status.

Key Principles:
1. Status is a CLOSED enumeration - presentation layers switch on it
2. SUCCESS and SKIPPED are the only "done" statuses
3. Boolean outcomes are coerced in exactly one function
"""
from enum import Enum
from typing import FrozenSet, Union


# =============================================================================
# ENUMS
# =============================================================================

class Status(str, Enum):
    """Status of a single stage in the workflow."""
    OFF = "off"              # Not started / inactive
    WAITING = "waiting"      # In progress, awaiting an external event
    SUCCESS = "success"      # Completed
    SKIPPED = "skipped"      # Intentionally bypassed, counts as done
    ERROR = "error"          # Failed
    NEXT = "next"            # Recommended next action for the operator

    def __str__(self) -> str:
        return self.value


# Statuses that satisfy `requires` and `suggests` edges
DONE_STATUSES: FrozenSet[Status] = frozenset({Status.SUCCESS, Status.SKIPPED})


# What an `evaluate` function may return
StageOutcome = Union[bool, Status]


def is_done(status) -> bool:
    """
    Returns whether a status counts as "done" when inspecting
    dependencies between stages.

    Missing statuses (None) are never done.
    """
    return status in DONE_STATUSES


def coerce_outcome(outcome: StageOutcome) -> Status:
    """
    Convert the raw outcome of a stage's evaluate function to a Status.

    Args:
        outcome: True, False or a Status value

    Returns:
        SUCCESS for True, OFF for False, the Status itself otherwise

    Raises:
        TypeError: if the outcome is neither a bool nor a Status
    """
    # bool must be checked before anything else; Status is a str subclass
    if isinstance(outcome, bool):
        return Status.SUCCESS if outcome else Status.OFF
    if isinstance(outcome, Status):
        return outcome
    raise TypeError(
        f"Stage outcome must be a bool or a Status, got {type(outcome).__name__}: {outcome!r}"
    )
