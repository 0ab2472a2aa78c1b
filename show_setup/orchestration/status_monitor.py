"""
STAGE STATUS MONITOR
Tracks how stage statuses change between successive evaluations.

The evaluator carries no memory between calls. Callers that want to react
to transitions (e.g. flash a stage that just turned NEXT) keep a monitor
that remembers the previous result and records every change.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from show_setup.core.ontology import Status
from show_setup.orchestration.status_evaluator import StatusEvaluator

logger = logging.getLogger("ShowSetup.StatusMonitor")


@dataclass(frozen=True)
class StatusChange:
    """A single stage status transition. `previous` is None on the first update."""
    stage_id: str
    previous: Optional[Status]
    current: Status


class StatusMonitor:
    """
    Re-evaluates stages on each world-state change and reports transitions.

    Not thread-safe; meant to be driven from the single control thread that
    observes world-state changes.
    """

    def __init__(self, evaluator: StatusEvaluator, history_limit: int = 100):
        if history_limit < 1:
            raise ValueError(f"history_limit must be positive, got {history_limit}")
        self.evaluator = evaluator
        self.history_limit = history_limit
        self._current: Optional[Dict[str, Status]] = None
        self._history: List[StatusChange] = []

    @property
    def current(self) -> Optional[Dict[str, Status]]:
        """The most recent result, or None before the first update."""
        return dict(self._current) if self._current is not None else None

    def update(self, state: Any) -> List[StatusChange]:
        """
        Evaluate the given world state and return the stages whose status changed.

        If evaluation raises, the monitor keeps its previous result.
        """
        result = self.evaluator.evaluate(state)
        previous = self._current or {}

        changes = [
            StatusChange(stage_id, previous.get(stage_id), status)
            for stage_id, status in result.items()
            if previous.get(stage_id) is not status
        ]

        for change in changes:
            logger.debug(f"Stage transition: {change.stage_id} {change.previous} → {change.current}")

        self._current = result
        self._history.extend(changes)
        if len(self._history) > self.history_limit:
            del self._history[:-self.history_limit]

        return changes

    def get_history(self, stage_id: Optional[str] = None, limit: Optional[int] = None) -> List[StatusChange]:
        """Retrieve recorded transitions, optionally filtered by stage."""
        history = self._history
        if stage_id is not None:
            history = [change for change in history if change.stage_id == stage_id]
        if limit is not None:
            return history[-limit:] if limit > 0 else []
        return list(history)

    def reset(self) -> None:
        """Forget the previous result and all recorded transitions."""
        self._current = None
        self._history.clear()
