"""
STATUS EVALUATOR
Computes the status of every stage of a StageGraph for one world-state
snapshot, in a single pass over the stage order.

For each stage, in order:
1. If any required stage is not done, the stage is OFF and its evaluate
   function is NOT called.
2. Otherwise evaluate(state) decides; True/False become SUCCESS/OFF.
3. An OFF stage whose suggested stages are all done becomes NEXT.

The evaluator is stateless: every call builds a fresh result and nothing
is retained between calls. Exceptions raised by evaluate functions
propagate unmodified.
"""
import logging
from typing import Any, Dict, Iterable, List

from show_setup.core.ontology import Status, coerce_outcome, is_done
from show_setup.orchestration.stage_graph import StageGraph


logger = logging.getLogger("ShowSetup.StatusEvaluator")


def _all_done(result: Dict[str, Status], deps: Iterable[str]) -> bool:
    """Returns whether every dependency already has a done status in the result."""
    return all(is_done(result.get(dep)) for dep in deps)


class StatusEvaluator:
    """
    Evaluates stage statuses against world-state snapshots.

    Holds only the (read-only) stage graph, so one instance can be shared
    freely between callers.
    """

    def __init__(self, graph: StageGraph):
        self.graph = graph

    def evaluate(self, state: Any) -> Dict[str, Status]:
        """
        Compute the status of every stage for the given world state.

        Args:
            state: Opaque world-state snapshot passed to each evaluate function

        Returns:
            Mapping from stage id to Status, one entry per stage
        """
        result: Dict[str, Status] = {}

        for stage in self.graph:
            if _all_done(result, stage.requires):
                # all requirements are satisfied, so we can check its own state
                status = coerce_outcome(stage.evaluate(state))

                if status is Status.OFF and _all_done(result, stage.suggests):
                    # not acted on yet but everything it suggests is ready
                    status = Status.NEXT
            else:
                status = Status.OFF

            result[stage.id] = status

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Evaluated {len(result)} stages: {summarize(result)}")
        return result

    __call__ = evaluate


def evaluate_stage_statuses(graph: StageGraph, state: Any) -> Dict[str, Status]:
    """Module-level convenience function."""
    return StatusEvaluator(graph).evaluate(state)


# =============================================================================
# RESULT HELPERS
# =============================================================================

def get_next_stages(result: Dict[str, Status]) -> List[str]:
    """Get the ids of stages recommended as the next action, in result order."""
    return [stage_id for stage_id, status in result.items() if status is Status.NEXT]


def get_blocking_requirements(graph: StageGraph, result: Dict[str, Status], stage_id: str) -> List[str]:
    """
    Get the required stages that keep a stage from being evaluated.

    Returns:
        Ids from the stage's `requires` whose status is not done, in
        declaration order. Empty if the stage is unblocked.
    """
    stage = graph.get_stage(stage_id)
    return [dep for dep in stage.requires if not is_done(result.get(dep))]


def summarize(result: Dict[str, Status]) -> Dict[Status, int]:
    """Count stages per status; every status is present."""
    counts = {status: 0 for status in Status}
    for status in result.values():
        counts[status] += 1
    return counts
