"""
STAGE GRAPH
Immutable stage definitions plus a topological order consistent with their
`requires` edges.

A stage names the stages it REQUIRES (hard prerequisites: its own evaluate
function is not consulted until they are done) and the stages it SUGGESTS
(soft prerequisites: they only decide whether an inactive stage is promoted
to NEXT).

Example:
    graph = StageGraph([
        Stage("selectShowFile", evaluate=has_show_file),
        Stage("uploadShow", evaluate=is_uploaded, requires=["selectShowFile"]),
    ])
    graph.order
    # ("selectShowFile", "uploadShow")

The order can also be supplied explicitly, in which case it is validated
instead of computed. Either way the graph refuses to construct from
duplicate ids, cycles or a mismatched order. Ids outside the graph are
allowed and never count as done.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Set, Tuple

import networkx as nx

from show_setup.core.ontology import StageOutcome


logger = logging.getLogger("ShowSetup.StageGraph")


# =============================================================================
# ERRORS
# =============================================================================

class StageConfigurationError(ValueError):
    """Raised when a set of stage definitions cannot form a valid graph."""
    pass


class UnknownStageError(StageConfigurationError, KeyError):
    """Raised when a stage id is referenced but not defined."""

    def __init__(self, stage_id: str):
        self.stage_id = stage_id
        super().__init__(f"Unknown stage: {stage_id!r}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class StageOrderError(StageConfigurationError):
    """Raised when a supplied stage order does not match the stage definitions."""
    pass


class CyclicDependencyError(StageConfigurationError):
    """Raised when a cycle is detected among stage dependencies."""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__(f"Cyclic stage dependency detected: {' -> '.join(cycle)}")


# =============================================================================
# STAGE DEFINITION
# =============================================================================

@dataclass(frozen=True)
class Stage:
    """
    A named checkpoint in a multi-step operator workflow.

    `evaluate` receives the world-state snapshot and returns either a bool
    or a Status describing the stage's own state, ignoring dependencies.
    It is only called when every stage in `requires` is done.
    """
    id: str
    evaluate: Callable[[Any], StageOutcome] = field(compare=False)
    requires: Tuple[str, ...] = ()
    suggests: Tuple[str, ...] = ()
    title: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise StageConfigurationError("Stage id must be a non-empty string")
        if not callable(self.evaluate):
            raise StageConfigurationError(f"Stage {self.id!r} has a non-callable evaluate")
        # frozen dataclass: normalize via object.__setattr__
        object.__setattr__(self, "requires", tuple(self.requires or ()))
        object.__setattr__(self, "suggests", tuple(self.suggests or ()))
        if self.title is None:
            object.__setattr__(self, "title", self.id)


# =============================================================================
# GRAPH
# =============================================================================

class StageGraph:
    """
    Read-only container of stage definitions and their evaluation order.

    Raises StageConfigurationError (or one of its subclasses) at construction
    if the definitions are inconsistent.
    """

    def __init__(self, stages: Iterable[Stage], order: Optional[Sequence[str]] = None):
        self._stages: Dict[str, Stage] = {}
        for stage in stages:
            if stage.id in self._stages:
                raise StageConfigurationError(f"Duplicate stage id: {stage.id!r}")
            self._stages[stage.id] = stage

        self._warn_dangling_references()
        self._graph = self._build_dependency_graph()
        self._check_acyclic()

        if order is None:
            self._order = self._compute_order()
        else:
            self._order = self._validate_order(order)

        logger.info(f"Resolved stage order: {list(self._order)}")

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    def _warn_dangling_references(self) -> None:
        """Ids outside the graph are allowed; they are simply never done."""
        for stage in self._stages.values():
            for dep in stage.requires:
                if dep not in self._stages:
                    logger.warning(f"Stage {stage.id} requires undefined stage {dep}, it will stay OFF")
            for dep in stage.suggests:
                if dep not in self._stages:
                    logger.warning(f"Stage {stage.id} suggests undefined stage {dep}, it will never be NEXT")

    def _build_dependency_graph(self) -> nx.DiGraph:
        """Edges point from prerequisite to dependent stage, restricted to defined stages."""
        graph = nx.DiGraph()
        for position, stage_id in enumerate(self._stages):
            graph.add_node(stage_id, position=position)
        for stage in self._stages.values():
            for dep in stage.suggests:
                if dep in self._stages:
                    graph.add_edge(dep, stage.id, relation="suggests")
            # requires wins when a stage lists a dependency in both
            for dep in stage.requires:
                if dep in self._stages:
                    graph.add_edge(dep, stage.id, relation="requires")
        return graph

    def _check_acyclic(self) -> None:
        try:
            edges = nx.find_cycle(self._graph)
        except nx.NetworkXNoCycle:
            return
        cycle = [source for source, _ in edges] + [edges[0][0]]
        raise CyclicDependencyError(cycle)

    def _compute_order(self) -> Tuple[str, ...]:
        positions = nx.get_node_attributes(self._graph, "position")
        return tuple(nx.lexicographical_topological_sort(self._graph, key=positions.__getitem__))

    def _validate_order(self, order: Sequence[str]) -> Tuple[str, ...]:
        order = tuple(order)

        # membership first, so a missing stage is not reported as misplaced
        seen: Set[str] = set()
        for stage_id in order:
            if stage_id not in self._stages:
                raise StageOrderError(f"Stage order references undefined stage {stage_id!r}")
            if stage_id in seen:
                raise StageOrderError(f"Stage {stage_id!r} appears more than once in the stage order")
            seen.add(stage_id)

        missing = [stage_id for stage_id in self._stages if stage_id not in seen]
        if missing:
            raise StageOrderError(f"Stage order omits defined stages: {missing}")

        placed: Set[str] = set()
        for stage_id in order:
            for dep in self._stages[stage_id].requires:
                if dep in self._stages and dep not in placed:
                    raise StageOrderError(
                        f"Stage {stage_id!r} appears before its requirement {dep!r} in the stage order"
                    )
            placed.add(stage_id)

        return order

    # -------------------------------------------------------------------------
    # Read-only API
    # -------------------------------------------------------------------------

    @property
    def order(self) -> Tuple[str, ...]:
        """Stage ids in evaluation order."""
        return self._order

    @property
    def stage_ids(self) -> Tuple[str, ...]:
        """Stage ids in declaration order."""
        return tuple(self._stages)

    def get_stage(self, stage_id: str) -> Stage:
        """Get a stage by id."""
        try:
            return self._stages[stage_id]
        except KeyError:
            raise UnknownStageError(stage_id) from None

    def get_dependencies(self, stage_id: str) -> Set[str]:
        """Get all transitive `requires` of a stage that are defined in the graph."""
        result: Set[str] = set()
        to_process = list(self.get_stage(stage_id).requires)

        while to_process:
            dep = to_process.pop()
            if dep not in result and dep in self._stages:
                result.add(dep)
                to_process.extend(self._stages[dep].requires)

        return result

    def get_dependents(self, stage_id: str) -> Set[str]:
        """Get the stages that directly require this stage."""
        self.get_stage(stage_id)
        return {
            stage.id for stage in self._stages.values()
            if stage_id in stage.requires
        }

    def to_networkx(self) -> nx.DiGraph:
        """
        Return a copy of the dependency graph.

        Edges point from prerequisite to dependent stage and carry a
        `relation` attribute of "requires" or "suggests".
        """
        return self._graph.copy()

    def __contains__(self, stage_id: object) -> bool:
        return stage_id in self._stages

    def __iter__(self) -> Iterator[Stage]:
        return (self._stages[stage_id] for stage_id in self._order)

    def __len__(self) -> int:
        return len(self._stages)

    def __repr__(self) -> str:
        return f"StageGraph({list(self._order)!r})"
