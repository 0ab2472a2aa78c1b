"""
STAGE TABLE LOADER
Builds a StageGraph from a declarative YAML stage table.

Evaluate functions cannot live in YAML, so each stage names a PREDICATE
registered in a PredicateRegistry. The YAML holds only the structure.

Usage:
    registry = PredicateRegistry()

    @registry.register("selectShowFile")
    def has_show_file(state):
        return state.show_file_loaded

    graph = load_stage_graph("config/show_stages.yaml", registry)

Schema:
    stages:
      - id: selectShowFile
        predicate: selectShowFile   # optional, defaults to id
        title: Select show file     # optional
        requires: []
        suggests: []
    order: [selectShowFile]         # optional, computed when absent
"""
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from show_setup.core.ontology import StageOutcome
from show_setup.orchestration.stage_graph import Stage, StageConfigurationError, StageGraph

logger = logging.getLogger("ShowSetup.StageLoader")


Predicate = Callable[[Any], StageOutcome]


class StageTableError(StageConfigurationError):
    """Raised when a stage table document is malformed."""
    pass


class UnknownPredicateError(StageConfigurationError):
    """Raised when a stage table names a predicate that is not registered."""

    def __init__(self, name: str, stage_id: Optional[str] = None):
        self.name = name
        self.stage_id = stage_id
        where = f" (stage {stage_id!r})" if stage_id else ""
        super().__init__(f"Unknown predicate {name!r}{where}")


# =============================================================================
# PREDICATE REGISTRY
# =============================================================================

class PredicateRegistry:
    """Named evaluate functions that stage tables can refer to."""

    def __init__(self):
        self._predicates: Dict[str, Predicate] = {}

    def register(self, name: str) -> Callable[[Predicate], Predicate]:
        """Decorator registering a predicate under the given name."""
        def decorator(fn: Predicate) -> Predicate:
            if name in self._predicates:
                raise StageConfigurationError(f"Predicate {name!r} is already registered")
            self._predicates[name] = fn
            return fn
        return decorator

    def get(self, name: str) -> Predicate:
        try:
            return self._predicates[name]
        except KeyError:
            raise UnknownPredicateError(name) from None

    def names(self) -> List[str]:
        return sorted(self._predicates)

    def __contains__(self, name: object) -> bool:
        return name in self._predicates

    def __len__(self) -> int:
        return len(self._predicates)


# =============================================================================
# SCHEMA
# =============================================================================

class StageEntry(BaseModel):
    """One stage of a YAML stage table."""
    id: str = Field(min_length=1)
    predicate: Optional[str] = Field(
        default=None,
        description="Registered predicate name; defaults to the stage id"
    )
    title: Optional[str] = None
    requires: List[str] = Field(default_factory=list)
    suggests: List[str] = Field(default_factory=list)

    class Config:
        extra = "forbid"


class StageTable(BaseModel):
    """A complete YAML stage table."""
    stages: List[StageEntry]
    order: Optional[List[str]] = None

    class Config:
        extra = "forbid"


# =============================================================================
# LOADING
# =============================================================================

def parse_stage_graph(document: Any, registry: PredicateRegistry) -> StageGraph:
    """
    Build a StageGraph from an already-parsed stage table document.

    Raises:
        StageTableError: if the document does not match the schema
        UnknownPredicateError: if a stage names an unregistered predicate
        StageConfigurationError: if the stages do not form a valid graph
    """
    if not isinstance(document, dict):
        raise StageTableError(
            f"Stage table must be a mapping, got {type(document).__name__}"
        )

    try:
        table = StageTable.model_validate(document)
    except ValidationError as e:
        raise StageTableError(f"Invalid stage table: {e}") from e

    stages = []
    for entry in table.stages:
        predicate_name = entry.predicate or entry.id
        if predicate_name not in registry:
            raise UnknownPredicateError(predicate_name, stage_id=entry.id)
        stages.append(Stage(
            id=entry.id,
            evaluate=registry.get(predicate_name),
            requires=tuple(entry.requires),
            suggests=tuple(entry.suggests),
            title=entry.title,
        ))

    return StageGraph(stages, order=table.order)


def load_stage_graph(path: Union[str, Path], registry: PredicateRegistry) -> StageGraph:
    """Load a YAML stage table from disk and build its StageGraph."""
    path = Path(path)
    logger.info(f"Loading stage table from {path}")

    try:
        with open(path, encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise StageTableError(f"Cannot parse stage table {path}: {e}") from e

    return parse_stage_graph(document, registry)
