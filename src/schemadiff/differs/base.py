"""
Base differ capabilities

Two kinds of differ make up the engine:

- ``Differ`` compares two whole snapshots and records into a ``DiffResult``.
- ``EntityComponentDiffer`` compares one part (columns, indexes, ...) of an
  entity present in both snapshots and records into a ``ModifiedEntity``.

Differs are stateless apart from injected collaborators, so one instance can
be reused across any number of comparisons.
"""

from abc import ABC, abstractmethod

from schemadiff.diff_result import DiffResult, ModifiedEntity
from schemadiff.models import EntityModel, SchemaModel


class Differ(ABC):
    """Snapshot-level comparator"""

    @abstractmethod
    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel, result: DiffResult) -> None:
        """Record the differences between two snapshots

        Args:
            old_schema: Previous snapshot (source)
            new_schema: Current snapshot (target)
            result: Accumulator shared by the whole pipeline
        """


class EntityComponentDiffer(ABC):
    """Comparator for one component of an entity present in both snapshots"""

    @abstractmethod
    def diff(
        self, old_entity: EntityModel, new_entity: EntityModel, result: ModifiedEntity
    ) -> None:
        """Record component differences into ``result``

        Args:
            old_entity: Entity as it was in the previous snapshot
            new_entity: Same entity in the current snapshot
            result: Per-entity accumulator
        """


def render(value: object) -> str:
    """Render an attribute value for change text

    ``None`` renders as ``null`` and booleans in lower case, so messages read
    the same regardless of the attribute's Python type.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(render(v) for v in value) + "]"
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}={render(v)}" for k, v in sorted(value.items())) + "}"
    return str(value)


def changed(attribute: str, old: object, new: object) -> str:
    return f"{attribute} changed from {render(old)} to {render(new)}"
