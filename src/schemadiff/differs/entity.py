"""
Entity Modification Differ

Runs the entity component differs over every entity present in both
snapshots and keeps the entities where something changed.
"""

import logging
from collections.abc import Sequence

from schemadiff.diff_result import DiffResult, ModifiedEntity
from schemadiff.models import EntityModel, SchemaModel
from schemadiff.naming import CaseNormalizer

from .base import Differ, EntityComponentDiffer, render
from .column import ColumnDiffer
from .constraint import ConstraintDiffer
from .index import IndexDiffer
from .relationship import RelationshipDiffer

logger = logging.getLogger(__name__)


def default_component_differs(
    normalizer: CaseNormalizer | None = None, column_differ: ColumnDiffer | None = None
) -> tuple[EntityComponentDiffer, ...]:
    """Component differs in their required order: columns, indexes, constraints, relationships"""
    normalizer = normalizer or CaseNormalizer.lower()
    return (
        column_differ or ColumnDiffer(),
        IndexDiffer(normalizer),
        ConstraintDiffer(normalizer),
        RelationshipDiffer(normalizer),
    )


class EntityModificationDiffer(Differ):
    """Per-entity comparison of entities present in both snapshots"""

    def __init__(self, component_differs: Sequence[EntityComponentDiffer] | None = None) -> None:
        self.component_differs = (
            tuple(component_differs)
            if component_differs is not None
            else default_component_differs()
        )

    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel, result: DiffResult) -> None:
        old_entities = old_schema.entities
        new_entities = new_schema.entities

        for name in sorted(old_entities.keys() & new_entities.keys()):
            modified = self.compare_entities(old_entities[name], new_entities[name])
            if modified.is_empty():
                continue
            logger.debug(
                "Entity %s modified: %d column, %d index, %d constraint, %d relationship diffs",
                name,
                len(modified.column_diffs),
                len(modified.index_diffs),
                len(modified.constraint_diffs),
                len(modified.relationship_diffs),
            )
            result.modified_tables.append(modified)
            result.warnings.extend(modified.warnings)

    def compare_entities(self, old_entity: EntityModel, new_entity: EntityModel) -> ModifiedEntity:
        modified = ModifiedEntity(old_entity=old_entity, new_entity=new_entity)

        for differ in self.component_differs:
            differ.diff(old_entity, new_entity, modified)

        modified.warnings.extend(entity_level_warnings(old_entity, new_entity))
        return modified


def entity_level_warnings(old: EntityModel, new: EntityModel) -> list[str]:
    """Warnings for table-level metadata of an entity"""
    name = new.entity_name
    warnings: list[str] = []
    if old.schema_name != new.schema_name:
        warnings.append(
            f"Schema changed from {render(old.schema_name)} to {render(new.schema_name)} "
            f"for entity {name}"
        )
    if old.catalog != new.catalog:
        warnings.append(
            f"Catalog changed from {render(old.catalog)} to {render(new.catalog)} "
            f"for entity {name}"
        )
    if old.table_name != new.table_name:
        warnings.append(
            f"Table name changed from {old.table_name} to {new.table_name} for entity {name}"
        )
    if old.inheritance != new.inheritance:
        warnings.append(
            f"Inheritance strategy changed from {render(old.inheritance)} "
            f"to {render(new.inheritance)} for entity {name}; manual migration required."
        )
    return warnings
