"""
Relationship Differ

Relationships are matched across snapshots by ``RelationshipKey``: owning
table, owning column set, referenced table and referenced column set, all
case-folded. The association kind is not part of the key, so reclassifying a
MANY_TO_ONE as ONE_TO_ONE over the same columns is a modification of one
relationship rather than a drop and an add.

Each changed field is classified:

- STRUCTURAL: the physical foreign key has to be dropped and recreated
  (table, columns, referenced table/columns, constraint name, ON DELETE,
  ON UPDATE, NO_CONSTRAINT, @MapsId settings).
- BEHAVIORAL: ORM runtime semantics only (kind, cascade set, orphan removal,
  fetch strategy, source attribute).
"""

import logging
from dataclasses import dataclass

from schemadiff.diff_result import DiffType, ModifiedEntity, RelationshipDiff, sort_diffs
from schemadiff.models import EntityModel, RelationshipModel
from schemadiff.naming import CaseNormalizer

from .base import EntityComponentDiffer, changed, render
from .keys import NormalizedRelationship, NormalizedRelationshipCache, RelationshipKey

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _FieldChanges:
    structural: list[str]
    behavioral: list[str]

    @property
    def requires_drop_add(self) -> bool:
        return bool(self.structural)

    def is_empty(self) -> bool:
        return not self.structural and not self.behavioral

    def detail(self) -> str:
        sections = []
        if self.structural:
            sections.append("[STRUCTURAL] " + ", ".join(self.structural))
        if self.behavioral:
            sections.append("[BEHAVIORAL] " + ", ".join(self.behavioral))
        return " | ".join(sections)


def _columns(columns: list[str]) -> str:
    return "[" + ",".join(columns) + "]"


class RelationshipDiffer(EntityComponentDiffer):
    """Key-matched relationship comparison with structural/behavioral split"""

    def __init__(self, normalizer: CaseNormalizer | None = None) -> None:
        self.normalizer = normalizer or CaseNormalizer.lower()

    def diff(
        self, old_entity: EntityModel, new_entity: EntityModel, result: ModifiedEntity
    ) -> None:
        cache = NormalizedRelationshipCache(self.normalizer)
        old_by_key = self._collapse_by_key(old_entity, "old", result.warnings)
        new_by_key = self._collapse_by_key(new_entity, "new", result.warnings)
        diffs: list[RelationshipDiff] = []

        for key in sorted(new_by_key):
            new_rel = new_by_key[key]
            old_rel = old_by_key.get(key)
            if old_rel is None:
                diffs.append(RelationshipDiff(type=DiffType.ADDED, relationship=new_rel))
                continue

            changes = self._compare(cache.get(old_rel), cache.get(new_rel))
            if changes.is_empty():
                continue
            diffs.append(
                RelationshipDiff(
                    type=DiffType.MODIFIED,
                    relationship=new_rel,
                    old_relationship=old_rel,
                    change_detail=changes.detail(),
                    requires_drop_add=changes.requires_drop_add,
                )
            )
            result.warnings.extend(
                relationship_change_warnings(old_rel, new_rel, self.normalizer)
            )

        for key in sorted(old_by_key.keys() - new_by_key.keys()):
            old_rel = old_by_key[key]
            # Relationships without a kind are placeholders and never dropped.
            if old_rel.type is not None:
                diffs.append(RelationshipDiff(type=DiffType.DROPPED, relationship=old_rel))

        sort_diffs(diffs)
        result.relationship_diffs.extend(diffs)

    def _collapse_by_key(
        self, entity: EntityModel, side: str, warnings: list[str]
    ) -> dict[RelationshipKey, RelationshipModel]:
        """Index one side's relationships by key; the last one inserted wins"""
        by_key: dict[RelationshipKey, RelationshipModel] = {}
        for relationship in entity.relationships.values():
            key = RelationshipKey.of(relationship, self.normalizer)
            existing = by_key.get(key)
            if existing is not None:
                message = (
                    f"Duplicate relationships collapsed by key in {side} entity "
                    f"'{entity.entity_name}': Key={key}, "
                    f"First=[attr={existing.source_attribute_name or 'unknown'}, "
                    f"columns={_columns(existing.columns)}], "
                    f"Second=[attr={relationship.source_attribute_name or 'unknown'}, "
                    f"columns={_columns(relationship.columns)}]. "
                    "Second relationship will overwrite the first. "
                    "Review relationship definitions to avoid conflicts."
                )
                logger.warning(message)
                warnings.append(message)
            by_key[key] = relationship
        return by_key

    def _compare(
        self, old: NormalizedRelationship, new: NormalizedRelationship
    ) -> _FieldChanges:
        o = old.original
        n = new.original
        fold = self.normalizer.fold
        structural: list[str] = []
        behavioral: list[str] = []

        if old.fk_table != new.fk_table:
            structural.append(changed("tableName", o.table_name, n.table_name))
        if old.columns != new.columns:
            structural.append(
                f"columns changed from {_columns(o.columns)} to {_columns(n.columns)}"
            )
        if old.ref_table != new.ref_table:
            structural.append(changed("referencedTable", o.referenced_table, n.referenced_table))
        if old.referenced_columns != new.referenced_columns:
            structural.append(
                f"referencedColumns changed from {_columns(o.referenced_columns)} "
                f"to {_columns(n.referenced_columns)}"
            )
        if old.constraint_name != new.constraint_name:
            structural.append(changed("constraintName", o.constraint_name, n.constraint_name))
        if o.on_delete != n.on_delete:
            structural.append(changed("onDelete", o.on_delete, n.on_delete))
        if o.on_update != n.on_update:
            structural.append(changed("onUpdate", o.on_update, n.on_update))
        if o.no_constraint != n.no_constraint:
            structural.append(changed("noConstraint", o.no_constraint, n.no_constraint))
        if o.maps_id != n.maps_id:
            structural.append(changed("mapsId", o.maps_id, n.maps_id))
        if o.maps_id_bindings != n.maps_id_bindings:
            structural.append(changed("mapsIdBindings", o.maps_id_bindings, n.maps_id_bindings))
        if fold(o.maps_id_key_path) != fold(n.maps_id_key_path):
            structural.append(changed("mapsIdKeyPath", o.maps_id_key_path, n.maps_id_key_path))

        if o.type != n.type:
            behavioral.append(changed("type", o.type, n.type))
        if set(o.cascade_types) != set(n.cascade_types):
            behavioral.append(
                changed("cascadeTypes", sorted(o.cascade_types), sorted(n.cascade_types))
            )
        if o.orphan_removal != n.orphan_removal:
            behavioral.append(changed("orphanRemoval", o.orphan_removal, n.orphan_removal))
        if o.fetch_type != n.fetch_type:
            behavioral.append(changed("fetchType", o.fetch_type, n.fetch_type))
        if fold(o.source_attribute_name) != fold(n.source_attribute_name):
            behavioral.append(
                changed("sourceAttributeName", o.source_attribute_name, n.source_attribute_name)
            )

        return _FieldChanges(structural=structural, behavioral=behavioral)


def relationship_change_warnings(
    old: RelationshipModel, new: RelationshipModel, normalizer: CaseNormalizer
) -> list[str]:
    """Fixed-phrasing risk warnings for a modified relationship"""
    info = _columns(new.columns)
    warnings: list[str] = []

    if old.on_delete != new.on_delete:
        warnings.append(
            f"Foreign key ON DELETE action changed for relationship on columns {info} "
            f"from {render(old.on_delete)} to {render(new.on_delete)}; this affects "
            "referential integrity behavior and may impact existing data. "
            "Review dependent data before applying changes."
        )
    if old.on_update != new.on_update:
        warnings.append(
            f"Foreign key ON UPDATE action changed for relationship on columns {info} "
            f"from {render(old.on_update)} to {render(new.on_update)}; this affects "
            "referential integrity behavior and may impact data modification patterns."
        )
    if old.no_constraint != new.no_constraint:
        if new.no_constraint:
            warnings.append(
                f"Foreign key constraint disabled (NO_CONSTRAINT) for relationship on columns "
                f"{info}; referential integrity will no longer be enforced at database level. "
                "Ensure application-level validation is properly implemented."
            )
        else:
            warnings.append(
                f"Foreign key constraint enabled for relationship on columns {info}; "
                "database will now enforce referential integrity. "
                "Validate existing data consistency before applying this change."
            )
    if old.maps_id != new.maps_id:
        if new.maps_id:
            warnings.append(
                f"@MapsId enabled for relationship on columns {info}; foreign key columns "
                "will now be part of the primary key. This is a significant structural "
                "change that affects entity identity and may require data migration."
            )
        else:
            warnings.append(
                f"@MapsId disabled for relationship on columns {info}; foreign key columns "
                "are no longer part of the primary key. This changes entity identity "
                "semantics and may require application logic updates."
            )
    if old.maps_id_bindings != new.maps_id_bindings:
        warnings.append(
            f"@MapsId column bindings changed for relationship on columns {info} "
            f"from {render(old.maps_id_bindings)} to {render(new.maps_id_bindings)}; "
            "this affects primary key composition and entity identity mapping."
        )
    if normalizer.fold(old.maps_id_key_path) != normalizer.fold(new.maps_id_key_path):
        warnings.append(
            f"@MapsId key path changed for relationship on columns {info} "
            f"from '{render(old.maps_id_key_path)}' to '{render(new.maps_id_key_path)}'; "
            "this changes how the foreign key maps to the primary key structure."
        )

    old_cascades = set(old.cascade_types)
    new_cascades = set(new.cascade_types)
    if old_cascades != new_cascades:
        message = f"Persistence cascade options changed for relationship on columns {info}"
        added = sorted(new_cascades - old_cascades)
        removed = sorted(old_cascades - new_cascades)
        if added:
            message += f"; added: {render(added)}"
        if removed:
            message += f"; removed: {render(removed)}"
        message += "; may affect automatic persistence operations and data consistency."
        warnings.append(message)

    if old.orphan_removal != new.orphan_removal:
        if new.orphan_removal:
            warnings.append(
                f"Orphan removal enabled for relationship on columns {info}; entities will "
                "be automatically deleted when removed from the relationship collection. "
                "Ensure this behavior aligns with business logic."
            )
        else:
            warnings.append(
                f"Orphan removal disabled for relationship on columns {info}; entities will "
                "no longer be automatically deleted when removed from collections. "
                "Manual cleanup may be required to prevent orphaned records."
            )
    if old.fetch_type != new.fetch_type:
        warnings.append(
            f"Fetch strategy changed for relationship on columns {info} "
            f"from {old.fetch_type} to {new.fetch_type}; this may impact query performance "
            "and N+1 query patterns. Review and test performance implications."
        )
    return warnings
