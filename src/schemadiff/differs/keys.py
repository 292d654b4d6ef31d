"""
Canonical keys used to correlate objects across snapshots

All keys are plain tuples built from folded strings, so they hash and compare
by value and never depend on the identity or mutability of the models they
were derived from.
"""

from __future__ import annotations

from typing import NamedTuple

from schemadiff.models import ConstraintModel, ConstraintType, EntityModel, RelationshipModel
from schemadiff.naming import CaseNormalizer


def _column_keys(table: str, columns: list[str] | None, normalizer: CaseNormalizer) -> list[str]:
    """Canonical ``table::column`` keys, in the given column order"""
    return [f"{table}::{normalizer(column)}" for column in columns or [] if column is not None]


class RelationshipKey(NamedTuple):
    """Kind-agnostic identity of a relationship

    Column lists are sorted and de-duplicated, so two relationships over the
    same column sets produce the same key whatever order they list them in.
    """

    fk_table: str
    fk_columns: tuple[str, ...]
    ref_table: str
    ref_columns: tuple[str, ...]

    @classmethod
    def of(cls, relationship: RelationshipModel, normalizer: CaseNormalizer) -> RelationshipKey:
        fk_table = normalizer(relationship.table_name)
        ref_table = normalizer(relationship.referenced_table)
        fk_columns = _column_keys(fk_table, relationship.columns, normalizer)
        ref_columns = _column_keys(ref_table, relationship.referenced_columns, normalizer)
        return cls(
            fk_table=fk_table,
            fk_columns=tuple(sorted(set(fk_columns))),
            ref_table=ref_table,
            ref_columns=tuple(sorted(set(ref_columns))),
        )

    def __str__(self) -> str:
        return (
            f"{self.fk_table}[{','.join(self.fk_columns)}]"
            f"->{self.ref_table}[{','.join(self.ref_columns)}]"
        )


class NormalizedRelationship:
    """Normalized view of one relationship, computed once per instance

    Unlike ``RelationshipKey`` the column lists keep their declared order:
    reordering the columns of a composite foreign key changes the physical
    constraint.
    """

    __slots__ = (
        "original",
        "fk_table",
        "ref_table",
        "columns",
        "referenced_columns",
        "constraint_name",
    )

    def __init__(self, relationship: RelationshipModel, normalizer: CaseNormalizer) -> None:
        self.original = relationship
        self.fk_table = normalizer(relationship.table_name)
        self.ref_table = normalizer(relationship.referenced_table)
        self.columns = tuple(_column_keys(self.fk_table, relationship.columns, normalizer))
        self.referenced_columns = tuple(
            _column_keys(self.ref_table, relationship.referenced_columns, normalizer)
        )
        self.constraint_name = normalizer.fold(relationship.constraint_name)


class NormalizedRelationshipCache:
    """Per-comparison cache of ``NormalizedRelationship`` keyed by instance"""

    def __init__(self, normalizer: CaseNormalizer) -> None:
        self._normalizer = normalizer
        self._cache: dict[int, NormalizedRelationship] = {}

    def get(self, relationship: RelationshipModel) -> NormalizedRelationship:
        cached = self._cache.get(id(relationship))
        # id() values can be reused once an object dies; confirm identity.
        if cached is None or cached.original is not relationship:
            cached = NormalizedRelationship(relationship, self._normalizer)
            self._cache[id(relationship)] = cached
        return cached


class ConstraintSignature(NamedTuple):
    """Rename-tolerant identity of a constraint: kind plus column set"""

    type: ConstraintType
    columns: frozenset[str]

    @classmethod
    def of(cls, constraint: ConstraintModel, normalizer: CaseNormalizer) -> ConstraintSignature:
        return cls(
            type=constraint.type,
            columns=frozenset(normalizer(c) for c in constraint.columns if c is not None),
        )


TableFingerprint = tuple[tuple[str, str, bool, bool], ...]


def table_fingerprint(entity: EntityModel, normalizer: CaseNormalizer) -> TableFingerprint:
    """Structural fingerprint of an entity's columns

    Each column contributes (name, java type, nullable, primary key). Entity
    and table names are not part of it.
    """
    return tuple(
        sorted(
            (
                normalizer(column.column_name),
                (column.java_type or "").strip(),
                column.nullable,
                column.primary_key,
            )
            for column in entity.columns.values()
        )
    )
