"""
Diff result accumulators.

A ``DiffResult`` is created by ``SchemaDiffer.diff`` and filled in place by
each differ of the pipeline. Records reference the snapshot models they were
derived from; they never copy or modify them.
"""

from dataclasses import dataclass, field
from enum import StrEnum

from .models import (
    ColumnModel,
    ConstraintModel,
    EntityModel,
    IndexModel,
    RelationshipModel,
    SequenceModel,
    TableGeneratorModel,
)


class DiffType(StrEnum):
    """Kind of change recorded for one schema object"""

    ADDED = "ADDED"
    DROPPED = "DROPPED"
    MODIFIED = "MODIFIED"
    RENAMED = "RENAMED"  # columns only


# Emission order inside each diff list
DIFF_TYPE_ORDER: dict[DiffType, int] = {
    DiffType.RENAMED: 0,
    DiffType.MODIFIED: 1,
    DiffType.ADDED: 2,
    DiffType.DROPPED: 3,
}


@dataclass(slots=True)
class ColumnDiff:
    type: DiffType
    column: ColumnModel
    old_column: ColumnModel | None = None
    change_detail: str | None = None

    @property
    def name(self) -> str:
        return self.column.column_name


@dataclass(slots=True)
class IndexDiff:
    type: DiffType
    index: IndexModel
    old_index: IndexModel | None = None
    change_detail: str | None = None

    @property
    def name(self) -> str:
        return self.index.index_name


@dataclass(slots=True)
class ConstraintDiff:
    type: DiffType
    constraint: ConstraintModel
    old_constraint: ConstraintModel | None = None
    change_detail: str | None = None

    @property
    def name(self) -> str:
        return self.constraint.name or ""


@dataclass(slots=True)
class RelationshipDiff:
    """Relationship change; ``requires_drop_add`` marks FK-recreating changes"""

    type: DiffType
    relationship: RelationshipModel
    old_relationship: RelationshipModel | None = None
    change_detail: str | None = None
    requires_drop_add: bool = False

    @property
    def name(self) -> str:
        rel = self.relationship
        return f"{rel.table_name or ''}({','.join(rel.columns)})"


@dataclass(slots=True)
class SequenceDiff:
    type: DiffType
    sequence: SequenceModel
    old_sequence: SequenceModel | None = None
    change_detail: str | None = None

    @classmethod
    def added(cls, sequence: SequenceModel) -> "SequenceDiff":
        return cls(type=DiffType.ADDED, sequence=sequence)

    @classmethod
    def dropped(cls, sequence: SequenceModel) -> "SequenceDiff":
        return cls(type=DiffType.DROPPED, sequence=sequence)

    @property
    def name(self) -> str:
        return self.sequence.name


@dataclass(slots=True)
class TableGeneratorDiff:
    type: DiffType
    table_generator: TableGeneratorModel
    old_table_generator: TableGeneratorModel | None = None
    change_detail: str | None = None

    @classmethod
    def added(cls, table_generator: TableGeneratorModel) -> "TableGeneratorDiff":
        return cls(type=DiffType.ADDED, table_generator=table_generator)

    @classmethod
    def dropped(cls, table_generator: TableGeneratorModel) -> "TableGeneratorDiff":
        return cls(type=DiffType.DROPPED, table_generator=table_generator)

    @property
    def name(self) -> str:
        return self.table_generator.name


@dataclass(slots=True)
class RenamedTable:
    old_entity: EntityModel
    new_entity: EntityModel
    change_detail: str


@dataclass(slots=True)
class ModifiedEntity:
    """Changes found inside one entity present in both snapshots"""

    old_entity: EntityModel
    new_entity: EntityModel
    column_diffs: list[ColumnDiff] = field(default_factory=list)
    index_diffs: list[IndexDiff] = field(default_factory=list)
    constraint_diffs: list[ConstraintDiff] = field(default_factory=list)
    relationship_diffs: list[RelationshipDiff] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def entity_name(self) -> str:
        return self.new_entity.entity_name

    def is_empty(self) -> bool:
        return not (
            self.column_diffs
            or self.index_diffs
            or self.constraint_diffs
            or self.relationship_diffs
            or self.warnings
        )


@dataclass(slots=True)
class DiffResult:
    """Everything that changed between two schema snapshots"""

    added_tables: list[EntityModel] = field(default_factory=list)
    dropped_tables: list[EntityModel] = field(default_factory=list)
    renamed_tables: list[RenamedTable] = field(default_factory=list)
    modified_tables: list[ModifiedEntity] = field(default_factory=list)
    sequence_diffs: list[SequenceDiff] = field(default_factory=list)
    table_generator_diffs: list[TableGeneratorDiff] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def all_warnings(self) -> list[str]:
        """Top-level warnings, including those bubbled up from modified entities"""
        return list(self.warnings)

    def is_empty(self) -> bool:
        return not (
            self.added_tables
            or self.dropped_tables
            or self.renamed_tables
            or self.modified_tables
            or self.sequence_diffs
            or self.table_generator_diffs
            or self.warnings
        )


def sort_diffs(diffs: list) -> None:
    """Order a diff list in place by change kind, then object name"""
    diffs.sort(key=lambda d: (DIFF_TYPE_ORDER[d.type], d.name.lower(), d.name))
