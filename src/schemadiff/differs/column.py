"""
Column Differ

Compares the column maps of an entity present in both snapshots. Two
strategies share every comparison and warning rule and differ only in how
they treat a column key that exists on one side only:

- ``ColumnDiffer`` (rename-aware) pairs an old-only and a new-only column as
  RENAMED when everything except the name is identical.
- ``SimpleColumnDiffer`` never infers renames; the pair is reported as
  DROPPED + ADDED.
"""

import logging
from enum import StrEnum

from schemadiff.diff_result import ColumnDiff, DiffType, ModifiedEntity, sort_diffs
from schemadiff.models import ColumnModel, EntityModel

from .base import EntityComponentDiffer, changed, render
from .type_lattice import Conversion, classify, describe_conversion

logger = logging.getLogger(__name__)


class ColumnStrategy(StrEnum):
    """Rename policy of the column comparison"""

    RENAME_AWARE = "rename-aware"
    SIMPLE = "simple"


# (label used in change text, model attribute), in change-text order
COMPARED_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("tableName", "table_name"),
    ("javaType", "java_type"),
    ("isPrimaryKey", "primary_key"),
    ("isNullable", "nullable"),
    ("length", "length"),
    ("precision", "precision"),
    ("scale", "scale"),
    ("defaultValue", "default_value"),
    ("generationStrategy", "generation_strategy"),
    ("sequenceName", "sequence_name"),
    ("tableGeneratorName", "table_generator_name"),
    ("isLob", "lob"),
    ("fetchType", "fetch_type"),
    ("isVersion", "version"),
    ("conversionClass", "conversion_class"),
    ("temporalType", "temporal_type"),
    ("enumValues", "enum_values"),
    ("enumStringMapping", "enum_string_mapping"),
    ("comment", "comment"),
    ("sqlTypeOverride", "sql_type_override"),
    ("isMapKey", "map_key"),
    ("mapKeyType", "map_key_type"),
)


def _mapping_label(column: ColumnModel) -> str:
    return "STRING" if column.enum_string_mapping else "ORDINAL"


def attributes_except_name(column: ColumnModel) -> tuple[object, ...]:
    """Every compared attribute of a column, without its name"""
    return tuple(
        tuple(value) if isinstance(value, list) else value
        for value in (getattr(column, attr) for _, attr in COMPARED_ATTRIBUTES)
    )


def is_enum_mapping_changed(old: ColumnModel, new: ColumnModel) -> bool:
    return old.is_enum and new.is_enum and old.enum_string_mapping != new.enum_string_mapping


def column_change_detail(old: ColumnModel, new: ColumnModel) -> str:
    """Semicolon-joined ``<attr> changed from <old> to <new>`` entries"""
    changes: list[str] = []
    mapping_changed = is_enum_mapping_changed(old, new)
    if mapping_changed:
        changes.append(f"Enum mapping changed {_mapping_label(old)} -> {_mapping_label(new)}")
    for label, attr in COMPARED_ATTRIBUTES:
        if mapping_changed and attr == "enum_string_mapping":
            continue
        old_value = getattr(old, attr)
        new_value = getattr(new, attr)
        if old_value != new_value:
            changes.append(changed(label, old_value, new_value))
    return "; ".join(changes)


class ColumnDiffer(EntityComponentDiffer):
    """Rename-aware column comparison"""

    strategy = ColumnStrategy.RENAME_AWARE

    def diff(
        self, old_entity: EntityModel, new_entity: EntityModel, result: ModifiedEntity
    ) -> None:
        old_columns = old_entity.columns
        new_columns = new_entity.columns
        diffs: list[ColumnDiff] = []

        for key in sorted(old_columns.keys() & new_columns.keys()):
            diff = compare_columns(old_columns[key], new_columns[key], result.warnings)
            if diff is not None:
                diffs.append(diff)

        old_only = sorted(old_columns.keys() - new_columns.keys())
        new_only = sorted(new_columns.keys() - old_columns.keys())

        for old_key, new_key in self.pair_renames(old_only, new_only, old_columns, new_columns):
            old_column = old_columns[old_key]
            new_column = new_columns[new_key]
            logger.debug(
                "Column %s.%s renamed to %s",
                new_entity.entity_name,
                old_column.column_name,
                new_column.column_name,
            )
            diffs.append(
                ColumnDiff(
                    type=DiffType.RENAMED,
                    column=new_column,
                    old_column=old_column,
                    change_detail=(
                        f"Column renamed from {old_column.column_name} to {new_column.column_name}"
                    ),
                )
            )
            old_only.remove(old_key)
            new_only.remove(new_key)

        diffs.extend(ColumnDiff(type=DiffType.ADDED, column=new_columns[k]) for k in new_only)
        diffs.extend(ColumnDiff(type=DiffType.DROPPED, column=old_columns[k]) for k in old_only)

        sort_diffs(diffs)
        result.column_diffs.extend(diffs)

    def pair_renames(
        self,
        old_only: list[str],
        new_only: list[str],
        old_columns: dict[str, ColumnModel],
        new_columns: dict[str, ColumnModel],
    ) -> list[tuple[str, str]]:
        """Pair old-only and new-only keys whose columns match except for the name

        Old keys are visited in lexical order and each takes the lexically
        smallest unused new key with identical attributes.

        Returns:
            List of (old key, new key) pairs
        """
        pairs: list[tuple[str, str]] = []
        used: set[str] = set()
        new_signatures = {key: attributes_except_name(new_columns[key]) for key in new_only}
        for old_key in old_only:
            signature = attributes_except_name(old_columns[old_key])
            for new_key in new_only:
                if new_key not in used and new_signatures[new_key] == signature:
                    pairs.append((old_key, new_key))
                    used.add(new_key)
                    break
        return pairs


class SimpleColumnDiffer(ColumnDiffer):
    """Column comparison that never infers renames"""

    strategy = ColumnStrategy.SIMPLE

    def pair_renames(
        self,
        old_only: list[str],
        new_only: list[str],
        old_columns: dict[str, ColumnModel],
        new_columns: dict[str, ColumnModel],
    ) -> list[tuple[str, str]]:
        return []


def column_differ_for(strategy: ColumnStrategy | str) -> ColumnDiffer:
    """Build the column differ for a configured strategy"""
    if ColumnStrategy(strategy) is ColumnStrategy.SIMPLE:
        return SimpleColumnDiffer()
    return ColumnDiffer()


def compare_columns(
    old: ColumnModel, new: ColumnModel, warnings: list[str]
) -> ColumnDiff | None:
    """Compare one column present on both sides

    Appends risk warnings to ``warnings`` and returns a MODIFIED diff, or
    ``None`` when nothing changed.
    """
    if attributes_except_name(old) == attributes_except_name(new) and (
        old.column_name == new.column_name
    ):
        return None

    detail = column_change_detail(old, new)
    if not detail:
        # Only the declared name differs under an unchanged key.
        detail = changed("columnName", old.column_name, new.column_name)

    if is_enum_mapping_changed(old, new):
        warnings.append(
            f"Enum mapping changed on column {new.column_name} from {_mapping_label(old)} "
            f"to {_mapping_label(new)}; verify data compatibility."
        )
    warnings.extend(column_change_warnings(old, new))
    if old.is_enum and new.is_enum:
        warnings.extend(enum_change_warnings(old, new))

    return ColumnDiff(type=DiffType.MODIFIED, column=new, old_column=old, change_detail=detail)


def column_change_warnings(old: ColumnModel, new: ColumnModel) -> list[str]:
    """Risk warnings for a modified column"""
    name = new.column_name
    warnings: list[str] = []

    if old.nullable and not new.nullable:
        warnings.append(
            f"Nullable column {name} is now NOT NULL; existing null data will violate constraint."
        )
    if old.java_type != new.java_type:
        summary = describe_conversion(old.java_type, new.java_type)
        conversion = classify(old.java_type, new.java_type)
        if conversion is Conversion.NARROWING:
            warnings.append(f"Dangerous type conversion in column {name}: {summary}")
        elif conversion is Conversion.WIDENING:
            warnings.append(f"Safe type conversion in column {name}: {summary}")
        else:
            warnings.append(f"Type conversion in column {name}: {summary}")
    if old.length > new.length > 0:
        warnings.append(
            f"Dangerous length reduction in column {name} from {old.length} to {new.length}; "
            "may cause data truncation."
        )
    if old.precision > new.precision > 0:
        warnings.append(
            f"Dangerous precision reduction in column {name} from {old.precision} "
            f"to {new.precision}; may cause data truncation."
        )
    if old.scale > new.scale >= 0:
        warnings.append(
            f"Dangerous scale reduction in column {name} from {old.scale} to {new.scale}; "
            "may cause data truncation."
        )
    if old.fetch_type != new.fetch_type:
        warnings.append(
            f"Fetch strategy changed in column {name} from {old.fetch_type} to {new.fetch_type}; "
            "may impact data retrieval performance."
        )
    if old.conversion_class != new.conversion_class:
        warnings.append(
            f"Converter changed in column {name} from {render(old.conversion_class)} "
            f"to {render(new.conversion_class)}; verify data compatibility."
        )
    if old.primary_key != new.primary_key:
        warnings.append(
            f"Primary key flag changed in column {name} from {render(old.primary_key)} "
            f"to {render(new.primary_key)}; significant schema structure change."
        )
    if old.generation_strategy != new.generation_strategy:
        warnings.append(
            f"Generation strategy changed in column {name} from {old.generation_strategy} "
            f"to {new.generation_strategy}; may require data migration."
        )
    if old.sql_type_override != new.sql_type_override:
        warnings.append(
            f"SQL type override changed in column {name} from {render(old.sql_type_override)} "
            f"to {render(new.sql_type_override)}; actual column type may change."
        )
    if old.default_value != new.default_value:
        warnings.append(
            f"Default value changed in column {name} from {render(old.default_value)} "
            f"to {render(new.default_value)}; may affect existing data."
        )
    if old.lob != new.lob:
        warnings.append(
            f"LOB flag changed in column {name} from {render(old.lob)} to {render(new.lob)}; "
            "significant storage and performance impact."
        )
    if old.map_key != new.map_key or old.map_key_type != new.map_key_type:
        warnings.append(
            f"MapKey metadata changed in column {name}; collection mapping semantics may change."
        )
    if old.version != new.version:
        warnings.append(
            f"Version flag changed in column {name} from {render(old.version)} "
            f"to {render(new.version)}; optimistic locking strategy may change."
        )
    return warnings


def enum_change_warnings(old: ColumnModel, new: ColumnModel) -> list[str]:
    """Warnings for enum constant changes of an enum-typed column"""
    name = new.column_name
    old_values = list(old.enum_values)
    new_values = list(new.enum_values)
    old_set = set(old_values)
    new_set = set(new_values)
    warnings: list[str] = []

    if not old.enum_string_mapping and not new.enum_string_mapping:
        # A kept constant whose position moves is stored under a different ordinal.
        old_ordinals = {v: i for i, v in enumerate(old_values)}
        new_ordinals = {v: i for i, v in enumerate(new_values)}
        if any(old_ordinals[v] != new_ordinals[v] for v in old_ordinals.keys() & new_set):
            warnings.append(
                f"Dangerous enum order change in column {name}; "
                "ORDINAL mapping may cause incorrect data mapping!"
            )

    removed = [v for v in old_values if v not in new_set]
    added = [v for v in new_values if v not in old_set]
    if removed:
        warnings.append(
            f"Enum constants removed in column {name}: {render(removed)}; "
            "existing data may become invalid."
        )
    if added:
        warnings.append(
            f"Enum constants added in column {name}: {render(added)}; "
            "generally safe but verify application logic."
        )
    return warnings
