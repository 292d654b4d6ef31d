"""
Table Generator Differ

Flat comparison of the table-based id generators of two snapshots.
"""

from schemadiff.diff_result import DiffResult, DiffType, TableGeneratorDiff, sort_diffs
from schemadiff.models import SchemaModel, TableGeneratorModel

from .base import Differ, changed

TABLE_GENERATOR_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("table", "table"),
    ("schema", "schema_name"),
    ("catalog", "catalog"),
    ("pkColumnName", "pk_column_name"),
    ("valueColumnName", "value_column_name"),
    ("pkColumnValue", "pk_column_value"),
    ("initialValue", "initial_value"),
    ("allocationSize", "allocation_size"),
)


def table_generator_change_detail(old: TableGeneratorModel, new: TableGeneratorModel) -> str:
    return "; ".join(
        changed(label, getattr(old, attr), getattr(new, attr))
        for label, attr in TABLE_GENERATOR_ATTRIBUTES
        if getattr(old, attr) != getattr(new, attr)
    )


class TableGeneratorDiffer(Differ):
    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel, result: DiffResult) -> None:
        old_generators = old_schema.table_generators
        new_generators = new_schema.table_generators
        diffs: list[TableGeneratorDiff] = []

        for name in sorted(new_generators):
            generator = new_generators[name]
            old_generator = old_generators.get(name)
            if old_generator is None:
                diffs.append(TableGeneratorDiff.added(generator))
                continue
            detail = table_generator_change_detail(old_generator, generator)
            if detail:
                diffs.append(
                    TableGeneratorDiff(
                        type=DiffType.MODIFIED,
                        table_generator=generator,
                        old_table_generator=old_generator,
                        change_detail=detail,
                    )
                )

        for name in sorted(old_generators.keys() - new_generators.keys()):
            diffs.append(TableGeneratorDiff.dropped(old_generators[name]))

        sort_diffs(diffs)
        result.table_generator_diffs.extend(diffs)
