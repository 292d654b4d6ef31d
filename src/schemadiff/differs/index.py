"""
Index Differ

Indexes are matched by name. Column order is significant because it is the
physical key order of the index.
"""

from schemadiff.diff_result import DiffType, IndexDiff, ModifiedEntity, sort_diffs
from schemadiff.models import EntityModel, IndexModel
from schemadiff.naming import CaseNormalizer

from .base import EntityComponentDiffer, changed


class IndexDiffer(EntityComponentDiffer):
    """Name-keyed index comparison"""

    def __init__(self, normalizer: CaseNormalizer | None = None) -> None:
        self.normalizer = normalizer or CaseNormalizer.lower()

    def diff(
        self, old_entity: EntityModel, new_entity: EntityModel, result: ModifiedEntity
    ) -> None:
        old_indexes = old_entity.indexes
        new_indexes = new_entity.indexes
        diffs: list[IndexDiff] = []

        for name in sorted(new_indexes):
            new_index = new_indexes[name]
            old_index = old_indexes.get(name)
            if old_index is None:
                diffs.append(IndexDiff(type=DiffType.ADDED, index=new_index))
                continue
            detail = self._change_detail(old_index, new_index)
            if detail:
                diffs.append(
                    IndexDiff(
                        type=DiffType.MODIFIED,
                        index=new_index,
                        old_index=old_index,
                        change_detail=detail,
                    )
                )

        for name in sorted(old_indexes.keys() - new_indexes.keys()):
            diffs.append(IndexDiff(type=DiffType.DROPPED, index=old_indexes[name]))

        sort_diffs(diffs)
        result.index_diffs.extend(diffs)

    def _change_detail(self, old: IndexModel, new: IndexModel) -> str:
        changes: list[str] = []
        if self.normalizer.fold(old.table_name) != self.normalizer.fold(new.table_name):
            changes.append(changed("tableName", old.table_name, new.table_name))
        old_columns = [self.normalizer(c) for c in old.column_names]
        new_columns = [self.normalizer(c) for c in new.column_names]
        if old_columns != new_columns:
            changes.append(changed("columns", old.column_names, new.column_names))
        if old.unique != new.unique:
            changes.append(changed("isUnique", old.unique, new.unique))
        return "; ".join(changes)
