"""
Table Differ

Classifies whole entities as ADDED, DROPPED or RENAMED. Entities whose name
exists in both snapshots are left to ``EntityModificationDiffer``.

An old-only and a new-only entity are the same table under a new name when
their column fingerprints are identical. Candidates are resolved in lexical
entity-name order: old entities are visited alphabetically and each takes the
alphabetically first unused new entity with the same fingerprint.
"""

import logging
from collections import defaultdict

from schemadiff.diff_result import DiffResult, RenamedTable
from schemadiff.models import SchemaModel
from schemadiff.naming import CaseNormalizer

from .base import Differ
from .keys import TableFingerprint, table_fingerprint

logger = logging.getLogger(__name__)


class TableDiffer(Differ):
    """Entity add/drop/rename detection"""

    def __init__(self, normalizer: CaseNormalizer | None = None) -> None:
        self.normalizer = normalizer or CaseNormalizer.lower()

    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel, result: DiffResult) -> None:
        old_entities = old_schema.entities
        new_entities = new_schema.entities

        old_only = sorted(old_entities.keys() - new_entities.keys())
        new_only = sorted(new_entities.keys() - old_entities.keys())

        candidates_by_fingerprint: dict[TableFingerprint, list[str]] = defaultdict(list)
        for name in new_only:
            fingerprint = table_fingerprint(new_entities[name], self.normalizer)
            if fingerprint:
                candidates_by_fingerprint[fingerprint].append(name)

        renamed: set[str] = set()
        claimed: set[str] = set()
        for old_name in old_only:
            fingerprint = table_fingerprint(old_entities[old_name], self.normalizer)
            if not fingerprint:
                continue
            candidates = [
                n for n in candidates_by_fingerprint.get(fingerprint, []) if n not in claimed
            ]
            if not candidates:
                continue

            new_name = candidates[0]
            if len(candidates) > 1:
                message = (
                    f"[AMBIGUOUS-RENAME] old='{old_name}' candidates=[{', '.join(candidates)}]; "
                    f"paired with '{new_name}'"
                )
                logger.warning(message)
                result.warnings.append(message)

            old_entity = old_entities[old_name]
            new_entity = new_entities[new_name]
            result.renamed_tables.append(
                RenamedTable(
                    old_entity=old_entity,
                    new_entity=new_entity,
                    change_detail=(
                        f"Table renamed from {old_entity.table_name} to {new_entity.table_name}"
                    ),
                )
            )
            logger.debug("Entity %s renamed to %s", old_name, new_name)
            renamed.add(old_name)
            claimed.add(new_name)

        result.added_tables.extend(
            new_entities[name] for name in new_only if name not in claimed
        )
        result.dropped_tables.extend(
            old_entities[name] for name in old_only if name not in renamed
        )
