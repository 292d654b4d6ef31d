"""
Constraint Differ

Constraint names are often generated and change between builds, so
constraints are correlated by signature (kind plus case-insensitive column
set) rather than by name. Within one signature, old and new constraints are
paired 1:1: members whose folded names match on both sides pair first,
then the remainder pairs in a stable order of folded name and declaration
order.
"""

import logging
import re
from collections import defaultdict

from schemadiff.diff_result import ConstraintDiff, DiffType, ModifiedEntity, sort_diffs
from schemadiff.models import ConstraintModel, EntityModel
from schemadiff.naming import CaseNormalizer

from .base import EntityComponentDiffer, changed
from .keys import ConstraintSignature

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _normalize_clause(clause: str | None) -> str:
    if clause is None:
        return ""
    return _WHITESPACE.sub(" ", clause.strip())


_Member = tuple[str, ConstraintModel]
_Pair = tuple[ConstraintModel, ConstraintModel]


def _pair_members(
    old_members: list[_Member], new_members: list[_Member]
) -> tuple[list[_Pair], list[ConstraintModel], list[ConstraintModel]]:
    """Pair one signature's members; returns (pairs, added, dropped)"""
    pairs: list[_Pair] = []
    old_rest: list[ConstraintModel] = []
    new_rest = list(new_members)
    for name, old_constraint in old_members:
        match = next((i for i, (new_name, _) in enumerate(new_rest) if new_name == name), None)
        if match is None:
            old_rest.append(old_constraint)
        else:
            pairs.append((old_constraint, new_rest.pop(match)[1]))

    remaining = [constraint for _, constraint in new_rest]
    pairs.extend(zip(old_rest, remaining))
    paired = min(len(old_rest), len(remaining))
    return pairs, remaining[paired:], old_rest[paired:]


def constraint_change_detail(old: ConstraintModel, new: ConstraintModel) -> str:
    """Semicolon-joined description of what changed inside a matched pair"""
    changes: list[str] = []
    if old.name != new.name:
        changes.append(changed("name", old.name, new.name))
    if old.schema_name != new.schema_name:
        changes.append(changed("schema", old.schema_name, new.schema_name))
    if old.table_name != new.table_name:
        changes.append(changed("tableName", old.table_name, new.table_name))
    # Column sets are equal within a signature and column order is display-only.
    if _normalize_clause(old.check_clause) != _normalize_clause(new.check_clause):
        changes.append("checkClause changed")
    if _normalize_clause(old.where) != _normalize_clause(new.where):
        changes.append("where changed")
    if old.options != new.options:
        changes.append(changed("options", old.options, new.options))
    if old.on_delete != new.on_delete:
        changes.append(changed("onDelete", old.on_delete, new.on_delete))
    if old.on_update != new.on_update:
        changes.append(changed("onUpdate", old.on_update, new.on_update))
    return "; ".join(changes)


class ConstraintDiffer(EntityComponentDiffer):
    """Signature-based constraint comparison"""

    def __init__(self, normalizer: CaseNormalizer | None = None) -> None:
        self.normalizer = normalizer or CaseNormalizer.lower()

    def diff(
        self, old_entity: EntityModel, new_entity: EntityModel, result: ModifiedEntity
    ) -> None:
        old_groups = self._group(old_entity.constraints)
        new_groups = self._group(new_entity.constraints)
        diffs: list[ConstraintDiff] = []

        signatures = sorted(
            old_groups.keys() | new_groups.keys(),
            key=lambda s: (s.type.value, sorted(s.columns)),
        )
        for signature in signatures:
            old_members = old_groups.get(signature, [])
            new_members = new_groups.get(signature, [])

            pairs, added, dropped = _pair_members(old_members, new_members)
            for old_constraint, new_constraint in pairs:
                detail = constraint_change_detail(old_constraint, new_constraint)
                if detail:
                    logger.debug(
                        "Constraint %s paired with %s in %s",
                        old_constraint.name,
                        new_constraint.name,
                        new_entity.entity_name,
                    )
                    diffs.append(
                        ConstraintDiff(
                            type=DiffType.MODIFIED,
                            constraint=new_constraint,
                            old_constraint=old_constraint,
                            change_detail=detail,
                        )
                    )

            diffs.extend(ConstraintDiff(type=DiffType.ADDED, constraint=c) for c in added)
            diffs.extend(ConstraintDiff(type=DiffType.DROPPED, constraint=c) for c in dropped)

        sort_diffs(diffs)
        result.constraint_diffs.extend(diffs)

    def _group(
        self, constraints: dict[str, ConstraintModel]
    ) -> dict[ConstraintSignature, list[_Member]]:
        """Bucket constraints by signature, each bucket in pairing order"""
        buckets: dict[ConstraintSignature, list[tuple[str, int, ConstraintModel]]] = defaultdict(
            list
        )
        for position, (key, constraint) in enumerate(constraints.items()):
            signature = ConstraintSignature.of(constraint, self.normalizer)
            buckets[signature].append(
                (self.normalizer(constraint.name or key), position, constraint)
            )
        return {
            signature: [
                (name, constraint) for name, _, constraint in sorted(members, key=lambda m: m[:2])
            ]
            for signature, members in buckets.items()
        }
