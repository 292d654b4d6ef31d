"""Unit tests for index and constraint comparison"""

from schemadiff.diff_result import DiffType, ModifiedEntity
from schemadiff.differs.constraint import ConstraintDiffer
from schemadiff.differs.index import IndexDiffer
from schemadiff.models import ConstraintModel, ConstraintType, IndexModel, ReferentialAction
from schemadiff.naming import CaseNormalizer
from tests.utils import constraint, entity, index


def _diff_indexes(
    old: list[IndexModel], new: list[IndexModel], differ: IndexDiffer | None = None
) -> ModifiedEntity:
    old_entity = entity("Order", "orders", indexes=old)
    new_entity = entity("Order", "orders", indexes=new)
    result = ModifiedEntity(old_entity=old_entity, new_entity=new_entity)
    (differ or IndexDiffer()).diff(old_entity, new_entity, result)
    return result


def _diff_constraints(
    old: list[ConstraintModel], new: list[ConstraintModel]
) -> ModifiedEntity:
    old_entity = entity("Order", "orders", constraints=old)
    new_entity = entity("Order", "orders", constraints=new)
    result = ModifiedEntity(old_entity=old_entity, new_entity=new_entity)
    ConstraintDiffer().diff(old_entity, new_entity, result)
    return result


class TestIndexDiffer:
    def test_added_and_dropped_by_name(self) -> None:
        result = _diff_indexes([index("idx_old", "a")], [index("idx_new", "a")])

        assert [(d.type, d.name) for d in result.index_diffs] == [
            (DiffType.ADDED, "idx_new"),
            (DiffType.DROPPED, "idx_old"),
        ]

    def test_column_order_is_significant(self) -> None:
        result = _diff_indexes([index("idx", "a", "b")], [index("idx", "b", "a")])

        assert result.index_diffs[0].type is DiffType.MODIFIED
        assert result.index_diffs[0].change_detail == "columns changed from [a, b] to [b, a]"

    def test_column_case_is_folded(self) -> None:
        result = _diff_indexes([index("idx", "A", "b")], [index("idx", "a", "B")])

        assert result.index_diffs == []

    def test_preserve_strategy_reports_case_change(self) -> None:
        result = _diff_indexes(
            [index("idx", "A")], [index("idx", "a")], IndexDiffer(CaseNormalizer.preserve())
        )

        assert len(result.index_diffs) == 1

    def test_uniqueness_and_table(self) -> None:
        result = _diff_indexes(
            [index("idx", "a", table_name="orders")],
            [index("idx", "a", table_name="order_archive", unique=True)],
        )

        assert result.index_diffs[0].change_detail == (
            "tableName changed from orders to order_archive; isUnique changed from false to true"
        )


class TestConstraintDiffer:
    def test_generated_name_change_is_modification(self) -> None:
        """Should correlate by kind and column set, not by name"""
        result = _diff_constraints(
            [constraint("UK_1a2b", ConstraintType.UNIQUE, "email")],
            [constraint("UK_9z8y", ConstraintType.UNIQUE, "EMAIL")],
        )

        assert len(result.constraint_diffs) == 1
        diff = result.constraint_diffs[0]
        assert diff.type is DiffType.MODIFIED
        assert diff.change_detail == "name changed from UK_1a2b to UK_9z8y"

    def test_k_to_k_pairs_without_adds_or_drops(self) -> None:
        """Should pair K old and K new constraints of one signature one-to-one"""
        result = _diff_constraints(
            [
                constraint("ck_a", ConstraintType.CHECK, "qty", check_clause="qty > 0"),
                constraint("ck_b", ConstraintType.CHECK, "qty", check_clause="qty < 100"),
            ],
            [
                constraint("ck_c", ConstraintType.CHECK, "qty", check_clause="qty > 0"),
                constraint("ck_d", ConstraintType.CHECK, "qty", check_clause="qty < 100"),
            ],
        )

        assert [d.type for d in result.constraint_diffs] == [DiffType.MODIFIED] * 2
        pairs = {d.old_constraint.name: d.constraint.name for d in result.constraint_diffs}
        assert pairs == {"ck_a": "ck_c", "ck_b": "ck_d"}

    def test_unchanged_name_pairs_before_positional_pairing(self) -> None:
        """Should keep an untouched constraint paired with itself"""
        result = _diff_constraints(
            [
                constraint("uk_b", ConstraintType.UNIQUE, "email"),
                constraint("uk_a", ConstraintType.UNIQUE, "email"),
            ],
            [
                constraint("uk_b", ConstraintType.UNIQUE, "email"),
                constraint("uk_c", ConstraintType.UNIQUE, "email"),
            ],
        )

        assert len(result.constraint_diffs) == 1
        diff = result.constraint_diffs[0]
        assert diff.type is DiffType.MODIFIED
        assert diff.change_detail == "name changed from uk_a to uk_c"

    def test_surplus_members_are_added_or_dropped(self) -> None:
        result = _diff_constraints(
            [constraint("uk_a", ConstraintType.UNIQUE, "x")],
            [
                constraint("uk_a", ConstraintType.UNIQUE, "x"),
                constraint("uk_b", ConstraintType.UNIQUE, "x"),
            ],
        )

        assert [(d.type, d.name) for d in result.constraint_diffs] == [(DiffType.ADDED, "uk_b")]

    def test_column_set_change_is_drop_and_add(self) -> None:
        result = _diff_constraints(
            [constraint("uk", ConstraintType.UNIQUE, "a")],
            [constraint("uk", ConstraintType.UNIQUE, "a", "b")],
        )

        assert sorted(d.type for d in result.constraint_diffs) == [
            DiffType.ADDED,
            DiffType.DROPPED,
        ]

    def test_column_order_is_not_significant(self) -> None:
        result = _diff_constraints(
            [constraint("uk", ConstraintType.UNIQUE, "a", "b")],
            [constraint("uk", ConstraintType.UNIQUE, "b", "a")],
        )

        assert result.constraint_diffs == []

    def test_check_clause_whitespace_is_ignored(self) -> None:
        result = _diff_constraints(
            [constraint("ck", ConstraintType.CHECK, "qty", check_clause="qty  >\n0")],
            [constraint("ck", ConstraintType.CHECK, "qty", check_clause=" qty > 0 ")],
        )

        assert result.constraint_diffs == []

    def test_check_clause_and_referential_actions(self) -> None:
        result = _diff_constraints(
            [
                constraint("ck", ConstraintType.CHECK, "qty", check_clause="qty > 0"),
                constraint("fk", ConstraintType.FOREIGN_KEY, "team_id"),
            ],
            [
                constraint("ck", ConstraintType.CHECK, "qty", check_clause="qty >= 0"),
                constraint(
                    "fk",
                    ConstraintType.FOREIGN_KEY,
                    "team_id",
                    on_delete=ReferentialAction.CASCADE,
                ),
            ],
        )

        details = {d.name: d.change_detail for d in result.constraint_diffs}
        assert details == {
            "ck": "checkClause changed",
            "fk": "onDelete changed from null to CASCADE",
        }
