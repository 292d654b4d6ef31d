"""
Unit tests for column comparison

Covers both rename strategies and the risk warnings raised for modified
columns.
"""

from schemadiff.diff_result import DiffType, ModifiedEntity
from schemadiff.differs.column import (
    ColumnDiffer,
    ColumnStrategy,
    SimpleColumnDiffer,
    column_differ_for,
)
from schemadiff.models import ColumnModel, FetchType, GenerationStrategy
from tests.utils import column, entity, id_column


def _diff(
    old_columns: list[ColumnModel] | dict[str, ColumnModel],
    new_columns: list[ColumnModel] | dict[str, ColumnModel],
    differ: ColumnDiffer | None = None,
) -> ModifiedEntity:
    old = entity("Order", "orders", columns=old_columns)
    new = entity("Order", "orders", columns=new_columns)
    result = ModifiedEntity(old_entity=old, new_entity=new)
    (differ or ColumnDiffer()).diff(old, new, result)
    return result


class TestRenameAwareColumnDiffer:
    def test_identical_columns_produce_nothing(self) -> None:
        columns = [id_column(), column("total", "java.math.BigDecimal", precision=10, scale=2)]
        result = _diff(columns, columns)

        assert result.column_diffs == []
        assert result.warnings == []

    def test_identical_attributes_under_new_key_are_renamed(self) -> None:
        """Should pair a dropped and an added column that differ only by name"""
        result = _diff(
            [id_column(), column("customer_name", length=100)],
            [id_column(), column("client_name", length=100)],
        )

        assert len(result.column_diffs) == 1
        diff = result.column_diffs[0]
        assert diff.type is DiffType.RENAMED
        assert diff.old_column.column_name == "customer_name"
        assert diff.column.column_name == "client_name"
        assert diff.change_detail == "Column renamed from customer_name to client_name"

    def test_any_attribute_difference_prevents_rename(self) -> None:
        """Should report DROPPED + ADDED when more than the name changed"""
        result = _diff(
            [column("customer_name", length=100)],
            [column("client_name", length=120)],
        )

        assert [(d.type, d.name) for d in result.column_diffs] == [
            (DiffType.ADDED, "client_name"),
            (DiffType.DROPPED, "customer_name"),
        ]

    def test_rename_pairing_is_lexical(self) -> None:
        """Should give each old column the lexically first unused match"""
        result = _diff(
            [column("b_old"), column("a_old")],
            [column("z_new"), column("y_new")],
        )

        renames = {d.old_column.column_name: d.column.column_name for d in result.column_diffs}
        assert renames == {"a_old": "y_new", "b_old": "z_new"}
        assert all(d.type is DiffType.RENAMED for d in result.column_diffs)

    def test_diff_order(self) -> None:
        """Should emit RENAMED, MODIFIED, ADDED, DROPPED, names ascending"""
        result = _diff(
            [column("a"), column("gone", "Long"), column("old_name", "UUID")],
            [column("a", length=10), column("fresh", "Integer"), column("new_name", "UUID")],
        )

        assert [d.type for d in result.column_diffs] == [
            DiffType.RENAMED,
            DiffType.MODIFIED,
            DiffType.ADDED,
            DiffType.DROPPED,
        ]

    def test_modified_change_detail(self) -> None:
        result = _diff(
            [column("email", length=255, nullable=True)],
            [column("email", length=320, nullable=False)],
        )

        diff = result.column_diffs[0]
        assert diff.type is DiffType.MODIFIED
        assert diff.change_detail == (
            "isNullable changed from true to false; length changed from 255 to 320"
        )

    def test_column_name_change_under_same_key(self) -> None:
        """Should report a declared name change even when the key is unchanged"""
        result = _diff({"email": column("email")}, {"email": column("EMAIL")})

        assert result.column_diffs[0].type is DiffType.MODIFIED
        assert result.column_diffs[0].change_detail == "columnName changed from email to EMAIL"


class TestSimpleColumnDiffer:
    def test_never_renames(self) -> None:
        """Should report DROPPED + ADDED for identical columns under new keys"""
        result = _diff(
            [column("customer_name")],
            [column("client_name")],
            SimpleColumnDiffer(),
        )

        assert [d.type for d in result.column_diffs] == [DiffType.ADDED, DiffType.DROPPED]

    def test_shares_modification_rules(self) -> None:
        result = _diff([column("qty", "long")], [column("qty", "int")], SimpleColumnDiffer())

        assert result.column_diffs[0].type is DiffType.MODIFIED
        assert any("Dangerous type conversion" in w for w in result.warnings)

    def test_factory(self) -> None:
        assert type(column_differ_for("simple")) is SimpleColumnDiffer
        assert type(column_differ_for(ColumnStrategy.RENAME_AWARE)) is ColumnDiffer
        assert column_differ_for("simple").strategy is ColumnStrategy.SIMPLE
        assert column_differ_for("rename-aware").strategy is ColumnStrategy.RENAME_AWARE


class TestColumnWarnings:
    def test_narrowing_type_change(self) -> None:
        result = _diff([column("qty", "long")], [column("qty", "int")])

        assert result.warnings == [
            "Dangerous type conversion in column qty: "
            "Narrowing conversion from long to int; may cause data loss."
        ]

    def test_widening_type_change(self) -> None:
        result = _diff([column("qty", "int")], [column("qty", "long")])

        assert result.warnings[0].startswith("Safe type conversion in column qty")

    def test_unrelated_type_change(self) -> None:
        result = _diff([column("ref", "String")], [column("ref", "java.util.UUID")])

        assert result.warnings[0].startswith("Type conversion in column ref")

    def test_not_null(self) -> None:
        result = _diff([column("email")], [column("email", nullable=False)])

        assert result.warnings == [
            "Nullable column email is now NOT NULL; existing null data will violate constraint."
        ]

    def test_length_precision_and_scale_reductions(self) -> None:
        result = _diff(
            [column("amount", length=100, precision=12, scale=4)],
            [column("amount", length=50, precision=10, scale=2)],
        )

        assert len(result.warnings) == 3
        assert result.warnings[0].startswith("Dangerous length reduction in column amount")
        assert result.warnings[1].startswith("Dangerous precision reduction in column amount")
        assert result.warnings[2].startswith("Dangerous scale reduction in column amount")

    def test_length_increase_is_silent(self) -> None:
        result = _diff([column("name", length=50)], [column("name", length=100)])

        assert result.column_diffs[0].type is DiffType.MODIFIED
        assert result.warnings == []

    def test_structural_flags(self) -> None:
        result = _diff(
            [column("id", "Long")],
            [
                column(
                    "id",
                    "Long",
                    primary_key=True,
                    generation_strategy=GenerationStrategy.SEQUENCE,
                    fetch_type=FetchType.LAZY,
                    lob=True,
                    version=True,
                )
            ],
        )

        messages = "\n".join(result.warnings)
        assert "Primary key flag changed in column id from false to true" in messages
        assert "Generation strategy changed in column id from NONE to SEQUENCE" in messages
        assert "Fetch strategy changed in column id from EAGER to LAZY" in messages
        assert "LOB flag changed in column id" in messages
        assert "Version flag changed in column id" in messages

    def test_converter_default_and_override(self) -> None:
        result = _diff(
            [column("flag")],
            [
                column(
                    "flag",
                    conversion_class="com.acme.YesNoConverter",
                    default_value="'N'",
                    sql_type_override="CHAR(1)",
                )
            ],
        )

        messages = "\n".join(result.warnings)
        assert "Converter changed in column flag from null to com.acme.YesNoConverter" in messages
        assert "Default value changed in column flag from null to 'N'" in messages
        assert "SQL type override changed in column flag from null to CHAR(1)" in messages

    def test_map_key(self) -> None:
        result = _diff([column("k")], [column("k", map_key=True, map_key_type="String")])

        assert result.warnings == [
            "MapKey metadata changed in column k; collection mapping semantics may change."
        ]


class TestEnumWarnings:
    def test_removed_constants(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["ACTIVE", "INACTIVE", "DELETED"])],
            [column("status", "Status", enum_values=["ACTIVE", "INACTIVE"])],
        )

        assert (
            "Enum constants removed in column status: [DELETED]; existing data may become invalid."
            in result.warnings
        )

    def test_added_constants(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["A"], enum_string_mapping=True)],
            [column("status", "Status", enum_values=["A", "B"], enum_string_mapping=True)],
        )

        assert result.warnings == [
            "Enum constants added in column status: [B]; "
            "generally safe but verify application logic."
        ]

    def test_ordinal_reorder_is_dangerous(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["A", "B"])],
            [column("status", "Status", enum_values=["B", "A"])],
        )

        assert result.warnings == [
            "Dangerous enum order change in column status; "
            "ORDINAL mapping may cause incorrect data mapping!"
        ]

    def test_ordinal_shift_after_removal_is_dangerous(self) -> None:
        """Should warn when removing a constant moves a later one to a new ordinal"""
        result = _diff(
            [column("status", "Status", enum_values=["A", "B", "C"])],
            [column("status", "Status", enum_values=["A", "C"])],
        )

        assert result.warnings == [
            "Dangerous enum order change in column status; "
            "ORDINAL mapping may cause incorrect data mapping!",
            "Enum constants removed in column status: [B]; existing data may become invalid.",
        ]

    def test_ordinal_append_is_not_an_order_change(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["A", "B"])],
            [column("status", "Status", enum_values=["A", "B", "C"])],
        )

        assert not any("enum order" in w for w in result.warnings)

    def test_string_reorder_is_safe(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["A", "B"], enum_string_mapping=True)],
            [column("status", "Status", enum_values=["B", "A"], enum_string_mapping=True)],
        )

        assert result.warnings == []

    def test_mapping_change(self) -> None:
        result = _diff(
            [column("status", "Status", enum_values=["A"], enum_string_mapping=True)],
            [column("status", "Status", enum_values=["A"])],
        )

        assert result.column_diffs[0].change_detail == "Enum mapping changed STRING -> ORDINAL"
        assert result.warnings == [
            "Enum mapping changed on column status from STRING to ORDINAL; "
            "verify data compatibility."
        ]
