"""Unit tests for sequence and table generator comparison"""

from schemadiff.diff_result import DiffResult, DiffType
from schemadiff.differs.sequence import SequenceDiffer
from schemadiff.differs.table_generator import TableGeneratorDiffer
from schemadiff.models import SequenceModel, TableGeneratorModel
from tests.utils import schema


class TestSequenceDiffer:
    def test_added_modified_dropped(self) -> None:
        old = schema(
            sequences=[
                SequenceModel(name="order_seq"),
                SequenceModel(name="legacy_seq"),
            ]
        )
        new = schema(
            sequences=[
                SequenceModel(name="order_seq", allocation_size=1, cache=20),
                SequenceModel(name="invoice_seq"),
            ]
        )
        result = DiffResult()

        SequenceDiffer().diff(old, new, result)

        assert [(d.type, d.name) for d in result.sequence_diffs] == [
            (DiffType.MODIFIED, "order_seq"),
            (DiffType.ADDED, "invoice_seq"),
            (DiffType.DROPPED, "legacy_seq"),
        ]
        assert result.sequence_diffs[0].change_detail == (
            "allocationSize changed from 50 to 1; cache changed from 0 to 20"
        )
        assert result.sequence_diffs[0].old_sequence.allocation_size == 50

    def test_unchanged(self) -> None:
        snapshot = schema(sequences=[SequenceModel(name="s", schema_name="app")])
        result = DiffResult()

        SequenceDiffer().diff(snapshot, snapshot, result)

        assert result.sequence_diffs == []


class TestTableGeneratorDiffer:
    def test_modified_columns(self) -> None:
        old = schema(
            table_generators=[
                TableGeneratorModel(name="ids", table="id_gen", pk_column_value="order")
            ]
        )
        new = schema(
            table_generators=[
                TableGeneratorModel(name="ids", table="id_gen", pk_column_value="orders")
            ]
        )
        result = DiffResult()

        TableGeneratorDiffer().diff(old, new, result)

        assert len(result.table_generator_diffs) == 1
        diff = result.table_generator_diffs[0]
        assert diff.type is DiffType.MODIFIED
        assert diff.change_detail == "pkColumnValue changed from order to orders"

    def test_added_and_dropped(self) -> None:
        old = schema(table_generators=[TableGeneratorModel(name="b")])
        new = schema(table_generators=[TableGeneratorModel(name="a")])
        result = DiffResult()

        TableGeneratorDiffer().diff(old, new, result)

        assert [(d.type, d.name) for d in result.table_generator_diffs] == [
            (DiffType.ADDED, "a"),
            (DiffType.DROPPED, "b"),
        ]
