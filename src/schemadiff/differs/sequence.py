"""
Sequence Differ

Flat comparison of the sequence maps of two snapshots.
"""

from schemadiff.diff_result import DiffResult, DiffType, SequenceDiff, sort_diffs
from schemadiff.models import SchemaModel, SequenceModel

from .base import Differ, changed

SEQUENCE_ATTRIBUTES: tuple[tuple[str, str], ...] = (
    ("initialValue", "initial_value"),
    ("allocationSize", "allocation_size"),
    ("cache", "cache"),
    ("minValue", "min_value"),
    ("maxValue", "max_value"),
    ("schema", "schema_name"),
    ("catalog", "catalog"),
)


def sequence_change_detail(old: SequenceModel, new: SequenceModel) -> str:
    return "; ".join(
        changed(label, getattr(old, attr), getattr(new, attr))
        for label, attr in SEQUENCE_ATTRIBUTES
        if getattr(old, attr) != getattr(new, attr)
    )


class SequenceDiffer(Differ):
    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel, result: DiffResult) -> None:
        old_sequences = old_schema.sequences
        new_sequences = new_schema.sequences
        diffs: list[SequenceDiff] = []

        for name in sorted(new_sequences):
            sequence = new_sequences[name]
            old_sequence = old_sequences.get(name)
            if old_sequence is None:
                diffs.append(SequenceDiff.added(sequence))
                continue
            detail = sequence_change_detail(old_sequence, sequence)
            if detail:
                diffs.append(
                    SequenceDiff(
                        type=DiffType.MODIFIED,
                        sequence=sequence,
                        old_sequence=old_sequence,
                        change_detail=detail,
                    )
                )

        for name in sorted(old_sequences.keys() - new_sequences.keys()):
            diffs.append(SequenceDiff.dropped(old_sequences[name]))

        sort_diffs(diffs)
        result.sequence_diffs.extend(diffs)
