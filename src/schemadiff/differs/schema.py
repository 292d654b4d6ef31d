"""
Schema Differ

Orchestrates the snapshot-level differs over one shared ``DiffResult``.

The pipeline order is fixed: tables first, then modifications of entities
present in both snapshots, then sequences and table generators. Every stage
reads only the two input snapshots, never another stage's output.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from schemadiff.diff_result import DiffResult
from schemadiff.models import SchemaModel
from schemadiff.naming import CaseNormalizer

from .base import Differ
from .column import column_differ_for
from .entity import EntityModificationDiffer, default_component_differs
from .sequence import SequenceDiffer
from .table import TableDiffer
from .table_generator import TableGeneratorDiffer

if TYPE_CHECKING:
    from schemadiff.config import DiffSettings

logger = logging.getLogger(__name__)


def default_pipeline(normalizer: CaseNormalizer | None = None) -> tuple[Differ, ...]:
    normalizer = normalizer or CaseNormalizer.lower()
    return (
        TableDiffer(normalizer),
        EntityModificationDiffer(default_component_differs(normalizer)),
        SequenceDiffer(),
        TableGeneratorDiffer(),
    )


class SchemaDiffer:
    """Compare two schema snapshots

    Example:
        >>> differ = SchemaDiffer()
        >>> result = differ.diff(old_schema, new_schema)
        >>> result.is_empty()
        True
    """

    def __init__(self, differs: Sequence[Differ] | None = None) -> None:
        self.differs = tuple(differs) if differs is not None else default_pipeline()

    @classmethod
    def from_settings(cls, settings: DiffSettings) -> SchemaDiffer:
        """Build the pipeline for the configured case and column strategies"""
        normalizer = CaseNormalizer(settings.case_strategy)
        column_differ = column_differ_for(settings.column_strategy)
        logger.debug(
            "Building pipeline: case=%s columns=%s",
            normalizer.strategy.value,
            column_differ.strategy.value,
        )
        components = default_component_differs(normalizer, column_differ)
        return cls(
            (
                TableDiffer(normalizer),
                EntityModificationDiffer(components),
                SequenceDiffer(),
                TableGeneratorDiffer(),
            )
        )

    def diff(self, old_schema: SchemaModel, new_schema: SchemaModel) -> DiffResult:
        result = DiffResult()
        for differ in self.differs:
            differ.diff(old_schema, new_schema, result)
            logger.debug(
                "%s: added=%d dropped=%d renamed=%d modified=%d sequences=%d "
                "generators=%d warnings=%d",
                type(differ).__name__,
                len(result.added_tables),
                len(result.dropped_tables),
                len(result.renamed_tables),
                len(result.modified_tables),
                len(result.sequence_diffs),
                len(result.table_generator_diffs),
                len(result.warnings),
            )
        return result
