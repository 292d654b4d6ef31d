"""
Schema differs.

``SchemaDiffer`` is the entry point; the other differs are exposed for
callers that assemble their own pipeline.
"""

from .base import Differ, EntityComponentDiffer
from .column import ColumnDiffer, ColumnStrategy, SimpleColumnDiffer, column_differ_for
from .constraint import ConstraintDiffer
from .entity import EntityModificationDiffer
from .index import IndexDiffer
from .keys import ConstraintSignature, RelationshipKey
from .relationship import RelationshipDiffer
from .schema import SchemaDiffer
from .sequence import SequenceDiffer
from .table import TableDiffer
from .table_generator import TableGeneratorDiffer

__all__ = [
    "ColumnDiffer",
    "ColumnStrategy",
    "ConstraintDiffer",
    "ConstraintSignature",
    "Differ",
    "EntityComponentDiffer",
    "EntityModificationDiffer",
    "IndexDiffer",
    "RelationshipDiffer",
    "RelationshipKey",
    "SchemaDiffer",
    "SequenceDiffer",
    "SimpleColumnDiffer",
    "TableDiffer",
    "TableGeneratorDiffer",
    "column_differ_for",
]
