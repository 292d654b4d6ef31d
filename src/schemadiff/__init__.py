"""
schemadiff - Schema snapshot diff engine for ORM-mapped databases
"""

__version__ = "0.1.0"

from .config import DiffSettings, load_settings
from .diff_result import (
    ColumnDiff,
    ConstraintDiff,
    DiffResult,
    DiffType,
    IndexDiff,
    ModifiedEntity,
    RelationshipDiff,
    RenamedTable,
    SequenceDiff,
    TableGeneratorDiff,
)
from .differs import ColumnStrategy, SchemaDiffer
from .exceptions import ConfigurationError, SchemaDiffError, SnapshotLoadError
from .models import (
    ColumnModel,
    ConstraintModel,
    EntityModel,
    IndexModel,
    RelationshipModel,
    SchemaModel,
    SecondaryTableModel,
    SequenceModel,
    TableGeneratorModel,
)
from .naming import CaseNormalizer, CaseStrategy
from .storage import read_snapshot, resolve_snapshot, schema_hash, write_snapshot

__all__ = [
    "__version__",
    "CaseNormalizer",
    "CaseStrategy",
    "ColumnDiff",
    "ColumnModel",
    "ColumnStrategy",
    "ConfigurationError",
    "ConstraintDiff",
    "ConstraintModel",
    "DiffResult",
    "DiffSettings",
    "DiffType",
    "EntityModel",
    "IndexDiff",
    "IndexModel",
    "ModifiedEntity",
    "RelationshipDiff",
    "RelationshipModel",
    "RenamedTable",
    "SchemaDiffError",
    "SchemaDiffer",
    "SchemaModel",
    "SecondaryTableModel",
    "SequenceDiff",
    "SequenceModel",
    "SnapshotLoadError",
    "TableGeneratorDiff",
    "TableGeneratorModel",
    "load_settings",
    "read_snapshot",
    "resolve_snapshot",
    "schema_hash",
    "write_snapshot",
]
