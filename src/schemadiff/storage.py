"""
Snapshot storage

Reads and writes schema snapshot JSON files. A snapshot argument may name a
file or a directory of timestamped ``schema-*.json`` files, in which case the
latest one is used.
"""

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import SnapshotLoadError
from .models import SchemaModel

logger = logging.getLogger(__name__)

SNAPSHOT_GLOB = "schema-*.json"


def read_snapshot(path: Path) -> SchemaModel:
    """Read and validate one snapshot file"""
    if not path.exists():
        raise SnapshotLoadError(f"Snapshot file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"Malformed JSON in snapshot {path}: {e}") from e

    try:
        schema = SchemaModel.model_validate(data)
    except ValidationError as e:
        raise SnapshotLoadError(f"Invalid snapshot {path}: {e}") from e

    logger.debug("Loaded snapshot %s (%d entities)", path, len(schema.entities))
    return schema


def find_latest_snapshot(directory: Path) -> Path:
    """Latest snapshot in ``directory``; timestamped names sort chronologically"""
    candidates = sorted(p for p in directory.glob(SNAPSHOT_GLOB) if p.is_file())
    if not candidates:
        raise SnapshotLoadError(f"No {SNAPSHOT_GLOB} snapshot found in {directory}")
    return candidates[-1]


def resolve_snapshot(path: Path) -> SchemaModel:
    """Load a snapshot from a file, or the latest snapshot of a directory"""
    if path.is_dir():
        path = find_latest_snapshot(path)
        logger.debug("Resolved snapshot directory to %s", path)
    return read_snapshot(path)


def write_snapshot(path: Path, schema: SchemaModel) -> None:
    """Write snapshot file"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(_snapshot_payload(schema), f, indent=2)
        f.write("\n")


def schema_hash(schema: SchemaModel) -> str:
    """SHA-256 of the canonical JSON form of a snapshot"""
    canonical = json.dumps(_snapshot_payload(schema), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _snapshot_payload(schema: SchemaModel) -> dict[str, Any]:
    return schema.model_dump(mode="json", by_alias=True)
