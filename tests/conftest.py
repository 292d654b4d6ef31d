from pathlib import Path

import pytest

from schemadiff.models import SchemaModel
from schemadiff.storage import write_snapshot
from tests.utils import schema, user_entity


@pytest.fixture(autouse=True)
def _no_profile_env(monkeypatch):
    """Keep a developer's SCHEMADIFF_PROFILE out of the tests"""
    monkeypatch.delenv("SCHEMADIFF_PROFILE", raising=False)


@pytest.fixture
def temp_workspace(tmp_path):
    """Create a temporary workspace directory"""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def base_schema() -> SchemaModel:
    """Snapshot with a single fully populated entity"""
    return schema(user_entity())


@pytest.fixture
def write_schema(temp_workspace):
    """Write a snapshot file into the workspace and return its path"""

    def _write(name: str, snapshot: SchemaModel) -> Path:
        path = temp_workspace / name
        write_snapshot(path, snapshot)
        return path

    return _write
