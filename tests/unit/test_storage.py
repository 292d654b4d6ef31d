"""Unit tests for snapshot storage"""

import json

import pytest

from schemadiff.exceptions import SnapshotLoadError
from schemadiff.storage import (
    find_latest_snapshot,
    read_snapshot,
    resolve_snapshot,
    schema_hash,
    write_snapshot,
)
from tests.utils import schema, user_entity


class TestReadWriteSnapshot:
    def test_round_trip_uses_camel_case(self, temp_workspace, base_schema) -> None:
        path = temp_workspace / "schema.json"

        write_snapshot(path, base_schema)

        raw = json.loads(path.read_text())
        user = raw["entities"]["User"]
        assert user["tableName"] == "users"
        assert user["columns"]["id"]["primaryKey"] is True
        assert read_snapshot(path) == base_schema

    def test_reads_camel_case_document(self, temp_workspace) -> None:
        path = temp_workspace / "schema.json"
        path.write_text(
            json.dumps(
                {
                    "version": "2",
                    "entities": {
                        "Team": {
                            "entityName": "Team",
                            "tableName": "teams",
                            "schema": "app",
                            "columns": {
                                "id": {"columnName": "id", "javaType": "Long", "primaryKey": True}
                            },
                        }
                    },
                    "tableGenerators": {"ids": {"name": "ids", "pkColumnName": "gen_name"}},
                }
            )
        )

        snapshot = read_snapshot(path)

        assert snapshot.entities["Team"].schema_name == "app"
        assert snapshot.entities["Team"].columns["id"].primary_key is True
        assert snapshot.table_generators["ids"].pk_column_name == "gen_name"

    def test_missing_file(self, temp_workspace) -> None:
        with pytest.raises(SnapshotLoadError, match="Snapshot file not found") as exc_info:
            read_snapshot(temp_workspace / "missing.json")

        assert exc_info.value.code == "snapshot_load_failed"

    def test_malformed_json(self, temp_workspace) -> None:
        path = temp_workspace / "broken.json"
        path.write_text("{")

        with pytest.raises(SnapshotLoadError, match="Malformed JSON"):
            read_snapshot(path)

    def test_invalid_document(self, temp_workspace) -> None:
        path = temp_workspace / "invalid.json"
        path.write_text(json.dumps({"entities": {"User": {"entityName": "User"}}}))

        with pytest.raises(SnapshotLoadError, match="Invalid snapshot"):
            read_snapshot(path)


class TestResolveSnapshot:
    def test_latest_in_directory(self, temp_workspace) -> None:
        write_snapshot(temp_workspace / "schema-20240101T000000.json", schema())
        write_snapshot(temp_workspace / "schema-20250301T120000.json", schema(user_entity()))
        (temp_workspace / "notes.json").write_text("{}")

        assert find_latest_snapshot(temp_workspace).name == "schema-20250301T120000.json"
        assert "User" in resolve_snapshot(temp_workspace).entities

    def test_empty_directory(self, temp_workspace) -> None:
        with pytest.raises(SnapshotLoadError, match="No schema-\\*.json snapshot"):
            resolve_snapshot(temp_workspace)

    def test_file_path(self, write_schema, base_schema) -> None:
        path = write_schema("snapshot.json", base_schema)

        assert resolve_snapshot(path) == base_schema


class TestSchemaHash:
    def test_stable_and_content_sensitive(self, base_schema) -> None:
        digest = schema_hash(base_schema)

        assert len(digest) == 64
        assert schema_hash(base_schema.model_copy(deep=True)) == digest
        assert schema_hash(schema(user_entity(catalog="main"))) != digest

    def test_survives_round_trip(self, write_schema, base_schema) -> None:
        path = write_schema("snapshot.json", base_schema)

        assert schema_hash(read_snapshot(path)) == schema_hash(base_schema)
