from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest

from vault_import.models.config_models import ImportConfig
from vault_import.services.orchestrator import process_all
from vault_import.store.memory_backend import InMemoryCredentialStore

"""Error log line contract: one JSON object per line, fixed key set."""

ERROR_LOG_SCHEMA = {
    "type": "object",
    "additionalProperties": False,
    "required": ["timestamp", "file", "row", "error_type", "message"],
    "properties": {
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$"},
        "file": {"type": "string"},
        "row": {"type": "integer", "minimum": -1},
        "error_type": {
            "enum": [
                "INSUFFICIENT_DATA",
                "MAPPING_ERROR",
                "PERSISTENCE_FAILURE",
                "FILE_READ_ERROR",
                "ROW_SKIPPED_NO_PASSWORD",
                "UNBALANCED_QUOTE",
            ]
        },
        "message": {"type": "string"},
    },
}


def test_error_log_schema_valid_example():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "export.csv",
        "row": 7,
        "error_type": "ROW_SKIPPED_NO_PASSWORD",
        "message": "password field is empty",
    }
    jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_error_log_schema_rejects_extra_key():
    record = {
        "timestamp": "2025-09-26T10:12:33Z",
        "file": "export.csv",
        "row": -1,
        "error_type": "PERSISTENCE_FAILURE",
        "message": "store is locked",
        "password": "must never be logged",
    }
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_written_error_log_lines_match_schema(temp_workdir: Path, write_csv):
    files = [
        write_csv("skips.csv", 'Site,User,Pass,Notes\nBank,alice,,x\nMail,bob,pw,"open\n'),
        write_csv("empty.csv", "Site,User,Pass\n"),
        write_csv("locked.csv", "Site,User,Pass\nShop,dan,pw\n"),
    ]
    process_all(files[:2], InMemoryCredentialStore(), ImportConfig())
    process_all(files[2:], InMemoryCredentialStore(fail_with="store is locked"), ImportConfig())

    lines = []
    for log in sorted((temp_workdir / "logs").glob("errors-*.log")):
        lines.extend(log.read_text(encoding="utf-8").splitlines())
    records = [json.loads(line) for line in lines]
    for record in records:
        jsonschema.validate(record, ERROR_LOG_SCHEMA)
    assert {r["error_type"] for r in records} == {
        "ROW_SKIPPED_NO_PASSWORD",
        "UNBALANCED_QUOTE",
        "INSUFFICIENT_DATA",
        "PERSISTENCE_FAILURE",
    }
    # secrets never reach the error log
    assert all("pw" not in r["message"] for r in records)
