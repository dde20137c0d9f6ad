"""Pytest configuration and test helpers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest


PERSON_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
}


def write_file(directory: Path, name: str, content: str | bytes) -> Path:
    """Write content to directory/name and return the path.

    Parent directories are created as needed.
    """
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def person_schema() -> dict:
    return json.loads(json.dumps(PERSON_SCHEMA))


@pytest.fixture
def person_schema_bytes() -> bytes:
    return json.dumps(PERSON_SCHEMA).encode("utf-8")


@pytest.fixture
def restore_root_logging():
    """Undo handler changes made by the CLI's logging setup."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
