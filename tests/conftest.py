"""Shared test fixtures and configuration."""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List

import pytest

from ldjson_stream import EventKind


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_data() -> List[Dict[str, Any]]:
    """Sample JSON documents for testing."""
    return [
        {"id": 1, "name": "Alice", "age": 30, "city": "New York"},
        {"id": 2, "name": "Bob", "age": 25, "city": "San Francisco"},
        {"id": 3, "name": "Charlie", "age": 35, "city": "Chicago"},
        {"id": 4, "name": "Diana", "age": 28, "city": "Boston"},
        {"id": 5, "name": "Eve", "age": 32, "city": "Seattle"},
    ]


@pytest.fixture
def sample_payload(sample_data) -> bytes:
    """Sample documents serialized as one LDJSON payload."""
    return "".join(json.dumps(record) + "\n" for record in sample_data).encode("utf-8")


@pytest.fixture
def create_ldjson_file(temp_dir, sample_data):
    """Create a test LDJSON file."""

    def _create_file(
        data: List[Dict[str, Any]] = None,
        filename: str = "test.ldjson",
        terminator: str = "\n",
        trailing_newline: bool = True,
    ) -> Path:
        if data is None:
            data = sample_data

        filepath = temp_dir / filename
        content = terminator.join(json.dumps(record) for record in data)
        if trailing_newline and data:
            content += terminator
        with open(filepath, "w", newline="") as f:
            f.write(content)
        return filepath

    return _create_file


@pytest.fixture
def create_noisy_ldjson_file(temp_dir):
    """Create an LDJSON file with noise lines between valid documents."""

    def _create_file(filename: str = "noisy.ldjson") -> Path:
        filepath = temp_dir / filename
        with open(filepath, "w") as f:
            f.write('{"valid": "json"}\n')
            f.write("289,df\n")
            f.write('{"another": "valid"}\n')
            f.write('{"incomplete": \n')
            f.write('{"final": "record"}\n')
        return filepath

    return _create_file


@pytest.fixture
def create_empty_file(temp_dir):
    """Create an empty file."""

    def _create_file(filename: str = "empty.ldjson") -> Path:
        filepath = temp_dir / filename
        filepath.touch()
        return filepath

    return _create_file


def event_kinds(events) -> List[EventKind]:
    """Kinds of a list of decoder events."""
    return [event.kind for event in events]


def documents(events) -> List[Any]:
    """Values of the DOCUMENT events in a list of decoder events."""
    return [event.value for event in events if event.kind is EventKind.DOCUMENT]


def errors(events) -> List[Exception]:
    """Errors of the ERROR events in a list of decoder events."""
    return [event.error for event in events if event.kind is EventKind.ERROR]


def feed(decoder, *chunks) -> list:
    """Feed chunks to a decoder, then finish it, collecting every event."""
    events = []
    for chunk in chunks:
        events.extend(decoder.accept(chunk))
        if decoder.terminated:
            return events
    events.extend(decoder.finish())
    return events
