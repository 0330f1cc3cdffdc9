"""Shared test fixtures."""

import io
import json

import pytest

from jsonvalidator.errors import ValidationError


class RecordingClient:
    """In-memory schema client that records every requested URL."""

    def __init__(self, documents: dict[str, object] | None = None):
        self.documents = dict(documents or {})
        self.requests: list[str] = []

    def get(self, url: str):
        self.requests.append(url)
        if url not in self.documents:
            raise AssertionError(f"unexpected fetch of {url}")
        payload = self.documents[url]
        if isinstance(payload, bytes):
            return io.BytesIO(payload)
        return io.BytesIO(json.dumps(payload).encode("utf-8"))


@pytest.fixture
def recording_client():
    """Factory for in-memory clients serving the given URL -> document mapping."""
    return RecordingClient


@pytest.fixture
def expect_failure():
    """Assert that a schema rejects a subject and return the raised error.

    Optionally checks the pointer of the top-level failure and the type of
    the schema that raised it.
    """

    def _expect(schema, subject, pointer: str | None = "#", violated_schema_type=None):
        with pytest.raises(ValidationError) as exc_info:
            schema.validate(subject)
        error = exc_info.value
        if pointer is not None:
            assert error.pointer_to_violation == pointer
        if violated_schema_type is not None:
            assert isinstance(error.violated_schema, violated_schema_type)
        return error

    return _expect
