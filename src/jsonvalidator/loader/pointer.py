"""JSON Pointer queries against in-memory or remote documents."""

from __future__ import annotations

import json
from collections.abc import Callable, MutableMapping
from dataclasses import dataclass
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.loader.client import SchemaClient
from jsonvalidator.loader.resolution import split_reference
from jsonvalidator.loader.shape import ValueShape, shape_of


@dataclass(frozen=True)
class QueryResult:
    """The subtree a pointer resolved to, and the document that contains it."""

    containing_document: Any
    query_result: Any


def unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~").replace("%25", "%")


def fetch_document(client: SchemaClient, url: str) -> Any:
    """Retrieve ``url`` through ``client`` and parse it as JSON."""
    with client.get(url) as stream:
        raw = stream.read()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SchemaError(f"Failed to parse JSON text fetched from [{url}]: {exc}") from exc


class JSONPointer:
    """A fragment such as ``#/definitions/item`` bound to a document source.

    The document is obtained lazily, so a pointer into a remote document only
    triggers a fetch when it is queried.
    """

    def __init__(self, document_provider: Callable[[], Any], fragment: str):
        self._document_provider = document_provider
        self.fragment = fragment

    @classmethod
    def for_document(cls, document: Any, fragment: str) -> JSONPointer:
        return cls(lambda: document, fragment)

    @classmethod
    def for_url(
        cls,
        client: SchemaClient,
        url: str,
        documents: MutableMapping[str, Any] | None = None,
    ) -> JSONPointer:
        """Pointer into the document at ``url``; the fragment of ``url`` is the query.

        When ``documents`` is given it is used as a cache of fetched documents
        keyed by URL without fragment.
        """
        document_uri, fragment = split_reference(url)

        def provide():
            if documents is not None and document_uri in documents:
                return documents[document_uri]
            document = fetch_document(client, document_uri)
            if documents is not None:
                documents[document_uri] = document
            return document

        return cls(provide, fragment)

    def query(self) -> QueryResult:
        document = self._document_provider()
        if self.fragment in ("", "#"):
            return QueryResult(document, document)
        path = self.fragment.split("/")
        if not path[0].startswith("#"):
            raise SchemaError(f"JSON pointers must start with a '#', found [{self.fragment}]")
        current = document
        for raw_segment in path[1:]:
            segment = unescape(raw_segment)
            current = self._step(current, segment)
        return QueryResult(document, current)

    def _step(self, current: Any, segment: str) -> Any:
        shape = shape_of(current)
        if shape is ValueShape.OBJECT:
            if segment not in current:
                raise SchemaError(
                    f"failed to resolve JSON pointer [{self.fragment}]. Segment [{segment}] not found"
                )
            return current[segment]
        if shape is ValueShape.ARRAY:
            if not segment.isdigit() or int(segment) >= len(current):
                raise SchemaError(
                    f"failed to resolve JSON pointer [{self.fragment}]. "
                    f"Segment [{segment}] is not a valid index into an array of {len(current)} items"
                )
            return current[int(segment)]
        raise SchemaError(
            f"failed to resolve JSON pointer [{self.fragment}]. "
            f"Segment [{segment}] cannot be applied to a {shape.value}"
        )
