"""Draft 4 meta-schema: checks that a document is itself a valid JSON Schema."""

import json
from functools import lru_cache
from importlib import resources

from jsonvalidator.loader.client import DirectorySchemaClient
from jsonvalidator.loader.loader import load_schema
from jsonvalidator.schemas import Schema

_RESOURCE = "json-schema-draft-04.json"


def draft4_document() -> dict:
    """Return a fresh copy of the bundled Draft 4 meta-schema document."""
    text = resources.files("jsonvalidator").joinpath("resources", _RESOURCE).read_text(encoding="utf-8")
    return json.loads(text)


@lru_cache(maxsize=1)
def draft4_metaschema() -> Schema:
    """Load and cache the Draft 4 meta-schema tree.

    The meta-schema references itself through its own ``id``, which the loader
    resolves in memory, so no network access happens. Any other remote
    reference is refused.
    """
    offline = DirectorySchemaClient(
        "http://json-schema.org/draft-04/",
        resources.files("jsonvalidator").joinpath("resources"),
    )
    return load_schema(draft4_document(), client=offline)


def check_schema(document: dict) -> None:
    """Validate a raw schema document against the Draft 4 meta-schema.

    Raises:
        ValidationError: If the document is not a valid Draft 4 schema.
    """
    draft4_metaschema().validate(document)
