"""Compile JSON Schema documents and validate JSON values against them."""

__version__ = "0.1.0"

from jsonvalidator.errors import (  # noqa: E402
    JsonValidatorError,
    SchemaError,
    SchemaFetchError,
    UnresolvedReferenceError,
    ValidationError,
)
from jsonvalidator.loader.client import DefaultSchemaClient, DirectorySchemaClient, SchemaClient  # noqa: E402
from jsonvalidator.loader.loader import load_schema  # noqa: E402
from jsonvalidator.metaschema import check_schema, draft4_metaschema  # noqa: E402
from jsonvalidator.schemas import Schema  # noqa: E402


def validate(schema: Schema, subject) -> None:
    """Validate ``subject`` against a loaded schema tree.

    Returns silently when the subject conforms.

    Raises:
        ValidationError: The top-level failure; its ``causing_exceptions``
            enumerate the independent violations.
    """
    schema.validate(subject)


__all__ = [
    "DefaultSchemaClient",
    "DirectorySchemaClient",
    "JsonValidatorError",
    "Schema",
    "SchemaClient",
    "SchemaError",
    "SchemaFetchError",
    "UnresolvedReferenceError",
    "ValidationError",
    "__version__",
    "check_schema",
    "draft4_metaschema",
    "load_schema",
    "validate",
]
