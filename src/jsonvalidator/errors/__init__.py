"""Error types for schema loading and validation."""

from jsonvalidator.errors.exceptions import (
    JsonValidatorError,
    SchemaError,
    SchemaFetchError,
    UnresolvedReferenceError,
)
from jsonvalidator.errors.validation import ValidationError

__all__ = [
    "JsonValidatorError",
    "SchemaError",
    "SchemaFetchError",
    "UnresolvedReferenceError",
    "ValidationError",
]
