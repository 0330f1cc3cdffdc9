"""Exception classes raised while loading JSON Schema documents."""

from typing import Any


class JsonValidatorError(Exception):
    """Base exception for jsonvalidator."""

    def __init__(self, code: str, message: str, details=None):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class SchemaError(JsonValidatorError):
    """The schema document is malformed and cannot be loaded."""

    def __init__(self, message: str, keyword: str | None = None, details=None):
        self.keyword = keyword
        super().__init__("SCHEMA_ERROR", message, details)

    @classmethod
    def wrong_type(cls, keyword: str | None, expected: list[str], actual: Any) -> "SchemaError":
        """Build the error for a keyword whose value has an unexpected JSON type."""
        from jsonvalidator.loader.shape import describe

        if len(expected) == 1:
            expectation = f"expected type: {expected[0]}"
        else:
            expectation = f"expected type is one of {', '.join(expected)}"
        found = describe(actual)
        if keyword is None:
            return cls(f"{expectation}, found: {found}", details={"expected": expected, "found": found})
        return cls(
            f"{keyword}: {expectation}, found: {found}",
            keyword=keyword,
            details={"expected": expected, "found": found},
        )


class SchemaFetchError(SchemaError):
    """A remote schema document could not be retrieved."""

    def __init__(self, url: str, message: str):
        super().__init__(f"failed to fetch [{url}]: {message}", details={"url": url})
        self.code = "SCHEMA_FETCH_ERROR"
        self.url = url


class UnresolvedReferenceError(JsonValidatorError):
    """A reference node was used before the loader assigned its target."""

    def __init__(self, slot: int):
        super().__init__(
            "UNRESOLVED_REFERENCE",
            f"reference slot {slot} has not been resolved",
            details={"slot": slot},
        )
        self.slot = slot
