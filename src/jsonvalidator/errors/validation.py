"""Validation failures reported by schema nodes.

A :class:`ValidationError` is an immutable tree: each node records the schema
that rejected the subject, the path from the validation root to the rejected
value, a message and the failures that caused it. Paths grow from the leaf
upwards: every array or object schema that validates a child value calls
:meth:`ValidationError.prepend` on the child's failure, which returns a new
error with the index or key in front.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jsonvalidator.errors.exceptions import JsonValidatorError

if TYPE_CHECKING:
    from jsonvalidator.models.report import ViolationReport
    from jsonvalidator.schemas.base import Schema


def escape_segment(segment: str) -> str:
    """Escape a JSON Pointer reference token."""
    return segment.replace("~", "~0").replace("/", "~1")


class ValidationError(JsonValidatorError):
    """One or more violations found while validating a subject."""

    def __init__(
        self,
        violated_schema: Schema | None,
        message: str,
        *,
        path: tuple[str, ...] = (),
        causing_exceptions: tuple[ValidationError, ...] = (),
    ):
        self._violated_schema = violated_schema
        self._path = tuple(path)
        self._causing_exceptions = tuple(causing_exceptions)
        super().__init__("VALIDATION_ERROR", message)

    @classmethod
    def type_mismatch(cls, violated_schema: Schema, expected: str, subject: Any) -> ValidationError:
        from jsonvalidator.loader.shape import describe

        return cls(violated_schema, f"expected type: {expected}, found: {describe(subject)}")

    @classmethod
    def aggregate(
        cls, violated_schema: Schema, failures: list[ValidationError]
    ) -> ValidationError | None:
        """Fold sibling failures into one error.

        Returns ``None`` for no failures and the failure itself when there is
        exactly one; otherwise a new error at ``#`` caused by all of them.
        """
        if not failures:
            return None
        if len(failures) == 1:
            return failures[0]
        return cls(
            violated_schema,
            f"{len(failures)} schema violations found",
            causing_exceptions=tuple(failures),
        )

    @property
    def violated_schema(self) -> Schema | None:
        return self._violated_schema

    @property
    def path(self) -> tuple[str, ...]:
        return self._path

    @property
    def causing_exceptions(self) -> tuple[ValidationError, ...]:
        return self._causing_exceptions

    @property
    def pointer_to_violation(self) -> str:
        return "#" + "".join("/" + escape_segment(segment) for segment in self._path)

    @property
    def error_message(self) -> str:
        """The message including the pointer, as rendered by ``str()``."""
        return f"{self.pointer_to_violation}: {self.message}"

    @property
    def violation_count(self) -> int:
        """Number of leaf violations in this tree."""
        if not self._causing_exceptions:
            return 1
        return sum(cause.violation_count for cause in self._causing_exceptions)

    def prepend(self, segment: str | int) -> ValidationError:
        """Return a copy of this tree located one level deeper, under ``segment``."""
        return ValidationError(
            self._violated_schema,
            self.message,
            path=(str(segment),) + self._path,
            causing_exceptions=tuple(cause.prepend(segment) for cause in self._causing_exceptions),
        )

    def all_messages(self) -> list[str]:
        """Messages of every leaf violation, depth first."""
        if not self._causing_exceptions:
            return [self.error_message]
        messages: list[str] = []
        for cause in self._causing_exceptions:
            messages.extend(cause.all_messages())
        return messages

    def to_report(self) -> ViolationReport:
        from jsonvalidator.models.report import ViolationReport

        return ViolationReport(
            pointer=self.pointer_to_violation,
            message=self.message,
            causing_exceptions=[cause.to_report() for cause in self._causing_exceptions],
        )

    def __str__(self) -> str:
        return self.error_message

    def __repr__(self) -> str:
        return f"ValidationError({self.pointer_to_violation!r}, {self.message!r})"
