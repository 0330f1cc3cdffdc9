"""Base class of all compiled schema nodes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonvalidator.errors.validation import ValidationError


@dataclass(frozen=True, eq=False, kw_only=True)
class Schema:
    """A compiled validation rule.

    Nodes are immutable after construction and validation has no side
    effects, so one tree can be shared between threads. ``id``, ``title``
    and ``description`` are informational only.
    """

    id: str | None = None
    title: str | None = None
    description: str | None = None

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        """Return every violation of this node's own rules, in check order."""
        raise NotImplementedError

    def failure_for(self, subject: Any) -> ValidationError | None:
        """The aggregated failure for ``subject``, or ``None`` if it is valid."""
        return ValidationError.aggregate(self, self.collect_failures(subject))

    def validate(self, subject: Any) -> None:
        """Raise :class:`ValidationError` if ``subject`` does not conform."""
        failure = self.failure_for(subject)
        if failure is not None:
            raise failure

    def is_valid(self, subject: Any) -> bool:
        return self.failure_for(subject) is None


@dataclass(frozen=True, eq=False, kw_only=True)
class EmptySchema(Schema):
    """Accepts every value."""

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        return []
