"""Logical combinations of schemas: ``allOf``, ``anyOf``, ``oneOf`` and ``not``."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.schemas.base import Schema


class Criterion(StrEnum):
    """How many subschemas a value has to match."""

    ALL_OF = "allOf"
    ANY_OF = "anyOf"
    ONE_OF = "oneOf"

    def violation(self, total: int, matching: int) -> str | None:
        """Message describing why ``matching`` out of ``total`` is not enough, if it isn't."""
        if self is Criterion.ALL_OF and matching < total:
            return f"only {matching} subschema matches out of {total}"
        if self is Criterion.ANY_OF and matching == 0:
            return f"no subschema matched out of the total {total} subschemas"
        if self is Criterion.ONE_OF and matching != 1:
            if matching == 0:
                return f"no subschema matched out of the total {total} subschemas, expected exactly 1"
            return f"matched {matching} subschemas, expected exactly 1"
        return None


@dataclass(frozen=True, eq=False, kw_only=True)
class CombinedSchema(Schema):
    """Validates a value against several subschemas and counts the matches.

    Every subschema is always evaluated. When the criterion is not met, the
    failures of the subschemas that did not match become the causes of one
    failure at the current location.
    """

    criterion: Criterion
    subschemas: tuple[Schema, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "subschemas", tuple(self.subschemas))

    @classmethod
    def all_of(cls, subschemas, **common) -> CombinedSchema:
        return cls(criterion=Criterion.ALL_OF, subschemas=tuple(subschemas), **common)

    @classmethod
    def any_of(cls, subschemas, **common) -> CombinedSchema:
        return cls(criterion=Criterion.ANY_OF, subschemas=tuple(subschemas), **common)

    @classmethod
    def one_of(cls, subschemas, **common) -> CombinedSchema:
        return cls(criterion=Criterion.ONE_OF, subschemas=tuple(subschemas), **common)

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        failures = [
            failure
            for failure in (schema.failure_for(subject) for schema in self.subschemas)
            if failure is not None
        ]
        matching = len(self.subschemas) - len(failures)
        message = self.criterion.violation(len(self.subschemas), matching)
        if message is None:
            return []
        return [ValidationError(self, message, causing_exceptions=tuple(failures))]


@dataclass(frozen=True, eq=False, kw_only=True)
class NotSchema(Schema):
    """Accepts exactly the values ``must_not_match`` rejects."""

    must_not_match: Schema

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if self.must_not_match.is_valid(subject):
            return [ValidationError(self, "subject must not be valid against the negated schema")]
        return []
