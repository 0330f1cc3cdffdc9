"""Schemas for scalar JSON values: strings, numbers, booleans and null."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.loader.shape import ValueShape, is_integral, shape_of
from jsonvalidator.schemas.base import Schema


@dataclass(frozen=True, eq=False, kw_only=True)
class BooleanSchema(Schema):
    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if shape_of(subject) is not ValueShape.BOOLEAN:
            return [ValidationError.type_mismatch(self, "boolean", subject)]
        return []


@dataclass(frozen=True, eq=False, kw_only=True)
class NullSchema(Schema):
    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if subject is not None:
            return [ValidationError.type_mismatch(self, "null", subject)]
        return []


@dataclass(frozen=True, eq=False, kw_only=True)
class StringSchema(Schema):
    """String length and pattern constraints.

    With ``requires_string=False`` non-string subjects pass untouched. Checks
    stop at the first failure.
    """

    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    requires_string: bool = True
    _regex: re.Pattern | None = field(init=False, repr=False, default=None)

    def __post_init__(self):
        if self.pattern is not None:
            try:
                object.__setattr__(self, "_regex", re.compile(self.pattern))
            except re.error as exc:
                raise SchemaError(
                    f"pattern: invalid regular expression [{self.pattern}]: {exc}", keyword="pattern"
                ) from exc

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if not isinstance(subject, str):
            if self.requires_string:
                return [ValidationError.type_mismatch(self, "string", subject)]
            return []
        length = len(subject)
        if self.min_length is not None and length < self.min_length:
            return [ValidationError(self, f"expected minLength: {self.min_length}, actual: {length}")]
        if self.max_length is not None and length > self.max_length:
            return [ValidationError(self, f"expected maxLength: {self.max_length}, actual: {length}")]
        if self._regex is not None and self._regex.search(subject) is None:
            return [ValidationError(self, f"string [{subject}] does not match pattern {self.pattern}")]
        return []


_MULTIPLE_OF_PRECISION = 400


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True, eq=False, kw_only=True)
class NumberSchema(Schema):
    """Numeric range and divisibility constraints.

    ``exclusive_minimum`` and ``exclusive_maximum`` only change how the
    matching bound is compared. Checks stop at the first failure.
    """

    minimum: int | float | Decimal | None = None
    maximum: int | float | Decimal | None = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: int | float | Decimal | None = None
    requires_number: bool = True
    requires_integer: bool = False

    def __post_init__(self):
        if self.multiple_of is not None and not self.multiple_of > 0:
            raise SchemaError(
                f"multipleOf: expected a number greater than 0, found: {self.multiple_of}",
                keyword="multipleOf",
            )

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if shape_of(subject) is not ValueShape.NUMBER:
            if self.requires_number:
                return [ValidationError.type_mismatch(self, "number", subject)]
            return []
        if self.requires_integer and not is_integral(subject):
            return [ValidationError.type_mismatch(self, "integer", subject)]
        failure = self._check_minimum(subject) or self._check_maximum(subject)
        if failure is None:
            failure = self._check_multiple_of(subject)
        return [failure] if failure is not None else []

    def _check_minimum(self, subject) -> ValidationError | None:
        if self.minimum is None:
            return None
        if self.exclusive_minimum and subject <= self.minimum:
            return ValidationError(self, f"{subject} is not higher than {self.minimum}")
        if subject < self.minimum:
            return ValidationError(self, f"{subject} is not higher or equal to {self.minimum}")
        return None

    def _check_maximum(self, subject) -> ValidationError | None:
        if self.maximum is None:
            return None
        if self.exclusive_maximum and subject >= self.maximum:
            return ValidationError(self, f"{subject} is not lower than {self.maximum}")
        if subject > self.maximum:
            return ValidationError(self, f"{subject} is not lower or equal to {self.maximum}")
        return None

    def _check_multiple_of(self, subject) -> ValidationError | None:
        if self.multiple_of is None:
            return None
        with localcontext() as ctx:
            ctx.prec = _MULTIPLE_OF_PRECISION
            try:
                remainder = _as_decimal(subject) % _as_decimal(self.multiple_of)
            except InvalidOperation:
                # quotient does not fit the context precision
                return ValidationError(self, f"{subject} is not a multiple of {self.multiple_of}")
        if remainder != 0:
            return ValidationError(self, f"{subject} is not a multiple of {self.multiple_of}")
        return None
