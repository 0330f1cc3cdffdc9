"""Array schema: item count, uniqueness and per-item validation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.loader.shape import ValueShape, shape_of
from jsonvalidator.schemas.base import Schema
from jsonvalidator.schemas.comparator import deep_equals


@dataclass(frozen=True, eq=False, kw_only=True)
class ArraySchema(Schema):
    """Constraints on JSON arrays.

    Items are validated in one of two modes:

    * list mode, ``all_item_schema``: one schema applied to every item;
    * tuple mode, ``item_schemas``: positional schemas for the first items.
      Items past the tuple are governed by ``additional_items``: ``True``
      permits them, ``False`` forbids them and a schema validates them.

    ``additional_items`` has no effect in list mode. All failures (count,
    uniqueness and every item) are collected; item failures are located
    under their index.
    """

    min_items: int | None = None
    max_items: int | None = None
    unique_items: bool = False
    all_item_schema: Schema | None = None
    item_schemas: tuple[Schema, ...] | None = None
    additional_items: bool | Schema = True
    requires_array: bool = True

    def __post_init__(self):
        if self.all_item_schema is not None and self.item_schemas is not None:
            raise SchemaError("cannot perform both tuple and list validation", keyword="items")
        if self.item_schemas is not None:
            object.__setattr__(self, "item_schemas", tuple(self.item_schemas))

    @property
    def permits_additional_items(self) -> bool:
        if self.all_item_schema is not None:
            return True
        return self.additional_items is not False

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if shape_of(subject) is not ValueShape.ARRAY:
            if self.requires_array:
                return [ValidationError.type_mismatch(self, "array", subject)]
            return []
        failures = []
        count_failure = self._check_item_count(subject)
        if count_failure is not None:
            failures.append(count_failure)
        if self.unique_items:
            uniqueness_failure = self._check_uniqueness(subject)
            if uniqueness_failure is not None:
                failures.append(uniqueness_failure)
        failures.extend(self._check_items(subject))
        return failures

    def _check_item_count(self, subject) -> ValidationError | None:
        count = len(subject)
        if self.min_items is not None and count < self.min_items:
            return ValidationError(self, f"expected minimum item count: {self.min_items}, found: {count}")
        if self.max_items is not None and count > self.max_items:
            return ValidationError(self, f"expected maximum item count: {self.max_items}, found: {count}")
        return None

    def _check_uniqueness(self, subject) -> ValidationError | None:
        seen = []
        for item in subject:
            if any(deep_equals(previous, item) for previous in seen):
                return ValidationError(self, "array items are not unique")
            seen.append(item)
        return None

    def _check_items(self, subject) -> list[ValidationError]:
        failures = []
        if self.all_item_schema is not None:
            for index, item in enumerate(subject):
                _append_at(failures, self.all_item_schema, item, index)
        elif self.item_schemas is not None:
            tuple_length = len(self.item_schemas)
            if self.additional_items is False and len(subject) > tuple_length:
                failures.append(
                    ValidationError(
                        self, f"expected: [{tuple_length}] array items, found: [{len(subject)}]"
                    )
                )
            for index, (schema, item) in enumerate(zip(self.item_schemas, subject)):
                _append_at(failures, schema, item, index)
            if isinstance(self.additional_items, Schema):
                for index in range(tuple_length, len(subject)):
                    _append_at(failures, self.additional_items, subject[index], index)
        return failures


def _append_at(failures: list[ValidationError], schema: Schema, item: Any, index: int) -> None:
    failure = schema.failure_for(item)
    if failure is not None:
        failures.append(failure.prepend(index))
