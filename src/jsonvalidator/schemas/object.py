"""Object schema: property schemas, required keys, size, additional properties and dependencies."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.loader.shape import ValueShape, shape_of
from jsonvalidator.schemas.base import Schema


def _frozen(mapping: Mapping | None) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, eq=False, kw_only=True)
class ObjectSchema(Schema):
    """Constraints on JSON objects.

    Checks run in a fixed order and every failure is collected: property
    count, required keys, property schemas, pattern properties, additional
    properties, property dependencies, schema dependencies. Failures of a
    property's value are located under the property's key. A schema
    dependency validates the whole object, so its failures stay at the
    object's own location.
    """

    property_schemas: Mapping[str, Schema] = field(default_factory=dict)
    required_properties: tuple[str, ...] = ()
    min_properties: int | None = None
    max_properties: int | None = None
    pattern_properties: Mapping[str, Schema] = field(default_factory=dict)
    additional_properties: bool | Schema = True
    property_dependencies: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    schema_dependencies: Mapping[str, Schema] = field(default_factory=dict)
    requires_object: bool = True
    _patterns: tuple = field(init=False, repr=False, default=())

    def __post_init__(self):
        object.__setattr__(self, "property_schemas", _frozen(self.property_schemas))
        object.__setattr__(self, "pattern_properties", _frozen(self.pattern_properties))
        object.__setattr__(self, "schema_dependencies", _frozen(self.schema_dependencies))
        object.__setattr__(
            self,
            "property_dependencies",
            MappingProxyType({key: tuple(names) for key, names in self.property_dependencies.items()}),
        )
        object.__setattr__(self, "required_properties", tuple(self.required_properties))
        compiled = []
        for pattern, schema in self.pattern_properties.items():
            try:
                compiled.append((re.compile(pattern), schema))
            except re.error as exc:
                raise SchemaError(
                    f"patternProperties: invalid regular expression [{pattern}]: {exc}",
                    keyword="patternProperties",
                ) from exc
        object.__setattr__(self, "_patterns", tuple(compiled))

    @property
    def permits_additional_properties(self) -> bool:
        return self.additional_properties is not False

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if shape_of(subject) is not ValueShape.OBJECT:
            if self.requires_object:
                return [ValidationError.type_mismatch(self, "object", subject)]
            return []
        failures: list[ValidationError] = []
        failures.extend(self._check_size(subject))
        failures.extend(self._check_required(subject))
        failures.extend(self._check_properties(subject))
        failures.extend(self._check_pattern_properties(subject))
        failures.extend(self._check_additional_properties(subject))
        failures.extend(self._check_property_dependencies(subject))
        failures.extend(self._check_schema_dependencies(subject))
        return failures

    def _check_size(self, subject: dict) -> list[ValidationError]:
        size = len(subject)
        if self.min_properties is not None and size < self.min_properties:
            return [ValidationError(self, f"minimum size: [{self.min_properties}], found: [{size}]")]
        if self.max_properties is not None and size > self.max_properties:
            return [ValidationError(self, f"maximum size: [{self.max_properties}], found: [{size}]")]
        return []

    def _check_required(self, subject: dict) -> list[ValidationError]:
        return [
            ValidationError(self, f"required key [{key}] not found")
            for key in self.required_properties
            if key not in subject
        ]

    def _check_properties(self, subject: dict) -> list[ValidationError]:
        failures = []
        for key, schema in self.property_schemas.items():
            if key in subject:
                failure = schema.failure_for(subject[key])
                if failure is not None:
                    failures.append(failure.prepend(key))
        return failures

    def _check_pattern_properties(self, subject: dict) -> list[ValidationError]:
        failures = []
        for regex, schema in self._patterns:
            for key, value in subject.items():
                if regex.search(key):
                    failure = schema.failure_for(value)
                    if failure is not None:
                        failures.append(failure.prepend(key))
        return failures

    def _additional_keys(self, subject: dict) -> list[str]:
        return [
            key
            for key in subject
            if key not in self.property_schemas
            and not any(regex.search(key) for regex, _ in self._patterns)
        ]

    def _check_additional_properties(self, subject: dict) -> list[ValidationError]:
        if self.additional_properties is True:
            return []
        if self.additional_properties is False:
            return [
                ValidationError(self, f"extraneous key [{key}] is not permitted")
                for key in self._additional_keys(subject)
            ]
        failures = []
        for key in self._additional_keys(subject):
            failure = self.additional_properties.failure_for(subject[key])
            if failure is not None:
                failures.append(failure.prepend(key))
        return failures

    def _check_property_dependencies(self, subject: dict) -> list[ValidationError]:
        failures = []
        for trigger, dependents in self.property_dependencies.items():
            if trigger not in subject:
                continue
            for dependent in dependents:
                if dependent not in subject:
                    failures.append(ValidationError(self, f"property [{dependent}] is required"))
        return failures

    def _check_schema_dependencies(self, subject: dict) -> list[ValidationError]:
        failures = []
        for trigger, schema in self.schema_dependencies.items():
            if trigger in subject:
                failure = schema.failure_for(subject)
                if failure is not None:
                    failures.append(failure)
        return failures
