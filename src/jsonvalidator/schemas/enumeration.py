"""Schema accepting only a fixed set of values."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.schemas.base import Schema
from jsonvalidator.schemas.comparator import contains


@dataclass(frozen=True, eq=False, kw_only=True)
class EnumSchema(Schema):
    possible_values: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "possible_values", tuple(self.possible_values))

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        if contains(self.possible_values, subject):
            return []
        return [ValidationError(self, f"{_render(subject)} is not a valid enum value")]


def _render(value: Any) -> str:
    try:
        return json.dumps(value, sort_keys=True, default=str)
    except ValueError:
        return repr(value)
