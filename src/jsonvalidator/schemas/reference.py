"""``$ref`` nodes and the arena their targets live in.

A reference node is created before its target is loaded so that cyclic
references can point at it. The node itself never changes: it holds a slot
index into a :class:`SchemaArena`, and the loader fills that slot exactly
once when the target has been built. Validation follows the slot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsonvalidator.errors.exceptions import UnresolvedReferenceError
from jsonvalidator.errors.validation import ValidationError
from jsonvalidator.schemas.base import Schema


class SchemaArena:
    """Write-once storage for the targets of reference nodes of one load."""

    def __init__(self):
        self._slots: list[Schema | None] = []

    def reserve(self, reference: str | None = None) -> ReferenceSchema:
        """Create a reference node bound to a fresh, empty slot."""
        self._slots.append(None)
        return ReferenceSchema(arena=self, slot=len(self._slots) - 1, reference=reference)

    def fill(self, slot: int, schema: Schema) -> None:
        if self._slots[slot] is not None:
            raise ValueError(f"reference slot {slot} is already resolved")
        self._slots[slot] = schema

    def get(self, slot: int) -> Schema:
        schema = self._slots[slot]
        if schema is None:
            raise UnresolvedReferenceError(slot)
        return schema

    def unresolved_slots(self) -> list[int]:
        return [index for index, schema in enumerate(self._slots) if schema is None]

    def ensure_resolved(self) -> None:
        """Raise if any reserved slot was never filled."""
        unresolved = self.unresolved_slots()
        if unresolved:
            raise UnresolvedReferenceError(unresolved[0])

    def __len__(self) -> int:
        return len(self._slots)


@dataclass(frozen=True, eq=False, kw_only=True)
class ReferenceSchema(Schema):
    """Delegates to the schema a ``$ref`` points at, without adding a path segment."""

    arena: SchemaArena = field(repr=False)
    slot: int
    reference: str | None = None

    @property
    def referred_schema(self) -> Schema:
        return self.arena.get(self.slot)

    @property
    def is_resolved(self) -> bool:
        return self.slot not in self.arena.unresolved_slots()

    def collect_failures(self, subject: Any) -> list[ValidationError]:
        failure = self.failure_for(subject)
        return [failure] if failure is not None else []

    def failure_for(self, subject: Any) -> ValidationError | None:
        return self.referred_schema.failure_for(subject)
