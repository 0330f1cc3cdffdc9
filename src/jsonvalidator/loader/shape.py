"""Dispatch on the runtime shape of a JSON value.

The loader inspects raw schema documents made of plain Python values
(``dict``, ``list``, ``str``, ``int``/``float``, ``bool``, ``None``). Every
keyword that accepts more than one kind of value goes through
:func:`dispatch`, which picks the handler registered for the value's shape
and raises a :class:`SchemaError` naming the keyword otherwise.

Object handlers receive the resolution scope that applies inside the object:
when the object declares a string ``id`` the scope is resolved against it,
otherwise the enclosing scope is passed through unchanged. Because the scope
is a parameter and never stored, leaving the object restores the enclosing
scope for sibling branches.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from enum import StrEnum
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.loader.resolution import resolve_reference


class ValueShape(StrEnum):
    """Kinds of JSON values."""

    NULL = "null"
    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def shape_of(value: Any) -> ValueShape:
    """Return the JSON shape of a parsed value."""
    if value is None:
        return ValueShape.NULL
    # bool must be tested before int
    if isinstance(value, bool):
        return ValueShape.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return ValueShape.NUMBER
    if isinstance(value, str):
        return ValueShape.STRING
    if isinstance(value, (list, tuple)):
        return ValueShape.ARRAY
    if isinstance(value, dict):
        return ValueShape.OBJECT
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def is_integral(value: Any) -> bool:
    """True for JSON numbers without a fractional part."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return False


def describe(value: Any) -> str:
    """Name the JSON type of a value for error messages."""
    try:
        shape = shape_of(value)
    except TypeError:
        return type(value).__name__
    if shape is ValueShape.NUMBER and isinstance(value, int):
        return "integer"
    return shape.value


def scope_of(scope: str, obj: dict) -> str:
    """Resolution scope in effect inside ``obj``."""
    declared = obj.get("id")
    if isinstance(declared, str):
        return resolve_reference(scope, declared)
    return scope


def dispatch(
    keyword: str | None,
    value: Any,
    scope: str = "",
    *,
    on_object: Callable[[dict, str], Any] | None = None,
    on_array: Callable[[list], Any] | None = None,
    on_string: Callable[[str], Any] | None = None,
    on_number: Callable[[Any], Any] | None = None,
    on_boolean: Callable[[bool], Any] | None = None,
    on_null: Callable[[None], Any] | None = None,
) -> Any:
    """Run the handler registered for the shape of ``value`` and return its result.

    Args:
        keyword: Schema keyword the value belongs to, used in error messages.
        value: The raw JSON value.
        scope: Resolution scope of the enclosing schema object.

    Raises:
        SchemaError: If no handler is registered for the value's shape.
    """
    handlers = {
        ValueShape.OBJECT: on_object,
        ValueShape.ARRAY: on_array,
        ValueShape.STRING: on_string,
        ValueShape.NUMBER: on_number,
        ValueShape.BOOLEAN: on_boolean,
        ValueShape.NULL: on_null,
    }
    try:
        shape = shape_of(value)
    except TypeError:
        shape = None
    handler = handlers.get(shape)
    if handler is None:
        expected = [s.value for s, h in handlers.items() if h is not None]
        raise SchemaError.wrong_type(keyword, expected, value)
    if shape is ValueShape.OBJECT:
        return handler(value, scope_of(scope, value))
    return handler(value)
