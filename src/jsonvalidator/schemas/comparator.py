"""Structural equality of parsed JSON values."""

from typing import Any

from jsonvalidator.loader.shape import ValueShape, shape_of


def deep_equals(left: Any, right: Any) -> bool:
    """Compare two JSON values structurally.

    Objects are equal when they have the same key set and equal values under
    each key, regardless of key order. Arrays are equal when they have the same
    length and pairwise equal elements. Booleans never equal numbers; numbers
    compare by value, so ``1`` equals ``1.0``.
    """
    left_shape = shape_of(left)
    if left_shape is not shape_of(right):
        return False
    if left_shape is ValueShape.ARRAY:
        return len(left) == len(right) and all(deep_equals(a, b) for a, b in zip(left, right))
    if left_shape is ValueShape.OBJECT:
        if left.keys() != right.keys():
            return False
        return all(deep_equals(value, right[key]) for key, value in left.items())
    return left == right


def contains(values, candidate: Any) -> bool:
    """True if ``candidate`` is deep-equal to any member of ``values``."""
    return any(deep_equals(value, candidate) for value in values)
