"""Compiled schema nodes."""

from jsonvalidator.schemas.array import ArraySchema
from jsonvalidator.schemas.base import EmptySchema, Schema
from jsonvalidator.schemas.combined import CombinedSchema, Criterion, NotSchema
from jsonvalidator.schemas.comparator import deep_equals
from jsonvalidator.schemas.enumeration import EnumSchema
from jsonvalidator.schemas.object import ObjectSchema
from jsonvalidator.schemas.primitives import BooleanSchema, NullSchema, NumberSchema, StringSchema
from jsonvalidator.schemas.reference import ReferenceSchema, SchemaArena

__all__ = [
    "ArraySchema",
    "BooleanSchema",
    "CombinedSchema",
    "Criterion",
    "EmptySchema",
    "EnumSchema",
    "NotSchema",
    "NullSchema",
    "NumberSchema",
    "ObjectSchema",
    "ReferenceSchema",
    "Schema",
    "SchemaArena",
    "StringSchema",
    "deep_equals",
]
