"""Tests for turning schema documents into schema trees.

Covers:
- keyword precedence: enum, combinators, type-less schemas, explicit type
- keyword sniffing for schemas without "type"
- type arrays, not combined with other keywords, common keywords
- SchemaError for malformed keyword values
"""

import pytest

from jsonvalidator.errors import SchemaError
from jsonvalidator.loader.loader import extend, load_schema, without_ref
from jsonvalidator.schemas import (
    ArraySchema,
    BooleanSchema,
    CombinedSchema,
    Criterion,
    EmptySchema,
    EnumSchema,
    NotSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    StringSchema,
)


# ---------------------------------------------------------------------------
# Precedence and sniffing
# ---------------------------------------------------------------------------


def test_empty_document_is_empty_schema():
    assert isinstance(load_schema({}), EmptySchema)


def test_unknown_keywords_only_yield_empty_schema():
    assert isinstance(load_schema({"default": 1, "definitions": {}}), EmptySchema)


def test_enum_wins_over_everything():
    schema = load_schema({"enum": [1, "a"], "type": "string", "allOf": [{"type": "null"}]})
    assert isinstance(schema, EnumSchema)
    assert schema.possible_values == (1, "a")


def test_combinator_alone():
    schema = load_schema({"anyOf": [{"type": "string"}, {"type": "null"}]})
    assert isinstance(schema, CombinedSchema)
    assert schema.criterion is Criterion.ANY_OF
    assert [type(s) for s in schema.subschemas] == [StringSchema, NullSchema]


def test_combinator_with_type_is_all_of_base_and_combination():
    schema = load_schema({"type": "integer", "oneOf": [{"minimum": 5}, {"maximum": 0}]})
    assert schema.criterion is Criterion.ALL_OF
    base, combined = schema.subschemas
    assert isinstance(base, NumberSchema) and base.requires_integer
    assert combined.criterion is Criterion.ONE_OF
    assert schema.is_valid(7)
    assert not schema.is_valid(3)
    assert not schema.is_valid(7.5)


def test_combinator_with_sniffed_keywords():
    schema = load_schema({"minLength": 2, "anyOf": [{"type": "string"}, {"type": "integer"}]})
    base = schema.subschemas[0]
    assert isinstance(base, StringSchema) and not base.requires_string
    assert schema.is_valid("ab")
    assert schema.is_valid(3)
    assert not schema.is_valid("a")


def test_multiple_combinators_are_rejected():
    with pytest.raises(SchemaError, match="expected at most 1 of 'allOf', 'anyOf', 'oneOf', 2 found"):
        load_schema({"allOf": [{}], "oneOf": [{}]})


@pytest.mark.parametrize(
    "document,schema_type,flag",
    [
        ({"items": {}}, ArraySchema, "requires_array"),
        ({"minItems": 1, "properties": {}}, ArraySchema, "requires_array"),
        ({"required": ["a"], "minimum": 1}, ObjectSchema, "requires_object"),
        ({"multipleOf": 3, "pattern": "x"}, NumberSchema, "requires_number"),
        ({"maxLength": 3}, StringSchema, "requires_string"),
    ],
)
def test_sniffing_order_and_relaxed_type(document, schema_type, flag):
    schema = load_schema(document)
    assert type(schema) is schema_type
    assert getattr(schema, flag) is False


def test_sniffed_schema_accepts_other_types():
    schema = load_schema({"minimum": 10})
    assert schema.is_valid("text")
    assert not schema.is_valid(5)


@pytest.mark.parametrize(
    "type_name,schema_type",
    [
        ("string", StringSchema),
        ("number", NumberSchema),
        ("integer", NumberSchema),
        ("boolean", BooleanSchema),
        ("null", NullSchema),
        ("array", ArraySchema),
        ("object", ObjectSchema),
    ],
)
def test_explicit_types(type_name, schema_type):
    assert type(load_schema({"type": type_name})) is schema_type


def test_explicit_type_keeps_type_requirement():
    assert not load_schema({"type": "string", "maxLength": 2}).is_valid(5)


def test_type_array_is_any_of_types_sharing_keywords():
    schema = load_schema({"type": ["string", "integer"], "minLength": 2, "minimum": 10})
    assert schema.criterion is Criterion.ANY_OF
    string_schema, integer_schema = schema.subschemas
    assert string_schema.min_length == 2
    assert integer_schema.minimum == 10
    assert schema.is_valid("ab")
    assert schema.is_valid(11)
    assert not schema.is_valid("a")
    assert not schema.is_valid(None)


def test_empty_type_array_is_rejected():
    with pytest.raises(SchemaError):
        load_schema({"type": []})


def test_unknown_type_name():
    with pytest.raises(SchemaError, match=r"unknown type: \[date\]"):
        load_schema({"type": "date"})


def test_not_alone():
    schema = load_schema({"not": {"type": "null"}})
    assert isinstance(schema, NotSchema)
    assert schema.is_valid(1)
    assert not schema.is_valid(None)


def test_not_with_type_requires_both():
    schema = load_schema({"type": "integer", "not": {"multipleOf": 2}})
    assert schema.criterion is Criterion.ALL_OF
    assert schema.is_valid(3)
    assert not schema.is_valid(4)
    assert not schema.is_valid("a")


def test_not_with_sniffed_keywords_requires_both():
    schema = load_schema({"maxLength": 3, "not": {"enum": ["abc"]}})
    assert schema.is_valid("ab")
    assert not schema.is_valid("abc")
    assert not schema.is_valid("abcd")


def test_common_keywords_are_applied():
    schema = load_schema({"type": "null", "id": "#n", "title": "Nothing", "description": "Only null"})
    assert (schema.id, schema.title, schema.description) == ("#n", "Nothing", "Only null")


def test_nested_schemas_are_loaded():
    schema = load_schema(
        {
            "type": "object",
            "properties": {"tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True}},
            "additionalProperties": False,
            "patternProperties": {"^x-": {}},
            "dependencies": {"a": ["b"], "c": {"required": ["d"]}},
        }
    )
    tags = schema.property_schemas["tags"]
    assert isinstance(tags.all_item_schema, StringSchema)
    assert tags.unique_items
    assert schema.additional_properties is False
    assert dict(schema.property_dependencies) == {"a": ("b",)}
    assert isinstance(schema.schema_dependencies["c"], ObjectSchema)


def test_tuple_items_and_additional_items():
    schema = load_schema({"items": [{"type": "boolean"}, {"type": "null"}], "additionalItems": False})
    assert [type(s) for s in schema.item_schemas] == [BooleanSchema, NullSchema]
    assert schema.is_valid([True, None])
    assert not schema.is_valid([True, None, 1])


def test_integer_keyword_accepts_integral_float():
    assert load_schema({"maxLength": 2.0}).max_length == 2


# ---------------------------------------------------------------------------
# Malformed documents
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "document,message",
    [
        ({"type": 5}, "type: expected type is one of array, string, found: integer"),
        ({"minLength": "2"}, "minLength: expected type: number, found: string"),
        ({"minLength": 1.5}, "minLength: expected type: integer, found: number"),
        ({"items": 5}, "items: expected type is one of object, array, found: integer"),
        ({"additionalProperties": "no"}, "additionalProperties: expected type is one of object, boolean, found: string"),
        ({"required": "a"}, "required: expected type: array, found: string"),
        ({"required": [1]}, "required: expected type: string, found: integer"),
        ({"properties": []}, "properties: expected type: object, found: array"),
        ({"properties": {"a": 1}}, "a: expected type: object, found: integer"),
        ({"dependencies": {"a": "b"}}, "a: expected type is one of object, array, found: string"),
        ({"allOf": {}}, "allOf: expected type: array, found: object"),
        ({"not": True}, "not: expected type: object, found: boolean"),
        ({"enum": 1}, "enum: expected type: array, found: integer"),
        ({"$ref": 1}, "$ref: expected type: string, found: integer"),
        ({"type": "null", "title": 3}, "title: expected type: string, found: integer"),
        ({"exclusiveMinimum": "yes", "minimum": 1}, "exclusiveMinimum: expected type: boolean, found: string"),
    ],
)
def test_malformed_keyword_values(document, message):
    with pytest.raises(SchemaError) as exc_info:
        load_schema(document)
    assert str(exc_info.value) == message


def test_root_must_be_an_object():
    with pytest.raises(SchemaError, match="expected type: object, found: array"):
        load_schema([])


@pytest.mark.parametrize("document", [{"pattern": "("}, {"patternProperties": {"[": {}}}, {"multipleOf": 0}])
def test_invalid_constraint_values(document):
    with pytest.raises(SchemaError):
        load_schema(document)


# ---------------------------------------------------------------------------
# Merge helpers
# ---------------------------------------------------------------------------


def test_without_ref_copies():
    original = {"$ref": "#/a", "title": "t"}
    assert without_ref(original) == {"title": "t"}
    assert "$ref" in original


@pytest.mark.parametrize(
    "additional,original,expected",
    [
        ({}, {"a": 1}, {"a": 1}),
        ({"a": 1}, {}, {"a": 1}),
        ({"a": 2, "b": 1}, {"a": 1, "c": 3}, {"a": 2, "b": 1, "c": 3}),
    ],
)
def test_extend(additional, original, expected):
    assert extend(additional, original) == expected


def test_extend_does_not_modify_arguments():
    additional, original = {"a": 2}, {"a": 1}
    extend(additional, original)
    assert (additional, original) == ({"a": 2}, {"a": 1})


# ---------------------------------------------------------------------------
# Package facade
# ---------------------------------------------------------------------------


def test_package_level_validate():
    import jsonvalidator

    schema = jsonvalidator.load_schema({"type": "array", "items": {"type": "integer"}})
    jsonvalidator.validate(schema, [1, 2])
    with pytest.raises(jsonvalidator.ValidationError) as exc_info:
        jsonvalidator.validate(schema, [1, "2"])
    assert str(exc_info.value) == "#/1: expected type: number, found: string"
