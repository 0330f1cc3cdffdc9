"""Loads a JSON Schema document into a tree of schema nodes.

One :class:`SchemaLoader` handles one schema object. Nested schema objects
are handled by child loaders that share the root document and the
:class:`LoadContext` (reference cache, arena, fetched documents) but carry
their own resolution scope.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

from jsonvalidator.errors.exceptions import SchemaError
from jsonvalidator.loader.client import DefaultSchemaClient, SchemaClient
from jsonvalidator.loader.pointer import JSONPointer
from jsonvalidator.loader.resolution import canonical_reference, resolve_reference, split_reference
from jsonvalidator.loader.shape import ValueShape, dispatch, is_integral, scope_of, shape_of
from jsonvalidator.schemas import (
    ArraySchema,
    BooleanSchema,
    CombinedSchema,
    EmptySchema,
    EnumSchema,
    NotSchema,
    NullSchema,
    NumberSchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
    SchemaArena,
    StringSchema,
)

logger = logging.getLogger(__name__)

ARRAY_KEYWORDS = ("items", "additionalItems", "minItems", "maxItems", "uniqueItems")

OBJECT_KEYWORDS = (
    "properties",
    "required",
    "minProperties",
    "maxProperties",
    "dependencies",
    "patternProperties",
    "additionalProperties",
)

NUMBER_KEYWORDS = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum", "multipleOf")

STRING_KEYWORDS = ("minLength", "maxLength", "pattern")

COMBINATORS = {
    "allOf": CombinedSchema.all_of,
    "anyOf": CombinedSchema.any_of,
    "oneOf": CombinedSchema.one_of,
}


@dataclass
class LoadContext:
    """State shared by every loader of one root document."""

    client: SchemaClient
    arena: SchemaArena = field(default_factory=SchemaArena)
    reference_cache: dict[str, ReferenceSchema] = field(default_factory=dict)
    documents: dict[str, Any] = field(default_factory=dict)


def without_ref(original: dict) -> dict:
    """Shallow copy of ``original`` without its ``$ref`` key."""
    return {key: value for key, value in original.items() if key != "$ref"}


def extend(additional: dict, original: dict) -> dict:
    """Merge two schema objects; keys of ``additional`` win.

    Neither argument is modified, but the result may be one of them when the
    other is empty.
    """
    if not additional:
        return original
    if not original:
        return additional
    return {**original, **additional}


def load_schema(document: dict, client: SchemaClient | None = None) -> Schema:
    """Load a root schema document.

    Args:
        document: The parsed JSON Schema document.
        client: Fetches documents for remote ``$ref`` targets. Defaults to
            :class:`DefaultSchemaClient`.

    Raises:
        SchemaError: If the document is malformed or a reference cannot be resolved.
    """
    if shape_of(document) is not ValueShape.OBJECT:
        raise SchemaError.wrong_type(None, ["object"], document)
    context = LoadContext(client=client if client is not None else DefaultSchemaClient())
    declared_id = document.get("id")
    scope = declared_id if isinstance(declared_id, str) else ""
    document_uri, _ = split_reference(scope)
    if document_uri:
        context.documents[document_uri] = document
    schema = SchemaLoader(document, scope, document, context).load()
    context.arena.ensure_resolved()
    logger.debug(
        "Loaded schema (scope=%r, references=%d, fetched=%d)",
        scope,
        len(context.arena),
        len(context.documents) - (1 if document_uri else 0),
    )
    return schema


class SchemaLoader:
    """Builds the schema node for one JSON schema object."""

    def __init__(self, schema_json: dict, scope: str, root_document: Any, context: LoadContext):
        self.schema_json = schema_json
        self.scope = scope
        self.root_document = root_document
        self.context = context

    def load(self) -> Schema:
        """Build the node for this loader's schema object.

        Keyword precedence: ``enum``, then a combinator, then schemas without
        ``type`` (empty, ``$ref``, keyword sniffing, ``not``), then ``type``.
        ``id``, ``title`` and ``description`` are applied last.
        """
        if "enum" in self.schema_json:
            schema = self._build_enum()
        else:
            schema = self._try_combined()
            if schema is None:
                if "type" not in self.schema_json:
                    schema = self._build_without_explicit_type()
                else:
                    schema = self._with_not(self._load_for_type(self.schema_json["type"]))
        return self._apply_common(schema)

    # -- child loading ---------------------------------------------------

    def _load_child(self, child_json: dict, scope: str) -> Schema:
        return SchemaLoader(child_json, scope, self.root_document, self.context).load()

    def _load_subschema(self, keyword: str, value: Any) -> Schema:
        return dispatch(keyword, value, self.scope, on_object=self._load_child)

    # -- keyword access --------------------------------------------------

    def _keyword(self, keyword: str, shape: ValueShape) -> Any:
        if keyword not in self.schema_json:
            return None
        value = self.schema_json[keyword]
        try:
            actual = shape_of(value)
        except TypeError:
            actual = None
        if actual is not shape:
            raise SchemaError.wrong_type(keyword, [shape.value], value)
        return value

    def _integer(self, keyword: str) -> int | None:
        value = self._keyword(keyword, ValueShape.NUMBER)
        if value is None:
            return None
        if not is_integral(value):
            raise SchemaError.wrong_type(keyword, ["integer"], value)
        return int(value)

    def _string_list(self, keyword: str, value: Any) -> tuple[str, ...]:
        def strings(items: list) -> tuple[str, ...]:
            return tuple(dispatch(keyword, item, on_string=lambda s: s) for item in items)

        return dispatch(keyword, value, on_array=strings)

    def _apply_common(self, schema: Schema) -> Schema:
        common = {}
        for keyword in ("id", "title", "description"):
            value = self._keyword(keyword, ValueShape.STRING)
            if value is not None:
                common[keyword] = value
        if not common:
            return schema
        return dataclasses.replace(schema, **common)

    # -- keyword groups --------------------------------------------------

    def _build_enum(self) -> EnumSchema:
        values = self._keyword("enum", ValueShape.ARRAY)
        return EnumSchema(possible_values=tuple(values))

    def _try_combined(self) -> Schema | None:
        present = [keyword for keyword in COMBINATORS if keyword in self.schema_json]
        if len(present) > 1:
            raise SchemaError(
                f"expected at most 1 of 'allOf', 'anyOf', 'oneOf', {len(present)} found"
            )
        if not present:
            return None
        keyword = present[0]
        subschema_defs = self._keyword(keyword, ValueShape.ARRAY)
        combined = COMBINATORS[keyword]([self._load_subschema(keyword, d) for d in subschema_defs])
        if "type" in self.schema_json:
            base = self._load_for_type(self.schema_json["type"])
        else:
            base = self._sniff_by_keywords()
        base = self._with_not(base)
        if base is None:
            return combined
        return CombinedSchema.all_of([base, combined])

    def _build_without_explicit_type(self) -> Schema:
        if not self.schema_json:
            return EmptySchema()
        if "$ref" in self.schema_json:
            return self._lookup_reference(self._keyword("$ref", ValueShape.STRING))
        schema = self._with_not(self._sniff_by_keywords())
        return schema if schema is not None else EmptySchema()

    def _sniff_by_keywords(self) -> Schema | None:
        def declares(keywords) -> bool:
            return any(keyword in self.schema_json for keyword in keywords)

        if declares(ARRAY_KEYWORDS):
            return self._build_array(requires_array=False)
        if declares(OBJECT_KEYWORDS):
            return self._build_object(requires_object=False)
        if declares(NUMBER_KEYWORDS):
            return self._build_number(requires_number=False)
        if declares(STRING_KEYWORDS):
            return self._build_string(requires_string=False)
        return None

    def _with_not(self, base: Schema | None) -> Schema | None:
        if "not" not in self.schema_json:
            return base
        negated = NotSchema(must_not_match=self._load_subschema("not", self.schema_json["not"]))
        if base is None:
            return negated
        return CombinedSchema.all_of([base, negated])

    def _load_for_type(self, type_value: Any) -> Schema:
        return dispatch(
            "type",
            type_value,
            on_string=self._load_for_explicit_type,
            on_array=self._any_of_for_types,
        )

    def _any_of_for_types(self, type_names: list) -> CombinedSchema:
        if not type_names:
            raise SchemaError("type: expected at least one type name", keyword="type")
        return CombinedSchema.any_of(
            [dispatch("type", name, on_string=self._load_for_explicit_type) for name in type_names]
        )

    def _load_for_explicit_type(self, type_name: str) -> Schema:
        if type_name == "string":
            return self._build_string()
        if type_name == "integer":
            return self._build_number(requires_integer=True)
        if type_name == "number":
            return self._build_number()
        if type_name == "boolean":
            return BooleanSchema()
        if type_name == "null":
            return NullSchema()
        if type_name == "array":
            return self._build_array()
        if type_name == "object":
            return self._build_object()
        raise SchemaError(f"unknown type: [{type_name}]", keyword="type")

    # -- variants --------------------------------------------------------

    def _build_string(self, requires_string: bool = True) -> StringSchema:
        return StringSchema(
            min_length=self._integer("minLength"),
            max_length=self._integer("maxLength"),
            pattern=self._keyword("pattern", ValueShape.STRING),
            requires_string=requires_string,
        )

    def _build_number(self, requires_number: bool = True, requires_integer: bool = False) -> NumberSchema:
        return NumberSchema(
            minimum=self._keyword("minimum", ValueShape.NUMBER),
            maximum=self._keyword("maximum", ValueShape.NUMBER),
            exclusive_minimum=bool(self._keyword("exclusiveMinimum", ValueShape.BOOLEAN)),
            exclusive_maximum=bool(self._keyword("exclusiveMaximum", ValueShape.BOOLEAN)),
            multiple_of=self._keyword("multipleOf", ValueShape.NUMBER),
            requires_number=requires_number,
            requires_integer=requires_integer,
        )

    def _build_array(self, requires_array: bool = True) -> ArraySchema:
        options: dict[str, Any] = {
            "min_items": self._integer("minItems"),
            "max_items": self._integer("maxItems"),
            "unique_items": bool(self._keyword("uniqueItems", ValueShape.BOOLEAN)),
            "requires_array": requires_array,
        }
        if "additionalItems" in self.schema_json:
            options["additional_items"] = dispatch(
                "additionalItems",
                self.schema_json["additionalItems"],
                self.scope,
                on_boolean=lambda allowed: allowed,
                on_object=self._load_child,
            )
        if "items" in self.schema_json:
            items = dispatch(
                "items",
                self.schema_json["items"],
                self.scope,
                on_object=self._load_child,
                on_array=lambda defs: tuple(self._load_subschema("items", d) for d in defs),
            )
            if isinstance(items, tuple):
                options["item_schemas"] = items
            else:
                options["all_item_schema"] = items
        return ArraySchema(**options)

    def _build_object(self, requires_object: bool = True) -> ObjectSchema:
        options: dict[str, Any] = {
            "min_properties": self._integer("minProperties"),
            "max_properties": self._integer("maxProperties"),
            "requires_object": requires_object,
        }
        properties = self._keyword("properties", ValueShape.OBJECT)
        if properties is not None:
            options["property_schemas"] = {
                key: self._load_subschema(key, definition) for key, definition in properties.items()
            }
        if "additionalProperties" in self.schema_json:
            options["additional_properties"] = dispatch(
                "additionalProperties",
                self.schema_json["additionalProperties"],
                self.scope,
                on_boolean=lambda allowed: allowed,
                on_object=self._load_child,
            )
        if "required" in self.schema_json:
            options["required_properties"] = self._string_list("required", self.schema_json["required"])
        pattern_properties = self._keyword("patternProperties", ValueShape.OBJECT)
        if pattern_properties is not None:
            options["pattern_properties"] = {
                pattern: self._load_subschema(pattern, definition)
                for pattern, definition in pattern_properties.items()
            }
        dependencies = self._keyword("dependencies", ValueShape.OBJECT)
        if dependencies is not None:
            schema_dependencies = {}
            property_dependencies = {}
            for trigger, dependency in dependencies.items():
                loaded = dispatch(
                    trigger,
                    dependency,
                    self.scope,
                    on_object=self._load_child,
                    on_array=lambda names, key=trigger: self._string_list(key, names),
                )
                if isinstance(loaded, tuple):
                    property_dependencies[trigger] = loaded
                else:
                    schema_dependencies[trigger] = loaded
            options["schema_dependencies"] = schema_dependencies
            options["property_dependencies"] = property_dependencies
        return ObjectSchema(**options)

    # -- references ------------------------------------------------------

    def _lookup_reference(self, relative: str) -> ReferenceSchema:
        """Return the reference node for ``relative``, loading its target on first use.

        The placeholder is cached before the target is loaded, so a cycle
        back to the same reference receives the placeholder.
        """
        absolute = canonical_reference(resolve_reference(self.scope, relative))
        cached = self.context.reference_cache.get(absolute)
        if cached is not None:
            logger.debug("Reference cache hit for %s", absolute)
            return cached
        reference = self.context.arena.reserve(absolute)
        self.context.reference_cache[absolute] = reference
        logger.debug("Resolving $ref %s (scope=%r)", absolute, self.scope)

        document_uri, fragment = split_reference(absolute)
        if document_uri:
            pointer = JSONPointer.for_url(self.context.client, absolute, self.context.documents)
            target_scope = document_uri
        else:
            pointer = JSONPointer.for_document(self.root_document, fragment)
            target_scope = self.scope
        result = pointer.query()
        target = dispatch("$ref", result.query_result, on_object=lambda obj, _: obj)
        merged = extend(without_ref(self.schema_json), target)
        # self.scope already reflects the referencing object's own id
        referred = SchemaLoader(
            merged, scope_of(target_scope, target), result.containing_document, self.context
        ).load()
        _reject_reference_loop(reference, referred)
        self.context.arena.fill(reference.slot, referred)
        return reference


def _reject_reference_loop(reference: ReferenceSchema, referred: Schema) -> None:
    """Fail when a reference would only ever delegate to itself."""
    seen = {reference.slot}
    current = referred
    while isinstance(current, ReferenceSchema):
        if current.slot in seen:
            raise SchemaError(f"$ref [{reference.reference}] resolves to itself", keyword="$ref")
        seen.add(current.slot)
        if not current.is_resolved:
            return
        current = current.referred_schema
