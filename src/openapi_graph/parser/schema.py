"""Recursive deserializer for JSON Schema 2020-12 nodes.

A node becomes:

- a BooleanSchema when it is a JSON boolean,
- a Reference placeholder when it is an object holding ``$ref`` (sibling
  keywords are dropped, unless the MERGE policy is configured),
- an ObjectSchema otherwise, recursing into every schema-bearing keyword.

``$ref`` edges are never followed here, so recursion is bounded by the depth
of the JSON tree itself. Placeholders are registered with the context and
replaced by the resolver once the whole document is built.
"""

import logging
from typing import Any

from openapi_graph.model.schema import (
    BooleanSchema,
    FormatKind,
    ObjectSchema,
    SchemaSlot,
    SchemaType,
)
from .context import ComponentKind, DeserializationContext
from .leaf import (
    parse_discriminator,
    parse_external_docs,
    parse_xml,
    serialize_value,
)
from .node import ObjectNode, json_kind

logger = logging.getLogger("openapi_graph.parser.schema")

STRING_KEYWORDS = {
    "$id": "id",
    "$schema": "schema_dialect",
    "$anchor": "anchor",
    "$comment": "comment",
    "title": "title",
    "description": "description",
    "pattern": "pattern",
    "contentEncoding": "content_encoding",
    "contentMediaType": "content_media_type",
}

NUMBER_KEYWORDS = {
    "multipleOf": "multiple_of",
    "maximum": "maximum",
    "exclusiveMaximum": "exclusive_maximum",
    "minimum": "minimum",
    "exclusiveMinimum": "exclusive_minimum",
}

INTEGER_KEYWORDS = {
    "maxLength": "max_length",
    "minLength": "min_length",
    "maxItems": "max_items",
    "minItems": "min_items",
    "maxContains": "max_contains",
    "minContains": "min_contains",
    "maxProperties": "max_properties",
    "minProperties": "min_properties",
}

BOOLEAN_KEYWORDS = {
    "uniqueItems": "unique_items",
    "deprecated": "deprecated",
    "readOnly": "read_only",
    "writeOnly": "write_only",
}

SCHEMA_KEYWORDS = {
    "items": "items",
    "additionalProperties": "additional_properties",
    "not": "not_",
    "if": "if_",
    "then": "then",
    "else": "else_",
    "contains": "contains",
    "propertyNames": "property_names",
    "unevaluatedItems": "unevaluated_items",
    "unevaluatedProperties": "unevaluated_properties",
    "contentSchema": "content_schema",
}

SCHEMA_LIST_KEYWORDS = {
    "allOf": "all_of",
    "anyOf": "any_of",
    "oneOf": "one_of",
    "prefixItems": "prefix_items",
}

SCHEMA_MAP_KEYWORDS = {
    "properties": "properties",
    "patternProperties": "pattern_properties",
    "dependentSchemas": "dependent_schemas",
    "$defs": "defs",
}


def parse_schema(value: Any, location: str, context: DeserializationContext) -> SchemaSlot | None:
    """Deserialize one schema node.

    Returns ``None`` (and records a type mismatch) when the node is neither a
    boolean nor an object.
    """
    if isinstance(value, bool):
        return BooleanSchema(value=value)

    node = context.as_object(value, location, "Schema")
    if node is None:
        return None

    schema = ObjectSchema()
    if "$ref" in node:
        reference = context.read_reference(node)
        if not context.merge_ref_siblings:
            siblings = sorted(key for key in node.data if key != "$ref")
            if siblings:
                logger.debug("Ignoring keywords %s next to $ref at %s", siblings, location)
            return reference
        context.assign(schema, "ref", reference, ComponentKind.SCHEMA, node.at("$ref"))

    _parse_keywords(node, schema)
    return schema


def assign_schema(owner: Any, field: str, value: Any, location: str, context: DeserializationContext, key: str | None = None) -> None:
    """Parse a schema node and place it into a slot of ``owner``."""
    context.assign(owner, field, parse_schema(value, location, context), ComponentKind.SCHEMA, location, key=key)


def parse_types(value: Any) -> set[SchemaType]:
    """Map the ``type`` keyword onto a set of SchemaType members.

    A string gives one member, an array of strings gives one member per
    entry; any other shape, and any unrecognized name, yields UNKNOWN.
    """
    if isinstance(value, str):
        return {SchemaType.from_name(value)}
    if isinstance(value, list) and value:
        return {SchemaType.from_name(item) for item in value}
    return {SchemaType.UNKNOWN}


def _parse_keywords(node: ObjectNode, schema: ObjectSchema) -> None:
    context = node.context

    for keyword, field in STRING_KEYWORDS.items():
        setattr(schema, field, node.string(keyword))
    for keyword, field in NUMBER_KEYWORDS.items():
        setattr(schema, field, node.number(keyword))
    for keyword, field in INTEGER_KEYWORDS.items():
        setattr(schema, field, node.integer(keyword))
    for keyword, field in BOOLEAN_KEYWORDS.items():
        setattr(schema, field, node.boolean(keyword))

    if "type" in node:
        schema.type = parse_types(node.value("type"))
        if SchemaType.UNKNOWN in schema.type:
            logger.debug("Unrecognized type %r at %s", node.value("type"), node.at("type"))

    format_name = node.string("format")
    if format_name is not None:
        schema.format = FormatKind.from_name(format_name)
        schema.format_name = format_name

    schema.required = list(dict.fromkeys(node.strings("required")))
    for name, value, location in node.entries("dependentRequired"):
        if isinstance(value, list):
            schema.dependent_required[name] = [item for item in value if isinstance(item, str)]
        else:
            context.mismatch(f"expected a JSON array, got {json_kind(value)}", location)

    enum = node.array("enum")
    if enum is not None:
        schema.enum = list(enum)
    examples = node.array("examples")
    if examples is not None:
        schema.examples = list(examples)
    schema.const = node.value("const")
    schema.default = node.value("default")
    schema.example = serialize_value(node.value("example"))

    for keyword, field in SCHEMA_KEYWORDS.items():
        if keyword in node:
            assign_schema(schema, field, node.value(keyword), node.at(keyword), context)

    for keyword, field in SCHEMA_LIST_KEYWORDS.items():
        for _, value, location in node.items(keyword):
            assign_schema(schema, field, value, location, context)

    for keyword, field in SCHEMA_MAP_KEYWORDS.items():
        for name, value, location in node.entries(keyword):
            assign_schema(schema, field, value, location, context, key=name)

    discriminator = node.child("discriminator")
    if discriminator is not None:
        schema.discriminator = parse_discriminator(discriminator)
    xml = node.child("xml")
    if xml is not None:
        schema.xml = parse_xml(xml)
    docs = node.child("externalDocs")
    if docs is not None:
        schema.external_docs = parse_external_docs(docs)
