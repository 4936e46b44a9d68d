"""Deserializers for the OpenAPI objects that own schemas or references.

Wherever OpenAPI allows a Reference Object, the node is turned into a
Reference placeholder and registered with the context through
DeserializationContext.assign; schema-bearing fields are delegated to
parse_schema.
"""

import logging
from typing import Any, Callable

from openapi_graph.model.document import (
    HTTP_METHODS,
    Callback,
    Components,
    Encoding,
    Header,
    Link,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
    SecurityScheme,
)
from .context import ComponentKind, DeserializationContext
from .leaf import (
    parse_example,
    parse_external_docs,
    parse_oauth_flows,
    parse_security_requirements,
    parse_server,
    parse_servers,
    serialize_value,
)
from .node import ObjectNode, is_extension
from .schema import assign_schema

logger = logging.getLogger("openapi_graph.parser.composite")


def parse_referenceable(
    value: Any,
    location: str,
    context: DeserializationContext,
    parse: Callable[[ObjectNode], Any],
    of: str,
) -> Any:
    """Parse an object that may be written as a Reference Object instead."""
    node = context.as_object(value, location, of)
    if node is None:
        return None
    if "$ref" in node:
        return context.read_reference(node)
    return parse(node)


def _assign_map(node: ObjectNode, key: str, owner: Any, field: str, kind: ComponentKind, parse, of: str) -> None:
    for name, value, location in node.entries(key):
        entity = parse_referenceable(value, location, node.context, parse, of)
        node.context.assign(owner, field, entity, kind, location, key=name)


def _assign_list(node: ObjectNode, key: str, owner: Any, field: str, kind: ComponentKind, parse, of: str) -> None:
    for _, value, location in node.items(key):
        entity = parse_referenceable(value, location, node.context, parse, of)
        node.context.assign(owner, field, entity, kind, location)


def _parse_content(node: ObjectNode, owner: Any) -> None:
    for media_type, value, location in node.entries("content"):
        media = node.context.as_object(value, location, "MediaType")
        if media is not None:
            owner.content[media_type] = parse_media_type(media)


def _assign_schema(node: ObjectNode, owner: Any) -> None:
    if "schema" in node:
        assign_schema(owner, "schema_", node.value("schema"), node.at("schema"), node.context)


def parse_media_type(node: ObjectNode) -> MediaType:
    media = MediaType(example=serialize_value(node.value("example")))
    _assign_schema(node, media)
    _assign_map(node, "examples", media, "examples", ComponentKind.EXAMPLE, parse_example, "Example")
    for name, value, location in node.entries("encoding"):
        encoding = node.context.as_object(value, location, "Encoding")
        if encoding is not None:
            media.encoding[name] = parse_encoding(encoding)
    return media


def parse_encoding(node: ObjectNode) -> Encoding:
    encoding = Encoding(
        content_type=node.string("contentType"),
        style=node.string("style"),
        explode=node.boolean("explode"),
        allow_reserved=node.boolean("allowReserved", default=False),
    )
    _assign_map(node, "headers", encoding, "headers", ComponentKind.HEADER, parse_header, "Header")
    return encoding


def parse_header(node: ObjectNode) -> Header:
    header = Header(
        description=node.string("description"),
        required=node.boolean("required", default=False),
        deprecated=node.boolean("deprecated", default=False),
        style=node.string("style"),
        explode=node.boolean("explode"),
        example=serialize_value(node.value("example")),
    )
    _assign_schema(node, header)
    _assign_map(node, "examples", header, "examples", ComponentKind.EXAMPLE, parse_example, "Example")
    _parse_content(node, header)
    return header


def parse_parameter(node: ObjectNode) -> Parameter:
    parameter = Parameter(
        name=node.require_string("Parameter", "name"),
        location=node.require_string("Parameter", "in"),
        description=node.string("description"),
        required=node.boolean("required", default=False),
        deprecated=node.boolean("deprecated", default=False),
        allow_empty_value=node.boolean("allowEmptyValue", default=False),
        style=node.string("style"),
        explode=node.boolean("explode"),
        allow_reserved=node.boolean("allowReserved", default=False),
        example=serialize_value(node.value("example")),
    )
    _assign_schema(node, parameter)
    _assign_map(node, "examples", parameter, "examples", ComponentKind.EXAMPLE, parse_example, "Example")
    _parse_content(node, parameter)
    return parameter


def parse_request_body(node: ObjectNode) -> RequestBody:
    request_body = RequestBody(
        description=node.string("description"),
        required=node.boolean("required", default=False),
    )
    if "content" not in node:
        node.context.missing("RequestBody", "content", node.location)
    _parse_content(node, request_body)
    return request_body


def parse_response(node: ObjectNode) -> Response:
    response = Response(description=node.require_string("Response", "description"))
    _assign_map(node, "headers", response, "headers", ComponentKind.HEADER, parse_header, "Header")
    _parse_content(node, response)
    _assign_map(node, "links", response, "links", ComponentKind.LINK, parse_link, "Link")
    return response


def _expression_or_value(value: Any) -> str | None:
    # runtime expressions and plain strings are kept verbatim
    if isinstance(value, str):
        return value
    return serialize_value(value)


def parse_link(node: ObjectNode) -> Link:
    link = Link(
        operation_ref=node.string("operationRef"),
        operation_id=node.string("operationId"),
        request_body=_expression_or_value(node.value("requestBody")),
        description=node.string("description"),
    )
    for name, value, _ in node.entries("parameters"):
        if value is not None:
            link.parameters[name] = _expression_or_value(value)
    server = node.child("server")
    if server is not None:
        link.server = parse_server(server)
    return link


def parse_callback(node: ObjectNode) -> Callback:
    callback = Callback()
    context = node.context
    for expression, value in node.data.items():
        if is_extension(expression):
            logger.debug("Skipping extension %s at %s", expression, node.location)
            continue
        location = node.at(expression)
        entity = parse_referenceable(value, location, context, parse_path_item, "PathItem")
        context.assign(callback, "path_items", entity, ComponentKind.PATH_ITEM, location, key=expression)
    return callback


def parse_operation(node: ObjectNode) -> Operation:
    context = node.context
    operation = Operation(
        tags=node.strings("tags"),
        summary=node.string("summary"),
        description=node.string("description"),
        operation_id=node.string("operationId"),
        deprecated=node.boolean("deprecated", default=False),
        security=parse_security_requirements(node),
        servers=parse_servers(node),
    )
    docs = node.child("externalDocs")
    if docs is not None:
        operation.external_docs = parse_external_docs(docs)

    _assign_list(node, "parameters", operation, "parameters", ComponentKind.PARAMETER, parse_parameter, "Parameter")

    if "requestBody" in node:
        location = node.at("requestBody")
        request_body = parse_referenceable(node.value("requestBody"), location, context, parse_request_body, "RequestBody")
        context.assign(operation, "request_body", request_body, ComponentKind.REQUEST_BODY, location)

    # status codes stay strings, "default" included
    for status, value, location in node.entries("responses"):
        if is_extension(status):
            logger.debug("Skipping extension %s at %s", status, location)
            continue
        response = parse_referenceable(value, location, context, parse_response, "Response")
        context.assign(operation, "responses", response, ComponentKind.RESPONSE, location, key=str(status))

    _assign_map(node, "callbacks", operation, "callbacks", ComponentKind.CALLBACK, parse_callback, "Callback")
    return operation


def parse_path_item(node: ObjectNode) -> PathItem:
    path_item = PathItem(
        summary=node.string("summary"),
        description=node.string("description"),
        servers=parse_servers(node),
    )
    for method in HTTP_METHODS:
        operation = node.child(method)
        if operation is not None:
            setattr(path_item, method, parse_operation(operation))
    _assign_list(node, "parameters", path_item, "parameters", ComponentKind.PARAMETER, parse_parameter, "Parameter")
    return path_item


def parse_security_scheme(node: ObjectNode) -> SecurityScheme:
    scheme_type = node.require_string("SecurityScheme", "type")
    scheme = SecurityScheme(
        type=scheme_type,
        description=node.string("description"),
        name=node.string("name"),
        location=node.string("in"),
        scheme=node.string("scheme"),
        bearer_format=node.string("bearerFormat"),
        open_id_connect_url=node.string("openIdConnectUrl"),
    )

    conditional = {
        "apiKey": (("name", scheme.name), ("in", scheme.location)),
        "http": (("scheme", scheme.scheme),),
        "oauth2": (("flows", node.value("flows")),),
        "openIdConnect": (("openIdConnectUrl", scheme.open_id_connect_url),),
    }
    for prop, value in conditional.get(scheme_type, ()):
        if value is None:
            node.context.missing("SecurityScheme", prop, node.location)

    flows = node.child("flows")
    if flows is not None:
        scheme.flows = parse_oauth_flows(flows)
    return scheme


COMPONENT_PARSERS: dict[ComponentKind, tuple[Callable[[ObjectNode], Any], str]] = {
    ComponentKind.RESPONSE: (parse_response, "Response"),
    ComponentKind.PARAMETER: (parse_parameter, "Parameter"),
    ComponentKind.EXAMPLE: (parse_example, "Example"),
    ComponentKind.REQUEST_BODY: (parse_request_body, "RequestBody"),
    ComponentKind.HEADER: (parse_header, "Header"),
    ComponentKind.SECURITY_SCHEME: (parse_security_scheme, "SecurityScheme"),
    ComponentKind.LINK: (parse_link, "Link"),
    ComponentKind.CALLBACK: (parse_callback, "Callback"),
    ComponentKind.PATH_ITEM: (parse_path_item, "PathItem"),
}


def parse_components(node: ObjectNode) -> Components:
    components = Components()
    for name, value, location in node.entries(ComponentKind.SCHEMA.value):
        assign_schema(components, "schemas", value, location, node.context, key=name)

    for kind, (parse, of) in COMPONENT_PARSERS.items():
        _assign_map(node, kind.value, components, kind.attribute, kind, parse, of)

    logger.debug(
        "Read components: %s",
        {kind.value: len(getattr(components, kind.attribute)) for kind in ComponentKind},
    )
    return components
