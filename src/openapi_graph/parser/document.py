"""OpenAPI 3.1 document assembler.

Runs the deserializers over the root object in dependency order (components
before paths) and then resolves every ``$ref`` placeholder.
"""

import logging
from typing import Any

from openapi_graph import pointer
from openapi_graph.diagnostics import DiagnosticKind
from openapi_graph.exceptions import UnsupportedRootShapeError
from openapi_graph.model.document import Components, Document, Info
from .composite import parse_components, parse_path_item, parse_referenceable
from .context import ComponentKind, DeserializationContext
from .leaf import (
    parse_external_docs,
    parse_info,
    parse_security_requirements,
    parse_servers,
    parse_tag,
)
from .node import ObjectNode, is_extension, json_kind
from openapi_graph.resolver import ReferenceResolver

logger = logging.getLogger("openapi_graph.parser.document")


def parse_document(tree: Any, context: DeserializationContext) -> Document:
    """Build and resolve a Document from a parsed JSON tree."""
    if not isinstance(tree, dict):
        message = f"The document root must be a JSON object, got {json_kind(tree)}"
        if context.strict:
            raise UnsupportedRootShapeError(message, details={"location": pointer.ROOT})
        context.diagnostics.add(DiagnosticKind.UNSUPPORTED_ROOT_SHAPE, message, pointer.ROOT)
        return Document(openapi="", info=Info(title="", version=""))

    root = ObjectNode(tree, pointer.ROOT, context)
    logger.debug("Start reading OpenAPI document")

    openapi = root.require_string("Document", "openapi")

    info_node = root.child("info")
    if info_node is not None:
        info = parse_info(info_node)
    else:
        context.missing("Document", "info", root.location)
        info = Info(title="", version="")

    document = Document(
        openapi=openapi,
        info=info,
        json_schema_dialect=root.string("jsonSchemaDialect"),
    )
    document.servers = parse_servers(root)
    document.tags = [parse_tag(tag) for tag in root.objects("tags", of="Tag")]

    components = root.child("components")
    document.components = parse_components(components) if components is not None else Components()

    _parse_path_items(root, "paths", document)
    _parse_path_items(root, "webhooks", document)

    document.security = parse_security_requirements(root)
    docs = root.child("externalDocs")
    if docs is not None:
        document.external_docs = parse_external_docs(docs)

    ReferenceResolver(context).resolve(document)
    logger.debug("Finished reading OpenAPI document with %d diagnostics", len(context.diagnostics))
    return document


def _parse_path_items(root: ObjectNode, key: str, document: Document) -> None:
    context = root.context
    for name, value, location in root.entries(key):
        # the Paths object allows extensions, the webhooks map does not
        if key == "paths" and is_extension(name):
            logger.debug("Skipping extension %s at %s", name, location)
            continue
        path_item = parse_referenceable(value, location, context, parse_path_item, "PathItem")
        context.assign(document, key, path_item, ComponentKind.PATH_ITEM, location, key=name)
