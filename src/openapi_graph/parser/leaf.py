"""Deserializers for the OpenAPI objects that carry no schema or reference slots.

Each ``parse_*`` function takes an ObjectNode and returns the model record.
REQUIRED properties go through the strict policy (see
DeserializationContext.missing); unknown keys are ignored.
"""

import json
from typing import Any

from openapi_graph.model.document import (
    Contact,
    Example,
    Info,
    License,
    OAuthFlow,
    OAuthFlows,
    SecurityRequirement,
    Server,
    ServerVariable,
    Tag,
)
from openapi_graph.model.schema import XML, Discriminator, ExternalDocs
from .node import ObjectNode

# flow name -> (model field, REQUIRED url properties)
OAUTH_FLOWS = {
    "implicit": ("implicit", ("authorizationUrl",)),
    "password": ("password", ("tokenUrl",)),
    "clientCredentials": ("client_credentials", ("tokenUrl",)),
    "authorizationCode": ("authorization_code", ("authorizationUrl", "tokenUrl")),
}


def serialize_value(value: Any) -> str | None:
    """Capture an opaque JSON value as serialized text."""
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False, default=str)


def parse_info(node: ObjectNode) -> Info:
    info = Info(
        title=node.require_string("Info", "title"),
        summary=node.string("summary"),
        description=node.string("description"),
        terms_of_service=node.string("termsOfService"),
        version=node.require_string("Info", "version"),
    )
    contact = node.child("contact")
    if contact is not None:
        info.contact = parse_contact(contact)
    license_node = node.child("license")
    if license_node is not None:
        info.license = parse_license(license_node)
    return info


def parse_contact(node: ObjectNode) -> Contact:
    return Contact(
        name=node.string("name"),
        url=node.string("url"),
        email=node.string("email"),
    )


def parse_license(node: ObjectNode) -> License:
    return License(
        name=node.require_string("License", "name"),
        identifier=node.string("identifier"),
        url=node.string("url"),
    )


def parse_external_docs(node: ObjectNode) -> ExternalDocs:
    return ExternalDocs(
        url=node.require_string("ExternalDocs", "url"),
        description=node.string("description"),
    )


def parse_tag(node: ObjectNode) -> Tag:
    tag = Tag(
        name=node.require_string("Tag", "name"),
        description=node.string("description"),
    )
    docs = node.child("externalDocs")
    if docs is not None:
        tag.external_docs = parse_external_docs(docs)
    return tag


def parse_server(node: ObjectNode) -> Server:
    server = Server(
        url=node.require_string("Server", "url"),
        description=node.string("description"),
    )
    for name, value, location in node.entries("variables"):
        variable = node.context.as_object(value, location, "ServerVariable")
        if variable is not None:
            server.variables[name] = parse_server_variable(variable)
    return server


def parse_servers(node: ObjectNode) -> list[Server]:
    return [parse_server(item) for item in node.objects("servers", of="Server")]


def parse_server_variable(node: ObjectNode) -> ServerVariable:
    return ServerVariable(
        default=node.require_string("ServerVariable", "default"),
        enum=node.strings("enum"),
        description=node.string("description"),
    )


def parse_discriminator(node: ObjectNode) -> Discriminator:
    return Discriminator(
        property_name=node.require_string("Discriminator", "propertyName"),
        mapping=node.string_map("mapping"),
    )


def parse_xml(node: ObjectNode) -> XML:
    return XML(
        name=node.string("name"),
        namespace=node.string("namespace"),
        prefix=node.string("prefix"),
        attribute=node.boolean("attribute", default=False),
        wrapped=node.boolean("wrapped", default=False),
    )


def parse_example(node: ObjectNode) -> Example:
    return Example(
        summary=node.string("summary"),
        description=node.string("description"),
        value=serialize_value(node.value("value")),
        external_value=node.string("externalValue"),
    )


def parse_oauth_flows(node: ObjectNode) -> OAuthFlows:
    flows = OAuthFlows()
    for name, (field, required_urls) in OAUTH_FLOWS.items():
        flow = node.child(name)
        if flow is not None:
            setattr(flows, field, parse_oauth_flow(flow, required_urls))
    return flows


def parse_oauth_flow(node: ObjectNode, required_urls: tuple[str, ...] = ()) -> OAuthFlow:
    urls = {}
    for key in ("authorizationUrl", "tokenUrl"):
        if key in required_urls:
            urls[key] = node.require_string("OAuthFlow", key)
        else:
            urls[key] = node.string(key)

    if "scopes" not in node:
        node.context.missing("OAuthFlow", "scopes", node.location)

    return OAuthFlow(
        authorization_url=urls["authorizationUrl"],
        token_url=urls["tokenUrl"],
        refresh_url=node.string("refreshUrl"),
        scopes=node.string_map("scopes"),
    )


def parse_security_requirements(node: ObjectNode, key: str = "security") -> list[SecurityRequirement] | None:
    """Read a list of security requirements; ``None`` when the property is absent.

    An empty list is meaningful (it removes a top-level requirement), so it is
    kept distinct from absence.
    """
    if node.array(key) is None:
        return None
    requirements = []
    for requirement in node.objects(key, of="SecurityRequirement"):
        entry: SecurityRequirement = {}
        for name in requirement.data:
            entry[name] = requirement.strings(name)
        requirements.append(entry)
    return requirements
