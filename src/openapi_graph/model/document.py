"""OpenAPI 3.1 document model.

Slots where OpenAPI permits a Reference Object are typed ``X | Reference``.
After resolution every such slot holds the shared component entity, except
for dangling references which keep their Reference placeholder.
"""

from typing import Iterator, Union

from pydantic import Field

from openapi_graph.model.schema import (
    ExternalDocs,
    GraphModel,
    Reference,
    SchemaSlot,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class Contact(GraphModel):
    name: str | None = None
    url: str | None = None
    email: str | None = None


class License(GraphModel):
    name: str
    identifier: str | None = None
    url: str | None = None


class Info(GraphModel):
    title: str
    version: str
    summary: str | None = None
    description: str | None = None
    terms_of_service: str | None = None
    contact: Contact | None = None
    license: License | None = None


class ServerVariable(GraphModel):
    default: str
    enum: list[str] = []
    description: str | None = None


class Server(GraphModel):
    url: str
    description: str | None = None
    variables: dict[str, ServerVariable] = {}


class Tag(GraphModel):
    name: str
    description: str | None = None
    external_docs: ExternalDocs | None = None


class Example(GraphModel):
    summary: str | None = None
    description: str | None = None
    value: str | None = None  # serialized JSON text
    external_value: str | None = None


# security requirement: scheme name -> required scopes
SecurityRequirement = dict[str, list[str]]


class OAuthFlow(GraphModel):
    authorization_url: str | None = None
    token_url: str | None = None
    refresh_url: str | None = None
    scopes: dict[str, str] = {}


class OAuthFlows(GraphModel):
    implicit: OAuthFlow | None = None
    password: OAuthFlow | None = None
    client_credentials: OAuthFlow | None = None
    authorization_code: OAuthFlow | None = None


class SecurityScheme(GraphModel):
    type: str
    description: str | None = None
    name: str | None = None
    location: str | None = None  # "in"
    scheme: str | None = None
    bearer_format: str | None = None
    flows: OAuthFlows | None = None
    open_id_connect_url: str | None = None


class Header(GraphModel):
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    style: str | None = None
    explode: bool | None = None
    schema_: SchemaSlot | None = Field(default=None, alias="schema")
    example: str | None = None
    examples: dict[str, Example | Reference] = {}
    content: dict[str, "MediaType"] = {}


class Encoding(GraphModel):
    content_type: str | None = None
    headers: dict[str, Header | Reference] = {}
    style: str | None = None
    explode: bool | None = None
    allow_reserved: bool = False


class MediaType(GraphModel):
    schema_: SchemaSlot | None = Field(default=None, alias="schema")
    example: str | None = None
    examples: dict[str, Example | Reference] = {}
    encoding: dict[str, Encoding] = {}


class Parameter(GraphModel):
    name: str
    location: str  # "in": query / header / path / cookie
    description: str | None = None
    required: bool = False
    deprecated: bool = False
    allow_empty_value: bool = False
    style: str | None = None
    explode: bool | None = None
    allow_reserved: bool = False
    schema_: SchemaSlot | None = Field(default=None, alias="schema")
    example: str | None = None
    examples: dict[str, Example | Reference] = {}
    content: dict[str, MediaType] = {}


class RequestBody(GraphModel):
    content: dict[str, MediaType] = {}
    description: str | None = None
    required: bool = False


class Link(GraphModel):
    operation_ref: str | None = None
    operation_id: str | None = None
    parameters: dict[str, str] = {}  # serialized JSON values / runtime expressions
    request_body: str | None = None
    description: str | None = None
    server: Server | None = None


class Response(GraphModel):
    description: str
    headers: dict[str, Header | Reference] = {}
    content: dict[str, MediaType] = {}
    links: dict[str, Link | Reference] = {}


class Callback(GraphModel):
    """Runtime expression -> PathItem."""

    path_items: dict[str, Union["PathItem", Reference]] = {}


class Operation(GraphModel):
    tags: list[str] = []
    summary: str | None = None
    description: str | None = None
    external_docs: ExternalDocs | None = None
    operation_id: str | None = None
    parameters: list[Parameter | Reference] = []
    request_body: RequestBody | Reference | None = None
    responses: dict[str, Response | Reference] = {}
    callbacks: dict[str, Callback | Reference] = {}
    deprecated: bool = False
    security: list[SecurityRequirement] | None = None
    servers: list[Server] = []

    @property
    def default_response(self) -> Response | Reference | None:
        return self.responses.get("default")


class PathItem(GraphModel):
    summary: str | None = None
    description: str | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None
    servers: list[Server] = []
    parameters: list[Parameter | Reference] = []

    def operations(self) -> Iterator[tuple[str, Operation]]:
        """Yield ``(method, operation)`` for every operation present, in canonical order."""
        for method in HTTP_METHODS:
            operation = getattr(self, method)
            if operation is not None:
                yield method, operation


class Components(GraphModel):
    schemas: dict[str, SchemaSlot] = {}
    responses: dict[str, Response | Reference] = {}
    parameters: dict[str, Parameter | Reference] = {}
    examples: dict[str, Example | Reference] = {}
    request_bodies: dict[str, RequestBody | Reference] = {}
    headers: dict[str, Header | Reference] = {}
    security_schemes: dict[str, SecurityScheme | Reference] = {}
    links: dict[str, Link | Reference] = {}
    callbacks: dict[str, Callback | Reference] = {}
    path_items: dict[str, Union["PathItem", Reference]] = {}


class Document(GraphModel):
    openapi: str
    info: Info
    json_schema_dialect: str | None = None
    servers: list[Server] = []
    paths: dict[str, PathItem | Reference] = {}
    webhooks: dict[str, PathItem | Reference] = {}
    components: Components = Field(default_factory=Components)
    security: list[SecurityRequirement] | None = None
    tags: list[Tag] = []
    external_docs: ExternalDocs | None = None

    def operations(self) -> Iterator[tuple[str, str, Operation]]:
        """Yield ``(path, method, operation)`` over all resolved path items."""
        for path, item in self.paths.items():
            if isinstance(item, PathItem):
                for method, operation in item.operations():
                    yield path, method, operation


for _model in (Header, Callback, Operation, PathItem, Components, Document):
    _model.model_rebuild()
