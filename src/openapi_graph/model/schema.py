"""JSON Schema 2020-12 model as used by OpenAPI 3.1.

A schema is a tagged sum: either a BooleanSchema or an ObjectSchema. Until
references are resolved, any schema slot may also hold a Reference
placeholder. Consumers should dispatch on the concrete class::

    match schema:
        case BooleanSchema(value=value): ...
        case ObjectSchema(): ...
        case Reference(): ...  # only for dangling references
"""

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel


class GraphModel(BaseModel):
    """Base for every node of the document graph.

    The resolved graph may contain cycles, so nodes compare and hash by
    identity instead of by field values.
    """

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr_args__(self):
        # nested models are shown by class name only; the graph may be cyclic
        for name, value in super().__repr_args__():
            if isinstance(value, GraphModel):
                yield name, _Abbrev(value)
            elif isinstance(value, (dict, list)) and value:
                yield name, _Abbrev(value)
            else:
                yield name, value


class _Abbrev:
    def __init__(self, value: Any) -> None:
        self.value = value

    def __repr__(self) -> str:
        if isinstance(self.value, Reference):
            return f"Reference({self.value.ref!r})"
        if isinstance(self.value, GraphModel):
            return f"{type(self.value).__name__}(...)"
        if isinstance(self.value, dict):
            return "{" + ", ".join(repr(k) for k in self.value) + "}"
        return f"[{len(self.value)} items]"


class Reference(GraphModel):
    """A ``$ref`` placeholder.

    Placeholders only survive resolution when their pointer could not be
    resolved; in that case the slot keeps the Reference as its value.
    """

    ref: str
    summary: str | None = None
    description: str | None = None


class SchemaType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    OBJECT = "object"
    ARRAY = "array"
    BOOLEAN = "boolean"
    NULL = "null"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: Any) -> "SchemaType":
        """Map a JSON ``type`` name (case-sensitive) to a member, UNKNOWN otherwise."""
        if isinstance(name, str) and name != cls.UNKNOWN.value:
            try:
                return cls(name)
            except ValueError:
                pass
        return cls.UNKNOWN


class FormatKind(str, Enum):
    """Known ``format`` values: JSON Schema 2020-12 plus the OpenAPI data type formats."""

    DATE_TIME = "date-time"
    DATE = "date"
    TIME = "time"
    DURATION = "duration"
    EMAIL = "email"
    IDN_EMAIL = "idn-email"
    HOSTNAME = "hostname"
    IDN_HOSTNAME = "idn-hostname"
    IPV4 = "ipv4"
    IPV6 = "ipv6"
    URI = "uri"
    URI_REFERENCE = "uri-reference"
    IRI = "iri"
    IRI_REFERENCE = "iri-reference"
    UUID = "uuid"
    URI_TEMPLATE = "uri-template"
    JSON_POINTER = "json-pointer"
    RELATIVE_JSON_POINTER = "relative-json-pointer"
    REGEX = "regex"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT = "float"
    DOUBLE = "double"
    BYTE = "byte"
    BINARY = "binary"
    PASSWORD = "password"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "FormatKind":
        if name != cls.UNKNOWN.value:
            try:
                return cls(name)
            except ValueError:
                pass
        return cls.UNKNOWN


class Discriminator(GraphModel):
    property_name: str
    mapping: dict[str, str] = {}


class XML(GraphModel):
    name: str | None = None
    namespace: str | None = None
    prefix: str | None = None
    attribute: bool = False
    wrapped: bool = False


class ExternalDocs(GraphModel):
    url: str
    description: str | None = None


class BooleanSchema(GraphModel):
    """``true`` accepts every instance, ``false`` rejects every instance."""

    value: bool


class ObjectSchema(GraphModel):
    """A schema written as a JSON object.

    Every field is optional; ``None`` or an empty collection means the keyword
    was absent. Opaque JSON values (``example``, ``examples``, ``default``,
    ``const``, ``enum`` members) are kept as they were parsed; ``example`` is
    additionally captured as serialized JSON text.
    """

    # identity
    id: str | None = None
    schema_dialect: str | None = None
    anchor: str | None = None
    comment: str | None = None
    title: str | None = None
    description: str | None = None
    defs: dict[str, "SchemaSlot"] = {}

    # JSON Schema 2020-12 keeps ``$ref`` as an applicator beside other keywords
    ref: "SchemaSlot | None" = None

    # type
    type: set[SchemaType] = set()
    format: FormatKind | None = None
    format_name: str | None = None

    # validation
    multiple_of: float | None = None
    maximum: float | None = None
    exclusive_maximum: float | None = None
    minimum: float | None = None
    exclusive_minimum: float | None = None
    max_length: int | None = None
    min_length: int | None = None
    pattern: str | None = None
    max_items: int | None = None
    min_items: int | None = None
    unique_items: bool | None = None
    max_contains: int | None = None
    min_contains: int | None = None
    max_properties: int | None = None
    min_properties: int | None = None
    required: list[str] = []
    dependent_required: dict[str, list[str]] = {}
    enum: list[Any] = []
    const: Any = None

    # composition
    all_of: list["SchemaSlot"] = []
    any_of: list["SchemaSlot"] = []
    one_of: list["SchemaSlot"] = []
    not_: "SchemaSlot | None" = None
    if_: "SchemaSlot | None" = None
    then: "SchemaSlot | None" = None
    else_: "SchemaSlot | None" = None
    dependent_schemas: dict[str, "SchemaSlot"] = {}

    # objects
    properties: dict[str, "SchemaSlot"] = {}
    pattern_properties: dict[str, "SchemaSlot"] = {}
    additional_properties: "SchemaSlot | None" = None
    property_names: "SchemaSlot | None" = None
    unevaluated_properties: "SchemaSlot | None" = None

    # arrays
    items: "SchemaSlot | None" = None
    prefix_items: list["SchemaSlot"] = []
    contains: "SchemaSlot | None" = None
    unevaluated_items: "SchemaSlot | None" = None

    # content
    content_encoding: str | None = None
    content_media_type: str | None = None
    content_schema: "SchemaSlot | None" = None

    # annotations
    default: Any = None
    deprecated: bool | None = None
    read_only: bool | None = None
    write_only: bool | None = None
    examples: list[Any] = []

    # OpenAPI vocabulary
    discriminator: Discriminator | None = None
    xml: XML | None = None
    external_docs: ExternalDocs | None = None
    example: str | None = None

    def is_nullable(self) -> bool:
        return SchemaType.NULL in self.type


Schema = Union[BooleanSchema, ObjectSchema]
SchemaSlot = Union[BooleanSchema, ObjectSchema, Reference]

ObjectSchema.model_rebuild()
