"""State shared by the deserializers during one run.

The context carries the strict policy, the diagnostics accumulator and the
list of reference slots: every place a ``$ref`` placeholder was put,
together with the component kind it has to resolve to.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from openapi_graph.diagnostics import DiagnosticKind, Diagnostics
from openapi_graph.exceptions import MissingRequiredPropertyError
from openapi_graph.model.schema import Reference
from openapi_graph.options import ReaderOptions, RefSiblingPolicy
from .node import ObjectNode, json_kind


class ComponentKind(str, Enum):
    """The named registries of the Components object, by their JSON name."""

    SCHEMA = "schemas"
    RESPONSE = "responses"
    PARAMETER = "parameters"
    EXAMPLE = "examples"
    REQUEST_BODY = "requestBodies"
    HEADER = "headers"
    SECURITY_SCHEME = "securitySchemes"
    LINK = "links"
    CALLBACK = "callbacks"
    PATH_ITEM = "pathItems"

    @property
    def attribute(self) -> str:
        """Name of the matching Components field."""
        return _ATTRIBUTES[self]


_ATTRIBUTES = {
    ComponentKind.SCHEMA: "schemas",
    ComponentKind.RESPONSE: "responses",
    ComponentKind.PARAMETER: "parameters",
    ComponentKind.EXAMPLE: "examples",
    ComponentKind.REQUEST_BODY: "request_bodies",
    ComponentKind.HEADER: "headers",
    ComponentKind.SECURITY_SCHEME: "security_schemes",
    ComponentKind.LINK: "links",
    ComponentKind.CALLBACK: "callbacks",
    ComponentKind.PATH_ITEM: "path_items",
}


@dataclass
class ReferenceSlot:
    """A place in the graph currently holding a Reference placeholder.

    ``key`` is ``None`` for a plain attribute, a name for a dict entry and an
    index for a list element.
    """

    reference: Reference
    owner: Any
    field: str
    key: str | int | None
    kind: ComponentKind
    location: str

    def fill(self, target: Any) -> None:
        if self.key is None:
            setattr(self.owner, self.field, target)
        else:
            getattr(self.owner, self.field)[self.key] = target


class DeserializationContext:
    def __init__(self, options: ReaderOptions | None = None):
        self.options = options or ReaderOptions()
        self.diagnostics = Diagnostics()
        self.slots: list[ReferenceSlot] = []

    @property
    def strict(self) -> bool:
        return self.options.strict

    @property
    def merge_ref_siblings(self) -> bool:
        return self.options.ref_siblings == RefSiblingPolicy.MERGE

    def missing(self, entity: str, prop: str, location: str, default: Any = None) -> Any:
        """Apply the strict policy to a missing REQUIRED property.

        Strict mode raises MissingRequiredPropertyError; lenient mode records a
        warning and hands back ``default`` for the caller to use.
        """
        message = f"The REQUIRED {entity}.{prop} property is not available"
        if self.strict:
            raise MissingRequiredPropertyError(
                message, details={"location": location, "entity": entity, "property": prop}
            )
        self.diagnostics.add(DiagnosticKind.MISSING_REQUIRED_PROPERTY, message, location)
        return default

    def mismatch(self, message: str, location: str) -> None:
        self.diagnostics.add(DiagnosticKind.TYPE_MISMATCH, message, location)

    def as_object(self, value: Any, location: str, of: str) -> ObjectNode | None:
        """Wrap a JSON object as an ObjectNode; anything else is a recorded mismatch."""
        if isinstance(value, dict):
            return ObjectNode(value, location, self)
        self.mismatch(f"{of} must be a JSON object, got {json_kind(value)}", location)
        return None

    def read_reference(self, node: ObjectNode) -> Reference:
        ref = node.string("$ref")
        return Reference(
            ref=ref if ref is not None else "",
            summary=node.string("summary"),
            description=node.string("description"),
        )

    def assign(
        self,
        owner: Any,
        field: str,
        value: Any,
        kind: ComponentKind,
        location: str,
        key: str | None = None,
    ) -> None:
        """Put ``value`` into a slot of ``owner`` and track it if it is a placeholder.

        List fields are appended to, dict fields need ``key``, anything else
        is set as an attribute.
        """
        if value is None:
            return
        current = getattr(owner, field)
        if isinstance(current, list):
            current.append(value)
            key = len(current) - 1
        elif isinstance(current, dict):
            current[key] = value
        else:
            setattr(owner, field, value)
            key = None

        if isinstance(value, Reference):
            self.slots.append(ReferenceSlot(value, owner, field, key, kind, location))
