"""Exception hierarchy for openapi-graph.

All errors raised by the library derive from OpenApiGraphError so callers
can catch every library failure with one except clause.
"""

from typing import Any


class OpenApiGraphError(Exception):
    """Base exception for all openapi-graph errors.

    Attributes:
        message: Human-readable error description.
        details: Additional context, e.g. the JSON pointer ``location`` of the
            offending node.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def location(self) -> str:
        return self.details.get("location", "")

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class DocumentLoadError(OpenApiGraphError):
    """The input could not be parsed into a JSON tree."""


class DeserializationError(OpenApiGraphError):
    """Fatal failure that aborts deserialization in strict mode."""


class MissingRequiredPropertyError(DeserializationError):
    """A property the OpenAPI grammar marks as REQUIRED is absent."""


class UnsupportedRootShapeError(DeserializationError):
    """The document root is not a JSON object."""


class TypeMismatchError(OpenApiGraphError):
    """A JSON value is present but of the wrong kind.

    Raised by the node adapter functions; deserializers always catch it and
    record a diagnostic instead of aborting.
    """


class MalformedPointerError(OpenApiGraphError):
    """A ``$ref`` value is not a syntactically valid JSON pointer fragment."""
