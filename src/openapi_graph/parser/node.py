"""Typed, optional-property access to a generic JSON tree.

The module level ``try_*`` functions are pure: they return ``None`` when the
key is absent (or holds JSON null) and raise TypeMismatchError when the key
is present with a value of the wrong kind.

ObjectNode binds a JSON object to its location and the running
deserialization context; its lookups record mismatches as diagnostics and
yield ``None`` instead of raising.
"""

from typing import TYPE_CHECKING, Any, Iterator

from openapi_graph import pointer
from openapi_graph.exceptions import TypeMismatchError

if TYPE_CHECKING:
    from .context import DeserializationContext


def json_kind(value: Any) -> str:
    """Name the JSON kind of a parsed value, as used in messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integral(value: Any) -> bool:
    # ints of any size are accepted without converting to float
    if isinstance(value, float):
        return value.is_integer()
    return isinstance(value, int) and not isinstance(value, bool)


def is_extension(key: str) -> bool:
    """True for specification extension keys (``x-...``)."""
    return key.startswith("x-")


def _lookup(node: dict, key: str, expected: str, accept) -> Any:
    value = node.get(key)
    if value is None:
        return None
    if not accept(value):
        raise TypeMismatchError(
            f"'{key}' must be a JSON {expected}, got {json_kind(value)}",
            details={"key": key, "expected": expected, "actual": json_kind(value)},
        )
    return value


def try_object(node: dict, key: str) -> dict | None:
    return _lookup(node, key, "object", lambda v: isinstance(v, dict))


def try_array(node: dict, key: str) -> list | None:
    return _lookup(node, key, "array", lambda v: isinstance(v, list))


def try_string(node: dict, key: str) -> str | None:
    return _lookup(node, key, "string", lambda v: isinstance(v, str))


def try_number(node: dict, key: str) -> int | float | None:
    return _lookup(node, key, "number", is_number)


def try_integer(node: dict, key: str) -> int | None:
    value = _lookup(node, key, "integer", _is_integral)
    return None if value is None else int(value)


def try_bool(node: dict, key: str) -> bool | None:
    return _lookup(node, key, "boolean", lambda v: isinstance(v, bool))


def try_value(node: dict, key: str) -> Any:
    """Any JSON value except null."""
    return node.get(key)


class ObjectNode:
    """A JSON object together with its location in the document."""

    def __init__(self, data: dict, location: str, context: "DeserializationContext"):
        self.data = data
        self.location = location
        self.context = context

    def __contains__(self, key: str) -> bool:
        return self.data.get(key) is not None

    def at(self, key: str | int) -> str:
        return pointer.append(self.location, key)

    def _try(self, lookup, key: str):
        try:
            return lookup(self.data, key)
        except TypeMismatchError as e:
            self.context.mismatch(e.message, self.at(key))
            return None

    def string(self, key: str) -> str | None:
        return self._try(try_string, key)

    def number(self, key: str) -> int | float | None:
        return self._try(try_number, key)

    def integer(self, key: str) -> int | None:
        return self._try(try_integer, key)

    def boolean(self, key: str, default: bool | None = None) -> bool | None:
        value = self._try(try_bool, key)
        return default if value is None else value

    def value(self, key: str) -> Any:
        return try_value(self.data, key)

    def array(self, key: str) -> list | None:
        return self._try(try_array, key)

    def require_string(self, entity: str, key: str) -> str:
        """Read a REQUIRED string property, applying the strict policy when absent."""
        value = self.string(key)
        if value is None:
            return self.context.missing(entity, key, self.location, default="")
        return value

    def child(self, key: str) -> "ObjectNode | None":
        value = self._try(try_object, key)
        if value is None:
            return None
        return ObjectNode(value, self.at(key), self.context)

    def entries(self, key: str) -> Iterator[tuple[str, Any, str]]:
        """Yield ``(name, value, location)`` for each member of an object-valued property."""
        value = self._try(try_object, key)
        if not value:
            return
        base = self.at(key)
        for name, item in value.items():
            yield name, item, pointer.append(base, name)

    def items(self, key: str) -> Iterator[tuple[int, Any, str]]:
        """Yield ``(index, value, location)`` for each element of an array-valued property."""
        value = self._try(try_array, key)
        if not value:
            return
        base = self.at(key)
        for index, item in enumerate(value):
            yield index, item, pointer.append(base, index)

    def objects(self, key: str, of: str) -> Iterator["ObjectNode"]:
        """Like items(), keeping only JSON objects; other elements are recorded as mismatches."""
        for _, item, location in self.items(key):
            node = self.context.as_object(item, location, of)
            if node is not None:
                yield node

    def strings(self, key: str) -> list[str]:
        result = []
        for _, item, location in self.items(key):
            if isinstance(item, str):
                result.append(item)
            else:
                self.context.mismatch(f"expected a JSON string, got {json_kind(item)}", location)
        return result

    def string_map(self, key: str) -> dict[str, str]:
        result = {}
        for name, item, location in self.entries(key):
            if isinstance(item, str):
                result[name] = item
            else:
                self.context.mismatch(f"expected a JSON string, got {json_kind(item)}", location)
        return result
