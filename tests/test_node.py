import pytest

from openapi_graph.diagnostics import DiagnosticKind
from openapi_graph.exceptions import TypeMismatchError
from openapi_graph.parser.context import DeserializationContext
from openapi_graph.parser.node import (
    ObjectNode,
    json_kind,
    try_array,
    try_bool,
    try_integer,
    try_number,
    try_object,
    try_string,
)


def _node(data: dict) -> ObjectNode:
    return ObjectNode(data, "#", DeserializationContext())


class TestTryFunctions:
    def test_absent_key_is_none(self):
        assert try_string({}, "title") is None
        assert try_object({}, "info") is None
        assert try_array({}, "tags") is None

    def test_json_null_is_treated_as_absent(self):
        assert try_string({"title": None}, "title") is None

    def test_present_values(self):
        node = {"s": "x", "o": {"a": 1}, "a": [1], "n": 1.5, "b": False}
        assert try_string(node, "s") == "x"
        assert try_object(node, "o") == {"a": 1}
        assert try_array(node, "a") == [1]
        assert try_number(node, "n") == 1.5
        assert try_bool(node, "b") is False

    def test_wrong_kind_raises_type_mismatch(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            try_object({"info": "not an object"}, "info")
        assert exc_info.value.details["expected"] == "object"
        assert exc_info.value.details["actual"] == "string"

    def test_boolean_is_not_a_number(self):
        with pytest.raises(TypeMismatchError):
            try_number({"minimum": True}, "minimum")

    def test_integer_accepts_integral_floats(self):
        assert try_integer({"minLength": 3.0}, "minLength") == 3
        with pytest.raises(TypeMismatchError):
            try_integer({"minLength": 3.5}, "minLength")

    def test_integer_beyond_float_range(self):
        assert try_integer({"maxLength": 10**400}, "maxLength") == 10**400
        assert try_integer({"maxLength": 1e300}, "maxLength") == int(1e300)

    def test_json_kind_names(self):
        assert json_kind(True) == "boolean"
        assert json_kind(3) == "number"
        assert json_kind([]) == "array"
        assert json_kind(None) == "null"


class TestObjectNode:
    def test_mismatch_is_recorded_not_raised(self):
        node = _node({"title": 42})
        assert node.string("title") is None
        diagnostics = node.context.diagnostics.of_kind(DiagnosticKind.TYPE_MISMATCH)
        assert len(diagnostics) == 1
        assert diagnostics[0].location == "#/title"

    def test_child_location_escapes_tokens(self):
        node = _node({"paths": {"/pets/{id}": {}}})
        assert node.child("paths").location == "#/paths"
        entries = list(node.entries("paths"))
        assert entries[0][0] == "/pets/{id}"
        assert entries[0][2] == "#/paths/~1pets~1{id}"

    def test_items_yield_indexed_locations(self):
        node = _node({"tags": ["a", "b"]})
        assert [(i, loc) for i, _, loc in node.items("tags")] == [(0, "#/tags/0"), (1, "#/tags/1")]

    def test_strings_skips_non_strings(self):
        node = _node({"required": ["id", 3, "name"]})
        assert node.strings("required") == ["id", "name"]
        assert len(node.context.diagnostics) == 1

    def test_boolean_default(self):
        node = _node({})
        assert node.boolean("deprecated", default=False) is False
        assert node.boolean("deprecated") is None

    def test_contains_ignores_null(self):
        node = _node({"a": None, "b": 0})
        assert "a" not in node
        assert "b" in node
