import pytest

from openapi_graph import pointer
from openapi_graph.exceptions import MalformedPointerError


class TestParsePointer:
    def test_component_pointer(self):
        assert pointer.parse_pointer("#/components/schemas/Pet") == ("components", "schemas", "Pet")

    def test_root_pointer(self):
        assert pointer.parse_pointer("#") == ()

    def test_escapes_are_decoded(self):
        assert pointer.parse_pointer("#/paths/~1pets~1{id}") == ("paths", "/pets/{id}")
        assert pointer.parse_pointer("#/components/schemas/a~0b") == ("components", "schemas", "a~b")

    def test_percent_encoding_is_decoded(self):
        assert pointer.parse_pointer("#/components/schemas/My%20Pet") == ("components", "schemas", "My Pet")

    @pytest.mark.parametrize("ref", ["", "#components/schemas/Pet", "#/components/schemas/a~2b", "#/a/b~"])
    def test_malformed(self, ref):
        with pytest.raises(MalformedPointerError):
            pointer.parse_pointer(ref)

    def test_external_reference_is_not_parsed(self):
        assert pointer.is_external("other.json#/components/schemas/Pet")
        assert not pointer.is_external("#/components/schemas/Pet")
        with pytest.raises(MalformedPointerError):
            pointer.parse_pointer("https://example.com/schemas.json#/Pet")


class TestBuildLocations:
    def test_append_escapes(self):
        assert pointer.append("#/paths", "/pets", "get") == "#/paths/~1pets/get"

    def test_build_from_root(self):
        assert pointer.build("components", "schemas", "a/b") == "#/components/schemas/a~1b"

    def test_escape_roundtrip_order(self):
        # "~1" literally in a name must not decode to "/"
        assert pointer.unescape(pointer.escape("~1")) == "~1"
