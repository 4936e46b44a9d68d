import pytest

from openapi_graph.diagnostics import DiagnosticKind
from openapi_graph.exceptions import MissingRequiredPropertyError
from openapi_graph.options import ReaderOptions
from openapi_graph.parser.context import DeserializationContext
from openapi_graph.parser.leaf import (
    parse_discriminator,
    parse_example,
    parse_info,
    parse_oauth_flows,
    parse_security_requirements,
    parse_server,
    parse_tag,
    parse_xml,
)
from openapi_graph.parser.node import ObjectNode


def _node(data: dict, strict: bool = True) -> ObjectNode:
    return ObjectNode(data, "#/x", DeserializationContext(ReaderOptions(strict=strict)))


class TestInfo:
    def test_full_info(self):
        info = parse_info(_node({
            "title": "Petstore",
            "version": "1.0",
            "termsOfService": "https://example.com/tos",
            "contact": {"name": "Support", "email": "s@example.com"},
            "license": {"name": "Apache 2.0", "url": "https://www.apache.org/licenses/LICENSE-2.0"},
        }))
        assert info.title == "Petstore"
        assert info.terms_of_service == "https://example.com/tos"
        assert info.contact.email == "s@example.com"
        assert info.license.name == "Apache 2.0"

    def test_missing_title_strict_raises(self):
        with pytest.raises(MissingRequiredPropertyError) as exc_info:
            parse_info(_node({"version": "1.0"}))
        assert exc_info.value.details["property"] == "title"
        assert exc_info.value.location == "#/x"

    def test_missing_title_lenient_defaults_to_empty(self):
        node = _node({"version": "1.0"}, strict=False)
        info = parse_info(node)
        assert info.title == ""
        assert info.version == "1.0"
        warnings = node.context.diagnostics.of_kind(DiagnosticKind.MISSING_REQUIRED_PROPERTY)
        assert len(warnings) == 1
        assert "Info.title" in warnings[0].message

    def test_unknown_keys_ignored(self):
        info = parse_info(_node({"title": "t", "version": "v", "x-logo": {"url": "a.png"}}))
        assert info.title == "t"

    def test_license_missing_name_propagates_in_strict_mode(self):
        with pytest.raises(MissingRequiredPropertyError):
            parse_info(_node({"title": "t", "version": "v", "license": {"url": "https://x"}}))


class TestServer:
    def test_server_with_variables(self):
        server = parse_server(_node({
            "url": "https://{env}.example.com",
            "variables": {"env": {"default": "prod", "enum": ["prod", "dev"]}},
        }))
        assert server.url == "https://{env}.example.com"
        assert server.variables["env"].default == "prod"
        assert server.variables["env"].enum == ["prod", "dev"]

    def test_missing_variable_default_lenient(self):
        server = parse_server(_node({"url": "/", "variables": {"v": {}}}, strict=False))
        assert server.variables["v"].default == ""


class TestSmallObjects:
    def test_tag_with_external_docs(self):
        tag = parse_tag(_node({"name": "pets", "externalDocs": {"url": "https://docs"}}))
        assert tag.name == "pets"
        assert tag.external_docs.url == "https://docs"

    def test_discriminator(self):
        discriminator = parse_discriminator(_node({"propertyName": "kind", "mapping": {"a": "#/components/schemas/A"}}))
        assert discriminator.property_name == "kind"
        assert discriminator.mapping == {"a": "#/components/schemas/A"}

    def test_xml_defaults(self):
        xml = parse_xml(_node({"name": "pet"}))
        assert xml.name == "pet"
        assert xml.attribute is False
        assert xml.wrapped is False

    def test_example_value_is_serialized(self):
        example = parse_example(_node({"summary": "s", "value": {"id": 1, "tags": ["a"]}}))
        assert example.value == '{"id": 1, "tags": ["a"]}'


class TestSecurity:
    def test_oauth_flows(self):
        flows = parse_oauth_flows(_node({
            "clientCredentials": {"tokenUrl": "https://t", "scopes": {"read": "Read access"}},
        }))
        assert flows.client_credentials.token_url == "https://t"
        assert flows.client_credentials.scopes == {"read": "Read access"}
        assert flows.implicit is None

    def test_oauth_flow_missing_token_url_strict(self):
        with pytest.raises(MissingRequiredPropertyError):
            parse_oauth_flows(_node({"password": {"scopes": {}}}))

    def test_security_requirements(self):
        requirements = parse_security_requirements(_node({"security": [{"api_key": []}, {"oauth": ["read", "write"]}]}))
        assert requirements == [{"api_key": []}, {"oauth": ["read", "write"]}]

    def test_security_absent_vs_empty(self):
        assert parse_security_requirements(_node({})) is None
        assert parse_security_requirements(_node({"security": []})) == []
