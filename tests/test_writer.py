import json
from pathlib import Path

import pytest

from openapi_graph.deserializer import Deserializer
from openapi_graph.model.document import Components
from openapi_graph.model.schema import BooleanSchema, ObjectSchema, Reference, SchemaType
from openapi_graph.writer import SchemaWriter

FIXTURES = Path(__file__).parent / "fixtures"


class TestSchemaWriter:
    def test_boolean_schemas(self):
        writer = SchemaWriter()
        assert writer.write(BooleanSchema(value=True)) is True
        assert writer.write(BooleanSchema(value=False)) is False

    def test_dangling_reference(self):
        assert SchemaWriter().write(Reference(ref="#/components/schemas/Gone")) == {"$ref": "#/components/schemas/Gone"}

    def test_type_array_order(self):
        schema = ObjectSchema(type={SchemaType.NULL, SchemaType.STRING})
        assert SchemaWriter().write(schema) == {"type": ["string", "null"]}

    def test_cyclic_component_written_with_refs(self):
        document = Deserializer().deserialize_path(FIXTURES / "tree.json").document
        components = document.components
        writer = SchemaWriter(components)
        assert writer.write(components.schemas["Node"]) == {
            "type": "object",
            "properties": {"next": {"$ref": "#/components/schemas/Node"}},
        }
        tree = writer.write(components.schemas["TreeNode"])
        assert tree["properties"]["children"] == {"type": "array", "items": {"$ref": "#/components/schemas/TreeNode"}}
        assert tree["properties"]["parent"] == {"$ref": "#/components/schemas/Forest"}

    def test_petstore_schema(self):
        components = Deserializer().deserialize_path(FIXTURES / "petstore.json").document.components
        pet = json.loads(SchemaWriter(components).dumps(components.schemas["Pet"]))
        assert pet["required"] == ["id", "name"]
        assert pet["properties"]["id"] == {"type": "integer", "format": "int64"}
        assert pet["properties"]["name"] == {"type": "string", "minLength": 1}
        assert pet["properties"]["owner"] == {"$ref": "#/components/schemas/Owner"}
        assert pet["discriminator"] == {"propertyName": "petType", "mapping": {"dog": "#/components/schemas/Dog"}}

    def test_merged_ref_to_anonymous_target(self):
        schema = ObjectSchema(ref=ObjectSchema(type={SchemaType.STRING}), description="d")
        assert SchemaWriter().write(schema) == {"description": "d", "allOf": [{"type": "string"}]}

    def test_merged_ref_to_named_target(self):
        pet = ObjectSchema(type={SchemaType.OBJECT})
        components = Components()
        components.schemas["Pet"] = pet
        writer = SchemaWriter(components)
        schema = ObjectSchema(ref=pet, description="d")
        assert writer.write(schema) == {"$ref": "#/components/schemas/Pet", "description": "d"}

    def test_boolean_components_written_inline(self):
        document = Deserializer().deserialize_text(json.dumps({
            "openapi": "3.1.0",
            "info": {"title": "T", "version": "1"},
            "components": {"schemas": {"B": True, "F": False}},
        })).document
        components = document.components
        writer = SchemaWriter(components)
        assert writer.write(components.schemas["B"]) is True
        assert writer.write(components.schemas["F"]) is False

    def test_cycle_without_components_raises(self):
        components = Deserializer().deserialize_path(FIXTURES / "tree.json").document.components
        with pytest.raises(ValueError, match="pass components"):
            SchemaWriter().write(components.schemas["Node"])

    def test_shared_unnamed_schema_written_twice(self):
        shared = ObjectSchema(type={SchemaType.STRING})
        schema = ObjectSchema(properties={"a": shared, "b": shared})
        assert SchemaWriter().write(schema) == {"properties": {"a": {"type": "string"}, "b": {"type": "string"}}}
