from openapi_graph.model.document import HTTP_METHODS, Document, Info, Operation, PathItem, Response
from openapi_graph.model.schema import FormatKind, ObjectSchema, Reference, SchemaType


class TestGraphModel:
    def test_identity_equality(self):
        a = ObjectSchema(type={SchemaType.STRING})
        b = ObjectSchema(type={SchemaType.STRING})
        assert a == a
        assert a != b
        assert len({a, b, a}) == 2

    def test_defaults_are_not_shared(self):
        a, b = ObjectSchema(), ObjectSchema()
        a.properties["x"] = ObjectSchema()
        assert b.properties == {}

    def test_repr_abbreviates_nested_values(self):
        schema = ObjectSchema(items=Reference(ref="#/components/schemas/Pet"))
        assert "Reference('#/components/schemas/Pet')" in repr(schema)


class TestEnums:
    def test_schema_type_from_name(self):
        assert SchemaType.from_name("integer") == SchemaType.INTEGER
        assert SchemaType.from_name("Integer") == SchemaType.UNKNOWN
        assert SchemaType.from_name(None) == SchemaType.UNKNOWN

    def test_format_from_name(self):
        assert FormatKind.from_name("date-time") == FormatKind.DATE_TIME
        assert FormatKind.from_name("int32") == FormatKind.INT32
        assert FormatKind.from_name("semver") == FormatKind.UNKNOWN

    def test_nullable(self):
        assert ObjectSchema(type={SchemaType.STRING, SchemaType.NULL}).is_nullable()
        assert not ObjectSchema(type={SchemaType.STRING}).is_nullable()


class TestDocumentModel:
    def test_path_item_operations_in_canonical_order(self):
        item = PathItem()
        item.trace = Operation()
        item.get = Operation()
        item.post = Operation()
        assert [method for method, _ in item.operations()] == ["get", "post", "trace"]
        assert HTTP_METHODS[0] == "get"

    def test_default_response(self):
        operation = Operation()
        assert operation.default_response is None
        response = Response(description="err")
        operation.responses["default"] = response
        assert operation.default_response is response

    def test_document_operations_skip_unresolved_path_items(self):
        document = Document(openapi="3.1.0", info=Info(title="t", version="1"))
        item = PathItem()
        item.get = Operation(operation_id="a")
        document.paths["/a"] = item
        document.paths["/b"] = Reference(ref="#/components/pathItems/Missing")
        assert [(path, method) for path, method, _ in document.operations()] == [("/a", "get")]
