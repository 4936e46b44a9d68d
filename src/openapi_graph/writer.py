"""Write schemas back out as JSON-compatible values.

Named component schemas reached from inside another schema are written as
``{"$ref": "#/components/schemas/<name>"}``, which keeps the output finite
for cyclic graphs.
"""

import json
from typing import Any

from openapi_graph import pointer
from openapi_graph.model.document import Components
from openapi_graph.model.schema import BooleanSchema, ObjectSchema, Reference, SchemaType
from openapi_graph.parser.schema import (
    BOOLEAN_KEYWORDS,
    INTEGER_KEYWORDS,
    NUMBER_KEYWORDS,
    SCHEMA_KEYWORDS,
    SCHEMA_LIST_KEYWORDS,
    SCHEMA_MAP_KEYWORDS,
    STRING_KEYWORDS,
)

_TYPE_ORDER = [t for t in SchemaType if t != SchemaType.UNKNOWN]


class SchemaWriter:
    def __init__(self, components: Components | None = None):
        self._names: dict[int, str] = {}
        if components is not None:
            for name, schema in components.schemas.items():
                if not isinstance(schema, Reference):
                    self._names.setdefault(id(schema), pointer.build("components", "schemas", name))

    def write(self, schema: Any) -> Any:
        """Serialize ``schema``; the top-level schema itself is always written inline.

        Raises:
            ValueError: the graph loops back through a schema that has no
                component name to write as ``$ref``.
        """
        self._active: set[int] = set()
        return self._write(schema, top=True)

    def dumps(self, schema: Any, indent: int | None = 2) -> str:
        return json.dumps(self.write(schema), indent=indent, ensure_ascii=False)

    def _write(self, schema: Any, top: bool = False) -> Any:
        if isinstance(schema, Reference):
            return {"$ref": schema.ref}
        if not top and id(schema) in self._names:
            return {"$ref": self._names[id(schema)]}
        if isinstance(schema, BooleanSchema):
            return schema.value
        if isinstance(schema, ObjectSchema):
            if id(schema) in self._active:
                raise ValueError("Cyclic schema without a component name; pass components to write it with $ref")
            self._active.add(id(schema))
            try:
                return self._write_object(schema)
            finally:
                self._active.discard(id(schema))
        raise TypeError(f"Not a schema: {type(schema).__name__}")

    def _write_object(self, schema: ObjectSchema) -> dict[str, Any]:
        out: dict[str, Any] = {}
        inline_ref = None
        if schema.ref is not None:
            target = self._write(schema.ref)
            if isinstance(target, dict) and set(target) == {"$ref"}:
                out["$ref"] = target["$ref"]
            else:
                # an anonymous target cannot be named by a pointer
                inline_ref = target

        types = [t.value for t in _TYPE_ORDER if t in schema.type]
        if len(types) == 1:
            out["type"] = types[0]
        elif types:
            out["type"] = types
        if schema.format_name is not None:
            out["format"] = schema.format_name

        for table in (STRING_KEYWORDS, NUMBER_KEYWORDS, INTEGER_KEYWORDS, BOOLEAN_KEYWORDS):
            for keyword, field in table.items():
                value = getattr(schema, field)
                if value is not None:
                    out[keyword] = value

        if schema.required:
            out["required"] = list(schema.required)
        if schema.dependent_required:
            out["dependentRequired"] = dict(schema.dependent_required)
        if schema.enum:
            out["enum"] = list(schema.enum)
        if schema.const is not None:
            out["const"] = schema.const
        if schema.default is not None:
            out["default"] = schema.default
        if schema.examples:
            out["examples"] = list(schema.examples)
        if schema.example is not None:
            out["example"] = json.loads(schema.example)

        for keyword, field in SCHEMA_KEYWORDS.items():
            value = getattr(schema, field)
            if value is not None:
                out[keyword] = self._write(value)
        for keyword, field in SCHEMA_LIST_KEYWORDS.items():
            values = getattr(schema, field)
            if values:
                out[keyword] = [self._write(value) for value in values]
        for keyword, field in SCHEMA_MAP_KEYWORDS.items():
            values = getattr(schema, field)
            if values:
                out[keyword] = {name: self._write(value) for name, value in values.items()}

        if inline_ref is not None:
            out["allOf"] = [inline_ref] + out.get("allOf", [])

        if schema.discriminator is not None:
            out["discriminator"] = {"propertyName": schema.discriminator.property_name}
            if schema.discriminator.mapping:
                out["discriminator"]["mapping"] = dict(schema.discriminator.mapping)
        if schema.xml is not None:
            out["xml"] = schema.xml.model_dump(exclude_defaults=True)
        if schema.external_docs is not None:
            out["externalDocs"] = schema.external_docs.model_dump(exclude_none=True)
        return out

