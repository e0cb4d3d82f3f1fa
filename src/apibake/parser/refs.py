"""Schema reference resolution.

Turns a schema node into a TypeRef and decides whether a $ref can be shown as
a link, i.e. whether the named schema exists in the component map in use.
"""

from apibake.parser.base import UNDEFINED, ArrayType, PrimitiveType, SchemaRefType, TypeRef

SCHEMA_REF_PREFIX = "#/components/schemas/"

# anchor scope used when all files share one trailing Schemas section
MERGED_SCOPE = "schemas"


def schema_name_by_ref(ref: str) -> str:
    """'#/components/schemas/Pet' -> 'Pet'. Other refs are returned unchanged."""
    start = ref.find(SCHEMA_REF_PREFIX)
    if start >= 0:
        return ref[start + len(SCHEMA_REF_PREFIX):]
    return ref


class SchemaResolver:
    """Resolves schema nodes against one component-schema map.

    The same anchor_for() builds the anchor of a schema heading and of every
    link pointing at it.
    """

    def __init__(self, schemas: dict | None = None, scope: str = MERGED_SCOPE):
        self.schemas = schemas or {}
        self.scope = scope

    def anchor_for(self, schema_name: str) -> str:
        return f"{self.scope}:{schema_name}"

    def exists(self, schema_name: str) -> bool:
        return schema_name in self.schemas

    def lookup(self, schema_name: str) -> dict | None:
        schema = self.schemas.get(schema_name)
        return schema if isinstance(schema, dict) else None

    def resolve(self, node) -> TypeRef:
        if not isinstance(node, dict):
            return UNDEFINED

        node_type = node.get("type")
        if node_type == "array" and isinstance(node.get("items"), dict):
            return ArrayType(item=self.resolve(node["items"]))

        if node_type:
            if isinstance(node_type, list):
                return PrimitiveType(name=" | ".join(str(t) for t in node_type))
            return PrimitiveType(name=str(node_type))

        ref = node.get("$ref")
        if isinstance(ref, str) and ref:
            name = schema_name_by_ref(ref)
            anchor = self.anchor_for(name) if self.exists(name) else None
            return SchemaRefType(schema_name=name, anchor=anchor)

        return UNDEFINED
