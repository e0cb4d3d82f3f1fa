"""Data models shared by the OpenAPI traversal and the PDF writer.

A TypeRef is what a schema node resolves to for display purposes:
a primitive type name, an array of another TypeRef, a named reference to a
component schema, or the undefined sentinel.
"""

from typing import Annotated, ClassVar, Literal, Union

from pydantic import BaseModel, Field


class PrimitiveType(BaseModel):
    """A plain `type` value such as string or integer."""

    kind: Literal["primitive"] = "primitive"
    name: str

    is_array: ClassVar[bool] = False
    is_undefined: ClassVar[bool] = False

    @property
    def text(self) -> str:
        return self.name

    @property
    def schema_name(self) -> str:
        return self.name

    @property
    def anchor(self) -> str | None:
        return None

    @property
    def ref_name(self) -> str | None:
        return None


class ArrayType(BaseModel):
    """`type: array`; the item's name and anchor show through."""

    kind: Literal["array"] = "array"
    item: "TypeRef"

    is_array: ClassVar[bool] = True
    is_undefined: ClassVar[bool] = False

    @property
    def text(self) -> str:
        return f"Array<{self.item.text}>"

    @property
    def schema_name(self) -> str:
        return self.item.schema_name

    @property
    def anchor(self) -> str | None:
        return self.item.anchor

    @property
    def ref_name(self) -> str | None:
        return self.item.ref_name


class SchemaRefType(BaseModel):
    """A `$ref` to a component schema. anchor is set only when the schema exists."""

    kind: Literal["ref"] = "ref"
    schema_name: str
    anchor: str | None = None

    is_array: ClassVar[bool] = False
    is_undefined: ClassVar[bool] = False

    @property
    def text(self) -> str:
        return self.schema_name

    @property
    def ref_name(self) -> str | None:
        return self.schema_name


class UndefinedType(BaseModel):
    """No type information could be found on the node."""

    kind: Literal["undefined"] = "undefined"

    is_array: ClassVar[bool] = False
    is_undefined: ClassVar[bool] = True

    @property
    def text(self) -> str:
        return "undefined"

    @property
    def schema_name(self) -> str:
        return "undefined"

    @property
    def anchor(self) -> str | None:
        return None

    @property
    def ref_name(self) -> str | None:
        return None


TypeRef = Annotated[
    Union[PrimitiveType, ArrayType, SchemaRefType, UndefinedType],
    Field(discriminator="kind"),
]

ArrayType.model_rebuild()

UNDEFINED = UndefinedType()


class DataField(BaseModel):
    """A named, typed, optionally required and described value.

    Used for object properties and operation parameters alike.
    """

    name: str
    type: TypeRef | None = None
    description: str | None = None
    required: bool = True

    @property
    def display_name(self) -> str:
        return self.name if self.required else f"{self.name}?"

    @property
    def type_text(self) -> str | None:
        if self.type is None or self.type.is_undefined:
            return None
        return f"{self.type.text};"
