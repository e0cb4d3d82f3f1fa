"""OpenAPI 3.x traversal.

Walks one decoded specification (info, paths -> operations -> parameters /
request body / responses, components -> schemas) and renders it through a
PdfWriter. Several files can be rendered into one document; with
merge_schemas the component schemas of all files are collected and written
once, after the last file, by done().
"""

import json

import click

from apibake.errors import (
    ApiBakeWarning,
    DuplicateSchemaWarning,
    DuplicateSectionWarning,
    InvalidSpecError,
    UnresolvedReferenceWarning,
    UnsupportedVersionError,
    WriterClosedError,
)
from apibake.parser.base import DataField, TypeRef
from apibake.parser.refs import MERGED_SCOPE, SchemaResolver
from apibake.parser.stash import SchemaStash
from apibake.utils import capitalize_first, resolve_pointer

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# schema composition keyword -> (label, connective), checked in this order
COMPOSITIONS = {
    "allOf": ("All of", "and"),
    "anyOf": ("Any of", "or"),
    "oneOf": ("One of", "or"),
}

# a parameter or property without a type falls back to the first member of these
TYPE_FALLBACK_KEYS = ("anyOf", "allOf", "oneOf")

SCHEMAS_HEADER = "Schemas"
EMPTY_BODY = "Empty body."

INFO_KEYS = {"title", "description", "version", "termsOfService", "contact", "license", "summary"}


def _as_dict(value) -> dict:
    return value if isinstance(value, dict) else {}


def _first_of(spec: dict, keys) -> tuple[str, object] | None:
    for key in keys:
        if spec.get(key):
            return key, spec[key]
    return None


def _has_detail(schema: dict | None) -> bool:
    return bool(schema) and bool(_as_dict(schema.get("properties")) or isinstance(schema.get("enum"), list))


def format_example(value) -> str:
    """Objects are pretty-printed as JSON, scalars are shown verbatim."""
    if isinstance(value, (dict, list)):
        return json.dumps(value, indent=2, ensure_ascii=False, default=str)
    return str(value)


class OpenApiParser:
    """Renders OpenAPI documents into a PdfWriter."""

    def __init__(self, writer, merge_schemas: bool = False, show_empty_body: bool = False):
        self.writer = writer
        self.merge_schemas = merge_schemas
        self.show_empty_body = show_empty_body
        self.first_header_level = 0
        self.warnings: list[ApiBakeWarning] = []

        self.spec: dict = {}
        self.section_name = ""
        self._resolver = SchemaResolver()
        self._stash = SchemaStash()
        self._reported_refs: set[str] = set()
        self._section_names: set[str] = set()
        self._done = False

    # -- public API -----------------------------------------------------------

    def parse(self, spec: dict, section_name: str | None = None) -> None:
        """Render one specification as a new document section.

        Raises InvalidSpecError / UnsupportedVersionError before anything is
        written, so a rejected file leaves the document untouched.
        """
        if self._done:
            raise WriterClosedError()
        version = self.check_version(spec)

        self.spec = spec
        info = _as_dict(spec.get("info"))
        self.section_name = self._unique_section_name(section_name or str(info.get("title") or "API"))
        schemas = _as_dict(_as_dict(spec.get("components")).get("schemas"))
        scope = MERGED_SCOPE if self.merge_schemas else self.section_name
        self._resolver = SchemaResolver(schemas, scope)
        self._reported_refs = set()

        click.echo(f"Section: {self.section_name} (OpenAPI {version})")
        self.writer.new_section(self.section_name)
        self.writer.header(self.first_header_level, self.section_name)

        if info:
            self._write_info(info)

        paths = _as_dict(spec.get("paths"))
        if paths:
            click.echo("Endpoints:")
            for path, path_spec in paths.items():
                self._write_path(str(path), self._deref(path_spec))

        if schemas:
            if self.merge_schemas:
                self._save_schemas_to_parse_later(schemas)
            else:
                self._write_schemas(schemas, self.first_header_level + 1)

    def done(self) -> None:
        """Write the merged schemas (if any) and finish the document.

        Call once, after the last parse().
        """
        if self._done:
            raise WriterClosedError()
        self._done = True

        if self.merge_schemas and len(self._stash) > 0:
            schemas = self._stash.flush_all()
            self.section_name = SCHEMAS_HEADER
            self._resolver = SchemaResolver(schemas, MERGED_SCOPE)
            self._reported_refs = set()
            self._write_schemas(schemas, self.first_header_level)
        self.writer.finish()

    @staticmethod
    def check_version(spec) -> str:
        if not isinstance(spec, dict):
            raise InvalidSpecError()
        version = spec.get("openapi", spec.get("swagger"))
        if version is None:
            raise InvalidSpecError()
        version = str(version)
        if version.startswith(("1", "2")):
            raise UnsupportedVersionError(version)
        return version

    def _unique_section_name(self, name: str) -> str:
        """Section names scope the schema anchors, so a repeated name gets a ' (n)' suffix."""
        unique = name
        counter = 2
        while unique in self._section_names:
            unique = f"{name} ({counter})"
            counter += 1
        if unique != name:
            self._warn(DuplicateSectionWarning(f"Duplicated section name: {name}, renamed to {unique}"))
        self._section_names.add(unique)
        return unique

    # -- info and paths -------------------------------------------------------

    def _write_info(self, info: dict) -> None:
        title = info.get("title")
        if title and str(title) != self.section_name:
            self.writer.sub_header(str(title))
        if info.get("version") is not None:
            self.writer.para(f"Version: {info['version']}")
        for key in ("summary", "description"):
            if info.get(key):
                self.writer.description(capitalize_first(str(info[key]).strip()))

        if info.get("termsOfService"):
            self.writer.para(f"Terms of service: {info['termsOfService']}")

        contact = _as_dict(info.get("contact"))
        contact_parts = [str(contact[k]) for k in ("name", "email", "url") if contact.get(k)]
        if contact_parts:
            self.writer.para(f"Contact: {', '.join(contact_parts)}")

        license_spec = _as_dict(info.get("license"))
        if license_spec.get("name"):
            license_text = str(license_spec["name"])
            if license_spec.get("url"):
                license_text += f" ({license_spec['url']})"
            self.writer.para(f"License: {license_text}")

        for key, value in info.items():
            if key not in INFO_KEYS and isinstance(value, (str, int, float, bool)):
                self.writer.para(f"{capitalize_first(str(key))}: {value}")
        self.writer.line_break()

    def _write_path(self, path: str, path_spec: dict) -> None:
        shared_params = path_spec.get("parameters")
        for method_name, method_spec in path_spec.items():
            if str(method_name).lower() not in HTTP_METHODS or not isinstance(method_spec, dict):
                continue
            method = str(method_name).upper()
            click.echo(f" - {method} {path}")
            self.writer.api_header(method, path, self.first_header_level + 1)
            self._write_method(method_spec, shared_params)
            self.writer.line_break(2)

    def _write_method(self, method_spec: dict, shared_params=None) -> None:
        if method_spec.get("summary"):
            self.writer.para(capitalize_first(str(method_spec["summary"]).strip()))
        if method_spec.get("description"):
            self.writer.description(capitalize_first(str(method_spec["description"]).strip()))
        if method_spec.get("deprecated") is True:
            self.writer.description("Deprecated.")

        params = self._merge_parameters(shared_params, method_spec.get("parameters"))
        fields = [self._parameter_field(p) for p in params if p.get("name")]
        if fields:
            self.writer.sub_header("Request Parameters:")
            self.writer.indent_start()
            self.writer.data_fields(fields)
            self.writer.indent_end()
            self.writer.line_break()

        body = self._deref(method_spec.get("requestBody"))
        if body:
            self.writer.sub_header("Request Body:")
            self.writer.indent_start()
            self._write_body(body)
            self.writer.indent_end()

        for code, response in _as_dict(method_spec.get("responses")).items():
            self.writer.sub_header(f"Response {code}:")
            self.writer.indent_start()
            self._write_body(self._deref(response))
            self.writer.indent_end()

    # -- parameters -----------------------------------------------------------

    def _merge_parameters(self, shared, own) -> list[dict]:
        """Path-level then operation-level parameters, unique by (name, in).

        A repeated key within one list keeps its first entry; an operation
        parameter replaces a path parameter with the same key.
        """
        merged: dict[tuple, dict] = {}
        for source in (shared, own):
            if not isinstance(source, list):
                continue
            seen = set()
            for raw in source:
                param = self._deref(raw)
                key = (param.get("name"), param.get("in"))
                if key in seen:
                    continue
                seen.add(key)
                merged[key] = param
        return list(merged.values())

    def _parameter_field(self, param: dict) -> DataField:
        type_ref = None
        schema = param.get("schema")
        if isinstance(schema, dict):
            type_ref = self._field_type(schema)
        if type_ref is None or type_ref.is_undefined:
            leaf = _first_of(param, TYPE_FALLBACK_KEYS)
            if leaf and isinstance(leaf[1], list) and leaf[1]:
                type_ref = self._resolve(leaf[1][0])

        required = param.get("required")
        return DataField(
            name=str(param["name"]),
            type=type_ref,
            description=str(param["description"]) if param.get("description") else None,
            required=True if required is None else bool(required),
        )

    def _field_type(self, node: dict) -> TypeRef:
        type_ref = self._resolve(node)
        if type_ref.is_undefined:
            leaf = _first_of(node, TYPE_FALLBACK_KEYS)
            if leaf and isinstance(leaf[1], list) and leaf[1]:
                type_ref = self._resolve(leaf[1][0])
        return type_ref

    # -- bodies ---------------------------------------------------------------

    def _write_body(self, body_spec: dict) -> None:
        descr = body_spec.get("description")
        if descr:
            self.writer.description(capitalize_first(str(descr).strip()))
            self.writer.line_break(0.5)

        content = _as_dict(body_spec.get("content"))
        for mime_type, media in content.items():
            media = _as_dict(media)
            self.writer.content_type(str(mime_type))
            if isinstance(media.get("schema"), dict):
                self._write_schema(media["schema"])
            self._write_examples(media)

        if not content and self.show_empty_body:
            self.writer.para(EMPTY_BODY)
        self.writer.line_break()

    def _write_examples(self, media: dict) -> None:
        for name, example in _as_dict(media.get("examples")).items():
            example = self._deref(example)
            if "value" in example:
                self.writer.example(str(name), format_example(example["value"]))
        if "example" in media:
            self.writer.example("default", format_example(media["example"]))

    # -- schemas --------------------------------------------------------------

    def _save_schemas_to_parse_later(self, schemas: dict) -> None:
        for name in self._stash.stash(schemas):
            self._warn(DuplicateSchemaWarning(f"Duplicated schema: {name}"))

    def _write_schemas(self, schemas: dict, header_level: int) -> None:
        click.echo("Schemas:")
        self.writer.new_section(SCHEMAS_HEADER)
        self.writer.header(header_level, SCHEMAS_HEADER)
        for name, schema in schemas.items():
            click.echo(f" - {name}")
            self.writer.header(header_level + 1, str(name), self._resolver.anchor_for(name))
            self._write_schema(schema, frozenset({name}))
            self.writer.line_break(2)

    def _write_schema(self, schema, expanding: frozenset = frozenset()) -> None:
        """Render a schema node.

        expanding holds the component names whose bodies are being expanded;
        a reference back to one of them is shown as a link only.
        """
        schema = _as_dict(schema)

        composition = _first_of(schema, COMPOSITIONS)
        if composition and isinstance(composition[1], list):
            key, members = composition
            label, connective = COMPOSITIONS[key]
            self.writer.schema_label(f"{label}:")
            for index, member in enumerate(members):
                self.writer.indent_start()
                self._write_schema(member, expanding)
                self.writer.indent_end()
                if index < len(members) - 1:
                    self.writer.para(connective)
            return

        type_ref = self._resolve(schema)
        if not type_ref.is_undefined and type_ref.text != "object":
            self.writer.schema_type(type_ref.text, type_ref.anchor)

        name = type_ref.ref_name
        if name is not None:
            target = self._resolver.lookup(name)
            if type_ref.anchor and name not in expanding and _has_detail(target):
                self._write_schema_body(target, expanding | {name})
            return

        if type_ref.is_array:
            items = _as_dict(schema.get("items"))
            if _has_detail(items) or _first_of(items, COMPOSITIONS):
                self.writer.indent_start()
                self._write_schema(items, expanding)
                self.writer.indent_end()
            return

        self._write_schema_body(schema, expanding)

    def _write_schema_body(self, schema: dict, expanding: frozenset) -> None:
        properties = _as_dict(schema.get("properties"))
        if properties:
            required = schema.get("required")
            fields = [
                self._property_field(name, _as_dict(prop), required)
                for name, prop in properties.items()
            ]
            self.writer.object_schema(fields)
        elif isinstance(schema.get("enum"), list):
            self.writer.line_break(0.5)
            self.writer.enum_values(schema["enum"])

    def _property_field(self, name: str, prop: dict, required) -> DataField:
        return DataField(
            name=str(name),
            type=self._field_type(prop),
            description=str(prop["description"]) if prop.get("description") else None,
            required=name in required if isinstance(required, list) else True,
        )

    # -- references -----------------------------------------------------------

    def _resolve(self, node) -> TypeRef:
        type_ref = self._resolver.resolve(node)
        name = type_ref.ref_name
        if name is not None and type_ref.anchor is None and name not in self._reported_refs:
            self._reported_refs.add(name)
            self._warn(UnresolvedReferenceWarning(f"Schema not found: {name} (in {self.section_name})"))
        return type_ref

    def _deref(self, node) -> dict:
        """Follow local $ref pointers (parameters, bodies, responses, examples, path items)."""
        seen = set()
        while isinstance(node, dict) and isinstance(node.get("$ref"), str):
            ref = node["$ref"]
            if ref in seen:
                return {}
            seen.add(ref)
            target = resolve_pointer(self.spec, ref)
            if target is None:
                self._warn(UnresolvedReferenceWarning(f"Reference not found: {ref}"))
                return {}
            node = target
        return _as_dict(node)

    def _warn(self, warning: ApiBakeWarning) -> None:
        self.warnings.append(warning)
        click.echo(f"WARNING: {warning}", err=True)
