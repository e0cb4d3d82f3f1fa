from pathlib import Path

import pytest

from apibake.errors import MalformedInputError
from apibake.loader import collect_input_files, load_spec, section_name_for
from apibake.utils import deep_override, resolve_pointer

FIXTURES = Path(__file__).parent / "fixtures"


class TestCollectInputFiles:
    def test_directory_children_in_name_order(self):
        files, errors = collect_input_files([FIXTURES])
        assert [f.name for f in files] == [
            "broken.yaml",
            "demo.json",
            "petstore.yaml",
            "store.yaml",
            "swagger2.json",
        ]
        assert errors == []

    def test_explicit_files_keep_argument_order(self):
        files, _ = collect_input_files([FIXTURES / "store.yaml", FIXTURES / "demo.json"])
        assert [f.name for f in files] == ["store.yaml", "demo.json"]

    def test_other_extensions_are_skipped(self):
        files, errors = collect_input_files([FIXTURES / "notes.txt"])
        assert files == []
        assert errors == []

    def test_missing_path_is_reported(self, tmp_path):
        missing = tmp_path / "nope.yaml"
        files, errors = collect_input_files([missing])
        assert files == []
        assert errors == [f"ERROR: file or folder doesn't exist: {missing}"]


class TestLoadSpec:
    def test_json(self):
        spec = load_spec(FIXTURES / "demo.json")
        assert spec["openapi"] == "3.0.0"

    def test_yaml(self):
        spec = load_spec(FIXTURES / "petstore.yaml")
        assert spec["info"]["title"] == "Swagger Petstore"

    def test_broken_yaml(self):
        with pytest.raises(MalformedInputError):
            load_spec(FIXTURES / "broken.yaml")

    def test_top_level_must_be_object(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(MalformedInputError):
            load_spec(path)

    def test_yml_extension_uses_yaml(self, tmp_path):
        path = tmp_path / "api.yml"
        path.write_text("openapi: 3.0.1\n")
        assert load_spec(path) == {"openapi": "3.0.1"}

    def test_non_utf8_is_malformed(self, tmp_path):
        path = tmp_path / "latin.yaml"
        path.write_bytes(b"openapi: 3.0.0\ninfo:\n  title: Caf\xe9\n")
        with pytest.raises(MalformedInputError, match="latin.yaml"):
            load_spec(path)


class TestSectionName:
    def test_stem_capitalized(self):
        assert section_name_for(Path("specs/petstore.yaml")) == "Petstore"


class TestUtils:
    def test_deep_override(self):
        target = {"a": {"b": 1, "c": 2}, "d": [1]}
        assert deep_override(target, {"a": {"b": 5}, "d": [2, 3]}) == {"a": {"b": 5, "c": 2}, "d": [2, 3]}

    def test_resolve_pointer(self):
        doc = {"paths": {"/pets/{id}": {"get": {"parameters": [{"name": "id"}]}}}}
        assert resolve_pointer(doc, "#/paths/~1pets~1{id}/get/parameters/0") == {"name": "id"}
        assert resolve_pointer(doc, "#/paths/missing") is None
        assert resolve_pointer(doc, "other.yaml#/x") is None
