import json
import shutil
from pathlib import Path

from click.testing import CliRunner

from apibake import __version__
from apibake.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliBuild:
    def test_build_single_file(self, tmp_path):
        output_file = tmp_path / "api.pdf"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "demo.json"),
            "-o", str(output_file),
            "--title", "Demo API",
        ])

        assert result.exit_code == 0, result.output
        assert output_file.read_bytes().startswith(b"%PDF")
        assert "GET /pets" in result.output

    def test_build_folder(self, tmp_path):
        specs = tmp_path / "specs"
        specs.mkdir()
        for name in ("demo.json", "petstore.yaml", "store.yaml", "notes.txt"):
            shutil.copy(FIXTURES / name, specs / name)
        output_file = tmp_path / "out" / "all.pdf"

        runner = CliRunner()
        result = runner.invoke(main, ["build", str(specs), "-o", str(output_file)])

        assert result.exit_code == 0, result.output
        assert output_file.exists()
        assert "Duplicated schema: Pet" in result.output
        assert "notes.txt" not in result.output

    def test_separate_schemas(self, tmp_path):
        output_file = tmp_path / "api.pdf"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "petstore.yaml"), str(FIXTURES / "store.yaml"),
            "-o", str(output_file),
            "--separate-schemas",
            "--footer", "",
        ])

        assert result.exit_code == 0, result.output
        assert "Duplicated schema" not in result.output

    def test_bad_file_does_not_stop_the_build(self, tmp_path):
        output_file = tmp_path / "api.pdf"
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "swagger2.json"), str(FIXTURES / "broken.yaml"), str(FIXTURES / "demo.json"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 1
        assert output_file.exists()
        assert "Errors summary:" in result.output
        assert "Not supported OpenAPI version: 2.0" in result.output
        assert "broken.yaml" in result.output

    def test_non_utf8_file_does_not_stop_the_build(self, tmp_path):
        latin = tmp_path / "latin.yaml"
        latin.write_bytes(b"openapi: 3.0.0\ninfo:\n  title: Caf\xe9\n")
        output_file = tmp_path / "api.pdf"

        runner = CliRunner()
        result = runner.invoke(main, ["build", str(latin), str(FIXTURES / "demo.json"), "-o", str(output_file)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert output_file.read_bytes().startswith(b"%PDF")
        assert "Errors summary:" in result.output
        assert "Cannot decode latin.yaml" in result.output

    def test_same_file_name_in_two_folders(self, tmp_path):
        for folder in ("a", "b"):
            (tmp_path / folder).mkdir()
            shutil.copy(FIXTURES / "demo.json", tmp_path / folder / "api.json")
        output_file = tmp_path / "api.pdf"

        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(tmp_path / "a" / "api.json"), str(tmp_path / "b" / "api.json"),
            "-o", str(output_file),
            "--separate-schemas",
        ])

        assert result.exit_code == 0, result.output
        assert "Section: Api (2)" in result.output
        assert "Duplicated section name: Api" in result.output

    def test_missing_input(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["build", str(tmp_path / "nope.yaml"), "-o", str(tmp_path / "a.pdf")])

        assert result.exit_code == 1
        assert "doesn't exist" in result.output
        assert "No .json or .yaml files found." in result.output

    def test_unknown_footer_option(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "demo.json"),
            "-o", str(tmp_path / "a.pdf"),
            "--footer", "logo",
        ])

        assert result.exit_code == 2
        assert "Unknown footer option" in result.output

    def test_custom_config(self, tmp_path):
        config = tmp_path / "style.json"
        config.write_text(json.dumps({"format": {"page_size": "A4"}, "font": {"base_size": 11}}))
        output_file = tmp_path / "api.pdf"

        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "demo.json"),
            "-o", str(output_file),
            "--config", str(config),
        ])

        assert result.exit_code == 0, result.output
        assert output_file.exists()

    def test_invalid_config(self, tmp_path):
        config = tmp_path / "style.json"
        config.write_text("[]")

        runner = CliRunner()
        result = runner.invoke(main, [
            "build", str(FIXTURES / "demo.json"),
            "-o", str(tmp_path / "a.pdf"),
            "--config", str(config),
        ])

        assert result.exit_code == 1
        assert "expected a JSON object" in result.output


class TestCliExportConfig:
    def test_export_config(self, tmp_path):
        output_file = tmp_path / "apibake-config.json"
        runner = CliRunner()
        result = runner.invoke(main, ["export-config", "-o", str(output_file)])

        assert result.exit_code == 0
        exported = json.loads(output_file.read_text())
        assert exported["font"]["base_size"] == 10
        assert exported["format"]["page_size"] == "LETTER"


class TestCliVersion:
    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
