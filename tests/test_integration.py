"""Full traversal into a real PdfWriter."""

from io import BytesIO
from pathlib import Path

from apibake.loader import load_spec
from apibake.parser.openapi import OpenApiParser
from apibake.pdf.writer import PdfWriter

FIXTURES = Path(__file__).parent / "fixtures"


def _build(files: list[str], merge_schemas: bool) -> tuple[PdfWriter, OpenApiParser, BytesIO]:
    buf = BytesIO()
    writer = PdfWriter(buf)
    writer.add_title_page("API Spec", "Integration", "2024-01-01")
    parser = OpenApiParser(writer, merge_schemas=merge_schemas)
    for name in files:
        path = FIXTURES / name
        parser.parse(load_spec(path), path.stem.capitalize())
    parser.done()
    return writer, parser, buf


class TestIntegration:
    def test_separate_schema_sections(self):
        writer, _, buf = _build(["demo.json", "petstore.yaml"], merge_schemas=False)

        assert buf.getvalue().startswith(b"%PDF")
        assert {"Demo:Pet", "Petstore:Pet", "Petstore:Pets", "Petstore:Status"} <= writer.anchors
        assert writer.links <= writer.anchors
        assert writer.outline_entries[:4] == [(0, "Demo"), (1, "GET /pets"), (1, "Schemas"), (2, "Pet")]
        assert writer.page_labels[0] == ""
        assert "Schemas" in writer.page_labels

    def test_merged_schemas(self):
        writer, parser, buf = _build(["petstore.yaml", "store.yaml"], merge_schemas=True)

        assert buf.getvalue().startswith(b"%PDF")
        assert writer.outline_entries.count((1, "Pet")) == 1
        assert (0, "Schemas") in writer.outline_entries
        assert "schemas:Pet" in writer.anchors
        assert writer.page_labels[-1] == "Schemas"
        # missing Owner is reported once per section it appears in
        assert [type(w).__name__ for w in parser.warnings] == [
            "UnresolvedReferenceWarning",
            "DuplicateSchemaWarning",
            "UnresolvedReferenceWarning",
        ]
