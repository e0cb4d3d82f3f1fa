"""Paginated PDF layout on top of a reportlab canvas.

PdfWriter keeps a text cursor, a style stack, the outline nesting and the
section label of every page. Content flows top to bottom and breaks onto a
new page at the bottom margin. The total page count appears in the footer of
every page through one form XObject that finish() fills in, so pages are
never revisited.
"""

import os
from contextlib import contextmanager

import click
from reportlab.lib import colors, pagesizes
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from apibake import __version__
from apibake.config import DEFAULT_FOOTER, FooterOption, PdfStyle
from apibake.errors import OutputError, WriterClosedError
from apibake.parser.base import DataField
from apibake.pdf.outline import Outline
from apibake.pdf.style import StyleStack, TextStyle
from apibake.pdf.text import wrap_text

LEADING = 1.2
HEADER_GAP = 0.7
PARA_GAP = 0.5
FOOTER_FONT_SIZE = 9
PAGE_COUNT_FORM = "apibakePageCount"
BADGE_PADDING = 3

PAGE_SIZES = {
    "A4": pagesizes.A4,
    "LETTER": pagesizes.LETTER,
    "LEGAL": pagesizes.LEGAL,
}


class PdfWriter:
    """Stateful document builder used by the OpenAPI traversal."""

    def __init__(self, output, style: PdfStyle | None = None, footer: frozenset[FooterOption] | None = None):
        self.style = style or PdfStyle()
        self.footer = DEFAULT_FOOTER if footer is None else frozenset(footer)

        fmt = self.style.format
        self.page_width, self.page_height = PAGE_SIZES[fmt.page_size]
        self._left = fmt.horizontal_margin
        self._right = self.page_width - fmt.horizontal_margin
        self._top = self.page_height - fmt.vertical_margin
        self._bottom = fmt.vertical_margin

        target = os.fspath(output) if isinstance(output, (str, os.PathLike)) else output
        self._canvas = canvas.Canvas(target, pagesize=(self.page_width, self.page_height))
        self._canvas.setCreator(f"apibake {__version__}")

        self._styles = StyleStack(
            TextStyle(
                font=self.style.font.main.norm,
                font_size=self.style.font.base_size,
                fill_color=self.style.color.main,
                left_margin=self._left,
            )
        )
        self._outline = Outline()
        self._outline_keys = 0

        self.section_label = ""
        self.page_labels: list[str] = []
        self.anchors: set[str] = set()
        self.links: set[str] = set()

        self._page_open = False
        self._y = self._top
        self._line_x: float | None = None
        self._baseline = 0.0
        self._line_height = 0.0
        self._finished = False

    # -- state ----------------------------------------------------------------

    @property
    def current_style(self) -> TextStyle:
        return self._styles.current

    @property
    def style_depth(self) -> int:
        return self._styles.depth

    @property
    def outline_path(self) -> list[str]:
        return self._outline.path

    @property
    def outline_entries(self) -> list[tuple[int, str]]:
        return list(self._outline.entries)

    @property
    def page_count(self) -> int:
        return len(self.page_labels)

    @property
    def finished(self) -> bool:
        return self._finished

    def push_style(self, **overrides) -> TextStyle:
        style = self._styles.push(**overrides)
        self._apply(style)
        return style

    def pop_style(self) -> TextStyle:
        style = self._styles.pop()
        self._apply(style)
        return style

    @contextmanager
    def styled(self, **overrides):
        """Render the block with overrides on top of the current style."""
        style = self.push_style(**overrides)
        try:
            yield style
        finally:
            self.pop_style()

    def indent_start(self) -> "PdfWriter":
        self.push_style(left_margin=self.style.format.indent_step)
        return self

    def indent_end(self) -> "PdfWriter":
        self.pop_style()
        return self

    # -- pages and sections ---------------------------------------------------

    def add_title_page(self, title: str, subtitle: str = "", date: str | None = None) -> None:
        """Centered title page. Its font sizes do not follow the base size."""
        self._ensure_open()
        self._canvas.setTitle(title)
        if subtitle:
            self._canvas.setSubject(subtitle)

        self._new_page()
        self._y = self.page_height * 0.7
        with self.styled(font=self.style.font.main.bold, font_size=20):
            self.text(title, align="center")
        if subtitle:
            self.para_break()
            with self.styled(font_size=14):
                self.text(subtitle, align="center")
        if date:
            self.line_break(3)
            with self.styled(font_size=12, fill_color=self.style.color.secondary):
                self.text(date, align="center")

    def new_section(self, label: str) -> None:
        """Start a new page with the base style; label goes into the page decorations."""
        self._ensure_open()
        self.section_label = label
        self._styles.reset()
        self._new_page()

    # -- text primitives ------------------------------------------------------

    def text(
        self,
        value: str,
        continued: bool = False,
        link: str | None = None,
        destination: str | None = None,
        align: str = "left",
        underline: bool = False,
    ) -> "PdfWriter":
        """Write wrapped text at the cursor.

        continued keeps the line open so the next call goes on the same line.
        link makes the text jump to an anchor; destination registers an anchor
        at the first line.
        """
        self._ensure_open()
        style = self.current_style
        start_x = self._line_x if self._line_x is not None else style.left_margin
        lines = wrap_text(str(value), style.font, style.font_size, self._right - start_x, self._right - style.left_margin)

        for index, line in enumerate(lines):
            if index > 0:
                self._close_line()
            self._draw(line, align, link, destination if index == 0 else None, underline)

        if not continued:
            self._close_line()
        return self

    def line_break(self, lines: float = 1) -> "PdfWriter":
        self._close_line()
        self._y -= lines * self.current_style.font_size * LEADING
        return self

    def para_break(self) -> "PdfWriter":
        return self.line_break(PARA_GAP)

    def text_ref(self, value: str, anchor: str | None = None, continued: bool = False) -> "PdfWriter":
        """Highlighted text, a clickable jump to anchor when one is given."""
        with self.styled(fill_color=self.style.color.highlight):
            self.text(value, continued=continued, link=anchor, underline=anchor is not None)
        return self

    # -- structural blocks ----------------------------------------------------

    def header(self, level: int, value: str, anchor: str | None = None) -> None:
        """Heading sized by level and registered in the outline.

        Raises OutlineStructureError when level skips a nesting level.
        """
        self._outline.check(level)
        key = anchor or self._next_outline_key()
        font_size = max(self.style.font.base_size + 4 - level * 2, self.style.font.base_size - 2)
        with self.styled(fill_color=self.style.color.headers, font=self.style.font.main.bold, font_size=font_size):
            self.text(value, destination=key)
            self.line_break(HEADER_GAP)
        self._add_outline(level, value, key)

    def api_header(self, method: str, path: str, level: int) -> None:
        """Method badge in the method color followed by the endpoint path."""
        self._outline.check(level)
        key = self._next_outline_key()
        font_size = self.style.font.base_size + 2
        font = self.style.font.main.bold

        with self.styled(font=font, font_size=font_size):
            self._open_line()
            x = self.current_style.left_margin
            width = stringWidth(method, font, font_size) + 2 * BADGE_PADDING
            color = colors.toColor(self._method_color(method))
            self._canvas.setFillColor(color)
            self._canvas.roundRect(
                x, self._baseline - font_size * 0.3, width, font_size * 1.3, 2, stroke=0, fill=1
            )
            self._bookmark(key)

            self._line_x = x + BADGE_PADDING
            with self.styled(fill_color="#FFFFFF"):
                self.text(method, continued=True)
            self._line_x += BADGE_PADDING
            with self.styled(fill_color=self.style.color.headers):
                self.text(f"  {path}")
            self.line_break(HEADER_GAP)

        self._add_outline(level, f"{method} {path}", key)

    def sub_header(self, value: str) -> None:
        with self.styled(
            fill_color=self.style.color.sub_headers,
            font=self.style.font.main.bold,
            font_size=self.style.font.base_size,
        ):
            self.text(value)
            self.line_break(HEADER_GAP)

    def para(self, value: str) -> "PdfWriter":
        self.text(value)
        self.para_break()
        return self

    def description(self, value: str) -> None:
        with self.styled(fill_color=self.style.color.secondary):
            self.text(value)
            self.para_break()

    def data_fields(self, fields: list[DataField]) -> None:
        """One `name[?]: type;` line per field with an optional // comment."""
        for field in fields:
            type_text = field.type_text
            self.text(field.display_name, continued=bool(type_text or field.description))
            if type_text:
                self.text(": ", continued=True)
                self.text_ref(type_text, field.type.anchor, continued=bool(field.description))
            if field.description:
                self._trailing_comment(f"// {' '.join(field.description.split())}")

    def content_type(self, mime_type: str) -> None:
        self.text("Content: ", continued=True)
        with self.styled(fill_color=self.style.color.highlight):
            self.text(mime_type)

    def schema_type(self, type_name: str | None, anchor: str | None = None) -> None:
        self.text("Type: ", continued=True)
        self.text_ref(type_name or "-", anchor)
        self.para_break()

    def schema_label(self, label: str) -> None:
        with self.styled(font=self.style.font.main.bold):
            self.text(label)

    def object_schema(self, fields: list[DataField]) -> None:
        self.text("{").indent_start()
        self.data_fields(fields)
        self.indent_end().text("}")

    def enum_values(self, values: list) -> None:
        self.text("Values: ", continued=True)
        with self.styled(fill_color=self.style.color.highlight):
            self.text(", ".join(str(v) for v in values))

    def example(self, name: str, body: str) -> None:
        with self.styled(font=self.style.font.main.bold):
            self.text(f'Example "{name}":')
        self.para_break()
        with self.styled(
            fill_color=self.style.color.secondary,
            font_size=self.style.font.base_size - 2,
            font=self.style.font.mono.bold,
        ):
            self.text(body)
        self.para_break()

    # -- finalization ---------------------------------------------------------

    def finish(self) -> None:
        """Close the last page, fill in the page count and save the PDF."""
        self._ensure_open()
        self._finished = True

        dangling = sorted(self.links - self.anchors)
        if dangling and not self._page_open:
            self._new_page()
        for anchor in dangling:
            click.echo(f"WARNING: link target not found: {anchor}", err=True)
            self._bookmark(anchor)

        if self._page_open:
            self._end_page()

        if self._shows_page_numbers and self.page_count > 1:
            self._canvas.beginForm(PAGE_COUNT_FORM)
            self._canvas.setFont(self.style.font.main.norm, FOOTER_FONT_SIZE)
            self._canvas.setFillColor(colors.toColor(self.style.color.secondary))
            self._canvas.drawString(0, 0, str(self.page_count - 1))
            self._canvas.endForm()

        self._canvas.showOutline()
        try:
            self._canvas.save()
        except OSError as e:
            raise OutputError(f"Cannot write PDF: {e}") from e

    # -- internals ------------------------------------------------------------

    @property
    def _shows_page_numbers(self) -> bool:
        return FooterOption.PAGE_NUMBER in self.footer

    def _ensure_open(self) -> None:
        if self._finished:
            raise WriterClosedError()

    def _apply(self, style: TextStyle) -> None:
        color = colors.toColor(style.fill_color)
        self._canvas.setFont(style.font, style.font_size)
        self._canvas.setFillColor(color)
        self._canvas.setStrokeColor(color)

    def _method_color(self, method: str) -> str:
        scheme = self.style.color
        return {
            "get": scheme.get_method,
            "put": scheme.put_method,
            "post": scheme.post_method,
            "patch": scheme.patch_method,
            "delete": scheme.delete_method,
        }.get(method.lower(), scheme.other_methods)

    def _next_outline_key(self) -> str:
        self._outline_keys += 1
        return f"outline:{self._outline_keys}"

    def _add_outline(self, level: int, title: str, key: str) -> None:
        self._outline.add(level, title)
        self._canvas.addOutlineEntry(title, key, level=level, closed=level > 0)

    def _bookmark(self, key: str) -> None:
        top = self._baseline + self.current_style.font_size if self._line_x is not None else self._y
        self._canvas.bookmarkPage(key, fit="XYZ", left=0, top=top)
        self.anchors.add(key)

    def _new_page(self) -> None:
        if self._page_open:
            self._end_page()
        self.page_labels.append(self.section_label)
        self._page_open = True
        self._y = self._top
        self._line_x = None
        # showPage() resets the graphics state
        self._apply(self.current_style)

    def _end_page(self) -> None:
        self._close_line()
        self._decorate_page(self.page_count - 1)
        self._canvas.showPage()
        self._page_open = False

    def _decorate_page(self, index: int) -> None:
        """Section label top right and 'Page i / N' bottom right, not on the first page."""
        if index == 0:
            return
        c = self._canvas
        font = self.style.font.main.norm
        label = self.page_labels[index]
        c.saveState()
        c.setFont(font, FOOTER_FONT_SIZE)
        c.setFillColor(colors.toColor(self.style.color.secondary))
        if label:
            c.drawRightString(self._right, self.page_height - self.style.format.vertical_margin / 2, label)
        if self._shows_page_numbers:
            reserved = stringWidth("999", font, FOOTER_FONT_SIZE)
            y = self.style.format.vertical_margin / 2
            c.drawRightString(self._right - reserved, y, f"Page {index} / ")
            c.translate(self._right - reserved, y)
            c.doForm(PAGE_COUNT_FORM)
        c.restoreState()

    def _open_line(self) -> None:
        if self._line_x is not None:
            return
        if not self._page_open:
            self._new_page()
        style = self.current_style
        height = style.font_size * LEADING
        if self._y - height < self._bottom:
            self._new_page()
        self._baseline = self._y - style.font_size
        self._line_height = height
        self._line_x = style.left_margin

    def _close_line(self) -> None:
        if self._line_x is None:
            return
        self._y -= self._line_height + self.current_style.line_gap
        self._line_x = None

    def _draw(self, line: str, align: str, link: str | None, destination: str | None, underline: bool) -> None:
        self._open_line()
        style = self.current_style
        width = stringWidth(line, style.font, style.font_size)
        x = self._line_x
        if align == "center":
            x = (style.left_margin + self._right - width) / 2
        elif align == "right":
            x = self._right - width

        if destination:
            self._bookmark(destination)
        self._canvas.drawString(x, self._baseline, line)
        if underline and line:
            self._canvas.line(x, self._baseline - 1.5, x + width, self._baseline - 1.5)
        if link and line:
            self._canvas.linkRect(
                "", link, (x, self._baseline - 2, x + width, self._baseline + style.font_size), relative=0, thickness=0
            )
            self.links.add(link)

        self._line_x = x + width
        self._line_height = max(self._line_height, style.font_size * LEADING)

    def _trailing_comment(self, comment: str) -> None:
        """Right-aligned on the current line when there is room, wrapped after it otherwise."""
        with self.styled(fill_color=self.style.color.secondary):
            style = self.current_style
            start = self._line_x if self._line_x is not None else style.left_margin
            gap = stringWidth("  ", style.font, style.font_size)
            if start + gap + stringWidth(comment, style.font, style.font_size) <= self._right:
                self.text(comment, align="right")
            else:
                self.text(f"  {comment}")
