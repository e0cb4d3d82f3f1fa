"""Line wrapping based on reportlab font metrics."""

import re

from reportlab.pdfbase.pdfmetrics import stringWidth

_TOKENS = re.compile(r"\s+|\S+")


def wrap_text(text: str, font_name: str, font_size: float, first_width: float, width: float) -> list[str]:
    """Split text into lines that fit the available widths.

    The first line gets first_width (the rest of a line already in progress),
    following lines get width. Explicit newlines and leading indentation are
    kept; words wider than a line are split by characters.
    """
    lines: list[str] = []
    for index, paragraph in enumerate(text.split("\n")):
        limit = first_width if index == 0 else width
        lines.extend(_wrap_paragraph(paragraph, font_name, font_size, limit, width))
    return lines


def _wrap_paragraph(paragraph: str, font_name: str, font_size: float, first_width: float, width: float) -> list[str]:
    def fits(value: str, limit: float) -> bool:
        return stringWidth(value, font_name, font_size) <= limit

    lines: list[str] = []
    current = ""
    limit = first_width

    for token in _TOKENS.findall(paragraph):
        if fits(current + token, limit):
            current += token
            continue

        if token.isspace():
            lines.append(current)
            current, limit = "", width
            continue

        if current or limit < width:
            lines.append(current.rstrip())
            current, limit = "", width

        while not fits(token, limit):
            cut = _longest_fitting_prefix(token, font_name, font_size, limit)
            lines.append(token[:cut])
            token = token[cut:]
        current = token

    lines.append(current)
    return lines


def _longest_fitting_prefix(word: str, font_name: str, font_size: float, limit: float) -> int:
    cut = 1
    while cut < len(word) and stringWidth(word[: cut + 1], font_name, font_size) <= limit:
        cut += 1
    return cut
