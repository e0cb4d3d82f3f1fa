"""PDF theme configuration and footer options.

The style is a tree of pydantic models. A config file only has to contain the
keys it changes; load_style() lays it over the defaults before validation.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from apibake.errors import ConfigError
from apibake.utils import deep_override

CONFIG_FILE = "apibake-config.json"


class ColorScheme(BaseModel):
    """Colors per semantic role, as '#RRGGBB' or reportlab color names."""

    main: str = "#333333"
    secondary: str = "#6B7B8E"
    highlight: str = "#8A3324"
    headers: str = "#2A4D69"
    sub_headers: str = "#4B86B4"
    get_method: str = "#4A90E2"
    put_method: str = "#6B8E23"
    post_method: str = "#D87F0A"
    patch_method: str = "#C2A000"
    delete_method: str = "#D0021B"
    other_methods: str = "#2A4D69"


class FontFamily(BaseModel):
    norm: str
    bold: str
    italic: str


class FontScheme(BaseModel):
    base_size: float = 10
    main: FontFamily = Field(
        default_factory=lambda: FontFamily(norm="Helvetica", bold="Helvetica-Bold", italic="Helvetica-Oblique")
    )
    mono: FontFamily = Field(
        default_factory=lambda: FontFamily(norm="Courier", bold="Courier-Bold", italic="Courier-Oblique")
    )


class PageFormat(BaseModel):
    indent_step: float = 12
    horizontal_margin: float = 70
    vertical_margin: float = 50
    page_size: Literal["A4", "LETTER", "LEGAL"] = "LETTER"


class PdfStyle(BaseModel):
    """Complete PDF theme."""

    color: ColorScheme = Field(default_factory=ColorScheme)
    font: FontScheme = Field(default_factory=FontScheme)
    format: PageFormat = Field(default_factory=PageFormat)


class FooterOption(str, Enum):
    PAGE_NUMBER = "page-number"


DEFAULT_FOOTER = frozenset({FooterOption.PAGE_NUMBER})


def parse_footer_options(value: str) -> frozenset[FooterOption]:
    """Parse a whitespace separated footer option list. Empty turns the footer off."""
    options = set()
    for item in value.split():
        try:
            options.add(FooterOption(item))
        except ValueError:
            known = " ".join(o.value for o in FooterOption)
            raise ValueError(f'Unknown footer option "{item}", known options: {known}') from None
    return frozenset(options)


def load_style(path: Path) -> PdfStyle:
    """Load a (partial) style config file on top of the defaults."""
    try:
        overrides = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Error in {path}: {e}") from e

    if not isinstance(overrides, dict):
        raise ConfigError(f"Error in {path}: expected a JSON object")

    merged = deep_override(PdfStyle().model_dump(), overrides)
    try:
        return PdfStyle.model_validate(merged)
    except ValidationError as e:
        raise ConfigError(f"Error in {path}: {e}") from e


def export_style(path: Path, style: PdfStyle | None = None) -> None:
    """Write the given (or default) style so it can be edited and passed back via --config."""
    style = style or PdfStyle()
    path.write_text(style.model_dump_json(indent=2) + "\n", encoding="utf-8")
