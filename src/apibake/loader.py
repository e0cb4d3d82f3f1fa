"""Input discovery and JSON/YAML decoding of API specification files."""

import json
from pathlib import Path

import yaml

from apibake.errors import MalformedInputError
from apibake.utils import capitalize_first

SPEC_EXTENSIONS = (".json", ".yaml", ".yml")


def collect_input_files(paths: list[Path]) -> tuple[list[Path], list[str]]:
    """Expand directories and keep only JSON/YAML files.

    Directories contribute their direct child files in name order.
    Returns the files to parse and error messages for missing paths.
    """
    files: list[Path] = []
    errors: list[str] = []

    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.iterdir() if p.is_file()))
        elif path.exists():
            files.append(path)
        else:
            errors.append(f"ERROR: file or folder doesn't exist: {path}")

    return [f for f in files if f.suffix.lower() in SPEC_EXTENSIONS], errors


def load_spec(file_path: Path) -> dict:
    """Decode a specification file into a dict.

    JSON files go through json, everything else through yaml.safe_load.
    """
    raw = file_path.read_bytes()

    try:
        text = raw.decode("utf-8")
        if file_path.suffix.lower() == ".json":
            doc = json.loads(text)
        else:
            doc = yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise MalformedInputError(f"Cannot decode {file_path.name}: {e}") from e

    if not isinstance(doc, dict):
        raise MalformedInputError(f"{file_path.name} does not contain a JSON/YAML object")
    return doc


def section_name_for(file_path: Path) -> str:
    """Section label for a file: its stem with a capital first letter."""
    return capitalize_first(file_path.stem)
