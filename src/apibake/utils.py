"""Small string and mapping helpers shared by the parser and the CLI."""

from typing import Any


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def deep_override(target: dict, overrides: dict | None) -> dict:
    """Recursively copy values from overrides into target.

    Nested mappings are merged key by key; any other value (lists included)
    replaces the target value. Returns the mutated target.
    """
    if not isinstance(overrides, dict):
        return target
    for key, value in overrides.items():
        if isinstance(value, dict):
            if not isinstance(target.get(key), dict):
                target[key] = {}
            deep_override(target[key], value)
        else:
            target[key] = value
    return target


def resolve_pointer(document: Any, ref: str) -> Any | None:
    """Look up a local JSON pointer such as '#/components/schemas/Pet'.

    Returns None when the pointer is not local or does not resolve.
    """
    if not ref.startswith("#"):
        return None
    node = document
    for raw in ref[1:].split("/")[1:]:
        part = raw.replace("~1", "/").replace("~0", "~")
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            return None
    return node
