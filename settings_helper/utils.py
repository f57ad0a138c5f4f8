"""Escaping, coercion and file helpers shared by the settings helper."""

from __future__ import annotations

import json
import os
import re
from typing import Any, Dict

from markupsafe import escape

from .logger import logger

_SLASHED = re.compile(r"\\(.?)", re.DOTALL)
_COLLECTION_TYPES = (list, tuple, set, frozenset, dict)


def as_text(value: Any) -> str:
    """Coerce a stored scalar to the string form used in markup and comparisons."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_empty(value: Any) -> bool:
    """True for missing values: None, empty strings and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, _COLLECTION_TYPES):
        return len(value) == 0
    return False


def is_truthy(value: Any) -> bool:
    """Checkbox truthiness: "0", 0, False and empty values are off."""
    if is_empty(value):
        return False
    if isinstance(value, _COLLECTION_TYPES):
        return True
    return as_text(value) not in ("", "0")


def stripslashes(value: str) -> str:
    """Remove one level of backslash quoting (``\\'`` becomes ``'``, ``\\\\`` becomes ``\\``)."""
    return _SLASHED.sub(r"\1", value)


def esc_attr(value: Any) -> str:
    return str(escape(as_text(value)))


def esc_html(value: Any) -> str:
    return str(escape(as_text(value)))


def read_json(path: str) -> Dict[str, Any]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, ValueError) as exc:
        logger.warning(f"SettingsHelper: Failed to read {path}: {exc}")
        return {}
    return data if isinstance(data, dict) else {}


def write_json(path: str, data: Dict[str, Any]) -> None:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    try:
        with open(path, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2)
    except (OSError, TypeError) as exc:
        logger.warning(f"SettingsHelper: Failed to write {path}: {exc}")
        raise


__all__ = [
    "as_text",
    "esc_attr",
    "esc_html",
    "is_empty",
    "is_truthy",
    "read_json",
    "stripslashes",
    "write_json",
]
