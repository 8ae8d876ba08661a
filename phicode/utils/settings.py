"""Symbol table load/save utilities."""
from __future__ import annotations

import json
from typing import Dict, Mapping

from ..transpiler.errors import SymbolFileError


def parse_symbols(text: str) -> Dict[str, str]:
    """Parse a JSON object of ``{symbol: replacement}``.

    Duplicate keys collapse to the last occurrence, as ``json`` does.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SymbolFileError(f"Invalid symbol JSON: {e}") from e
    if not isinstance(data, dict):
        raise SymbolFileError(f"Symbol JSON must be an object, got {type(data).__name__}")
    return data


def load_symbols(path: str) -> Dict[str, str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise SymbolFileError(f"Cannot read symbol file {path}: {e}") from e
    return parse_symbols(text)


def save_symbols(path: str, mapping: Mapping[str, str]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(dict(mapping), f, ensure_ascii=False, indent=2)
