from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")


def format_felt(value: int) -> str:
    return f"0x{value:064x}"


def strip_hex_prefix(value: str) -> str:
    value = value.strip()
    if value[:2].lower() == "0x":
        return value[2:]
    return value


def parse_hex(value: str) -> int:
    digits = strip_hex_prefix(value)
    if not _HEX_DIGITS.match(digits):
        raise ValueError(f"Invalid hex value: {value!r}")
    return int(digits, 16)


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)
