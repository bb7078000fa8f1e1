import re
from typing import Any, Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> Optional[int]:
    """
    Lenient integer parsing for form and JSON inputs.

    Accepts ints, truncates floats and takes the leading integer of a string
    ("3 orang" -> 3, "2.5" -> 2). Returns None for anything else.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def format_rupiah(amount: Any) -> str:
    """Formats an amount the id-ID way: `Rp 1.500.000`."""
    value = parse_int(amount) or 0
    return "Rp " + f"{value:,}".replace(",", ".")


def mask_password(record: dict) -> dict:
    return {**record, "password": "••••••••"}
