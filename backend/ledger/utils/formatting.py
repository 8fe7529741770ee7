"""
Display formatting helpers shared by templates and notification messages
"""
import math
from typing import Optional, Union


def format_value(value: Optional[Union[float, int]]) -> str:
    """Render a share with at most two decimals and no trailing zeros (20.50 -> 20.5)"""
    if value is None:
        return ""
    text = f"{float(value):.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def parse_number(raw: Optional[str]) -> Optional[float]:
    """Coerce a form field to float; None for blank or non-numeric input"""
    if raw is None:
        return None
    text = str(raw).strip().rstrip("%").strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_int(raw: Optional[str]) -> Optional[int]:
    number = parse_number(raw)
    if number is None or not number.is_integer():
        return None
    return int(number)
