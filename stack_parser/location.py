"""Split ``file:line:column`` tokens found at the end of stack lines."""

import math
import re

DECIMAL = re.compile(r'[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?')
HEXADECIMAL = re.compile(r'0[xX][0-9a-fA-F]+')


def _is_number(value: str) -> bool:
    # ASCII digits only, as browsers read numbers; "1_0" and full-width digits are not numbers
    value = value.strip()
    if HEXADECIMAL.fullmatch(value):
        return True
    return DECIMAL.fullmatch(value) is not None and math.isfinite(float(value))


def extract_location(url_like: str) -> tuple:
    """
    Separate line and column numbers from a URL-like string.

    Returns ``(path, line, column)``; column is ``None`` when the token only
    carries a line. Tokens without a colon (``"(native)"``) give ``()``.
    """
    if ":" not in url_like:
        return ()

    parts = url_like.split(":")
    last_number = parts.pop()
    if _is_number(parts[-1]):
        line_number = parts.pop()
        return ":".join(parts), line_number, last_number
    return ":".join(parts), last_number, None
