import math
import re
import uuid
from typing import Any

TRAILING_ZEROS = re.compile(r'0{0,4}$')


def generate_guid() -> str:
    return str(uuid.uuid4())


def is_number(value: Any) -> bool:
    """True for finite numbers and numeric strings."""
    if isinstance(value, bool) or value is None:
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def ms_to_timespan(total_ms: Any) -> str:
    """Format milliseconds as a "d.hh:mm:ss.fff" timespan."""
    if not is_number(total_ms) or float(total_ms) < 0:
        total_ms = 0
    total_ms = float(total_ms)

    sec = TRAILING_ZEROS.sub("", f"{(total_ms / 1000) % 60:.7f}", count=1)
    minutes = str(int(total_ms // (1000 * 60)) % 60)
    hours = str(int(total_ms // (1000 * 60 * 60)) % 24)
    days = int(total_ms // (1000 * 60 * 60 * 24))

    if sec.index(".") < 2:
        sec = "0" + sec
    minutes = minutes.zfill(2)
    hours = hours.zfill(2)

    return (f"{days}." if days > 0 else "") + f"{hours}:{minutes}:{sec}"
