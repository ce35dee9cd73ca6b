from dataclasses import dataclass, asdict
from collections.abc import Mapping
from typing import Any, Optional
from abc import ABC, abstractmethod

from .location import extract_location


UNKNOWN = "unknown"
UNKNOWN_LOCATION = (UNKNOWN, UNKNOWN, UNKNOWN)


@dataclass(frozen=True)
class StackFrame:
    function_name: Optional[str]
    args: Optional[tuple[str, ...]]
    file_name: Optional[str]
    line_number: Optional[str]
    column_number: Optional[str]
    frame_index: int

    def to_dict(self) -> dict:
        """Wire form used inside exception telemetry. Missing fields are left out."""
        data = asdict(self)
        wire = {
            "functionName": data["function_name"],
            "args": list(data["args"]) if data["args"] is not None else None,
            "fileName": data["file_name"],
            "lineNumber": data["line_number"],
            "columnNumber": data["column_number"],
            "frameIndex": data["frame_index"],
        }
        return {key: value for key, value in wire.items() if value is not None}


def get_field(error: Any, name: str) -> Optional[str]:
    """Read a string field from a mapping or an attribute-bearing object."""
    if isinstance(error, Mapping):
        value = error.get(name)
    else:
        value = getattr(error, name, None)
    return value if isinstance(value, str) else None


def has_field(error: Any, name: str) -> bool:
    if isinstance(error, Mapping):
        return error.get(name) is not None
    return getattr(error, name, None) is not None


def locate(token: str) -> tuple:
    """Location triple for a token, with "unknown" for unparseable tokens."""
    location = extract_location(token)
    if not location:
        return UNKNOWN_LOCATION
    return location


class BaseStackParser(ABC):
    @abstractmethod
    def parse(self, error: Any) -> list[StackFrame]:
        pass

    @abstractmethod
    def can_parse(self, error: Any) -> bool:
        pass
