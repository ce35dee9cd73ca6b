"""Pick the stack format of an error and run the matching parser."""

from enum import Enum
from typing import Any, Optional

from .base import BaseStackParser, StackFrame
from .v8_parser import V8StackParser
from .gecko_parser import GeckoStackParser
from .opera_parser import OperaStackParser


class StackFormat(Enum):
    OPERA = "opera"
    V8 = "v8"
    GECKO = "gecko"
    UNRECOGNIZED = "unrecognized"


# Checked in order, first match wins
PARSERS: dict[StackFormat, BaseStackParser] = {
    StackFormat.OPERA: OperaStackParser(),
    StackFormat.V8: V8StackParser(),
    StackFormat.GECKO: GeckoStackParser(),
}


def classify(error: Any) -> StackFormat:
    if error is None:
        return StackFormat.UNRECOGNIZED
    for stack_format, parser in PARSERS.items():
        if parser.can_parse(error):
            return stack_format
    return StackFormat.UNRECOGNIZED


def parse(error: Any) -> Optional[list[StackFrame]]:
    """
    Extract stack frames from an error object or decoded error payload.

    Returns None when the stack format is not recognized. A recognized
    stack without frame lines gives an empty list.
    """
    stack_format = classify(error)
    if stack_format is StackFormat.UNRECOGNIZED:
        return None
    return PARSERS[stack_format].parse(error)
