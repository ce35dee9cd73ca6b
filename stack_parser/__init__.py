from .base import StackFrame, BaseStackParser
from .location import extract_location
from .v8_parser import V8StackParser
from .gecko_parser import GeckoStackParser
from .opera_parser import OperaStackParser
from .classifier import StackFormat, classify, parse

__all__ = [
    "StackFrame", "BaseStackParser", "extract_location",
    "V8StackParser", "GeckoStackParser", "OperaStackParser",
    "StackFormat", "classify", "parse"
]
