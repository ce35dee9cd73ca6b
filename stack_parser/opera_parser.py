import re
from typing import Any, Optional

from .base import BaseStackParser, StackFrame, get_field, has_field, locate
from .gecko_parser import GeckoStackParser


class OperaStackParser(BaseStackParser):
    """
    Presto-era Opera traces, in three generations.

    Opera 9 only reports frames inside ``message``, Opera 10 adds a
    ``stacktrace`` field and Opera 11 ships an ``Error.stack`` close to the
    Firefox format, with argument lists in the function segment.
    """

    SOURCELOC_FIELD = "opera#sourceloc"

    # Pattern: Line 42 of linked script http://host/app.js
    OPERA9_LINE = re.compile(r'Line (\d+).*script (?:in )?(\S+)', re.IGNORECASE)
    # Pattern: Line 42 of linked script http://host/app.js: In function foo
    OPERA10_LINE = re.compile(
        r'Line (\d+).*script (?:in )?(\S+)(?:: In function (\S+))?$', re.IGNORECASE
    )
    ERROR_CREATED_AT = re.compile(r'^Error created at')
    ANONYMOUS_FUNCTION = re.compile(r'<anonymous function(: (\w+))?>')
    ARGUMENT_LIST = re.compile(r'\([^\)]*\)')
    CALL_WITH_ARGUMENTS = re.compile(r'^[^\(]+\(([^\)]*)\)$')
    ARGUMENTS_NOT_AVAILABLE = "[arguments not available]"

    def can_parse(self, error: Any) -> bool:
        return has_field(error, "stacktrace") or has_field(error, self.SOURCELOC_FIELD)

    def parse(self, error: Any) -> list[StackFrame]:
        message = get_field(error, "message") or ""
        stacktrace = get_field(error, "stacktrace")

        if not stacktrace or (
            "\n" in message and len(message.split("\n")) > len(stacktrace.split("\n"))
        ):
            return self.parse_opera9(message)
        if not get_field(error, "stack"):
            return self.parse_opera10(stacktrace)
        return self.parse_opera11(get_field(error, "stack"))

    def parse_opera9(self, message: str) -> list[StackFrame]:
        frames = []
        lines = message.split("\n")
        for i in range(2, len(lines), 2):
            match = self.OPERA9_LINE.search(lines[i])
            if match:
                # Counter restarts per frame: every frame reports index 0
                frame_index = 0
                frames.append(StackFrame(
                    function_name=None,
                    args=None,
                    file_name=match.group(2),
                    line_number=match.group(1),
                    column_number=None,
                    frame_index=frame_index
                ))
        return frames

    def parse_opera10(self, stacktrace: str) -> list[StackFrame]:
        frames = []
        lines = stacktrace.split("\n")
        for i in range(0, len(lines), 2):
            match = self.OPERA10_LINE.search(lines[i])
            if match:
                frame_index = 0
                frames.append(StackFrame(
                    function_name=match.group(3) or None,
                    args=None,
                    file_name=match.group(2),
                    line_number=match.group(1),
                    column_number=None,
                    frame_index=frame_index
                ))
        return frames

    def parse_opera11(self, stack: str) -> list[StackFrame]:
        frames = []
        lines = [
            line for line in stack.split("\n")
            if GeckoStackParser.FRAME_MARKER.search(line) and not self.ERROR_CREATED_AT.search(line)
        ]
        for line in lines:
            function_call, _, token = line.rpartition("@")
            file_name, line_number, column_number = locate(token)
            frames.append(StackFrame(
                function_name=self._function_name(function_call),
                args=self._arguments(function_call),
                file_name=file_name,
                line_number=line_number,
                column_number=column_number,
                frame_index=len(frames)
            ))
        return frames

    def _function_name(self, function_call: str) -> Optional[str]:
        name = self.ANONYMOUS_FUNCTION.sub(r'\2', function_call, count=1)
        return self.ARGUMENT_LIST.sub("", name) or None

    def _arguments(self, function_call: str) -> Optional[tuple[str, ...]]:
        if not self.ARGUMENT_LIST.search(function_call):
            return None
        args_raw = self.CALL_WITH_ARGUMENTS.sub(r'\1', function_call)
        if args_raw == self.ARGUMENTS_NOT_AVAILABLE:
            return None
        if not args_raw:
            return ()
        return tuple(args_raw.split(","))
