import re
from typing import Any

from .base import BaseStackParser, StackFrame, get_field, locate, UNKNOWN


class GeckoStackParser(BaseStackParser):
    """SpiderMonkey (Firefox) and WebKit (Safari) traces: ``name@file:line:col``."""

    # Bare file:line token
    FRAME_MARKER = re.compile(r'\S+\:\d+')

    def can_parse(self, error: Any) -> bool:
        stack = get_field(error, "stack")
        return bool(stack and self.FRAME_MARKER.search(stack))

    def frame_lines(self, stack: str) -> list[str]:
        return [line for line in stack.split("\n") if self.FRAME_MARKER.search(line)]

    def parse(self, error: Any) -> list[StackFrame]:
        frames = []
        for line in self.frame_lines(get_field(error, "stack")):
            function_name, _, token = line.rpartition("@")
            file_name, line_number, column_number = locate(token)
            frames.append(StackFrame(
                function_name=function_name or UNKNOWN,
                args=None,
                file_name=file_name,
                line_number=line_number,
                column_number=column_number,
                frame_index=len(frames)
            ))
        return frames
