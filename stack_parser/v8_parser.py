import re
from typing import Any

from .base import BaseStackParser, StackFrame, get_field, locate, UNKNOWN, UNKNOWN_LOCATION


class V8StackParser(BaseStackParser):
    """Chrome and Internet Explorer ``Error.stack`` traces.

    Error: something broke
        at foo (http://host/app.js:10:5)
        at http://host/app.js:1:2
    """

    # Detect "    at " indented frames
    STACK_MARKER = re.compile(r'\s+at ')
    LOCATION_STRIP = re.compile(r'[()\s]')
    # Placeholder names IE uses for anonymous functions
    ANONYMOUS_NAMES = ("Anonymous", "Anonymous function")

    def can_parse(self, error: Any) -> bool:
        stack = get_field(error, "stack")
        return bool(stack and self.STACK_MARKER.search(stack))

    def parse(self, error: Any) -> list[StackFrame]:
        frames = []
        # First line is the error header
        lines = get_field(error, "stack").split("\n")[1:]
        for line in lines:
            if not line.strip():
                continue
            # Drop the literal "at"
            tokens = line.split()[1:]
            if tokens:
                location = locate(self.LOCATION_STRIP.sub("", tokens.pop()))
            else:
                location = UNKNOWN_LOCATION

            function_name = " ".join(tokens)
            if not function_name or function_name in self.ANONYMOUS_NAMES:
                function_name = UNKNOWN

            frames.append(StackFrame(
                function_name=function_name,
                args=None,
                file_name=location[0],
                line_number=location[1],
                column_number=location[2],
                frame_index=len(frames)
            ))
        return frames
