#!/usr/bin/env python3
"""CLI for parsing browser stack traces."""

import argparse
import json
import sys
from pathlib import Path
from stack_parser import classify, parse, StackFormat


def main():
    parser = argparse.ArgumentParser(description="Browser Stack Trace Parser")
    parser.add_argument("--stack-file", "-f", help="File containing the error's stack property")
    parser.add_argument("--stack", help="Stack trace string directly")
    parser.add_argument("--message", "-m", help="Error message")
    parser.add_argument("--stacktrace-file", help="File containing an Opera stacktrace property")
    parser.add_argument("--json", action="store_true", help="Print frames as JSON")

    args = parser.parse_args()

    # Get stack text
    if args.stack_file:
        stack = Path(args.stack_file).read_text()
    elif args.stack:
        stack = args.stack
    elif args.stacktrace_file:
        stack = None
    else:
        print("Reading stack trace from stdin...", file=sys.stderr)
        stack = sys.stdin.read()

    error = {"stack": stack, "message": args.message}
    if args.stacktrace_file:
        error["stacktrace"] = Path(args.stacktrace_file).read_text()

    if not any(error.values()):
        print("No stack trace provided", file=sys.stderr)
        sys.exit(1)

    stack_format = classify(error)
    frames = parse(error)

    if args.json:
        print(json.dumps({
            "format": stack_format.value,
            "frames": [f.to_dict() for f in frames] if frames is not None else None
        }, indent=2))
    else:
        print(f"Format: {stack_format.value}")
        for frame in frames or []:
            location = ":".join(
                part for part in (frame.file_name, frame.line_number, frame.column_number) if part
            )
            print(f"  #{frame.frame_index} {frame.function_name or '?'} at {location}")
            if frame.args is not None:
                print(f"      args: {', '.join(frame.args)}")

    if stack_format is StackFormat.UNRECOGNIZED:
        sys.exit(1)


if __name__ == "__main__":
    main()
