"""
CLI interface for the value formatter.

Usage:
    python -m debuglog data.json --pretty
    cat data.json | python -m debuglog --max-depth 2
"""

import argparse
import json
import sys

from .environment import ExecutionContext
from .formatters import FormatOptions, ValueFormatter


def build_parser() -> argparse.ArgumentParser:
    defaults = FormatOptions()
    parser = argparse.ArgumentParser(
        description="Pretty-print a JSON document with depth and length limits", prog="python -m debuglog"
    )
    parser.add_argument("file", nargs="?", default="-", help="JSON file to read (default: stdin)")
    parser.add_argument(
        "--max-depth", type=int, default=defaults.max_depth,
        help=f"Maximum nesting depth (default: {defaults.max_depth})"
    )
    parser.add_argument(
        "--max-string-length", type=int, default=defaults.max_string_length,
        help=f"Truncate longer strings (default: {defaults.max_string_length})"
    )
    parser.add_argument("--pretty", action="store_true", help="One entry per line with indentation")
    parser.add_argument(
        "--indent", type=int, default=defaults.indent_size,
        help=f"Spaces per level in pretty mode (default: {defaults.indent_size})"
    )
    parser.add_argument("--no-circular", action="store_true", help="Disable circular reference tracking")
    parser.add_argument("--color", action="store_true", help="Force ANSI colors")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        opts = FormatOptions(
            max_depth=args.max_depth,
            max_string_length=args.max_string_length,
            enable_circular_handling=not args.no_circular,
            pretty_print=args.pretty,
            indent_size=args.indent,
            colors=args.color,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        if args.file == "-":
            data = json.load(sys.stdin)
        else:
            with open(args.file, encoding="utf-8") as f:
                data = json.load(f)
    except OSError as e:
        parser.error(f"cannot read {args.file}: {e.strerror}")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        parser.error(f"invalid JSON in {args.file}: {e}")

    context = ExecutionContext.terminal() if args.color else ExecutionContext.plain()
    print(ValueFormatter(opts, context).format(data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
