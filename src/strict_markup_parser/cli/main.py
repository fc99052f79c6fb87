"""Main CLI entry point for the strict-markup command-line tool.

Subcommands:

- ``parse``: parse files and print their node trees as JSON or a summary
- ``format``: print the canonical serialization of a file
- ``validate``: check files and report positioned errors
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from strict_markup_parser import __version__
from strict_markup_parser.api.parser import parse_file
from strict_markup_parser.parsing.errors import ParseError
from strict_markup_parser.shared.config import ConfigError, ParserConfig
from strict_markup_parser.shared.logging import get_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130


class MarkupProcessor:
    """Parse files for the CLI and collect per-file result records."""

    def __init__(self, config: ParserConfig, encoding: str = "utf-8"):
        self.config = config
        self.encoding = encoding
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse one file into a JSON-friendly result record."""
        try:
            document = parse_file(file_path, encoding=self.encoding, config=self.config)
        except ParseError as e:
            return {
                "file": str(file_path),
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
                "line": e.line,
                "column": e.column,
            }
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(
                "Could not read input file",
                extra={"file_path": str(file_path), "error": str(e)}
            )
            return {
                "file": str(file_path),
                "success": False,
                "error": str(e),
                "error_type": type(e).__name__,
            }

        return {
            "file": str(file_path),
            "success": True,
            "document": document.to_dict(),
            "serialized": document.serialize(),
            "processing_time_ms": document.metrics.processing_time_ms,
        }


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        prog="strict-markup",
        description="Parse, format and validate strict markup documents",
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only log errors"
    )
    parser.add_argument(
        "--config", type=Path, help="JSON configuration file"
    )
    parser.add_argument(
        "--max-depth", type=int, help="Maximum element nesting depth"
    )
    parser.add_argument(
        "--single-root", action="store_true",
        help="Require exactly one top-level element"
    )
    parser.add_argument(
        "--encoding", default="utf-8", help="Input file encoding (default: utf-8)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parse_parser = subparsers.add_parser("parse", help="Parse markup files")
    parse_parser.add_argument("paths", nargs="+", type=Path, help="Files to parse")
    parse_parser.add_argument(
        "--format", choices=["json", "text"], default="json",
        help="Output format (default: json)"
    )

    format_parser = subparsers.add_parser(
        "format", help="Print the canonical serialization of a file"
    )
    format_parser.add_argument("path", type=Path, help="File to format")

    validate_parser = subparsers.add_parser("validate", help="Validate markup files")
    validate_parser.add_argument(
        "paths", nargs="+", type=Path, help="Files to validate"
    )

    return parser


def build_config(args: argparse.Namespace) -> ParserConfig:
    """Combine the config file and command-line overrides."""
    config = ParserConfig.from_file(args.config) if args.config else ParserConfig()

    overrides: Dict[str, Any] = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.single_root:
        overrides["single_root"] = True
    if args.verbose:
        overrides["logging_level"] = "DEBUG"
    elif args.quiet:
        overrides["logging_level"] = "ERROR"

    return config.override(**overrides) if overrides else config


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Render parse results as JSON or a text summary."""
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    lines = []
    for result in results:
        if result["success"]:
            document = result["document"]
            lines.append(
                f"{result['file']}: {len(document['roots'])} root(s), "
                f"{document['total_elements']} element(s), "
                f"max depth {document['max_depth']}"
            )
        else:
            lines.append(f"{result['file']}: {result['error_type']}")
            lines.append(result["error"])
    return "\n".join(lines)


def cmd_parse(args: argparse.Namespace, config: ParserConfig) -> int:
    processor = MarkupProcessor(config, args.encoding)
    results = [processor.process_file(path) for path in args.paths]
    print(format_results(results, args.format))
    return EXIT_OK if all(r["success"] for r in results) else EXIT_FAILURE


def cmd_format(args: argparse.Namespace, config: ParserConfig) -> int:
    processor = MarkupProcessor(config, args.encoding)
    result = processor.process_file(args.path)
    if not result["success"]:
        print(result["error"], file=sys.stderr)
        return EXIT_FAILURE
    print(result["serialized"])
    return EXIT_OK


def cmd_validate(args: argparse.Namespace, config: ParserConfig) -> int:
    processor = MarkupProcessor(config, args.encoding)
    results = [processor.process_file(path) for path in args.paths]

    valid_count = sum(1 for r in results if r["success"])
    print(f"Validated {len(results)} files, {valid_count} valid")
    print("-" * 50)
    for result in results:
        status = "✓" if result["success"] else "✗"
        print(f"{status} {result['file']}")
        if not result["success"]:
            for line in result["error"].splitlines():
                print(f"   {line}")

    return EXIT_OK if valid_count == len(results) else EXIT_FAILURE


COMMANDS = {
    "parse": cmd_parse,
    "format": cmd_format,
    "validate": cmd_validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    logging.basicConfig(level=getattr(logging, config.logging_level))

    try:
        return COMMANDS[args.command](args, config)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
