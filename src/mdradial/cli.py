"""Command-line interface for mdradial parse/layout workflows."""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional

from .config import ConfigError, LayoutConfig, ViewportConfig, load_config_file
from .mindmap import MindMap
from .parser import parse
from .resources import ExampleNotFoundError, list_examples, load_example

SUBCOMMANDS = "parse, layout, example"


@dataclass
class CliError(Exception):
    code: str
    message: str
    hint: Optional[str] = None
    exit_code: int = 1
    file: Optional[str] = None
    retryable: bool = True


class UsageError(Exception):
    pass


class FriendlyArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # pragma: no cover - argparse callback
        raise UsageError(message)


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", nargs="?", help="Input markdown file")
    parser.add_argument("--text", help="Raw markdown source")
    parser.add_argument("--stdout", action="store_true", help="Write JSON to stdout")
    parser.add_argument("-o", "--output", help="Output .json path")


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="mdradial",
        description="Lay out markdown outlines as radial mind maps.",
    )
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")

    subparsers = parser.add_subparsers(dest="command")

    parse_parser = subparsers.add_parser("parse", help="Print the document tree as JSON")
    _add_input_arguments(parse_parser)

    layout_parser = subparsers.add_parser("layout", help="Lay out nodes, connections and viewport")
    _add_input_arguments(layout_parser)
    layout_parser.add_argument("--width", type=float, help="Container width")
    layout_parser.add_argument("--height", type=float, help="Container height")
    layout_parser.add_argument("--config", help="JSON file with layout/viewport settings")
    layout_parser.add_argument(
        "--no-fit",
        action="store_true",
        help="Keep the default viewport instead of fitting it to the content",
    )

    example_parser = subparsers.add_parser("example", help="Print a bundled example document")
    example_parser.add_argument("name", nargs="?", help="Example name (omit to list)")

    return parser


def _read_input(path: Optional[str], text: Optional[str]) -> tuple[str, Optional[Path]]:
    if path and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        return text, None

    if path:
        input_path = Path(path)
        if not input_path.exists():
            raise CliError(
                "E_IO_READ",
                f"input file not found: {input_path}",
                exit_code=2,
                file=str(input_path),
            )
        try:
            return input_path.read_text(encoding="utf-8"), input_path
        except (OSError, UnicodeDecodeError) as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read input file: {input_path}",
                hint=str(exc),
                exit_code=2,
                file=str(input_path),
            )

    if sys.stdin.isatty():
        raise CliError(
            "E_ARGS",
            "no input provided",
            hint="Use a subcommand with FILE, --text, or pipe stdin.",
            exit_code=2,
        )

    data = sys.stdin.read()
    if not data.strip():
        raise CliError(
            "E_ARGS",
            "stdin was empty",
            hint="Pipe markdown content into stdin.",
            exit_code=2,
        )
    return data, None


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _emit_json(payload: Any, output: Optional[Path]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output is None:
        sys.stdout.write(text + "\n")
        return
    _write_text(output, text + "\n")
    print(f"Wrote {output}")


def _check_output_args(args: argparse.Namespace) -> None:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
    if isinstance(exc, ConfigError):
        return CliError(
            "E_CONFIG",
            str(exc),
            hint="Check key names and values in the --config file.",
            exit_code=3,
        )
    if isinstance(exc, ExampleNotFoundError):
        return CliError(
            "E_EXAMPLE",
            str(exc),
            hint=f"Available examples: {', '.join(list_examples())}.",
            exit_code=3,
        )
    return CliError(
        "E_INTERNAL",
        str(exc) or exc.__class__.__name__,
        hint="Re-run with --debug to see traceback.",
        exit_code=1,
        retryable=False,
    )


def _emit_error(err: CliError, *, error_format: str) -> None:
    if error_format == "json":
        payload = {
            "ok": False,
            "code": err.code,
            "message": err.message,
            "file": err.file,
            "hint": err.hint,
            "retryable": err.retryable,
        }
        sys.stderr.write(json.dumps(payload) + "\n")
        return

    sys.stderr.write(f"error[{err.code}]: {err.message}\n")
    if err.hint:
        sys.stderr.write(f"hint: {err.hint}\n")


def _handle_parse(args: argparse.Namespace) -> int:
    _check_output_args(args)
    source, _source_path = _read_input(args.input, args.text)
    tree = parse(source)
    _emit_json(tree.to_dict(), Path(args.output) if args.output else None)
    return 0


def _handle_layout(args: argparse.Namespace) -> int:
    _check_output_args(args)
    if (args.width is not None and args.width <= 0) or (args.height is not None and args.height <= 0):
        raise CliError(
            "E_ARGS",
            "--width and --height must be > 0",
            hint="Pass the container size in pixels, e.g. --width 1200 --height 800.",
            exit_code=2,
        )

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            raise CliError(
                "E_IO_READ",
                f"config file not found: {config_path}",
                exit_code=2,
                file=str(config_path),
            )
        try:
            layout_config, viewport_config = load_config_file(config_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise CliError(
                "E_IO_READ",
                f"failed to read config file: {config_path}",
                hint=str(exc),
                exit_code=2,
                file=str(config_path),
            )
    else:
        layout_config, viewport_config = LayoutConfig(), ViewportConfig()
    layout_config = layout_config.with_container(args.width, args.height)

    source, source_path = _read_input(args.input, args.text)
    mindmap = MindMap(layout_config, viewport_config, auto_fit=not args.no_fit)
    mindmap.set_markdown(source)
    payload = mindmap.to_dict()

    if args.stdout or (source_path is None and not args.output):
        _emit_json(payload, None)
        return 0

    output_path = Path(args.output) if args.output else source_path.with_suffix(".json")
    _emit_json(payload, output_path)
    return 0


def _handle_example(args: argparse.Namespace) -> int:
    if args.name is None:
        for name in list_examples():
            print(name)
        return 0
    sys.stdout.write(load_example(args.name))
    return 0


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    if not raw_argv:
        err = CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {SUBCOMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format="text")
        return err.exit_code

    debug_enabled = "--debug" in raw_argv or os.getenv("MDRADIAL_DEBUG") == "1"
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format
        _configure_logging(debug_enabled)

        if args.command == "parse":
            return _handle_parse(args)
        if args.command == "layout":
            return _handle_layout(args)
        if args.command == "example":
            return _handle_example(args)

        raise CliError(
            "E_ARGS",
            "missing subcommand",
            hint=f"Use one of: {SUBCOMMANDS}.",
            exit_code=2,
        )
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint=f"Use subcommands: {SUBCOMMANDS}.",
            exit_code=2,
        )
        _emit_error(err, error_format=error_format)
        return err.exit_code
    except Exception as exc:  # pragma: no cover - exercised in integration tests
        err = _error_from_exception(exc)
        _emit_error(err, error_format=error_format)
        if debug_enabled:
            traceback.print_exc(file=sys.stderr)
        return err.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
