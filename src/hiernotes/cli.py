"""Command-line interface for turning outlines into HTML tree diagrams."""
from __future__ import annotations

import argparse
import json
import os
import stat
import sys
import tempfile
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .hiernotes import DEFAULT_OUTPUT, MAX_INPUT_BYTES, build_document
from .resources import load_sample_outline


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


def _build_parser() -> argparse.ArgumentParser:
    parser = FriendlyArgumentParser(
        prog="hiernotes",
        description="Render an indented outline as an HTML page with an SVG tree diagram.",
    )
    parser.add_argument("input", nargs="?", help="Outline text file (defaults to the bundled sample)")
    parser.add_argument("--text", help="Raw outline source")
    parser.add_argument("--stdout", action="store_true", help="Write HTML to stdout")
    parser.add_argument("-o", "--output", help=f"Output .html path (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--print-sample", action="store_true", help="Print the bundled sample outline")
    parser.add_argument("--error-format", choices=["text", "json"], default="text")
    parser.add_argument("--debug", action="store_true")
    return parser


def _check_size(data: bytes, source_name: str) -> None:
    if len(data) > MAX_INPUT_BYTES:
        raise CliError(
            "E_INPUT_TOO_LARGE",
            f"input exceeds {MAX_INPUT_BYTES} bytes: {source_name}",
            hint="Split the outline into smaller files.",
            exit_code=2,
            file=source_name,
            retryable=False,
        )


def _read_input(path: Optional[str], text: Optional[str]) -> str:
    if path is not None and text is not None:
        raise CliError(
            "E_ARGS",
            "--text cannot be combined with file input",
            hint="Use either FILE or --text.",
            exit_code=2,
        )

    if text is not None:
        _check_size(text.encode("utf-8"), "<text>")
        return text

    if path is None:
        return load_sample_outline()

    input_path = Path(path)
    if not input_path.exists():
        raise CliError(
            "E_IO_READ",
            f"input file not found: {input_path}",
            exit_code=2,
            file=str(input_path),
        )
    try:
        with input_path.open("rb") as fh:
            data = fh.read(MAX_INPUT_BYTES + 1)
    except OSError as exc:
        raise CliError(
            "E_IO_READ",
            f"failed to read input file: {input_path}",
            hint=str(exc),
            exit_code=2,
            file=str(input_path),
        )
    _check_size(data, str(input_path))
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise CliError(
            "E_IO_READ",
            f"input file is not valid UTF-8: {input_path}",
            hint=str(exc),
            exit_code=2,
            file=str(input_path),
            retryable=False,
        )


def _output_mode(path: Path) -> int:
    """Mode for the written file: the existing target's, else 0o666 minus the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _write_text(path: Path, content: str) -> None:
    # The target is replaced whole; it never holds a partial document.
    tmp_path: Optional[Path] = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_path = Path(fh.name)
            fh.write(content)
        os.chmod(tmp_path, _output_mode(path))
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise CliError(
            "E_IO_WRITE",
            f"failed to write output file: {path}",
            hint=str(exc),
            exit_code=4,
            file=str(path),
        )


def _error_from_exception(exc: Exception) -> CliError:
    if isinstance(exc, CliError):
        return exc
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


def _handle_generate(args: argparse.Namespace) -> int:
    if args.stdout and args.output:
        raise CliError(
            "E_ARGS",
            "--stdout and --output are mutually exclusive",
            hint="Choose either --stdout or --output.",
            exit_code=2,
        )

    source = _read_input(args.input, args.text)
    html = build_document(source)

    if args.stdout:
        sys.stdout.write(html)
        return 0

    output_path = Path(args.output or DEFAULT_OUTPUT)
    _write_text(output_path, html)
    print(f"HTML file generated: {output_path}")
    return 0


def main(argv: Optional[Iterable[str]] = None) -> int:
    raw_argv = list(argv) if argv is not None else sys.argv[1:]
    parser = _build_parser()

    debug_enabled = "--debug" in raw_argv
    error_format = "text"
    if "--error-format" in raw_argv:
        idx = raw_argv.index("--error-format")
        if idx + 1 < len(raw_argv):
            error_format = raw_argv[idx + 1]

    try:
        args = parser.parse_args(raw_argv)
        error_format = args.error_format

        if args.print_sample:
            sys.stdout.write(load_sample_outline())
            return 0
        return _handle_generate(args)
    except UsageError as exc:
        err = CliError(
            "E_ARGS",
            str(exc),
            hint="Run with --help for usage.",
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
