"""CLI entry point for extract-helps."""

from __future__ import annotations

import argparse
import logging
import shlex
import subprocess
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    ExtractHelpsConfig,
    ExtractHelpsConfigError,
    load_config,
)
from .core import config_templates
from .core.config_templates import ConfigTemplateError
from .core.logging import configure_logger
from .document import parse_document
from .errors import ExtractHelpsError, FormatterError, InputDecodeError
from .extract import extract_helps
from .output import Formatter, HelpOutput, assemble, emit
from .render import Generator

_FORMAT_TIMEOUT = 60


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extract-helps",
        description=(
            "Extract per-command help from the Commands section of a "
            "Markdown reference and write it as a Python module."
        ),
        epilog=(
            "Run `extract-helps config init` to scaffold the default "
            f"{CONFIG_FILENAME} template."
        ),
    )
    parser.add_argument(
        "-i",
        dest="input_file",
        default="",
        help="Input Markdown file (defaults to stdin).",
    )
    parser.add_argument(
        "-o",
        dest="output_file",
        default="",
        help="Output file (defaults to stdout).",
    )
    parser.add_argument(
        "-width",
        "--width",
        dest="width",
        type=int,
        help="Paragraph wrap width (defaults to 80).",
    )
    parser.add_argument(
        "-debug",
        "--debug",
        dest="debug",
        action="store_true",
        help="Write a human-readable dump instead of Python source.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Exit non-zero if the output file is not up to date.",
    )
    parser.add_argument(
        "--strict",
        dest="strict",
        action="store_true",
        default=None,
        help="Fail when a command's help is defined more than once.",
    )
    parser.add_argument(
        "--section",
        help="Title of the section listing commands (defaults to Commands).",
    )
    parser.add_argument(
        "--format-command",
        help="Command that formats generated source via stdin/stdout.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to a TOML config file (defaults to ./{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to WARNING).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every step to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    if args.check and not args.output_file:
        parser.error("--check requires -o.")

    overrides = ConfigOverrides(
        width=args.width,
        section=args.section,
        strict_duplicates=args.strict,
        format_command=args.format_command,
        log_level=args.log_level,
    )
    try:
        config = load_config(
            config_path=args.config, overrides=overrides
        ).config
    except ExtractHelpsConfigError as exc:
        parser.error(str(exc))

    try:
        logger, _ = configure_logger(
            "extract_helps",
            level=config.log_level,
            log_dir=config.log_dir,
            verbose=args.verbose,
        )
    except OSError as exc:
        parser.error(f"cannot set up logging: {exc}")
    logger.debug("extract-helps CLI invoked")

    try:
        output = _run(args, config, logger)
        text = emit(
            output,
            debug=args.debug,
            formatter=_build_formatter(config.format_command),
        )
        if args.check:
            return _check_output(Path(args.output_file), text)
        _write_output(args.output_file, text)
    except (ExtractHelpsError, OSError) as exc:
        logger.debug("extract-helps run failed", exc_info=True)
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return 0


def _run(
    args: argparse.Namespace,
    config: ExtractHelpsConfig,
    logger: logging.Logger,
) -> HelpOutput:
    document = parse_document(_read_input(args.input_file))
    helps = extract_helps(
        document,
        Generator(width=config.width),
        section=config.section,
        strict_duplicates=config.strict_duplicates,
        logger=logger,
    )
    logger.info(
        "Extracted help",
        extra={"input": args.input_file, "command_count": len(helps)},
    )
    return assemble(
        helps, input_file=args.input_file, output_file=args.output_file
    )


def _read_input(input_file: str) -> str:
    try:
        if not input_file:
            return sys.stdin.read()
        return Path(input_file).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise InputDecodeError(input_file or "<stdin>", exc.reason) from exc


def _write_output(output_file: str, text: str) -> None:
    if not output_file:
        sys.stdout.write(text)
        return
    Path(output_file).write_text(text, encoding="utf-8")


def _check_output(path: Path, text: str) -> int:
    try:
        current = path.read_text(encoding="utf-8")
    except (FileNotFoundError, UnicodeDecodeError):
        current = None
    if current == text:
        return 0
    sys.stderr.write(
        f"{path} is out of date; rerun extract-helps to regenerate it.\n"
    )
    return 1


def _build_formatter(command: Optional[str]) -> Optional[Formatter]:
    if not command:
        return None
    argv = shlex.split(command)

    def run_formatter(source: str) -> str:
        try:
            result = subprocess.run(
                argv,
                input=source,
                capture_output=True,
                text=True,
                timeout=_FORMAT_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise FormatterError(f"{argv[0]}: {exc}") from exc
        if result.returncode != 0:
            raise FormatterError(
                f"{argv[0]} exited with status {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return result.stdout

    return run_formatter


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)

    target = args.path or Path.cwd() / CONFIG_FILENAME
    template = config_templates.get_template("extract_helps")
    try:
        written = template.write(target.expanduser(), overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote extract-helps config to {written}\n")
    return 0


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extract-helps config",
        description="Manage the extract-helps configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help=f"Write the default {CONFIG_FILENAME} template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=f"Destination for the config TOML (defaults to ./{CONFIG_FILENAME}).",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
