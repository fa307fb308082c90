# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Command-line driver.

Modes (first match wins): `-v`, `--file PATH [-f]`, `--expr EXPR`,
`--stmt STMT`. Output is one compact JSON document on stdout; failures are
reported by the error boundary (`goblin.core.diagnostics.guarded`) as
`{"error": {...}}` on stderr with exit status 1, or raised with `--panic`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Callable, List, Optional

from goblin import __version__
from goblin.config import Config
from goblin.core.diagnostics import InputError, guarded
from goblin.core.position import INVALID_POSITION
from goblin.lowering.engine import lower_expr
from goblin.lowering.file import lower_file
from goblin.parser import Parser, parse_stmt_file, read_source
from goblin.parser.ast import format_tree
from goblin.program.assembler import load
from goblin.program.workspace import SourceWorkspace

logger = logging.getLogger("goblin")


def _configure_logging(verbose: bool) -> None:
	level = logging.DEBUG if verbose else logging.WARNING
	logger.setLevel(level)
	if not any(getattr(h, "_goblin_cli", False) for h in logger.handlers):
		handler = logging.StreamHandler(sys.stderr)
		handler.setFormatter(logging.Formatter("%(name)s: %(levelname)s: %(message)s"))
		handler._goblin_cli = True  # type: ignore[attr-defined]
		logger.addHandler(handler)


def _write_json(value: Any) -> None:
	sys.stdout.write(json.dumps(value, sort_keys=True, separators=(",", ":")))
	sys.stdout.flush()


def _build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="goblin", description="Go source to JSON IR")
	parser.add_argument("-v", dest="version", action="store_true", help="display goblin version")
	parser.add_argument("--file", help="file to parse")
	parser.add_argument("-f", dest="full", action="store_true", help="load the file with all of its imports (with --file)")
	parser.add_argument("--expr", help="expression to parse")
	parser.add_argument("--stmt", help="statement to parse")
	parser.add_argument("--builtin-dump", action="store_true", help="print the syntax tree instead of JSON")
	parser.add_argument("--panic", action="store_true", help="raise instead of printing JSON on error conditions")
	parser.add_argument(
		"--root",
		dest="roots",
		action="append",
		default=[],
		help="extra import root directory (repeatable)",
	)
	parser.add_argument("--goos", help="target operating system for file selection (default: $GOOS or host)")
	parser.add_argument("--goarch", help="target architecture for file selection (default: $GOARCH or host)")
	parser.add_argument("--verbose", action="store_true", help="debug logging to stderr")
	return parser


def _single_file(path: str, builtin_dump: bool) -> None:
	source = read_source(path)
	try:
		file = Parser().parse_file(source, path)
	except InputError as exc:
		raise InputError(str(exc), position=INVALID_POSITION, type="positionless_syntax_error") from exc
	if builtin_dump:
		sys.stdout.write(format_tree(file) + "\n")
		return
	_write_json(lower_file(file, path))


def _whole_program(path: str, config: Config) -> None:
	workspace = SourceWorkspace.from_config(config)
	_write_json(load(path, workspace, workspace, workspace))


def _expression(text: str, builtin_dump: bool) -> None:
	expr = Parser().parse_expr(text)
	if builtin_dump:
		sys.stdout.write(format_tree(expr) + "\n")
		return
	_write_json(lower_expr(expr))


def _statement(text: str, builtin_dump: bool) -> None:
	file = parse_stmt_file(text, "stdin")
	if builtin_dump:
		sys.stdout.write(format_tree(file) + "\n")
		return
	_write_json(lower_file(file, text))


def main(argv: Optional[List[str]] = None) -> int:
	"""Run one goblin mode; returns the process exit status."""
	arg_parser = _build_arg_parser()
	args = arg_parser.parse_args(argv)

	config = Config.from_env(
		goos=args.goos,
		goarch=args.goarch,
		roots=args.roots,
		panic=args.panic,
		verbose=args.verbose,
	)
	_configure_logging(config.verbose)

	if args.version:
		print(__version__)
		return 0

	run: Optional[Callable[[], None]] = None
	if args.file:
		if args.full:
			run = lambda: _whole_program(args.file, config)
		else:
			run = lambda: _single_file(args.file, args.builtin_dump)
	elif args.expr:
		run = lambda: _expression(args.expr, args.builtin_dump)
	elif args.stmt:
		run = lambda: _statement(args.stmt, args.builtin_dump)

	if run is None:
		arg_parser.print_help(sys.stderr)
		return 2

	guarded(run, config.error_mode)
	return 0


__all__ = ["main"]
