# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Go front end: grammar, post-lexer and tree builder.

The module-level helpers build a fresh `Parser` per call; the compiled
grammar tables come from lark's on-disk cache.
"""

from __future__ import annotations

from pathlib import Path

from goblin.core.diagnostics import InputError
from goblin.core.position import TOPLEVEL_POSITION

from . import ast
from .parser import Parser, TerminatorInserter

# `--stmt` wraps the statement in a function with a couple of parameters so
# short snippets can refer to them.
STMT_PREFIX = "package p; func blah(foo int, bar float64) string { "
STMT_SUFFIX = "}"


def parse_file(source: str, filename: str = "") -> ast.File:
	return Parser().parse_file(source, filename)


def parse_expr(source: str) -> ast.Expr:
	return Parser().parse_expr(source)


def parse_stmt_file(stmt: str, filename: str = "") -> ast.File:
	"""Parse `stmt` as the body of the wrapper function `blah`."""
	return Parser().parse_file(STMT_PREFIX + stmt + STMT_SUFFIX, filename)


def read_source(path: str) -> str:
	"""Read a Go source file, turning I/O failures into `path_error`."""
	try:
		data = Path(path).read_bytes()
	except OSError as exc:
		raise InputError(f"{path}: {exc.strerror or exc}", position=TOPLEVEL_POSITION, type="path_error") from exc
	try:
		return data.decode("utf-8")
	except UnicodeDecodeError as exc:
		raise InputError(f"{path}: not valid UTF-8", position=TOPLEVEL_POSITION, type="path_error") from exc


__all__ = [
	"ast",
	"Parser",
	"TerminatorInserter",
	"STMT_PREFIX",
	"STMT_SUFFIX",
	"parse_file",
	"parse_expr",
	"parse_stmt_file",
	"read_source",
]
