# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Failure reporting.

Every failure in goblin is fatal. Internal code raises a `GoblinError`
subclass carrying a `Diagnostic`; nothing below the top-level boundary writes
to stderr or exits. The boundary (`guarded`) decides what a failure turns into:

- `ErrorMode.PANIC`: the exception propagates (debugging, tests);
- `ErrorMode.REPORT`: `{"error": {...}}` is written to stderr and the
  process exits with status 1 (pipeline use).
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional, TextIO, TypeVar

from .position import INVALID_POSITION, Position, dump_position


T = TypeVar("T")


@dataclass(frozen=True)
class Diagnostic:
	"""One structured failure: a machine-readable type, a message and a location."""

	type: str
	info: str
	position: Position = field(default=INVALID_POSITION)

	def to_json(self) -> Dict[str, Any]:
		return {
			"error": {
				"type": self.type,
				"info": self.info,
				"position": dump_position(self.position),
			}
		}


class GoblinError(Exception):
	"""Base class for every fatal goblin failure."""

	default_type = "internal_error"

	def __init__(self, info: str, *, position: Position | None = None, type: str | None = None) -> None:
		self.diagnostic = Diagnostic(
			type=type or self.default_type,
			info=info,
			position=position if position is not None else INVALID_POSITION,
		)
		super().__init__(f"{self.diagnostic.position}: {info}")


class InputError(GoblinError):
	"""The collaborator rejected the input (unreadable path, parse or type error)."""

	default_type = "syntax_error"


class ShapeError(GoblinError):
	"""
	A syntax node the lowering engine has no rule for, or a malformed node.

	`type` is one of `unexpected_node`, `unrecognized_type`,
	`unrecognized_token` or `internal_error` (parser error-recovery nodes).
	"""

	default_type = "unexpected_node"


class DepthLimitError(GoblinError):
	"""A semantic type nested deeper than the rendering bound (positionless)."""

	default_type = "depth_limit_exceeded"


class ResolutionError(GoblinError):
	"""An import path could not be resolved to a package."""

	default_type = "import_error"

	def __init__(self, info: str, *, package: str, position: Position | None = None) -> None:
		self.package = package
		super().__init__(f"{package}: {info}", position=position)


class ErrorMode(Enum):
	"""What the top-level boundary does with a failure."""

	PANIC = "panic"
	REPORT = "report"


def emit(diag: Diagnostic, stream: Optional[TextIO] = None) -> None:
	"""Write one diagnostic object to `stream` (stderr by default)."""
	out = stream if stream is not None else sys.stderr
	out.write(json.dumps(diag.to_json(), separators=(",", ":")))
	out.flush()


def guarded(fn: Callable[[], T], mode: ErrorMode, *, stream: Optional[TextIO] = None) -> T:
	"""
	Run `fn` under the failure boundary.

	In REPORT mode a `GoblinError` is emitted and the process exits with status
	1 (via `SystemExit`); in PANIC mode it propagates unchanged.
	"""
	try:
		return fn()
	except GoblinError as exc:
		if mode is ErrorMode.PANIC:
			raise
		emit(exc.diagnostic, stream)
		raise SystemExit(1) from exc


__all__ = [
	"Diagnostic",
	"GoblinError",
	"InputError",
	"ShapeError",
	"DepthLimitError",
	"ResolutionError",
	"ErrorMode",
	"emit",
	"guarded",
]
