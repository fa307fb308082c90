# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Source positions.

A Position mirrors Go's `token.Position`: file name, 0-based offset, 1-based
line and column. Offsets and columns count UTF-8 bytes of the source, as Go
does; `SourceOffsets` converts the character indexes lark reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Position:
	"""A point in a source file."""

	filename: str = ""
	offset: int = 0
	line: int = 0
	column: int = 0

	def is_valid(self) -> bool:
		return self.line > 0

	def __str__(self) -> str:
		name = self.filename
		if self.is_valid():
			if name:
				name += ":"
			name += f"{self.line}"
			if self.column:
				name += f":{self.column}"
		if not name:
			name = "-"
		return name

	def to_json(self) -> Dict[str, Any]:
		return {
			"filename": self.filename,
			"line": self.line,
			"offset": self.offset,
			"column": self.column,
		}


class SourceOffsets:
	"""Character index -> UTF-8 byte offset for one source buffer."""

	def __init__(self, source: str) -> None:
		self._prefix: Optional[List[int]] = None
		if not source.isascii():
			prefix = [0]
			for ch in source:
				prefix.append(prefix[-1] + len(ch.encode("utf-8")))
			self._prefix = prefix

	def position(self, filename: str, index: int, line: int, column: int) -> Position:
		"""A `Position` for the character at `index` (line and column as lark counts them)."""
		if self._prefix is None or index < 0:
			return Position(filename, index, line, column)
		offset = self._prefix[index]
		if column >= 1:
			column = offset - self._prefix[index - column + 1] + 1
		return Position(filename, offset, line, column)


# Sentinels used when a failure has no meaningful source location.
TOPLEVEL_POSITION = Position(filename="toplevel", offset=-1, line=-1, column=-1)
INVALID_POSITION = Position(filename="unspecified", offset=-1, line=-1, column=-1)


def dump_position(pos: Position | None) -> Dict[str, Any]:
	"""Render a position in the IR's `position` shape."""
	if pos is None:
		pos = INVALID_POSITION
	return pos.to_json()


__all__ = ["Position", "SourceOffsets", "TOPLEVEL_POSITION", "INVALID_POSITION", "dump_position"]
