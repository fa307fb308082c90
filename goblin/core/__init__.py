# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared core: source positions and the failure taxonomy.
"""

from .diagnostics import (
	DepthLimitError,
	Diagnostic,
	ErrorMode,
	GoblinError,
	InputError,
	ResolutionError,
	ShapeError,
	emit,
	guarded,
)
from .position import INVALID_POSITION, TOPLEVEL_POSITION, Position, dump_position

__all__ = [
	"DepthLimitError",
	"Diagnostic",
	"ErrorMode",
	"GoblinError",
	"InputError",
	"ResolutionError",
	"ShapeError",
	"emit",
	"guarded",
	"INVALID_POSITION",
	"TOPLEVEL_POSITION",
	"Position",
	"dump_position",
]
