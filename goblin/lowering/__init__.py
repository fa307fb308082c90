# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lowering: Go syntax tree (+ optional semantic facts) -> goblin IR.
"""

from .constants import coerce_constant, render_constant
from .context import LoweringContext
from .engine import NodeLowerer, lower_decl, lower_expr, lower_stmt
from .exprs import split_variadic
from .file import lower_file, lower_initializers
from .types import TYPE_DEPTH_LIMIT, render_type

__all__ = [
	"coerce_constant",
	"render_constant",
	"LoweringContext",
	"NodeLowerer",
	"lower_decl",
	"lower_expr",
	"lower_stmt",
	"split_variadic",
	"lower_file",
	"lower_initializers",
	"TYPE_DEPTH_LIMIT",
	"render_type",
]
