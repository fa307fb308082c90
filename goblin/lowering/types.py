# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Type descriptor renderer: semantic type -> `{"type": "Array"|"Basic"|...}`.

Rendering is depth-bounded rather than cycle-aware: a type nested deeper than
`TYPE_DEPTH_LIMIT` (which is what a self-referential named type looks like to
this walk) raises `DepthLimitError` instead of producing a truncated
descriptor.
"""

from __future__ import annotations

from typing import List, Optional

from goblin.core.diagnostics import DepthLimitError, ShapeError
from goblin.core.position import INVALID_POSITION
from goblin.parser import ast
from goblin.semantics import types as T

from .ir import Record

TYPE_DEPTH_LIMIT = 100


def convert_chan_dir(direction: T.ChanDir) -> ast.ChanDir:
	if direction is T.ChanDir.SEND_RECV:
		return ast.BOTH
	if direction is T.ChanDir.SEND_ONLY:
		return ast.ChanDir.SEND
	if direction is T.ChanDir.RECV_ONLY:
		return ast.ChanDir.RECV
	raise ShapeError(f"unknown channel direction {direction!r}", type="internal_error")


def dump_chan_dir(direction: ast.ChanDir) -> str:
	"""Channel direction as `send`, `recv` or `both`."""
	if direction == ast.BOTH:
		return "both"
	if direction == ast.ChanDir.SEND:
		return "send"
	if direction == ast.ChanDir.RECV:
		return "recv"
	raise ShapeError(str(direction), position=INVALID_POSITION, type="internal_error")


def dump_var(var: Optional[T.Var]) -> Optional[Record]:
	if var is None:
		return None
	return {"name": var.id}


def _members(items: List[T.Var], depth: int) -> List[Record]:
	return [{"name": v.name, "type": render_type(v.type, depth + 1)} for v in items]


def render_type(typ: Optional[T.Type], depth: int = 0) -> Optional[Record]:
	if typ is None:
		return None
	if depth > TYPE_DEPTH_LIMIT:
		raise DepthLimitError("type rendering depth limit exceeded")

	if isinstance(typ, T.Array):
		return {"type": "Array", "elem": render_type(typ.elem, depth + 1), "len": typ.length}
	if isinstance(typ, T.Basic):
		return {"type": "Basic", "kind": typ.kind.value}
	if isinstance(typ, T.Chan):
		return {
			"type": "Chan",
			"direction": dump_chan_dir(convert_chan_dir(typ.dir)),
			"elem": render_type(typ.elem, depth + 1),
		}
	if isinstance(typ, T.Interface):
		methods = [{"name": m.name, "type": render_type(m.type, depth + 1)} for m in typ.methods]
		return {"type": "Interface", "methods": methods}
	if isinstance(typ, T.Map):
		return {
			"type": "Map",
			"key": render_type(typ.key, depth + 1),
			"elem": render_type(typ.elem, depth + 1),
		}
	if isinstance(typ, T.Named):
		return {
			"type": "Named",
			"name": typ.name,
			"package": typ.package,
			"underlying": render_type(typ.underlying, depth + 1),
		}
	if isinstance(typ, T.Pointer):
		return {"type": "Pointer", "elem": render_type(typ.elem, depth + 1)}
	if isinstance(typ, T.Signature):
		return {
			"type": "Signature",
			"params": render_type(typ.params, depth + 1),
			"recv": dump_var(typ.recv),
			"results": render_type(typ.results, depth + 1),
			"variadic": typ.variadic,
		}
	if isinstance(typ, T.Slice):
		return {"type": "Slice", "elem": render_type(typ.elem, depth + 1)}
	if isinstance(typ, T.Struct):
		# field tags are not rendered
		return {"type": "Struct", "fields": _members(typ.fields, depth)}
	if isinstance(typ, T.Tuple):
		return {"type": "Tuple", "fields": _members(typ.vars, depth)}
	raise ShapeError(f"unknown semantic type {type(typ).__name__}", type="internal_error")


__all__ = ["TYPE_DEPTH_LIMIT", "convert_chan_dir", "dump_chan_dir", "dump_var", "render_type"]
