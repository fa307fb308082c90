# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Constant renderer: exact constant -> constant value record.

Floats are rendered as an exact numerator/denominator pair of INT records and
complex values as a pair of FLOAT records. Unknown constants render as `None`;
that is not an error.
"""

from __future__ import annotations

from typing import Optional

from goblin.semantics import constants as C
from goblin.semantics import types as T

from .ir import Record


def render_constant(value: Optional[C.Constant]) -> Optional[Record]:
	if value is None:
		return None
	kind = value.kind
	if kind is C.ConstKind.BOOL:
		return {"type": "BOOL", "value": value.exact_string()}
	if kind is C.ConstKind.STRING:
		return {"type": "STRING", "value": value.exact_string()}
	if kind is C.ConstKind.INT:
		return {"type": "INT", "value": value.exact_string()}
	if kind is C.ConstKind.FLOAT:
		return {
			"type": "FLOAT",
			"numerator": render_constant(C.num(value)),
			"denominator": render_constant(C.denom(value)),
		}
	if kind is C.ConstKind.COMPLEX:
		return {
			"type": "COMPLEX",
			"real": render_constant(C.real(value)),
			"imag": render_constant(C.imag(value)),
		}
	return None


def _basic_kind(typ: Optional[T.Type]) -> Optional[T.BasicKind]:
	while isinstance(typ, T.Named):
		typ = typ.underlying
	if isinstance(typ, T.Basic):
		return typ.kind
	return None


def coerce_constant(value: C.Constant, typ: Optional[T.Type]) -> C.Constant:
	"""
	Undo the integer normalization of float and complex constants.

	Exact constants whose value happens to be integral are stored with the Int
	kind; a constant whose type is floating point (or complex) is converted
	back so it renders as a FLOAT (or COMPLEX) record.
	"""
	kind = _basic_kind(typ)
	if kind in T.FLOAT_KINDS:
		return C.to_float(value)
	if kind in T.COMPLEX_KINDS:
		return C.to_complex(value)
	return value


__all__ = ["render_constant", "coerce_constant"]
