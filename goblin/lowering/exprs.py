# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Expression, type and field lowering.

`ExprLowering` is one part of `NodeLowerer` (see `engine.py`). It relies on
`self.ctx` (a `LoweringContext`) and on `lower_block` from the statement part
for function literals.

Order of rules in `lower_expr`:
  1. constant folding: an expression the facts record as constant lowers to a
     `constant` node, whatever its shape;
  2. composite type syntax in expression position lowers as a type;
  3. per-shape visitors (`_visit_expr_<NodeClass>`).
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from goblin.core.diagnostics import ShapeError
from goblin.parser import ast
from goblin.semantics.facts import ObjectKind

from . import heuristics
from .constants import coerce_constant, render_constant
from .context import LoweringContext
from .ir import Record, node, with_type
from .types import dump_chan_dir

# Type syntax that can never denote a value.
_TYPE_SHAPES = (
	ast.ArrayType,
	ast.MapType,
	ast.ChanType,
	ast.FuncType,
	ast.StructType,
	ast.InterfaceType,
)


def split_variadic(params: Optional[ast.FieldList]) -> Tuple[List[ast.Field], Optional[ast.Field]]:
	"""
	Split a parameter list into its ordinary fields and its variadic field.

	The last field is variadic when its type is `...T`. The input is not
	modified.
	"""
	if params is None or not params.fields:
		return [], None
	last = params.fields[-1]
	if isinstance(last.type, ast.Ellipsis):
		return list(params.fields[:-1]), last
	return list(params.fields), None


class ExprLowering:
	ctx: LoweringContext

	# Identifiers and literals

	def lower_ident(self, ident: Optional[ast.Ident]) -> Optional[Record]:
		"""
		A name occurrence.

		`true`, `false` and `iota` become literal nodes (`BOOL`/`IOTA`); with
		facts those are normally folded before getting here.
		"""
		if ident is None:
			return None
		if ident.name in ("true", "false"):
			return node("literal", "BOOL", ident.pos, {"value": ident.name})
		if ident.name == "iota":
			return node("literal", "IOTA", ident.pos, {"value": ident.name})
		return node(
			"ident",
			None,
			ident.pos,
			{"ident-kind": self.ctx.ident_kind(ident), "value": ident.name},
		)

	def lower_basic_lit(self, lit: Optional[ast.BasicLit]) -> Optional[Record]:
		if lit is None:
			return None
		return with_type(node("literal", lit.kind, lit.pos, {"value": lit.value}), self.ctx.go_type(lit))

	def attempt_constant(self, expr: ast.Expr) -> Optional[Record]:
		found = self.ctx.constant_of(expr)
		if found is None:
			return None
		typ, value = found
		value = coerce_constant(value, typ)
		return with_type(
			node("constant", None, expr.pos, {"value": render_constant(value)}),
			self.ctx.go_type(expr),
		)

	# Expressions

	def lower_expr(self, expr: Optional[ast.Expr]) -> Optional[Record]:
		if expr is None:
			return None
		folded = self.attempt_constant(expr)
		if folded is not None:
			return folded
		if isinstance(expr, _TYPE_SHAPES):
			return self.lower_expr_as_type(expr)
		method = getattr(self, f"_visit_expr_{type(expr).__name__}", None)
		if method is None:
			raise ShapeError(ast.shape_name(expr), position=expr.pos)
		return method(expr)

	def lower_exprs(self, exprs: Optional[Sequence[ast.Expr]]) -> List[Optional[Record]]:
		return [self.lower_expr(e) for e in exprs or []]

	def _expression(self, tag: str, expr: ast.Expr, fields: Record) -> Record:
		return with_type(node("expression", tag, expr.pos, fields), self.ctx.go_type(expr))

	def _visit_expr_BadExpr(self, expr: ast.BadExpr) -> Record:
		raise ShapeError("encountered BadExpr", position=expr.pos, type="internal_error")

	def _visit_expr_Ident(self, expr: ast.Ident) -> Record:
		value = self.lower_ident(expr)
		if value["kind"] == "literal":
			return value
		return self._expression("identifier", expr, {"value": value})

	def _visit_expr_Ellipsis(self, expr: ast.Ellipsis) -> Record:
		return self._expression("ellipsis", expr, {"value": self.lower_expr(expr.elt)})

	def _visit_expr_BasicLit(self, expr: ast.BasicLit) -> Record:
		return self.lower_basic_lit(expr)

	def _visit_expr_FuncLit(self, expr: ast.FuncLit) -> Record:
		params, variadic = split_variadic(expr.type.params)
		return with_type(
			node(
				"literal",
				"function",
				expr.pos,
				{
					"params": self.lower_fields(params),
					"variadic": self.lower_field(variadic),
					"results": self.lower_field_list(expr.type.results),
					"body": self.lower_block(expr.body),
				},
			),
			self.ctx.go_type(expr),
		)

	def _visit_expr_CompositeLit(self, expr: ast.CompositeLit) -> Record:
		# the type is omitted for elements of an enclosing composite
		return with_type(
			node(
				"literal",
				"composite",
				expr.pos,
				{
					"declared": self.attempt_expr_as_type(expr.type),
					"values": self.lower_exprs(expr.elts),
				},
			),
			self.ctx.go_type(expr),
		)

	def _visit_expr_BinaryExpr(self, expr: ast.BinaryExpr) -> Record:
		return self._expression(
			"binary",
			expr,
			{
				"left": self.lower_expr(expr.x),
				"right": self.lower_expr(expr.y),
				"operator": expr.op,
			},
		)

	def _visit_expr_IndexExpr(self, expr: ast.IndexExpr) -> Record:
		return self._expression(
			"index",
			expr,
			{"target": self.lower_expr(expr.x), "index": self.lower_expr(expr.index)},
		)

	def _visit_expr_StarExpr(self, expr: ast.StarExpr) -> Record:
		return self._expression("star", expr, {"target": self.lower_expr(expr.x)})

	def _visit_expr_ParenExpr(self, expr: ast.ParenExpr) -> Record:
		return self._expression("paren", expr, {"target": self.lower_expr(expr.x)})

	def _visit_expr_SelectorExpr(self, expr: ast.SelectorExpr) -> Record:
		lhs = self.lower_expr(expr.x)
		if self._is_qualified(lhs):
			return self._expression(
				"identifier",
				expr,
				{"qualifier": lhs["value"], "value": self.lower_ident(expr.sel)},
			)
		return self._expression(
			"selector",
			expr,
			{"target": lhs, "field": self.lower_ident(expr.sel)},
		)

	def _is_qualified(self, lhs: Optional[Record]) -> bool:
		if not self.ctx.has_facts:
			return heuristics.selector_is_qualified(lhs)
		if lhs is None or lhs.get("type") != "identifier" or lhs.get("kind") != "expression":
			return False
		return lhs["value"].get("ident-kind") == ObjectKind.PKG_NAME.value

	def _visit_expr_TypeAssertExpr(self, expr: ast.TypeAssertExpr) -> Record:
		return self._expression(
			"type-assert",
			expr,
			{"target": self.lower_expr(expr.x), "asserted": self.attempt_expr_as_type(expr.type)},
		)

	def _visit_expr_UnaryExpr(self, expr: ast.UnaryExpr) -> Record:
		return self._expression(
			"unary",
			expr,
			{"target": self.lower_expr(expr.x), "operator": expr.op},
		)

	def _visit_expr_SliceExpr(self, expr: ast.SliceExpr) -> Record:
		return self._expression(
			"slice",
			expr,
			{
				"target": self.lower_expr(expr.x),
				"low": self.lower_expr(expr.low),
				"high": self.lower_expr(expr.high),
				"max": self.lower_expr(expr.max),
				"three": expr.slice3,
			},
		)

	def _visit_expr_KeyValueExpr(self, expr: ast.KeyValueExpr) -> Record:
		return self._expression(
			"key-value",
			expr,
			{"key": self.lower_expr(expr.key), "value": self.lower_expr(expr.value)},
		)

	def _visit_expr_CallExpr(self, expr: ast.CallExpr) -> Record:
		allocator = self._allocator_name(expr)
		if allocator == "new":
			return self._expression("new", expr, {"argument": self.lower_expr_as_type(expr.args[0])})
		if allocator == "make":
			return self._expression(
				"make",
				expr,
				{
					"argument": self.lower_expr_as_type(expr.args[0]),
					"rest": self.lower_exprs(expr.args[1:]),
				},
			)

		callee = self.attempt_expr_as_type(expr.fun)
		if heuristics.is_conversion(callee) and expr.args:
			return self._expression(
				"cast",
				expr,
				{"target": self.lower_expr(expr.args[0]), "coerced-to": callee},
			)

		return self._expression(
			"call",
			expr,
			{
				"function": self.lower_expr(expr.fun),
				"arguments": self.lower_exprs(expr.args),
				"ellipsis": expr.has_ellipsis,
			},
		)

	def _allocator_name(self, call: ast.CallExpr) -> Optional[str]:
		name = heuristics.allocator_name(call)
		if name is None or not self.ctx.has_facts:
			return name
		# a local `new` or `make` shadows the built-in
		if self.ctx.ident_kind(call.fun) != ObjectKind.BUILTIN.value:
			return None
		return name

	# Types

	def attempt_expr_as_type(self, expr: Optional[ast.Expr]) -> Optional[Record]:
		"""Lower `expr` as a type, or return None if it does not denote one."""
		if expr is None:
			return None
		if isinstance(expr, ast.ParenExpr):
			return self.attempt_expr_as_type(expr.x)

		go_type = self.ctx.go_type(expr)

		def typ(tag: str, fields: Record) -> Record:
			return with_type(node("type", tag, expr.pos, fields), go_type)

		if isinstance(expr, ast.Ident):
			return typ("identifier", {"value": self.lower_ident(expr)})

		if isinstance(expr, ast.SelectorExpr):
			lhs = self.lower_expr(expr.x)
			if self.ctx.has_facts:
				is_type = self.ctx.ident_kind(expr.sel) == ObjectKind.TYPE_NAME.value
			else:
				is_type = heuristics.selector_is_type(lhs)
			if is_type:
				return typ("identifier", {"qualifier": lhs.get("value"), "value": self.lower_ident(expr.sel)})
			return None

		if isinstance(expr, ast.ArrayType):
			if expr.length is None:
				return typ("slice", {"element": self.lower_expr_as_type(expr.elt)})
			return typ(
				"array",
				{"element": self.lower_expr_as_type(expr.elt), "length": self.lower_expr(expr.length)},
			)

		if isinstance(expr, ast.StarExpr):
			return typ("pointer", {"contained": self.lower_expr_as_type(expr.x)})

		if isinstance(expr, ast.InterfaceType):
			return typ(
				"interface",
				{"incomplete": expr.incomplete, "methods": self.lower_field_list(expr.methods)},
			)

		if isinstance(expr, ast.MapType):
			return typ(
				"map",
				{"key": self.lower_expr_as_type(expr.key), "value": self.lower_expr_as_type(expr.value)},
			)

		if isinstance(expr, ast.ChanType):
			return typ(
				"chan",
				{"direction": dump_chan_dir(expr.dir), "value": self.lower_expr_as_type(expr.value)},
			)

		if isinstance(expr, ast.StructType):
			return typ("struct", {"fields": self.lower_field_list(expr.fields)})

		if isinstance(expr, ast.FuncType):
			params, variadic = split_variadic(expr.params)
			return typ(
				"function",
				{
					"params": self.lower_fields(params),
					"variadic": self.lower_field(variadic),
					"results": self.lower_field_list(expr.results),
				},
			)

		if isinstance(expr, ast.Ellipsis):
			return typ("ellipsis", {"value": self.lower_expr_as_type(expr.elt)})

		return None

	def lower_expr_as_type(self, expr: Optional[ast.Expr]) -> Record:
		"""Lower `expr` as a type; anything else is an `unrecognized_type` error."""
		result = self.attempt_expr_as_type(expr)
		if result is not None:
			return result
		if expr is None:
			raise ShapeError("missing type expression", type="internal_error")
		raise ShapeError(ast.shape_name(expr), position=expr.pos, type="unrecognized_type")

	# Fields

	def lower_field(self, f: Optional[ast.Field]) -> Optional[Record]:
		if f is None:
			return None
		return node(
			"field",
			None,
			f.pos,
			{
				"names": [self.lower_ident(n) for n in f.names],
				"declared-type": self.lower_expr_as_type(f.type),
				"tag": self.lower_basic_lit(f.tag),
			},
		)

	def lower_fields(self, fields: Sequence[ast.Field]) -> List[Record]:
		return [self.lower_field(f) for f in fields]

	def lower_field_list(self, fields: Optional[ast.FieldList]) -> Optional[List[Record]]:
		if fields is None:
			return None
		return self.lower_fields(fields.fields)


__all__ = ["ExprLowering", "split_variadic"]
