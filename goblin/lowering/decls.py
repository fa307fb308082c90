# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration lowering (the declaration part of `NodeLowerer`).

A general declaration is classified by its keyword:
  - `type`: one `type-alias` node carrying every binding of the group;
  - `import`, `const`, `var`: one node whose `specs` hold one record per
    member of the group.
Functions and methods lower to `function` / `method` nodes.
"""

from __future__ import annotations

from typing import List, Optional

from goblin.core.diagnostics import ShapeError
from goblin.parser import ast

from .context import LoweringContext
from .exprs import split_variadic
from .ir import Record, node


def lower_comment_group(group: Optional[ast.CommentGroup]) -> List[str]:
	"""Raw comment texts of a group (`[]` for no group)."""
	if group is None:
		return []
	return [c.text for c in group.comments]


class DeclLowering:
	ctx: LoweringContext

	def lower_decl(self, decl: ast.Decl) -> Record:
		method = getattr(self, f"_visit_decl_{type(decl).__name__}", None)
		if method is None:
			raise ShapeError(ast.shape_name(decl), position=decl.pos)
		return method(decl)

	def _visit_decl_BadDecl(self, decl: ast.BadDecl) -> Record:
		raise ShapeError("encountered BadDecl", position=decl.pos, type="internal_error")

	def _visit_decl_GenDecl(self, decl: ast.GenDecl) -> Record:
		if decl.tok == "type":
			return self.lower_type_specs(decl)
		if decl.tok == "import":
			specs = [self.lower_import_spec(s) for s in decl.specs]
		elif decl.tok in ("const", "var"):
			specs = [self.lower_value_spec(decl.tok, s) for s in decl.specs]
		else:
			raise ShapeError(decl.tok, position=decl.pos, type="unrecognized_token")
		return node("decl", decl.tok, decl.pos, {"specs": specs})

	def _visit_decl_FuncDecl(self, decl: ast.FuncDecl) -> Record:
		params, variadic = split_variadic(decl.type.params)
		fields: Record = {
			"name": self.lower_ident(decl.name),
			"body": self.lower_block(decl.body),
			"params": self.lower_fields(params),
			"variadic": self.lower_field(variadic),
			"results": self.lower_field_list(decl.type.results),
			"comments": lower_comment_group(decl.doc),
		}
		if decl.recv is None:
			return node("decl", "function", decl.pos, fields)
		if not decl.recv.fields:
			raise ShapeError("method without receiver", position=decl.pos, type="internal_error")
		fields["receiver"] = self.lower_field(decl.recv.fields[0])
		return node("decl", "method", decl.pos, fields)

	def lower_type_specs(self, decl: ast.GenDecl) -> Record:
		binds = []
		for spec in decl.specs:
			if not isinstance(spec, ast.TypeSpec):
				raise ShapeError(ast.shape_name(spec), position=spec.pos)
			binds.append(
				{
					"name": self.lower_ident(spec.name),
					"value": self.lower_expr_as_type(spec.type),
					"alias": spec.assign,
				}
			)
		pos = decl.specs[0].pos if decl.specs else decl.pos
		return node("decl", "type-alias", pos, {"binds": binds})

	def lower_import_spec(self, spec: ast.ImportSpec) -> Record:
		if not isinstance(spec, ast.ImportSpec):
			raise ShapeError(ast.shape_name(spec), position=spec.pos)
		return node(
			"spec",
			"import",
			spec.pos,
			{
				"doc": lower_comment_group(spec.doc),
				"comments": lower_comment_group(spec.comment),
				"name": self.lower_ident(spec.name),
				"path": spec.path.value.strip('"`'),
			},
		)

	def lower_value_spec(self, tok: str, spec: ast.ValueSpec) -> Record:
		if not isinstance(spec, ast.ValueSpec):
			raise ShapeError(ast.shape_name(spec), position=spec.pos)
		return node(
			"spec",
			tok,
			spec.pos,
			{
				"names": [self.lower_ident(n) for n in spec.names],
				"declared-type": self.attempt_expr_as_type(spec.type),
				"values": self.lower_exprs(spec.values),
				"comments": lower_comment_group(spec.comment),
				"doc": lower_comment_group(spec.doc),
			},
		)


__all__ = ["DeclLowering", "lower_comment_group"]
