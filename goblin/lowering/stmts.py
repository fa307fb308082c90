# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Statement lowering (the statement part of `NodeLowerer`).

Blocks lower to plain lists of statement nodes, except where a block stands
as a statement of its own (`{ ... }`, an `else` branch), where it becomes a
`block` statement.
"""

from __future__ import annotations

from typing import List, Optional

from goblin.core.diagnostics import ShapeError
from goblin.parser import ast

from .context import LoweringContext
from .ir import Record, node


class StmtLowering:
	ctx: LoweringContext

	def lower_stmt(self, stmt: Optional[ast.Stmt]) -> Optional[Record]:
		if stmt is None:
			return None
		method = getattr(self, f"_visit_stmt_{type(stmt).__name__}", None)
		if method is None:
			raise ShapeError(ast.shape_name(stmt), position=stmt.pos)
		return method(stmt)

	def lower_stmts(self, stmts: List[ast.Stmt]) -> List[Record]:
		return [self.lower_stmt(s) for s in stmts]

	def lower_block(self, block: Optional[ast.BlockStmt]) -> Optional[List[Record]]:
		if block is None:
			return None
		return self.lower_stmts(block.stmts)

	def _stmt(self, tag: str, stmt: ast.Stmt, fields: Optional[Record] = None) -> Record:
		return node("statement", tag, stmt.pos, fields)

	def _visit_stmt_BadStmt(self, stmt: ast.BadStmt) -> Record:
		raise ShapeError("encountered BadStmt", position=stmt.pos, type="internal_error")

	def _visit_stmt_ReturnStmt(self, stmt: ast.ReturnStmt) -> Record:
		return self._stmt("return", stmt, {"values": self.lower_exprs(stmt.results)})

	def _visit_stmt_AssignStmt(self, stmt: ast.AssignStmt) -> Record:
		fields = {"left": self.lower_exprs(stmt.lhs), "right": self.lower_exprs(stmt.rhs)}
		if stmt.tok == "=":
			return self._stmt("assign", stmt, fields)
		if stmt.tok == ":=":
			return self._stmt("define", stmt, fields)
		# `+=` -> `+`
		fields["operator"] = stmt.tok[:-1]
		return self._stmt("assign-operator", stmt, fields)

	def _visit_stmt_EmptyStmt(self, stmt: ast.EmptyStmt) -> Record:
		return self._stmt("empty", stmt)

	def _visit_stmt_ExprStmt(self, stmt: ast.ExprStmt) -> Record:
		return self._stmt("expression", stmt, {"value": self.lower_expr(stmt.x)})

	def _visit_stmt_LabeledStmt(self, stmt: ast.LabeledStmt) -> Record:
		return self._stmt(
			"labeled",
			stmt,
			{"label": self.lower_ident(stmt.label), "statement": self.lower_stmt(stmt.stmt)},
		)

	def _visit_stmt_BranchStmt(self, stmt: ast.BranchStmt) -> Record:
		if stmt.tok == "fallthrough":
			return self._stmt("fallthrough", stmt)
		if stmt.tok in ("break", "continue", "goto"):
			return self._stmt(stmt.tok, stmt, {"label": self.lower_ident(stmt.label)})
		raise ShapeError(stmt.tok, position=stmt.pos, type="unrecognized_token")

	def _visit_stmt_RangeStmt(self, stmt: ast.RangeStmt) -> Record:
		return self._stmt(
			"range",
			stmt,
			{
				"key": self.lower_expr(stmt.key),
				"value": self.lower_expr(stmt.value),
				"target": self.lower_expr(stmt.x),
				"is-assign": stmt.tok == ":=",
				"body": self.lower_block(stmt.body),
			},
		)

	def _visit_stmt_DeclStmt(self, stmt: ast.DeclStmt) -> Record:
		return self._stmt("declaration", stmt, {"target": self.lower_decl(stmt.decl)})

	def _visit_stmt_DeferStmt(self, stmt: ast.DeferStmt) -> Record:
		return self._stmt("defer", stmt, {"target": self.lower_expr(stmt.call)})

	def _visit_stmt_GoStmt(self, stmt: ast.GoStmt) -> Record:
		return self._stmt("go", stmt, {"target": self.lower_expr(stmt.call)})

	def _visit_stmt_IfStmt(self, stmt: ast.IfStmt) -> Record:
		return self._stmt(
			"if",
			stmt,
			{
				"init": self.lower_stmt(stmt.init),
				"condition": self.lower_expr(stmt.cond),
				"body": self.lower_block(stmt.body),
				"else": self.lower_stmt(stmt.else_),
			},
		)

	def _visit_stmt_BlockStmt(self, stmt: ast.BlockStmt) -> Record:
		return self._stmt("block", stmt, {"body": self.lower_block(stmt)})

	def _visit_stmt_ForStmt(self, stmt: ast.ForStmt) -> Record:
		return self._stmt(
			"for",
			stmt,
			{
				"init": self.lower_stmt(stmt.init),
				"condition": self.lower_expr(stmt.cond),
				"post": self.lower_stmt(stmt.post),
				"body": self.lower_block(stmt.body),
			},
		)

	def _visit_stmt_SendStmt(self, stmt: ast.SendStmt) -> Record:
		return self._stmt(
			"send",
			stmt,
			{"channel": self.lower_expr(stmt.chan), "value": self.lower_expr(stmt.value)},
		)

	def _visit_stmt_SelectStmt(self, stmt: ast.SelectStmt) -> Record:
		return self._stmt("select", stmt, {"body": self.lower_block(stmt.body)})

	def _visit_stmt_IncDecStmt(self, stmt: ast.IncDecStmt) -> Record:
		return self._stmt(
			"crement",
			stmt,
			{"target": self.lower_expr(stmt.x), "operation": stmt.tok},
		)

	def _visit_stmt_SwitchStmt(self, stmt: ast.SwitchStmt) -> Record:
		return self._stmt(
			"switch",
			stmt,
			{
				"init": self.lower_stmt(stmt.init),
				"condition": self.lower_expr(stmt.tag),
				"body": self.lower_block(stmt.body),
			},
		)

	def _visit_stmt_TypeSwitchStmt(self, stmt: ast.TypeSwitchStmt) -> Record:
		return self._stmt(
			"type-switch",
			stmt,
			{
				"init": self.lower_stmt(stmt.init),
				"assign": self.lower_stmt(stmt.assign),
				"body": self.lower_block(stmt.body),
			},
		)

	def _visit_stmt_CommClause(self, stmt: ast.CommClause) -> Record:
		return self._stmt(
			"select-clause",
			stmt,
			{"statement": self.lower_stmt(stmt.comm), "body": self.lower_stmts(stmt.body)},
		)

	def _visit_stmt_CaseClause(self, stmt: ast.CaseClause) -> Record:
		# `default` has no expressions
		return self._stmt(
			"case-clause",
			stmt,
			{"expressions": self.lower_exprs(stmt.exprs), "body": self.lower_stmts(stmt.body)},
		)


__all__ = ["StmtLowering"]
