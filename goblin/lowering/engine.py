# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Node lowering engine: Go syntax (+ optional semantic facts) -> goblin IR.

Entry points (stage API):
  - lower_expr: one expression (or type in expression position)
  - lower_stmt: one statement
  - lower_decl: one top-level declaration
  - NodeLowerer.lower_expr_as_type: an expression that must denote a type

Each `NodeLowerer` owns a `LoweringContext`; build one per tree (or per
package) being lowered. Lowering never mutates its input and fails loudly
(`ShapeError`) on any node it has no rule for.
"""

from __future__ import annotations

from typing import Optional

from goblin.parser import ast
from goblin.semantics.facts import SemanticFacts

from .context import LoweringContext
from .decls import DeclLowering
from .exprs import ExprLowering
from .ir import Record
from .stmts import StmtLowering


class NodeLowerer(DeclLowering, StmtLowering, ExprLowering):
	def __init__(self, facts: Optional[SemanticFacts] = None) -> None:
		self.ctx = LoweringContext(facts)


def lower_expr(expr: ast.Expr, facts: Optional[SemanticFacts] = None) -> Optional[Record]:
	return NodeLowerer(facts).lower_expr(expr)


def lower_stmt(stmt: ast.Stmt, facts: Optional[SemanticFacts] = None) -> Optional[Record]:
	return NodeLowerer(facts).lower_stmt(stmt)


def lower_decl(decl: ast.Decl, facts: Optional[SemanticFacts] = None) -> Record:
	return NodeLowerer(facts).lower_decl(decl)


__all__ = ["NodeLowerer", "lower_expr", "lower_stmt", "lower_decl"]
