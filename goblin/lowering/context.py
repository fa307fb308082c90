# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Per-invocation lowering context.

The context carries the (optional) semantic facts for the tree being lowered.
It is created by each top-level lowering call and passed down explicitly, so
lowering holds no process-wide state and concurrent invocations do not
interfere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from goblin.parser import ast
from goblin.semantics.constants import Constant
from goblin.semantics.facts import NO_KIND, SemanticFacts
from goblin.semantics.types import Type

from .ir import Record
from .types import render_type


@dataclass(frozen=True)
class LoweringContext:
	facts: Optional[SemanticFacts] = None

	@property
	def has_facts(self) -> bool:
		return self.facts is not None

	def go_type(self, expr: Optional[ast.Expr]) -> Optional[Record]:
		"""Descriptor of the type recorded for `expr`, if facts recorded one."""
		if self.facts is None or expr is None:
			return None
		return render_type(self.facts.type_of(expr))

	def ident_kind(self, ident: ast.Ident) -> str:
		if self.facts is None:
			return NO_KIND
		return self.facts.ident_kind(ident)

	def constant_of(self, expr: ast.Expr) -> Optional[Tuple[Type, Constant]]:
		"""The (type, value) pair of a constant expression, if facts have one."""
		if self.facts is None:
			return None
		tv = self.facts.types.get(expr)
		if tv is None or tv.type is None or tv.value is None:
			return None
		return tv.type, tv.value


__all__ = ["LoweringContext"]
