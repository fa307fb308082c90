# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Semantic facts: the side tables a type checker hands to the lowering engine.

`SemanticFacts` mirrors the parts of Go's `types.Info` that goblin consumes:

- `types`: expression node -> `TypeAndValue` (type and, for constant
  expressions, the exact value);
- `uses` / `defs`: identifier node -> resolved `Object`;
- `init_order`: package-level initializers in execution order.

All tables are keyed by node identity (the syntax tree uses identity hashing).
Facts are read-only once built; lowering never writes to them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from goblin.core.position import INVALID_POSITION, Position
from goblin.parser import ast

from .constants import Constant
from .types import Type


class ObjectKind(Enum):
	"""Kinds of named entities; the values are the IR's `ident-kind` strings."""

	BUILTIN = "Builtin"
	CONST = "Const"
	FUNC = "Func"
	LABEL = "Label"
	NIL = "Nil"
	PKG_NAME = "PkgName"
	TYPE_NAME = "TypeName"
	VAR = "Var"


# Identifier kind reported when no object is recorded for an identifier.
NO_KIND = "NoKind"


@dataclass(eq=False)
class Object:
	"""A resolved named entity."""

	kind: ObjectKind
	name: str
	type: Optional[Type] = None
	package: Optional[str] = None
	pos: Position = INVALID_POSITION


@dataclass(frozen=True)
class TypeAndValue:
	type: Optional[Type]
	value: Optional[Constant] = None


@dataclass(eq=False)
class Initializer:
	"""One package-level initialization `lhs... = rhs`."""

	lhs: List[Object]
	rhs: ast.Expr


@dataclass
class SemanticFacts:
	types: Dict[ast.Expr, TypeAndValue] = field(default_factory=dict)
	uses: Dict[ast.Ident, Object] = field(default_factory=dict)
	defs: Dict[ast.Ident, Object] = field(default_factory=dict)
	init_order: List[Initializer] = field(default_factory=list)

	def type_of(self, expr: ast.Expr) -> Optional[Type]:
		tv = self.types.get(expr)
		return tv.type if tv is not None else None

	def value_of(self, expr: ast.Expr) -> Optional[Constant]:
		tv = self.types.get(expr)
		return tv.value if tv is not None else None

	def ident_kind(self, ident: ast.Ident) -> str:
		"""The kind of the object `ident` refers to, or `NoKind`."""
		obj = self.uses.get(ident)
		if obj is None:
			return NO_KIND
		return obj.kind.value


__all__ = [
	"ObjectKind",
	"NO_KIND",
	"Object",
	"TypeAndValue",
	"Initializer",
	"SemanticFacts",
]
