# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax-only disambiguation rules.

Without semantic facts some Go forms cannot be classified exactly:

- `a.b` may be a qualified identifier (`fmt.Println`) or a field/method
  selector (`x.f`). Without facts, a selector whose left side is a bare,
  unqualified identifier is taken to be a qualified identifier.
- `T(x)` may be a conversion or a call. A callee that parses as a composite
  type (`[]byte`, `*T`, `chan int`, ...) is a conversion; a callee that is a
  plain name is always treated as a call and left for later stages to sort
  out.
- `new(T)` and `make(T, ...)` are recognized by name.

These rules are knowingly imprecise (a local variable `x` in `x.f` is
classified as a package qualifier) and are kept apart from the facts-aware
path so that imprecision stays in one place.
"""

from __future__ import annotations

from typing import Optional

from goblin.parser import ast

from .ir import Record

ALLOCATORS = ("new", "make")


def is_bare_identifier(record: Optional[Record]) -> bool:
	"""True for an `identifier` expression or type record without a qualifier."""
	if record is None:
		return False
	return record.get("type") == "identifier" and record.get("qualifier") is None


def selector_is_qualified(lhs: Optional[Record]) -> bool:
	"""Syntax-only rule: `a.b` with a bare `a` is a qualified identifier."""
	return is_bare_identifier(lhs)


def selector_is_type(lhs: Optional[Record]) -> bool:
	"""Syntax-only rule: in type position, `a.b` with a bare `a` names a type."""
	return is_bare_identifier(lhs)


def allocator_name(call: ast.CallExpr) -> Optional[str]:
	"""`new` or `make` when the call is one of the allocation built-ins by name."""
	fun = call.fun
	if isinstance(fun, ast.Ident) and fun.name in ALLOCATORS and call.args:
		return fun.name
	return None


def is_conversion(callee_type: Optional[Record]) -> bool:
	"""A callee that lowered as a type other than a plain name is a conversion."""
	return callee_type is not None and callee_type.get("type") != "identifier"


__all__ = [
	"ALLOCATORS",
	"is_bare_identifier",
	"selector_is_qualified",
	"selector_is_type",
	"allocator_name",
	"is_conversion",
]
