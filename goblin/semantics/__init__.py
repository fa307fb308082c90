# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Semantic facts model: types, exact constants and resolved symbols.

goblin does not type-check; callers that have a checker build these values
and pass them to the lowering engine.
"""

from . import constants, types
from .constants import ConstKind, Constant
from .facts import NO_KIND, Initializer, Object, ObjectKind, SemanticFacts, TypeAndValue

__all__ = [
	"constants",
	"types",
	"ConstKind",
	"Constant",
	"NO_KIND",
	"Initializer",
	"Object",
	"ObjectKind",
	"SemanticFacts",
	"TypeAndValue",
]
