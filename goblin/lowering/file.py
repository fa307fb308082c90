# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
File lowering: one parsed Go file -> one `file` IR document.

The document carries the package name, the package doc comment, every
comment group in source order, all declarations, and a second copy of the
leading run of import declarations under `imports`.
"""

from __future__ import annotations

from typing import List, Optional

from goblin.parser import ast
from goblin.semantics.facts import Initializer, SemanticFacts

from .decls import lower_comment_group
from .engine import NodeLowerer
from .ir import Record, node


def _is_import(decl: ast.Decl) -> bool:
	return isinstance(decl, ast.GenDecl) and decl.tok == "import"


def _leading_imports(decls: List[ast.Decl]) -> List[ast.Decl]:
	count = 0
	for decl in decls:
		if not _is_import(decl):
			break
		count += 1
	return decls[:count]


def lower_file(
	file: ast.File,
	path: str,
	facts: Optional[SemanticFacts] = None,
	*,
	lowerer: Optional[NodeLowerer] = None,
) -> Record:
	"""
	Lower a whole file.

	`facts`, when given, decorate the IR with type descriptors and folded
	constants. A caller that already holds a `NodeLowerer` for the file's
	package can pass it instead.
	"""
	lw = lowerer if lowerer is not None else NodeLowerer(facts)
	return node(
		"file",
		None,
		file.pos,
		{
			"path": path,
			"package-name": lw.lower_ident(file.name),
			"comments": lower_comment_group(file.doc),
			"all-comments": [lower_comment_group(g) for g in file.comments],
			"declarations": [lw.lower_decl(d) for d in file.decls],
			"imports": [lw.lower_decl(d) for d in _leading_imports(file.decls)],
		},
	)


def lower_initializer(init: Initializer, lowerer: NodeLowerer) -> Record:
	"""One package-level initialization as an `initializer` statement."""
	names = []
	for obj in init.lhs:
		# the checker reports objects, not identifiers; rebuild the name
		# occurrence at the declaration site
		ident = ast.Ident(pos=obj.pos, name=obj.name)
		names.append(node("expression", "identifier", obj.pos, {"value": lowerer.lower_ident(ident)}))
	value = lowerer.lower_expr(init.rhs)
	return node("statement", "initializer", init.rhs.pos, {"vars": names, "value": value})


def lower_initializers(facts: Optional[SemanticFacts], lowerer: Optional[NodeLowerer] = None) -> List[Record]:
	"""Initializers in execution order; empty when no facts are available."""
	if facts is None:
		return []
	lw = lowerer if lowerer is not None else NodeLowerer(facts)
	return [lower_initializer(init, lw) for init in facts.init_order]


__all__ = ["lower_file", "lower_initializer", "lower_initializers"]
