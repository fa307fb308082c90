# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The goblin IR record vocabulary.

IR nodes are plain JSON-ready dicts. Every node carries `kind` and, for the
kinds that have one, a kind-specific `type` tag; the (kind, tag) pairs form a
closed set (`SHAPES`). `node()` is the only constructor the lowering engine
uses, so an unknown pair fails loudly at the point where it is built.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from goblin.core.diagnostics import ShapeError
from goblin.core.position import Position, dump_position

Record = Dict[str, Any]

TYPE_TAGS = frozenset(
	{
		"identifier",
		"array",
		"slice",
		"pointer",
		"map",
		"chan",
		"struct",
		"interface",
		"function",
		"ellipsis",
	}
)

EXPRESSION_TAGS = frozenset(
	{
		"identifier",
		"binary",
		"unary",
		"index",
		"slice",
		"star",
		"paren",
		"selector",
		"type-assert",
		"key-value",
		"call",
		"cast",
		"new",
		"make",
		"ellipsis",
	}
)

LITERAL_TAGS = frozenset({"BOOL", "IOTA", "INT", "FLOAT", "IMAG", "CHAR", "STRING", "function", "composite"})

STATEMENT_TAGS = frozenset(
	{
		"return",
		"assign",
		"define",
		"assign-operator",
		"empty",
		"expression",
		"labeled",
		"break",
		"continue",
		"goto",
		"fallthrough",
		"range",
		"declaration",
		"defer",
		"if",
		"block",
		"for",
		"go",
		"send",
		"select",
		"crement",
		"switch",
		"type-switch",
		"select-clause",
		"case-clause",
		"initializer",
	}
)

DECL_TAGS = frozenset({"type-alias", "import", "const", "var", "function", "method"})

SPEC_TAGS = frozenset({"import", "const", "var"})

# Kinds without a tag: name occurrences, fields, folded constants and files.
UNTAGGED_KINDS = frozenset({"ident", "field", "constant", "file"})

SHAPES = frozenset(
	[("type", t) for t in TYPE_TAGS]
	+ [("expression", t) for t in EXPRESSION_TAGS]
	+ [("literal", t) for t in LITERAL_TAGS]
	+ [("statement", t) for t in STATEMENT_TAGS]
	+ [("decl", t) for t in DECL_TAGS]
	+ [("spec", t) for t in SPEC_TAGS]
	+ [(k, None) for k in UNTAGGED_KINDS]
)


def node(kind: str, tag: Optional[str], pos: Position | None, fields: Optional[Record] = None) -> Record:
	"""Build one IR node; `fields` holds the kind-specific children."""
	if (kind, tag) not in SHAPES:
		raise ShapeError(f"no IR shape ({kind}, {tag})", position=pos, type="internal_error")
	out: Record = {"kind": kind}
	if tag is not None:
		out["type"] = tag
	if fields:
		out.update(fields)
	out["position"] = dump_position(pos)
	return out


def with_type(record: Record, go_type: Optional[Record]) -> Record:
	"""Attach a type descriptor when one was recorded."""
	if go_type is not None:
		record["go-type"] = go_type
	return record


__all__ = [
	"Record",
	"TYPE_TAGS",
	"EXPRESSION_TAGS",
	"LITERAL_TAGS",
	"STATEMENT_TAGS",
	"DECL_TAGS",
	"SPEC_TAGS",
	"UNTAGGED_KINDS",
	"SHAPES",
	"node",
	"with_type",
]
