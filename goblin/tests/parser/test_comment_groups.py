# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from goblin.parser import ast, parse_file

SRC = """// Package p does things.
package p

import (
	// fmt is used for printing
	"fmt" // line comment
)

// F is documented.
// Twice.
func F() {}

// detached

func G() {}
"""


def _texts(group: ast.CommentGroup | None) -> list[str]:
	return [c.text for c in group.comments] if group is not None else []


def test_package_doc() -> None:
	file = parse_file(SRC, "p.go")
	assert _texts(file.doc) == ["// Package p does things."]


def test_import_spec_doc_and_line_comment() -> None:
	file = parse_file(SRC, "p.go")
	(spec,) = file.imports
	assert spec.path.value == '"fmt"'
	assert _texts(spec.doc) == ["// fmt is used for printing"]
	assert _texts(spec.comment) == ["// line comment"]


def test_function_doc_groups_adjacent_lines() -> None:
	file = parse_file(SRC, "p.go")
	f = file.decls[1]
	assert _texts(f.doc) == ["// F is documented.", "// Twice."]


def test_detached_comment_is_not_doc() -> None:
	file = parse_file(SRC, "p.go")
	g = file.decls[2]
	assert g.name.name == "G"
	assert g.doc is None


def test_all_comment_groups_in_source_order() -> None:
	file = parse_file(SRC, "p.go")
	assert [_texts(g) for g in file.comments] == [
		["// Package p does things."],
		["// fmt is used for printing"],
		["// line comment"],
		["// F is documented.", "// Twice."],
		["// detached"],
	]
	assert file.comments[0].pos.line == 1


def test_block_comment_spanning_lines_terminates_statement() -> None:
	file = parse_file("package p\nfunc f() {\n\tx := 1 /* a\n\tb */ y := 2\n\t_, _ = x, y\n}\n")
	(fn,) = file.decls
	assert len(fn.body.stmts) == 3


def test_comment_state_is_per_parse() -> None:
	first = parse_file(SRC, "p.go")
	second = parse_file("package q\n", "q.go")
	assert second.comments == []
	assert second.doc is None
	assert len(first.comments) == 5
