# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from goblin.lowering import heuristics as H
from goblin.parser import parse_expr


def test_bare_identifier() -> None:
	assert H.is_bare_identifier({"kind": "expression", "type": "identifier", "value": {}})
	assert not H.is_bare_identifier({"kind": "expression", "type": "identifier", "qualifier": {}, "value": {}})
	assert not H.is_bare_identifier({"kind": "expression", "type": "call"})
	assert not H.is_bare_identifier(None)


def test_allocator_name_needs_arguments() -> None:
	assert H.allocator_name(parse_expr("new(T)")) == "new"
	assert H.allocator_name(parse_expr("make(chan int)")) == "make"
	assert H.allocator_name(parse_expr("make()")) is None
	assert H.allocator_name(parse_expr("alloc(T)")) is None
	assert H.allocator_name(parse_expr("x.new(T)")) is None


def test_conversion_rule() -> None:
	assert H.is_conversion({"kind": "type", "type": "slice"})
	assert not H.is_conversion({"kind": "type", "type": "identifier"})
	assert not H.is_conversion(None)
