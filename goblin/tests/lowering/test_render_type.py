# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from goblin.core.diagnostics import DepthLimitError
from goblin.lowering.types import TYPE_DEPTH_LIMIT, render_type
from goblin.semantics import types as T

INT = T.TYP[T.BasicKind.INT]
STRING = T.TYP[T.BasicKind.STRING]


def test_basic_and_composites() -> None:
	assert render_type(INT) == {"type": "Basic", "kind": "Int"}
	assert render_type(T.TYP[T.BasicKind.UINTPTR]) == {"type": "Basic", "kind": "UIntptr"}
	assert render_type(T.Array(STRING, 4)) == {"type": "Array", "elem": {"type": "Basic", "kind": "String"}, "len": 4}
	assert render_type(T.Map(STRING, T.Slice(INT))) == {
		"type": "Map",
		"key": {"type": "Basic", "kind": "String"},
		"elem": {"type": "Slice", "elem": {"type": "Basic", "kind": "Int"}},
	}
	assert render_type(T.Chan(T.ChanDir.RECV_ONLY, INT))["direction"] == "recv"
	assert render_type(T.Chan(T.ChanDir.SEND_RECV, INT))["direction"] == "both"


def test_signature_with_receiver() -> None:
	recv = T.Var("s", T.Pointer(T.Named("S", "example.com/p", T.Struct())), package="example.com/p")
	sig = T.Signature(
		params=T.Tuple([T.Var("xs", T.Slice(INT), package="example.com/p")]),
		results=T.Tuple([T.Var("", T.TYP[T.BasicKind.BOOL])]),
		recv=recv,
		variadic=True,
	)
	out = render_type(sig)
	assert out["type"] == "Signature"
	assert out["recv"] == {"name": "example.com/p.s"}
	assert out["variadic"] is True
	assert out["params"] == {
		"type": "Tuple",
		"fields": [{"name": "xs", "type": {"type": "Slice", "elem": {"type": "Basic", "kind": "Int"}}}],
	}
	assert out["results"]["fields"][0]["type"] == {"type": "Basic", "kind": "Bool"}


def test_struct_interface_and_named() -> None:
	point = T.Named("Point", "geo", T.Struct([T.Var("X", INT), T.Var("y", INT, package="geo")], tags=["json:\"x\"", ""]))
	out = render_type(point)
	assert out["type"] == "Named"
	assert out["name"] == "Point"
	assert out["package"] == "geo"
	assert [f["name"] for f in out["underlying"]["fields"]] == ["X", "y"]
	assert "tags" not in out["underlying"]

	stringer = T.Interface([T.Method("String", T.Signature(results=T.Tuple([T.Var("", STRING)])))])
	(method,) = render_type(stringer)["methods"]
	assert method["name"] == "String"
	assert method["type"]["recv"] is None


def test_var_id_qualifies_unexported_names() -> None:
	assert T.Var("Exported", INT, package="a/b").id == "Exported"
	assert T.Var("local", INT, package="a/b").id == "a/b.local"
	assert T.Var("local", INT).id == "_.local"


def test_self_referential_named_type_hits_depth_limit() -> None:
	node = T.Named("Node", "list")
	node.underlying = T.Struct([T.Var("Next", T.Pointer(node))])
	with pytest.raises(DepthLimitError) as info:
		render_type(node)
	assert info.value.diagnostic.type == "depth_limit_exceeded"


def test_depth_bound_is_exact() -> None:
	typ: T.Type = INT
	for _ in range(TYPE_DEPTH_LIMIT):
		typ = T.Pointer(typ)
	# the innermost Basic sits at depth TYPE_DEPTH_LIMIT
	assert render_type(typ)["type"] == "Pointer"
	with pytest.raises(DepthLimitError):
		render_type(T.Pointer(typ))
