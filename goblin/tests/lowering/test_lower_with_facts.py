# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Expression lowering decorated by semantic facts."""

from __future__ import annotations

import random
from fractions import Fraction

from goblin.core.position import Position
from goblin.lowering import lower_expr
from goblin.parser import ast, parse_expr
from goblin.semantics import constants as C
from goblin.semantics import types as T
from goblin.semantics.facts import Object, ObjectKind, SemanticFacts, TypeAndValue

P = Position("f.go", 0, 1, 1)
BASIC = T.TYP


def _basic(kind: T.BasicKind) -> dict:
	return {"type": "Basic", "kind": kind.value}


def _int(text: str) -> dict:
	return {"type": "INT", "value": text}


def test_constant_expression_folds_whatever_its_shape() -> None:
	call = parse_expr('len("abc")')
	facts = SemanticFacts(types={call: TypeAndValue(BASIC[T.BasicKind.INT], C.make_int(3))})
	out = lower_expr(call, facts)
	assert out == {
		"kind": "constant",
		"value": _int("3"),
		"go-type": _basic(T.BasicKind.INT),
		"position": {"filename": "", "line": 1, "offset": 0, "column": 1},
	}


def test_true_folds_to_bool_constant() -> None:
	ident = parse_expr("true")
	facts = SemanticFacts(types={ident: TypeAndValue(BASIC[T.BasicKind.UNTYPED_BOOL], C.make_bool(True))})
	out = lower_expr(ident, facts)
	assert out["kind"] == "constant"
	assert out["value"] == {"type": "BOOL", "value": "true"}


def test_string_constant_is_quoted() -> None:
	lit = ast.BasicLit(pos=P, kind="STRING", value='"a\\n"')
	facts = SemanticFacts(types={lit: TypeAndValue(BASIC[T.BasicKind.UNTYPED_STRING], C.make_from_literal(lit.value, "STRING"))})
	assert lower_expr(lit, facts)["value"] == {"type": "STRING", "value": '"a\\n"'}


def test_integral_float_constant_renders_as_float() -> None:
	x = parse_expr("x")
	facts = SemanticFacts(types={x: TypeAndValue(BASIC[T.BasicKind.FLOAT64], C.make_float(2))})
	assert lower_expr(x, facts)["value"] == {"type": "FLOAT", "numerator": _int("2"), "denominator": _int("1")}


def test_float_coercion_looks_through_named_types() -> None:
	x = parse_expr("freezing")
	celsius = T.Named("Celsius", "temp", BASIC[T.BasicKind.FLOAT64])
	facts = SemanticFacts(types={x: TypeAndValue(celsius, C.make_int(0))})
	out = lower_expr(x, facts)
	assert out["value"]["type"] == "FLOAT"
	assert out["go-type"]["type"] == "Named"


def test_complex_constant_renders_parts_as_floats() -> None:
	x = parse_expr("z")
	facts = SemanticFacts(types={x: TypeAndValue(BASIC[T.BasicKind.COMPLEX128], C.make_int(1))})
	assert lower_expr(x, facts)["value"] == {
		"type": "COMPLEX",
		"real": {"type": "FLOAT", "numerator": _int("1"), "denominator": _int("1")},
		"imag": {"type": "FLOAT", "numerator": _int("0"), "denominator": _int("1")},
	}


def test_unknown_constant_value_is_null() -> None:
	x = parse_expr("bad")
	facts = SemanticFacts(types={x: TypeAndValue(BASIC[T.BasicKind.INVALID], C.UNKNOWN)})
	out = lower_expr(x, facts)
	assert out["kind"] == "constant"
	assert out["value"] is None


def test_float_literals_decode_to_exact_fractions() -> None:
	rng = random.Random(7)
	untyped = BASIC[T.BasicKind.UNTYPED_FLOAT]
	for _ in range(200):
		text = repr(abs(rng.uniform(-1e9, 1e9)) * 10 ** rng.randint(-30, 30))
		lit = ast.BasicLit(pos=P, kind="FLOAT", value=text)
		facts = SemanticFacts(types={lit: TypeAndValue(untyped, C.make_from_literal(text, "FLOAT"))})
		value = lower_expr(lit, facts)["value"]
		assert value["type"] == "FLOAT"
		got = Fraction(int(value["numerator"]["value"]), int(value["denominator"]["value"]))
		assert got == Fraction(text)


def test_uint64_max_survives_exactly() -> None:
	lit = ast.BasicLit(pos=P, kind="INT", value="18446744073709551615")
	facts = SemanticFacts(types={lit: TypeAndValue(BASIC[T.BasicKind.UINT64], C.make_from_literal(lit.value, "INT"))})
	out = lower_expr(lit, facts)
	assert out["value"] == _int("18446744073709551615")
	assert out["go-type"] == {"type": "Basic", "kind": "UInt64"}


def test_non_constant_literal_carries_go_type() -> None:
	lit = ast.BasicLit(pos=P, kind="INT", value="1")
	facts = SemanticFacts(types={lit: TypeAndValue(BASIC[T.BasicKind.INT])})
	out = lower_expr(lit, facts)
	assert out["kind"] == "literal"
	assert out["go-type"] == _basic(T.BasicKind.INT)


def test_identifier_kind_and_type_come_from_facts() -> None:
	x = parse_expr("x")
	facts = SemanticFacts(
		types={x: TypeAndValue(BASIC[T.BasicKind.STRING])},
		uses={x: Object(ObjectKind.VAR, "x", BASIC[T.BasicKind.STRING])},
	)
	out = lower_expr(x, facts)
	assert out["value"]["ident-kind"] == "Var"
	assert out["go-type"] == _basic(T.BasicKind.STRING)


def test_package_qualified_selector_with_facts() -> None:
	sel = parse_expr("fmt.Println")
	facts = SemanticFacts(
		uses={
			sel.x: Object(ObjectKind.PKG_NAME, "fmt"),
			sel.sel: Object(ObjectKind.FUNC, "Println", package="fmt"),
		}
	)
	first = lower_expr(sel, facts)
	assert first["type"] == "identifier"
	assert first["qualifier"]["ident-kind"] == "PkgName"
	assert first["value"]["ident-kind"] == "Func"
	assert lower_expr(sel, facts) == first


def test_variable_selector_with_facts_is_field_access() -> None:
	sel = parse_expr("p.X")
	facts = SemanticFacts(uses={sel.x: Object(ObjectKind.VAR, "p")})
	out = lower_expr(sel, facts)
	assert out["type"] == "selector"
	assert out["field"]["value"] == "X"


def test_qualified_type_in_type_position_with_facts() -> None:
	assertion = parse_expr("v.(io.Reader)")
	facts = SemanticFacts(
		uses={
			assertion.type.x: Object(ObjectKind.PKG_NAME, "io"),
			assertion.type.sel: Object(ObjectKind.TYPE_NAME, "Reader", package="io"),
		}
	)
	asserted = lower_expr(assertion, facts)["asserted"]
	assert asserted["kind"] == "type"
	assert asserted["qualifier"]["value"] == "io"
	assert asserted["value"]["ident-kind"] == "TypeName"


def test_builtin_new_versus_shadowed_new() -> None:
	call = parse_expr("new(T)")
	builtin = SemanticFacts(uses={call.fun: Object(ObjectKind.BUILTIN, "new")})
	assert lower_expr(call, builtin)["type"] == "new"
	shadowed = SemanticFacts(uses={call.fun: Object(ObjectKind.FUNC, "new", package="main")})
	assert lower_expr(call, shadowed)["type"] == "call"


def test_facts_do_not_leak_between_invocations() -> None:
	x = parse_expr("x")
	facts = SemanticFacts(types={x: TypeAndValue(BASIC[T.BasicKind.INT], C.make_int(5))})
	assert lower_expr(x, facts)["kind"] == "constant"
	assert lower_expr(x)["kind"] == "expression"


def test_string_constant_with_raw_byte_is_quoted_exactly() -> None:
	lit = parse_expr('"\\xff"')
	facts = SemanticFacts(types={lit: TypeAndValue(BASIC[T.BasicKind.UNTYPED_STRING], C.make_from_literal(lit.value, "STRING"))})
	assert lower_expr(lit, facts)["value"] == {"type": "STRING", "value": '"\\xff"'}
