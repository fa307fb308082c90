# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from goblin.core.diagnostics import ShapeError
from goblin.core.position import Position
from goblin.lowering import NodeLowerer, lower_decl, lower_file, lower_initializers
from goblin.parser import ast, parse_file
from goblin.semantics import constants as C
from goblin.semantics import types as T
from goblin.semantics.facts import Initializer, Object, ObjectKind, SemanticFacts, TypeAndValue

SRC = """// Package demo is a demo.
package demo

import "fmt"
import (
	"os"
	str "strings"
	. "math"
)

// Celsius is a temperature.
type Celsius float64

type (
	A = int
	B struct{ X int }
)

const Pi = 3.14 // approximately

var x, y int = 1, 2

// main prints.
func main() {
	fmt.Println(os.Args, str.ToUpper("a"), Sqrt(2))
}

func (c Celsius) String() string { return "" }
"""


@pytest.fixture
def lowered() -> dict:
	return lower_file(parse_file(SRC, "/src/demo/main.go"), "/src/demo/main.go")


def test_file_header(lowered: dict) -> None:
	assert lowered["kind"] == "file"
	assert "type" not in lowered
	assert lowered["path"] == "/src/demo/main.go"
	assert lowered["package-name"]["value"] == "demo"
	assert lowered["package-name"]["ident-kind"] == "NoKind"
	assert lowered["comments"] == ["// Package demo is a demo."]
	assert lowered["position"]["line"] == 2


def test_all_comments(lowered: dict) -> None:
	assert lowered["all-comments"] == [
		["// Package demo is a demo."],
		["// Celsius is a temperature."],
		["// approximately"],
		["// main prints."],
	]


def test_declaration_kinds(lowered: dict) -> None:
	assert [(d["kind"], d["type"]) for d in lowered["declarations"]] == [
		("decl", "import"),
		("decl", "import"),
		("decl", "type-alias"),
		("decl", "type-alias"),
		("decl", "const"),
		("decl", "var"),
		("decl", "function"),
		("decl", "method"),
	]


def test_imports_copy_leading_import_decls(lowered: dict) -> None:
	imports = lowered["imports"]
	assert imports == lowered["declarations"][:2]
	specs = [s for d in imports for s in d["specs"]]
	assert [s["path"] for s in specs] == ["fmt", "os", "strings", "math"]
	assert [s["name"] and s["name"]["value"] for s in specs] == [None, None, "str", "."]
	assert all(s["kind"] == "spec" and s["type"] == "import" for s in specs)


def test_imports_stop_at_first_other_declaration() -> None:
	file = parse_file('package p\nimport "a"\nconst c = 1\nimport `b`\n')
	out = lower_file(file, "p.go")
	assert len(out["declarations"]) == 3
	assert len(out["imports"]) == 1
	assert out["declarations"][2]["specs"][0]["path"] == "b"


def test_type_declarations(lowered: dict) -> None:
	single, group = lowered["declarations"][2:4]
	(celsius,) = single["binds"]
	assert celsius["name"]["value"] == "Celsius"
	assert celsius["alias"] is False
	assert celsius["value"]["type"] == "identifier"
	assert celsius["value"]["value"]["value"] == "float64"
	assert single["position"]["line"] == 12
	assert single["position"]["column"] == 6
	a, b = group["binds"]
	assert a["alias"] is True
	assert b["value"]["type"] == "struct"
	assert b["value"]["fields"][0]["names"][0]["value"] == "X"


def test_value_specs(lowered: dict) -> None:
	const, var = lowered["declarations"][4:6]
	(pi,) = const["specs"]
	assert pi["kind"] == "spec" and pi["type"] == "const"
	assert pi["declared-type"] is None
	assert pi["values"][0] == {
		"kind": "literal",
		"type": "FLOAT",
		"value": "3.14",
		"position": pi["values"][0]["position"],
	}
	assert pi["comments"] == ["// approximately"]
	assert pi["doc"] == []
	(xy,) = var["specs"]
	assert [n["value"] for n in xy["names"]] == ["x", "y"]
	assert xy["declared-type"]["value"]["value"] == "int"
	assert len(xy["values"]) == 2


def test_functions_and_methods(lowered: dict) -> None:
	main, method = lowered["declarations"][6:]
	assert main["name"]["value"] == "main"
	assert main["comments"] == ["// main prints."]
	assert main["params"] == [] and main["variadic"] is None and main["results"] is None
	call = main["body"][0]["value"]
	assert call["function"]["qualifier"]["value"] == "fmt"
	assert call["arguments"][0]["type"] == "identifier"
	assert call["arguments"][0]["qualifier"]["value"] == "os"
	assert method["receiver"]["names"][0]["value"] == "c"
	assert method["receiver"]["declared-type"]["value"]["value"] == "Celsius"
	assert method["name"]["value"] == "String"
	(result,) = method["results"]
	assert result["names"] == []
	assert result["declared-type"]["value"]["value"] == "string"
	assert method["comments"] == []


def test_bad_decl_is_internal_error() -> None:
	with pytest.raises(ShapeError) as info:
		lower_decl(ast.BadDecl(pos=Position("x.go", 0, 1, 1)))
	assert info.value.diagnostic.type == "internal_error"


def test_unknown_gen_decl_token() -> None:
	decl = ast.GenDecl(pos=Position(), tok="package", specs=[])
	with pytest.raises(ShapeError) as info:
		lower_decl(decl)
	assert info.value.diagnostic.type == "unrecognized_token"


def test_empty_type_group_uses_decl_position() -> None:
	decl = ast.GenDecl(pos=Position("x.go", 5, 2, 1), tok="type", specs=[], grouped=True)
	out = lower_decl(decl)
	assert out["binds"] == []
	assert out["position"]["offset"] == 5


def test_initializers_need_facts() -> None:
	assert lower_initializers(None) == []


def test_initializers_in_execution_order() -> None:
	file = parse_file("package p\n\nvar a, b = f()\nvar c = 1\n", "p.go")
	first, second = file.decls
	call = first.specs[0].values[0]
	one = second.specs[0].values[0]
	a = Object(ObjectKind.VAR, "a", pos=first.specs[0].names[0].pos)
	b = Object(ObjectKind.VAR, "b", pos=first.specs[0].names[1].pos)
	c = Object(ObjectKind.VAR, "c", pos=second.specs[0].names[0].pos)
	int_t = T.TYP[T.BasicKind.INT]
	facts = SemanticFacts(
		types={one: TypeAndValue(int_t, C.make_int(1))},
		defs={first.specs[0].names[0]: a, first.specs[0].names[1]: b, second.specs[0].names[0]: c},
		init_order=[Initializer([c], one), Initializer([a, b], call)],
	)
	inits = lower_initializers(facts, NodeLowerer(facts))
	assert [i["type"] for i in inits] == ["initializer", "initializer"]
	assert [v["value"]["value"] for v in inits[0]["vars"]] == ["c"]
	assert inits[0]["value"]["kind"] == "constant"
	assert [v["value"]["value"] for v in inits[1]["vars"]] == ["a", "b"]
	assert inits[1]["vars"][1]["position"]["column"] == 8
	assert inits[1]["value"]["type"] == "call"
	assert inits[1]["position"] == inits[1]["value"]["position"]


def test_file_lowering_with_facts_decorates_expressions() -> None:
	file = parse_file("package p\n\nconst k = 1 << 3\n", "p.go")
	value = file.decls[0].specs[0].values[0]
	facts = SemanticFacts(types={value: TypeAndValue(T.TYP[T.BasicKind.UNTYPED_INT], C.make_int(8))})
	out = lower_file(file, "p.go", facts)
	folded = out["declarations"][0]["specs"][0]["values"][0]
	assert folded["kind"] == "constant"
	assert folded["value"] == {"type": "INT", "value": "8"}
	assert folded["go-type"] == {"type": "Basic", "kind": "UntypedInt"}
