# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""Program assembly against in-memory collaborators."""

from __future__ import annotations

from typing import Dict, List

import pytest

from goblin.core.diagnostics import ResolutionError
from goblin.parser import ast, parse_file
from goblin.program.assembler import dump_package, load
from goblin.program.loader import CheckedFile, Package
from goblin.semantics import constants as C
from goblin.semantics import types as T
from goblin.semantics.facts import Initializer, Object, ObjectKind, SemanticFacts, TypeAndValue


class FakeProgram:
	"""Parser, checker and resolver over a dict of sources keyed by path."""

	def __init__(self, sources: Dict[str, str], packages: Dict[str, List[str]]) -> None:
		self.sources = sources
		self.packages = packages  # import path -> file paths
		self.resolved: List[List[str]] = []

	def parse_file(self, path: str) -> ast.File:
		return parse_file(self.sources[path], path)

	def check(self, path: str, file: ast.File) -> CheckedFile:
		return CheckedFile(
			name=file.name.name,
			path="example.com/main",
			facts=None,
			imports=[s.path.value.strip('"') for s in file.imports],
		)

	def resolve(self, paths: List[str]) -> List[Package]:
		self.resolved.append(list(paths))
		return [self._package(p) for p in paths]

	def _package(self, path: str) -> Package:
		if path not in self.packages:
			raise ResolutionError("cannot find package", package=path)
		files = [self.parse_file(f) for f in self.packages[path]]
		deps = [s.path.value.strip('"') for f in files for s in f.imports]
		return Package(
			name=files[0].name.name,
			path=path,
			file_paths=list(self.packages[path]),
			files=files,
			imports=[self._package(d) for d in deps],
		)


def test_entry_with_transitive_imports() -> None:
	program = FakeProgram(
		{
			"main.go": 'package main\nimport "x/b"\nfunc main() { b.B() }\n',
			"b/b.go": 'package b\nimport "x/a"\nfunc B() { a.A() }\n',
			"a/a.go": "package a\nfunc A() {}\n",
		},
		{"x/b": ["b/b.go"], "x/a": ["a/a.go"]},
	)
	out = load("main.go", program, program, program)
	assert out["name"] == "main"
	entry = out["package"]
	assert entry["name"] == "main"
	assert entry["path"] == "example.com/main"
	assert entry["imports"] == ["x/b"]
	assert entry["file-paths"] == ["main.go"]
	assert entry["initializers"] == []
	assert [f["path"] for f in entry["files"]] == ["main.go"]
	assert [p["path"] for p in out["imports"]] == ["x/a", "x/b"]
	assert out["imports"][1]["imports"] == ["x/a"]
	assert out["imports"][0]["files"][0]["package-name"]["value"] == "a"


def test_entry_without_imports_skips_resolution() -> None:
	program = FakeProgram({"solo.go": "package solo\n"}, {})
	out = load("solo.go", program, program, program)
	assert out["imports"] == []
	assert program.resolved == []


def test_resolution_failure_propagates() -> None:
	program = FakeProgram({"main.go": 'package main\nimport "missing"\n'}, {})
	with pytest.raises(ResolutionError) as info:
		load("main.go", program, program, program)
	assert info.value.package == "missing"


def test_package_initializers_use_package_facts() -> None:
	file = parse_file("package p\nvar v = 2\n", "p.go")
	value = file.decls[0].specs[0].values[0]
	obj = Object(ObjectKind.VAR, "v", T.TYP[T.BasicKind.INT], package="p", pos=file.decls[0].specs[0].names[0].pos)
	facts = SemanticFacts(
		types={value: TypeAndValue(T.TYP[T.BasicKind.INT], C.make_int(2))},
		init_order=[Initializer([obj], value)],
	)
	pkg = Package(name="p", path="p", file_paths=["p.go"], files=[file], facts=facts)
	out = dump_package(pkg)
	(init,) = out["initializers"]
	assert init["vars"][0]["value"]["value"] == "v"
	assert init["value"] == out["files"][0]["declarations"][0]["specs"][0]["values"][0]
