# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from pathlib import Path

import pytest

from goblin.core.diagnostics import InputError, ResolutionError
from goblin.program.assembler import load
from goblin.program.workspace import SourceWorkspace, find_module


def _write_file(path: Path, text: str) -> None:
	path.parent.mkdir(parents=True, exist_ok=True)
	path.write_text(text, encoding="utf-8")


def _workspace(tmp_path: Path, **kwargs) -> SourceWorkspace:
	return SourceWorkspace(goroot=str(tmp_path / "goroot"), goos="linux", goarch="amd64", **kwargs)


def _load(ws: SourceWorkspace, entry: Path) -> dict:
	return load(str(entry), ws, ws, ws)


@pytest.fixture
def module(tmp_path: Path) -> Path:
	root = tmp_path / "mod"
	_write_file(root / "go.mod", "module example.com/m\n\ngo 1.16\n")
	_write_file(
		root / "main.go",
		'package main\n\nimport (\n\t"example.com/m/util"\n\t"fmt"\n)\n\nfunc main() { fmt.Println(util.Name) }\n',
	)
	_write_file(root / "util" / "util.go", 'package util\n\nimport "example.com/m/internal/deep"\n\nvar Name = deep.Name\n')
	_write_file(root / "util" / "plus.go", "// +build linux,amd64\n\npackage util\n")
	_write_file(root / "util" / "util_windows.go", "package util\n\nvar Name = 1\n")
	_write_file(root / "util" / "util_test.go", "package util_test\n")
	_write_file(root / "util" / "_scratch.go", "package scratch\n")
	_write_file(root / "util" / "tagged.go", "//go:build ignore\n\npackage util\n")
	_write_file(root / "internal" / "deep" / "deep.go", 'package deep\n\nconst Name = "deep"\n')
	_write_file(tmp_path / "goroot" / "src" / "fmt" / "print.go", "package fmt\n\nfunc Println(a ...interface{}) {}\n")
	return root


def test_find_module(module: Path) -> None:
	assert find_module(module / "util") == ("example.com/m", module)
	assert find_module(module.parent) is None


def test_whole_program_from_disk(tmp_path: Path, module: Path) -> None:
	out = _load(_workspace(tmp_path), module / "main.go")
	assert out["name"] == "main"
	entry = out["package"]
	assert entry["path"] == "example.com/m"
	assert entry["imports"] == ["example.com/m/util", "fmt"]
	assert [p["path"] for p in out["imports"]] == ["example.com/m/internal/deep", "example.com/m/util", "fmt"]
	util = out["imports"][1]
	assert util["name"] == "util"
	assert [Path(p).name for p in util["file-paths"]] == ["plus.go", "util.go"]
	assert util["initializers"] == []
	assert out["imports"][2]["files"][0]["package-name"]["value"] == "fmt"


def test_other_platform_selects_other_files(tmp_path: Path, module: Path) -> None:
	ws = SourceWorkspace(goroot=str(tmp_path / "goroot"), goos="windows", goarch="amd64")
	out = _load(ws, module / "main.go")
	(util,) = [p for p in out["imports"] if p["path"] == "example.com/m/util"]
	assert [Path(p).name for p in util["file-paths"]] == ["util.go", "util_windows.go"]


def test_explicit_roots_and_gopath(tmp_path: Path) -> None:
	_write_file(tmp_path / "extra" / "lib" / "x" / "x.go", "package x\n")
	_write_file(tmp_path / "gopath" / "src" / "lib" / "y" / "y.go", "package y\n")
	entry = tmp_path / "app" / "main.go"
	_write_file(entry, 'package main\n\nimport (\n\t"lib/x"\n\t"lib/y"\n)\n')
	ws = _workspace(tmp_path, roots=[str(tmp_path / "extra")], gopath=[str(tmp_path / "gopath")])
	out = _load(ws, entry)
	assert out["package"]["path"] == ""
	assert [p["name"] for p in out["imports"]] == ["x", "y"]


def test_missing_package(tmp_path: Path) -> None:
	entry = tmp_path / "main.go"
	_write_file(entry, 'package main\n\nimport "nowhere/pkg"\n')
	with pytest.raises(ResolutionError) as info:
		_load(_workspace(tmp_path), entry)
	assert info.value.package == "nowhere/pkg"
	assert "cannot find package" in info.value.diagnostic.info


def test_import_cycle(tmp_path: Path) -> None:
	root = tmp_path / "cyc"
	_write_file(root / "go.mod", "module cyc\n")
	_write_file(root / "main.go", 'package main\n\nimport "cyc/a"\n')
	_write_file(root / "a" / "a.go", 'package a\n\nimport "cyc/b"\n')
	_write_file(root / "b" / "b.go", 'package b\n\nimport "cyc/a"\n')
	with pytest.raises(ResolutionError) as info:
		_load(_workspace(tmp_path), root / "main.go")
	assert "import cycle not allowed" in info.value.diagnostic.info


def test_cgo_is_rejected(tmp_path: Path) -> None:
	entry = tmp_path / "main.go"
	_write_file(entry, 'package main\n\nimport "C"\n')
	with pytest.raises(ResolutionError) as info:
		_load(_workspace(tmp_path), entry)
	assert info.value.package == "C"


def test_mixed_package_names(tmp_path: Path) -> None:
	root = tmp_path / "mixed"
	_write_file(root / "go.mod", "module mixed\n")
	_write_file(root / "main.go", 'package main\n\nimport "mixed/lib"\n')
	_write_file(root / "lib" / "a.go", "package a\n")
	_write_file(root / "lib" / "b.go", "package b\n")
	with pytest.raises(ResolutionError) as info:
		_load(_workspace(tmp_path), root / "main.go")
	assert "found packages a" in info.value.diagnostic.info


def test_no_buildable_files(tmp_path: Path) -> None:
	root = tmp_path / "nb"
	_write_file(root / "go.mod", "module nb\n")
	_write_file(root / "main.go", 'package main\n\nimport "nb/only"\n')
	_write_file(root / "only" / "only_windows.go", "package only\n")
	with pytest.raises(ResolutionError) as info:
		_load(_workspace(tmp_path), root / "main.go")
	assert "no buildable Go source files" in info.value.diagnostic.info


def test_unreadable_entry_is_path_error(tmp_path: Path) -> None:
	with pytest.raises(InputError) as info:
		_load(_workspace(tmp_path), tmp_path / "absent.go")
	assert info.value.diagnostic.type == "path_error"
