# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Syntax-only package workspace.

`SourceWorkspace` resolves Go import paths to directories on disk, selects the
files that belong to the configured platform, parses them, and follows their
import declarations. It implements the three collaborator protocols of
`goblin.program.loader` without a type checker: facts are absent and the
initializer order is empty.

Directory search order for an import path:
  1. the module declared by the nearest `go.mod` above the entry file;
  2. explicit roots (`--root DIR`), as `DIR/<path>`;
  3. each `$GOPATH` entry, as `<entry>/src/<path>`;
  4. `$GOROOT/src/<path>`, then `$GOROOT/src/vendor/<path>`.

File selection follows `go/build`: `_test.go` files and files starting with
`_` or `.` are skipped, `_GOOS` / `_GOARCH` file name suffixes must match the
platform, and a `//go:build` (or legacy `// +build`) constraint must hold.
The workspace models a pre-generics toolchain: release tags stop at go1.17.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from goblin.core.diagnostics import InputError, ResolutionError
from goblin.core.position import Position
from goblin.parser import Parser, ast, read_source

from .loader import CheckedFile, Package

logger = logging.getLogger(__name__)

KNOWN_OS = frozenset(
	{
		"aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos", "ios", "js",
		"linux", "nacl", "netbsd", "openbsd", "plan9", "solaris", "wasip1", "windows", "zos",
	}
)
UNIX_OS = frozenset(
	{
		"aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos", "ios",
		"linux", "netbsd", "openbsd", "solaris",
	}
)
KNOWN_ARCH = frozenset(
	{
		"386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be", "loong64", "mips",
		"mipsle", "mips64", "mips64le", "mips64p32", "mips64p32le", "ppc", "ppc64", "ppc64le",
		"riscv", "riscv64", "s390", "s390x", "sparc", "sparc64", "wasm",
	}
)

GO_RELEASE_MINOR = 17

_MODULE_RE = re.compile(r"^module\s+(\S+)")
_BUILD_TOKEN_RE = re.compile(r"\s*(\|\||&&|!|\(|\)|[A-Za-z0-9_.]+)")


# Build constraints


class BuildContext:
	"""The platform a package is being selected for."""

	def __init__(self, goos: str, goarch: str) -> None:
		self.goos = goos
		self.goarch = goarch

	def match_tag(self, tag: str) -> bool:
		if tag in (self.goos, self.goarch, "gc"):
			return True
		if tag == "unix":
			return self.goos in UNIX_OS
		if self.goos == "android" and tag == "linux":
			return True
		if self.goos == "illumos" and tag == "solaris":
			return True
		if self.goos == "ios" and tag == "darwin":
			return True
		if tag.startswith("go1."):
			minor = tag[4:]
			return minor.isdigit() and 1 <= int(minor) <= GO_RELEASE_MINOR
		return False

	def good_os_arch_file(self, filename: str) -> bool:
		"""Apply the `name_GOOS_GOARCH.go` convention."""
		name = filename.split(".", 1)[0]
		i = name.find("_")
		if i < 0:
			return True
		parts = name[i:].split("_")
		if parts and parts[-1] == "test":
			parts = parts[:-1]
		n = len(parts)
		if n >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
			return self.match_tag(parts[-2]) and self.match_tag(parts[-1])
		if n >= 1 and (parts[-1] in KNOWN_OS or parts[-1] in KNOWN_ARCH):
			return self.match_tag(parts[-1])
		return True

	def eval_go_build(self, expr: str, where: Position) -> bool:
		"""Evaluate a `//go:build` expression."""
		tokens = _tokenize_constraint(expr, where)
		pos = 0

		def peek() -> Optional[str]:
			return tokens[pos] if pos < len(tokens) else None

		def take() -> str:
			nonlocal pos
			if pos >= len(tokens):
				raise InputError(f"malformed build constraint: {expr}", position=where)
			tok = tokens[pos]
			pos += 1
			return tok

		def or_expr() -> bool:
			value = and_expr()
			while peek() == "||":
				take()
				rhs = and_expr()
				value = value or rhs
			return value

		def and_expr() -> bool:
			value = not_expr()
			while peek() == "&&":
				take()
				rhs = not_expr()
				value = value and rhs
			return value

		def not_expr() -> bool:
			tok = take()
			if tok == "!":
				return not not_expr()
			if tok == "(":
				value = or_expr()
				if take() != ")":
					raise InputError(f"malformed build constraint: {expr}", position=where)
				return value
			if tok in ("||", "&&", ")"):
				raise InputError(f"malformed build constraint: {expr}", position=where)
			return self.match_tag(tok)

		result = or_expr()
		if pos != len(tokens):
			raise InputError(f"malformed build constraint: {expr}", position=where)
		return result

	def eval_plus_build(self, line: str) -> bool:
		"""Evaluate one legacy `// +build` line (space = or, comma = and)."""
		for option in line.split():
			terms = option.split(",")
			if all(self._plus_term(t) for t in terms):
				return True
		return False

	def _plus_term(self, term: str) -> bool:
		if term.startswith("!"):
			return not self.match_tag(term[1:])
		return self.match_tag(term)

	def should_build(self, source: str, filename: str) -> bool:
		"""Check the constraints in the file header (before `package`)."""
		go_build: Optional[Tuple[str, Position]] = None
		plus_build: List[str] = []
		offset = 0
		in_block = False
		for lineno, line in enumerate(source.split("\n"), start=1):
			stripped = line.strip()
			here = Position(filename, offset, lineno, 1)
			offset += len(line.encode("utf-8")) + 1
			if in_block:
				if "*/" in stripped:
					in_block = False
				continue
			if not stripped:
				continue
			if stripped.startswith("//"):
				body = stripped[2:]
				if body.startswith("go:build ") or body == "go:build":
					if go_build is None:
						go_build = (body[len("go:build"):].strip(), here)
				elif body.strip().startswith("+build"):
					plus_build.append(body.strip()[len("+build"):])
				continue
			if stripped.startswith("/*"):
				in_block = "*/" not in stripped[2:]
				continue
			break
		if go_build is not None:
			return self.eval_go_build(*go_build)
		return all(self.eval_plus_build(line) for line in plus_build)


def _tokenize_constraint(expr: str, where: Position) -> List[str]:
	tokens: List[str] = []
	pos = 0
	while pos < len(expr):
		if expr[pos:].strip() == "":
			break
		m = _BUILD_TOKEN_RE.match(expr, pos)
		if m is None:
			raise InputError(f"malformed build constraint: {expr}", position=where)
		tokens.append(m.group(1))
		pos = m.end()
	return tokens


# go.mod


def find_module(start: Path) -> Optional[Tuple[str, Path]]:
	"""The (module path, module root) of the nearest `go.mod` at or above `start`."""
	for directory in [start, *start.parents]:
		gomod = directory / "go.mod"
		if gomod.is_file():
			for line in gomod.read_text(encoding="utf-8", errors="replace").splitlines():
				m = _MODULE_RE.match(line.strip())
				if m:
					return m.group(1).strip('"`'), directory
			return None
	return None


# Workspace


class SourceWorkspace:
	"""Parser, entry checker and package resolver over Go sources on disk."""

	def __init__(
		self,
		*,
		goroot: Optional[str] = None,
		gopath: Sequence[str] = (),
		roots: Sequence[str] = (),
		goos: str = "linux",
		goarch: str = "amd64",
		parser: Optional[Parser] = None,
	) -> None:
		self.goroot = Path(goroot) if goroot else None
		self.gopath = [Path(p) for p in gopath]
		self.roots = [Path(r) for r in roots]
		self.build = BuildContext(goos, goarch)
		self._parser = parser if parser is not None else Parser()
		self._module: Optional[Tuple[str, Path]] = None
		self._cache: Dict[str, Package] = {}
		self._loading: Set[str] = set()

	@classmethod
	def from_config(cls, config) -> "SourceWorkspace":
		return cls(
			goroot=config.goroot,
			gopath=config.gopath,
			roots=config.roots,
			goos=config.goos,
			goarch=config.goarch,
		)

	# SourceParser

	def parse_file(self, path: str) -> ast.File:
		return self._parser.parse_file(read_source(path), path)

	# EntryChecker

	def check(self, path: str, file: ast.File) -> CheckedFile:
		directory = Path(path).resolve().parent
		if self._module is None:
			self._module = find_module(directory)
			if self._module is not None:
				logger.debug("module %s at %s", *self._module)
		imports = _import_paths(file)
		for spec_path in imports:
			if spec_path == "C":
				raise ResolutionError("cgo is not supported", package="C", position=file.pos)
		return CheckedFile(
			name=file.name.name,
			path=self.import_path_of(directory),
			facts=None,
			imports=imports,
		)

	# PackageResolver

	def resolve(self, paths: List[str]) -> List[Package]:
		return [self._load(p) for p in paths]

	def _load(self, import_path: str) -> Package:
		cached = self._cache.get(import_path)
		if cached is not None:
			return cached
		if import_path == "C":
			raise ResolutionError("cgo is not supported", package=import_path)
		if import_path in self._loading:
			raise ResolutionError("import cycle not allowed", package=import_path)

		directory = self.find_dir(import_path)
		if directory is None:
			raise ResolutionError("cannot find package", package=import_path)
		logger.debug("resolving %s -> %s", import_path, directory)

		self._loading.add(import_path)
		try:
			file_paths = self.package_files(directory)
			if not file_paths:
				raise ResolutionError(f"no buildable Go source files in {directory}", package=import_path)
			files = [self.parse_file(p) for p in file_paths]
			name = _package_name(import_path, files, file_paths)
			imports: List[str] = []
			for f in files:
				for dep in _import_paths(f):
					if dep not in imports:
						imports.append(dep)
			deps = [self._load(dep) for dep in imports]
		finally:
			self._loading.discard(import_path)

		pkg = Package(
			name=name,
			path=import_path,
			file_paths=file_paths,
			files=files,
			facts=None,
			imports=deps,
		)
		self._cache[import_path] = pkg
		return pkg

	# Directories and files

	def search_dirs(self, import_path: str) -> List[Path]:
		candidates: List[Path] = []
		if self._module is not None:
			module_path, module_root = self._module
			if import_path == module_path:
				candidates.append(module_root)
			elif import_path.startswith(module_path + "/"):
				candidates.append(module_root / import_path[len(module_path) + 1 :])
		candidates.extend(root / import_path for root in self.roots)
		candidates.extend(gp / "src" / import_path for gp in self.gopath)
		if self.goroot is not None:
			candidates.append(self.goroot / "src" / import_path)
			candidates.append(self.goroot / "src" / "vendor" / import_path)
		return candidates

	def find_dir(self, import_path: str) -> Optional[Path]:
		for candidate in self.search_dirs(import_path):
			if candidate.is_dir() and any(candidate.glob("*.go")):
				return candidate
		return None

	def package_files(self, directory: Path) -> List[str]:
		"""Buildable `.go` files of a package directory, sorted by name."""
		selected: List[str] = []
		for entry in sorted(directory.iterdir()):
			name = entry.name
			if not entry.is_file() or not name.endswith(".go"):
				continue
			if name.startswith(("_", ".")) or name.endswith("_test.go"):
				continue
			if not self.build.good_os_arch_file(name):
				continue
			if not self.build.should_build(read_source(str(entry)), str(entry)):
				logger.debug("skipping %s: build constraints", entry)
				continue
			selected.append(str(entry))
		return selected

	def import_path_of(self, directory: Path) -> str:
		"""The import path a directory is known by ("" when outside every root)."""
		bases: List[Tuple[str, Path]] = []
		if self._module is not None:
			bases.append(self._module)
		bases.extend(("", r) for r in self.roots)
		bases.extend(("", gp / "src") for gp in self.gopath)
		if self.goroot is not None:
			bases.append(("", self.goroot / "src"))
		for prefix, base in bases:
			try:
				rel = directory.relative_to(base.resolve())
			except ValueError:
				continue
			parts = [p for p in rel.parts if p != "."]
			return "/".join([prefix] + parts if prefix else parts)
		return ""


def _import_paths(file: ast.File) -> List[str]:
	paths: List[str] = []
	for spec in file.imports:
		path = spec.path.value.strip('"`')
		if path not in paths:
			paths.append(path)
	return paths


def _package_name(import_path: str, files: List[ast.File], file_paths: List[str]) -> str:
	name = files[0].name.name
	for f, p in zip(files[1:], file_paths[1:]):
		if f.name.name != name:
			raise ResolutionError(
				f"found packages {name} ({file_paths[0]}) and {f.name.name} ({p})",
				package=import_path,
			)
	return name


__all__ = ["BuildContext", "SourceWorkspace", "find_module", "KNOWN_OS", "KNOWN_ARCH", "UNIX_OS"]
