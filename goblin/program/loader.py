# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Collaborator protocols for whole-program loading, and import-graph flattening.

The assembler talks to three collaborators:
  - `SourceParser`: entry path -> syntax tree (parse errors are fatal);
  - `EntryChecker`: entry syntax tree -> `CheckedFile` (package name, import
    path, optional semantic facts, direct imports);
  - `PackageResolver`: import paths -> resolved `Package` forest, each package
    exposing its files, facts and its own resolved imports.

`goblin.program.workspace.SourceWorkspace` implements all three from the file
system without type checking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Set

from goblin.parser import ast
from goblin.semantics.facts import SemanticFacts


@dataclass
class CheckedFile:
	"""The entry file after checking."""

	name: str  # package name
	path: str  # import path of the entry package ("" when unknown)
	facts: Optional[SemanticFacts]
	imports: List[str] = field(default_factory=list)


@dataclass(eq=False)
class Package:
	"""A resolved package with its direct dependencies already resolved."""

	name: str
	path: str  # import path
	file_paths: List[str]
	files: List[ast.File]
	facts: Optional[SemanticFacts] = None
	imports: List["Package"] = field(default_factory=list)


class SourceParser(Protocol):
	def parse_file(self, path: str) -> ast.File:
		...


class EntryChecker(Protocol):
	def check(self, path: str, file: ast.File) -> CheckedFile:
		...


class PackageResolver(Protocol):
	def resolve(self, paths: List[str]) -> List[Package]:
		...


def flatten(roots: List[Package]) -> List[Package]:
	"""
	Depth-first post-order over the import forest, one entry per import path.

	A package is appended only after all of its imports, so the result is a
	valid dependency order; a path already appended is skipped.
	"""
	order: List[Package] = []
	seen: Set[str] = set()

	def visit(pkg: Package) -> None:
		for dep in pkg.imports:
			if dep.path not in seen:
				visit(dep)
		if pkg.path not in seen:
			seen.add(pkg.path)
			order.append(pkg)

	for pkg in roots:
		if pkg.path not in seen:
			visit(pkg)
	return order


__all__ = [
	"CheckedFile",
	"Package",
	"SourceParser",
	"EntryChecker",
	"PackageResolver",
	"flatten",
]
