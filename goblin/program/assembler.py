# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-program assembler.

`load` runs the two phases of a program load:
  1. entry resolution: parse the entry file and check it standalone to learn
     its package and direct imports;
  2. transitive closure: resolve the imports (recursively, through the
     resolver), flatten the forest into dependency order, and lower every
     file of every package.

Any collaborator failure propagates; there is no partial program.
"""

from __future__ import annotations

import logging
from typing import List

from goblin.lowering.engine import NodeLowerer
from goblin.lowering.file import lower_file, lower_initializers
from goblin.lowering.ir import Record

from .loader import EntryChecker, Package, PackageResolver, SourceParser, flatten

logger = logging.getLogger(__name__)


def dump_package(pkg: Package) -> Record:
	"""Lower one package: its files and its initializer order."""
	lowerer = NodeLowerer(pkg.facts)
	files = [lower_file(f, path, lowerer=lowerer) for f, path in zip(pkg.files, pkg.file_paths)]
	return {
		"name": pkg.name,
		"path": pkg.path,
		"imports": [dep.path for dep in pkg.imports],
		"file-paths": list(pkg.file_paths),
		"files": files,
		"initializers": lower_initializers(pkg.facts, lowerer),
	}


def dump_packages(pkgs: List[Package]) -> List[Record]:
	return [dump_package(p) for p in pkgs]


def load(entry_path: str, parser: SourceParser, checker: EntryChecker, resolver: PackageResolver) -> Record:
	"""Load `entry_path` and everything it transitively imports."""
	file = parser.parse_file(entry_path)
	checked = checker.check(entry_path, file)
	logger.debug("entry %s: package %s imports %s", entry_path, checked.name, checked.imports)

	roots = resolver.resolve(checked.imports) if checked.imports else []
	deps = flatten(roots)
	logger.debug("dependency order: %s", [p.path for p in deps])

	entry = Package(
		name=checked.name,
		path=checked.path,
		file_paths=[entry_path],
		files=[file],
		facts=checked.facts,
		imports=roots,
	)
	return {
		"name": file.name.name,
		"package": dump_package(entry),
		"imports": dump_packages(deps),
	}


__all__ = ["dump_package", "dump_packages", "load"]
