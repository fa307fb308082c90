# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Whole-program loading: collaborator protocols, the assembler and the
filesystem workspace.
"""

from .assembler import dump_package, dump_packages, load
from .loader import CheckedFile, EntryChecker, Package, PackageResolver, SourceParser, flatten
from .workspace import SourceWorkspace

__all__ = [
	"dump_package",
	"dump_packages",
	"load",
	"CheckedFile",
	"EntryChecker",
	"Package",
	"PackageResolver",
	"SourceParser",
	"flatten",
	"SourceWorkspace",
]
