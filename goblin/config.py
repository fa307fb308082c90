# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Run configuration.

Values come from command-line flags, falling back to the Go environment
variables (`GOROOT`, `GOPATH`, `GOOS`, `GOARCH`) and `GOBLIN_PANIC`, then to
the host.
"""

from __future__ import annotations

import os
import platform
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional

from goblin.core.diagnostics import ErrorMode

# sys.platform prefix -> GOOS
_HOST_OS = {
	"linux": "linux",
	"darwin": "darwin",
	"win32": "windows",
	"cygwin": "windows",
	"freebsd": "freebsd",
	"openbsd": "openbsd",
	"netbsd": "netbsd",
	"aix": "aix",
	"sunos": "solaris",
}

# platform.machine() -> GOARCH
_HOST_ARCH = {
	"x86_64": "amd64",
	"amd64": "amd64",
	"i386": "386",
	"i686": "386",
	"x86": "386",
	"aarch64": "arm64",
	"arm64": "arm64",
	"armv7l": "arm",
	"armv6l": "arm",
	"ppc64le": "ppc64le",
	"ppc64": "ppc64",
	"s390x": "s390x",
	"riscv64": "riscv64",
	"mips64": "mips64",
	"loongarch64": "loong64",
}


def host_goos() -> str:
	for prefix, goos in _HOST_OS.items():
		if sys.platform.startswith(prefix):
			return goos
	return "linux"


def host_goarch() -> str:
	return _HOST_ARCH.get(platform.machine().lower(), "amd64")


def default_goroot() -> Optional[str]:
	"""The GOROOT of the `go` binary on PATH, if any."""
	go = shutil.which("go")
	if go is None:
		return None
	# <goroot>/bin/go
	return str(Path(go).resolve().parent.parent)


def _truthy(value: Optional[str]) -> bool:
	return value is not None and value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
	goroot: Optional[str] = None
	gopath: List[str] = field(default_factory=list)
	goos: str = "linux"
	goarch: str = "amd64"
	roots: List[str] = field(default_factory=list)
	panic: bool = False
	verbose: bool = False

	@property
	def error_mode(self) -> ErrorMode:
		return ErrorMode.PANIC if self.panic else ErrorMode.REPORT

	@classmethod
	def from_env(
		cls,
		env: Optional[Mapping[str, str]] = None,
		*,
		goroot: Optional[str] = None,
		goos: Optional[str] = None,
		goarch: Optional[str] = None,
		roots: Optional[List[str]] = None,
		panic: bool = False,
		verbose: bool = False,
	) -> "Config":
		"""Build a config; explicit arguments win over the environment."""
		env = os.environ if env is None else env
		gopath_env = env.get("GOPATH")
		if gopath_env:
			gopath = [p for p in gopath_env.split(os.pathsep) if p]
		else:
			gopath = [str(Path.home() / "go")]
		return cls(
			goroot=goroot or env.get("GOROOT") or default_goroot(),
			gopath=gopath,
			goos=goos or env.get("GOOS") or host_goos(),
			goarch=goarch or env.get("GOARCH") or host_goarch(),
			roots=list(roots or []),
			panic=panic or _truthy(env.get("GOBLIN_PANIC")),
			verbose=verbose,
		)


__all__ = ["Config", "host_goos", "host_goarch", "default_goroot"]
