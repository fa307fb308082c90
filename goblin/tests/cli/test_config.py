# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import os
from pathlib import Path

from goblin.config import Config
from goblin.core.diagnostics import ErrorMode


def test_environment_values() -> None:
	env = {
		"GOROOT": "/opt/go",
		"GOPATH": os.pathsep.join(["/a", "", "/b"]),
		"GOOS": "darwin",
		"GOARCH": "arm64",
		"GOBLIN_PANIC": "yes",
	}
	config = Config.from_env(env)
	assert config.goroot == "/opt/go"
	assert config.gopath == ["/a", "/b"]
	assert (config.goos, config.goarch) == ("darwin", "arm64")
	assert config.panic
	assert config.error_mode is ErrorMode.PANIC


def test_explicit_arguments_win() -> None:
	env = {"GOROOT": "/opt/go", "GOOS": "darwin", "GOARCH": "arm64"}
	config = Config.from_env(env, goroot="/mine", goos="linux", goarch="amd64", roots=["r"])
	assert config.goroot == "/mine"
	assert (config.goos, config.goarch) == ("linux", "amd64")
	assert config.roots == ["r"]
	assert config.error_mode is ErrorMode.REPORT


def test_gopath_defaults_to_home_go() -> None:
	config = Config.from_env({"GOROOT": "/opt/go", "GOBLIN_PANIC": "0"})
	assert config.gopath == [str(Path.home() / "go")]
	assert not config.panic
