# SPDX-License-Identifier: MIT
"""Shared fixtures for cprobe tests."""

from __future__ import annotations

import io
import os
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

import pytest

from cprobe.configure.config import ResolveConfig
from cprobe.configure.platform import Platform
from cprobe.core.errors import PkgConfigError
from cprobe.probe.pkgconfig import Library, PkgConfig
from cprobe.signals import BuildSignals

LINUX = Platform(os="linux", arch="x86_64")


class FakePkgConfig(PkgConfig):
    """pkg-config stand-in that knows a fixed set of packages."""

    def __init__(self) -> None:
        super().__init__("fake-pkg-config")
        self.packages: dict[str, Library] = {}
        self.includedirs: dict[str, str] = {}
        self.calls: list[tuple[str, ...]] = []

    def add(
        self,
        name: str,
        includedir: str,
        *,
        libs: list[str] | None = None,
        link_paths: list[str] | None = None,
        include_paths: list[str] | None = None,
    ) -> None:
        self.packages[name] = Library(
            name=name,
            version="1.0",
            libs=list(libs or []),
            link_paths=[Path(p) for p in link_paths or []],
            include_paths=[Path(p) for p in include_paths or []],
        )
        self.includedirs[name] = includedir

    def probe(
        self,
        name: str,
        min_version: str | None = None,
        max_version: str | None = None,
    ) -> Library:
        self.calls.append(("probe", name))
        if name not in self.packages:
            raise PkgConfigError(name, "Package was not found")
        lib = self.packages[name]
        return replace(
            lib,
            libs=list(lib.libs),
            link_paths=list(lib.link_paths),
            include_paths=list(lib.include_paths),
        )

    def variable(self, name: str, variable: str) -> str:
        self.calls.append(("variable", name, variable))
        return self.includedirs[name]

    @property
    def probed(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "probe"]


@pytest.fixture
def fake_pkg_config() -> FakePkgConfig:
    return FakePkgConfig()


@pytest.fixture
def signals() -> BuildSignals:
    return BuildSignals(stream=io.StringIO())


PrefixFactory = Callable[..., Path]


@pytest.fixture
def make_prefix(tmp_path: Path) -> PrefixFactory:
    """Create an installation prefix with executables, headers and libraries.

    Usage:
        prefix = make_prefix("foo", exe=["foo-config"], include=["foo-1.0"],
                             libs=["libfoo.a"])
    """

    def factory(
        name: str,
        *,
        exe: list[str] = (),  # type: ignore[assignment]
        include: list[str] = (),  # type: ignore[assignment]
        libs: list[str] = (),  # type: ignore[assignment]
        bin_dir: str = "bin",
    ) -> Path:
        prefix = tmp_path / "prefixes" / name
        (prefix / bin_dir).mkdir(parents=True, exist_ok=True)
        (prefix / "include").mkdir(parents=True, exist_ok=True)
        (prefix / "lib").mkdir(parents=True, exist_ok=True)
        for exe_name in exe:
            exe_path = prefix / bin_dir / exe_name
            exe_path.write_text("#!/bin/sh\nexit 0\n")
            exe_path.chmod(0o755)
        for sub in include:
            (prefix / "include" / sub).mkdir(parents=True, exist_ok=True)
        for lib in libs:
            (prefix / "lib" / lib).write_text("")
        return prefix

    return factory


def search_path(*prefixes: Path, bin_dir: str = "bin") -> str:
    return os.pathsep.join(str(p / bin_dir) for p in prefixes)


def make_config(*prefixes: Path, target: Platform = LINUX, **kwargs: object) -> ResolveConfig:
    """Config that searches only the given prefixes for executables."""
    kwargs.setdefault("search_path", search_path(*prefixes) if prefixes else "")
    return ResolveConfig(host=LINUX, target=target, **kwargs)  # type: ignore[arg-type]


@pytest.fixture
def config_for() -> Callable[..., ResolveConfig]:
    """Factory for configs restricted to the given prefixes."""
    return make_config
