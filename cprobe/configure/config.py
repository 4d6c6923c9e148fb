# SPDX-License-Identifier: MIT
"""Resolution configuration.

ResolveConfig is a snapshot of every environment-derived setting, taken
once when a resolution starts and passed explicitly to the prober, the
walker and the build driver.

Environment variables:
    PKG_CONFIG: pkg-config executable (default: pkg-config).
    PKG_CONFIG_ALLOW_CROSS: allow pkg-config while cross-compiling.
    CPROBE_MIN_VERSION_<NAME>: minimum version for package <NAME>.
    CPROBE_PKGS: extra package names to build (comma or space separated).
    CPROBE_SPEC_PATH: extra spec directories (os.pathsep separated).
    CPROBE_TARGET_OS: target OS, when it differs from the host.
    CPROBE_OUT_DIR, OUT_DIR: directory for the generated bindings.
    CPROBE_BINDGEN: binding generator executable (default: bindgen).
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from cprobe.configure.platform import Platform, get_platform, normalize_os

# Environment variables a resolution reads; rerun hints are emitted for these.
WATCHED_ENV_VARS = (
    "PKG_CONFIG",
    "PKG_CONFIG_PATH",
    "PKG_CONFIG_LIBDIR",
    "PKG_CONFIG_SYSROOT_DIR",
    "PKG_CONFIG_ALLOW_CROSS",
    "CPROBE_PKGS",
    "CPROBE_SPEC_PATH",
    "CPROBE_TARGET_OS",
    "CPROBE_BINDGEN",
)

MIN_VERSION_PREFIX = "CPROBE_MIN_VERSION_"

_TRUTHY_VALUES = {"1", "true", "yes", "on"}


def env_key(name: str) -> str:
    """Upper-case a package name, replacing non-alphanumerics with '_'."""
    return re.sub(r"[^A-Za-z0-9]", "_", name).upper()


def _is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY_VALUES


def _split_names(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(n for n in re.split(r"[,\s]+", value) if n)


def _split_paths(value: str | None) -> tuple[Path, ...]:
    if not value:
        return ()
    return tuple(Path(p) for p in value.split(os.pathsep) if p.strip())


@dataclass(frozen=True)
class ResolveConfig:
    """Settings for one resolution run.

    Attributes:
        pkg_config: pkg-config executable.
        allow_cross: Whether pkg-config may be used when cross-compiling.
        min_versions: Minimum versions keyed by env_key(package name).
        max_versions: Exclusive upper version bounds, keyed the same way.
        extra_packages: Package names requested in addition to manifests.
        spec_paths: Extra directories holding spec records.
        host: Platform the build runs on.
        target: Platform the build produces code for.
        out_dir: Directory for the generated bindings file.
        bindgen: Binding generator executable.
        search_path: PATH used to locate executables (None: process PATH).
        dedupe: Probe each (package, mode) pair only once per walk.
    """

    pkg_config: str = "pkg-config"
    allow_cross: bool = False
    min_versions: Mapping[str, str] = field(default_factory=dict)
    max_versions: Mapping[str, str] = field(default_factory=dict)
    extra_packages: tuple[str, ...] = ()
    spec_paths: tuple[Path, ...] = ()
    host: Platform = field(default_factory=get_platform)
    target: Platform | None = None
    out_dir: Path = Path("build")
    bindgen: str = "bindgen"
    search_path: str | None = None
    dedupe: bool = False

    def __post_init__(self) -> None:
        if self.target is None:
            object.__setattr__(self, "target", self.host)

    @classmethod
    def from_environ(
        cls, environ: Mapping[str, str] | None = None, **overrides: object
    ) -> ResolveConfig:
        """Build a config from environment variables.

        Args:
            environ: Mapping to read (default: os.environ).
            **overrides: Field values that take precedence over the environment.

        Returns:
            ResolveConfig instance.
        """
        if environ is None:
            environ = os.environ

        host = get_platform()
        target = host
        target_os = environ.get("CPROBE_TARGET_OS")
        if target_os:
            target = Platform(os=normalize_os(target_os), arch=host.arch)

        # Cross probing is on by default on FreeBSD hosts
        allow_cross_env = environ.get("PKG_CONFIG_ALLOW_CROSS")
        if allow_cross_env is None:
            allow_cross = host.os == "freebsd"
        else:
            allow_cross = _is_truthy(allow_cross_env)

        min_versions = {
            key[len(MIN_VERSION_PREFIX) :]: value
            for key, value in environ.items()
            if key.startswith(MIN_VERSION_PREFIX) and value
        }

        out_dir = environ.get("CPROBE_OUT_DIR") or environ.get("OUT_DIR") or "build"

        config = cls(
            pkg_config=environ.get("PKG_CONFIG") or "pkg-config",
            allow_cross=allow_cross,
            min_versions=min_versions,
            extra_packages=_split_names(environ.get("CPROBE_PKGS")),
            spec_paths=_split_paths(environ.get("CPROBE_SPEC_PATH")),
            host=host,
            target=target,
            out_dir=Path(out_dir),
            bindgen=environ.get("CPROBE_BINDGEN") or "bindgen",
            search_path=environ.get("PATH"),
        )
        if overrides:
            config = replace(config, **overrides)  # type: ignore[arg-type]
        return config

    @property
    def target_platform(self) -> Platform:
        assert self.target is not None
        return self.target

    @property
    def is_cross(self) -> bool:
        return self.target_platform.os != self.host.os

    def min_version(self, name: str) -> str | None:
        """Minimum version configured for a package, if any."""
        return self.min_versions.get(env_key(name))

    def max_version(self, name: str) -> str | None:
        return self.max_versions.get(env_key(name))

    def __repr__(self) -> str:
        return (
            f"ResolveConfig(host={self.host}, target={self.target}, "
            f"out_dir={self.out_dir})"
        )
