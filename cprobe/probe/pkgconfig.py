# SPDX-License-Identifier: MIT
"""pkg-config client, the primary discovery strategy.

A package is looked up with::

    pkg-config --libs --cflags "<name> >= <min>"
    pkg-config --modversion <name>

and its include directory is read back with::

    pkg-config <name> --variable includedir
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from cprobe.core.errors import PathEncodingError, PkgConfigError

if TYPE_CHECKING:
    from cprobe.configure.config import ResolveConfig
    from cprobe.signals import BuildSignals

logger = logging.getLogger(__name__)


@dataclass
class Library:
    """What pkg-config reported for one package.

    Attributes:
        name: The pkg-config name that was queried.
        version: Module version, if reported.
        libs: Library names from -l flags.
        link_paths: Directories from -L flags.
        include_paths: Directories from -I flags.
        frameworks: macOS frameworks from -framework flags.
        framework_paths: Directories from -F flags.
        defines: Preprocessor definitions from -D flags.
    """

    name: str
    version: str = ""
    libs: list[str] = field(default_factory=list)
    link_paths: list[Path] = field(default_factory=list)
    include_paths: list[Path] = field(default_factory=list)
    frameworks: list[str] = field(default_factory=list)
    framework_paths: list[Path] = field(default_factory=list)
    defines: dict[str, str | None] = field(default_factory=dict)

    def parse_flags(self, output: str) -> None:
        """Collect paths and names from ``--libs --cflags`` output."""
        tokens = shlex.split(output)
        i = 0
        while i < len(tokens):
            token = tokens[i]
            if token == "-framework" and i + 1 < len(tokens):
                self.frameworks.append(tokens[i + 1])
                i += 2
                continue
            flag, value = token[:2], token[2:]
            if not value:
                pass
            elif flag == "-L":
                self.link_paths.append(Path(value))
            elif flag == "-l":
                self.libs.append(value)
            elif flag == "-I":
                self.include_paths.append(Path(value))
            elif flag == "-F":
                self.framework_paths.append(Path(value))
            elif flag == "-D":
                key, sep, val = value.partition("=")
                self.defines[key] = val if sep else None
            i += 1

    def emit_metadata(self, signals: BuildSignals) -> None:
        """Emit link directives for everything pkg-config reported."""
        for path in self.link_paths:
            signals.link_search(path)
        for path in self.framework_paths:
            signals.link_search(path, kind="framework")
        for lib in self.libs:
            signals.link_lib(lib)
        for framework in self.frameworks:
            signals.link_lib(framework, kind="framework")


class PkgConfig:
    """Runs pkg-config queries.

    Attributes:
        executable: The pkg-config program.
        allow_cross: Whether queries are allowed while cross-compiling.
        is_cross: Whether the build is cross-compiling.
    """

    def __init__(
        self,
        executable: str = "pkg-config",
        *,
        allow_cross: bool = False,
        is_cross: bool = False,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.executable = executable
        self.allow_cross = allow_cross
        self.is_cross = is_cross
        self._environ = environ

    @classmethod
    def from_config(cls, config: ResolveConfig) -> PkgConfig:
        return cls(
            config.pkg_config,
            allow_cross=config.allow_cross,
            is_cross=config.is_cross,
        )

    def probe(
        self,
        name: str,
        min_version: str | None = None,
        max_version: str | None = None,
    ) -> Library:
        """Look up a package.

        Args:
            name: pkg-config module name.
            min_version: Inclusive lower version bound.
            max_version: Exclusive upper version bound.

        Returns:
            The Library pkg-config reported.

        Raises:
            PkgConfigError: If pkg-config is unusable or the package is
                unknown or outside the version range.
        """
        if self.is_cross and not self.allow_cross:
            raise PkgConfigError(
                name,
                "pkg-config has not been configured to support "
                "cross-compilation; set PKG_CONFIG_ALLOW_CROSS=1 to allow it",
            )

        modules = [name]
        if min_version:
            modules = [f"{name} >= {min_version}"]
        if max_version:
            modules.append(f"{name} < {max_version}")

        library = Library(name=name)
        library.parse_flags(self._run(["--libs", "--cflags", *modules], name))
        library.version = self._run(["--modversion", name], name).strip()
        logger.debug(
            "pkg-config %s %s: libs=%s link_paths=%s include_paths=%s",
            name,
            library.version,
            library.libs,
            library.link_paths,
            library.include_paths,
        )
        return library

    def variable(self, name: str, variable: str) -> str:
        """Query a pkg-config variable, trailing whitespace stripped."""
        value = self._run([name, "--variable", variable], name).rstrip()
        logger.debug("pkg-config %s --variable %s: %s", name, variable, value)
        return value

    def _env(self) -> dict[str, str]:
        env = dict(self._environ if self._environ is not None else os.environ)
        # Report -I/usr/include and -L/usr/lib too
        env["PKG_CONFIG_ALLOW_SYSTEM_LIBS"] = "1"
        env["PKG_CONFIG_ALLOW_SYSTEM_CFLAGS"] = "1"
        return env

    def _run(self, args: list[str], package: str) -> str:
        cmd = [self.executable, *args]
        try:
            result = subprocess.run(cmd, capture_output=True, env=self._env())
        except OSError as e:
            raise PkgConfigError(package, f"could not run {self.executable}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise PkgConfigError(
                package,
                f"`{shlex.join(cmd)}` exited with status {result.returncode}"
                + (f": {stderr}" if stderr else ""),
            )

        try:
            return result.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PathEncodingError(result.stdout.decode("utf-8", "replace")) from e

    def __repr__(self) -> str:
        return f"PkgConfig({self.executable!r})"
