# SPDX-License-Identifier: MIT
"""Strategy prober: pkg-config first, executable search second.

For one package the prober tries pkg-config with the package name and each
of its ``pc-alias`` names. Only when all of them fail does it fall back to
locating one of the package's executables and deriving paths from its
installation prefix. A package that neither strategy finds aborts the
resolution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cprobe.core.errors import (
    ExecutableNotFoundError,
    MissingPathError,
    PkgConfigError,
    SpecError,
)
from cprobe.probe.links import LinkEmitter
from cprobe.probe.pkgconfig import PkgConfig
from cprobe.probe.search import Prefix, find_program

if TYPE_CHECKING:
    from cprobe.configure.config import ResolveConfig
    from cprobe.core.spec import Spec
    from cprobe.core.state import ResolutionState
    from cprobe.core.store import SpecSource
    from cprobe.signals import BuildSignals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryResult:
    """Resolved by pkg-config.

    Attributes:
        pc_name: The pkg-config name that succeeded.
    """

    pc_name: str

    @property
    def pkgconf_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class PrefixResult:
    """Resolved by executable search.

    Attributes:
        include_dir: The guessed include directory.
        prefix: The installation prefix.
    """

    include_dir: Path
    prefix: Path

    @property
    def pkgconf_ok(self) -> bool:
        return False


ProbeResult = RegistryResult | PrefixResult


class StrategyProber:
    """Finds a single package and records what it contributes.

    Attributes:
        config: Resolution settings.
        specs: Source of spec records.
        signals: Sink for link directives.
        pkg_config: pkg-config client.
    """

    def __init__(
        self,
        config: ResolveConfig,
        specs: SpecSource,
        signals: BuildSignals,
        *,
        pkg_config: PkgConfig | None = None,
    ) -> None:
        self.config = config
        self.specs = specs
        self.signals = signals
        self.pkg_config = pkg_config or PkgConfig.from_config(config)
        self.links = LinkEmitter(signals)

    def probe(
        self, name: str, header_only: bool, state: ResolutionState
    ) -> ProbeResult:
        """Find a package by pkg-config, falling back to executable search.

        Args:
            name: Package name.
            header_only: Only an include directory is wanted; nothing is
                added to the link configuration.
            state: Aggregator receiving link and include paths.

        Returns:
            How the package was resolved.
        """
        spec = self.specs.get(name)
        try:
            return self.probe_via_pkgconf(name, spec, header_only, state)
        except PkgConfigError as e:
            logger.info("%s not found by pkg-config (%s), searching executables", name, e)
        return self.probe_via_search(name, spec, header_only, state)

    def probe_via_pkgconf(
        self,
        name: str,
        spec: Spec | None,
        header_only: bool,
        state: ResolutionState,
    ) -> RegistryResult:
        """Try pkg-config with the package name, then each alias.

        Raises:
            PkgConfigError: The last failure, if no name was found.
        """
        pc_names = [name]
        if spec is not None:
            pc_names.extend(spec.pc_alias)

        error: PkgConfigError | None = None
        for pc_name in pc_names:
            try:
                library = self.pkg_config.probe(
                    pc_name,
                    min_version=self.config.min_version(pc_name),
                    max_version=self.config.max_version(pc_name),
                )
            except PkgConfigError as e:
                logger.debug("pkg-config %s: %s", pc_name, e)
                error = e
                continue

            logger.info("Found %s via pkg-config (%s %s)", name, pc_name, library.version)
            if not header_only:
                for path in library.link_paths:
                    state.add_link_path(path)
                for path in library.include_paths:
                    state.add_include_path(path)
                library.emit_metadata(self.signals)
            return RegistryResult(pc_name)

        assert error is not None
        raise error

    def probe_via_search(
        self,
        name: str,
        spec: Spec | None,
        header_only: bool,
        state: ResolutionState,
    ) -> PrefixResult:
        """Locate one of the package's executables and use its prefix.

        Raises:
            ExecutableNotFoundError: If no executable is found.
            PrefixLayoutError: If the executable is not in a bin directory.
            SpecError: If a full probe lacks ``libs``.
            LinkError: If a configured library file is missing.
        """
        executables = list(spec.exe) if spec is not None else []
        case_sensitive = not self.config.host.is_windows

        for exe in executables:
            path = find_program(exe, self.config.search_path)
            if path is None:
                logger.debug("%s: executable %s not on PATH", name, exe)
                continue

            prefix = Prefix.from_executable(path, case_sensitive=case_sensitive)
            include_dir = prefix.guess_include(spec.includedir if spec else ())
            logger.info("Found %s via %s (prefix %s)", name, path, prefix.root)

            if not header_only:
                assert spec is not None
                state.add_link_path(prefix.lib_dir)
                self.signals.link_search(prefix.lib_dir)
                if spec.libs is None:
                    raise SpecError(f"spec of {name} should contain libs")
                self.links.emit(prefix.root, spec.libs)
                if spec.libs_private is not None:
                    self.links.emit(prefix.root, spec.libs_private)

            return PrefixResult(include_dir=include_dir, prefix=prefix.root)

        raise ExecutableNotFoundError(name, executables)

    def include_dir(self, result: ProbeResult) -> str:
        """The include directory of a resolved package.

        pkg-config's ``includedir`` variable is trusted verbatim; a guessed
        directory must exist.

        Raises:
            MissingPathError: If a guessed include directory does not exist.
            PkgConfigError: If the variable query fails.
        """
        if isinstance(result, RegistryResult):
            return self.pkg_config.variable(result.pc_name, "includedir")
        if not result.include_dir.exists():
            raise MissingPathError(result.include_dir, "include directory")
        return str(result.include_dir)
