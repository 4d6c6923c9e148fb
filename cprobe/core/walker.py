# SPDX-License-Identifier: MIT
"""Dependency walker: recursive expansion of spec dependencies.

Probing a package in full mode adds its headers and, when pkg-config did
not resolve it, its full dependencies (pkg-config is assumed to already
cover a package's own transitive link requirements). Header dependencies
are always followed, in header-only mode, which only contributes include
directories.

Each (package, mode) pair on the current expansion path is tracked, so a
cycle in the spec graph fails with DependencyCycleError instead of
recursing forever.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from cprobe.core.errors import DependencyCycleError
from cprobe.core.state import ResolutionState

if TYPE_CHECKING:
    from cprobe.configure.platform import Platform
    from cprobe.core.spec import DependencyEntry
    from cprobe.core.store import SpecSource
    from cprobe.probe.prober import StrategyProber

logger = logging.getLogger(__name__)


class DependencyWalker:
    """Walks the dependency graph of requested packages.

    Example:
        walker = DependencyWalker(store, prober, config.target_platform)
        walker.probe("gtk+-3.0")
        print(walker.state.headers)

    Attributes:
        specs: Source of spec records.
        prober: Strategy prober used for every package.
        target: Platform used to evaluate ``os`` filters.
        state: Aggregated results.
        dedupe: Probe each (package, mode) pair at most once.
    """

    def __init__(
        self,
        specs: SpecSource,
        prober: StrategyProber,
        target: Platform,
        *,
        state: ResolutionState | None = None,
        dedupe: bool = False,
    ) -> None:
        self.specs = specs
        self.prober = prober
        self.target = target
        self.state = state if state is not None else ResolutionState()
        self.dedupe = dedupe
        self._visited: set[tuple[str, bool]] = set()
        self._stack: list[tuple[str, bool]] = []

    def probe(self, name: str, header_only: bool = False) -> None:
        """Probe a package and, recursively, its dependencies.

        Args:
            name: Package name.
            header_only: Only collect the package's include directory.

        Raises:
            CprobeError: On any failure; the walk is aborted.
        """
        key = (name, header_only)
        if key in self._stack:
            cycle = [n for n, _ in self._stack[self._stack.index(key) :]]
            raise DependencyCycleError([*cycle, name])
        if self.dedupe and key in self._visited:
            logger.debug("Skipping %s (already probed)", name)
            return
        self._visited.add(key)

        self._stack.append(key)
        try:
            self._probe(name, header_only)
        finally:
            self._stack.pop()

    def _probe(self, name: str, header_only: bool) -> None:
        logger.debug("Probing %s%s", name, " (headers only)" if header_only else "")
        result = self.prober.probe(name, header_only, self.state)

        include_dir: str | None = None
        if header_only:
            include_dir = self.prober.include_dir(result)
            self.state.add_include_path(include_dir)

        spec = self.specs.get(name)
        if spec is None:
            return

        if not header_only:
            include_dir = self.prober.include_dir(result)
            for header in spec.headers:
                self.state.add_header(Path(include_dir) / header)

            if not result.pkgconf_ok:
                for dep in self._applicable(spec.dependencies):
                    self.probe(dep.name, header_only=False)

        for dep in self._applicable(spec.header_dependencies):
            self.probe(dep.name, header_only=True)

    def _applicable(self, deps: tuple[DependencyEntry, ...]) -> list[DependencyEntry]:
        selected = []
        for dep in deps:
            if dep.applies_to(self.target):
                selected.append(dep)
            else:
                logger.debug("Skipping %s (os = %s, target %s)", dep.name, dep.os, self.target)
        return selected
