# SPDX-License-Identifier: MIT
"""Link directives for packages found by executable search."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from cprobe.core.errors import LinkError

if TYPE_CHECKING:
    from cprobe.core.spec import LibGroups
    from cprobe.signals import BuildSignals

logger = logging.getLogger(__name__)


def link_name(file_name: str) -> str:
    """Linker name of a library file.

    Drops a leading ``lib`` and everything from the last ``.`` on:
    ``libfoo.a`` -> ``foo``, ``libfoo.so.1`` -> ``foo.so``, ``foo.lib`` -> ``foo``.
    """
    start = 3 if file_name.startswith("lib") else 0
    dot = file_name.rfind(".")
    if dot == -1:
        return file_name[start:]
    return file_name[start:dot]


class LinkEmitter:
    """Matches configured library file names against a library directory."""

    def __init__(self, signals: BuildSignals) -> None:
        self.signals = signals

    def emit(self, prefix: Path, libs: LibGroups) -> list[str]:
        """Emit a link directive per library found under ``<prefix>/lib``.

        Grouped libs: each group links its first existing candidate.
        Flat libs: every candidate must exist.

        Args:
            prefix: Installation prefix.
            libs: The library groups to satisfy.

        Returns:
            The link names emitted, in order.

        Raises:
            LinkError: If a group has no existing candidate, or a flat
                candidate is missing.
        """
        lib_dir = prefix / "lib"
        emitted: list[str] = []

        for group, candidates in libs.groups:
            found = next((c for c in candidates if (lib_dir / c).exists()), None)
            if found is None:
                if libs.grouped:
                    logger.error("No library of group %r found in %s", group, lib_dir)
                raise LinkError(lib_dir, list(candidates))
            name = link_name(found)
            self.signals.link_lib(name)
            emitted.append(name)
            logger.debug("Linking %s (%s)", name, lib_dir / found)

        return emitted
