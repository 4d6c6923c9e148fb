# SPDX-License-Identifier: MIT
"""Executable search, the fallback discovery strategy.

When pkg-config knows nothing about a package, cprobe looks for one of the
package's executables on PATH (e.g. ``foo-config``). An executable found at
``<prefix>/bin/foo-config`` gives the installation prefix, from which the
include and library directories are derived::

    <prefix>/include[/<includedir candidate>]
    <prefix>/lib
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from cprobe.core.errors import PrefixLayoutError

logger = logging.getLogger(__name__)


def find_program(name: str, search_path: str | None = None) -> Path | None:
    """Find a program on the search path.

    Args:
        name: Program name.
        search_path: PATH-style directory list (default: the process PATH).

    Returns:
        Path to the program, or None if it is not found.
    """
    result = shutil.which(name, path=search_path)
    if result:
        return Path(result)
    return None


@dataclass(frozen=True)
class Prefix:
    """An installation prefix derived from a located executable.

    Attributes:
        root: The prefix directory.
        executable: The executable it was derived from.
    """

    root: Path
    executable: Path

    @classmethod
    def from_executable(cls, executable: Path, *, case_sensitive: bool = True) -> Prefix:
        """Derive the prefix of ``<prefix>/bin/<executable>``.

        Raises:
            PrefixLayoutError: If the executable is not in a ``bin`` directory.
        """
        parent = executable.parent
        bin_name = parent.name if case_sensitive else parent.name.lower()
        if bin_name != "bin" or parent.parent == parent:
            raise PrefixLayoutError(executable)
        return cls(root=parent.parent, executable=executable)

    @property
    def include_base(self) -> Path:
        return self.root / "include"

    @property
    def lib_dir(self) -> Path:
        return self.root / "lib"

    def guess_include(self, candidates: tuple[str, ...] | list[str] = ()) -> Path:
        """First existing ``include/<candidate>``, else ``include`` itself."""
        for candidate in candidates:
            path = self.include_base / candidate
            if path.exists():
                return path
        return self.include_base
