# SPDX-License-Identifier: MIT
"""Custom exceptions for cprobe.

All cprobe exceptions inherit from CprobeError. Every one of them is fatal
to a resolution run; PkgConfigError is the only one the strategy prober
recovers from, by falling back to the executable search.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class CprobeError(Exception):
    """Base class for all cprobe exceptions.

    Attributes:
        message: The error message.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class SpecError(CprobeError):
    """A spec record is malformed or lacks a required field."""


class SpecConflictError(SpecError):
    """Two contributors declared different specs for one package.

    Attributes:
        name: The package name.
        stored: The spec already registered.
        incoming: The spec that conflicts with it.
    """

    def __init__(self, name: str, stored: Any, incoming: Any) -> None:
        self.name = name
        self.stored = stored
        self.incoming = incoming
        super().__init__(
            f"got two different specs of {name}.\n"
            f'One is "{stored}",\n'
            f'the other is "{incoming}".'
        )


class ProbeError(CprobeError):
    """Both discovery strategies are exhausted for a package."""


class PkgConfigError(CprobeError):
    """A pkg-config query failed.

    Attributes:
        package: The package (or alias) that was queried.
    """

    def __init__(self, package: str, message: str) -> None:
        self.package = package
        super().__init__(f"pkg-config {package}: {message}")


class ExecutableNotFoundError(ProbeError):
    """None of a package's executables could be located.

    Attributes:
        package: The package being probed.
        executables: The executable names that were tried.
    """

    def __init__(self, package: str, executables: list[str]) -> None:
        self.package = package
        self.executables = executables
        if executables:
            tried = ", ".join(executables)
            msg = f"failed to locate executable for {package} (tried: {tried})"
        else:
            msg = f"failed to search lib {package}: no executables declared"
        super().__init__(msg)


class PrefixLayoutError(ProbeError):
    """A located executable does not live in a ``bin`` directory.

    Attributes:
        path: Path of the executable.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"executable should be in a bin directory: {path}")


class DependencyCycleError(ProbeError):
    """Circular dependency between spec records.

    Attributes:
        cycle: The package names forming the cycle.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"dependency cycle: {cycle_str}")


class MissingPathError(CprobeError):
    """A required file or directory does not exist.

    Attributes:
        path: The missing path.
    """

    def __init__(self, path: Path | str, what: str = "path") -> None:
        self.path = Path(path)
        super().__init__(f"{what} not found: {path}")


class PathEncodingError(CprobeError):
    """A path cannot be represented as UTF-8 text."""

    def __init__(self, path: Path | str) -> None:
        self.path = path
        super().__init__(f"path should be valid UTF-8 string: {path!r}")


class LinkError(CprobeError):
    """A configured library file is absent from the library directory.

    Attributes:
        lib_dir: The directory that was scanned.
        candidates: The file names that were looked for.
    """

    def __init__(self, lib_dir: Path, candidates: list[str]) -> None:
        self.lib_dir = lib_dir
        self.candidates = candidates
        names = ", ".join(candidates)
        super().__init__(f"failed to locate {names} in {lib_dir}")


class GenerateError(CprobeError):
    """The binding generator failed."""
