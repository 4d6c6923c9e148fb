# SPDX-License-Identifier: MIT
"""Declarative per-package spec records.

A spec describes how to find one native package: which headers it ships,
which pkg-config names and executables identify it, which library files
must be linked, and which other packages it depends on.

Record format (keys as they appear in TOML/JSON)::

    headers = ["foo.h"]
    pc-alias = ["foo-1.0"]
    exe = ["foo-config"]
    includedir = ["foo-1.0", "foo"]
    libs = { core = ["libfoo.so", "libfoo.a"] }   # or a flat list
    libs-private = ["libfoo_impl.a"]
    dependencies = ["bar"]                         # or { bar = { os = "linux" } }
    header-dependencies = ["baz"]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from cprobe.configure.platform import Platform
from cprobe.core.errors import SpecError

logger = logging.getLogger(__name__)

KNOWN_KEYS = frozenset(
    {
        "headers",
        "pc-alias",
        "exe",
        "includedir",
        "libs",
        "libs-private",
        "dependencies",
        "header-dependencies",
    }
)


@dataclass(frozen=True)
class DependencyEntry:
    """A dependency on another package, optionally gated by OS.

    Attributes:
        name: Package name of the dependency.
        os: OS identifier the dependency is restricted to, or None.
    """

    name: str
    os: str | None = None

    def applies_to(self, target: Platform) -> bool:
        """True if this dependency should be probed for the target platform."""
        if self.os is None:
            return True
        return target.matches(self.os)


@dataclass(frozen=True)
class LibGroups:
    """Library files to link for a package found by executable search.

    In the grouped shape each group is satisfied by the first candidate
    that exists. In the flat shape every candidate must exist.

    Attributes:
        groups: Ordered (group name, candidate file names) pairs.
        grouped: False when the record declared a flat list.
    """

    groups: tuple[tuple[str, tuple[str, ...]], ...] = ()
    grouped: bool = True

    @property
    def candidates(self) -> list[str]:
        return [name for _, names in self.groups for name in names]

    def __bool__(self) -> bool:
        return bool(self.groups)

    def to_record(self) -> dict[str, list[str]] | list[str]:
        if self.grouped:
            return {group: list(names) for group, names in self.groups}
        return self.candidates


@dataclass(frozen=True)
class Spec:
    """A parsed spec record.

    Attributes:
        name: Package name the record is registered under.
        headers: Header file names relative to the include directory.
        pc_alias: Extra pkg-config names to try after the package name.
        exe: Executable names that identify an installation prefix.
        includedir: Candidate subdirectories of ``<prefix>/include``.
        libs: Library files to link, or None if not declared.
        libs_private: Additional private library files, or None.
        dependencies: Full dependencies.
        header_dependencies: Header-only dependencies.
        raw: The mapping this spec was parsed from.
    """

    name: str
    headers: tuple[str, ...] = ()
    pc_alias: tuple[str, ...] = ()
    exe: tuple[str, ...] = ()
    includedir: tuple[str, ...] = ()
    libs: LibGroups | None = None
    libs_private: LibGroups | None = None
    dependencies: tuple[DependencyEntry, ...] = ()
    header_dependencies: tuple[DependencyEntry, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, name: str, data: Any) -> Spec:
        """Parse a spec record.

        Args:
            name: Package name.
            data: The record, as loaded from TOML or JSON.

        Returns:
            The parsed Spec.

        Raises:
            SpecError: If the record is malformed.
        """
        if not isinstance(data, Mapping):
            raise SpecError(f"spec of {name} should be a table, got {data!r}")

        unknown = sorted(set(data) - KNOWN_KEYS)
        if unknown:
            logger.warning("spec of %s: ignoring unknown keys %s", name, unknown)

        if "headers" not in data:
            raise SpecError(f"spec of {name} should contain headers")

        return cls(
            name=name,
            headers=_str_list(name, "headers", data["headers"]),
            pc_alias=_str_list(name, "pc-alias", data.get("pc-alias", [])),
            exe=_str_list(name, "exe", data.get("exe", [])),
            includedir=_str_list(name, "includedir", data.get("includedir", [])),
            libs=_lib_groups(name, "libs", data.get("libs")),
            libs_private=_lib_groups(name, "libs-private", data.get("libs-private")),
            dependencies=_dependencies(
                name, "dependencies", data.get("dependencies", [])
            ),
            header_dependencies=_dependencies(
                name, "header-dependencies", data.get("header-dependencies", [])
            ),
            raw=dict(data),
        )

    def same_as(self, other: Spec) -> bool:
        """Structural identity of two specs.

        Records parsed from TOML/JSON are compared as written; a spec built
        directly has no record and is compared by its parsed fields.
        """
        if self.raw and other.raw:
            return dict(self.raw) == dict(other.raw)
        return self == other

    def to_dict(self) -> dict[str, Any]:
        """The record this spec was parsed from, or one rebuilt from its fields."""
        if self.raw:
            return dict(self.raw)

        data: dict[str, Any] = {"headers": list(self.headers)}
        for key, value in (
            ("pc-alias", self.pc_alias),
            ("exe", self.exe),
            ("includedir", self.includedir),
        ):
            if value:
                data[key] = list(value)
        for key, groups in (("libs", self.libs), ("libs-private", self.libs_private)):
            if groups is not None:
                data[key] = groups.to_record()
        for key, deps in (
            ("dependencies", self.dependencies),
            ("header-dependencies", self.header_dependencies),
        ):
            if deps:
                data[key] = _dependency_record(deps)
        return data


def _str_list(name: str, key: str, value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise SpecError(f"{key} of {name} should be an array, got {value!r}")
    for item in value:
        if not isinstance(item, str):
            raise SpecError(f"{key} of {name} should contain strings, got {item!r}")
    return tuple(value)


def _lib_groups(name: str, key: str, value: Any) -> LibGroups | None:
    if value is None:
        return None
    if isinstance(value, Mapping):
        groups = tuple(
            (group, _str_list(name, f"{key}.{group}", names))
            for group, names in value.items()
        )
        return LibGroups(groups=groups, grouped=True)
    if isinstance(value, list):
        names = _str_list(name, key, value)
        return LibGroups(groups=tuple((n, (n,)) for n in names), grouped=False)
    raise SpecError(f"{key} of {name} should be a table or an array, got {value!r}")


def _dependencies(name: str, key: str, value: Any) -> tuple[DependencyEntry, ...]:
    if isinstance(value, list):
        for pkg in value:
            if not isinstance(pkg, str):
                raise SpecError(f"pkg name should be str in {key} of {name}: {pkg!r}")
        return tuple(DependencyEntry(pkg) for pkg in value)

    if isinstance(value, Mapping):
        entries = []
        for pkg, dep in value.items():
            if not isinstance(dep, Mapping):
                raise SpecError(
                    f"named dependency {pkg} in {key} of {name} should be a table"
                )
            os_name = dep.get("os")
            if os_name is not None and not isinstance(os_name, str):
                raise SpecError(f"os name should be str in {key}.{pkg} of {name}")
            entries.append(DependencyEntry(pkg, os_name))
        return tuple(entries)

    raise SpecError(f"invalid {key} of {name}: {value!r}")


def _dependency_record(deps: tuple[DependencyEntry, ...]) -> list[str] | dict[str, Any]:
    if all(dep.os is None for dep in deps):
        return [dep.name for dep in deps]
    return {dep.name: ({"os": dep.os} if dep.os else {}) for dep in deps}
