# SPDX-License-Identifier: MIT
"""Platform detection and OS filter matching.

Dependency entries in spec records may carry an ``os`` field. The entry is
only followed when the target platform matches that identifier.
"""

from __future__ import annotations

import platform as _platform
import sys
from dataclasses import dataclass

# Identifiers accepted in a dependency's ``os`` field, besides "unix".
KNOWN_OS = (
    "android",
    "dragonfly",
    "freebsd",
    "ios",
    "linux",
    "macos",
    "netbsd",
    "openbsd",
    "windows",
)

# sys.platform prefixes mapped to OS identifiers
_SYS_PLATFORM_MAP = (
    ("win32", "windows"),
    ("cygwin", "windows"),
    ("darwin", "macos"),
    ("ios", "ios"),
    ("android", "android"),
    ("linux", "linux"),
    ("freebsd", "freebsd"),
    ("dragonfly", "dragonfly"),
    ("netbsd", "netbsd"),
    ("openbsd", "openbsd"),
)

_ARCH_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "arm64",
    "i386": "x86",
    "i686": "x86",
}


@dataclass(frozen=True)
class Platform:
    """An operating system / architecture pair.

    Attributes:
        os: One of KNOWN_OS, or another lowercase name for unsupported systems.
        arch: Normalized machine architecture (e.g. 'x86_64', 'arm64').
    """

    os: str
    arch: str = ""

    @property
    def is_windows(self) -> bool:
        return self.os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.os == "macos"

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def is_unix(self) -> bool:
        """True for every OS other than windows, including unlisted ones."""
        return bool(self.os) and not self.is_windows

    def matches(self, name: str) -> bool:
        """Check whether an ``os`` filter identifier selects this platform.

        Unknown identifiers never match.
        """
        if name == "unix":
            return self.is_unix
        if name not in KNOWN_OS:
            return False
        return name == self.os

    def __str__(self) -> str:
        if self.arch:
            return f"{self.os}/{self.arch}"
        return self.os


def normalize_os(name: str) -> str:
    """Map a sys.platform-style or user supplied name to an OS identifier."""
    lowered = name.strip().lower()
    if lowered in KNOWN_OS:
        return lowered
    if lowered == "darwin":
        return "macos"
    for prefix, os_name in _SYS_PLATFORM_MAP:
        if lowered.startswith(prefix):
            return os_name
    return lowered


def normalize_arch(machine: str) -> str:
    lowered = machine.strip().lower()
    return _ARCH_ALIASES.get(lowered, lowered)


def get_platform() -> Platform:
    """Detect the host platform."""
    return Platform(
        os=normalize_os(sys.platform),
        arch=normalize_arch(_platform.machine()),
    )
