# SPDX-License-Identifier: MIT
"""The result aggregator threaded through a resolution walk."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from cprobe.core.errors import PathEncodingError


def as_text(path: Path | str) -> str:
    """Convert a path to text, rejecting paths that are not valid UTF-8."""
    text = os.fspath(path)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise PathEncodingError(path) from e
    return text


@dataclass
class ResolutionState:
    """Link paths, include paths and headers found so far.

    The lists only grow during a walk and tolerate duplicates. One state is
    created per top-level build and consumed once to drive binding
    generation.

    Attributes:
        link_paths: Library search directories.
        include_paths: Header search directories.
        headers: Full paths of the headers to generate bindings for.
    """

    link_paths: list[str] = field(default_factory=list)
    include_paths: list[str] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)

    def add_link_path(self, path: Path | str) -> None:
        self.link_paths.append(as_text(path))

    def add_include_path(self, path: Path | str) -> None:
        self.include_paths.append(as_text(path))

    def add_header(self, path: Path | str) -> None:
        self.headers.append(as_text(path))

    def extend(self, other: ResolutionState) -> None:
        """Append everything another state collected."""
        self.link_paths.extend(other.link_paths)
        self.include_paths.extend(other.include_paths)
        self.headers.extend(other.headers)

    @property
    def is_empty(self) -> bool:
        """True when no headers were collected (nothing to generate)."""
        return not self.headers

    def compile_flags(self) -> list[str]:
        return [f"-I{path}" for path in self.include_paths]

    def link_flags(self) -> list[str]:
        return [f"-L{path}" for path in self.link_paths]

    def to_dict(self) -> dict[str, Any]:
        return {
            "link_paths": list(self.link_paths),
            "include_paths": list(self.include_paths),
            "headers": list(self.headers),
        }
