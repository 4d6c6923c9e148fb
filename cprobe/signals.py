# SPDX-License-Identifier: MIT
"""Build signals consumed by the surrounding build orchestrator.

Link search paths and link libraries are reported as cargo-style
directives, one per line::

    cargo:rustc-link-search=native=/opt/foo/lib
    cargo:rustc-link-lib=foo
    cargo:rerun-if-env-changed=PKG_CONFIG
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO


@dataclass(frozen=True)
class Directive:
    """One emitted directive.

    Attributes:
        key: Directive key (e.g. 'rustc-link-lib').
        value: Directive value.
    """

    key: str
    value: str

    def render(self, prefix: str = "cargo:") -> str:
        return f"{prefix}{self.key}={self.value}"


class BuildSignals:
    """Records directives and writes them to a stream.

    Attributes:
        directives: Every directive emitted so far, in order.
    """

    def __init__(self, stream: TextIO | None = None, prefix: str = "cargo:") -> None:
        """Create a signal sink.

        Args:
            stream: Where directives are written (default: sys.stdout).
                Pass a StringIO to capture them.
            prefix: Text prepended to each line.
        """
        self._stream = stream
        self.prefix = prefix
        self.directives: list[Directive] = []

    def emit(self, key: str, value: str) -> None:
        directive = Directive(key, value)
        self.directives.append(directive)
        stream = self._stream if self._stream is not None else sys.stdout
        print(directive.render(self.prefix), file=stream)

    def link_search(self, path: Path | str, kind: str = "native") -> None:
        self.emit("rustc-link-search", f"{kind}={path}")

    def link_lib(self, name: str, kind: str | None = None) -> None:
        self.emit("rustc-link-lib", f"{kind}={name}" if kind else name)

    def rerun_if_env_changed(self, var: str) -> None:
        self.emit("rerun-if-env-changed", var)

    @property
    def link_libs(self) -> list[str]:
        """Values of every link-library directive."""
        return [d.value for d in self.directives if d.key == "rustc-link-lib"]

    @property
    def link_searches(self) -> list[str]:
        """Values of every link-search directive."""
        return [d.value for d in self.directives if d.key == "rustc-link-search"]

    def lines(self) -> list[str]:
        return [d.render(self.prefix) for d in self.directives]
