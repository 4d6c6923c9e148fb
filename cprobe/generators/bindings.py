# SPDX-License-Identifier: MIT
"""Binding generation from the resolved headers.

The header-to-binding compiler is an external program (``bindgen`` by
default). All collected headers are pulled in through one wrapper header
and the include paths are passed as clang arguments::

    bindgen --no-doc-comments <out>/cprobe_wrapper.h -o <out>/bindings.rs -- -I...

When there is nothing to generate an empty placeholder is written instead,
so code that includes the bindings still compiles.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cprobe.core.errors import GenerateError

if TYPE_CHECKING:
    from cprobe.core.state import ResolutionState

logger = logging.getLogger(__name__)

BINDINGS_FILE = "bindings.rs"
WRAPPER_HEADER = "cprobe_wrapper.h"


@runtime_checkable
class Generator(Protocol):
    """Protocol for binding generators."""

    @property
    def name(self) -> str: ...

    def generate(self, state: ResolutionState, output_dir: Path) -> Path: ...


def write_placeholder(output_dir: Path, file_name: str = BINDINGS_FILE) -> Path:
    """Write an empty bindings file."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / file_name
    path.write_text("")
    logger.info("Wrote empty %s", path)
    return path


class BindgenGenerator:
    """Runs an external bindgen-compatible command.

    Attributes:
        executable: The generator program.
        file_name: Name of the generated file.
        generate_comments: Keep doc comments from the headers.
    """

    def __init__(
        self,
        executable: str = "bindgen",
        *,
        file_name: str = BINDINGS_FILE,
        generate_comments: bool = False,
    ) -> None:
        self.executable = executable
        self.file_name = file_name
        self.generate_comments = generate_comments

    @property
    def name(self) -> str:
        return "bindgen"

    def write_wrapper(self, state: ResolutionState, output_dir: Path) -> Path:
        """Write a header that includes every collected header, in order."""
        output_dir.mkdir(parents=True, exist_ok=True)
        wrapper = output_dir / WRAPPER_HEADER
        lines = [f'#include "{header}"' for header in state.headers]
        wrapper.write_text("\n".join(lines) + "\n")
        return wrapper

    def command(self, state: ResolutionState, wrapper: Path, output: Path) -> list[str]:
        cmd = [self.executable]
        if not self.generate_comments:
            cmd.append("--no-doc-comments")
        cmd.extend([str(wrapper), "-o", str(output), "--"])
        cmd.extend(state.compile_flags())
        return cmd

    def generate(self, state: ResolutionState, output_dir: Path) -> Path:
        """Generate bindings, or a placeholder if no headers were collected.

        Returns:
            Path of the generated file.

        Raises:
            GenerateError: If the generator cannot run or fails.
        """
        if state.is_empty:
            return write_placeholder(output_dir, self.file_name)

        wrapper = self.write_wrapper(state, output_dir)
        output = output_dir / self.file_name
        cmd = self.command(state, wrapper, output)
        logger.info("Running: %s", shlex.join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise GenerateError(f"failed to run {self.executable}: {e}") from e
        if result.returncode != 0:
            raise GenerateError(
                f"{self.executable} exited with status {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return output

    def __repr__(self) -> str:
        return f"BindgenGenerator({self.executable!r})"
