# SPDX-License-Identifier: MIT
"""
cprobe: locate native libraries and prepare inputs for binding generation.

cprobe walks a declarative graph of native packages, finds each one with
pkg-config or, failing that, through the installation prefix of one of its
executables, and collects headers, include paths and link directives.
"""

from __future__ import annotations

__version__ = "0.2.0"

# Re-export commonly used classes for convenient imports
from cprobe.build import BuildResult, build, probe_library  # noqa: E402
from cprobe.configure.config import ResolveConfig  # noqa: E402
from cprobe.core.errors import CprobeError  # noqa: E402
from cprobe.core.spec import Spec  # noqa: E402
from cprobe.core.state import ResolutionState  # noqa: E402
from cprobe.core.store import SpecStore  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Entry points
    "build",
    "probe_library",
    "BuildResult",
    # Core classes
    "CprobeError",
    "ResolutionState",
    "ResolveConfig",
    "Spec",
    "SpecStore",
]
