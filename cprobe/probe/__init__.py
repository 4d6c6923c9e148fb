# SPDX-License-Identifier: MIT
"""Discovery strategies for a single package."""

from cprobe.probe.links import LinkEmitter, link_name
from cprobe.probe.pkgconfig import Library, PkgConfig
from cprobe.probe.prober import PrefixResult, ProbeResult, RegistryResult, StrategyProber

__all__ = [
    "Library",
    "LinkEmitter",
    "PkgConfig",
    "PrefixResult",
    "ProbeResult",
    "RegistryResult",
    "StrategyProber",
    "link_name",
]
