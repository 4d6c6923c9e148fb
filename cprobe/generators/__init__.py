# SPDX-License-Identifier: MIT
"""Binding generators for cprobe."""

from cprobe.generators.bindings import BindgenGenerator, Generator, write_placeholder

__all__ = [
    "BindgenGenerator",
    "Generator",
    "write_placeholder",
]
