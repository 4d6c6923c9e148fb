# SPDX-License-Identifier: MIT
"""Spec records, the spec store and the dependency walker."""
