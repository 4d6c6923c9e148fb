# SPDX-License-Identifier: MIT
"""Platform detection and resolution settings."""
