# SPDX-License-Identifier: MIT
"""Sources of spec records."""
