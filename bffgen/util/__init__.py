# SPDX-License-Identifier: MIT
"""Utility modules for bffgen."""
