# SPDX-License-Identifier: MIT
"""Toolchain definitions written into the solution descriptor."""

from bffgen.toolchains.msvc import DEFAULT_BASE_PATHS, MsvcToolchain

__all__ = ["DEFAULT_BASE_PATHS", "MsvcToolchain"]
