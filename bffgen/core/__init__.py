# SPDX-License-Identifier: MIT
"""Core solution model and dependency resolution."""
