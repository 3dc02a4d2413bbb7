# SPDX-License-Identifier: MIT
"""Generator configuration (ignore list, per-project overrides)."""

from bffgen.configure.config import GeneratorConfig, ProjectSettings

__all__ = ["GeneratorConfig", "ProjectSettings"]
