# SPDX-License-Identifier: MIT
"""
bffgen: generates FASTBuild descriptors from a multi-project solution.

bffgen takes an in-memory model of a solution (native and managed
projects, their configurations and require-edges) and writes one .bff
file per project plus a solution .bff that includes them in build order.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used classes for convenient imports
from bffgen.configure.config import GeneratorConfig, ProjectSettings  # noqa: E402
from bffgen.core.errors import (  # noqa: E402
    BffgenError,
    DependencyCycleError,
    GenerateError,
)
from bffgen.core.graph import DependencyGraph, resolve_build_order  # noqa: E402
from bffgen.core.solution import (  # noqa: E402
    CharacterSet,
    ManagedConfiguration,
    NativeConfiguration,
    Project,
    ProjectKind,
    ReferenceInfo,
    Solution,
)
from bffgen.generators.fastbuild import FastbuildGenerator  # noqa: E402

# Public API exports
__all__ = [
    # Version
    "__version__",
    # Model
    "CharacterSet",
    "ManagedConfiguration",
    "NativeConfiguration",
    "Project",
    "ProjectKind",
    "ReferenceInfo",
    "Solution",
    # Resolution
    "DependencyGraph",
    "resolve_build_order",
    # Configuration
    "GeneratorConfig",
    "ProjectSettings",
    # Generators
    "FastbuildGenerator",
    # Errors
    "BffgenError",
    "DependencyCycleError",
    "GenerateError",
]
