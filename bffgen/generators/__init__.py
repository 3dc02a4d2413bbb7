# SPDX-License-Identifier: MIT
"""Build descriptor generators for bffgen."""

from bffgen.generators.fastbuild import FastbuildGenerator, GenerationResult
from bffgen.generators.generator import BaseGenerator, ProjectGenerator
from bffgen.generators.managed import ManagedProjectGenerator
from bffgen.generators.native import NativeProjectGenerator

__all__ = [
    "BaseGenerator",
    "FastbuildGenerator",
    "GenerationResult",
    "ManagedProjectGenerator",
    "NativeProjectGenerator",
    "ProjectGenerator",
]
