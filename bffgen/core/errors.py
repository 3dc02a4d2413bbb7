# SPDX-License-Identifier: MIT
"""Custom exceptions for bffgen.

All bffgen exceptions inherit from BffgenError, which includes
an optional project name for better error messages.
"""

from __future__ import annotations


class BffgenError(Exception):
    """Base class for all bffgen exceptions.

    Attributes:
        message: The error message.
        project: Optional name of the project the error relates to.
    """

    def __init__(self, message: str, project: str | None = None) -> None:
        self.message = message
        self.project = project
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.project:
            return f"{self.project}: {self.message}"
        return self.message


class ConfigError(BffgenError):
    """Generator configuration could not be loaded or is malformed."""


class ProjectModelError(BffgenError):
    """A single project is malformed.

    These errors are isolated: the project is reported and left out of
    the generated solution, the rest of the solution is still written.
    """


class GenerateError(BffgenError):
    """Error during the generate phase.

    Raised when descriptor generation fails for the whole solution.
    """


class DependencyCycleError(GenerateError):
    """Circular dependency detected between projects.

    Attributes:
        cycle: The project names forming the cycle.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        cycle_str = " -> ".join(cycle)
        super().__init__(f"cyclic dependency: {cycle_str}")


class DuplicateTargetError(GenerateError):
    """Two configurations share the same target identifier.

    Attributes:
        target_name: The duplicated target identifier.
        projects: Names of the projects declaring it.
    """

    def __init__(self, target_name: str, projects: list[str]) -> None:
        self.target_name = target_name
        self.projects = projects
        super().__init__(
            f"target '{target_name}' is declared by more than one "
            f"configuration ({', '.join(projects)})"
        )
