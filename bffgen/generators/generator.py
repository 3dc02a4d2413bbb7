# SPDX-License-Identifier: MIT
"""Generator protocol and shared project-descriptor machinery.

Generators take a Solution and produce build engine files. The
solution-level generator delegates each project to a ProjectGenerator
for the project's family (native or managed).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from bffgen.core.errors import GenerateError
from bffgen.util.bff import BffWriter, string_list

if TYPE_CHECKING:
    from bffgen.configure.config import ProjectSettings
    from bffgen.core.solution import (
        AnyConfiguration,
        Configuration,
        Project,
        ProjectFamily,
        Solution,
    )
    from bffgen.toolchains.msvc import MsvcToolchain

logger = logging.getLogger(__name__)

@runtime_checkable
class Generator(Protocol):
    """Protocol for solution generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'fastbuild')."""
        ...

    def generate(self, solution: Solution) -> object:
        """Generate build files for a solution."""
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(self, solution: Solution) -> object:
        """Generate build files. Subclasses must implement."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def variable_name(configuration: Configuration, suffix: str) -> str:
    """Per-configuration variable name, e.g. ``Debug_x64_Include_Path``."""
    return f"{configuration.variable_prefix}_{suffix}"


def resolve_path(project: Project, path: str) -> str:
    """Make a path absolute, rooting relative paths at the project folder.

    Windows drive paths are kept as they are on every host.
    """
    if not path:
        return str(project.root_folder)
    if Path(path).is_absolute() or PureWindowsPath(path).drive:
        return os.path.normpath(path)
    return os.path.normpath(str(project.root_folder / path))


class ProjectGenerator:
    """Base class for per-project descriptor generators.

    A project descriptor is one ``{ ... }`` scope holding the project's
    variables, one target per configuration, and an Alias named after
    the project that lists every configuration target.

    Subclasses implement write_variables() and write_target().
    """

    family: ProjectFamily

    def __init__(
        self,
        toolchain: MsvcToolchain,
        settings: ProjectSettings | None = None,
    ) -> None:
        self.toolchain = toolchain
        self.settings = settings

    def generate(self, project: Project, required: list[Project] | None = None) -> Path:
        """Write ``<root_folder>/<name>.bff`` for the project.

        Args:
            project: The project to describe.
            required: Required projects that take part in the build. Defaults
                to all of the project's required projects.

        Returns:
            Path of the written descriptor.

        Raises:
            GenerateError: If the file cannot be written.
        """
        path = project.descriptor_path
        logger.info("Writing %s", path)
        try:
            with open(path, "w", newline="\n") as f:
                self.write(BffWriter(f), project, required)
        except OSError as e:
            raise GenerateError(f"cannot write {path}: {e}", project.name) from e
        return path

    def write(
        self,
        writer: BffWriter,
        project: Project,
        required: list[Project] | None = None,
    ) -> None:
        """Write the descriptor text for a project."""
        if required is None:
            required = list(project.required_projects)

        with writer.scope():
            self.write_variables(writer, project)
            for configuration in project.configurations:
                self.write_target(writer, project, configuration, required)
            self.write_alias(writer, project)

    def write_variables(self, writer: BffWriter, project: Project) -> None:
        raise NotImplementedError

    def write_target(
        self,
        writer: BffWriter,
        project: Project,
        configuration: AnyConfiguration,
        required: list[Project],
    ) -> None:
        raise NotImplementedError

    def write_alias(self, writer: BffWriter, project: Project) -> None:
        """Write the Alias listing every configuration target."""
        with writer.function("Alias", project.name):
            writer.property(".Targets", "=", string_list(project.target_names))

    def pre_build_dependencies(
        self, configuration: Configuration, required: list[Project]
    ) -> list[str]:
        """Targets that must be built before this configuration.

        Uses the required project's target with the same variant and
        platform; falls back to the project's alias when it has none.
        """
        names: list[str] = []
        for project in required:
            counterpart = project.get_configuration(
                configuration.variant, configuration.platform
            )
            names.append(
                project.target_name(counterpart) if counterpart is not None else project.name
            )
        return names

    def write_pre_build_dependencies(
        self, writer: BffWriter, configuration: Configuration, required: list[Project]
    ) -> None:
        names = self.pre_build_dependencies(configuration, required)
        if names:
            writer.property(".PreBuildDependencies", "=", string_list(names))

    def output_path(self, project: Project, configuration: Configuration, filename: str) -> str:
        folder = resolve_path(project, configuration.output_folder)
        return os.path.join(folder, filename)
