# SPDX-License-Identifier: MIT
"""In-memory model of a multi-project solution.

The model is produced by an external parser (or built directly in a
solution script) and is read-only for the generators. A Solution holds
Projects; each Project holds one Configuration per build variant and
platform, and a list of the Projects it requires.

Example:
    solution = Solution("game", root_folder=Path("/src/game"))

    core = solution.add_project(
        Project("core", ProjectKind.NATIVE_STATIC_LIBRARY, Path("/src/game/core"))
    )
    core.add_configuration(NativeConfiguration("Debug", "x64"))

    app = solution.add_project(
        Project("app", ProjectKind.NATIVE_EXECUTABLE, Path("/src/game/app"))
    )
    app.requires(core)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath

from bffgen.core.errors import ProjectModelError

_NON_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]")


class ProjectFamily(Enum):
    """Closed set of generator families."""

    NATIVE = "native"
    MANAGED = "managed"


class ProjectKind(Enum):
    """What a project builds."""

    INVALID = "invalid"
    NATIVE_EXECUTABLE = "native_executable"
    NATIVE_SHARED_LIBRARY = "native_shared_library"
    NATIVE_STATIC_LIBRARY = "native_static_library"
    MANAGED_EXECUTABLE = "managed_executable"
    MANAGED_LIBRARY = "managed_library"
    MANAGED_GUI_EXECUTABLE = "managed_gui_executable"

    @property
    def family(self) -> ProjectFamily | None:
        """The generator family for this kind, or None for INVALID."""
        return _KIND_FAMILIES.get(self)


_KIND_FAMILIES: dict[ProjectKind, ProjectFamily] = {
    ProjectKind.NATIVE_EXECUTABLE: ProjectFamily.NATIVE,
    ProjectKind.NATIVE_SHARED_LIBRARY: ProjectFamily.NATIVE,
    ProjectKind.NATIVE_STATIC_LIBRARY: ProjectFamily.NATIVE,
    ProjectKind.MANAGED_EXECUTABLE: ProjectFamily.MANAGED,
    ProjectKind.MANAGED_LIBRARY: ProjectFamily.MANAGED,
    ProjectKind.MANAGED_GUI_EXECUTABLE: ProjectFamily.MANAGED,
}


class CharacterSet(Enum):
    NOT_SET = "not_set"
    UNICODE = "unicode"
    MULTI_BYTE = "multi_byte"


@dataclass
class Configuration:
    """One build variant (e.g. Debug/x64) of a project.

    Attributes:
        variant: Variant name, e.g. "Debug".
        platform: Platform tag, e.g. "x64".
        output_folder: Folder the final binary is written to.
    """

    variant: str
    platform: str
    output_folder: str = ""

    family: ProjectFamily | None = field(default=None, init=False, repr=False)

    @property
    def variable_prefix(self) -> str:
        """Prefix of this configuration's descriptor variables, e.g. ``Debug_x64``."""
        return _NON_IDENTIFIER.sub("_", f"{self.variant}_{self.platform}")

    @property
    def key(self) -> tuple[str, str]:
        return (self.variant, self.platform)


@dataclass
class NativeConfiguration(Configuration):
    """Compile and link inputs of a native configuration.

    Library names are raw (no extension); paths may be relative to the
    project folder.
    """

    include_paths: list[str] = field(default_factory=list)
    library_paths: list[str] = field(default_factory=list)
    library_names: list[str] = field(default_factory=list)
    preprocessor_definitions: list[str] = field(default_factory=list)
    compiler_flags: list[str] = field(default_factory=list)
    linker_flags: list[str] = field(default_factory=list)
    intermediate_folder: str = ""
    import_library_path: str = ""
    character_set: CharacterSet = CharacterSet.NOT_SET

    def __post_init__(self) -> None:
        self.family = ProjectFamily.NATIVE


@dataclass
class ReferenceInfo:
    """An external assembly referenced by a managed project."""

    name: str
    absolute_path: str


@dataclass
class ManagedConfiguration(Configuration):
    """Compiler settings of a managed (C#) configuration."""

    optimize: bool = False
    warnings_as_errors: bool = False
    defined_constants: list[str] = field(default_factory=list)
    debug: bool = False
    debug_info: str = ""
    warnings_to_ignore: list[str] = field(default_factory=list)
    file_alignment: int = 512
    warning_level: int = 4
    references: list[ReferenceInfo] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.family = ProjectFamily.MANAGED


AnyConfiguration = NativeConfiguration | ManagedConfiguration


@dataclass(eq=False)
class Project:
    """A project in the solution.

    Attributes:
        name: Project name, unique within the solution.
        kind: What the project builds.
        root_folder: Absolute project folder; the descriptor is written here.
        root_folder_relative: Project folder relative to the solution root.
        required_projects: Projects that must be built before this one.
        configurations: One entry per variant and platform.
        files: Project-relative source files (managed projects).
        error: Set by the parser when the project could not be modeled.
    """

    name: str
    kind: ProjectKind
    root_folder: Path
    root_folder_relative: str = ""
    required_projects: list[Project] = field(default_factory=list)
    configurations: list[AnyConfiguration] = field(default_factory=list)
    files: list[str] = field(default_factory=list)
    error: str | None = None

    def __post_init__(self) -> None:
        self.root_folder = Path(self.root_folder)

    def add_configuration(self, configuration: AnyConfiguration) -> AnyConfiguration:
        self.configurations.append(configuration)
        return configuration

    def target_name(self, configuration: Configuration) -> str:
        """The solution-unique handle of one of this project's configurations."""
        return f"{self.name}-{configuration.platform}-{configuration.variant}"

    @property
    def target_names(self) -> list[str]:
        return [self.target_name(configuration) for configuration in self.configurations]

    def requires(self, *projects: Project) -> None:
        """Declare require-edges from this project to others."""
        for project in projects:
            if project not in self.required_projects:
                self.required_projects.append(project)

    def get_configuration(self, variant: str, platform: str) -> AnyConfiguration | None:
        for configuration in self.configurations:
            if configuration.key == (variant, platform):
                return configuration
        return None

    @property
    def descriptor_filename(self) -> str:
        return f"{self.name}.bff"

    @property
    def descriptor_path(self) -> Path:
        return self.root_folder / self.descriptor_filename

    @property
    def include_path(self) -> str:
        """Path of the descriptor relative to the solution root."""
        folder = self.root_folder_relative.replace("\\", "/").strip("/")
        if not folder or folder == ".":
            return self.descriptor_filename
        return str(PurePosixPath(folder) / self.descriptor_filename)

    def validate(self) -> None:
        """Check that the project can be turned into a descriptor.

        Raises:
            ProjectModelError: If the parser reported an error, a
                configuration does not match the project's family, or two
                configurations share a variant and platform or the same
                variable prefix.
        """
        if self.error:
            raise ProjectModelError(self.error, self.name)

        family = self.kind.family
        seen: set[tuple[str, str]] = set()
        prefixes: dict[str, Configuration] = {}
        for configuration in self.configurations:
            if not configuration.variant or not configuration.platform:
                raise ProjectModelError(
                    "configuration has an empty variant or platform", self.name
                )
            if configuration.family is not family:
                raise ProjectModelError(
                    f"configuration {configuration.variant}|{configuration.platform} "
                    f"is not a {family.value if family else 'valid'} configuration",
                    self.name,
                )
            if configuration.key in seen:
                raise ProjectModelError(
                    f"duplicate configuration {configuration.variant}|"
                    f"{configuration.platform}",
                    self.name,
                )
            seen.add(configuration.key)

            other = prefixes.setdefault(configuration.variable_prefix, configuration)
            if other is not configuration:
                raise ProjectModelError(
                    f"configurations {other.variant}|{other.platform} and "
                    f"{configuration.variant}|{configuration.platform} both map to "
                    f"variables named {configuration.variable_prefix}_*",
                    self.name,
                )

    def __repr__(self) -> str:
        return f"Project({self.name!r}, {self.kind.value})"


@dataclass
class Solution:
    """Top-level container: a name, a root folder and ordered projects."""

    name: str
    root_folder: Path
    projects: list[Project] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.root_folder = Path(self.root_folder)

    def add_project(self, project: Project) -> Project:
        if self.get_project(project.name) is not None:
            raise ValueError(f"Project '{project.name}' already exists")
        self.projects.append(project)
        return project

    def get_project(self, name: str) -> Project | None:
        for project in self.projects:
            if project.name == name:
                return project
        return None

    @property
    def descriptor_path(self) -> Path:
        return self.root_folder / f"{self.name}.bff"
