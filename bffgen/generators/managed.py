# SPDX-License-Identifier: MIT
"""Descriptor generator for managed (C#) projects.

Each configuration compiles the project's source files into one
assembly with a CSAssembly target. The descriptor defines, in order:
a reference list per configuration, the shared ``.InputFiles`` list,
a compiler flags string per configuration, the targets and the alias.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bffgen.core.solution import ManagedConfiguration, ProjectFamily, ProjectKind
from bffgen.generators.generator import ProjectGenerator, resolve_path, variable_name
from bffgen.util.bff import option_string, quote, string_list

if TYPE_CHECKING:
    from bffgen.core.solution import Project
    from bffgen.util.bff import BffWriter

logger = logging.getLogger(__name__)

REFERENCES = "References"
COMPILE_FLAGS = "Compile_Flags"
INPUT_FILES = "InputFiles"

TARGET_KINDS: dict[ProjectKind, str] = {
    ProjectKind.MANAGED_EXECUTABLE: "exe",
    ProjectKind.MANAGED_LIBRARY: "library",
    ProjectKind.MANAGED_GUI_EXECUTABLE: "winexe",
}


def compiler_flags(kind: ProjectKind, configuration: ManagedConfiguration) -> list[str]:
    """Build the csc.exe options for one configuration.

    The order is fixed: target kind, platform, optimize, warnings as
    errors, defines, debug, ignored warnings, file alignment, warning level.
    """
    flags: list[str] = []

    target = TARGET_KINDS.get(kind)
    if target is not None:
        flags.append(f"/target:{target}")

    flags.append(f"/platform:{configuration.platform}")
    flags.append("/optimize+" if configuration.optimize else "/optimize-")

    if configuration.warnings_as_errors:
        flags.append("/warnaserror+")

    for constant in configuration.defined_constants:
        flags.append(f"/define:{constant}")

    if configuration.debug:
        flags.append("/debug+")
    if configuration.debug_info:
        flags.append(f"/debug:{configuration.debug_info}")

    if configuration.warnings_to_ignore:
        flags.append("/nowarn:" + ",".join(configuration.warnings_to_ignore))

    flags.append(f"/filealign:{configuration.file_alignment}")
    flags.append(f"/warn:{configuration.warning_level}")
    return flags


class ManagedProjectGenerator(ProjectGenerator):
    """Writes the descriptor of a managed executable or library project."""

    family = ProjectFamily.MANAGED

    def write_variables(self, writer: BffWriter, project: Project) -> None:
        writer.comment("References...")
        for configuration in project.configurations:
            paths = [reference.absolute_path for reference in configuration.references]
            writer.variable(variable_name(configuration, REFERENCES), string_list(paths))
        writer.blank()

        writer.comment("Source files...")
        files = [resolve_path(project, path) for path in project.files]
        if not files:
            logger.warning("%s: managed project has no source files", project.name)
        writer.variable(INPUT_FILES, string_list(files))
        writer.blank()

        writer.comment("Compiler flags...")
        for configuration in project.configurations:
            writer.variable(
                variable_name(configuration, COMPILE_FLAGS),
                option_string(compiler_flags(project.kind, configuration)),
            )
        writer.blank()

    def assembly_name(self, project: Project) -> str:
        if project.kind == ProjectKind.MANAGED_LIBRARY:
            return self.toolchain.get_shared_library_name(project.name)
        return self.toolchain.get_program_name(project.name)

    def write_target(
        self,
        writer: BffWriter,
        project: Project,
        configuration: ManagedConfiguration,
        required: list[Project],
    ) -> None:
        output = self.output_path(project, configuration, self.assembly_name(project))
        with writer.function("CSAssembly", project.target_name(configuration)):
            writer.using(self.toolchain.managed_base_config(configuration.platform))
            writer.property(".CompilerOutput", "=", quote(output))
            writer.concatenation(
                ".CompilerOptions",
                "+",
                ["." + variable_name(configuration, COMPILE_FLAGS), "' \"%1\"'"],
            )
            writer.property(".CompilerInputFiles", "=", "." + INPUT_FILES)
            writer.property(
                ".CompilerReferences", "=", "." + variable_name(configuration, REFERENCES)
            )
            self.write_pre_build_dependencies(writer, configuration, required)
