# SPDX-License-Identifier: MIT
"""Descriptor generator for native (C/C++) projects.

For each configuration the descriptor defines six option variables
(include paths, library paths, libraries, preprocessor definitions,
compiler flags, linker flags) and then the configuration's targets:

    Executable / DLL:
        ObjectList('app-x64-Debug-objs')   compiles the project folder
        Executable('app-x64-Debug')        links the object list

    Static library:
        Library('core-x64-Debug')          compiles and archives in one step

All variables are defined before any target references them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bffgen.core.solution import (
    CharacterSet,
    NativeConfiguration,
    ProjectFamily,
    ProjectKind,
)
from bffgen.generators.generator import ProjectGenerator, resolve_path, variable_name
from bffgen.util.bff import option_string, path_option, quote, string_list

if TYPE_CHECKING:
    from bffgen.core.solution import Project
    from bffgen.util.bff import BffWriter

logger = logging.getLogger(__name__)

INCLUDE_PATH = "Include_Path"
LIBRARY_PATH = "Library_Path"
LIBRARIES = "Libraries"
PREPROCESSOR_DEFINITIONS = "Preprocessor_Definitions"
COMPILER_FLAGS = "Compiler_Flags"
LINKER_FLAGS = "Linker_Flags"


class NativeProjectGenerator(ProjectGenerator):
    """Writes the descriptor of a native executable or library project.

    Example:
        generator = NativeProjectGenerator(MsvcToolchain())
        generator.generate(project)  # writes <root>/<name>.bff
    """

    family = ProjectFamily.NATIVE

    # =========================================================================
    # Option lists
    # =========================================================================

    def include_path_options(
        self, project: Project, configuration: NativeConfiguration
    ) -> list[str]:
        prefix = self.toolchain.include_prefix
        return [
            path_option(prefix, resolve_path(project, path))
            for path in configuration.include_paths
        ]

    def library_path_options(
        self, project: Project, configuration: NativeConfiguration
    ) -> list[str]:
        prefix = self.toolchain.library_path_prefix
        return [
            path_option(prefix, resolve_path(project, path))
            for path in configuration.library_paths
        ]

    def library_options(
        self, project: Project, configuration: NativeConfiguration
    ) -> list[str]:
        """Library file names, without entries that cannot be resolved.

        A raw name still holding a placeholder token (an unexpanded IDE
        macro) is dropped; the rest of the list is kept.
        """
        removed = set(self.settings.remove_libraries) if self.settings else set()
        libraries: list[str] = []
        for name in configuration.library_names:
            if self.toolchain.placeholder_token in name:
                logger.warning(
                    "%s: dropping library '%s' from %s (unresolved placeholder)",
                    project.name,
                    name,
                    project.target_name(configuration),
                )
                continue
            if name in removed:
                logger.debug("%s: library '%s' removed by settings", project.name, name)
                continue
            libraries.append(self.toolchain.get_static_library_name(name))
        return libraries

    def define_options(self, configuration: NativeConfiguration) -> list[str]:
        defines = list(configuration.preprocessor_definitions)
        if self.settings:
            defines.extend(self.settings.extra_defines)
        if configuration.character_set == CharacterSet.UNICODE:
            defines.append(self.toolchain.unicode_define)
        return [f"{self.toolchain.define_prefix}{define}" for define in defines]

    def compiler_flags(self, configuration: NativeConfiguration) -> list[str]:
        flags = list(configuration.compiler_flags)
        if self.settings:
            flags.extend(self.settings.extra_compiler_flags)
        return flags

    def linker_flags(self, configuration: NativeConfiguration) -> list[str]:
        flags = list(configuration.linker_flags)
        if self.settings:
            flags.extend(self.settings.extra_linker_flags)
        return flags

    # =========================================================================
    # Variables
    # =========================================================================

    def write_variables(self, writer: BffWriter, project: Project) -> None:
        sections = [
            ("Include paths...", INCLUDE_PATH, lambda c: self.include_path_options(project, c)),
            ("Library paths...", LIBRARY_PATH, lambda c: self.library_path_options(project, c)),
            ("Additional libraries...", LIBRARIES, lambda c: self.library_options(project, c)),
            ("Preprocessor definitions...", PREPROCESSOR_DEFINITIONS, self.define_options),
            ("Compiler flags...", COMPILER_FLAGS, self.compiler_flags),
            ("Linker flags...", LINKER_FLAGS, self.linker_flags),
        ]
        for comment, suffix, options in sections:
            writer.comment(comment)
            for configuration in project.configurations:
                writer.variable(
                    variable_name(configuration, suffix),
                    option_string(options(configuration)),
                )
            writer.blank()

    # =========================================================================
    # Targets
    # =========================================================================

    def write_target(
        self,
        writer: BffWriter,
        project: Project,
        configuration: NativeConfiguration,
        required: list[Project],
    ) -> None:
        if project.kind in (
            ProjectKind.NATIVE_EXECUTABLE,
            ProjectKind.NATIVE_SHARED_LIBRARY,
        ):
            self._write_object_list(writer, project, configuration)
            self._write_linked_target(writer, project, configuration, required)
        elif project.kind == ProjectKind.NATIVE_STATIC_LIBRARY:
            self._write_library(writer, project, configuration, required)
        else:
            raise ValueError(f"{project.name}: not a native project ({project.kind.value})")

    def import_library_path(self, project: Project, configuration: NativeConfiguration) -> str:
        """The .lib written next to a DLL, or the archive of a static library."""
        if configuration.import_library_path:
            return resolve_path(project, configuration.import_library_path)
        return self.output_path(
            project, configuration, self.toolchain.get_static_library_name(project.name)
        )

    def _compiler_options(self, configuration: NativeConfiguration) -> list[str]:
        return [
            "." + variable_name(configuration, PREPROCESSOR_DEFINITIONS),
            "." + variable_name(configuration, INCLUDE_PATH),
            "." + variable_name(configuration, COMPILER_FLAGS),
        ]

    def _linker_options(self, configuration: NativeConfiguration) -> list[str]:
        return [
            "." + variable_name(configuration, LIBRARY_PATH),
            "." + variable_name(configuration, LINKER_FLAGS),
            "." + variable_name(configuration, LIBRARIES),
        ]

    def _write_object_list(
        self, writer: BffWriter, project: Project, configuration: NativeConfiguration
    ) -> None:
        target = project.target_name(configuration)
        with writer.function("ObjectList", f"{target}-objs"):
            writer.using(self.toolchain.native_base_config(configuration.platform))
            writer.property(".CompilerInputPath", "=", quote(str(project.root_folder)))
            writer.property(
                ".CompilerOutputPath",
                "=",
                quote(resolve_path(project, configuration.intermediate_folder)),
            )
            writer.concatenation(
                ".CompilerOptions", "+", self._compiler_options(configuration)
            )

    def _write_linked_target(
        self,
        writer: BffWriter,
        project: Project,
        configuration: NativeConfiguration,
        required: list[Project],
    ) -> None:
        shared = project.kind == ProjectKind.NATIVE_SHARED_LIBRARY
        linker_options = self._linker_options(configuration)
        if shared:
            linker_options.append(quote(" " + self.toolchain.dll_flag))
            linker_options.append(
                quote(
                    " "
                    + path_option(
                        self.toolchain.import_library_prefix,
                        self.import_library_path(project, configuration),
                    )
                )
            )
            output = self.toolchain.get_shared_library_name(project.name)
        else:
            output = self.toolchain.get_program_name(project.name)

        target = project.target_name(configuration)
        with writer.function("DLL" if shared else "Executable", target):
            writer.using(self.toolchain.native_base_config(configuration.platform))
            writer.property(".Libraries", "=", string_list([f"{target}-objs"]))
            writer.concatenation(".LinkerOptions", "+", linker_options)
            writer.property(
                ".LinkerOutput", "=", quote(self.output_path(project, configuration, output))
            )
            self.write_pre_build_dependencies(writer, configuration, required)

    def _write_library(
        self,
        writer: BffWriter,
        project: Project,
        configuration: NativeConfiguration,
        required: list[Project],
    ) -> None:
        with writer.function("Library", project.target_name(configuration)):
            writer.using(self.toolchain.native_base_config(configuration.platform))
            writer.property(".CompilerInputPath", "=", quote(str(project.root_folder)))
            writer.property(
                ".CompilerInputPattern", "=", string_list(self.toolchain.source_patterns)
            )
            writer.property(
                ".CompilerOutputPath",
                "=",
                quote(resolve_path(project, configuration.intermediate_folder)),
            )
            writer.concatenation(
                ".CompilerOptions", "+", self._compiler_options(configuration)
            )
            writer.property(
                ".LibrarianOutput",
                "=",
                quote(self.import_library_path(project, configuration)),
            )
            writer.concatenation(".LinkerOptions", "+", self._linker_options(configuration))
            self.write_pre_build_dependencies(writer, configuration, required)
