#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Solution script for a small game.

Four projects, one of each common kind:
- core:   static library used by everything
- engine: DLL that links core
- game:   executable that links engine
- tools:  C# editor library that references the engine build

Run with:
    bffgen generate examples/game_solution/solution.py
"""

from pathlib import Path

from bffgen import (
    CharacterSet,
    ManagedConfiguration,
    NativeConfiguration,
    Project,
    ProjectKind,
    ReferenceInfo,
    Solution,
)

root = Path(__file__).parent.absolute()

VARIANTS = ["Debug", "Release"]
PLATFORMS = ["x86", "x64"]

solution = Solution("game", root_folder=root)


def native(name: str, kind: ProjectKind) -> Project:
    project = solution.add_project(
        Project(name, kind, root / name, root_folder_relative=name)
    )
    for variant in VARIANTS:
        for platform in PLATFORMS:
            defines = ["WIN32"] + (["_DEBUG"] if variant == "Debug" else ["NDEBUG"])
            project.add_configuration(
                NativeConfiguration(
                    variant,
                    platform,
                    output_folder=f"../bin/{platform}/{variant}",
                    intermediate_folder=f"obj/{platform}/{variant}",
                    include_paths=["./include", "../core/include"],
                    library_paths=[f"../bin/{platform}/{variant}"],
                    preprocessor_definitions=defines,
                    compiler_flags=["/nologo", "/EHsc"]
                    + (["/Od", "/Zi"] if variant == "Debug" else ["/O2"]),
                    linker_flags=["/nologo"],
                    character_set=CharacterSet.UNICODE,
                )
            )
    return project


core = native("core", ProjectKind.NATIVE_STATIC_LIBRARY)
engine = native("engine", ProjectKind.NATIVE_SHARED_LIBRARY)
game = native("game", ProjectKind.NATIVE_EXECUTABLE)

for configuration in engine.configurations:
    configuration.library_names = ["core", "user32", "$(ExtraLibs)"]
for configuration in game.configurations:
    configuration.library_names = ["engine", "user32"]

engine.requires(core)
game.requires(engine)

tools = solution.add_project(
    Project(
        "tools",
        ProjectKind.MANAGED_LIBRARY,
        root / "tools",
        root_folder_relative="tools",
        files=["Editor.cs", "Properties/AssemblyInfo.cs"],
    )
)
for variant in VARIANTS:
    for platform in PLATFORMS:
        tools.add_configuration(
            ManagedConfiguration(
                variant,
                platform,
                output_folder=f"../bin/{platform}/{variant}",
                optimize=variant == "Release",
                defined_constants=["TRACE"] + (["DEBUG"] if variant == "Debug" else []),
                debug=variant == "Debug",
                debug_info="full" if variant == "Debug" else "pdbonly",
                warnings_to_ignore=["1591"],
                references=[
                    ReferenceInfo("System", r"C:\Windows\Microsoft.NET\System.dll"),
                ],
            )
        )
tools.requires(engine)
