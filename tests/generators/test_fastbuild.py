# SPDX-License-Identifier: MIT
"""Tests for bffgen.generators.fastbuild."""

import pytest

from bffgen.configure.config import GeneratorConfig, ProjectSettings
from bffgen.core.errors import DependencyCycleError, DuplicateTargetError
from bffgen.core.solution import (
    ManagedConfiguration,
    NativeConfiguration,
    Project,
    ProjectFamily,
    ProjectKind,
    Solution,
)
from bffgen.generators.fastbuild import FastbuildGenerator
from bffgen.generators.generator import Generator
from bffgen.generators.managed import ManagedProjectGenerator
from bffgen.generators.native import NativeProjectGenerator


def add_project(solution, name, kind=ProjectKind.NATIVE_STATIC_LIBRARY, variants=("Debug",)):
    root = solution.root_folder / name
    root.mkdir(parents=True, exist_ok=True)
    project = solution.add_project(
        Project(name, kind, root, root_folder_relative=name)
    )
    for variant in variants:
        if kind.family is ProjectFamily.MANAGED:
            project.add_configuration(ManagedConfiguration(variant, "x64"))
        else:
            project.add_configuration(NativeConfiguration(variant, "x64"))
    return project


def chain_solution(tmp_path):
    """A requires B requires C."""
    solution = Solution("sln", tmp_path)
    a = add_project(solution, "A", ProjectKind.NATIVE_EXECUTABLE)
    b = add_project(solution, "B")
    c = add_project(solution, "C")
    a.requires(b)
    b.requires(c)
    return solution


def includes(text):
    return [
        line.split('"')[1] for line in text.splitlines() if line.startswith("#include")
    ]


def umbrella_targets(text):
    alias = text[text.index("Alias('All')") :]
    line = next(line for line in alias.splitlines() if ".Targets" in line)
    items = line.split("{")[1].split("}")[0].split(",")
    return [item.strip().strip("'") for item in items if item.strip()]


class TestFastbuildGenerator:
    def test_is_generator(self):
        generator = FastbuildGenerator()
        assert isinstance(generator, Generator)
        assert generator.name == "fastbuild"

    def test_package_exports(self):
        import bffgen.generators as generators

        assert "FastbuildGenerator" in generators.__all__
        assert "Generator" not in generators.__all__

    def test_project_generator_by_family(self, tmp_path):
        generator = FastbuildGenerator()
        native = Project("n", ProjectKind.NATIVE_SHARED_LIBRARY, tmp_path)
        managed = Project("m", ProjectKind.MANAGED_GUI_EXECUTABLE, tmp_path)
        assert isinstance(generator.project_generator(native), NativeProjectGenerator)
        assert isinstance(generator.project_generator(managed), ManagedProjectGenerator)

    def test_project_settings_passed_through(self, tmp_path):
        config = GeneratorConfig(projects={"n": ProjectSettings(extra_defines=["X"])})
        project = Project("n", ProjectKind.NATIVE_EXECUTABLE, tmp_path)
        generator = FastbuildGenerator(config).project_generator(project)
        assert generator.settings.extra_defines == ["X"]


class TestSolutionDescriptor:
    def test_includes_in_build_order(self, tmp_path):
        """Test that every project is included after what it requires."""
        result = FastbuildGenerator().generate(chain_solution(tmp_path))

        text = result.solution_file.read_text()
        assert includes(text) == ["C/C.bff", "B/B.bff", "A/A.bff"]
        assert result.build_order == ["C", "B", "A"]

    def test_solution_file_location(self, tmp_path):
        result = FastbuildGenerator().generate(chain_solution(tmp_path))
        assert result.solution_file == tmp_path / "sln.bff"
        assert result.project_files == [
            tmp_path / "C" / "C.bff",
            tmp_path / "B" / "B.bff",
            tmp_path / "A" / "A.bff",
        ]

    def test_umbrella_alias(self, tmp_path):
        result = FastbuildGenerator().generate(chain_solution(tmp_path))
        text = result.solution_file.read_text()
        assert umbrella_targets(text) == ["A", "B", "C"]

    def test_toolchain_before_includes(self, tmp_path):
        config = GeneratorConfig(toolchain={"VSBasePath": "D:\\VS10"})
        result = FastbuildGenerator(config).generate(chain_solution(tmp_path))
        text = result.solution_file.read_text()

        assert "'D:\\VS10'" in text
        assert text.index("Compiler('Compiler-x64')") < text.index("#include")

    def test_pre_build_dependencies_follow_requires(self, tmp_path):
        FastbuildGenerator().generate(chain_solution(tmp_path))
        a_text = (tmp_path / "A" / "A.bff").read_text()
        c_text = (tmp_path / "C" / "C.bff").read_text()

        assert "= { 'B-x64-Debug' }" in a_text
        assert ".PreBuildDependencies" not in c_text

    def test_mixed_families(self, tmp_path):
        solution = Solution("sln", tmp_path)
        add_project(solution, "core")
        tools = add_project(solution, "tools", ProjectKind.MANAGED_LIBRARY)
        tools.requires(solution.get_project("core"))

        FastbuildGenerator().generate(solution)

        assert "Library('core-x64-Debug')" in (tmp_path / "core" / "core.bff").read_text()
        tools_text = (tmp_path / "tools" / "tools.bff").read_text()
        assert "CSAssembly('tools-x64-Debug')" in tools_text
        assert "= { 'core-x64-Debug' }" in tools_text

    def test_only_lf_line_endings(self, tmp_path):
        result = FastbuildGenerator().generate(chain_solution(tmp_path))
        for path in [result.solution_file, *result.project_files]:
            assert b"\r\n" not in path.read_bytes()

    def test_idempotent(self, tmp_path):
        """Test that generating twice gives byte-identical files."""
        solution = chain_solution(tmp_path)
        first = FastbuildGenerator().generate(solution)
        before = {p: p.read_bytes() for p in [first.solution_file, *first.project_files]}

        second = FastbuildGenerator().generate(solution)
        after = {p: p.read_bytes() for p in [second.solution_file, *second.project_files]}
        assert before == after


class TestProjectSelection:
    def test_ignored_project(self, tmp_path):
        """Test that an ignored project and its edges are left out."""
        solution = chain_solution(tmp_path)
        config = GeneratorConfig(ignore_projects=["B"])

        result = FastbuildGenerator(config).generate(solution)

        text = result.solution_file.read_text()
        assert includes(text) == ["A/A.bff", "C/C.bff"]
        assert umbrella_targets(text) == ["A", "C"]
        assert result.skipped == ["B"]
        assert not (tmp_path / "B" / "B.bff").exists()
        assert "B-x64-Debug" not in (tmp_path / "A" / "A.bff").read_text()

    def test_invalid_project_skipped(self, tmp_path):
        solution = chain_solution(tmp_path)
        other = tmp_path / "other"
        other.mkdir()
        solution.add_project(Project("other", ProjectKind.INVALID, other))

        result = FastbuildGenerator().generate(solution)

        assert result.skipped == ["other"]
        assert "other" not in umbrella_targets(result.solution_file.read_text())
        assert not (other / "other.bff").exists()

    def test_failed_project_omitted(self, tmp_path, caplog):
        """Test that a broken project does not stop the others."""
        solution = chain_solution(tmp_path)
        broken = add_project(solution, "broken")
        broken.error = "could not parse broken.vcxproj"

        result = FastbuildGenerator().generate(solution)

        assert result.failed == {"broken": "could not parse broken.vcxproj"}
        assert "broken" not in umbrella_targets(result.solution_file.read_text())
        assert not (tmp_path / "broken" / "broken.bff").exists()
        assert result.build_order == ["C", "B", "A"]
        assert "could not parse broken.vcxproj" in caplog.text

    def test_duplicate_target(self, tmp_path):
        solution = Solution("sln", tmp_path)
        first = solution.add_project(
            Project("a", ProjectKind.NATIVE_STATIC_LIBRARY, tmp_path)
        )
        first.add_configuration(NativeConfiguration("Debug", "x64-x86"))
        second = solution.add_project(
            Project("a-x64", ProjectKind.NATIVE_STATIC_LIBRARY, tmp_path)
        )
        second.add_configuration(NativeConfiguration("Debug", "x86"))

        with pytest.raises(DuplicateTargetError) as exc_info:
            FastbuildGenerator().generate(solution)
        assert exc_info.value.target_name == "a-x64-x86-Debug"
        assert not (tmp_path / "sln.bff").exists()

    def test_cycle_aborts(self, tmp_path):
        solution = chain_solution(tmp_path)
        solution.get_project("C").requires(solution.get_project("A"))

        with pytest.raises(DependencyCycleError):
            FastbuildGenerator().generate(solution)
        assert not (tmp_path / "sln.bff").exists()
        assert not (tmp_path / "A" / "A.bff").exists()

    def test_configurations_appended_directly(self, tmp_path):
        """Test targets of configurations added through the list."""
        solution = Solution("sln", tmp_path)
        for name in ("P", "Q"):
            root = tmp_path / name
            root.mkdir()
            project = solution.add_project(
                Project(name, ProjectKind.NATIVE_STATIC_LIBRARY, root)
            )
            project.configurations.append(NativeConfiguration("Debug", "x64"))

        FastbuildGenerator().generate(solution)

        text = (tmp_path / "P" / "P.bff").read_text()
        assert "Library('P-x64-Debug')" in text
        assert "= { 'P-x64-Debug' }" in text
        assert "'-x64-Debug'" not in text

    def test_variable_prefix_collision_fails_project(self, tmp_path):
        """Test that a project whose variables would collide is left out."""
        solution = chain_solution(tmp_path)
        clash = add_project(solution, "clash", variants=())
        clash.configurations.append(
            NativeConfiguration("Debug", "x-64", include_paths=["a"])
        )
        clash.configurations.append(
            NativeConfiguration("Debug", "x_64", include_paths=["b"])
        )

        result = FastbuildGenerator().generate(solution)

        assert "clash" in result.failed
        assert not (tmp_path / "clash" / "clash.bff").exists()
        assert umbrella_targets(result.solution_file.read_text()) == ["A", "B", "C"]
