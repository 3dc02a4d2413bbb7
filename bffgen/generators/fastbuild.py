# SPDX-License-Identifier: MIT
"""FASTBuild generator for a whole solution.

Writes one descriptor per project into the project's folder and a
solution descriptor ``<solution-name>.bff`` at the solution root. The
solution descriptor sets up the toolchain, includes every project
descriptor in build order (each project after the projects it
requires) and declares an ``All`` alias over every project.

Projects take part in generation unless they are of invalid kind, on the
ignore list, or fail validation. Failed projects are reported and left
out; dependency cycles, duplicate target names and write errors abort
the whole pass.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from bffgen.configure.config import GeneratorConfig
from bffgen.core.errors import DuplicateTargetError, GenerateError, ProjectModelError
from bffgen.core.graph import resolve_build_order
from bffgen.core.solution import ProjectFamily, ProjectKind
from bffgen.generators.generator import BaseGenerator, ProjectGenerator
from bffgen.generators.managed import ManagedProjectGenerator
from bffgen.generators.native import NativeProjectGenerator
from bffgen.toolchains.msvc import MsvcToolchain
from bffgen.util.bff import BffWriter, string_list

if TYPE_CHECKING:
    from bffgen.core.solution import Project, Solution

logger = logging.getLogger(__name__)

UMBRELLA_TARGET = "All"

PROJECT_GENERATORS: dict[ProjectFamily, type[ProjectGenerator]] = {
    ProjectFamily.NATIVE: NativeProjectGenerator,
    ProjectFamily.MANAGED: ManagedProjectGenerator,
}


@dataclass
class GenerationResult:
    """What a generation pass produced.

    Attributes:
        solution_file: The solution descriptor.
        project_files: Project descriptors, in build order.
        build_order: Names of the generated projects, in build order.
        skipped: Names of invalid or ignored projects.
        failed: Project name -> reason, for projects that failed validation.
    """

    solution_file: Path
    project_files: list[Path] = field(default_factory=list)
    build_order: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class FastbuildGenerator(BaseGenerator):
    """Generator that produces FASTBuild .bff descriptors.

    Example:
        generator = FastbuildGenerator(GeneratorConfig.load("bffgen.json"))
        result = generator.generate(solution)
        print(f"Generated {result.solution_file}")
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        toolchain: MsvcToolchain | None = None,
    ) -> None:
        super().__init__("fastbuild")
        self.config = config or GeneratorConfig()
        self.toolchain = toolchain or MsvcToolchain(self.config.toolchain)

    # =========================================================================
    # Project selection
    # =========================================================================

    def is_candidate(self, project: Project) -> bool:
        """True unless the project is invalid or ignored."""
        return project.kind != ProjectKind.INVALID and not self.config.is_ignored(
            project.name
        )

    def select_projects(
        self, solution: Solution
    ) -> tuple[list[Project], list[str], dict[str, str]]:
        """Split the solution's projects into active, skipped and failed.

        Returns:
            Tuple of (active projects in solution order, skipped names,
            failed name -> reason).

        Raises:
            DuplicateTargetError: If two active configurations share a
                target identifier.
        """
        active: list[Project] = []
        skipped: list[str] = []
        failed: dict[str, str] = {}

        for project in solution.projects:
            if not self.is_candidate(project):
                logger.debug("Skipping project %s", project.name)
                skipped.append(project.name)
                continue
            try:
                project.validate()
            except ProjectModelError as e:
                logger.error("Project %s failed: %s", project.name, e.message)
                failed[project.name] = e.message
                continue
            active.append(project)

        self._check_unique_targets(active)
        return active, skipped, failed

    def _check_unique_targets(self, projects: list[Project]) -> None:
        owners: dict[str, str] = {}
        for project in projects:
            for name in project.target_names:
                if name in owners:
                    raise DuplicateTargetError(name, [owners[name], project.name])
                owners[name] = project.name

    # =========================================================================
    # Generation
    # =========================================================================

    def project_generator(self, project: Project) -> ProjectGenerator:
        """Create the generator for a project's family."""
        family = project.kind.family
        if family is None:
            raise GenerateError("project has no generator family", project.name)
        generator_class = PROJECT_GENERATORS[family]
        return generator_class(
            self.toolchain, self.config.get_project_settings(project.name)
        )

    def generate(self, solution: Solution) -> GenerationResult:
        """Write every project descriptor and the solution descriptor.

        Raises:
            DependencyCycleError: If active projects require each other.
            DuplicateTargetError: If target identifiers collide.
            GenerateError: If a file cannot be written.
        """
        active, skipped, failed = self.select_projects(solution)
        active_names = {project.name for project in active}
        ordered = resolve_build_order(
            solution.projects, lambda project: project.name in active_names
        )

        result = GenerationResult(
            solution_file=solution.descriptor_path,
            build_order=[project.name for project in ordered],
            skipped=skipped,
            failed=failed,
        )

        for project in ordered:
            required = [p for p in project.required_projects if p.name in active_names]
            generator = self.project_generator(project)
            result.project_files.append(generator.generate(project, required))

        path = solution.descriptor_path
        logger.info("Writing %s", path)
        try:
            with open(path, "w", newline="\n") as f:
                self.write_solution(BffWriter(f), ordered, active)
        except OSError as e:
            raise GenerateError(f"cannot write {path}: {e}") from e

        logger.info(
            "Generated %d project descriptor(s) for solution %s",
            len(result.project_files),
            solution.name,
        )
        return result

    def write_solution(
        self,
        writer: BffWriter,
        ordered: list[Project],
        active: list[Project],
    ) -> None:
        """Write the solution descriptor text.

        Args:
            writer: Destination.
            ordered: Active projects in build order (for the includes).
            active: Active projects in solution order (for the alias).
        """
        self.toolchain.write_settings(writer)

        for project in ordered:
            writer.include(project.include_path)
        writer.blank()

        writer.comment("Builds all the projects in the solution...")
        with writer.function("Alias", UMBRELLA_TARGET):
            writer.property(".Targets", "=", string_list(p.name for p in active))
