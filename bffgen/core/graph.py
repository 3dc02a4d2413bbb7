# SPDX-License-Identifier: MIT
"""Project dependency graph and build-order resolution.

A DependencyGraph maps each project name to a GraphNode that records the
projects it requires and a priority score. The priority of a project is
the number of distinct dependency chains that lead into it, so a project
required (directly or transitively) by many others has a high priority.

build_order() is a topological sort (Kahn's algorithm). Whenever several
projects are ready at the same time, the one with the higher priority
is emitted first, and ties keep the input order. Every project therefore
appears after all the projects it requires, and the output is
deterministic for a given input.

Cycles (including a project requiring itself) are reported as a
DependencyCycleError naming the projects involved.
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from bffgen.core.errors import DependencyCycleError

if TYPE_CHECKING:
    from bffgen.core.solution import Project

logger = logging.getLogger(__name__)


@dataclass
class GraphNode:
    """Bookkeeping for one project in the graph.

    Attributes:
        name: Project name.
        index: Insertion order, used to break priority ties.
        dependencies: Names of the projects this one requires.
        priority: Number of dependency chains leading into this project.
    """

    name: str
    index: int
    dependencies: list[str] = field(default_factory=list)
    priority: int = 0


class DependencyGraph:
    """Directed graph of require-edges between projects.

    Example:
        graph = DependencyGraph()
        for name in ("app", "engine", "core"):
            graph.add_project(name)
        graph.add_dependency("app", "engine")
        graph.add_dependency("engine", "core")

        graph.build_order()  # ['core', 'engine', 'app']
    """

    def __init__(self) -> None:
        self._nodes: dict[str, GraphNode] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> list[GraphNode]:
        return list(self._nodes.values())

    def add_project(self, name: str) -> GraphNode:
        """Add a project with no dependencies.

        Raises:
            ValueError: If the project is already in the graph.
        """
        if name in self._nodes:
            raise ValueError(f"Project '{name}' is already in the dependency graph")
        node = GraphNode(name, index=len(self._nodes))
        self._nodes[name] = node
        return node

    def add_dependency(self, name: str, dependency: str) -> None:
        """Record that project ``name`` requires project ``dependency``.

        Raises:
            KeyError: If either project is not in the graph.
        """
        node = self._nodes[name]
        if dependency not in self._nodes:
            raise KeyError(dependency)
        if dependency not in node.dependencies:
            node.dependencies.append(dependency)

    def dependencies(self, name: str) -> list[str]:
        return list(self._nodes[name].dependencies)

    def dependents(self) -> dict[str, list[str]]:
        """Reverse adjacency: for each project, the projects requiring it."""
        result: dict[str, list[str]] = {name: [] for name in self._nodes}
        for node in self._nodes.values():
            for dep in node.dependencies:
                result[dep].append(node.name)
        return result

    def find_cycle(self) -> list[str] | None:
        """Find one dependency cycle.

        Uses an iterative depth-first search with a visiting set, so deep
        graphs do not hit the recursion limit.

        Returns:
            The cycle as a list of names whose first and last entries are
            the same project, or None if the graph is acyclic.
        """
        done: set[str] = set()
        for start in self._nodes:
            if start in done:
                continue
            path: list[str] = [start]
            on_path: set[str] = {start}
            stack = [iter(self._nodes[start].dependencies)]
            while stack:
                dep = next(stack[-1], None)
                if dep is None:
                    stack.pop()
                    finished = path.pop()
                    on_path.discard(finished)
                    done.add(finished)
                    continue
                if dep in on_path:
                    return path[path.index(dep) :] + [dep]
                if dep in done:
                    continue
                path.append(dep)
                on_path.add(dep)
                stack.append(iter(self._nodes[dep].dependencies))
        return None

    def check_acyclic(self) -> None:
        """Raise DependencyCycleError if the graph has a cycle."""
        cycle = self.find_cycle()
        if cycle is not None:
            raise DependencyCycleError(cycle)

    def compute_priorities(self) -> dict[str, int]:
        """Compute and store the priority of every project.

        A require-edge A -> B adds one to B and to every project reachable
        from B, once per path. The counts are accumulated in dependents-first
        order, so each edge is visited once.

        Returns:
            Mapping of project name to priority.

        Raises:
            DependencyCycleError: If the graph has a cycle.
        """
        order = self._topological_names(lambda name: self._nodes[name].index)
        # Reverse of the build order visits every dependent before its
        # dependencies.
        chains: dict[str, int] = {name: 0 for name in self._nodes}
        for name in reversed(order):
            for dep in self._nodes[name].dependencies:
                chains[dep] += 1 + chains[name]

        for name, priority in chains.items():
            self._nodes[name].priority = priority
        return chains

    def build_order(self) -> list[str]:
        """Return project names so that dependencies come first.

        Raises:
            DependencyCycleError: If the graph has a cycle.
        """
        self.compute_priorities()
        order = self._topological_names(
            lambda name: (-self._nodes[name].priority, self._nodes[name].index)
        )
        logger.debug("Build order: %s", ", ".join(order))
        return order

    def _topological_names(self, sort_key: Callable[[str], object]) -> list[str]:
        self.check_acyclic()

        dependents = self.dependents()
        remaining = {name: len(node.dependencies) for name, node in self._nodes.items()}
        ready: list[tuple[object, str]] = [
            (sort_key(name), name) for name, count in remaining.items() if count == 0
        ]
        heapq.heapify(ready)

        order: list[str] = []
        while ready:
            _, name = heapq.heappop(ready)
            order.append(name)
            for dependent in dependents[name]:
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, (sort_key(dependent), dependent))

        if len(order) != len(self._nodes):
            # check_acyclic() already ran, so this means the graph changed.
            raise DependencyCycleError(
                [name for name in self._nodes if name not in order]
            )
        return order


def build_dependency_graph(
    projects: Iterable[Project],
    is_active: Callable[[Project], bool],
) -> DependencyGraph:
    """Build a graph from the active projects of a solution.

    Inactive projects (invalid, ignored or failed) are not added, and
    require-edges to or from them are dropped rather than rewired.
    """
    active = [project for project in projects if is_active(project)]

    graph = DependencyGraph()
    for project in active:
        graph.add_project(project.name)

    for project in active:
        for required in project.required_projects:
            if required.name not in graph:
                logger.debug(
                    "Dropping dependency %s -> %s (inactive project)",
                    project.name,
                    required.name,
                )
                continue
            graph.add_dependency(project.name, required.name)

    return graph


def resolve_build_order(
    projects: Iterable[Project],
    is_active: Callable[[Project], bool],
) -> list[Project]:
    """Order the active projects so each one follows everything it requires.

    Args:
        projects: Projects in solution order.
        is_active: Predicate selecting the projects that take part.

    Returns:
        The active projects in build order.

    Raises:
        DependencyCycleError: If the active projects have a cycle.
    """
    projects = list(projects)
    graph = build_dependency_graph(projects, is_active)
    by_name = {project.name: project for project in projects if project.name in graph}
    return [by_name[name] for name in graph.build_order()]
