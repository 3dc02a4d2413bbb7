# SPDX-License-Identifier: MIT
"""Configuration policy for descriptor generation.

The GeneratorConfig decides which projects are ignored, carries
per-project overrides and the toolchain base paths written into the
solution descriptor. It is stored as JSON:

    {
      "ignore_projects": ["Tests"],
      "toolchain": {"VSBasePath": "D:\\VS10"},
      "projects": {
        "engine": {
          "extra_compiler_flags": ["/W4"],
          "extra_defines": ["ENGINE_EXPORTS"],
          "remove_libraries": ["legacy"]
        }
      }
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from bffgen.core.errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass
class ProjectSettings:
    """Per-project overrides applied on top of every configuration.

    Attributes:
        extra_compiler_flags: Appended to each configuration's compiler flags.
        extra_linker_flags: Appended to each configuration's linker flags.
        extra_defines: Appended to each configuration's preprocessor defines.
        remove_libraries: Raw library names dropped from the library list.
    """

    extra_compiler_flags: list[str] = field(default_factory=list)
    extra_linker_flags: list[str] = field(default_factory=list)
    extra_defines: list[str] = field(default_factory=list)
    remove_libraries: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, name: str, data: Any) -> ProjectSettings:
        if not isinstance(data, dict):
            raise ConfigError(f"settings for project '{name}' must be an object")
        unknown = set(data) - {
            "extra_compiler_flags",
            "extra_linker_flags",
            "extra_defines",
            "remove_libraries",
        }
        if unknown:
            raise ConfigError(
                f"unknown settings for project '{name}': {', '.join(sorted(unknown))}"
            )
        values: dict[str, list[str]] = {}
        for key, value in data.items():
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"'{key}' for project '{name}' must be a list of strings")
            values[key] = list(value)
        return cls(**values)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "extra_compiler_flags": list(self.extra_compiler_flags),
            "extra_linker_flags": list(self.extra_linker_flags),
            "extra_defines": list(self.extra_defines),
            "remove_libraries": list(self.remove_libraries),
        }


class GeneratorConfig:
    """Ignore list, toolchain paths and per-project settings.

    Example:
        config = GeneratorConfig.load(Path("bffgen.json"))
        if not config.is_ignored("Tests"):
            settings = config.get_project_settings("engine")

    Attributes:
        ignore_projects: Names of projects left out of generation.
        toolchain: Overrides for the toolchain base path variables.
    """

    def __init__(
        self,
        *,
        ignore_projects: list[str] | None = None,
        toolchain: dict[str, str] | None = None,
        projects: dict[str, ProjectSettings] | None = None,
    ) -> None:
        self.ignore_projects: list[str] = list(ignore_projects or [])
        self.toolchain: dict[str, str] = dict(toolchain or {})
        self._projects: dict[str, ProjectSettings] = dict(projects or {})

    @classmethod
    def load(cls, path: Path | str) -> GeneratorConfig:
        """Load a configuration from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or is malformed.
        """
        path = Path(path)
        try:
            with open(path) as f:
                data = json.load(f)
        except OSError as e:
            raise ConfigError(f"cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in config file {path}: {e}") from e

        logger.info("Loaded configuration from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> GeneratorConfig:
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")

        ignore = data.get("ignore_projects", [])
        if not isinstance(ignore, list) or not all(isinstance(n, str) for n in ignore):
            raise ConfigError("'ignore_projects' must be a list of project names")

        toolchain = data.get("toolchain", {})
        if not isinstance(toolchain, dict) or not all(
            isinstance(v, str) for v in toolchain.values()
        ):
            raise ConfigError("'toolchain' must map variable names to strings")

        projects = data.get("projects", {})
        if not isinstance(projects, dict):
            raise ConfigError("'projects' must map project names to settings")

        return cls(
            ignore_projects=ignore,
            toolchain=toolchain,
            projects={
                name: ProjectSettings.from_dict(name, settings)
                for name, settings in projects.items()
            },
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ignore_projects": list(self.ignore_projects),
            "toolchain": dict(self.toolchain),
            "projects": {
                name: settings.to_dict() for name, settings in self._projects.items()
            },
        }

    def save(self, path: Path | str) -> None:
        """Write the configuration as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, sort_keys=True)
            f.write("\n")

    def is_ignored(self, project_name: str) -> bool:
        return project_name in self.ignore_projects

    def get_project_settings(self, project_name: str) -> ProjectSettings:
        """Settings for a project; empty settings if none are configured."""
        return self._projects.get(project_name) or ProjectSettings()

    def set_project_settings(self, project_name: str, settings: ProjectSettings) -> None:
        self._projects[project_name] = settings
