# SPDX-License-Identifier: MIT
"""Tests for bffgen CLI."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from bffgen import __version__
from bffgen.cli import find_script, load_solution, main, parse_variables, setup_logging
from bffgen.core.errors import BffgenError

SCRIPT = '''\
from pathlib import Path

from bffgen import NativeConfiguration, Project, ProjectKind, Solution

root = Path(__file__).parent
solution = Solution("demo", root_folder=root)

for name, kind in [
    ("app", ProjectKind.NATIVE_EXECUTABLE),
    ("lib", ProjectKind.NATIVE_STATIC_LIBRARY),
]:
    folder = root / name
    folder.mkdir(exist_ok=True)
    project = solution.add_project(
        Project(name, kind, folder, root_folder_relative=name)
    )
    project.add_configuration(NativeConfiguration("Debug", "x64"))

solution.get_project("app").requires(solution.get_project("lib"))
'''


def write_script(tmp_path: Path, text: str = SCRIPT) -> Path:
    script = tmp_path / "solution.py"
    script.write_text(text)
    return script


class TestFindScript:
    """Tests for find_script function."""

    def test_find_existing_script(self, tmp_path: Path) -> None:
        """Test finding an existing script."""
        script = write_script(tmp_path)
        assert find_script("solution.py", tmp_path) == script

    def test_script_not_found(self, tmp_path: Path) -> None:
        assert find_script("solution.py", tmp_path) is None

    def test_find_script_ignores_directories(self, tmp_path: Path) -> None:
        """Test that find_script ignores directories with same name."""
        (tmp_path / "solution.py").mkdir()
        assert find_script("solution.py", tmp_path) is None


class TestParseVariables:
    def test_splits_variables(self) -> None:
        variables, remaining = parse_variables(
            ["VSBasePath=D:\\VS10", "extra", "--flag=x", "=oops"]
        )
        assert variables == {"VSBasePath": "D:\\VS10"}
        assert remaining == ["extra", "--flag=x", "=oops"]

    def test_value_may_contain_equals(self) -> None:
        variables, _ = parse_variables(["KEY=a=b"])
        assert variables == {"KEY": "a=b"}


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_levels(self) -> None:
        # Just ensure it doesn't crash
        setup_logging(verbose=False, debug=False)
        setup_logging(verbose=True, debug=False)
        setup_logging(verbose=False, debug=True)


class TestLoadSolution:
    def test_loads_solution(self, tmp_path: Path) -> None:
        solution = load_solution(write_script(tmp_path))
        assert solution.name == "demo"
        assert [p.name for p in solution.projects] == ["app", "lib"]

    def test_script_raises(self, tmp_path: Path) -> None:
        script = write_script(tmp_path, "raise RuntimeError('boom')\n")
        with pytest.raises(BffgenError, match="boom"):
            load_solution(script)

    def test_script_without_solution(self, tmp_path: Path) -> None:
        script = write_script(tmp_path, "solution = 42\n")
        with pytest.raises(BffgenError, match="does not define a Solution"):
            load_solution(script)

    def test_syntax_error(self, tmp_path: Path) -> None:
        script = write_script(tmp_path, "def (:\n")
        with pytest.raises(BffgenError, match="cannot run solution script"):
            load_solution(script)


class TestMain:
    """Tests for main() called in-process."""

    def test_no_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 1
        assert "generate" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert f"bffgen {__version__}" in capsys.readouterr().out

    def test_generate(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        script = write_script(tmp_path)

        assert main(["generate", str(script)]) == 0

        assert (tmp_path / "demo.bff").exists()
        assert (tmp_path / "app" / "app.bff").exists()
        assert (tmp_path / "lib" / "lib.bff").exists()
        assert f"Generated {tmp_path / 'demo.bff'}" in capsys.readouterr().out

    def test_generate_with_toolchain_variable(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)

        assert main(["generate", str(script), "VSBasePath=D:\\VS10"]) == 0
        assert "'D:\\VS10'" in (tmp_path / "demo.bff").read_text()

    def test_generate_with_ignore(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)

        assert main(["generate", str(script), "--ignore", "lib"]) == 0
        assert not (tmp_path / "lib" / "lib.bff").exists()
        assert '#include "lib/lib.bff"' not in (tmp_path / "demo.bff").read_text()

    def test_config_next_to_script(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)
        (tmp_path / "bffgen.json").write_text(json.dumps({"ignore_projects": ["lib"]}))

        assert main(["generate", str(script)]) == 0
        assert not (tmp_path / "lib" / "lib.bff").exists()

    def test_explicit_config(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)
        config = tmp_path / "other.json"
        config.write_text(
            json.dumps({"projects": {"app": {"extra_defines": ["FROM_CONFIG"]}}})
        )

        assert main(["generate", str(script), "-c", str(config)]) == 0
        assert "/DFROM_CONFIG" in (tmp_path / "app" / "app.bff").read_text()

    def test_bad_config(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)
        (tmp_path / "bffgen.json").write_text("{broken")
        assert main(["generate", str(script)]) == 1

    def test_failing_script(self, tmp_path: Path) -> None:
        """Test that an exception in the script becomes exit code 1."""
        script = write_script(tmp_path, "raise RuntimeError('boom')\n")
        assert main(["generate", str(script)]) == 1
        assert main(["order", str(script)]) == 1
        assert main(["info", str(script)]) == 1

    def test_duplicate_project_in_script(self, tmp_path: Path) -> None:
        script = write_script(
            tmp_path,
            SCRIPT
            + "solution.add_project(Project('app', ProjectKind.NATIVE_EXECUTABLE, root))\n",
        )
        assert main(["generate", str(script)]) == 1
        assert not (tmp_path / "demo.bff").exists()

    def test_missing_script(self, tmp_path: Path) -> None:
        assert main(["generate", str(tmp_path / "nope.py")]) == 1

    def test_unexpected_argument(self, tmp_path: Path) -> None:
        script = write_script(tmp_path)
        assert main(["generate", str(script), "stray"]) == 1

    def test_cycle_fails(self, tmp_path: Path) -> None:
        script = write_script(
            tmp_path,
            SCRIPT + 'solution.get_project("lib").requires(solution.get_project("app"))\n',
        )
        assert main(["generate", str(script)]) == 1
        assert not (tmp_path / "demo.bff").exists()

    def test_failed_project_reported(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        script = write_script(
            tmp_path, SCRIPT + 'solution.get_project("lib").error = "unreadable"\n'
        )
        assert main(["generate", str(script)]) == 0
        assert "Skipped lib: unreadable" in capsys.readouterr().out

    def test_order(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        script = write_script(tmp_path)
        assert main(["order", str(script)]) == 0
        assert capsys.readouterr().out.split() == ["lib", "app"]

    def test_info(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        script = write_script(tmp_path)
        assert main(["info", str(script)]) == 0

        out = capsys.readouterr().out
        assert "Solution: demo" in out
        assert "requires: lib" in out
        assert "app-x64-Debug" in out


class TestCLICommands:
    """Tests for the CLI run as a module."""

    def test_bffgen_help(self) -> None:
        """Test bffgen --help."""
        result = subprocess.run(
            [sys.executable, "-m", "bffgen.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "bffgen" in result.stdout
        assert "generate" in result.stdout
        assert "order" in result.stdout
        assert "info" in result.stdout

    def test_bffgen_generate_no_script(self, tmp_path: Path) -> None:
        """Test generate without a solution.py in the current directory."""
        result = subprocess.run(
            [sys.executable, "-m", "bffgen.cli", "generate"],
            cwd=tmp_path,
            capture_output=True,
            text=True,
        )
        assert result.returncode == 1
        assert "No solution.py found" in result.stderr

    def test_bffgen_generate_default_script(self, tmp_path: Path) -> None:
        write_script(tmp_path)
        result = subprocess.run(
            [sys.executable, "-m", "bffgen.cli", "generate"],
            cwd=tmp_path,
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert (tmp_path / "demo.bff").exists()
