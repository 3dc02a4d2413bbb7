# SPDX-License-Identifier: MIT
"""Command-line interface for bffgen.

A solution script is a Python file that builds a bffgen Solution and
assigns it to a module-level variable named ``solution``:

    from pathlib import Path
    from bffgen import NativeConfiguration, Project, ProjectKind, Solution

    solution = Solution("game", root_folder=Path(__file__).parent)
    ...
"""

from __future__ import annotations

import argparse
import logging
import runpy
import sys
from pathlib import Path

from bffgen.configure.config import GeneratorConfig
from bffgen.core.errors import BffgenError
from bffgen.core.graph import resolve_build_order
from bffgen.core.solution import ProjectKind, Solution
from bffgen.generators.fastbuild import FastbuildGenerator

# Set up logging
logger = logging.getLogger("bffgen")

DEFAULT_SCRIPT = "solution.py"
DEFAULT_CONFIG = "bffgen.json"


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Configure logging based on verbosity level."""
    if debug:
        level = logging.DEBUG
        fmt = "%(levelname)s: %(name)s: %(message)s"
    elif verbose:
        level = logging.INFO
        fmt = "%(levelname)s: %(message)s"
    else:
        level = logging.WARNING
        fmt = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=fmt)


def find_script(name: str, search_dir: Path | None = None) -> Path | None:
    """Find a solution script by name.

    Args:
        name: Script name (e.g., 'solution.py')
        search_dir: Directory to search in (default: current dir)

    Returns:
        Path to script if found, None otherwise.
    """
    if search_dir is None:
        search_dir = Path.cwd()

    script_path = search_dir / name
    if script_path.exists() and script_path.is_file():
        return script_path

    return None


def parse_variables(args: list[str]) -> tuple[dict[str, str], list[str]]:
    """Parse KEY=value arguments from a list.

    Args:
        args: List of arguments.

    Returns:
        Tuple of (variables dict, remaining args).
    """
    variables: dict[str, str] = {}
    remaining: list[str] = []

    for arg in args:
        if "=" in arg and not arg.startswith("-"):
            key, _, value = arg.partition("=")
            if key:  # Valid KEY=value
                variables[key] = value
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)

    return variables, remaining


def load_solution(script_path: Path) -> Solution:
    """Run a solution script and return the Solution it defines.

    Raises:
        BffgenError: If the script cannot be run or defines no solution.
    """
    logger.info("Running %s", script_path)
    try:
        namespace = runpy.run_path(str(script_path), run_name="__bffgen__")
    except Exception as e:
        raise BffgenError(f"cannot run solution script {script_path}: {e}") from e

    solution = namespace.get("solution")
    if not isinstance(solution, Solution):
        raise BffgenError(
            f"{script_path} does not define a Solution named 'solution'"
        )
    return solution


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Load the generator configuration named on the command line.

    Without --config, bffgen.json next to the script is used if present.
    """
    config_path = getattr(args, "config", None)
    if config_path:
        return GeneratorConfig.load(config_path)

    default = Path(args.script).parent / DEFAULT_CONFIG
    if default.is_file():
        return GeneratorConfig.load(default)
    return GeneratorConfig()


def _resolve_script(args: argparse.Namespace) -> Path | None:
    script_path = getattr(args, "script", None)
    if script_path:
        script = Path(script_path)
        if not script.exists():
            logger.error("Solution script not found: %s", script_path)
            return None
        return script

    found_script = find_script(DEFAULT_SCRIPT)
    if found_script is None:
        logger.error("No %s found in current directory", DEFAULT_SCRIPT)
    return found_script


def cmd_generate(args: argparse.Namespace) -> int:
    """Write all descriptors for the solution.

    This command:
    1. Runs the solution script to build the solution model
    2. Loads the generator configuration (ignore list, overrides)
    3. Writes each project's .bff and the solution .bff
    """
    setup_logging(args.verbose, args.debug)

    # 'bffgen generate KEY=value' with no script
    if args.script and "=" in args.script and not Path(args.script).exists():
        args.extra = [args.script, *args.extra]
        args.script = None

    script = _resolve_script(args)
    if script is None:
        return 1
    args.script = str(script)

    variables, remaining = parse_variables(getattr(args, "extra", []))
    if remaining:
        logger.error("Unexpected arguments: %s", " ".join(remaining))
        return 1

    try:
        solution = load_solution(script)
        config = load_config(args)
        config.toolchain.update(variables)
        config.ignore_projects.extend(getattr(args, "ignore", None) or [])

        result = FastbuildGenerator(config).generate(solution)
    except BffgenError as e:
        logger.error("%s", e)
        return 1

    for name, reason in result.failed.items():
        print(f"Skipped {name}: {reason}")
    print(f"Generated {result.solution_file}")
    return 0


def cmd_order(args: argparse.Namespace) -> int:
    """Print the projects in build order."""
    setup_logging(args.verbose, args.debug)

    script = _resolve_script(args)
    if script is None:
        return 1
    args.script = str(script)

    try:
        solution = load_solution(script)
        generator = FastbuildGenerator(load_config(args))
        active, _, _ = generator.select_projects(solution)
        active_names = {project.name for project in active}
        ordered = resolve_build_order(
            solution.projects, lambda project: project.name in active_names
        )
    except BffgenError as e:
        logger.error("%s", e)
        return 1

    for project in ordered:
        print(project.name)
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    """Show the projects, kinds and targets of the solution."""
    setup_logging(args.verbose, args.debug)

    script = _resolve_script(args)
    if script is None:
        return 1

    try:
        solution = load_solution(script)
    except BffgenError as e:
        logger.error("%s", e)
        return 1

    print(f"Solution: {solution.name} ({solution.root_folder})")
    for project in solution.projects:
        print()
        print(f"  {project.name} [{project.kind.value}]")
        if project.kind == ProjectKind.INVALID:
            continue
        required = ", ".join(p.name for p in project.required_projects)
        if required:
            print(f"    requires: {required}")
        for configuration in project.configurations:
            print(f"    {project.target_name(configuration)}")

    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "script",
        nargs="?",
        help=f"Solution script (default: {DEFAULT_SCRIPT})",
    )


def add_config_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help=f"Generator configuration (default: {DEFAULT_CONFIG} next to the script)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the bffgen CLI."""
    parser = argparse.ArgumentParser(
        prog="bffgen",
        description="Generate FASTBuild descriptors for a multi-project solution.",
        epilog="Run 'bffgen <command> --help' for command-specific help.",
    )
    from bffgen import __version__

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # bffgen generate
    gen_parser = subparsers.add_parser(
        "generate", help="Write project and solution .bff files"
    )
    add_common_args(gen_parser)
    add_config_args(gen_parser)
    gen_parser.add_argument(
        "-i",
        "--ignore",
        action="append",
        metavar="PROJECT",
        help="Ignore a project (may be repeated)",
    )
    gen_parser.add_argument(
        "extra",
        nargs="*",
        help="Toolchain variables (e.g. VSBasePath=D:\\VS10)",
    )
    gen_parser.set_defaults(func=cmd_generate)

    # bffgen order
    order_parser = subparsers.add_parser("order", help="Print the project build order")
    add_common_args(order_parser)
    add_config_args(order_parser)
    order_parser.set_defaults(func=cmd_order)

    # bffgen info
    info_parser = subparsers.add_parser("info", help="Show solution projects and targets")
    add_common_args(info_parser)
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Run the specified command
    result: int = args.func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
