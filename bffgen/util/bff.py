# SPDX-License-Identifier: MIT
"""Low-level helpers for writing FASTBuild (.bff) text.

FASTBuild strings are single-quoted and use ``^`` as the escape
character. Literal values (paths, flags, names) go through escape() so
that ``'``, ``$`` and ``^`` never act as delimiters or variable
references. Toolchain text that deliberately references ``$Var$`` is
written with the raw helpers.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import TextIO

# Width of the property-name column inside function bodies.
PROPERTY_WIDTH = 22


def escape(value: str) -> str:
    """Escape a literal for use inside a single-quoted FASTBuild string."""
    return value.replace("^", "^^").replace("'", "^'").replace("$", "^$")


def quote(value: str) -> str:
    """Return value as a quoted FASTBuild string literal."""
    return f"'{escape(value)}'"


def string_list(values: Iterable[str]) -> str:
    """Render a FASTBuild array of string literals.

    An empty input renders as ``{ }`` so the array is still present.
    """
    items = [quote(v) for v in values]
    if not items:
        return "{ }"
    return "{ " + ", ".join(items) + " }"


def option_string(options: Iterable[str]) -> str:
    """Join command-line options into one string literal.

    The literal starts with a space so several option variables can be
    concatenated with ``+``. An empty input renders as ``' '``.
    """
    return quote(" " + " ".join(options))


def path_option(prefix: str, path: str) -> str:
    """A single option taking a double-quoted path, e.g. /I"C:\\inc"."""
    return f'{prefix}"{path}"'


class BffWriter:
    """Line-oriented writer for .bff files.

    Example:
        writer = BffWriter(f)
        writer.comment("Include paths...")
        writer.variable("Debug_x64_Include_Path", option_string(["/I\\"inc\\""]))
        with writer.function("Alias", "app"):
            writer.property(".Targets", "=", string_list(["app-x64-Debug"]))
    """

    def __init__(self, f: TextIO, indent: str = "  ") -> None:
        self._f = f
        self._indent_unit = indent
        self._depth = 0

    def line(self, text: str = "") -> None:
        if text:
            self._f.write(self._indent_unit * self._depth + text + "\n")
        else:
            self._f.write("\n")

    def blank(self) -> None:
        self.line()

    def comment(self, text: str) -> None:
        self.line(f"// {text}")

    def variable(self, name: str, value: str) -> None:
        """Write a top-level assignment ``.name = value``.

        ``value`` must already be rendered (quoted string, array, or a
        reference to another variable).
        """
        self.line(f".{name} = {value}")

    def property(self, name: str, op: str, value: str) -> None:
        """Write an aligned property line inside a function body."""
        self.line(f"{name:<{PROPERTY_WIDTH}}{op} {value}")

    def concatenation(self, name: str, op: str, values: list[str]) -> None:
        """Write ``name op v1`` followed by ``+ v2`` lines aligned under it."""
        if not values:
            return
        self.property(name, op, values[0])
        for value in values[1:]:
            self.property("", "+", value)

    def using(self, struct_name: str) -> None:
        self.line(f"Using( .{struct_name} )")

    def include(self, path: str) -> None:
        self.line(f'#include "{path}"')

    @contextmanager
    def scope(self) -> Iterator[None]:
        """Write an anonymous ``{ ... }`` scope."""
        self.line("{")
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self.line("}")

    @contextmanager
    def function(self, function: str, name: str | None = None) -> Iterator[None]:
        """Write a FASTBuild function call such as ``Executable('app')``."""
        if name is None:
            self.line(function)
        else:
            self.line(f"{function}({quote(name)})")
        with self.scope():
            yield
        self.blank()

    @contextmanager
    def struct(self, name: str) -> Iterator[None]:
        """Write a struct assignment ``.name = [ ... ]``."""
        self.line(f".{name} =")
        self.line("[")
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
            self.line("]")
            self.blank()
