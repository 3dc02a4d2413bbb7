# SPDX-License-Identifier: MIT
"""MSVC / C# compiler toolchain for FASTBuild descriptors.

The toolchain is static configuration data: base install paths, the
FASTBuild ``Settings`` environment, one ``Compiler`` declaration per
platform and the base structs (``x64BaseConfig``, ``csx64BaseConfig``...)
that every per-project target pulls in with ``Using()``. It also holds
the option vocabulary the project generators use to render variables.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from bffgen.util.bff import quote

if TYPE_CHECKING:
    from bffgen.util.bff import BffWriter

logger = logging.getLogger(__name__)

# Visual Studio 2010 layout.
DEFAULT_BASE_PATHS: dict[str, str] = {
    "VSBasePath": r"C:\Program Files (x86)\Microsoft Visual Studio 10.0",
    "CSBasePath": r"C:\Windows\Microsoft.NET",
    "WindowsSDKBasePath": r"C:\Program Files (x86)\Microsoft SDKs\Windows\v7.0A",
}

_REDIST = r"$VSBasePath$\VC\redist\{arch}\Microsoft.VC100.{pkg}\{dll}"
_REDIST_DLLS = [
    ("CRT", "msvcp100.dll"),
    ("CRT", "msvcr100.dll"),
    ("MFC", "mfc100.dll"),
    ("MFC", "mfc100u.dll"),
    ("MFC", "mfcm100.dll"),
    ("MFC", "mfcm100u.dll"),
]

# platform -> (compiler root, files the compiler loads besides cl.exe)
_COMPILERS: dict[str, tuple[str, list[str]]] = {
    "x86": (
        r"$VSBasePath$\VC\bin",
        [
            r"$Root$\c1.dll",
            r"$Root$\c1ast.dll",
            r"$Root$\c1xx.dll",
            r"$Root$\c1xxast.dll",
            r"$Root$\c2.dll",
            r"$Root$\mspft80.dll",
            r"$Root$\pgodb100.dll",
            r"$Root$\pgort100.dll",
            r"$Root$\1033\clui.dll",
        ]
        + [_REDIST.format(arch="x86", pkg=pkg, dll=dll) for pkg, dll in _REDIST_DLLS],
    ),
    "x64": (
        r"$VSBasePath$\VC\bin\amd64",
        [
            r"$Root$\c1.dll",
            r"$Root$\c1xx.dll",
            r"$Root$\c2.dll",
            r"$Root$\pgodb100.dll",
            r"$Root$\pgort100.dll",
            r"$Root$\mspdb100.dll",
            r"$Root$\msobj100.dll",
            r"$Root$\mspdbcore.dll",
            r"$Root$\1033\clui.dll",
            r"$VSBasePath$\Common7\IDE\mspdbsrv.exe",
        ]
        + [_REDIST.format(arch="x64", pkg=pkg, dll=dll) for pkg, dll in _REDIST_DLLS],
    ),
}

# platform -> (tools folder, extra linker library paths)
_NATIVE_PLATFORMS: dict[str, tuple[str, list[str]]] = {
    "x86": (
        r"$VSBasePath$\VC\bin",
        [
            r"$VSBasePath$\VC\lib",
            r"$VSBasePath$\VC\atlmfc\lib",
            r"$WindowsSDKBasePath$\Lib",
        ],
    ),
    "x64": (
        r"$VSBasePath$\VC\bin\amd64",
        [
            r"$VSBasePath$\VC\lib\amd64",
            r"$VSBasePath$\VC\lib",
            r"$VSBasePath$\VC\atlmfc\lib\amd64",
            r"$WindowsSDKBasePath$\Lib\x64",
        ],
    ),
}

# platform -> csc.exe location
_MANAGED_PLATFORMS: dict[str, str] = {
    "x86": r"$CSBasePath$\Framework\v4.0.30319\csc.exe",
    "x64": r"$CSBasePath$\Framework64\v4.0.30319\csc.exe",
}


class MsvcToolchain:
    """Microsoft Visual C++ and C# toolchain description.

    Attributes:
        base_paths: Values of the base path variables, defaults overridden
            by the generator configuration.
    """

    # Option vocabulary
    include_prefix = "/I"
    define_prefix = "/D"
    library_path_prefix = "/LIBPATH:"
    dll_flag = "/DLL"
    import_library_prefix = "/IMPLIB:"
    unicode_define = "UNICODE"
    source_patterns = ("*.c", "*.cc", "*.cpp")
    # Library names containing this token still reference an unexpanded
    # IDE macro.
    placeholder_token = "$"

    def __init__(self, base_paths: dict[str, str] | None = None) -> None:
        self.base_paths = dict(DEFAULT_BASE_PATHS)
        if base_paths:
            unknown = set(base_paths) - set(DEFAULT_BASE_PATHS)
            for name in sorted(unknown):
                logger.warning("Ignoring unknown toolchain variable '%s'", name)
            self.base_paths.update(
                {k: v for k, v in base_paths.items() if k in DEFAULT_BASE_PATHS}
            )

    @property
    def platforms(self) -> list[str]:
        return list(_NATIVE_PLATFORMS)

    def get_static_library_name(self, name: str) -> str:
        return f"{name}.lib"

    def get_shared_library_name(self, name: str) -> str:
        return f"{name}.dll"

    def get_program_name(self, name: str) -> str:
        return f"{name}.exe"

    def native_base_config(self, platform: str) -> str:
        """Name of the struct a native target of this platform uses."""
        return f"{platform}BaseConfig"

    def managed_base_config(self, platform: str) -> str:
        return f"cs{platform}BaseConfig"

    def write_settings(self, writer: BffWriter) -> None:
        """Write the shared environment, compilers and base configs."""
        width = max(len(name) for name in self.base_paths)
        for name, value in self.base_paths.items():
            writer.line(f".{name:<{width}} = {quote(value)}")
        writer.blank()

        with writer.function("Settings"):
            writer.line(".Environment = {")
            writer.line(
                r"   'PATH=$VSBasePath$\Common7\IDE;$VSBasePath$\VC\bin;"
                r"$VSBasePath$\VC\bin\amd64\'"
            )
            writer.line(r"   'TMP=C:\Windows\Temp'")
            writer.line(r"   'SystemRoot=C:\Windows'")
            writer.line("}")

        self._write_managed_configs(writer)
        self._write_compilers(writer)
        self._write_native_configs(writer)

    def _write_managed_configs(self, writer: BffWriter) -> None:
        writer.comment("CSharp Compiler")
        with writer.struct("MSCSBaseConfig"):
            writer.line(".CompilerOptions = ' /out:\"%2\"'")
            writer.line("                 + ' /reference:\"%3\"'")
        for platform, compiler in _MANAGED_PLATFORMS.items():
            with writer.struct(self.managed_base_config(platform)):
                writer.using("MSCSBaseConfig")
                writer.line(f".Compiler = '{compiler}'")

    def _write_compilers(self, writer: BffWriter) -> None:
        writer.comment("Compilers")
        for platform, (root, extra_files) in _COMPILERS.items():
            with writer.function("Compiler", f"Compiler-{platform}"):
                writer.line(f".Root       = '{root}'")
                writer.line(r".Executable = '$Root$\cl.exe'")
                writer.line(f".ExtraFiles = {{ '{extra_files[0]}'")
                for extra in extra_files[1:]:
                    writer.line(f"                '{extra}'")
                writer.line("              }")

    def _write_native_configs(self, writer: BffWriter) -> None:
        writer.comment("Configurations")
        with writer.struct("MSVCBaseConfig"):
            writer.line(".CompilerOptions  = '\"%1\"'")
            writer.line("                  + ' /Fo\"%2\"'")
            writer.line("                  + ' /I\"$VSBasePath$/VC/include\"'")
            writer.line("                  + ' /I\"$VSBasePath$/VC/atlmfc/include\"'")
            writer.line("                  + ' /I\"$WindowsSDKBasePath$/Include\"'")
            writer.blank()
            writer.line(".LinkerOptions    = ' /OUT:\"%2\"'")
            writer.line("                  + ' \"%1\"'")
            writer.blank()
            writer.line(".LibrarianOptions = '\"%1\"'")
            writer.line("                  + ' /OUT:\"%2\"'")
            writer.line("                  + ' /nologo'")

        for platform, (tools, library_paths) in _NATIVE_PLATFORMS.items():
            with writer.struct(self.native_base_config(platform)):
                writer.using("MSVCBaseConfig")
                writer.line(f".ToolsBasePath   = '{tools}'")
                writer.line(f".Compiler        = 'Compiler-{platform}'")
                writer.line(r".Librarian       = '$ToolsBasePath$\lib.exe'")
                writer.line(r".Linker          = '$ToolsBasePath$\link.exe'")
                first, *rest = library_paths
                writer.line(f".LinkerOptions   + ' {self.library_path_prefix}\"{first}\"'")
                for path in rest:
                    writer.line(
                        f"                 + ' {self.library_path_prefix}\"{path}\"'"
                    )
