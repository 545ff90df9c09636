# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Target catalog: the fixed set of OS/CPU pairs we build and package for.

Two vocabularies meet here. The toolchain names targets the Go way
(darwin/linux/windows, amd64/arm64); the package registry selects packages
by Node's process.platform/process.arch names (darwin/linux/win32, x64/arm64).
The lookup tables translate the former into the latter. They are total over
TARGETS, and an unknown name is a configuration error, never a guess.

The catalog is a closed, immutable table. The toolchain's supported pairs
are the real constraint, so there is nothing to discover at runtime.
"""

import platform as _platform
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from binship.errors import UnknownTargetError

OS_MAP: Mapping[str, str] = MappingProxyType(
    {
        "darwin": "darwin",
        "linux": "linux",
        "windows": "win32",
    }
)

ARCH_MAP: Mapping[str, str] = MappingProxyType(
    {
        "amd64": "x64",
        "arm64": "arm64",
    }
)


def map_os(name: str) -> str:
    """Translate a toolchain OS name into the registry's platform identifier."""
    try:
        return OS_MAP[name]
    except KeyError:
        raise UnknownTargetError(
            f"No registry platform mapping for OS '{name}'. "
            f"Known: {', '.join(sorted(OS_MAP))}"
        ) from None


def map_arch(name: str) -> str:
    """Translate a toolchain architecture name into the registry's cpu identifier."""
    try:
        return ARCH_MAP[name]
    except KeyError:
        raise UnknownTargetError(
            f"No registry cpu mapping for architecture '{name}'. "
            f"Known: {', '.join(sorted(ARCH_MAP))}"
        ) from None


@dataclass(frozen=True)
class Target:
    """One build/package unit: toolchain OS, toolchain arch, executable suffix."""

    os: str
    arch: str
    suffix: str = ""

    @property
    def platform(self) -> str:
        return map_os(self.os)

    @property
    def cpu(self) -> str:
        return map_arch(self.arch)

    @property
    def slug(self) -> str:
        """Registry-facing identifier, e.g. 'win32-x64'. Used for directory names."""
        return f"{self.platform}-{self.cpu}"

    @property
    def is_windows(self) -> bool:
        return self.platform == "win32"


TARGETS: tuple[Target, ...] = (
    Target("darwin", "amd64"),
    Target("darwin", "arm64"),
    Target("linux", "amd64"),
    Target("linux", "arm64"),
    Target("windows", "amd64", ".exe"),
)


def list_targets() -> tuple[Target, ...]:
    """Return the catalog in its fixed build and publish order."""
    return TARGETS


def is_platform_slug(name: str) -> bool:
    """
    Whether a directory name looks like '<platform>-<cpu>' in registry terms.

    This is checked against the mapping vocabularies rather than TARGETS, so a
    directory left behind by a target that has since been dropped from the
    catalog still counts as platform-scoped output.
    """
    platform_name, sep, cpu = name.partition("-")
    if not sep:
        return False
    return platform_name in OS_MAP.values() and cpu in ARCH_MAP.values()


# platform.system() / platform.machine() spellings seen in the wild.
_HOST_OS_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "darwin": "darwin",
        "linux": "linux",
        "windows": "windows",
    }
)

_HOST_ARCH_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "x86_64": "amd64",
        "amd64": "amd64",
        "x64": "amd64",
        "arm64": "arm64",
        "aarch64": "arm64",
    }
)


def host_target(system: Optional[str] = None, machine: Optional[str] = None) -> Target:
    """
    Find the catalog target a consumer on this host would install.

    Args:
        system: Override for platform.system() (mostly for tests).
        machine: Override for platform.machine().

    Raises:
        UnknownTargetError: If the host is not one of the supported targets.
    """
    system = (system if system is not None else _platform.system()).lower()
    machine = (machine if machine is not None else _platform.machine()).lower()

    goos = _HOST_OS_ALIASES.get(system)
    goarch = _HOST_ARCH_ALIASES.get(machine)
    for target in TARGETS:
        if target.os == goos and target.arch == goarch:
            return target

    raise UnknownTargetError(f"Unsupported host platform: {system}-{machine}")
