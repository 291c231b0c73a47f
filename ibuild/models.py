from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping


class BuildSystem(str, Enum):
    MAKE = "make"
    CMAKE = "cmake"
    XCODE = "xcode"
    CUSTOM = "custom"


@dataclass(frozen=True)
class CustomCommands:
    configure: str | None = None
    make: str | None = None
    install: str | None = None
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BuildConfiguration:
    build_system: BuildSystem
    location: str | None = None
    args: tuple[str, ...] | None = None
    # platform -> architecture -> args
    arch_args: Mapping[str, Mapping[str, tuple[str, ...]]] | None = None
    install_command: str | None = None
    outputs: tuple[str, ...] | None = None
    # (path relative to the package root, destination name)
    auxiliary_files: tuple[tuple[str, str], ...] | None = None
    custom: CustomCommands | None = None

    def arch_specific_args(self, platform_name: str, architecture: str) -> list[str]:
        if not self.arch_args:
            return []
        return list(self.arch_args.get(platform_name, {}).get(architecture, ()))

    def generic_args(self) -> list[str]:
        return list(self.args or ())


@dataclass(frozen=True)
class Package:
    name: str
    build: BuildConfiguration | None = None


@dataclass(frozen=True)
class SourceMap:
    """Remote source locations that have been checked out locally."""

    locations: Mapping[str, str] = field(default_factory=dict)
    root: str = "."

    def resolve(self, location: str) -> str | None:
        path = self.locations.get(location)
        if path is None:
            return None
        return os.path.normpath(os.path.join(self.root, path))
