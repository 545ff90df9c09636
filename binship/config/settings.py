# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Settings: a ReleaseConfig bound to a concrete project directory.

The config file only holds relative paths. Everything downstream works with
absolute ones, so the binding happens once here and the pipeline modules
never look at the current working directory themselves.
"""

from dataclasses import dataclass
from pathlib import Path

from binship.config.schema import ReleaseConfig


@dataclass(frozen=True)
class Settings:
    """Resolved, absolute view of the project layout."""

    config: ReleaseConfig
    project_dir: Path

    @classmethod
    def for_project(cls, project_dir: Path, config: ReleaseConfig | None = None) -> "Settings":
        if config is None:
            config = ReleaseConfig(config_version="1.0.0")
        return cls(config=config, project_dir=project_dir.resolve())

    @property
    def bin_dir(self) -> Path:
        return self.project_dir / self.config.bin_dir

    @property
    def packages_dir(self) -> Path:
        return self.project_dir / self.config.packages_dir

    @property
    def primary_manifest_path(self) -> Path:
        return self.project_dir / self.config.primary_manifest

    @property
    def entry_file(self) -> str:
        return self.config.entry_file

    @property
    def log_file(self) -> Path | None:
        if self.config.log_file is None:
            return None
        return self.project_dir / self.config.log_file
