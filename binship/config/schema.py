# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schema for binship.

One frozen pydantic model describes everything a release run needs to know
about the project: what the binary is called, where its source entry point
lives, how packages are named, where build output goes, and which external
programs (toolchain and registry client) to drive.

The model uses pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

Every field except config_version has a default, so a project that follows
the conventional layout needs nothing more than `config_version: "1.0.0"`.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_PLAIN_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


class ReleaseConfig(BaseModel):
    """Project-level settings for building, packaging and publishing."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    binary_name: str = Field(
        default="go-deploy",
        description="Executable name without platform suffix",
    )
    entry_file: str = Field(
        default="main.go",
        description="Source entry point handed to the toolchain, relative to project root",
    )
    package_scope: str = Field(
        default="@winner-fed/go-deploy",
        description="Prefix of every platform package name: <scope>-<platform>-<cpu>",
    )
    description: str = Field(
        default="go-deploy binary",
        description="Description prefix written into platform manifests",
    )
    repository_url: str = Field(
        default="git+https://github.com/cklwblove/go-deploy.git",
        description="Repository URL written into platform manifests",
    )
    license: str = Field(default="MIT", description="SPDX license identifier")
    bin_dir: str = Field(
        default="bin",
        description="Intermediate build output directory, relative to project root",
    )
    packages_dir: str = Field(
        default="packages",
        description="Platform package directory, relative to project root",
    )
    primary_manifest: str = Field(
        default="package.json",
        description="Primary package manifest, relative to project root",
    )
    toolchain: str = Field(default="go", description="Compiler executable")
    registry_client: str = Field(default="npm", description="Registry client executable")
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output, relative to project root",
    )

    @field_validator("binary_name")
    @classmethod
    def _binary_name_is_plain(cls, value: str) -> str:
        if not _PLAIN_NAME.match(value):
            raise ValueError(f"binary_name must be a plain file name, got {value!r}")
        return value

    @field_validator("log_level")
    @classmethod
    def _log_level_is_known(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}, got {value!r}"
            )
        return upper
