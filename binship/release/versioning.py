# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Version arithmetic and the publish plan.

Versions are strict major.minor.patch, digits only. No pre-release or build
metadata: every platform package has to carry exactly the primary version,
and the optional-dependency constraint is ^<version>, so anything fancier
would just be a way to get the two out of step.
"""

import re
from dataclasses import dataclass

from binship.errors import InvalidVersionError

VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")

BUMP_CLASSES: tuple[str, ...] = ("patch", "minor", "major")

DEFAULT_TAG = "latest"


def is_valid_version(version: str) -> bool:
    return bool(VERSION_PATTERN.fullmatch(version))


def parse_version(version: str) -> tuple[int, int, int]:
    """Split 'x.y.z' into three non-negative ints."""
    if not is_valid_version(version):
        raise InvalidVersionError(f"Invalid version '{version}', expected major.minor.patch")
    major, minor, patch = (int(part) for part in version.split("."))
    return major, minor, patch


def compute_version(bump_or_explicit: str, current: str) -> str:
    """
    Work out the next version.

    Args:
        bump_or_explicit: 'patch', 'minor', 'major', or an explicit x.y.z.
        current: The primary manifest's current version.

    Returns:
        The new version string.

    Raises:
        InvalidVersionError: Malformed explicit version, unknown bump class,
            or a current version that cannot be bumped.
    """
    if bump_or_explicit in BUMP_CLASSES:
        major, minor, patch = parse_version(current)
        if bump_or_explicit == "major":
            return f"{major + 1}.0.0"
        if bump_or_explicit == "minor":
            return f"{major}.{minor + 1}.0"
        return f"{major}.{minor}.{patch + 1}"

    if is_valid_version(bump_or_explicit):
        return bump_or_explicit

    raise InvalidVersionError(
        f"Invalid version or bump class '{bump_or_explicit}'. "
        f"Use one of {', '.join(BUMP_CLASSES)} or an explicit major.minor.patch."
    )


@dataclass(frozen=True)
class PublishPlan:
    """Everything one publish invocation was asked to do."""

    version: str
    dry_run: bool = False
    tag: str = DEFAULT_TAG
    skip_build: bool = False


def make_plan(
    version_arg: str,
    current_version: str,
    dry_run: bool = False,
    tag: str = DEFAULT_TAG,
    skip_build: bool = False,
) -> PublishPlan:
    """Resolve the version argument against the current version into a PublishPlan."""
    return PublishPlan(
        version=compute_version(version_arg, current_version),
        dry_run=dry_run,
        tag=tag,
        skip_build=skip_build,
    )
