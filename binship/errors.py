# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exception hierarchy for the release pipeline.

Everything the pipeline raises on purpose derives from BinshipError, so the CLI
can catch one base class and map it onto an exit code. The subclasses follow
the failure categories the pipeline distinguishes:

  - configuration errors (unknown target, bad version, unreadable manifest)
    are raised before anything on disk is touched
  - toolchain errors mean at least one cross-compilation failed
  - filesystem errors during packaging
  - publish errors abort the rest of the publish sequence

Consistency divergences are not exceptions. They are data, returned by
binship.release.consistency.check_consistency.
"""

from typing import Sequence


class BinshipError(Exception):
    """Base for all pipeline errors."""


class UnknownTargetError(BinshipError):
    """Raised when an OS or architecture name has no registry mapping."""


class InvalidVersionError(BinshipError):
    """Raised for a malformed explicit version or an unknown bump class."""


class ManifestError(BinshipError):
    """Raised when a manifest is missing, unreadable, or not a JSON object."""


class ProcessSpawnError(BinshipError):
    """Raised when a child process could not be started at all."""


class ToolchainError(BinshipError):
    """
    Raised when one or more target builds failed.

    failed_targets holds the slugs of every target that did not produce a
    binary, in catalog order, so the operator sees the full picture rather
    than just the first failure.
    """

    def __init__(self, message: str, failed_targets: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.failed_targets: tuple[str, ...] = tuple(failed_targets)


class SourceBinaryNotFoundError(BinshipError, FileNotFoundError):
    """Raised when synthesis is asked to package a binary that is not on disk."""


class PublishError(BinshipError):
    """
    Raised when a publish step fails.

    unit is the package that failed; published lists the units that were
    already pushed to the registry before the failure. Those are never
    retracted.
    """

    def __init__(
        self,
        message: str,
        unit: str,
        published: Sequence[str] = (),
    ) -> None:
        super().__init__(message)
        self.unit = unit
        self.published: tuple[str, ...] = tuple(published)
