# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Manifest I/O for the primary package and the platform packages.

The primary manifest is the single source of truth for the version. It is
modelled as one explicitly passed object rather than module state: the
publish flow loads it once, threads it through version bump, propagation,
packaging and the consistency check, and saves it when propagation is done.

Only two fields of the primary manifest matter to the pipeline, `version` and
`optionalDependencies`. Everything else in the document (scripts, bin,
keywords, ...) is carried through untouched and written back in its original
key order.
"""

import json
import logging
from pathlib import Path
from typing import Any

from binship.errors import ManifestError
from binship.logging.logger import get_logger
from binship.utils.filesystem import read_json, write_json

_logger: logging.Logger = get_logger(__name__)

MANIFEST_FILE = "package.json"


def _load_object(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")
    try:
        data = read_json(path)
    except json.JSONDecodeError as err:
        raise ManifestError(f"Manifest is not valid JSON: {path}: {err}") from err
    except OSError as err:
        raise ManifestError(f"Cannot read manifest {path}: {err}") from err
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest must be a JSON object: {path}")
    return data


def constraint_for(version: str) -> str:
    """The optional-dependency constraint every platform package must carry."""
    return f"^{version}"


class PrimaryManifest:
    """In-memory view of the primary package.json."""

    def __init__(self, path: Path, data: dict[str, Any]) -> None:
        self.path = path
        self._data = data

    @classmethod
    def load(cls, path: Path) -> "PrimaryManifest":
        """
        Read the primary manifest.

        Raises:
            ManifestError: Missing file, invalid JSON, non-object document,
                or a missing/non-string version field.
        """
        data = _load_object(path)
        if not isinstance(data.get("version"), str):
            raise ManifestError(f"Primary manifest has no string 'version' field: {path}")
        deps = data.get("optionalDependencies", {})
        if not isinstance(deps, dict):
            raise ManifestError(f"'optionalDependencies' must be an object in {path}")
        return cls(path, data)

    @property
    def name(self) -> str:
        return str(self._data.get("name", ""))

    @property
    def version(self) -> str:
        return str(self._data["version"])

    @property
    def optional_dependencies(self) -> dict[str, str]:
        """A copy; mutate through set_version."""
        return dict(self._data.get("optionalDependencies", {}))

    def set_version(self, version: str) -> None:
        """Set version and rewrite every optional-dependency constraint to ^version."""
        self._data["version"] = version
        deps = self._data.get("optionalDependencies")
        if deps:
            for dep in deps:
                deps[dep] = constraint_for(version)

    def save(self) -> None:
        write_json(self.path, self._data)
        _logger.info("Primary manifest written", extra={"path": str(self.path), "version": self.version})


def read_platform_manifest(package_dir: Path) -> dict[str, Any]:
    """
    Read <package_dir>/package.json.

    Raises:
        ManifestError: If it is missing or malformed.
    """
    return _load_object(package_dir / MANIFEST_FILE)


def write_platform_manifest(package_dir: Path, manifest: dict[str, Any]) -> Path:
    path = package_dir / MANIFEST_FILE
    write_json(path, manifest)
    _logger.debug("Platform manifest written", extra={"path": str(path), "version": manifest.get("version")})
    return path
