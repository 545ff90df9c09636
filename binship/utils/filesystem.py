# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers shared by packaging and version propagation.

Manifest writes are atomic: content goes to a temp file in the target's own
directory and is then renamed over the target. Rename within one filesystem
is atomic, so a crash mid-write leaves either the old manifest or the new
one, never half of each. That matters here because a truncated package.json
would make the next consistency check report nonsense.
"""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

TEMP_PREFIX = ".binship_tmp_"

# rwxr-xr-x
EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    Args:
        target_path: Where the final file should end up.
        content: The string content to write.
        encoding: Text encoding to use.

    Raises:
        OSError: If the write or rename fails. The target is left untouched.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=TEMP_PREFIX,
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        os.replace(temp_path, target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def write_json(path: Path, data: Any) -> None:
    """Write a JSON document with 2-space indentation and a trailing newline."""
    atomic_write(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def read_json(path: Path) -> Any:
    """Read and parse a JSON file. Errors propagate to the caller."""
    return json.loads(path.read_text(encoding="utf-8"))


def make_executable(path: Path) -> None:
    """Set 0755 on a file."""
    os.chmod(path, EXECUTABLE_MODE)


def is_executable(path: Path) -> bool:
    """Whether the owner execute bit is set."""
    return bool(path.stat().st_mode & stat.S_IXUSR)
