"""Small filesystem helpers shared by the cache store and the workspace registry."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path


def atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename.

    Readers never see a partially-written file.  The temp file is created in
    the same directory so ``os.replace`` stays on one filesystem.  Missing
    parent directories are created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise


def remove_file(path: Path) -> bool:
    """Remove a file.  Returns ``False`` if it did not exist."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
