"""Whole-file reads and atomic writes.

Files are read and written with newline translation disabled, so line
endings survive a rewrite unchanged.
"""

from __future__ import annotations

import os
import tempfile
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


def read_text(path: Path) -> str:
    """Read a whole file as UTF-8 without translating line endings."""
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def atomic_write_text(path: Path, content: str) -> None:
    """Write ``content`` to ``path`` through a temporary file and ``os.replace``.

    The temporary file lives in the destination directory so the final
    replace stays on one filesystem. Readers never observe a partially
    written destination.

    Args:
        path: Destination file
        content: Full new content
    """
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        else:
            umask = os.umask(0)
            os.umask(umask)
            os.chmod(tmp_name, 0o666 & ~umask)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
