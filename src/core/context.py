"""
Invocation context — the directory the user ran the installer from.

Set ONCE at startup by the CLI; read by anything that resolves
caller-relative paths (the local o-voxel source, the settings file).

    - CLI:    main.py  → context.set_work_dir(Path.cwd())
    - Tests:  set_work_dir(tmp_path) or pass work_dir explicitly

get_work_dir() falls back to the current directory when unset.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


_work_dir: Optional[Path] = None


def set_work_dir(root: Path) -> None:
    """Register the invocation directory for the current process."""
    global _work_dir
    _work_dir = root


def get_work_dir() -> Path:
    """Return the invocation directory (cwd when never set)."""
    return _work_dir if _work_dir is not None else Path.cwd()
