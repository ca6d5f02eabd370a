"""
L3 Detection — Import probes against the target interpreter.

"Installed" means "imports cleanly in the environment being
provisioned". Every probe spawns a fresh interpreter, so nothing is
cached between probes and a just-finished install is always seen.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)


def probe_imports(python: str, modules: tuple[str, ...] | list[str]) -> dict:
    """Check that every module in ``modules`` imports in ``python``.

    Returns:
        ``{"ok": True}`` when all imports succeed,
        ``{"ok": False, "error": "..."}`` otherwise (last stderr line).
    """
    if not modules:
        return {"ok": True}

    code = "import " + ", ".join(modules)
    try:
        r = subprocess.run(
            [python, "-c", code],
            capture_output=True, text=True,
        )
    except (FileNotFoundError, OSError) as exc:
        return {"ok": False, "error": str(exc)}

    if r.returncode == 0:
        return {"ok": True}

    lines = (r.stderr or "").strip().splitlines()
    error = lines[-1] if lines else f"exit {r.returncode}"
    logger.debug("Probe '%s' failed: %s", code, error)
    return {"ok": False, "error": error}


def read_module_version(python: str, module: str) -> str | None:
    """``module.__version__`` as seen by ``python``, or None."""
    code = (
        f"import {module}; "
        f"print(getattr({module}, '__version__', 'unknown'))"
    )
    try:
        r = subprocess.run(
            [python, "-c", code],
            capture_output=True, text=True,
        )
    except (FileNotFoundError, OSError):
        return None
    if r.returncode != 0:
        return None
    return r.stdout.strip() or None
