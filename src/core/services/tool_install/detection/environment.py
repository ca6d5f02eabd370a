"""
L3 Detection — Foundational runtime probes.

Read-only checks for the target interpreter and for the tensor
runtime every component builds against.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess

from src.core.services.tool_install.data.constants import TORCH_MODULE

logger = logging.getLogger(__name__)

# Printed by the torch probe, one value per line.
_TORCH_PROBE = (
    f"import {TORCH_MODULE}; "
    f"print({TORCH_MODULE}.__version__); "
    f"print({TORCH_MODULE}.cuda.is_available())"
)


def detect_runtime(python: str) -> dict:
    """Check that the target interpreter is on PATH and runs.

    Returns::

        {"available": True, "path": "/opt/conda/envs/x/bin/python", "version": "3.10.14"}
        or
        {"available": False, "error": "..."}
    """
    path = shutil.which(python)
    if path is None:
        return {"available": False, "error": f"'{python}' not found on PATH"}

    try:
        r = subprocess.run(
            [path, "--version"],
            capture_output=True, text=True,
        )
    except OSError as exc:
        return {"available": False, "path": path, "error": str(exc)}

    if r.returncode != 0:
        return {"available": False, "path": path, "error": f"exit {r.returncode}"}

    # "Python 3.10.14" (older interpreters print to stderr)
    match = re.search(r"(\d+\.\d+\.\d+)", (r.stdout or "") + (r.stderr or ""))
    return {
        "available": True,
        "path": path,
        "version": match.group(1) if match else None,
    }


def detect_torch(python: str) -> dict:
    """Probe the tensor runtime in the target interpreter.

    Returns::

        {"installed": True, "version": "2.6.0+cu124", "cuda_available": True}
        or
        {"installed": False}
    """
    try:
        r = subprocess.run(
            [python, "-c", _TORCH_PROBE],
            capture_output=True, text=True,
        )
    except OSError as exc:
        logger.debug("torch probe could not start: %s", exc)
        return {"installed": False}

    if r.returncode != 0:
        return {"installed": False}

    lines = r.stdout.strip().splitlines()
    version = lines[0].strip() if lines else None
    cuda = lines[1].strip() == "True" if len(lines) > 1 else None
    return {"installed": True, "version": version, "cuda_available": cuda}
