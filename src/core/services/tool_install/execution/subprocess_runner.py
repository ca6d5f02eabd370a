"""
L4 Execution — Core subprocess runner.

The SINGLE PLACE where ``subprocess.run`` is called for install
operations. Sudo prefixing and failure shaping are
centralised here. Probes (L3) run their own read-only subprocesses.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from typing import Any

from src.core.services.tool_install.data.constants import OUTPUT_TAIL_CHARS

logger = logging.getLogger(__name__)


def _tail(text: str | None) -> str:
    return text[-OUTPUT_TAIL_CHARS:] if text else ""


def _run_subprocess(
    cmd: list[str],
    *,
    needs_sudo: bool = False,
    timeout: int | None = None,
    stream: bool = False,
) -> dict[str, Any]:
    """Run an install command and shape the result.

    Builds can take tens of minutes, so there is no timeout unless the
    caller passes one; a hung build blocks until interrupted.

    Sudo handling:
    - Already root → no prefix.
    - Otherwise ``sudo`` is prepended and prompts on the terminal.
    - No sudo binary → failure result, nothing runs.

    Args:
        cmd: Command list for ``subprocess.run()``.
        needs_sudo: Whether the command requires root.
        timeout: Seconds before ``TimeoutExpired`` (None = wait forever).
        stream: Inherit the terminal instead of capturing output.

    Returns:
        ``{"ok": True, "stdout": "...", "elapsed_ms": N}`` on success,
        ``{"ok": False, "error": "...", ...}`` on failure.
    """
    # ── Sudo handling ──
    if needs_sudo and os.geteuid() != 0:
        if shutil.which("sudo") is None:
            return {
                "ok": False,
                "needs_sudo": True,
                "error": "This step requires root and sudo is not available.",
            }
        cmd = ["sudo"] + cmd

    logger.info("Running: %s", " ".join(cmd))

    # ── Execute ──
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            capture_output=not stream,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return {"ok": False, "error": f"Command timed out ({timeout}s)"}
    except FileNotFoundError:
        return {"ok": False, "error": f"Command not found: {cmd[0]}"}
    except OSError as e:
        logger.exception("Subprocess error: %s", cmd)
        return {"ok": False, "error": str(e)}

    elapsed_ms = int((time.monotonic() - start) * 1000)

    if result.returncode == 0:
        return {
            "ok": True,
            "stdout": _tail(result.stdout),
            "elapsed_ms": elapsed_ms,
        }

    return {
        "ok": False,
        "error": f"Command failed (exit {result.returncode})",
        "stderr": _tail(result.stderr),
        "stdout": _tail(result.stdout),
        "elapsed_ms": elapsed_ms,
    }
