"""
L4 Execution — Acquisition step executors.

One executor per acquisition kind, plus the best-effort system
package step. Each returns the runner's result dict and never raises
for a failed command; deciding what is fatal is the orchestrator's job.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

from src.core.models.component import GitSource, LocalSource, PackageInstall
from src.core.services.tool_install.data.constants import (
    SYSTEM_PKG_MANAGER,
    pip_command,
)
from src.core.services.tool_install.detection.system_deps import check_system_deps
from src.core.services.tool_install.execution.subprocess_runner import _run_subprocess
from src.core.services.tool_install.execution.workspace import ScopedWorkspace

logger = logging.getLogger(__name__)


def _execute_package_step(
    method: PackageInstall,
    *,
    python: str,
    stream: bool = False,
) -> dict[str, Any]:
    """``pip install`` pinned specs into the target interpreter."""
    cmd = pip_command(python) + ["install", *method.packages]
    if method.index_url:
        cmd += ["--index-url", method.index_url]
    if method.no_build_isolation:
        cmd.append("--no-build-isolation")
    result = _run_subprocess(cmd, stream=stream)
    result["stage"] = "install"
    return result


def _execute_build_install(
    source_dir: Path,
    *,
    python: str,
    stream: bool = False,
) -> dict[str, Any]:
    """Build and install a staged source tree.

    ``--no-build-isolation`` so the extension compiles against the
    torch already in the environment instead of a throwaway copy.
    """
    cmd = pip_command(python) + ["install", str(source_dir), "--no-build-isolation"]
    result = _run_subprocess(cmd, stream=stream)
    result["stage"] = "build"
    return result


def _execute_source_step(
    method: GitSource,
    workspace: ScopedWorkspace,
    *,
    stream: bool = False,
) -> dict[str, Any]:
    """Clone ``method.repo`` into the workspace.

    Returns the runner result plus ``"path"`` (the clone directory).
    """
    dest = workspace.ensure() / method.dest
    cmd: list[str] = ["git", "clone"]
    if method.branch:
        cmd += ["-b", method.branch]
    if method.recursive:
        cmd.append("--recursive")
    cmd += [method.repo, str(dest)]

    result = _run_subprocess(cmd, stream=stream)
    result["stage"] = "clone"
    result["path"] = str(dest)
    return result


def _execute_copy_step(
    method: LocalSource,
    workspace: ScopedWorkspace,
    *,
    work_dir: Path,
) -> dict[str, Any]:
    """Copy a caller directory into the workspace.

    The caller's tree is only read; builds write ``build/`` and
    ``*.egg-info`` next to the sources, so they run on the copy.
    """
    src = work_dir / method.path
    if not src.is_dir():
        return {"ok": False, "stage": "copy", "error": f"Source not found: {src}"}

    dest = workspace.ensure() / method.dest
    try:
        shutil.copytree(src, dest, symlinks=True)
    except (OSError, shutil.Error) as exc:
        return {"ok": False, "stage": "copy", "error": f"Copy failed: {exc}"}
    return {"ok": True, "stage": "copy", "path": str(dest)}


def execute_method(
    method: PackageInstall | GitSource | LocalSource,
    *,
    python: str,
    workspace: ScopedWorkspace,
    work_dir: Path,
    stream: bool = False,
) -> dict[str, Any]:
    """Run one acquisition method by dispatching on ``method.kind``.

    ``git`` and ``local`` are two-stage (stage, then build-install);
    the first failing stage is returned.
    """
    if method.kind == "package":
        return _execute_package_step(method, python=python, stream=stream)

    if method.kind == "git":
        staged = _execute_source_step(method, workspace, stream=stream)
    elif method.kind == "local":
        staged = _execute_copy_step(method, workspace, work_dir=work_dir)
    else:
        return {"ok": False, "error": f"Unknown acquisition kind: {method.kind}"}

    if not staged["ok"]:
        return staged
    return _execute_build_install(Path(staged["path"]), python=python, stream=stream)


def _execute_system_packages(
    packages: tuple[str, ...] | list[str],
    *,
    pkg_manager: str = SYSTEM_PKG_MANAGER,
    stream: bool = False,
) -> dict[str, Any]:
    """Install missing distro packages with sudo.

    Returns ``{"ok": True, "installed": [...], "already": [...]}`` or
    a failure dict; callers treat failure as a warning.
    """
    status = check_system_deps(packages, pkg_manager)
    if not status["missing"]:
        return {"ok": True, "installed": [], "already": status["installed"]}

    if pkg_manager != "apt":
        return {
            "ok": False,
            "error": f"Cannot install system packages with {pkg_manager}",
            "missing": status["missing"],
        }

    logger.info("Installing system packages: %s", ", ".join(status["missing"]))
    result = _run_subprocess(
        ["apt", "install", "-y", *status["missing"]],
        needs_sudo=True,
        stream=stream,
    )
    result["missing"] = status["missing"]
    result["already"] = status["installed"]
    if result["ok"]:
        result["installed"] = status["missing"]
    return result
