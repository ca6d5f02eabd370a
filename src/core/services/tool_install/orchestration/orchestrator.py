"""
L5 Orchestration — Top-level coordinators.

These functions tie everything together: gate on the foundational
runtime, install each selected component in the fixed order, and
turn fatal executor results into ``SetupError`` exceptions.

Execution is strictly sequential. Installs mutate one shared thing
(the target interpreter's site-packages) and builds already use
every core, so nothing here runs in parallel.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable

from src.core.context import get_work_dir
from src.core.models.component import AcquireStep, Component, PackageInstall
from src.core.models.outcome import ComponentReceipt, RunReport, RuntimeInfo, _now_iso
from src.core.models.selection import Selection
from src.core.models.settings import Settings
from src.core.services.tool_install.data.constants import INSTALL_ORDER
from src.core.services.tool_install.data.recipes import COMPONENT_RECIPES
from src.core.services.tool_install.detection.environment import (
    detect_runtime,
    detect_torch,
)
from src.core.services.tool_install.detection.import_probe import (
    probe_imports,
    read_module_version,
)
from src.core.services.tool_install.errors import (
    DependencyInstallError,
    PreconditionError,
    RuntimeMissingError,
    VerificationError,
)
from src.core.services.tool_install.execution.step_executors import (
    _execute_package_step,
    _execute_system_packages,
    execute_method,
)
from src.core.services.tool_install.execution.workspace import ScopedWorkspace

logger = logging.getLogger(__name__)

Progress = Callable[[str, str], None]

# Failure wording per executor stage.
_STAGE_VERBS: dict[str, str] = {
    "clone": "clone {label} repository",
    "copy": "copy {label} directory",
    "build": "build and install {label}",
    "install": "install {label}",
}


def _log_progress(label: str, summary: str) -> None:
    logger.info("%s %s", label, summary)


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


# ── Environment gate ────────────────────────────────────────────


def prepare_runtime(
    settings: Settings,
    *,
    progress: Progress = _log_progress,
) -> RuntimeInfo:
    """Make sure the target interpreter exists and has torch.

    Raises:
        RuntimeMissingError: The interpreter is not on PATH.
        DependencyInstallError: torch was missing and the pinned
            install failed.
        VerificationError: torch still does not import after install.
    """
    remedy = (
        "Please activate your conda environment first:\n"
        f"  conda activate {settings.conda_env}"
    )
    runtime = detect_runtime(settings.python)
    if not runtime["available"]:
        raise RuntimeMissingError(
            f"Python not found! ({runtime.get('error', 'unavailable')})",
            remedy=remedy,
        )

    info = RuntimeInfo(python=settings.python, python_version=runtime.get("version"))
    progress("🐍", f"Using Python {info.python_version or 'unknown'} ({runtime['path']})")

    torch = detect_torch(settings.python)
    if torch["installed"]:
        info.torch_version = torch.get("version")
        info.cuda_available = torch.get("cuda_available")
        progress(
            "🔥",
            f"PyTorch {info.torch_version} detected (CUDA available: {info.cuda_available})",
        )
        return info

    pins = " ".join(settings.torch_packages)
    progress("⬇️", f"PyTorch not detected. Installing {pins} from {settings.torch_index_url}")
    result = _execute_package_step(
        PackageInstall(
            packages=tuple(settings.torch_packages),
            index_url=settings.torch_index_url,
        ),
        python=settings.python,
        stream=settings.stream_output,
    )
    if not result["ok"]:
        raise DependencyInstallError(
            f"Failed to install PyTorch: {result.get('error', 'unknown error')}",
            component="torch",
            remedy=remedy,
            detail=result.get("stderr", ""),
        )

    torch = detect_torch(settings.python)
    if not torch["installed"]:
        raise VerificationError(
            "PyTorch installation verification failed",
            component="torch",
            remedy=remedy,
        )
    info.torch_version = torch.get("version")
    info.cuda_available = torch.get("cuda_available")
    info.torch_installed_now = True
    progress("✅", f"PyTorch {info.torch_version} installed successfully!")
    return info


# ── Component installer ─────────────────────────────────────────


def _run_step(
    component: Component,
    step: AcquireStep,
    *,
    run_kwargs: dict[str, Any],
    warnings: list[str],
    progress: Progress,
) -> bool:
    """Run one acquire step. Returns True when its fallback was used.

    Raises:
        DependencyInstallError: Primary failed and there is no fallback.
    """
    progress("📦", f"{component.label}: {step.label} ({step.method.describe()})")
    result = execute_method(step.method, **run_kwargs)
    if result["ok"]:
        return False

    stage = result.get("stage", "install")
    action = _STAGE_VERBS.get(stage, _STAGE_VERBS["install"]).format(label=step.label)

    if step.fallback is None:
        raise DependencyInstallError(
            f"Failed to {action}: {result.get('error', 'unknown error')}",
            component=component.name,
            remedy=component.failure_hint,
            detail=result.get("stderr", ""),
        )

    logger.warning(
        "Failed to %s, falling back to %s", action, step.fallback.describe(),
    )
    progress("↩️", f"{component.label}: falling back to {step.fallback.describe()}")
    fallback = execute_method(step.fallback, **run_kwargs)
    if not fallback["ok"]:
        msg = (
            f"Fallback {step.fallback.describe()} for {step.label} failed "
            f"({fallback.get('error', 'unknown error')}). Continuing anyway..."
        )
        logger.warning(msg)
        warnings.append(msg)
    return True


def install_component(
    component: Component,
    *,
    settings: Settings,
    workspace: ScopedWorkspace,
    work_dir: Path | None = None,
    progress: Progress = _log_progress,
) -> ComponentReceipt:
    """Idempotently install one component.

    Probe → (precondition) → system packages → acquire → verify.
    Returns a receipt for skipped or installed components; every
    fatal path raises a ``SetupError`` subclass instead.
    """
    work_dir = work_dir if work_dir is not None else get_work_dir()
    python = settings.python
    started_at = _now_iso()
    start = time.monotonic()

    # ── 1. Probe ──
    if probe_imports(python, component.probe_modules)["ok"]:
        version = (
            read_module_version(python, component.version_module) or "unknown"
            if component.version_module else None
        )
        suffix = f" (version {version})" if version else ""
        progress("⏭️", f"{component.label} already installed{suffix}")
        return ComponentReceipt(
            component=component.name,
            label=component.label,
            outcome="skipped",
            started_at=started_at,
            duration_ms=_elapsed_ms(start),
            version=version,
        )

    # ── 2. Local precondition ──
    if component.requires_local_dir:
        local = work_dir / component.requires_local_dir
        if not local.is_dir():
            raise PreconditionError(
                f"{component.requires_local_dir} directory not found in "
                f"current directory ({work_dir})",
                component=component.name,
                remedy=(
                    f"Please make sure the {component.requires_local_dir} "
                    "directory exists before running this option."
                ),
            )

    warnings: list[str] = []

    # ── 3. System packages (best effort) ──
    if component.system_packages:
        result = _execute_system_packages(
            component.system_packages, stream=settings.stream_output,
        )
        if not result["ok"]:
            msg = (
                f"Failed to install {', '.join(component.system_packages)} "
                f"({result.get('error', 'unknown error')}). Continuing anyway..."
            )
            logger.warning(msg)
            warnings.append(msg)

    # ── 4. Acquire ──
    run_kwargs: dict[str, Any] = {
        "python": python,
        "workspace": workspace,
        "work_dir": work_dir,
        "stream": settings.stream_output,
    }
    used_fallback = False
    for step in component.steps:
        used_fallback |= _run_step(
            component, step,
            run_kwargs=run_kwargs, warnings=warnings, progress=progress,
        )

    # ── 5. Verify ──
    verify = probe_imports(python, component.probe_modules)
    if not verify["ok"]:
        raise VerificationError(
            f"{component.label} installation verification failed: "
            f"{verify.get('error', 'import failed')}",
            component=component.name,
            remedy=component.failure_hint,
        )

    version = (
        read_module_version(python, component.version_module)
        if component.version_module else None
    )
    progress("✅", f"{component.label} installed successfully!")
    return ComponentReceipt(
        component=component.name,
        label=component.label,
        outcome="fallback" if used_fallback else "installed",
        started_at=started_at,
        duration_ms=_elapsed_ms(start),
        version=version,
        warnings=warnings,
    )


# ── Run ─────────────────────────────────────────────────────────


def run_install(
    selection: Selection,
    *,
    settings: Settings,
    workspace: ScopedWorkspace,
    report: RunReport,
    work_dir: Path | None = None,
    progress: Progress = _log_progress,
) -> RunReport:
    """Install every selected component in ``INSTALL_ORDER``.

    Receipts are appended to ``report`` as components finish, so a
    caller holding the report still sees what completed when a later
    component raises.
    """
    report.requested = selection.requested(INSTALL_ORDER)
    for name in report.requested:
        component = COMPONENT_RECIPES[name]
        progress("🔧", f"Installing {component.label}")
        report.add(
            install_component(
                component,
                settings=settings,
                workspace=workspace,
                work_dir=work_dir,
                progress=progress,
            )
        )
    return report


def provision(
    selection: Selection,
    *,
    settings: Settings | None = None,
    work_dir: Path | None = None,
    report: RunReport | None = None,
    progress: Progress = _log_progress,
) -> RunReport:
    """Full run: workspace scope, runtime gate, component installs.

    The workspace is registered before anything else runs and removed
    when this returns or raises.
    """
    settings = settings if settings is not None else Settings()
    report = report if report is not None else RunReport()
    report.requested = selection.requested(INSTALL_ORDER)

    with ScopedWorkspace(prefix=settings.workspace_prefix) as workspace:
        report.runtime = prepare_runtime(settings, progress=progress)
        run_install(
            selection,
            settings=settings,
            workspace=workspace,
            report=report,
            work_dir=work_dir,
            progress=progress,
        )
    return report
