"""
L3 Detection — Distro package checks.

Only basic needs a system package (the JPEG headers pillow-simd
compiles against). These probes decide whether the apt step can be
skipped; they never install anything.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

# Query command per package manager. apt answers on stdout; the rpm
# family answers with the exit code.
_QUERY_COMMANDS: dict[str, list[str]] = {
    "apt": ["dpkg-query", "-W", "-f=${Status}"],
    "dnf": ["rpm", "-q"],
    "yum": ["rpm", "-q"],
}

_DPKG_INSTALLED = "install ok installed"


def _is_pkg_installed(pkg: str, pkg_manager: str) -> bool:
    """Whether ``pkg`` is installed according to ``pkg_manager``.

    Unknown managers and missing query binaries count as "not
    installed"; the caller then attempts (and may warn about) the
    install step.
    """
    base = _QUERY_COMMANDS.get(pkg_manager)
    if base is None:
        logger.warning("No package query for '%s' (checking %s)", pkg_manager, pkg)
        return False

    try:
        r = subprocess.run(base + [pkg], capture_output=True, text=True)
    except FileNotFoundError:
        logger.warning("%s not found on PATH (checking %s)", base[0], pkg)
        return False
    except OSError as exc:
        logger.warning("Could not check %s with %s: %s", pkg, base[0], exc)
        return False

    if pkg_manager == "apt":
        return _DPKG_INSTALLED in (r.stdout or "")
    return r.returncode == 0


def check_system_deps(
    packages: tuple[str, ...] | list[str],
    pkg_manager: str = "apt",
) -> dict[str, list[str]]:
    """Split ``packages`` into installed and missing.

    Returns:
        {"missing": ["libjpeg-dev"], "installed": [...]}
    """
    status: dict[str, list[str]] = {"missing": [], "installed": []}
    for pkg in packages:
        key = "installed" if _is_pkg_installed(pkg, pkg_manager) else "missing"
        status[key].append(pkg)
    return status
