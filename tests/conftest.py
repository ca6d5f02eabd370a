"""
Shared test fixtures and configuration.

Nothing here runs pip, git or apt. The ``fake_env`` fixture stands in
for the target interpreter: it answers import probes from an in-memory
set of "installed" modules and records every acquisition call.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from src.core.models.settings import Settings
from src.core.services.tool_install.data.recipes import COMPONENT_RECIPES
from src.core.services.tool_install.execution.workspace import ScopedWorkspace

_ORCH = "src.core.services.tool_install.orchestration.orchestrator"


class FakeEnvironment:
    """In-memory target interpreter for orchestrator tests."""

    def __init__(self) -> None:
        self.installed: set[str] = set()
        self.runtime: dict[str, Any] = {
            "available": True, "path": "/envs/trellis2/bin/python", "version": "3.10.14",
        }
        self.torch: dict[str, Any] = {
            "installed": True, "version": "2.6.0+cu124", "cuda_available": True,
        }
        self.results: dict[str, dict] = {}      # method.describe() → result
        self.provides: dict[str, set[str]] = {}  # method.describe() → modules
        self.system_result: dict = {"ok": True, "installed": [], "already": []}
        self.torch_install_result: dict = {"ok": True}
        self.calls: list[Any] = []
        self.system_calls: list[tuple[str, ...]] = []
        self.probes: list[tuple[str, ...]] = []

    # ── Configuration helpers ───────────────────────────────────

    def mark_installed(self, *components: str) -> None:
        for name in components:
            self.installed |= set(COMPONENT_RECIPES[name].probe_modules)

    def installs(self, component: str) -> None:
        """Make the component's last step provide all its probe modules."""
        recipe = COMPONENT_RECIPES[component]
        last = recipe.steps[-1].method.describe()
        self.provides[last] = set(recipe.probe_modules)

    def fail(self, method_desc: str, error: str = "Command failed (exit 1)", **extra: Any) -> None:
        self.results[method_desc] = {"ok": False, "error": error, **extra}

    # ── Fakes ───────────────────────────────────────────────────

    def probe_imports(self, python: str, modules) -> dict:
        self.probes.append(tuple(modules))
        missing = [m for m in modules if m not in self.installed]
        if missing:
            return {"ok": False, "error": f"ModuleNotFoundError: No module named '{missing[0]}'"}
        return {"ok": True}

    def read_module_version(self, python: str, module: str) -> str | None:
        return "2.7.3" if module in self.installed else None

    def execute_method(self, method, **kwargs: Any) -> dict:
        self.calls.append(method)
        if method.kind in ("git", "local"):
            kwargs["workspace"].ensure()
        desc = method.describe()
        result = dict(self.results.get(desc, {"ok": True}))
        if result["ok"]:
            self.installed |= self.provides.get(desc, set())
        return result

    def execute_system_packages(self, packages, **kwargs: Any) -> dict:
        self.system_calls.append(tuple(packages))
        return dict(self.system_result)

    def execute_package_step(self, method, **kwargs: Any) -> dict:
        self.calls.append(method)
        result = dict(self.torch_install_result)
        if result["ok"]:
            self.torch = {"installed": True, "version": "2.6.0+cu124", "cuda_available": True}
        return result

    @property
    def acquisitions(self) -> list[Any]:
        return list(self.calls)


@pytest.fixture
def settings() -> Settings:
    """Settings with captured output (nothing streams during tests)."""
    return Settings(stream_output=False)


@pytest.fixture
def workspace(tmp_path: Path):
    """A workspace rooted in tmp_path, released after the test."""
    ws = ScopedWorkspace(prefix="test_ws", base_dir=tmp_path)
    yield ws
    ws.release()


@pytest.fixture
def fake_env():
    """Patch every orchestrator seam that touches the real system."""
    env = FakeEnvironment()
    with patch(f"{_ORCH}.probe_imports", side_effect=env.probe_imports), \
         patch(f"{_ORCH}.read_module_version", side_effect=env.read_module_version), \
         patch(f"{_ORCH}.execute_method", side_effect=env.execute_method), \
         patch(f"{_ORCH}._execute_system_packages", side_effect=env.execute_system_packages), \
         patch(f"{_ORCH}._execute_package_step", side_effect=env.execute_package_step), \
         patch(f"{_ORCH}.detect_runtime", side_effect=lambda python: dict(env.runtime)), \
         patch(f"{_ORCH}.detect_torch", side_effect=lambda python: dict(env.torch)):
        yield env
