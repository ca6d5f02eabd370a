"""
Install outcome models — what happened to each component.

A ComponentReceipt is the per-component result; the RunReport
accumulates them in completion order alongside the runtime info
gathered by the environment gate.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, Field

InstallOutcome = Literal["skipped", "installed", "fallback", "failed"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class RuntimeInfo(BaseModel):
    """Foundational runtime as observed by the environment gate."""

    python: str = "python"
    python_version: str | None = None
    torch_version: str | None = None
    cuda_available: bool | None = None
    torch_installed_now: bool = False


class ComponentReceipt(BaseModel):
    """Result of installing (or skipping) one component."""

    component: str
    label: str = ""
    outcome: InstallOutcome = "installed"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    version: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether the component ended up usable."""
        return self.outcome != "failed"


class RunReport(BaseModel):
    """Aggregate of one orchestrator run."""

    requested: list[str] = Field(default_factory=list)
    runtime: RuntimeInfo | None = None
    receipts: list[ComponentReceipt] = Field(default_factory=list)

    def add(self, receipt: ComponentReceipt) -> None:
        self.receipts.append(receipt)

    @property
    def succeeded(self) -> list[ComponentReceipt]:
        return [r for r in self.receipts if r.ok]

    @property
    def complete(self) -> bool:
        """Every requested component was reached and is usable."""
        return len(self.succeeded) == len(self.requested)

    @property
    def warnings(self) -> list[str]:
        return [w for r in self.receipts for w in r.warnings]
