"""
Domain models — Pydantic types for the setup orchestrator.

All models are re-exported here for convenient access:

    from src.core.models import Component, Selection, RunReport
"""

from src.core.models.component import (
    AcquireMethod,
    AcquireStep,
    Component,
    GitSource,
    LocalSource,
    PackageInstall,
)
from src.core.models.outcome import (
    ComponentReceipt,
    InstallOutcome,
    RunReport,
    RuntimeInfo,
)
from src.core.models.selection import AGGREGATE_EXCLUDED, Selection
from src.core.models.settings import Settings

__all__ = [
    "AGGREGATE_EXCLUDED",
    # component.py
    "AcquireMethod",
    "AcquireStep",
    "Component",
    # outcome.py
    "ComponentReceipt",
    "GitSource",
    "InstallOutcome",
    "LocalSource",
    "PackageInstall",
    "RunReport",
    "RuntimeInfo",
    # selection.py
    "Selection",
    # settings.py
    "Settings",
]
