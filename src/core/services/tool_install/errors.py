"""
Fatal setup errors.

Executors report subprocess failures as ``{"ok": False, ...}`` dicts;
the orchestrator turns the ones that must stop the run into these
exceptions. The CLI catches ``SetupError``, prints the message and
remedy, and exits 1. Best-effort failures never become exceptions.
"""

from __future__ import annotations


class SetupError(Exception):
    """Base class for errors that abort the whole run."""

    def __init__(
        self,
        message: str,
        *,
        component: str | None = None,
        remedy: str = "",
        detail: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.component = component
        self.remedy = remedy
        self.detail = detail


class RuntimeMissingError(SetupError):
    """The target interpreter is not reachable at all."""


class DependencyInstallError(SetupError):
    """A required acquisition step failed and had no fallback."""


class PreconditionError(SetupError):
    """A component's local filesystem precondition is not met."""


class VerificationError(SetupError):
    """Install reported success but the probe still fails."""

