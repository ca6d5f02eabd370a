"""
L4 Execution — Scoped build workspace.

One temporary directory per run, named after the process id so
concurrent runs never collide. It is created lazily, the first time
a component needs to stage sources, and removed on every exit path:

    - normal completion / error unwind → ``__exit__``
    - ``sys.exit`` from anywhere         → ``atexit`` hook
    - SIGINT / SIGTERM                    → signal handler → ``sys.exit``

``release()`` is idempotent; whichever path fires first does the work.
"""

from __future__ import annotations

import atexit
import logging
import os
import shutil
import signal
import sys
import tempfile
from pathlib import Path
from types import FrameType, TracebackType
from typing import Any

logger = logging.getLogger(__name__)

_HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ScopedWorkspace:
    """Lazily-created temp directory with guaranteed removal."""

    def __init__(
        self,
        prefix: str = "trellis2_extensions",
        base_dir: Path | None = None,
    ) -> None:
        base = base_dir if base_dir is not None else Path(tempfile.gettempdir())
        self.path = base / f"{prefix}_{os.getpid()}"
        self._registered = False
        self._released = False
        self._previous_handlers: dict[int, Any] = {}

    # ── Lifecycle ───────────────────────────────────────────────

    def register(self) -> None:
        """Install the atexit hook and signal handlers (once)."""
        if self._registered:
            return
        atexit.register(self.release)
        for sig in _HANDLED_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(sig, self._handle_signal)
            except ValueError:
                # Not the main thread (e.g. under a test runner thread)
                logger.debug("Cannot install handler for %s outside main thread", sig)
        self._registered = True

    def unregister(self) -> None:
        """Undo ``register()``: restore handlers, drop the atexit hook."""
        if not self._registered:
            return
        atexit.unregister(self.release)
        for sig, handler in self._previous_handlers.items():
            try:
                signal.signal(sig, handler)
            except ValueError:
                pass
        self._previous_handlers.clear()
        self._registered = False

    def ensure(self) -> Path:
        """Create the directory if needed and return it."""
        if self._released:
            raise RuntimeError(f"Workspace {self.path} already released")
        if not self.path.is_dir():
            logger.debug("Creating workspace %s", self.path)
            self.path.mkdir(parents=True, exist_ok=True)
        return self.path

    def release(self) -> None:
        """Remove the directory tree if it exists. Safe to call twice.

        Marked released only once the tree is gone: a signal arriving
        mid-removal re-enters here and finishes the job before exiting.
        """
        if self._released:
            return
        if self.path.exists():
            logger.info("Cleaning up temporary directory %s", self.path)
            shutil.rmtree(self.path, ignore_errors=True)
        self._released = True

    @property
    def exists(self) -> bool:
        return self.path.exists()

    # ── Signals ─────────────────────────────────────────────────

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        logger.warning("Interrupted by signal %d, cleaning up", signum)
        self.release()
        sys.exit(128 + signum)

    # ── Context manager ─────────────────────────────────────────

    def __enter__(self) -> ScopedWorkspace:
        self.register()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
        self.unregister()
