"""
L5 Orchestration — ``__init__.py`` re-exports top-level coordinators.

These are the entry points that external code calls.
"""

from src.core.services.tool_install.orchestration.orchestrator import (  # noqa: F401
    install_component,
    prepare_runtime,
    provision,
    run_install,
)
