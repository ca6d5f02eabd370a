"""
L4 Execution — ``__init__.py`` re-exports all execution functions.

These functions WRITE to the system: subprocess calls, file copies,
the scoped workspace directory.
"""

from src.core.services.tool_install.execution.step_executors import (  # noqa: F401
    _execute_build_install,
    _execute_copy_step,
    _execute_package_step,
    _execute_source_step,
    _execute_system_packages,
    execute_method,
)
from src.core.services.tool_install.execution.subprocess_runner import (  # noqa: F401
    _run_subprocess,
)
from src.core.services.tool_install.execution.workspace import (  # noqa: F401
    ScopedWorkspace,
)
