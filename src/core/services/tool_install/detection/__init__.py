"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from src.core.services.tool_install.detection.environment import (  # noqa: F401
    detect_runtime,
    detect_torch,
)
from src.core.services.tool_install.detection.import_probe import (  # noqa: F401
    probe_imports,
    read_module_version,
)
from src.core.services.tool_install.detection.system_deps import (  # noqa: F401
    _is_pkg_installed,
    check_system_deps,
)
