"""
L0 Data — ``__init__.py`` re-exports all data constants.
"""

from src.core.services.tool_install.data.constants import (  # noqa: F401
    INSTALL_ORDER,
    OUTPUT_TAIL_CHARS,
    SYSTEM_PKG_MANAGER,
    TORCH_MODULE,
    pip_command,
)
from src.core.services.tool_install.data.recipes import (  # noqa: F401
    COMPONENT_RECIPES,
)
