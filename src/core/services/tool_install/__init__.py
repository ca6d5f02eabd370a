"""
Component installation service — package re-exports.

    from src.core.services.tool_install import provision

Each symbol lives in its single-responsibility module inside the
appropriate onion layer (data → detection → execution → orchestration).
"""

# ── L0: Data ──
from src.core.services.tool_install.data.constants import INSTALL_ORDER  # noqa: F401
from src.core.services.tool_install.data.recipes import COMPONENT_RECIPES  # noqa: F401

# ── Errors ──
from src.core.services.tool_install.errors import (  # noqa: F401
    DependencyInstallError,
    PreconditionError,
    RuntimeMissingError,
    SetupError,
    VerificationError,
)

# ── L4: Execution ──
from src.core.services.tool_install.execution.workspace import (  # noqa: F401
    ScopedWorkspace,
)

# ── L5: Orchestration ──
from src.core.services.tool_install.orchestration.orchestrator import (  # noqa: F401
    install_component,
    prepare_runtime,
    provision,
    run_install,
)
