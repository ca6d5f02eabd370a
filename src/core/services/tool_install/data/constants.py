"""
L0 Data — Module-level constants.

Pure data. No logic beyond tiny command builders. No imports beyond stdlib.
"""

from __future__ import annotations

# Fixed install order. Foundational packages first, then the attention
# kernel, the two rasterizers, the mesh/GEMM kernels, and the
# locally-sourced extension last.
INSTALL_ORDER: tuple[str, ...] = (
    "basic",
    "flash_attn",
    "nvdiffrast",
    "nvdiffrec",
    "cumesh",
    "flexgemm",
    "o_voxel",
)

# Module imported to decide whether the foundational runtime is usable.
TORCH_MODULE = "torch"

# System packages are installed with apt and checked with dpkg-query.
SYSTEM_PKG_MANAGER = "apt"

# Tail length kept from captured subprocess output.
OUTPUT_TAIL_CHARS = 2000


def pip_command(python: str) -> list[str]:
    """pip for the *target* interpreter, not the one running us.

    The installer may live in a different venv than the conda env
    being provisioned, so ``sys.executable`` would be wrong here.
    """
    return [python, "-m", "pip"]
