"""
Settings model — pins and sources that are data, not design.

Loaded from an optional trellis-setup.yml; every field has a default
so a missing file means "use the stock pins".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Settings(BaseModel):
    """Run-wide configuration."""

    model_config = ConfigDict(extra="forbid")

    python: str = "python"                      # target interpreter on PATH
    conda_env: str = "trellis2"                 # named in remedy messages
    torch_packages: list[str] = Field(
        default_factory=lambda: ["torch==2.6.0", "torchvision==0.21.0"],
    )
    torch_index_url: str = "https://download.pytorch.org/whl/cu124"
    workspace_prefix: str = "trellis2_extensions"
    stream_output: bool = True
