"""
Component model — the static install recipe for one extension.

A Component is compiled-in configuration: how to tell whether it is
already installed (probe), what to install (ordered acquire steps),
and what it needs from the caller's filesystem. Descriptors are
frozen; nothing mutates them after import.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class PackageInstall(BaseModel):
    """Direct install through the package manager with pinned specs."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["package"] = "package"
    packages: tuple[str, ...]
    index_url: str | None = None
    no_build_isolation: bool = False

    def describe(self) -> str:
        return " ".join(self.packages)


class GitSource(BaseModel):
    """Clone a repository into the workspace, then build-install it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["git"] = "git"
    repo: str
    branch: str | None = None
    recursive: bool = False
    dest: str                       # directory name inside the workspace

    def describe(self) -> str:
        ref = f"@{self.branch}" if self.branch else ""
        return f"{self.repo}{ref}"


class LocalSource(BaseModel):
    """Copy a directory from the working dir, then build-install the copy."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"
    path: str                       # relative to the invocation directory
    dest: str

    def describe(self) -> str:
        return f"./{self.path}"


AcquireMethod = Annotated[
    Union[PackageInstall, GitSource, LocalSource],
    Field(discriminator="kind"),
]


class AcquireStep(BaseModel):
    """One acquisition step, with an optional best-effort fallback."""

    model_config = ConfigDict(frozen=True)

    label: str
    method: AcquireMethod
    fallback: AcquireMethod | None = None


class Component(BaseModel):
    """Static descriptor for one selectable component."""

    model_config = ConfigDict(frozen=True)

    name: str                                   # selection key, e.g. "flash_attn"
    flag: str                                   # CLI flag, e.g. "--flash-attn"
    label: str                                  # human name, e.g. "Flash-attention"
    help: str = ""
    probe_modules: tuple[str, ...]
    version_module: str | None = None
    requires_local_dir: str | None = None
    system_packages: tuple[str, ...] = ()
    steps: tuple[AcquireStep, ...]
    failure_hint: str = ""
