"""
Selection model — which components the user asked for.

Built once from parsed CLI flags and frozen afterwards.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

# Components the ``--all`` shortcut must never select.
AGGREGATE_EXCLUDED: frozenset[str] = frozenset({"o_voxel"})


class Selection(BaseModel):
    """Mapping from component name to "requested"."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    basic: bool = False
    flash_attn: bool = False
    nvdiffrast: bool = False
    nvdiffrec: bool = False
    cumesh: bool = False
    flexgemm: bool = False
    o_voxel: bool = False

    @classmethod
    def from_flags(cls, *, select_all: bool = False, **flags: Any) -> Selection:
        """Build a selection, expanding ``select_all`` to every component
        except the ones that need a pre-existing local directory."""
        values = {name: bool(flags.get(name, False)) for name in cls.model_fields}
        if select_all:
            for name in cls.model_fields:
                if name not in AGGREGATE_EXCLUDED:
                    values[name] = True
        return cls(**values)

    def requested(self, order: tuple[str, ...] | None = None) -> list[str]:
        """Requested component names, in ``order`` when given."""
        names = order if order is not None else tuple(type(self).model_fields)
        return [name for name in names if getattr(self, name)]

    @property
    def empty(self) -> bool:
        return not any(getattr(self, name) for name in type(self).model_fields)
