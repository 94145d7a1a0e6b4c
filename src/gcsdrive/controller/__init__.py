"""Internal controller exports for gcsdrive."""

from __future__ import annotations

from .storage_controller import GcsController

__all__ = ["GcsController"]
