"""Find stylesheet files that no entry point ever imports."""

from __future__ import annotations

from sass_shake.analyzer import shake
from sass_shake.models import ShakeResult

__version__ = "0.1.0"

__all__ = ["ShakeResult", "__version__", "shake"]
