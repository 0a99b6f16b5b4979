"""Human review queue for unresolved speakers."""
from __future__ import annotations

from .manager import EscalationManager

__all__ = ["EscalationManager"]
