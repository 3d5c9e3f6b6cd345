"""Size diff engine."""

from .engine import detect_changes, difference
from .models import Change, ChangeState, SizeDelta

__all__ = ["Change", "ChangeState", "SizeDelta", "detect_changes", "difference"]
