"""Ari's mood and guidance layer."""

from .engine import MoodEngine
from .models import CoachingAction, CoachingActionKind, Mood, MoodUpdate

__all__ = [
    "CoachingAction",
    "CoachingActionKind",
    "Mood",
    "MoodEngine",
    "MoodUpdate",
]
