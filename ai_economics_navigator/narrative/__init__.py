"""
Narrative commentary for AI Economics Navigator.

Turns engine snapshots into prose through a language model. Never affects
numeric results.
"""

from .client import GENERIC_FAILURE_MESSAGE, RATE_LIMIT_MESSAGE, NarrativeClient
from .prompts import ScenarioKind
from .task import NarrativeHandle, NarrativeScheduler

__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "RATE_LIMIT_MESSAGE",
    "NarrativeClient",
    "NarrativeHandle",
    "NarrativeScheduler",
    "ScenarioKind",
]
