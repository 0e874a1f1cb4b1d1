"""Fixture lifecycle orchestration."""

from .locks import KeyedLocks
from .orchestrator import DropOutcome, FixtureOrchestrator

__all__ = [
    "DropOutcome",
    "FixtureOrchestrator",
    "KeyedLocks",
]
