"""Data models for taskdraft."""

from taskdraft.models.task import InterpretationInput, TaskDraft, TaskPriority, TaskStatus
from taskdraft.models.temporal import Locale, TemporalMatch
from taskdraft.models.oracle import OracleDraft

__all__ = [
    "InterpretationInput",
    "TaskDraft",
    "TaskPriority",
    "TaskStatus",
    "Locale",
    "TemporalMatch",
    "OracleDraft",
]
