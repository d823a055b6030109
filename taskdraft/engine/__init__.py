"""Interpretation engine for taskdraft."""

from taskdraft.engine.priority import match_priority, normalize_priority
from taskdraft.engine.status import normalize_status, status_label
from taskdraft.engine.arbitration import decide_priority, PriorityDecision
from taskdraft.engine.field_extraction import FieldExtractor, local_fallback_draft
from taskdraft.engine.interpreter import TaskInterpreter, interpret

__all__ = [
    "match_priority",
    "normalize_priority",
    "normalize_status",
    "status_label",
    "decide_priority",
    "PriorityDecision",
    "FieldExtractor",
    "local_fallback_draft",
    "TaskInterpreter",
    "interpret",
]
