"""Task draft data model for taskdraft."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    """Task priority enumeration.

    Members compare by rank (LOW < MEDIUM < HIGH < URGENT), not by their
    string values, so sorting a list of priorities gives the expected order.
    """
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank < other.rank
        return NotImplemented

    def __le__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank <= other.rank
        return NotImplemented

    def __gt__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank > other.rank
        return NotImplemented

    def __ge__(self, other):
        if isinstance(other, TaskPriority):
            return self.rank >= other.rank
        return NotImplemented


class InterpretationInput(BaseModel):
    """A single interpretation request."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Free-form sentence describing the task")
    reference_instant: datetime = Field(..., description="Instant relative dates are resolved against")

    @field_validator("text")
    @classmethod
    def _validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("text must not be blank")
        return v


class TaskDraft(BaseModel):
    """Structured task produced from free text. Never persisted here."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field("", description="Short task title")
    description: str = Field("", description="Task description")
    status: TaskStatus = Field(TaskStatus.TODO, description="Canonical task status")
    status_label: str = Field("To Do", alias="statusLabel", description="Status label in the detected language")
    priority: TaskPriority = Field(TaskPriority.MEDIUM, description="Canonical task priority")
    priority_confidence: Optional[float] = Field(
        None,
        alias="priorityConfidence",
        description="Confidence reported by the model for its priority, if any",
    )
    priority_reason: str = Field("", alias="priorityReason", description="Why this priority was chosen")
    due_date: Optional[datetime] = Field(None, alias="dueDate", description="Resolved due date")
    matched_span: Optional[str] = Field(
        None, alias="matchedSpan", description="Text fragment the due date was read from"
    )
    language: str = Field("en", description="Language used for the status label")
