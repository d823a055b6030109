"""Structured form of the text-completion oracle's answer.

The oracle is untrusted: every field is validated one by one before an
``OracleDraft`` is built, and anything that cannot be coerced is dropped.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskdraft.models.constants import MAX_DESCRIPTION_LENGTH, MAX_TITLE_LENGTH


def coerce_text(value: Any) -> Optional[str]:
    """Return a stripped string for scalar values, None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return None


def coerce_confidence(value: Any) -> Optional[float]:
    """Return a confidence in [0, 1], or None if missing or out of range."""
    if value is None or isinstance(value, bool):
        return None
    try:
        confidence = float(value)
    except (TypeError, ValueError):
        return None
    if confidence != confidence or confidence < 0.0 or confidence > 1.0:
        return None
    return confidence


class OracleDraft(BaseModel):
    """Best-effort field guess from the oracle (or from the local fallback)."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Short title")
    description: str = Field(..., description="Task description")
    raw_priority: str = Field(..., description="Priority as returned, not yet normalized")
    raw_status_signal: Optional[str] = Field(None, description="Status hint, if the oracle gave one")
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0, description="Confidence in raw_priority")
    reason: Optional[str] = Field(None, description="Oracle's justification for the priority")
    language: Optional[str] = Field(None, description="Language code detected by the oracle")
    from_fallback: bool = Field(False, description="True when produced by the local fallback")

    @field_validator("title")
    @classmethod
    def _truncate_title(cls, v):
        return v[:MAX_TITLE_LENGTH].rstrip()

    @field_validator("description")
    @classmethod
    def _truncate_description(cls, v):
        return v[:MAX_DESCRIPTION_LENGTH].rstrip()

    @field_validator("language")
    @classmethod
    def _normalize_language(cls, v):
        if v is None:
            return None
        v = v.strip().lower()[:2]
        return v or None
