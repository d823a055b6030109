"""Temporal extraction result model."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Locale(str, Enum):
    """Locales the temporal extractor knows how to parse."""
    FR = "fr"
    ES = "es"
    PT = "pt"
    DE = "de"
    EN = "en"


class TemporalMatch(BaseModel):
    """Result of one extraction call. Absent fields mean nothing was found."""

    model_config = ConfigDict(frozen=True)

    resolved_instant: Optional[datetime] = None
    matched_span: Optional[str] = None
    source_locale_hint: Optional[Locale] = None

    @property
    def found(self) -> bool:
        return self.resolved_instant is not None
