"""Top-level interpretation of task text.

This module is the single entrypoint used by the parse API:

1. Run temporal extraction and oracle field extraction concurrently
2. Normalize the status from oracle status + oracle description + raw text
3. Decide the priority (oracle if confident, else due date, else keywords)
4. Merge everything into a TaskDraft

Every step has a default, so interpret() returns a draft for any string.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional

from taskdraft.engine.arbitration import decide_priority
from taskdraft.engine.field_extraction import FieldExtractor, local_fallback_draft
from taskdraft.engine.status import normalize_status, status_label, supported_language
from taskdraft.models.constants import DEFAULT_LANGUAGE
from taskdraft.models.oracle import OracleDraft
from taskdraft.models.task import InterpretationInput, TaskDraft, TaskPriority, TaskStatus
from taskdraft.models.temporal import TemporalMatch
from taskdraft.temporal.extractor import TemporalExtractor

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class TaskInterpreter:
    """Turns one sentence into a TaskDraft. Holds no per-call state."""

    def __init__(
        self,
        temporal_extractor: Optional[TemporalExtractor] = None,
        field_extractor: Optional[FieldExtractor] = None,
        clock: Optional[Clock] = None,
    ):
        self.temporal_extractor = temporal_extractor or TemporalExtractor()
        self.field_extractor = field_extractor or FieldExtractor()
        self.clock = clock or datetime.utcnow

    def interpret(self, text: str) -> TaskDraft:
        """Interpret text into a task draft.

        Blank text does not reach the oracle: it yields an empty-title draft
        with TODO status, MEDIUM priority and no due date.
        """
        reference = self.clock()
        if not text or not text.strip():
            logger.debug("Blank input. Returning default draft.")
            return TaskDraft(
                status=TaskStatus.TODO,
                status_label=status_label(TaskStatus.TODO, DEFAULT_LANGUAGE),
                priority=TaskPriority.MEDIUM,
                priority_reason="Empty input",
            )

        request = InterpretationInput(text=text, reference_instant=reference)

        # No data dependency between the two: issue them together
        with ThreadPoolExecutor(max_workers=2) as pool:
            temporal_future = pool.submit(self._extract_due_date, request)
            draft_future = pool.submit(self._draft_fields, request)
            temporal = temporal_future.result()
            draft = draft_future.result()

        return self.merge(request, temporal, draft)

    def merge(self, request: InterpretationInput, temporal: TemporalMatch, draft: OracleDraft) -> TaskDraft:
        """Combine extractor and oracle results into the final draft."""
        status_source = " ".join(
            part for part in (draft.raw_status_signal, draft.description, request.text) if part
        )
        status = normalize_status(status_source)
        decision = decide_priority(draft, temporal.resolved_instant, request.reference_instant, status_source)

        language = supported_language(draft.language)
        if language is None and temporal.source_locale_hint is not None:
            language = temporal.source_locale_hint.value
        language = language or DEFAULT_LANGUAGE

        logger.debug(
            f"Interpreted draft: status={status.value} priority={decision.priority.value} "
            f"due={temporal.resolved_instant} fallback={draft.from_fallback}"
        )
        return TaskDraft(
            title=draft.title,
            description=draft.description,
            status=status,
            status_label=status_label(status, language),
            priority=decision.priority,
            priority_confidence=decision.confidence,
            priority_reason=decision.reason,
            due_date=temporal.resolved_instant,
            matched_span=temporal.matched_span,
            language=language,
        )

    def _extract_due_date(self, request: InterpretationInput) -> TemporalMatch:
        try:
            return self.temporal_extractor.extract(request.text, request.reference_instant)
        except Exception as e:
            # Handle any errors gracefully - a missing due date must not block task creation
            logger.error(f"Temporal extraction failed: {type(e).__name__}")
            return TemporalMatch()

    def _draft_fields(self, request: InterpretationInput) -> OracleDraft:
        try:
            return self.field_extractor.draft(request.text)
        except Exception as e:
            logger.error(f"Field extraction failed: {type(e).__name__}. Using local fallback.")
            return local_fallback_draft(request.text)


# Default interpreter (built on first use)
_default_interpreter: Optional[TaskInterpreter] = None


def get_default_interpreter() -> TaskInterpreter:
    """Get or create the default interpreter instance."""
    global _default_interpreter
    if _default_interpreter is None:
        _default_interpreter = TaskInterpreter()
    return _default_interpreter


def interpret(text: str) -> TaskDraft:
    """Interpret text with the default interpreter."""
    return get_default_interpreter().interpret(text)
