"""Priority arbitration for taskdraft.

Decides the final priority of a draft from three kinds of signals, in a fixed
order:

1. The oracle's priority, only when it maps to a canonical level and its
   confidence is at least PRIORITY_CONFIDENCE_THRESHOLD.
2. Due-date proximity: within 24h is URGENT, within 7 days HIGH, later MEDIUM.
3. Keywords in the combined text: health/emergency, then financial, then
   generic urgency. Failing those, the oracle's unconfident priority if it
   maps, else MEDIUM.

The decision is deterministic: same inputs, same output.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from taskdraft.engine.priority import match_priority
from taskdraft.models.constants import (
    HIGH_WINDOW_DAYS,
    PRIORITY_CONFIDENCE_THRESHOLD,
    URGENT_WINDOW_HOURS,
)
from taskdraft.models.oracle import OracleDraft
from taskdraft.models.task import TaskPriority

logger = logging.getLogger(__name__)

HEALTH_RE = re.compile(
    r"(?<!\w)(?:douleur|urgence(?: m[ée]dicale)?|m[ée]decin|h[ôo]pital|sant[ée]|hospital|doctor|"
    r"chest pain|emergency|ambulance|emergencia|m[ée]dico|dolor|dor|emerg[êe]ncia|"
    r"arzt|krankenhaus|notfall|schmerz(?:en)?)(?!\w)",
    re.I,
)
FINANCIAL_RE = re.compile(
    r"(?<!\w)(?:facture|payer|paiement|pay[ée]|virement|loyer|invoice|bill|paid|pay|rent|"
    r"factura|pagar|pago|fatura|pagamento|boleto|rechnung|bezahlen|zahlung|[üu]berweisung|miete)(?!\w)",
    re.I,
)
URGENCY_RE = re.compile(
    r"(?<!\w)(?:asap|urgent|urgente|now|right away|immediately|maintenant|tout de suite|"
    r"imm[ée]diat(?:ement)?|ahora(?: mismo)?|agora|sofort|dringend)(?!\w)",
    re.I,
)


@dataclass(frozen=True)
class PriorityDecision:
    priority: TaskPriority
    confidence: Optional[float]
    reason: str


def _hours_until(due_date: datetime, reference: datetime) -> float:
    if (due_date.tzinfo is None) != (reference.tzinfo is None):
        due_date = due_date.replace(tzinfo=reference.tzinfo)
    return (due_date - reference) / timedelta(hours=1)


def priority_from_due_date(due_date: datetime, reference: datetime) -> PriorityDecision:
    """Priority implied by how close the due date is (overdue counts as urgent)."""
    hours = _hours_until(due_date, reference)
    if hours <= URGENT_WINDOW_HOURS:
        return PriorityDecision(TaskPriority.URGENT, None, f"Due within {URGENT_WINDOW_HOURS} hours")
    if hours <= HIGH_WINDOW_DAYS * 24:
        return PriorityDecision(TaskPriority.HIGH, None, f"Due within {HIGH_WINDOW_DAYS} days")
    return PriorityDecision(TaskPriority.MEDIUM, None, f"Due in more than {HIGH_WINDOW_DAYS} days")


def priority_from_keywords(text: str) -> Optional[PriorityDecision]:
    """Priority implied by domain keywords, or None."""
    if HEALTH_RE.search(text):
        return PriorityDecision(TaskPriority.URGENT, None, "Health or emergency keywords")
    if FINANCIAL_RE.search(text):
        return PriorityDecision(TaskPriority.HIGH, None, "Financial keywords")
    if URGENCY_RE.search(text):
        return PriorityDecision(TaskPriority.URGENT, None, "Urgency keywords")
    return None


def decide_priority(
    draft: OracleDraft,
    due_date: Optional[datetime],
    reference: datetime,
    status_source: str,
) -> PriorityDecision:
    """Pick the final priority for a draft.

    Args:
        draft: Oracle (or fallback) draft
        due_date: Resolved due date, if any
        reference: Instant the due date is measured from
        status_source: Combined oracle status, oracle description and raw text

    Returns:
        PriorityDecision with the chosen priority, the oracle's confidence and a short reason
    """
    oracle_priority = match_priority(draft.raw_priority)
    confidence = draft.confidence

    if oracle_priority is not None and confidence is not None and confidence >= PRIORITY_CONFIDENCE_THRESHOLD:
        reason = f"Model suggestion (confidence {confidence:.2f})"
        if draft.reason:
            reason = f"{reason}: {draft.reason}"
        logger.debug(f"Priority {oracle_priority.value} from oracle with confidence {confidence}")
        return PriorityDecision(oracle_priority, confidence, reason)

    if due_date is not None:
        decision = priority_from_due_date(due_date, reference)
        logger.debug(f"Priority {decision.priority.value} from due date {due_date}")
        return PriorityDecision(decision.priority, confidence, decision.reason)

    decision = priority_from_keywords((status_source or "").lower())
    if decision is not None:
        logger.debug(f"Priority {decision.priority.value} from keywords ({decision.reason})")
        return PriorityDecision(decision.priority, confidence, decision.reason)

    if oracle_priority is not None:
        if draft.from_fallback:
            reason = "Keyword guess from text"
        else:
            reason = "Model suggestion below confidence threshold"
        return PriorityDecision(oracle_priority, confidence, reason)

    return PriorityDecision(TaskPriority.MEDIUM, confidence, "Default priority")
