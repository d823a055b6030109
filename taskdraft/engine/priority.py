"""Priority normalization for taskdraft.

Maps free-text or numeric priority signals onto the four canonical levels.
Keyword classes are checked in a fixed order: LOW, MEDIUM, HIGH, URGENT. A
phrase matching several classes resolves to the first one in that order
(e.g. "not urgent" is LOW).
"""

import re
from typing import Any, List, Optional, Pattern, Tuple

from taskdraft.models.task import TaskPriority

LOW_KEYWORDS = [
    "low", "faible", "basse", "bas", "bajo", "baja", "baixa", "baixo", "niedrig",
    "optional", "optionnel", "opcional", "when possible", "whenever", "eventually",
    "someday", "quand possible", "si possible", "cuando puedas", "quando possível",
    "not urgent", "pas urgent", "no urgente", "nicht dringend", "no rush",
]

MEDIUM_KEYWORDS = [
    "medium", "normal", "average", "moderate", "standard", "moyen", "moyenne",
    "medio", "media", "médio", "média", "mittel", "mittlere",
]

HIGH_KEYWORDS = [
    "high", "haute", "haut", "élevée", "élevé", "elevee", "eleve", "important",
    "importante", "alta", "alto", "hoch", "wichtig", "soon", "bientôt", "pronto",
]

URGENT_KEYWORDS = [
    "urgent", "urgente", "urgently", "asap", "emergency", "urgence", "emergencia",
    "immediately", "immédiat", "immédiatement", "immediat", "immediatement",
    "inmediato", "immediatamente", "dringend", "sofort", "critical", "critique", "crítico",
]


def _compile(words: List[str]) -> Pattern:
    alternatives = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(r"(?<!\w)(?:" + alternatives + r")(?!\w)", re.I)


# Fixed precedence: LOW first, URGENT last
_PRIORITY_CLASSES: List[Tuple[TaskPriority, Pattern]] = [
    (TaskPriority.LOW, _compile(LOW_KEYWORDS)),
    (TaskPriority.MEDIUM, _compile(MEDIUM_KEYWORDS)),
    (TaskPriority.HIGH, _compile(HIGH_KEYWORDS)),
    (TaskPriority.URGENT, _compile(URGENT_KEYWORDS)),
]


def _numeric_priority(value: str) -> TaskPriority:
    n = int(value)
    if n <= 1:
        return TaskPriority.LOW
    if n == 2:
        return TaskPriority.MEDIUM
    if n == 3:
        return TaskPriority.HIGH
    return TaskPriority.URGENT


def match_priority(raw: Any) -> Optional[TaskPriority]:
    """Map raw onto a canonical priority, or None if nothing matches.

    Args:
        raw: Priority signal (string, number, enum member or None)

    Returns:
        The matched TaskPriority, or None when raw is empty or unrecognized
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, TaskPriority):
        return raw
    try:
        s = str(raw).lower().strip()
    except Exception:
        return None
    if not s:
        return None

    for priority, pattern in _PRIORITY_CLASSES:
        if pattern.search(s):
            return priority

    if s.isdigit() and s.isascii():
        return _numeric_priority(s)
    return None


def normalize_priority(raw: Any) -> TaskPriority:
    """Map any priority signal onto a canonical priority. Never raises.

    Unrecognized or empty signals resolve to MEDIUM.
    """
    return match_priority(raw) or TaskPriority.MEDIUM
