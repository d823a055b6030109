"""Status normalization and localized status labels."""

import re
from typing import Any, Dict, List, Optional, Pattern, Tuple

from taskdraft.models.constants import DEFAULT_LANGUAGE
from taskdraft.models.task import TaskStatus


def _compile(alternatives: List[str]) -> Pattern:
    return re.compile(r"(?<!\w)(?:" + "|".join(alternatives) + r")(?!\w)", re.I)


# Checked in this order: DONE, IN_PROGRESS, CANCELLED, TODO
_STATUS_FAMILIES: List[Tuple[TaskStatus, Pattern]] = [
    (TaskStatus.DONE, _compile([
        r"done", r"finished", r"completed", r"fini", r"finie", r"fait", r"termin[ée]",
        r"j'?ai (?:d[ée]j[àa] )?pay[ée]", r"pagad[oa]", r"paguei", r"pagou", r"ya pagu[ée]",
        r"he pagado", r"j[áa] paguei", r"j[áa] pago", r"terminado", r"conclu[íi]do", r"erledigt",
    ])),
    (TaskStatus.IN_PROGRESS, _compile([
        r"in[ _-]progress", r"working on", r"working", r"doing", r"en cours",
        r"(?:je suis |suis )?en train(?: de)?", r"(?:estoy )?trabajando", r"en progreso",
        r"estou trabalhando", r"em andamento", r"em progresso", r"ich arbeite", r"in bearbeitung",
    ])),
    (TaskStatus.CANCELLED, _compile([
        r"cancel", r"cancell?ed", r"annul", r"annul[ée]e?", r"annuler", r"anulad[oa]", r"cancelad[oa]",
        r"abbrechen", r"abgebrochen", r"abgesagt", r"storniert",
    ])),
    (TaskStatus.TODO, _compile([
        r"todo", r"to[ -]do", r"[àa] faire", r"por hacer", r"a fazer", r"zu erledigen",
    ])),
]

STATUS_LABELS: Dict[str, Dict[TaskStatus, str]] = {
    "en": {
        TaskStatus.TODO: "To Do",
        TaskStatus.IN_PROGRESS: "In Progress",
        TaskStatus.DONE: "Done",
        TaskStatus.CANCELLED: "Cancelled",
    },
    "fr": {
        TaskStatus.TODO: "À faire",
        TaskStatus.IN_PROGRESS: "En cours",
        TaskStatus.DONE: "Terminé",
        TaskStatus.CANCELLED: "Annulé",
    },
    "es": {
        TaskStatus.TODO: "Por hacer",
        TaskStatus.IN_PROGRESS: "En progreso",
        TaskStatus.DONE: "Hecho",
        TaskStatus.CANCELLED: "Cancelado",
    },
    "pt": {
        TaskStatus.TODO: "A fazer",
        TaskStatus.IN_PROGRESS: "Em progresso",
        TaskStatus.DONE: "Concluído",
        TaskStatus.CANCELLED: "Cancelado",
    },
    "de": {
        TaskStatus.TODO: "Zu erledigen",
        TaskStatus.IN_PROGRESS: "In Bearbeitung",
        TaskStatus.DONE: "Erledigt",
        TaskStatus.CANCELLED: "Abgebrochen",
    },
}


def _canonical_status(s: str) -> Optional[TaskStatus]:
    key = re.sub(r"[\s\-]+", "_", s.strip()).upper()
    try:
        return TaskStatus(key)
    except ValueError:
        return None


def normalize_status(signal: Any) -> TaskStatus:
    """Map a free-text status signal onto a canonical status. Never raises.

    A signal that already names a canonical status (case-insensitive) is used
    as is. Otherwise the multilingual families are tried in order
    DONE, IN_PROGRESS, CANCELLED, TODO. Anything else is TODO.
    """
    if signal is None:
        return TaskStatus.TODO
    if isinstance(signal, TaskStatus):
        return signal
    try:
        s = str(signal)
    except Exception:
        return TaskStatus.TODO
    if not s.strip():
        return TaskStatus.TODO

    canonical = _canonical_status(s)
    if canonical is not None:
        return canonical

    lowered = s.lower()
    for status, pattern in _STATUS_FAMILIES:
        if pattern.search(lowered):
            return status
    return TaskStatus.TODO


def supported_language(language: Optional[str]) -> Optional[str]:
    """Two-letter code if labels exist for it, else None."""
    if not language:
        return None
    code = language.strip().lower()[:2]
    return code if code in STATUS_LABELS else None


def status_label(status: TaskStatus, language: Optional[str] = None) -> str:
    """Display label for status in language, falling back to English."""
    code = supported_language(language) or DEFAULT_LANGUAGE
    return STATUS_LABELS[code].get(status) or STATUS_LABELS[DEFAULT_LANGUAGE][status]
