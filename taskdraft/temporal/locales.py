"""Per-locale keyword tables used by the temporal extractor.

Keywords are lowercase and matched on word boundaries. Tables are ordered:
the order in which locale hints are collected and time-of-day families are
checked follows the order of the entries below.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Pattern, Tuple

from taskdraft.models.constants import AFTERNOON_HOUR, EVENING_HOUR, MORNING_HOUR, NOON_HOUR
from taskdraft.models.temporal import Locale

# Fixed parser order when a locale was not hinted by the text.
FALLBACK_LOCALE_ORDER: List[Locale] = [Locale.FR, Locale.ES, Locale.PT, Locale.DE, Locale.EN]


def _word_pattern(words: List[str]) -> Pattern:
    alternatives = "|".join(re.escape(w) for w in sorted(words, key=len, reverse=True))
    return re.compile(r"(?<!\w)(?:" + alternatives + r")(?!\w)", re.I)


TOMORROW_WORDS: Dict[Locale, List[str]] = {
    Locale.FR: ["demain", "après-demain", "apres-demain"],
    Locale.ES: ["mañana", "manana", "pasado mañana"],
    Locale.PT: ["amanhã", "amanha", "depois de amanhã"],
    Locale.DE: ["morgen", "übermorgen"],
    Locale.EN: ["tomorrow", "tmrw"],
}

TODAY_WORDS: Dict[Locale, List[str]] = {
    Locale.FR: ["aujourd'hui", "aujourdhui", "ce soir"],
    Locale.ES: ["hoy", "esta noche"],
    Locale.PT: ["hoje", "esta noite"],
    Locale.DE: ["heute", "heute abend"],
    Locale.EN: ["today", "tonight"],
}

NEXT_WORDS: Dict[Locale, List[str]] = {
    Locale.FR: ["prochain", "prochaine", "suivant", "suivante"],
    Locale.ES: ["próximo", "próxima", "proximo", "proxima", "que viene", "siguiente"],
    Locale.PT: ["próximo", "próxima", "proximo", "proxima", "que vem", "seguinte"],
    Locale.DE: ["nächste", "nächsten", "nächster", "nächstes", "naechste", "kommenden"],
    Locale.EN: ["next"],
}

MONTH_WORDS: Dict[Locale, List[str]] = {
    Locale.FR: [
        "janvier", "février", "fevrier", "mars", "avril", "mai", "juin", "juillet",
        "août", "aout", "septembre", "octobre", "novembre", "décembre", "decembre",
    ],
    Locale.ES: [
        "enero", "febrero", "marzo", "abril", "mayo", "junio", "julio", "agosto",
        "septiembre", "setiembre", "octubre", "noviembre", "diciembre",
    ],
    Locale.PT: [
        "janeiro", "fevereiro", "março", "marco", "abril", "maio", "junho", "julho",
        "agosto", "setembro", "outubro", "novembro", "dezembro",
    ],
    Locale.DE: [
        "januar", "februar", "märz", "maerz", "april", "mai", "juni", "juli",
        "august", "september", "oktober", "november", "dezember",
    ],
    Locale.EN: [
        "january", "february", "march", "april", "may", "june", "july", "august",
        "september", "october", "november", "december",
    ],
}

# Weekday names by locale, index 0 = Monday (datetime.weekday()).
WEEKDAY_WORDS: Dict[Locale, List[List[str]]] = {
    Locale.FR: [["lundi"], ["mardi"], ["mercredi"], ["jeudi"], ["vendredi"], ["samedi"], ["dimanche"]],
    Locale.ES: [
        ["lunes"], ["martes"], ["miércoles", "miercoles"], ["jueves"],
        ["viernes"], ["sábado", "sabado"], ["domingo"],
    ],
    Locale.PT: [
        ["segunda-feira", "segunda"], ["terça-feira", "terça", "terca"],
        ["quarta-feira", "quarta"], ["quinta-feira", "quinta"],
        ["sexta-feira", "sexta"], ["sábado", "sabado"], ["domingo"],
    ],
    Locale.DE: [
        ["montag"], ["dienstag"], ["mittwoch"], ["donnerstag"],
        ["freitag"], ["samstag", "sonnabend"], ["sonntag"],
    ],
    Locale.EN: [
        ["monday"], ["tuesday", "tues", "tue"], ["wednesday", "weds"],
        ["thursday", "thurs", "thur", "thu"], ["friday", "fri"],
        ["saturday"], ["sunday"],
    ],
}

# Units of relative offsets ("in 3 days", "dans 2 heures").
DURATION_UNIT_WORDS: Dict[Locale, List[str]] = {
    Locale.FR: [
        "minute", "minutes", "heure", "heures", "jour", "jours", "semaine", "semaines",
        "mois", "ans", "année", "années",
    ],
    Locale.ES: [
        "minuto", "minutos", "hora", "horas", "día", "días", "dia", "dias", "semana", "semanas",
        "mes", "meses", "año", "años",
    ],
    Locale.PT: [
        "minuto", "minutos", "hora", "horas", "dia", "dias", "semana", "semanas",
        "mês", "meses", "ano", "anos",
    ],
    Locale.DE: [
        "minute", "minuten", "stunde", "stunden", "tag", "tage", "tagen", "woche", "wochen",
        "monat", "monate", "monaten", "jahr", "jahre", "jahren",
    ],
    Locale.EN: [
        "min", "mins", "minute", "minutes", "hr", "hrs", "hour", "hours", "day", "days",
        "week", "weeks", "month", "months", "year", "years",
    ],
}

# Units whose offset already carries a clock time (the hour/minute subset of the table above).
CLOCK_OFFSET_UNITS: List[str] = [
    "min", "mins", "minute", "minutes", "minuto", "minutos", "minuten",
    "hr", "hrs", "hour", "hours", "heure", "heures", "hora", "horas", "stunde", "stunden",
]

# Time-of-day families, checked in this order across all locales.
TIME_OF_DAY_WORDS: List[Tuple[str, int, List[str]]] = [
    ("morning", MORNING_HOUR, [
        "morning", "matin", "matinée", "matinee", "por la mañana", "de manhã",
        "de manha", "manhã", "morgens", "vormittag", "früh",
    ]),
    ("afternoon", AFTERNOON_HOUR, [
        "afternoon", "après-midi", "apres-midi", "aprem", "por la tarde", "tarde", "nachmittag",
        "nachmittags",
    ]),
    ("evening", EVENING_HOUR, [
        "evening", "tonight", "soir", "soirée", "soiree", "noche", "noite", "abend", "abends",
    ]),
    ("noon", NOON_HOUR, [
        "noon", "midday", "midi", "mediodía", "mediodia", "meio-dia", "mittag", "mittags",
    ]),
]


def _flatten(table: Dict[Locale, List[str]]) -> List[str]:
    out: List[str] = []
    for words in table.values():
        out.extend(words)
    return out


TOMORROW_RE = _word_pattern(_flatten(TOMORROW_WORDS))
NEXT_RE = _word_pattern(_flatten(NEXT_WORDS))
TIME_OF_DAY_RES: List[Tuple[str, int, Pattern]] = [
    (name, hour, _word_pattern(words)) for name, hour, words in TIME_OF_DAY_WORDS
]

_WEEKDAY_RES: List[Tuple[Pattern, int]] = []
for _locale, _days in WEEKDAY_WORDS.items():
    for _index, _names in enumerate(_days):
        _WEEKDAY_RES.append((_word_pattern(_names), _index))

# Hint table: relative-day words first, then month names, weekdays, "next" words and duration units.
_HINT_TABLES = [TOMORROW_WORDS, TODAY_WORDS, MONTH_WORDS, NEXT_WORDS, DURATION_UNIT_WORDS]
_HINT_RES: List[Tuple[Pattern, Locale]] = []
for _table in _HINT_TABLES:
    for _locale, _words in _table.items():
        _HINT_RES.append((_word_pattern(_words), _locale))
    if _table is MONTH_WORDS:
        for _locale, _days in WEEKDAY_WORDS.items():
            _HINT_RES.append((_word_pattern([n for names in _days for n in names]), _locale))

_ALL_TEMPORAL_WORDS: List[str] = []
for _table in _HINT_TABLES:
    _ALL_TEMPORAL_WORDS.extend(_flatten(_table))
for _days in WEEKDAY_WORDS.values():
    for _names in _days:
        _ALL_TEMPORAL_WORDS.extend(_names)
for _name, _hour, _words in TIME_OF_DAY_WORDS:
    _ALL_TEMPORAL_WORDS.extend(_words)
_TEMPORAL_WORD_RE = _word_pattern(_ALL_TEMPORAL_WORDS)

# Numbers that only read as dates or times in these shapes
_DATE_SHAPE_RES: List[Pattern] = [
    # 15/06, 2025-06-15, 15.06.25
    re.compile(r"(?<!\d)\d{1,4}[/.\-]\d{1,2}(?!\d)"),
    # 14:30, 10h30
    re.compile(r"(?<!\d)\d{1,2}[:h]\d{2}(?!\d)", re.I),
    # 10am, 7 p.m., 10h, 8 Uhr
    re.compile(r"(?<!\d)\d{1,2}\s*(?:[ap]\.?m\.?|h|uhr)(?!\w)", re.I),
    # 15th, 1er, 2º, 3.ª
    re.compile(r"(?<!\d)\d{1,2}(?:st|nd|rd|th|er|re|e|ème|º|ª|\.º|\.ª)(?!\w)", re.I),
    # at 9, à 9, a las 9, às 9, um 9
    re.compile(r"(?<!\w)(?:at|à|a las|a la|às|um)\s+\d{1,2}(?!\d)", re.I),
    # day of month: le 15, el 15, dia 15, am 15., on the 15
    re.compile(r"(?<!\w)(?:le|el|dia|am|on the)\s+\d{1,2}(?!\d)", re.I),
    # four-digit year
    re.compile(r"(?<!\d)(?:19|20)\d{2}(?!\d)"),
]

_CLOCK_OFFSET_RE = re.compile(
    r"(?<!\w)(?:\d+|an?|one|une?|una?|uma?|eine[rm]?|half an?)[\s\-]+(?:"
    + "|".join(re.escape(u) for u in sorted(CLOCK_OFFSET_UNITS, key=len, reverse=True))
    + r")(?!\w)",
    re.I,
)


def hinted_locales(text: str) -> List[Locale]:
    """Locales whose keywords appear in text, deduplicated, in scan order."""
    lowered = (text or "").lower()
    out: List[Locale] = []
    for pattern, locale in _HINT_RES:
        if locale not in out and pattern.search(lowered):
            out.append(locale)
    return out


def parser_order(text: str) -> List[Locale]:
    """Hinted locales first, then the remaining locales in fallback order."""
    order = hinted_locales(text)
    for locale in FALLBACK_LOCALE_ORDER:
        if locale not in order:
            order.append(locale)
    return order


def looks_temporal(span: str) -> bool:
    """True if span holds a date/time keyword or a number shaped like a date or time.

    A bare number next to arbitrary words ("Do 3") does not count.
    """
    if not span:
        return False
    if _TEMPORAL_WORD_RE.search(span.lower()):
        return True
    return any(pattern.search(span) for pattern in _DATE_SHAPE_RES)


def is_clock_offset(span: str) -> bool:
    """True if span is an hour or minute offset ("in 2 hours", "dans 30 minutes")."""
    return bool(_CLOCK_OFFSET_RE.search(span or ""))


def time_of_day_hour(text: str) -> Optional[int]:
    """Hour for the first time-of-day family mentioned in text, if any."""
    lowered = (text or "").lower()
    for _name, hour, pattern in TIME_OF_DAY_RES:
        if pattern.search(lowered):
            return hour
    return None


def has_tomorrow_word(text: str) -> bool:
    return bool(TOMORROW_RE.search((text or "").lower()))


def has_next_word(text: str) -> bool:
    return bool(NEXT_RE.search((text or "").lower()))


def mentioned_weekday(text: str) -> Optional[int]:
    """Weekday index (Monday = 0) of the first weekday name found, if any."""
    lowered = (text or "").lower()
    best: Optional[Tuple[int, int]] = None
    for pattern, index in _WEEKDAY_RES:
        m = pattern.search(lowered)
        if m and (best is None or m.start() < best[0]):
            best = (m.start(), index)
    return best[1] if best else None
