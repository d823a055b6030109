"""Temporal expression extraction for task text.

Turns a sentence such as "tomorrow at 10am buy milk" into a concrete due
instant. Parsing goes through an ordered chain of strategies: one
dateparser-backed parser per locale (hinted locales first), then direct ISO
and day-first numeric regexes. The first strategy that resolves an instant
wins. The raw result is then refined with time-of-day and future-shift rules.

Extraction never raises: when nothing is found the returned match is empty.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, time, timedelta
from typing import Callable, List, Optional, Tuple

from dateparser.search import search_dates

from taskdraft.models.constants import DEFAULT_HOUR
from taskdraft.models.temporal import Locale, TemporalMatch
from taskdraft.temporal.locales import (
    has_next_word,
    has_tomorrow_word,
    hinted_locales,
    is_clock_offset,
    looks_temporal,
    mentioned_weekday,
    parser_order,
    time_of_day_hour,
)

logger = logging.getLogger(__name__)


class DateParserStrategy:
    """One step of the parsing chain."""

    name = "base"

    def try_parse(self, text: str, reference: datetime) -> Optional[TemporalMatch]:
        raise NotImplementedError


class LocaleDateParser(DateParserStrategy):
    """Natural-language dates for a single locale, via dateparser."""

    def __init__(self, locale: Locale):
        self.locale = locale
        self.name = f"dateparser:{locale.value}"

    def try_parse(self, text: str, reference: datetime) -> Optional[TemporalMatch]:
        settings = {
            "RELATIVE_BASE": reference,
            "RETURN_AS_TIMEZONE_AWARE": False,
        }
        results = search_dates(text, languages=[self.locale.value], settings=settings)
        for span, value in results or []:
            if value is None or not span or not span.strip():
                continue
            if not looks_temporal(span):
                logger.debug(f"{self.name} ignored non-temporal span {span!r}")
                continue
            if value.tzinfo is not None:
                value = value.replace(tzinfo=None)
            return TemporalMatch(
                resolved_instant=value,
                matched_span=span.strip(),
                source_locale_hint=self.locale,
            )
        return None


class IsoDateParser(DateParserStrategy):
    """Direct YYYY-MM-DD match."""

    name = "iso"
    _ISO_RE = re.compile(r"(?<!\d)(?P<y>\d{4})-(?P<m>\d{1,2})-(?P<d>\d{1,2})(?!\d)")

    def try_parse(self, text: str, reference: datetime) -> Optional[TemporalMatch]:
        for m in self._ISO_RE.finditer(text):
            try:
                value = datetime(int(m.group("y")), int(m.group("m")), int(m.group("d")))
            except ValueError:
                continue
            return TemporalMatch(resolved_instant=value, matched_span=m.group(0))
        return None


class NumericDateParser(DateParserStrategy):
    """Delimited D/M/Y dates (day first); two-digit years mean 20YY."""

    name = "numeric"
    _DMY_RE = re.compile(r"(?<!\d)(?P<d>\d{1,2})[/.\-](?P<m>\d{1,2})[/.\-](?P<y>\d{4}|\d{2})(?!\d)")

    def try_parse(self, text: str, reference: datetime) -> Optional[TemporalMatch]:
        for m in self._DMY_RE.finditer(text):
            year = int(m.group("y"))
            if len(m.group("y")) == 2:
                year += 2000
            try:
                value = datetime(year, int(m.group("m")), int(m.group("d")))
            except ValueError:
                continue
            return TemporalMatch(resolved_instant=value, matched_span=m.group(0))
        return None


_CLOCK_PATTERNS = [
    # 10am, 10:30 pm, 7 p.m.
    re.compile(r"(?<![\d:])(?P<h>\d{1,2})(?::(?P<m>\d{2}))?\s*(?P<ampm>[ap])\.?m\.?(?!\w)", re.I),
    # 14:30
    re.compile(r"(?<![\d:])(?P<h>\d{1,2}):(?P<m>\d{2})(?![\d:])"),
    # 10h, 10h30, 10 Uhr
    re.compile(r"(?<![\d:])(?P<h>\d{1,2})\s*(?:h|uhr)(?P<m>\d{2})?(?!\w)", re.I),
    # at 9, à 9, a las 9, às 9, um 9
    re.compile(r"(?<!\w)(?:at|à|a las|a la|às|um)\s+(?P<h>\d{1,2})(?![\w:/.\-])", re.I),
]


def explicit_clock_time(text: str) -> Optional[time]:
    """Return the first explicit clock time written in text, if any."""
    for pattern in _CLOCK_PATTERNS:
        for m in pattern.finditer(text or ""):
            hour = int(m.group("h"))
            minute = int(m.groupdict().get("m") or 0)
            ampm = (m.groupdict().get("ampm") or "").lower()
            if ampm:
                if hour < 1 or hour > 12:
                    continue
                if hour == 12:
                    hour = 0
                if ampm == "p":
                    hour += 12
            if hour > 23 or minute > 59:
                continue
            return time(hour=hour, minute=minute)
    return None


def _next_weekday(reference: datetime, weekday: int) -> datetime:
    delta = (weekday - reference.weekday()) % 7
    if delta == 0:
        delta = 7
    return reference + timedelta(days=delta)


def refine_instant(
    instant: datetime,
    text: str,
    reference: datetime,
    span: Optional[str] = None,
) -> datetime:
    """Apply time-of-day rules, then push past instants into the future.

    An hour or minute offset ("in 2 hours") already resolved against the
    reference keeps the parser's time; only date-level results get the
    time-of-day default.
    """
    clock = explicit_clock_time(text)
    if clock is None and is_clock_offset(span or ""):
        return instant.replace(microsecond=0)
    if clock is None:
        hour = time_of_day_hour(text)
        clock = time(hour=hour if hour is not None else DEFAULT_HOUR)
    instant = instant.replace(hour=clock.hour, minute=clock.minute, second=0, microsecond=0)

    if instant >= reference:
        return instant

    if has_tomorrow_word(text):
        shifted = instant + timedelta(days=1)
        logger.debug(f"Past instant {instant} shifted +1 day (tomorrow word)")
        return shifted
    if has_next_word(text):
        shifted = instant + timedelta(days=7)
        logger.debug(f"Past instant {instant} shifted +7 days (next word)")
        return shifted
    weekday = mentioned_weekday(text)
    if weekday is not None:
        target = _next_weekday(reference, weekday)
        rolled = target.replace(hour=instant.hour, minute=instant.minute, second=0, microsecond=0)
        logger.debug(f"Past instant {instant} rolled forward to {rolled} (weekday {weekday})")
        return rolled
    return instant


class TemporalExtractor:
    """Find and resolve the due date mentioned in a sentence."""

    def __init__(
        self,
        locale_parser_factory: Callable[[Locale], DateParserStrategy] = LocaleDateParser,
        fallback_parsers: Optional[List[DateParserStrategy]] = None,
    ):
        self.locale_parser_factory = locale_parser_factory
        self.fallback_parsers = (
            fallback_parsers if fallback_parsers is not None else [IsoDateParser(), NumericDateParser()]
        )

    def parsers_for(self, text: str) -> List[DateParserStrategy]:
        """Ordered parser chain for text: locale parsers, then numeric fallbacks."""
        chain = [self.locale_parser_factory(locale) for locale in parser_order(text)]
        return chain + list(self.fallback_parsers)

    def extract(self, text: str, reference_instant: Optional[datetime] = None) -> TemporalMatch:
        """Extract the due instant from text, relative to reference_instant."""
        if not text or not text.strip():
            return TemporalMatch()

        reference = reference_instant or datetime.utcnow()
        tz = reference.tzinfo
        base = reference.replace(tzinfo=None)
        hints = hinted_locales(text)

        match, parser_name = self._first_match(text, base)
        if match is None:
            logger.debug("No temporal expression found")
            return TemporalMatch(source_locale_hint=hints[0] if hints else None)

        resolved = refine_instant(match.resolved_instant, text, base, match.matched_span)
        if tz is not None:
            resolved = resolved.replace(tzinfo=tz)
        logger.debug(f"Resolved {match.matched_span!r} to {resolved} via {parser_name}")
        return TemporalMatch(
            resolved_instant=resolved,
            matched_span=match.matched_span,
            source_locale_hint=hints[0] if hints else match.source_locale_hint,
        )

    def _first_match(self, text: str, base: datetime) -> Tuple[Optional[TemporalMatch], Optional[str]]:
        for parser in self.parsers_for(text):
            try:
                match = parser.try_parse(text, base)
            except Exception as e:
                # A broken strategy must not stop the chain
                logger.debug(f"Date parser {parser.name} failed: {type(e).__name__}")
                continue
            if match is not None and match.found:
                return match, parser.name
        return None, None


_default_extractor: Optional[TemporalExtractor] = None


def extract(text: str, reference_instant: Optional[datetime] = None) -> TemporalMatch:
    """Module-level shortcut using a shared stateless extractor."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = TemporalExtractor()
    return _default_extractor.extract(text, reference_instant)
