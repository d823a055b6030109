"""Tests for temporal extraction (locale hinting, parser chain, post-processing)."""

import pytest
from datetime import datetime, time, timezone

from taskdraft.models.temporal import Locale, TemporalMatch
from taskdraft.temporal.extractor import (
    DateParserStrategy,
    IsoDateParser,
    NumericDateParser,
    TemporalExtractor,
    explicit_clock_time,
    extract,
    refine_instant,
)
from taskdraft.temporal.locales import (
    hinted_locales,
    is_clock_offset,
    looks_temporal,
    mentioned_weekday,
    parser_order,
    time_of_day_hour,
)


class FakeLocaleParser(DateParserStrategy):
    """Locale parser returning a canned result and recording calls."""

    calls = []

    def __init__(self, locale, results):
        self.locale = locale
        self.name = f"fake:{locale.value}"
        self.results = results

    def try_parse(self, text, reference):
        FakeLocaleParser.calls.append(self.locale)
        result = self.results.get(self.locale)
        if isinstance(result, Exception):
            raise result
        return result


def fake_extractor(results):
    FakeLocaleParser.calls = []
    return TemporalExtractor(locale_parser_factory=lambda locale: FakeLocaleParser(locale, results))


class TestLocaleHints:
    """Locale hinting and parser order."""

    def test_no_hint_uses_fallback_order(self):
        assert hinted_locales("buy milk") == []
        assert parser_order("buy milk") == [Locale.FR, Locale.ES, Locale.PT, Locale.DE, Locale.EN]

    def test_english_hint_first(self):
        assert parser_order("tomorrow at 10am") == [Locale.EN, Locale.FR, Locale.ES, Locale.PT, Locale.DE]

    def test_spanish_hint(self):
        assert parser_order("mañana comprar leche")[0] == Locale.ES

    def test_portuguese_hint(self):
        assert parser_order("amanhã comprar pão")[0] == Locale.PT

    def test_multiple_hints_in_scan_order(self):
        """Relative-day words are scanned before weekday names."""
        assert parser_order("morgen Meeting, not monday") == [Locale.DE, Locale.EN, Locale.FR, Locale.ES, Locale.PT]

    def test_hints_are_deduplicated(self):
        order = parser_order("demain matin, lundi prochain, janvier")
        assert order.count(Locale.FR) == 1
        assert len(order) == 5

    def test_looks_temporal(self):
        assert looks_temporal("at 10")
        assert looks_temporal("demain")
        assert not looks_temporal("here")
        assert not looks_temporal("")

    @pytest.mark.parametrize("span", ["15/06", "the 15th", "in 3 days", "le 15", "14:30", "2026"])
    def test_date_shaped_numbers_are_temporal(self, span):
        assert looks_temporal(span)

    @pytest.mark.parametrize("span", ["Do 3", "3", "buy 12 eggs", "room 42"])
    def test_bare_numbers_are_not_temporal(self, span):
        assert not looks_temporal(span)

    @pytest.mark.parametrize("span", ["in 2 hours", "in 45 mins", "dans 30 minutes", "in an hour", "en 2 horas"])
    def test_clock_offsets(self, span):
        assert is_clock_offset(span)

    @pytest.mark.parametrize("span", ["in 3 days", "tomorrow", "at 10", "", "2 weeks"])
    def test_not_clock_offsets(self, span):
        assert not is_clock_offset(span)

    def test_duration_unit_hints_locale(self):
        assert parser_order("submit the form in 2 hours")[0] == Locale.EN
        assert parser_order("llamar en 2 horas")[0] in (Locale.ES, Locale.PT)

    def test_time_of_day_families(self):
        assert time_of_day_hour("tomorrow morning") == 9
        assert time_of_day_hour("demain après-midi") == 15
        assert time_of_day_hour("heute abend") == 18
        assert time_of_day_hour("à midi") == 12
        assert time_of_day_hour("buy milk") is None

    def test_mentioned_weekday(self):
        assert mentioned_weekday("call mom on friday") == 4
        assert mentioned_weekday("lundi prochain") == 0
        assert mentioned_weekday("no day") is None


class TestExplicitClockTime:
    """Explicit clock times written in the text."""

    @pytest.mark.parametrize("text,expected", [
        ("tomorrow at 10am", time(10, 0)),
        ("call at 10 pm", time(22, 0)),
        ("12am", time(0, 0)),
        ("lunch 12pm", time(12, 0)),
        ("meeting 14:30", time(14, 30)),
        ("demain à 10h30", time(10, 30)),
        ("rdv à 9", time(9, 0)),
        ("um 8 Uhr", time(8, 0)),
    ])
    def test_clock_times(self, text, expected):
        assert explicit_clock_time(text) == expected

    @pytest.mark.parametrize("text", ["2025-06-15", "buy 3 apples", "25:00", "", "15/06/2025"])
    def test_no_clock_time(self, text):
        assert explicit_clock_time(text) is None


class TestRefineInstant:
    """Time-of-day and future-shift post-processing."""

    def test_default_hour(self, reference_instant):
        result = refine_instant(datetime(2025, 6, 15), "2025-06-15", reference_instant)
        assert result == datetime(2025, 6, 15, 9, 0)

    def test_explicit_time_wins_over_keywords(self, reference_instant):
        result = refine_instant(datetime(2025, 1, 2), "tomorrow morning at 7:45", reference_instant)
        assert result == datetime(2025, 1, 2, 7, 45)

    @pytest.mark.parametrize("text,hour", [
        ("tomorrow morning", 9),
        ("tomorrow afternoon", 15),
        ("tomorrow evening", 18),
        ("tomorrow at noon", 12),
        ("demain après-midi", 15),
    ])
    def test_time_of_day_keywords(self, reference_instant, text, hour):
        result = refine_instant(datetime(2025, 1, 2, 0, 0), text, reference_instant)
        assert result == datetime(2025, 1, 2, hour, 0)

    def test_future_instant_not_shifted(self, reference_instant):
        result = refine_instant(datetime(2025, 3, 1), "march 1", reference_instant)
        assert result == datetime(2025, 3, 1, 9, 0)

    def test_past_with_tomorrow_word_shifts_one_day(self, reference_instant):
        result = refine_instant(datetime(2024, 12, 31, 10, 0), "tomorrow 10am", reference_instant)
        assert result == datetime(2025, 1, 1, 10, 0)

    def test_past_with_next_word_shifts_one_week(self, reference_instant):
        result = refine_instant(datetime(2024, 12, 30), "next week", reference_instant)
        assert result == datetime(2025, 1, 6, 9, 0)

    def test_past_weekday_rolls_forward(self, reference_instant):
        """Monday seen from Wednesday 2025-01-01 is Monday 2025-01-06."""
        result = refine_instant(datetime(2024, 12, 30), "monday", reference_instant)
        assert result == datetime(2025, 1, 6, 9, 0)

    def test_same_weekday_rolls_a_full_week(self, reference_instant):
        """Wednesday seen from a Wednesday is never today."""
        result = refine_instant(datetime(2024, 12, 25), "wednesday evening", reference_instant)
        assert result == datetime(2025, 1, 8, 18, 0)

    def test_weekday_roll_keeps_time(self, reference_instant):
        result = refine_instant(datetime(2024, 12, 27), "vendredi à 14h", reference_instant)
        assert result == datetime(2025, 1, 3, 14, 0)

    def test_past_without_keywords_stays_past(self, reference_instant):
        result = refine_instant(datetime(2024, 3, 1), "2024-03-01", reference_instant)
        assert result == datetime(2024, 3, 1, 9, 0)

    def test_hour_offset_keeps_resolved_time(self):
        reference = datetime(2025, 1, 1, 14, 0)
        instant = datetime(2025, 1, 1, 16, 0, 0, 250)
        result = refine_instant(instant, "submit the form in 2 hours", reference, span="in 2 hours")
        assert result == datetime(2025, 1, 1, 16, 0)

    def test_day_offset_gets_default_hour(self):
        reference = datetime(2025, 1, 1, 14, 0)
        result = refine_instant(datetime(2025, 1, 4, 14, 0), "pay rent in 3 days", reference, span="in 3 days")
        assert result == datetime(2025, 1, 4, 9, 0)

    def test_explicit_clock_beats_offset(self):
        reference = datetime(2025, 1, 1, 14, 0)
        result = refine_instant(datetime(2025, 1, 1, 16, 0), "in 2 hours, at 5pm", reference, span="in 2 hours")
        assert result == datetime(2025, 1, 1, 17, 0)


class TestParserChain:
    """Ordered strategies; first success wins."""

    def test_first_success_wins(self, reference_instant):
        hit = TemporalMatch(resolved_instant=datetime(2025, 2, 1), matched_span="1 février")
        extractor = fake_extractor({Locale.ES: hit})
        result = extractor.extract("pagar 1 febrero", reference_instant)
        assert result.resolved_instant == datetime(2025, 2, 1, 9, 0)
        assert result.matched_span == "1 février"
        # Hinted ES first, so nothing after it is tried
        assert FakeLocaleParser.calls == [Locale.ES]

    def test_fallback_order_when_no_hint(self, reference_instant):
        hit = TemporalMatch(resolved_instant=datetime(2025, 2, 1), matched_span="x1")
        extractor = fake_extractor({Locale.DE: hit})
        extractor.extract("item x1", reference_instant)
        assert FakeLocaleParser.calls == [Locale.FR, Locale.ES, Locale.PT, Locale.DE]

    def test_failing_strategy_does_not_stop_chain(self, reference_instant):
        hit = TemporalMatch(resolved_instant=datetime(2025, 2, 1), matched_span="x1")
        extractor = fake_extractor({Locale.FR: RuntimeError("broken"), Locale.ES: hit})
        result = extractor.extract("item x1", reference_instant)
        assert result.resolved_instant == datetime(2025, 2, 1, 9, 0)

    def test_empty_candidate_is_skipped(self, reference_instant):
        extractor = fake_extractor({Locale.FR: TemporalMatch()})
        result = extractor.extract("rien", reference_instant)
        assert result.resolved_instant is None

    def test_iso_fallback(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("report due 2025-06-15", reference_instant)
        assert result.resolved_instant == datetime(2025, 6, 15, 9, 0)
        assert result.matched_span == "2025-06-15"

    def test_numeric_fallback_day_first(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("pay rent 05/02/2025", reference_instant)
        assert result.resolved_instant == datetime(2025, 2, 5, 9, 0)

    def test_numeric_fallback_two_digit_year(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("dentist 15.06.25", reference_instant)
        assert result.resolved_instant == datetime(2025, 6, 15, 9, 0)

    def test_invalid_numeric_date_is_ignored(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("code 31/02/2025", reference_instant)
        assert result.resolved_instant is None
        assert result.matched_span is None

    def test_blank_text(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("   ", reference_instant)
        assert result == TemporalMatch()
        assert FakeLocaleParser.calls == []

    def test_timezone_aware_reference(self):
        extractor = fake_extractor({})
        reference = datetime(2025, 1, 1, tzinfo=timezone.utc)
        result = extractor.extract("2025-06-15", reference)
        assert result.resolved_instant == datetime(2025, 6, 15, 9, 0, tzinfo=timezone.utc)

    def test_locale_hint_reported(self, reference_instant):
        extractor = fake_extractor({})
        result = extractor.extract("demain 2025-06-15", reference_instant)
        assert result.source_locale_hint == Locale.FR


class TestNumericParsers:
    """Direct regex strategies."""

    def test_iso_parser_rejects_invalid_month(self, reference_instant):
        assert IsoDateParser().try_parse("2025-13-01", reference_instant) is None

    def test_numeric_parser_four_digit_year(self, reference_instant):
        match = NumericDateParser().try_parse("on 1-12-2026", reference_instant)
        assert match.resolved_instant == datetime(2026, 12, 1)


class TestExtractWithDateparser:
    """End-to-end extraction with the real locale parsers."""

    def test_tomorrow_at_ten(self, reference_instant):
        result = extract("tomorrow at 10am", reference_instant)
        assert result.resolved_instant == datetime(2025, 1, 2, 10, 0)
        assert result.source_locale_hint == Locale.EN

    def test_no_date(self, reference_instant):
        result = extract("no date here", reference_instant)
        assert not result.found
        assert result.matched_span is None

    def test_bare_count_is_not_a_date(self, reference_instant):
        result = extract("Do 3 pushups", reference_instant)
        assert not result.found
        assert result.matched_span is None

    def test_hour_offset_from_afternoon_reference(self):
        reference = datetime(2025, 1, 1, 14, 0)
        result = extract("submit the form in 2 hours", reference)
        assert result.resolved_instant == datetime(2025, 1, 1, 16, 0)

    def test_minute_offset_from_afternoon_reference(self):
        reference = datetime(2025, 1, 1, 14, 0)
        result = extract("call back in 45 mins", reference)
        assert result.resolved_instant == datetime(2025, 1, 1, 14, 45)

    def test_tomorrow_from_afternoon_reference_uses_default_hour(self):
        result = extract("tomorrow", datetime(2025, 1, 1, 14, 0))
        assert result.resolved_instant == datetime(2025, 1, 2, 9, 0)

    def test_iso_date_gets_default_time(self, reference_instant):
        result = extract("2025-06-15", reference_instant)
        assert result.resolved_instant == datetime(2025, 6, 15, 9, 0)

    def test_bare_weekday_is_next_occurrence(self, reference_instant):
        result = extract("monday", reference_instant)
        assert result.resolved_instant == datetime(2025, 1, 6, 9, 0)
        assert result.resolved_instant > reference_instant

    def test_never_raises(self, reference_instant):
        for text in ["", "🙂🙂", "{}[]()", "x" * 500, "31/31/31", "demain demain demain"]:
            assert isinstance(extract(text, reference_instant), TemporalMatch)
