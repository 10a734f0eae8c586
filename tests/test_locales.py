"""Tests for locale tables and lookups."""

from dataclasses import replace

import pytest

from caltime import EN, TR, Locale, LocaleRegistry


def test_english_names():
    """English names are indexed from 0."""
    registry = LocaleRegistry()
    assert registry.month_name("en", 0) == "January"
    assert registry.month_name_short("en", 8) == "Sep"
    assert registry.weekday_name("en", 0) == "Sunday"
    assert registry.weekday_name_short("en", 6) == "Sat"
    assert registry.weekday_name_min("en", 3) == "We"


def test_turkish_names():
    registry = LocaleRegistry()
    assert registry.month_name("tr", 5) == "Haziran"
    assert registry.weekday_name("tr", 1) == "Pazartesi"
    assert registry.ordinal("tr", 3) == "3."


def test_unknown_locale_falls_back_to_english():
    """Unregistered locale names read as English."""
    registry = LocaleRegistry()
    assert registry.month_name("xx", 0) == "January"
    assert registry.resolve("xx") is EN
    assert registry.get("xx") is None


def test_out_of_range_index_is_empty():
    registry = LocaleRegistry()
    assert registry.month_name("en", 12) == ""
    assert registry.weekday_name("en", -1) == ""


@pytest.mark.parametrize(
    "n, expected",
    [(1, "1st"), (2, "2nd"), (3, "3rd"), (4, "4th"), (11, "11th"),
     (12, "12th"), (13, "13th"), (21, "21st"), (22, "22nd"), (111, "111th")],
)
def test_english_ordinals(n, expected):
    """Teens take "th"; other numbers follow their last digit."""
    assert LocaleRegistry().ordinal("en", n) == expected


def test_register_custom_locale():
    """A registered locale is used for lookups, long formats fall back."""
    german = replace(
        EN,
        name="de",
        months=("Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
                "August", "September", "Oktober", "November", "Dezember"),
        formats={"L": "DD.MM.YYYY"},
    )
    registry = LocaleRegistry().register(german)
    assert "de" in registry
    assert registry.names() == ["de", "en", "tr"]
    assert registry.month_name("de", 2) == "März"
    assert registry.long_format("de", "L") == "DD.MM.YYYY"
    assert registry.long_format("de", "LT") == "h:mm A"


def test_registries_are_independent():
    """Registering into one registry does not affect another."""
    first = LocaleRegistry()
    first.register(replace(TR, name="tr-x"))
    assert "tr-x" in first
    assert "tr-x" not in LocaleRegistry()


def test_locale_requires_complete_tables():
    with pytest.raises(ValueError, match="12 month names"):
        replace(EN, name="bad", months=("Jan",))

    with pytest.raises(ValueError, match="7 entries in weekdays_min"):
        replace(EN, name="bad", weekdays_min=("Su",))

    labels = dict(EN.relative_time)
    del labels["yy"]
    with pytest.raises(ValueError, match="missing relative-time labels: yy"):
        Locale(
            name="bad",
            months=EN.months,
            months_short=EN.months_short,
            weekdays=EN.weekdays,
            weekdays_short=EN.weekdays_short,
            weekdays_min=EN.weekdays_min,
            relative_time=labels,
            ordinal=str,
        )
