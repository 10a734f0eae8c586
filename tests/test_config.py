"""Tests for configuration values."""

import pytest

from caltime import DEFAULT_CONFIG, Config, Thresholds, configure


def test_defaults():
    assert DEFAULT_CONFIG.default_locale() == "en"
    assert DEFAULT_CONFIG.default_week_start() == 1
    assert DEFAULT_CONFIG.first_week_contains_date == 4
    assert DEFAULT_CONFIG.default_format() == "YYYY-MM-DD HH:mm:ss"
    assert DEFAULT_CONFIG.default_format("date") == "YYYY-MM-DD"
    assert DEFAULT_CONFIG.default_format("time") == "HH:mm:ss"
    assert DEFAULT_CONFIG.relative_time_thresholds() == Thresholds()


def test_configure_returns_new_value():
    """configure never modifies the base config."""
    config = configure(locale="tr", week_starts_on=0)
    assert config.locale == "tr"
    assert config.week_starts_on == 0
    assert DEFAULT_CONFIG.locale == "en"
    assert DEFAULT_CONFIG.week_starts_on == 1


def test_configure_merges_formats():
    """Partial formats keep the untouched kinds."""
    config = configure(formats={"date": "DD/MM/YYYY"})
    assert config.default_format("date") == "DD/MM/YYYY"
    assert config.default_format("time") == "HH:mm:ss"


def test_configure_merges_thresholds():
    base = configure(thresholds={"second": 30})
    config = configure(base, thresholds={"day": 5})
    assert config.thresholds == Thresholds(second=30, day=5)


def test_configure_none_keeps_base():
    config = configure(formats=None, thresholds=None)
    assert config == DEFAULT_CONFIG


def test_unknown_threshold_rejected():
    with pytest.raises(ValueError, match="Unknown threshold"):
        configure(thresholds={"decade": 3})


def test_thresholds_must_be_positive():
    with pytest.raises(ValueError, match="'hour' must be a positive number"):
        Thresholds(hour=0)


def test_week_starts_on_validated():
    with pytest.raises(ValueError, match="week_starts_on must be 0-6"):
        Config(week_starts_on=7)

    with pytest.raises(ValueError, match="Hint"):
        configure(week_starts_on=-1)


def test_first_week_contains_date_validated():
    with pytest.raises(ValueError, match="first_week_contains_date must be 1-7"):
        Config(first_week_contains_date=0)


def test_unknown_format_kind_rejected():
    with pytest.raises(ValueError, match="Unknown format kind"):
        configure(formats={"datetimes": "YYYY"})

    with pytest.raises(ValueError, match="Unknown format kind"):
        DEFAULT_CONFIG.default_format("week")


def test_relative_labels_override_per_key():
    """Overrides replace single keys and keep the locale's others."""
    config = configure(relative_time_labels={"mm": "%d mins"})
    labels = config.relative_time_labels_for()
    assert labels["mm"] == "%d mins"
    assert labels["hh"] == "%d hours"

    turkish = config.relative_time_labels_for("tr")
    assert turkish["mm"] == "%d mins"
    assert turkish["hh"] == "%d saat"
