"""Shared fixtures: configs that never consult the host clock or zone."""

import pytest

from caltime import Config, FixedOffsetResolver

# 2024-06-15T14:30:45Z, a Saturday
FROZEN_NOW = 1718461845000

FIXED_OFFSETS = {
    "UTC": 0,
    "Europe/Istanbul": 180,
    "Asia/Kolkata": 330,
    "America/New_York": -300,
}


@pytest.fixture
def resolver() -> FixedOffsetResolver:
    return FixedOffsetResolver(FIXED_OFFSETS)


@pytest.fixture
def utc_config(resolver: FixedOffsetResolver) -> Config:
    """UTC as the local zone, weeks starting Monday, clock frozen."""
    return Config(timezone="UTC", resolver=resolver, clock=lambda: FROZEN_NOW)


@pytest.fixture
def istanbul_config(resolver: FixedOffsetResolver) -> Config:
    return Config(
        timezone="Europe/Istanbul", resolver=resolver, clock=lambda: FROZEN_NOW
    )
