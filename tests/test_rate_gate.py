"""Tests for the minimum-gap rate gate."""

import asyncio
import time

import pytest

from manuscript_ai.ai.manuscript.rate_gate import RateGate

GAP = 0.2
# asyncio.sleep may wake marginally early on coarse clocks
TOLERANCE = 0.01


@pytest.mark.asyncio
async def test_first_call_is_not_delayed():
    """Test the first call through a fresh gate passes immediately."""
    gate = RateGate(GAP)

    started = time.monotonic()
    await gate.throttle()

    assert time.monotonic() - started < GAP
    assert gate.last_release is not None


@pytest.mark.asyncio
async def test_back_to_back_calls_are_separated_by_gap():
    """Test consecutive releases are at least the minimum gap apart."""
    gate = RateGate(GAP)

    await gate.throttle()
    first_release = gate.last_release
    await gate.throttle()
    second_release = gate.last_release

    assert second_release - first_release >= GAP - TOLERANCE


@pytest.mark.asyncio
async def test_racing_callers_each_honor_gap():
    """Test concurrent callers are serialized against the global last release."""
    gate = RateGate(GAP)
    releases: list[float] = []

    async def call() -> None:
        await gate.throttle()
        releases.append(gate.last_release)

    await asyncio.gather(call(), call(), call())

    releases.sort()
    assert len(releases) == 3
    for previous, current in zip(releases, releases[1:]):
        assert current - previous >= GAP - TOLERANCE


@pytest.mark.asyncio
async def test_no_wait_once_gap_has_passed():
    """Test a call made after the gap has elapsed is not delayed further."""
    gate = RateGate(0.05)

    await gate.throttle()
    await asyncio.sleep(0.1)
    started = time.monotonic()
    await gate.throttle()

    assert time.monotonic() - started < 0.05


@pytest.mark.asyncio
async def test_zero_gap_never_waits():
    gate = RateGate(0)

    started = time.monotonic()
    for _ in range(5):
        await gate.throttle()

    assert time.monotonic() - started < 0.1


def test_negative_gap_is_rejected():
    with pytest.raises(ValueError):
        RateGate(-1)
