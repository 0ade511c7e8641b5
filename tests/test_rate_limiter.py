"""Tests for the sliding-window rate limiter."""

import threading
import time

import pytest

from entrez_client.rate_limiter import RateLimiter, default_rate_limiter


def test_first_admissions_never_block(limiter, clock):
    """Test up to max_requests admissions in an instant pass without sleeping."""
    for _ in range(3):
        assert limiter.admit() == 0.0
    assert clock.sleeps == []


def test_fourth_admission_in_same_instant_waits_full_window(limiter, clock):
    """Test the 4th request at the same instant waits a whole second."""
    for _ in range(3):
        limiter.admit()

    assert limiter.admit() == pytest.approx(1.0)
    assert clock.sleeps == [pytest.approx(1.0)]


def test_sleeps_remaining_window(limiter, clock):
    """Test sleep is 1 - elapsed since the admission 3 requests ago."""
    limiter.admit()           # t=100.0
    clock.advance(0.1)
    limiter.admit()           # t=100.1
    clock.advance(0.1)
    limiter.admit()           # t=100.2
    clock.advance(0.2)        # t=100.4, 0.4s after the first admission

    slept = limiter.admit()

    assert slept == pytest.approx(0.6)
    assert clock.now == pytest.approx(101.0)
    # The admission is recorded after the sleep
    assert limiter.history == pytest.approx((100.1, 100.2, 101.0))


def test_no_sleep_once_window_has_passed(limiter, clock):
    """Test no blocking when 3 requests ago is at least a second ago."""
    for _ in range(3):
        limiter.admit()
    clock.advance(1.0)

    assert limiter.admit() == 0.0
    assert clock.sleeps == []


def test_sustained_rate_never_exceeds_limit(limiter, clock):
    """Test any 4 consecutive admissions span at least one window."""
    admitted = []
    for _ in range(12):
        limiter.admit()
        admitted.append(clock.now)
        clock.advance(0.05)

    for i in range(len(admitted) - 3):
        assert admitted[i + 3] - admitted[i] >= 1.0 - 1e-9


def test_clock_going_backwards_never_sleeps_negative(clock):
    """Test sleep duration is clamped when the clock runs backwards."""
    limiter = RateLimiter(clock=clock, sleep=clock.sleep)
    for _ in range(3):
        limiter.admit()
    clock.now -= 5.0

    slept = limiter.admit()

    assert 0.0 <= slept <= 1.0
    assert all(s >= 0 for s in clock.sleeps)


def test_history_is_bounded(limiter, clock):
    """Test only the last max_requests timestamps are kept."""
    for _ in range(10):
        limiter.admit()
        clock.advance(2.0)

    assert len(limiter.history) == 3


def test_reset_clears_history(limiter, clock):
    """Test reset forgets previous admissions."""
    for _ in range(3):
        limiter.admit()
    limiter.reset()

    assert limiter.history == ()
    assert limiter.admit() == 0.0


def test_custom_limit_and_window(clock):
    """Test a limiter with a different request budget and window."""
    limiter = RateLimiter(max_requests=1, window=0.5, clock=clock, sleep=clock.sleep)

    assert limiter.admit() == 0.0
    clock.advance(0.2)
    assert limiter.admit() == pytest.approx(0.3)


@pytest.mark.parametrize("max_requests, window", [(0, 1.0), (3, 0), (3, -1.0)])
def test_invalid_configuration(max_requests, window):
    """Test nonsensical limits are rejected."""
    with pytest.raises(ValueError):
        RateLimiter(max_requests=max_requests, window=window)


def test_default_rate_limiter_is_shared():
    """Test the process-wide limiter is a single instance."""
    assert default_rate_limiter() is default_rate_limiter()


def test_concurrent_callers_are_serialized():
    """Test threads sharing a limiter cannot exceed the limit together."""
    window = 0.3
    limiter = RateLimiter(max_requests=3, window=window)
    admitted = []
    lock = threading.Lock()

    def worker():
        limiter.admit()
        with lock:
            admitted.append(time.monotonic())

    threads = [threading.Thread(target=worker) for _ in range(7)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    admitted.sort()
    assert len(admitted) == 7
    for i in range(len(admitted) - 3):
        # Allow for scheduler jitter between admission and recording
        assert admitted[i + 3] - admitted[i] >= window - 0.05
