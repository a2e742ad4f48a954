"""
Tests for WindowDriver

Tests:
- Random window generation bounds
- Simple / randomized modes
- Abort on first failing window
"""

import random
import time
from datetime import datetime, timedelta

import pytest
import pytz

from candles_audit.core.auditor import CoverageAuditor, TimeWindow
from candles_audit.core.config import AuditConfig
from candles_audit.core.driver import WindowDriver, generate_random_windows
from candles_audit.core.exceptions import TransportException, ValidationException

from conftest import FakeHistoryProvider, make_raw, utc_ts

UPPER = utc_ts(2024, 5, 14)
LOWER = UPPER - 14 * 86400


class TestGenerateRandomWindows:

    def test_bounds(self):
        windows = generate_random_windows(LOWER, UPPER, 100, random.Random(7))

        assert len(windows) == 100
        for start, end in windows:
            assert LOWER <= start <= end <= UPPER

    def test_seed_is_reproducible(self):
        first = generate_random_windows(LOWER, UPPER, 20, random.Random(42))
        second = generate_random_windows(LOWER, UPPER, 20, random.Random(42))
        assert first == second

    def test_degenerate_range(self):
        assert generate_random_windows(UPPER, UPPER, 3) == [(UPPER, UPPER)] * 3

    def test_zero_limit(self):
        assert generate_random_windows(LOWER, UPPER, 0) == []

    def test_inverted_bounds(self):
        with pytest.raises(ValidationException):
            generate_random_windows(UPPER, LOWER, 5)


class TestWindowDriver:

    @pytest.fixture
    def provider(self):
        return FakeHistoryProvider(default=make_raw([utc_ts(2024, 5, 13, 6)]))

    @pytest.fixture
    def driver(self, provider):
        return WindowDriver(CoverageAuditor(provider), random_limit=5, rng=random.Random(1))

    def test_simple_windows(self, driver):
        assert driver.windows_for(LOWER, UPPER, 'simple') == [TimeWindow(LOWER, UPPER)]

    def test_unknown_mode(self, driver):
        with pytest.raises(ValidationException):
            driver.windows_for(LOWER, UPPER, 'parallel')

    @pytest.mark.asyncio
    async def test_simple_mode(self, driver, provider):
        reports = await driver.run(utc_ts(2024, 5, 13, 5), utc_ts(2024, 5, 13, 8), 60)

        assert len(reports) == 1
        assert provider.calls == [(60, utc_ts(2024, 5, 13, 5), utc_ts(2024, 5, 13, 8))]
        assert reports[0].present_count == 1
        assert reports[0].absent_count == 1

    @pytest.mark.asyncio
    async def test_randomized_mode_audits_in_order(self, driver, provider):
        expected = generate_random_windows(LOWER, UPPER, 5, random.Random(1))

        reports = await driver.run(LOWER, UPPER, 60, 'randomized')

        assert len(reports) == 5
        assert [(c[1], c[2]) for c in provider.calls] == expected
        assert [(r.window.from_ts, r.window.to_ts) for r in reports] == expected

    @pytest.mark.asyncio
    async def test_failure_aborts_run(self):
        provider = FakeHistoryProvider(error=TransportException("fake://", "down"))
        driver = WindowDriver(CoverageAuditor(provider), random_limit=5)

        with pytest.raises(TransportException):
            await driver.run(LOWER, UPPER, 60, 'randomized')

        assert len(provider.calls) == 1

    @pytest.mark.asyncio
    async def test_run_default(self, provider):
        config = AuditConfig(base_url="https://x/", lookback_days=14, resolution=60)
        driver = WindowDriver.from_config(CoverageAuditor(provider), config)
        now = pytz.UTC.localize(datetime(2024, 5, 14, 12, 30))

        reports = await driver.run_default(config, now=now)

        lower = int((now - timedelta(days=14)).timestamp())
        assert provider.calls == [(60, lower, int(now.timestamp()))]
        assert len(reports) == 1
        assert reports[0].expected_count == 14 * 24

    @pytest.mark.asyncio
    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    async def test_run_default_reads_naive_now_as_utc(self, provider, monkeypatch):
        """Window bounds don't depend on the host timezone"""
        monkeypatch.setenv("TZ", "America/New_York")
        time.tzset()
        try:
            config = AuditConfig(base_url="https://x/", lookback_days=1, resolution=60)
            driver = WindowDriver.from_config(CoverageAuditor(provider), config)

            await driver.run_default(config, now=datetime(2024, 5, 13, 5))
        finally:
            monkeypatch.undo()
            time.tzset()

        assert provider.calls == [(60, utc_ts(2024, 5, 12, 5), utc_ts(2024, 5, 13, 5))]
