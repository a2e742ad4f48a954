"""
Запуск аудита по одному окну или по случайным подокнам
"""

import logging
import random
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import pytz

from .auditor import AuditReport, CoverageAuditor, TimeWindow
from .config import AuditConfig, AuditMode, VALID_MODES
from .exceptions import ValidationException
from .timestamps import format_utc, to_timestamp


def generate_random_windows(
    lower_ts: int,
    upper_ts: int,
    limit: int,
    rng: Optional[random.Random] = None
) -> List[Tuple[int, int]]:
    """
    Draw ``limit`` windows with lower <= start <= end <= upper

    start is uniform on [lower, upper], end uniform on [start, upper], both
    ends inclusive.
    """
    if lower_ts > upper_ts:
        raise ValidationException('lower', lower_ts, f"Lower bound {lower_ts} is after upper bound {upper_ts}")
    if limit < 0:
        raise ValidationException('limit', limit, "Limit must be non-negative")

    rng = rng or random.Random()
    windows = []

    for _ in range(limit):
        start = rng.randint(lower_ts, upper_ts)
        end = rng.randint(start, upper_ts)
        windows.append((start, end))

    return windows


class WindowDriver:
    """Запускает CoverageAuditor для окон в заданном режиме"""

    def __init__(
        self,
        auditor: CoverageAuditor,
        random_limit: int = 10,
        rng: Optional[random.Random] = None
    ):
        self.logger = logging.getLogger('candles_audit.driver')
        self.auditor = auditor
        self.random_limit = random_limit
        self._rng = rng or random.Random()

    @classmethod
    def from_config(cls, auditor: CoverageAuditor, config: AuditConfig) -> "WindowDriver":
        return cls(
            auditor,
            random_limit=config.random_limit,
            rng=random.Random(config.random_seed)
        )

    def windows_for(self, lower_ts: int, upper_ts: int, mode: AuditMode) -> List[TimeWindow]:
        if mode == 'simple':
            return [TimeWindow(lower_ts, upper_ts)]

        if mode == 'randomized':
            periods = generate_random_windows(lower_ts, upper_ts, self.random_limit, self._rng)
            return [TimeWindow(start, end) for start, end in periods]

        raise ValidationException(
            'mode',
            mode,
            f"Invalid mode. Valid options: {', '.join(VALID_MODES)}"
        )

    async def run(
        self,
        lower_ts: int,
        upper_ts: int,
        resolution: int,
        mode: AuditMode = 'simple'
    ) -> List[AuditReport]:
        """Audit every window in order; the first failure aborts the run"""
        windows = self.windows_for(lower_ts, upper_ts, mode)
        self.logger.info(
            f"Auditing {len(windows)} window(s) in {mode} mode between "
            f"{format_utc(lower_ts)} and {format_utc(upper_ts)}. Resolution = {resolution}"
        )

        reports = []
        for window in windows:
            report = await self.auditor.audit_window(window, resolution)
            self.logger.info(report.summary())
            reports.append(report)

        return reports

    async def run_default(self, config: AuditConfig, now: Optional[datetime] = None) -> List[AuditReport]:
        """Audit [now - lookback_days, now] with the configured mode and resolution"""
        upper = now or datetime.now(tz=pytz.UTC)
        lower = upper - timedelta(days=config.lookback_days)

        self.logger.info(
            f"Running API tests for data availability between {lower} and {upper}. "
            f"Resolution = {config.resolution}"
        )

        return await self.run(
            to_timestamp(lower),
            to_timestamp(upper),
            config.resolution,
            config.mode
        )

    def __repr__(self) -> str:
        return f"<WindowDriver(random_limit={self.random_limit})>"
