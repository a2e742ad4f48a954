"""
Аудит покрытия: сверка ожидаемых меток времени с ответом API
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

import pandas as pd

from ..adapters.base import AbstractHistoryProvider
from .exceptions import CandlesAuditException, ValidationException
from .models import CandleRecord, candles_to_dataframe, normalize
from .timestamps import expected_timestamps, format_utc

logger = logging.getLogger('candles_audit.auditor')

PRESENT_MARK = "\x1b[32m✓\x1b[0m"
ABSENT_MARK = "\x1b[31mX\x1b[0m"
PRESENT_REASON = "Found candle data from API"
ABSENT_REASON = "No candle data found from API"


class Verdict(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


@dataclass(frozen=True)
class TimeWindow:
    """Окно аудита [from_ts, to_ts] в секундах UNIX"""
    from_ts: int
    to_ts: int

    def __post_init__(self):
        if self.from_ts > self.to_ts:
            raise ValidationException(
                'window',
                f"{self.from_ts}..{self.to_ts}",
                f"Window start {self.from_ts} is after window end {self.to_ts}"
            )

    def describe(self) -> str:
        return f"{format_utc(self.from_ts)} - {format_utc(self.to_ts)}"


@dataclass(frozen=True)
class VerdictRecord:
    timestamp: int
    verdict: Verdict

    @property
    def is_present(self) -> bool:
        return self.verdict is Verdict.PRESENT

    def log_line(self) -> str:
        if self.is_present:
            return f"{format_utc(self.timestamp)}: {PRESENT_MARK} {PRESENT_REASON}"
        return f"{format_utc(self.timestamp)}: {ABSENT_MARK} {ABSENT_REASON}"


@dataclass(frozen=True)
class GapInterval:
    """Непрерывная серия отсутствующих свечей"""
    start: int
    end: int
    missing_bars: int


@dataclass
class AuditReport:
    window: TimeWindow
    resolution: int
    verdicts: List[VerdictRecord] = field(default_factory=list)
    empty_response: bool = False

    @property
    def expected_count(self) -> int:
        return len(self.verdicts)

    @property
    def present_count(self) -> int:
        return sum(1 for v in self.verdicts if v.is_present)

    @property
    def absent_count(self) -> int:
        return self.expected_count - self.present_count

    @property
    def coverage(self) -> Optional[float]:
        """Доля найденных свечей; None если ответ был пустым"""
        if self.empty_response:
            return None
        if not self.verdicts:
            return 1.0
        return self.present_count / self.expected_count

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame({
            'time': pd.Series([v.timestamp for v in self.verdicts], dtype='int64'),
            'verdict': pd.Series([v.verdict.value for v in self.verdicts], dtype=object),
        })
        df['datetime'] = pd.to_datetime(df['time'], unit='s', utc=True)
        return df

    def gaps(self) -> List[GapInterval]:
        """Group consecutive ABSENT verdicts into runs"""
        df = self.to_dataframe()
        if df.empty:
            return []

        absent = df['verdict'] == Verdict.ABSENT.value
        run_id = (absent != absent.shift()).cumsum()

        result = []
        for _, run in df[absent].groupby(run_id[absent]):
            result.append(GapInterval(
                start=int(run['time'].iloc[0]),
                end=int(run['time'].iloc[-1]),
                missing_bars=len(run),
            ))
        return result

    def summary(self) -> str:
        if self.empty_response:
            return f"{self.window.describe()}: no results"
        return (
            f"{self.window.describe()}: {self.present_count}/{self.expected_count} "
            f"candles present, {len(self.gaps())} gaps"
        )


def audit(
    window: TimeWindow,
    resolution_minutes: int,
    normalized: Dict[int, CandleRecord]
) -> Iterator[VerdictRecord]:
    """
    Yield a PRESENT/ABSENT verdict per expected timestamp, logging each

    An empty ``normalized`` map yields nothing: no data is not evidence of gaps.
    """
    if not normalized:
        logger.info("No results gotten for time period")
        return

    for ts in expected_timestamps(window.from_ts, window.to_ts, resolution_minutes):
        verdict = Verdict.PRESENT if ts in normalized else Verdict.ABSENT
        record = VerdictRecord(ts, verdict)
        logger.info(record.log_line())
        yield record


class CoverageAuditor:
    """Проверка одного окна: запрос, нормализация, аудит"""

    def __init__(self, provider: AbstractHistoryProvider):
        self.logger = logging.getLogger('candles_audit.auditor')
        self.provider = provider

    async def audit_window(self, window: TimeWindow, resolution: int) -> AuditReport:
        self.logger.info(
            f"Getting API results from {format_utc(window.from_ts)} to {format_utc(window.to_ts)}"
        )
        self.logger.debug(
            f"Start timestamp = {window.from_ts}. End timestamp = {window.to_ts}"
        )

        try:
            raw = await self.provider.fetch_history(resolution, window.from_ts, window.to_ts)
            normalized = normalize(raw)

            if normalized and self.logger.isEnabledFor(logging.DEBUG):
                df = candles_to_dataframe(raw)
                self.logger.debug(
                    f"Received {len(df)} candles: "
                    f"{df['time'].iloc[0]} .. {df['time'].iloc[-1]}"
                )

            report = AuditReport(window, resolution, empty_response=not normalized)
            report.verdicts.extend(audit(window, resolution, normalized))

        except CandlesAuditException as e:
            e.details['window'] = window.describe()
            self.logger.error(f"Audit failed for {window.describe()}: {e}")
            raise

        return report

    def __repr__(self) -> str:
        return f"<CoverageAuditor(provider={self.provider!r})>"
