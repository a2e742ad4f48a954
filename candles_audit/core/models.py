"""
Модели ответа /history и нормализация колонок в строки
"""

import logging
from typing import Dict, List

import numpy as np
import pandas as pd
import pytz
from pydantic import BaseModel, Field, conint

from .exceptions import SchemaException

logger = logging.getLogger('candles_audit.models')

COLUMNS = ['time', 'open', 'high', 'low', 'close', 'volume']


class RawCandleResponse(BaseModel):
    s: str = Field(..., description="Status string (ignored)")
    time: List[int] = Field(..., description="Unix timestamps (seconds)")
    open: List[float] = Field(..., description="Open prices")
    high: List[float] = Field(..., description="High prices")
    low: List[float] = Field(..., description="Low prices")
    close: List[float] = Field(..., description="Close prices")
    volume: List[conint(ge=0)] = Field(..., description="Volumes")

    def column_lengths(self) -> Dict[str, int]:
        return {col: len(getattr(self, col)) for col in COLUMNS}


class CandleRecord(BaseModel):
    open: float = Field(..., description="Open price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Close price")
    volume: int = Field(..., description="Volume")


def check_columns(raw: RawCandleResponse) -> None:
    lengths = raw.column_lengths()
    if len(set(lengths.values())) > 1:
        raise SchemaException(lengths)


def normalize(raw: RawCandleResponse) -> Dict[int, CandleRecord]:
    """
    Pivot the columnar response into {time: CandleRecord}

    Duplicate timestamps keep the last candle.

    Raises:
        SchemaException: columns have different lengths
    """
    check_columns(raw)

    candles: Dict[int, CandleRecord] = {}
    for i, ts in enumerate(raw.time):
        candles[ts] = CandleRecord(
            open=raw.open[i],
            high=raw.high[i],
            low=raw.low[i],
            close=raw.close[i],
            volume=raw.volume[i],
        )

    duplicates = len(raw.time) - len(candles)
    if duplicates:
        logger.warning(f"Response contains {duplicates} duplicate timestamps, keeping last")

    return candles


def candles_to_dataframe(raw: RawCandleResponse) -> pd.DataFrame:
    """
    Convert the columnar response to a DataFrame

    Returns:
        DataFrame with tz-aware 'time' plus open, high, low, close, volume,
        sorted by time
    """
    check_columns(raw)

    df = pd.DataFrame({col: getattr(raw, col) for col in COLUMNS}, columns=COLUMNS)
    df['time'] = pd.to_datetime(df['time'], unit='s', utc=True).dt.tz_convert(pytz.UTC)
    df[['open', 'high', 'low', 'close']] = df[
        ['open', 'high', 'low', 'close']
    ].astype(np.float64)

    df = df.sort_values('time').reset_index(drop=True)

    return df
