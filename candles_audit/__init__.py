"""
Candles Audit - checks that an OHLCV /history endpoint returns gap-free candles

This package provides:
- Expected candle timestamp generation (hour-anchored)
- Coverage audit with per-candle present/absent verdicts
- Simple and randomized window modes
"""

__version__ = '1.0.0'
__author__ = 'QTS Team'
