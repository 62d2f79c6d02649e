"""
Value types shared by the indicator library, the signal engine and the
HTTP layer.  Everything here is frozen: a computation builds fresh
objects from a fresh candle sequence and never edits them afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Sequence, Tuple

import pandas as pd

Action = Literal["buy", "sell", "hold"]


@dataclass(frozen=True)
class Candle:
    open_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int


@dataclass(frozen=True)
class MacdSummary:
    macd: Optional[float] = None
    signal: Optional[float] = None
    histogram: Optional[float] = None


@dataclass(frozen=True)
class IndicatorsSummary:
    """Last reading of each indicator series; ``None`` while warming up."""

    ema50: Optional[float] = None
    ema200: Optional[float] = None
    rsi14: Optional[float] = None
    macd: MacdSummary = field(default_factory=MacdSummary)
    atr14: Optional[float] = None


@dataclass(frozen=True)
class TradeSignal:
    action: Action
    confidence: float
    entry: float
    stop_loss: float
    take_profit: float
    reasons: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SignalResponse:
    symbol: str
    interval: str
    timestamp: int
    last_price: float
    signal: TradeSignal
    indicators: IndicatorsSummary


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """
    Build an OHLCV frame with a positional index, one row per candle in
    input order.  Row ``i`` always corresponds to ``candles[i]``.
    """
    return pd.DataFrame(
        {
            "open_time": [c.open_time for c in candles],
            "open": [c.open for c in candles],
            "high": [c.high for c in candles],
            "low": [c.low for c in candles],
            "close": [c.close for c in candles],
            "volume": [c.volume for c in candles],
            "close_time": [c.close_time for c in candles],
        },
        columns=["open_time", "open", "high", "low", "close", "volume", "close_time"],
    ).astype({"open": float, "high": float, "low": float, "close": float, "volume": float})


def last_value(series: pd.Series) -> Optional[float]:
    """Return the final element of ``series`` as a float, or None if absent."""
    if series.empty:
        return None
    v = series.iloc[-1]
    if pd.isna(v):
        return None
    return float(v)
