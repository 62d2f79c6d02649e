"""
Scoring rules that turn indicator readings into a directional score.

Each ``apply_*`` rule inspects the latest readings and, when it fires,
adds to the long or short side of a :class:`ScoreCard` and records a
human-readable reason.  Rules are applied in a fixed order by the
signal engine and the card keeps reasons in the order they fired.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

import pandas as pd


def _last_two(series1: pd.Series, series2: pd.Series):
    """Return ((a_prev, a_now), (b_prev, b_now)) or None if any is absent."""
    if len(series1) < 2 or len(series2) < 2:
        return None
    a = series1.iloc[-2:].tolist()
    b = series2.iloc[-2:].tolist()
    if any(pd.isna(v) for v in a + b):
        return None
    return a, b


def crossed_above(series1: pd.Series, series2: pd.Series) -> bool:
    """True when series1 moved from at-or-below series2 to above it on the last bar."""
    pair = _last_two(series1, series2)
    if pair is None:
        return False
    (a_prev, a_now), (b_prev, b_now) = pair
    return a_prev <= b_prev and a_now > b_now


def crossed_below(series1: pd.Series, series2: pd.Series) -> bool:
    """True when series1 moved from at-or-above series2 to below it on the last bar."""
    pair = _last_two(series1, series2)
    if pair is None:
        return False
    (a_prev, a_now), (b_prev, b_now) = pair
    return a_prev >= b_prev and a_now < b_now


@dataclass
class ScoreCard:
    long_score: float = 0.0
    short_score: float = 0.0
    reasons: List[str] = field(default_factory=list)

    def add_long(self, weight: float, reason: str) -> None:
        self.long_score += weight
        self.reasons.append(reason)

    def add_short(self, weight: float, reason: str) -> None:
        self.short_score += weight
        self.reasons.append(reason)

    def note(self, reason: str) -> None:
        self.reasons.append(reason)

    @property
    def score_diff(self) -> float:
        return self.long_score - self.short_score


def apply_trend_rule(
    card: ScoreCard, ema_fast: Optional[float], ema_slow: Optional[float]
) -> None:
    """EMA50 above/below EMA200 scores one point for the trend side."""
    if ema_fast is None or ema_slow is None:
        return
    if ema_fast > ema_slow:
        card.add_long(1.0, "EMA50 > EMA200 (uptrend)")
    elif ema_fast < ema_slow:
        card.add_short(1.0, "EMA50 < EMA200 (downtrend)")


def apply_price_rule(card: ScoreCard, close: float, ema_fast: Optional[float]) -> None:
    if ema_fast is None:
        return
    if close > ema_fast:
        card.add_long(0.5, "Price > EMA50")
    else:
        card.add_short(0.5, "Price < EMA50")


def _one_decimal(value: float) -> str:
    # exact binary value, ties rounded away from zero
    return str(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def apply_rsi_rule(
    card: ScoreCard, rsi: Optional[float], low: float = 30.0, high: float = 70.0
) -> None:
    """
    Score RSI momentum zones.  The bullish zone [50, high] and the
    bearish zone [low, 50] are both closed, so a reading of exactly 50
    scores on both sides.  Readings beyond the thresholds only add a
    note.
    """
    if rsi is None:
        return
    if 50 <= rsi <= high:
        card.add_long(1.0, f"RSI={_one_decimal(rsi)} bullish zone")
    if low <= rsi <= 50:
        card.add_short(1.0, f"RSI={_one_decimal(rsi)} bearish zone")
    if rsi > high:
        card.note("RSI overbought")
    if rsi < low:
        card.note("RSI oversold")


def apply_macd_rule(
    card: ScoreCard, macd: pd.Series, signal: pd.Series, histogram: Optional[float]
) -> None:
    """
    A fresh cross of the MACD line over its signal line, or a histogram
    on the matching side of zero, scores one point.  The bullish and
    bearish checks are evaluated independently.
    """
    if crossed_above(macd, signal) or (histogram is not None and histogram > 0):
        card.add_long(1.0, "MACD bullish")
    if crossed_below(macd, signal) or (histogram is not None and histogram < 0):
        card.add_short(1.0, "MACD bearish")
