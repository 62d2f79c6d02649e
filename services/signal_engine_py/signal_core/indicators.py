"""Implement the technical indicators used by the signal engine.

Each function is a pure transform over an ordered series and returns a
pandas Series positionally aligned with its input (same length, same
index).  Entries inside the warm-up period are NaN.  Degenerate input
(non-positive window, too little history) yields an all-NaN series
instead of an error.

The smoothing recursions are written out as explicit loops over numpy
arrays rather than ``rolling``/``ewm``: seeding and summation order are
part of the contract, so results stay reproducible bit for bit.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import pandas as pd

SeriesLike = Union[pd.Series, Sequence[float]]


def _as_array(values: SeriesLike) -> np.ndarray:
    return np.asarray(values, dtype=float)


def _like(values: SeriesLike, out: np.ndarray) -> pd.Series:
    index = values.index if isinstance(values, pd.Series) else None
    return pd.Series(out, index=index, dtype=float)


def _seed_mean(values: np.ndarray, window: int) -> float:
    # plain left-to-right sum; np.mean and builtin sum() round differently
    total = 0.0
    for i in range(window):
        total += values[i]
    return total / window


def compute_sma(close: SeriesLike, window: int) -> pd.Series:
    """
    Compute the simple moving average (SMA) over the given window.
    A running sum is carried across the series: the value entering the
    window is added and the value leaving it subtracted, so the whole
    pass is O(n).
    """
    values = _as_array(close)
    out = np.full(len(values), np.nan)
    if window <= 0:
        return _like(close, out)
    total = 0.0
    for i in range(len(values)):
        total += values[i]
        if i >= window:
            total -= values[i - window]
        if i >= window - 1:
            out[i] = total / window
    return _like(close, out)


def compute_ema(close: SeriesLike, window: int) -> pd.Series:
    """
    Compute the exponential moving average (EMA) with multiplier
    ``k = 2 / (window + 1)``.

    The first value, at index ``window - 1``, is the SMA of the first
    ``window`` inputs; it is not seeded from the first input alone.
    """
    values = _as_array(close)
    out = np.full(len(values), np.nan)
    if window <= 0 or len(values) < window:
        return _like(close, out)
    k = 2.0 / (window + 1)
    prev = _seed_mean(values, window)
    out[window - 1] = prev
    for i in range(window, len(values)):
        prev = values[i] * k + prev * (1 - k)
        out[i] = prev
    return _like(close, out)


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def compute_rsi(close: SeriesLike, window: int = 14) -> pd.Series:
    """
    Compute the Relative Strength Index (RSI) using Wilder’s method.
    RSI oscillates between 0 and 100. Oversold <30, overbought >70.

    The first ``window`` price changes are averaged arithmetically; from
    there on the averages follow ``(avg * (window - 1) + current) / window``.
    At least ``window + 1`` closes are required.
    """
    values = _as_array(close)
    out = np.full(len(values), np.nan)
    if window <= 0 or len(values) < window + 1:
        return _like(close, out)

    gains = 0.0
    losses = 0.0
    for i in range(1, window + 1):
        change = values[i] - values[i - 1]
        if change >= 0:
            gains += change
        else:
            losses -= change
    avg_gain = gains / window
    avg_loss = losses / window
    out[window] = _rsi_value(avg_gain, avg_loss)

    for i in range(window + 1, len(values)):
        change = values[i] - values[i - 1]
        gain = max(change, 0.0)
        loss = max(-change, 0.0)
        avg_gain = (avg_gain * (window - 1) + gain) / window
        avg_loss = (avg_loss * (window - 1) + loss) / window
        out[i] = _rsi_value(avg_gain, avg_loss)
    return _like(close, out)


def compute_macd(
    close: SeriesLike, fast: int = 12, slow: int = 26, signal: int = 9
) -> pd.DataFrame:
    """
    Compute the Moving Average Convergence Divergence (MACD).
    Returns a DataFrame with columns macd, macd_signal and macd_hist.

    The signal line is the EMA of the MACD line with its warm-up gap
    filled by zeros, so the signal EMA is seeded at index ``signal - 1``
    of the full series rather than where the MACD line starts.
    """
    ema_fast = compute_ema(close, fast)
    ema_slow = compute_ema(close, slow)
    macd_line = ema_fast - ema_slow
    signal_line = compute_ema(macd_line.fillna(0.0), signal)
    macd_hist = macd_line - signal_line
    return pd.DataFrame(
        {"macd": macd_line, "macd_signal": signal_line, "macd_hist": macd_hist}
    )


def true_range(frame: pd.DataFrame) -> pd.Series:
    """
    True range per bar: the largest of high−low, |high−prev close| and
    |low−prev close|.  The first bar has no predecessor and uses its own
    close.
    """
    high = frame["high"].to_numpy(dtype=float)
    low = frame["low"].to_numpy(dtype=float)
    close = frame["close"].to_numpy(dtype=float)
    out = np.empty(len(frame))
    for i in range(len(frame)):
        prev_close = close[i - 1] if i > 0 else close[i]
        out[i] = max(
            high[i] - low[i],
            abs(high[i] - prev_close),
            abs(low[i] - prev_close),
        )
    return pd.Series(out, index=frame.index, dtype=float)


def compute_atr(frame: pd.DataFrame, window: int = 14) -> pd.Series:
    """
    Compute the Average True Range (ATR) with Wilder’s smoothing from a
    frame holding ``high``, ``low`` and ``close`` columns.
    """
    out = np.full(len(frame), np.nan)
    if window <= 0 or len(frame) < window:
        return pd.Series(out, index=frame.index, dtype=float)

    trs = true_range(frame).to_numpy()
    atr = _seed_mean(trs, window)
    out[window - 1] = atr
    for i in range(window, len(trs)):
        atr = (atr * (window - 1) + trs[i]) / window
        out[i] = atr
    return pd.Series(out, index=frame.index, dtype=float)
