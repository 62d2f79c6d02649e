"""Core utilities for the signal engine.

This package provides helpers for fetching OHLC candles from Binance,
computing technical indicators, scoring them with fixed trading rules,
and rendering the resulting signal.  The indicator and scoring functions
are side‑effect free and deterministic when given the same inputs.
"""

from .models import (
    Candle,
    IndicatorsSummary,
    MacdSummary,
    SignalResponse,
    TradeSignal,
    candles_to_frame,
)
from .indicators import (
    compute_sma,
    compute_ema,
    compute_rsi,
    compute_macd,
    compute_atr,
)
from .rules import crossed_above, crossed_below
from .engine import build_signal_response, compute_trade_signal
from .ohlc_fetcher import CandleFetchError, fetch_candles, parse_klines
from .formatter import format_signal_response

__all__ = [
    "Candle",
    "IndicatorsSummary",
    "MacdSummary",
    "SignalResponse",
    "TradeSignal",
    "candles_to_frame",
    "compute_sma",
    "compute_ema",
    "compute_rsi",
    "compute_macd",
    "compute_atr",
    "crossed_above",
    "crossed_below",
    "compute_trade_signal",
    "build_signal_response",
    "CandleFetchError",
    "fetch_candles",
    "parse_klines",
    "format_signal_response",
]
