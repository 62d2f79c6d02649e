"""
Rule-based trade signal engine.

``compute_trade_signal`` takes a complete, ordered candle sequence,
recomputes every indicator from scratch and fuses the latest readings
into a buy/sell/hold decision with ATR-based price levels.  Nothing is
cached between calls, so concurrent calls on different sequences need
no coordination.
"""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

from .indicators import compute_atr, compute_ema, compute_macd, compute_rsi
from .log import get_logger
from .models import (
    Action,
    Candle,
    IndicatorsSummary,
    MacdSummary,
    SignalResponse,
    TradeSignal,
    candles_to_frame,
    last_value,
)
from .rules import (
    ScoreCard,
    apply_macd_rule,
    apply_price_rule,
    apply_rsi_rule,
    apply_trend_rule,
)

logger = get_logger("signal_engine")

MIN_CANDLES = 60
ATR_STOP_MULT = 1.5
RISK_REWARD = 2.0  # take-profit distance as a multiple of the stop distance

MIN_CONFIDENCE = 0.15
MAX_CONFIDENCE = 0.9
CONFIDENCE_PER_INDICATOR = 0.15


def _insufficient(candles: Sequence[Candle]) -> Tuple[TradeSignal, IndicatorsSummary]:
    last_close = candles[-1].close if candles else 0.0
    signal = TradeSignal(
        action="hold",
        confidence=0.0,
        entry=last_close,
        stop_loss=last_close,
        take_profit=last_close,
        reasons=("Insufficient data",),
    )
    return signal, IndicatorsSummary()


def _decide(score_diff: float) -> Action:
    if score_diff >= 1:
        return "buy"
    if score_diff <= -1:
        return "sell"
    return "hold"


def _price_levels(
    action: Action, entry: float, atr: Optional[float]
) -> Tuple[float, float]:
    """Return (stop_loss, take_profit) around ``entry``."""
    if atr is None:
        return entry, entry
    if action == "buy":
        stop_loss = entry - ATR_STOP_MULT * atr
        return stop_loss, entry + RISK_REWARD * (entry - stop_loss)
    if action == "sell":
        stop_loss = entry + ATR_STOP_MULT * atr
        return stop_loss, entry - RISK_REWARD * (stop_loss - entry)
    # hold: neutral band
    return entry - ATR_STOP_MULT * atr, entry + ATR_STOP_MULT * atr


def _confidence(score_diff: float, summary: IndicatorsSummary) -> float:
    available = sum(
        [
            summary.ema50 is not None,
            summary.ema200 is not None,
            summary.rsi14 is not None,
            summary.macd.macd is not None and summary.macd.signal is not None,
            summary.atr14 is not None,
        ]
    )
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, abs(score_diff) / 3))
    # cap by indicator coverage
    return min(confidence, MIN_CONFIDENCE + CONFIDENCE_PER_INDICATOR * available)


def compute_trade_signal(
    candles: Sequence[Candle],
) -> Tuple[TradeSignal, IndicatorsSummary]:
    """
    Compute a rule-based trade signal and summarise the latest indicator
    readings.

    With fewer than ``MIN_CANDLES`` candles a neutral hold with zero
    confidence and an empty summary is returned; this is a data-quality
    outcome, not an error.
    """
    if not candles or len(candles) < MIN_CANDLES:
        logger.debug("Insufficient history: %d candles", len(candles) if candles else 0)
        return _insufficient(candles or ())

    df = candles_to_frame(candles)
    close = df["close"]
    ema50 = compute_ema(close, 50)
    ema200 = compute_ema(close, 200)
    rsi14 = compute_rsi(close, 14)
    macd_df = compute_macd(close, 12, 26, 9)
    atr14 = compute_atr(df, 14)

    summary = IndicatorsSummary(
        ema50=last_value(ema50),
        ema200=last_value(ema200),
        rsi14=last_value(rsi14),
        macd=MacdSummary(
            macd=last_value(macd_df["macd"]),
            signal=last_value(macd_df["macd_signal"]),
            histogram=last_value(macd_df["macd_hist"]),
        ),
        atr14=last_value(atr14),
    )
    last_close = float(close.iloc[-1])

    card = ScoreCard()
    apply_trend_rule(card, summary.ema50, summary.ema200)
    apply_price_rule(card, last_close, summary.ema50)
    apply_rsi_rule(card, summary.rsi14)
    apply_macd_rule(
        card, macd_df["macd"], macd_df["macd_signal"], summary.macd.histogram
    )

    score_diff = card.score_diff
    action = _decide(score_diff)
    entry = last_close
    stop_loss, take_profit = _price_levels(action, entry, summary.atr14)
    confidence = _confidence(score_diff, summary)

    logger.debug(
        "Signal %s conf=%.2f long=%.1f short=%.1f over %d candles",
        action,
        confidence,
        card.long_score,
        card.short_score,
        len(candles),
    )
    signal = TradeSignal(
        action=action,
        confidence=confidence,
        entry=entry,
        stop_loss=stop_loss,
        take_profit=take_profit,
        reasons=tuple(card.reasons),
    )
    return signal, summary


def build_signal_response(
    symbol: str, interval: str, candles: Sequence[Candle]
) -> SignalResponse:
    """Wrap the engine output with the request context and the last candle."""
    if not candles:
        raise ValueError("at least one candle is required to build a response")
    signal, indicators = compute_trade_signal(candles)
    last = candles[-1]
    return SignalResponse(
        symbol=symbol,
        interval=interval,
        timestamp=last.close_time,
        last_price=last.close,
        signal=signal,
        indicators=indicators,
    )
