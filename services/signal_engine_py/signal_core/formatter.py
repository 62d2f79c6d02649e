# signal_core/formatter.py
from __future__ import annotations

import datetime as dt
from typing import List, Optional

from .models import SignalResponse


def _fmt(value: Optional[float], digits: int) -> str:
    return "N/A" if value is None else f"{value:.{digits}f}"


def format_signal_response(response: SignalResponse) -> str:
    """
    Render a signal response as plain text: header, decision, price
    levels, indicator readings and the reasons that fired.
    """
    closed_at = dt.datetime.fromtimestamp(response.timestamp / 1000, tz=dt.timezone.utc)
    signal = response.signal
    ind = response.indicators

    lines: List[str] = [
        f"{response.symbol} | {response.interval} | {closed_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
        f"Last Price: {response.last_price:.2f}",
        f"Action: {signal.action.upper()} (confidence {signal.confidence * 100:.0f}%)",
        f"Entry: {signal.entry:.2f}",
        f"Stop Loss: {signal.stop_loss:.2f}",
        f"Take Profit: {signal.take_profit:.2f}",
        "",
        "Indicators:",
        f"  EMA50: {_fmt(ind.ema50, 2)}",
        f"  EMA200: {_fmt(ind.ema200, 2)}",
        f"  RSI14: {_fmt(ind.rsi14, 2)}",
        (
            f"  MACD: {_fmt(ind.macd.macd, 4)} | Signal: {_fmt(ind.macd.signal, 4)}"
            f" | Hist: {_fmt(ind.macd.histogram, 4)}"
        ),
        f"  ATR14: {_fmt(ind.atr14, 4)}",
    ]
    if signal.reasons:
        lines.append("")
        lines.append("Reasons:")
        lines.extend(f"  - {r}" for r in signal.reasons)
    return "\n".join(lines)
