from signal_core.formatter import format_signal_response
from signal_core.models import IndicatorsSummary, MacdSummary, SignalResponse, TradeSignal


def _response(indicators: IndicatorsSummary, reasons=("Price > EMA50", "MACD bullish")) -> SignalResponse:
    return SignalResponse(
        symbol="BTCUSDT",
        interval="1h",
        timestamp=1700003599999,
        last_price=105.0,
        signal=TradeSignal(
            action="buy",
            confidence=0.5,
            entry=105.0,
            stop_loss=102.0,
            take_profit=111.0,
            reasons=reasons,
        ),
        indicators=indicators,
    )


def test_format_signal_response():
    text = format_signal_response(
        _response(IndicatorsSummary(101.234, 99.5, 61.27, MacdSummary(0.12346, 0.1, 0.02344), 2.0))
    )
    lines = text.splitlines()
    assert lines[0] == "BTCUSDT | 1h | 2023-11-14 23:13:19 UTC"
    assert "Action: BUY (confidence 50%)" in lines
    assert "Stop Loss: 102.00" in lines
    assert "  EMA50: 101.23" in lines
    assert "  MACD: 0.1235 | Signal: 0.1000 | Hist: 0.0234" in lines
    assert lines[-2:] == ["  - Price > EMA50", "  - MACD bullish"]


def test_format_signal_response_absent_values():
    text = format_signal_response(_response(IndicatorsSummary(), reasons=()))
    assert "  EMA200: N/A" in text
    assert "  ATR14: N/A" in text
    assert "Reasons:" not in text
