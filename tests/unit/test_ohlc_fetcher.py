import asyncio

import httpx
import pytest

from signal_core.models import Candle
from signal_core.ohlc_fetcher import (
    CandleFetchError,
    fetch_candles,
    is_allowed_interval,
    normalize_interval,
    normalize_symbol,
    parse_klines,
)

RAW_KLINES = [
    [1700000000000, "100.0", "110.5", "95.25", "105.0", "12.5", 1700003599999, "1300.0", 42, "6.0", "620.0", "0"],
    [1700003600000, "105.0", "108.0", "101.0", "107.5", "9.0", 1700007199999, "950.0", 30, "4.0", "420.0", "0"],
]


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def _fetch_with(handler, **kwargs):
    async with _client(handler) as client:
        return await fetch_candles("BTCUSDT", "1h", client=client, **kwargs)


def test_parse_klines():
    candles = parse_klines(RAW_KLINES)
    assert candles[0] == Candle(
        open_time=1700000000000,
        open=100.0,
        high=110.5,
        low=95.25,
        close=105.0,
        volume=12.5,
        close_time=1700003599999,
    )
    assert candles[1].close == 107.5
    assert parse_klines([]) == []


def test_normalizers():
    assert normalize_symbol(" ethusdt ") == "ETHUSDT"
    assert normalize_interval("4H") == "4h"
    assert is_allowed_interval("15m")
    assert not is_allowed_interval("2h")


def test_fetch_candles_requests_klines():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json=RAW_KLINES)

    candles = asyncio.run(_fetch_with(handler, limit=2))
    assert seen["path"] == "/api/v3/klines"
    assert seen["params"] == {"symbol": "BTCUSDT", "interval": "1h", "limit": "2"}
    assert [c.close for c in candles] == [105.0, 107.5]


def test_fetch_candles_upstream_error_keeps_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text='{"code":-1121,"msg":"Invalid symbol."}')

    with pytest.raises(CandleFetchError) as exc_info:
        asyncio.run(_fetch_with(handler))
    assert exc_info.value.status_code == 400
    assert "Binance API error" in str(exc_info.value)
    assert "Invalid symbol." in str(exc_info.value)


def test_fetch_candles_transport_error_is_bad_gateway():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CandleFetchError) as exc_info:
        asyncio.run(_fetch_with(handler))
    assert exc_info.value.status_code == 502
