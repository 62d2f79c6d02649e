# signal_core/ohlc_fetcher.py
"""Fetch recent OHLCV candles from the public Binance klines endpoint.

Only the most recent ``limit`` candles are requested; the signal engine
always recomputes from the full window it is given.  Upstream failures
are raised as :class:`CandleFetchError` carrying the HTTP status the API
layer should answer with.

Timestamps are epoch milliseconds (UTC). Prices/volumes are floats.
"""
from __future__ import annotations

from typing import Any, List, Optional, Sequence

import httpx

from .config import ALLOWED_INTERVALS, BINANCE_BASE_URL, HTTP_TIMEOUT_SECS, KLINE_LIMIT
from .log import get_logger
from .models import Candle

logger = get_logger("ohlc_fetcher")


class CandleFetchError(RuntimeError):
    """Upstream candle retrieval failed."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────

def normalize_symbol(symbol: str) -> str:
    return symbol.strip().upper()


def normalize_interval(interval: str) -> str:
    return interval.strip().lower()


def is_allowed_interval(interval: str) -> bool:
    return interval in ALLOWED_INTERVALS


def parse_klines(raw: Sequence[Sequence[Any]]) -> List[Candle]:
    """
    Convert Binance kline rows into candles.

    Row layout: [ openTime, open, high, low, close, volume, closeTime, ...].
    Binance sends prices as strings; trailing fields are ignored.
    """
    return [
        Candle(
            open_time=int(k[0]),
            open=float(k[1]),
            high=float(k[2]),
            low=float(k[3]),
            close=float(k[4]),
            volume=float(k[5]),
            close_time=int(k[6]),
        )
        for k in raw
    ]


# ──────────────────────────────────────────────────────────────────────────────
# Binance
# ──────────────────────────────────────────────────────────────────────────────

async def _get_klines(
    client: httpx.AsyncClient, symbol: str, interval: str, limit: int
) -> List[List]:
    url = f"{BINANCE_BASE_URL}/api/v3/klines"
    params = {"symbol": symbol, "interval": interval, "limit": limit}
    try:
        resp = await client.get(url, params=params, timeout=HTTP_TIMEOUT_SECS)
    except httpx.HTTPError as e:
        logger.warning("Binance request failed for %s@%s: %s", symbol, interval, e)
        raise CandleFetchError(502, f"Binance request failed: {e}") from e
    if resp.status_code >= 400:
        logger.warning("Binance %s for %s@%s", resp.status_code, symbol, interval)
        raise CandleFetchError(resp.status_code, f"Binance API error: {resp.text}")
    return resp.json()


async def fetch_candles(
    symbol: str,
    interval: str,
    limit: int = KLINE_LIMIT,
    client: Optional[httpx.AsyncClient] = None,
) -> List[Candle]:
    """
    Return the latest ``limit`` candles for ``symbol`` at ``interval``,
    oldest first.  ``client`` is used as given when supplied; otherwise a
    client is opened for this call only.
    """
    if client is not None:
        rows = await _get_klines(client, symbol, interval, limit)
    else:
        async with httpx.AsyncClient() as own_client:
            rows = await _get_klines(own_client, symbol, interval, limit)
    candles = parse_klines(rows)
    logger.debug("Fetched %d candles for %s@%s", len(candles), symbol, interval)
    return candles
