"""
FastAPI application exposing the rule-based trade signal for a market
symbol.  Candles are fetched from Binance per request (or supplied by
the caller) and the signal is recomputed from scratch every time, so the
API is stateless and can be deployed independently of other services.
"""
from __future__ import annotations

import dataclasses
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from signal_core import (
    Candle,
    CandleFetchError,
    SignalResponse,
    build_signal_response,
    fetch_candles,
    format_signal_response,
)
from signal_core.config import ALLOWED_INTERVALS, DEFAULT_INTERVAL, DEFAULT_SYMBOL
from signal_core.log import get_logger
from signal_core.ohlc_fetcher import is_allowed_interval, normalize_interval, normalize_symbol

logger = get_logger("signal_api")
app = FastAPI(title="Trade Signal API")


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------
class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CandleModel(_CamelModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    open_time: int = Field(..., alias="openTime", description="Open time, epoch ms")
    open: float
    high: float
    low: float
    close: float
    volume: float
    close_time: int = Field(..., alias="closeTime", description="Close time, epoch ms")

    @field_validator("close_time")
    @classmethod
    def validate_times(cls, v, info: ValidationInfo):
        open_time = info.data.get("open_time")
        if open_time is not None and v <= open_time:
            raise ValueError("closeTime must be after openTime")
        return v

    def to_candle(self) -> Candle:
        return Candle(
            open_time=self.open_time,
            open=self.open,
            high=self.high,
            low=self.low,
            close=self.close,
            volume=self.volume,
            close_time=self.close_time,
        )


class ComputeRequest(BaseModel):
    """
    Request payload for computing a signal over caller-supplied candles.
    Candles must be ordered oldest first with strictly increasing close
    times.
    """
    symbol: str = Field(DEFAULT_SYMBOL, description="Trading pair symbol, e.g. BTCUSDT")
    interval: str = Field(DEFAULT_INTERVAL, description="Interval: 1m, 5m, 15m, 1h, 4h, 1d")
    candles: List[CandleModel] = Field(..., min_length=1)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol_field(cls, v):
        return normalize_symbol(v)

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v):
        v = normalize_interval(v)
        if not is_allowed_interval(v):
            raise ValueError(f"interval must be one of: {', '.join(ALLOWED_INTERVALS)}")
        return v

    @field_validator("candles")
    @classmethod
    def validate_order(cls, v):
        for prev, cur in zip(v, v[1:]):
            if cur.close_time <= prev.close_time:
                raise ValueError("candles must be ordered by strictly increasing closeTime")
        return v


class MacdModel(BaseModel):
    macd: Optional[float] = None
    signal: Optional[float] = None
    histogram: Optional[float] = None


class IndicatorsModel(BaseModel):
    ema50: Optional[float] = None
    ema200: Optional[float] = None
    rsi14: Optional[float] = None
    macd: MacdModel
    atr14: Optional[float] = None


class TradeSignalModel(_CamelModel):
    action: Literal["buy", "sell", "hold"]
    confidence: float
    entry: float
    stop_loss: float = Field(..., alias="stopLoss")
    take_profit: float = Field(..., alias="takeProfit")
    reasons: List[str]


class SignalResponseModel(_CamelModel):
    symbol: str
    interval: str
    timestamp: int = Field(..., description="Close time of the last candle, epoch ms")
    last_price: float = Field(..., alias="lastPrice")
    signal: TradeSignalModel
    indicators: IndicatorsModel

    @classmethod
    def from_response(cls, response: SignalResponse) -> "SignalResponseModel":
        return cls.model_validate(dataclasses.asdict(response))


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
async def _load_signal(symbol: str, interval: str) -> SignalResponse:
    symbol = normalize_symbol(symbol)
    interval = normalize_interval(interval)
    if not is_allowed_interval(interval):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid interval. Use one of: {', '.join(ALLOWED_INTERVALS)}",
        )

    try:
        candles = await fetch_candles(symbol, interval)
        if not candles:
            raise HTTPException(
                status_code=404,
                detail="No candles returned for the given symbol/interval",
            )
        return build_signal_response(symbol, interval, candles)
    except HTTPException:
        raise
    except CandleFetchError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except Exception:
        logger.exception("Unhandled error computing signal for %s@%s", symbol, interval)
        raise HTTPException(status_code=500, detail="Internal server error")


# ----------------------------------------------------------------------
# Endpoints
# ----------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/signal", response_model=SignalResponseModel)
async def get_signal(
    symbol: str = Query(DEFAULT_SYMBOL, description="Trading pair, e.g. BTCUSDT"),
    interval: str = Query(DEFAULT_INTERVAL, description="Interval: 1m, 5m, 15m, 1h, 4h, 1d"),
) -> SignalResponseModel:
    """Fetch the latest candles and return the current trade signal."""
    response = await _load_signal(symbol, interval)
    return SignalResponseModel.from_response(response)


@app.get("/signal/text", response_class=PlainTextResponse)
async def get_signal_text(
    symbol: str = Query(DEFAULT_SYMBOL),
    interval: str = Query(DEFAULT_INTERVAL),
) -> str:
    response = await _load_signal(symbol, interval)
    return format_signal_response(response)


@app.post("/signal/compute", response_model=SignalResponseModel)
async def compute_signal(req: ComputeRequest) -> SignalResponseModel:
    """Compute a signal over the candles in the request body."""
    candles = [c.to_candle() for c in req.candles]
    response = build_signal_response(req.symbol, req.interval, candles)
    return SignalResponseModel.from_response(response)
