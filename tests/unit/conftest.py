from typing import Callable, List, Sequence

import pytest

from signal_core.models import Candle

HOUR_MS = 3_600_000


def build_candles(closes: Sequence[float], spread: float = 0.0) -> List[Candle]:
    """Hourly candles whose high/low sit ``spread`` (a fraction) around the close."""
    candles = []
    for i, close in enumerate(closes):
        open_time = 1_700_000_000_000 + i * HOUR_MS
        candles.append(
            Candle(
                open_time=open_time,
                open=close,
                high=close * (1 + spread),
                low=close * (1 - spread),
                close=close,
                volume=10.0,
                close_time=open_time + HOUR_MS - 1,
            )
        )
    return candles


@pytest.fixture
def make_candles() -> Callable[..., List[Candle]]:
    return build_candles


@pytest.fixture
def uptrend_closes() -> List[float]:
    # accelerating rise keeps the MACD histogram clearly positive
    return [100 + 0.01 * i * i for i in range(300)]


@pytest.fixture
def downtrend_closes() -> List[float]:
    return [1000 - 0.01 * i * i for i in range(300)]
