# signal_core/config.py
"""Environment-driven settings for the signal service.

Values are read once at import.  Engine thresholds (minimum history,
ATR stop multiple, risk-reward) are fixed in :mod:`signal_core.engine`
and are not read from the environment.
"""
from __future__ import annotations

import os
from typing import Optional


# ──────────────────────────────────────────────────────────────────────────────
# Env helpers (strip quotes/whitespace so .env "KEY=value " doesn’t break things)
# ──────────────────────────────────────────────────────────────────────────────

def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1].strip()
    return v or default


# ──────────────────────────────────────────────────────────────────────────────
# Candle source
# ──────────────────────────────────────────────────────────────────────────────

BINANCE_BASE_URL = (_env("BINANCE_BASE_URL", "https://api.binance.com") or "").rstrip("/")
KLINE_LIMIT = int(_env("SIGNAL_KLINE_LIMIT", "500") or "500")
HTTP_TIMEOUT_SECS = float(_env("SIGNAL_HTTP_TIMEOUT_SECS", "30") or "30")

ALLOWED_INTERVALS = ("1m", "5m", "15m", "1h", "4h", "1d")
DEFAULT_SYMBOL = "BTCUSDT"
DEFAULT_INTERVAL = "1h"

# ──────────────────────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────────────────────

LOG_LEVEL = (_env("SIGNAL_LOG_LEVEL", "INFO") or "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"
