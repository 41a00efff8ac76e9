# lightning_yield/core/live_data.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict

import requests

from lightning_yield.config import settings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------
# Data model
# ---------------------------------------------------------


@dataclass(slots=True)
class PriceSnapshot:
    btc_price_usd: float
    source: str
    as_of_utc: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    is_fallback: bool = False


class LiveDataError(RuntimeError):
    """Raised when live data cannot be fetched."""


def _get_json(url: str, params: dict | None = None):
    resp = requests.get(
        url,
        params=params,
        headers={"User-Agent": settings.LIVE_DATA_USER_AGENT},
        timeout=settings.LIVE_DATA_REQUEST_TIMEOUT_S,
    )
    resp.raise_for_status()
    return resp.json()


def _fetch_coingecko_price() -> float:
    data = _get_json(
        settings.COINGECKO_SIMPLE_PRICE_URL,
        params={"ids": "bitcoin", "vs_currencies": "usd"},
    )
    return float(data["bitcoin"]["usd"])


def _fetch_coindesk_price() -> float:
    data = _get_json(settings.COINDESK_CURRENT_PRICE_URL)
    return float(data["bpi"]["USD"]["rate_float"])


def _fetch_coinbase_price() -> float:
    data = _get_json(settings.COINBASE_SPOT_PRICE_URL, params={"currency": "USD"})
    return float(data["data"]["amount"])


PRICE_PROVIDERS: Dict[str, Callable[[], float]] = {
    "coingecko": _fetch_coingecko_price,
    "coindesk": _fetch_coindesk_price,
    "coinbase": _fetch_coinbase_price,
}


# ---------------------------------------------------------
# Public API
# ---------------------------------------------------------


def get_live_btc_price() -> PriceSnapshot:
    """
    Fetch the BTC/USD spot price, trying each provider in
    settings.PRICE_PROVIDER_ORDER until one returns a usable price.

    The price is rounded to whole dollars. UI (app.py) is responsible for:
    - caching via st.cache_data
    - handling LiveDataError and falling back to the default price
    """
    failures = []
    for name in settings.PRICE_PROVIDER_ORDER:
        fetch = PRICE_PROVIDERS[name]
        try:
            price = fetch()
        except (requests.RequestException, KeyError, TypeError, ValueError) as exc:
            logger.warning("BTC price provider %s failed: %s", name, exc)
            failures.append(f"{name}: {exc}")
            continue

        if price <= 0:
            logger.warning("BTC price provider %s returned %r", name, price)
            failures.append(f"{name}: non-positive price {price!r}")
            continue

        logger.info("BTC price %.0f USD from %s", price, name)
        return PriceSnapshot(btc_price_usd=float(round(price)), source=name)

    raise LiveDataError(f"Failed to fetch BTC price: {'; '.join(failures)}")


def default_price_snapshot() -> PriceSnapshot:
    return PriceSnapshot(
        btc_price_usd=settings.DEFAULT_BTC_PRICE_USD,
        source="default",
        is_fallback=True,
    )
