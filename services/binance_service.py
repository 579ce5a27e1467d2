# services/binance_service.py
import logging
from datetime import datetime, timezone
from decimal import Decimal

import requests

from config import BINANCE_API_URL, PRICE_FETCH_TIMEOUT
from utils.normalize_data import normalize_symbol, to_decimal

logger = logging.getLogger(__name__)


class BinanceService:
    """Read-only client for the public Binance spot ticker endpoints."""

    def __init__(self, base_url: str = BINANCE_API_URL, timeout: float = PRICE_FETCH_TIMEOUT, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, endpoint: str, params: dict):
        """Internal request handler; every failure surfaces as RuntimeError."""
        url = f"{self.base_url}/api/v3/{endpoint}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RuntimeError(f"[Binance] HTTP error for {url}: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            raise RuntimeError(f"[Binance] non-json response ({response.status_code}): {response.text[:200]}")

        if not response.ok:
            # Binance errors look like {"code": -1121, "msg": "Invalid symbol."}
            message = data.get("msg") if isinstance(data, dict) else data
            raise RuntimeError(f"[Binance] {response.status_code} for {params}: {message}")
        return data

    def get_price(self, symbol: str) -> Decimal:
        """Fetch the latest traded price."""
        norm_symbol = normalize_symbol(symbol)
        if not norm_symbol:
            raise ValueError("Empty symbol")

        data = self._request("ticker/price", {"symbol": norm_symbol})
        if not isinstance(data, dict) or "price" not in data:
            raise RuntimeError(f"[Binance] unexpected price payload for {norm_symbol}: {data}")
        try:
            return to_decimal(data["price"])
        except ValueError as exc:
            raise RuntimeError(f"[Binance] unparsable price for {norm_symbol}: {data['price']!r}") from exc

    def get_ticker_24h(self, symbol: str) -> dict:
        """
        Fetch a 24h ticker and return it as a price snapshot:
        {"symbol", "price", "change_24h", "volume_24h", "recorded_at"}.
        """
        norm_symbol = normalize_symbol(symbol)
        if not norm_symbol:
            raise ValueError("Empty symbol")

        data = self._request("ticker/24hr", {"symbol": norm_symbol})
        try:
            return {
                "symbol": norm_symbol,
                "price": to_decimal(data["lastPrice"]),
                "change_24h": to_decimal(data["priceChangePercent"]),
                "volume_24h": to_decimal(data["volume"]),
                "recorded_at": datetime.now(timezone.utc),
            }
        except (KeyError, TypeError, ValueError) as exc:
            raise RuntimeError(f"[Binance] unexpected 24h ticker payload for {norm_symbol}: {data}") from exc
