# utils/alert_checker.py
import asyncio
import functools
import logging
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Optional

from models.alert import AlertCondition, AssetType
from services.alert_service import get_pending_alerts, mark_alert_triggered
from services.binance_service import BinanceService
from services.notification_service import send_notification
from utils.normalize_data import format_price, normalize_symbol, to_decimal

logger = logging.getLogger(__name__)

NOTIFICATION_TITLE = "Price Alert Triggered"

market_data = BinanceService()


def _enum_value(value) -> str:
    return str(getattr(value, "value", value) or "").strip().lower()


def should_trigger(condition, current_price, target_price) -> bool:
    """
    Both directions are boundary-inclusive:
      above -> current_price >= target_price
      below -> current_price <= target_price
    Unknown conditions never trigger.
    """
    cond = _enum_value(condition)
    if cond == AlertCondition.ABOVE.value:
        return to_decimal(current_price) >= to_decimal(target_price)
    if cond == AlertCondition.BELOW.value:
        return to_decimal(current_price) <= to_decimal(target_price)
    return False


def group_crypto_alerts(alerts: Iterable) -> Dict[str, List]:
    """Group crypto alerts by normalized symbol, keeping first-seen symbol order."""
    alerts_by_symbol = defaultdict(list)
    for alert in alerts:
        if _enum_value(alert.asset_type) != AssetType.CRYPTO.value:
            logger.debug("[AlertChecker] Alert %s is %s; not evaluated by this pass", alert.id, alert.asset_type)
            continue
        symbol = normalize_symbol(alert.symbol)
        if not symbol:
            logger.warning("[AlertChecker] Alert %s has an empty symbol; skipping", alert.id)
            continue
        alerts_by_symbol[symbol].append(alert)
    return dict(alerts_by_symbol)


def find_triggered(alerts: Iterable, current_price: Decimal) -> List:
    """Alerts (of one symbol) whose condition holds at current_price."""
    triggered = []
    for alert in alerts:
        try:
            if should_trigger(alert.condition, current_price, alert.target_price):
                triggered.append(alert)
            elif _enum_value(alert.condition) not in (AlertCondition.ABOVE.value, AlertCondition.BELOW.value):
                logger.warning("[AlertChecker] Alert %s has unknown condition %r", alert.id, alert.condition)
        except ValueError as e:
            logger.warning("[AlertChecker] Alert %s has invalid target_price %r: %s", alert.id, alert.target_price, e)
    return triggered


def build_message(alert, current_price) -> str:
    return (
        f"{alert.symbol} is now {_enum_value(alert.condition)} ${format_price(alert.target_price)}. "
        f"Current price: ${format_price(current_price)}"
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def evaluate_alerts(
    fetch_price: Optional[Callable] = None,
    notify: Optional[Callable] = None,
    clock: Callable[[], datetime] = _utcnow,
) -> dict:
    """
    One complete evaluation pass over every pending alert.

    fetch_price(symbol) is a blocking call returning the current price;
    notify(user_id, title, message, type=..., send_push=...) is a coroutine function.
    A failure loading the pending alerts propagates to the caller; every
    other failure is logged and scoped to its symbol or alert.

    Returns {"checked": <alerts examined>, "triggered": <alerts consumed>}.
    """
    fetch_price = fetch_price or market_data.get_price
    notify = notify or send_notification
    loop = asyncio.get_running_loop()

    alerts = await loop.run_in_executor(None, get_pending_alerts)
    if not alerts:
        return {"checked": 0, "triggered": 0}

    alerts_by_symbol = group_crypto_alerts(alerts)
    triggered_count = 0

    for symbol, symbol_alerts in alerts_by_symbol.items():
        try:
            current_price = to_decimal(await loop.run_in_executor(None, functools.partial(fetch_price, symbol)))
        except Exception as e:
            logger.warning("[AlertChecker] Price fetch failed for %s (skipping %d alerts): %s", symbol, len(symbol_alerts), e)
            continue

        for alert in find_triggered(symbol_alerts, current_price):
            try:
                consumed = await loop.run_in_executor(
                    None, functools.partial(mark_alert_triggered, alert.id, clock())
                )
            except Exception as e:
                logger.exception("[AlertChecker] Failed to mark alert %s as triggered: %s", alert.id, e)
                consumed = True

            if not consumed:
                continue
            triggered_count += 1

            try:
                await notify(alert.user_id, NOTIFICATION_TITLE, build_message(alert, current_price), type="alert", send_push=True)
            except Exception as e:
                logger.exception("[AlertChecker] Failed to notify user %s for alert %s: %s", alert.user_id, alert.id, e)

    logger.info("[AlertChecker] Checked %d alerts, triggered %d", len(alerts), triggered_count)
    return {"checked": len(alerts), "triggered": triggered_count}


async def check_alerts_job(context):
    """Repeating job-queue callback: one evaluation pass, failures logged."""
    try:
        await evaluate_alerts()
    except Exception as e:
        logger.exception("[AlertChecker] Evaluation pass failed: %s", e)
