# services/alert_service.py
from datetime import datetime, timezone
from typing import List, Optional
import logging

from models.alert import PriceAlert
from services.db_service import get_db

logger = logging.getLogger(__name__)


def get_pending_alerts() -> List[PriceAlert]:
    """Return all alerts that are active and have not been triggered yet."""
    with get_db() as db:
        return (
            db.query(PriceAlert)
            .filter(PriceAlert.is_active.is_(True), PriceAlert.triggered_at.is_(None))
            .order_by(PriceAlert.id)
            .all()
        )


def mark_alert_triggered(alert_id: int, triggered_at: Optional[datetime] = None) -> bool:
    """
    Consume an alert: set triggered_at and deactivate it.

    The update is conditional on the alert still being pending, so two
    overlapping passes cannot both consume it. Returns True when this call
    changed the row, False when it was already triggered, deactivated or gone.
    """
    if triggered_at is None:
        triggered_at = datetime.now(timezone.utc)

    with get_db() as db:
        updated = (
            db.query(PriceAlert)
            .filter(
                PriceAlert.id == alert_id,
                PriceAlert.is_active.is_(True),
                PriceAlert.triggered_at.is_(None),
            )
            .update(
                {PriceAlert.triggered_at: triggered_at, PriceAlert.is_active: False},
                synchronize_session=False,
            )
        )
        db.commit()

    if not updated:
        logger.info("Alert %s was no longer pending; left unchanged", alert_id)
    return updated > 0
