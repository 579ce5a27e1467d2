# services/notification_service.py
import asyncio
import functools
import logging
from typing import Optional, Dict, Any

from telegram import Bot

import config
from models.notification import Notification, PushSubscription
from services.db_service import get_db

logger = logging.getLogger(__name__)


def store_notification(user_id: str, title: str, message: str, type: str = "info", link: Optional[str] = None) -> Dict[str, Any]:
    """Insert an unread notification row and return it as a plain dict."""
    with get_db() as db:
        notification = Notification(
            user_id=str(user_id),
            title=title,
            message=message,
            type=type,
            link=link,
            is_read=False,
        )
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification.to_dict()


def get_push_chat_id(user_id: str) -> Optional[int]:
    """Telegram chat id of the user's active push subscription, if any."""
    with get_db() as db:
        sub = (
            db.query(PushSubscription)
            .filter(PushSubscription.user_id == str(user_id), PushSubscription.is_active.is_(True))
            .first()
        )
        return sub.chat_id if sub else None


def subscribe(user_id: str, chat_id: int) -> PushSubscription:
    """Create or re-activate the push subscription of a user."""
    if not user_id:
        raise ValueError("user_id is required")

    with get_db() as db:
        sub = db.query(PushSubscription).filter_by(user_id=str(user_id)).first()
        if sub is None:
            sub = PushSubscription(user_id=str(user_id), chat_id=chat_id, is_active=True)
            db.add(sub)
        else:
            sub.chat_id = chat_id
            sub.is_active = True
        db.commit()
        db.refresh(sub)
        logger.info("Push subscription for user %s -> chat %s", user_id, chat_id)
        return sub


def unsubscribe(chat_id: int) -> int:
    """Deactivate every subscription pointing at chat_id. Returns how many changed."""
    with get_db() as db:
        changed = (
            db.query(PushSubscription)
            .filter(PushSubscription.chat_id == chat_id, PushSubscription.is_active.is_(True))
            .update({PushSubscription.is_active: False}, synchronize_session=False)
        )
        db.commit()
        return changed


async def _send_push(chat_id: int, title: str, message: str) -> None:
    async with Bot(config.BOT_TOKEN) as bot:
        await bot.send_message(chat_id=chat_id, text=f"📢 {title}\n{message}")


async def send_notification(
    user_id: str,
    title: str,
    message: str,
    type: str = "alert",
    link: Optional[str] = None,
    send_push: bool = False,
) -> Dict[str, Any]:
    """
    Record a notification for a user and optionally push it to Telegram.

    Raises ValueError on missing fields and propagates database errors.
    Push delivery is best effort: failures are logged and reported through
    the returned "push_sent" flag only.
    """
    if not user_id or not title or not message:
        raise ValueError("Missing required fields: user_id, title, message")

    loop = asyncio.get_running_loop()
    notification = await loop.run_in_executor(
        None, functools.partial(store_notification, user_id, title, message, type, link)
    )

    push_sent = False
    if send_push and config.BOT_TOKEN:
        try:
            chat_id = await loop.run_in_executor(None, get_push_chat_id, user_id)
            if chat_id is not None:
                await _send_push(chat_id, title, message)
                push_sent = True
        except Exception as e:
            logger.exception("Push notification for user %s failed: %s", user_id, e)

    logger.debug("Notification %s created for user %s", notification.get("id"), user_id)
    return {**notification, "push_sent": push_sent}
