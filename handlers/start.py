import asyncio
import functools
import logging

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes

from services.notification_service import subscribe, unsubscribe

logger = logging.getLogger(__name__)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/start <user_id>: deliver that user's price alerts to this chat."""
    if not context.args:
        await update.message.reply_text(
            "👋 Hello! Send /start <your user id> to receive price alerts here.\n"
            "Use /stop to turn them off."
        )
        return

    user_id = context.args[0].strip()
    chat_id = update.effective_chat.id
    loop = asyncio.get_running_loop()
    try:
        await loop.run_in_executor(None, functools.partial(subscribe, user_id, chat_id))
    except Exception as e:
        logger.exception("Failed to subscribe chat %s for user %s", chat_id, user_id)
        await update.message.reply_text(f"⚠️ Could not enable alerts: {e}")
        return

    await update.message.reply_text("✅ Price alerts will be delivered to this chat.")


async def stop_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/stop: stop delivering alerts to this chat."""
    loop = asyncio.get_running_loop()
    changed = await loop.run_in_executor(None, unsubscribe, update.effective_chat.id)
    if changed:
        await update.message.reply_text("🔕 Price alerts disabled for this chat.")
    else:
        await update.message.reply_text("📭 This chat was not receiving alerts.")


# Handler instances to register in bot.py
handler = CommandHandler("start", start_command)
stop_handler = CommandHandler("stop", stop_command)
