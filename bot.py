# bot.py

import logging
from telegram.ext import Application
from config import LOG_LEVEL, BOT_TOKEN, MONITOR_INTERVAL, MONITOR_FIRST_RUN
from handlers import start
from services.db_service import init_db
from utils.alert_checker import check_alerts_job

# Setup logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=LOG_LEVEL
)
logger = logging.getLogger(__name__)


def main():
    """Start the push bot and the repeating evaluation job."""
    if not BOT_TOKEN:
        raise ValueError("BOT_TOKEN environment variable is required")

    init_db()  # Create tables if not exist

    application = Application.builder().token(BOT_TOKEN).build()

    application.add_handler(start.handler)
    application.add_handler(start.stop_handler)

    # The job queue never runs two instances of the same job at once
    application.job_queue.run_repeating(check_alerts_job, interval=MONITOR_INTERVAL, first=MONITOR_FIRST_RUN)

    logger.info("Bot is starting...")
    application.run_polling()


if __name__ == "__main__":
    main()
