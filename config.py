import os
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

# Database (default: local SQLite file)
DB_PATH = os.environ.get("DB_PATH", "database.db")
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DB_PATH}")

# Logging level (default: INFO)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Market data
BINANCE_API_URL = os.environ.get("BINANCE_API_URL", "https://api.binance.com").rstrip("/")
PRICE_FETCH_TIMEOUT = float(os.environ.get("PRICE_FETCH_TIMEOUT", "10"))

# Telegram bot token (optional: only needed for push delivery and bot.py)
BOT_TOKEN = os.environ.get("BOT_TOKEN")

# Repeating job used by bot.py (seconds)
MONITOR_INTERVAL = int(os.environ.get("MONITOR_INTERVAL", "60"))
MONITOR_FIRST_RUN = int(os.environ.get("MONITOR_FIRST_RUN", "5"))
