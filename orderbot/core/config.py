import os
import logging
from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)


def normalize_private_key(raw):
    """Turns literal backslash-n sequences (as stored in .env files) into real newlines."""
    if raw and "\\n" in raw:
        return raw.replace("\\n", "\n")
    return raw or None


def mask(value, head=10, tail=10):
    """Masks a secret for diagnostic output."""
    if not value:
        return "<<missing>>"
    if len(value) <= head + tail:
        return value
    return value[:head] + "..." + (value[-tail:] if tail else "")


# Application Metadata
PROJECT_NAME = "LINE Order Bot"
VERSION = "1.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", 3000))

# Local database, only used for webhook event idempotency
DB_URL = os.getenv("DATABASE_URL", "sqlite://orderbot.sqlite3")

# LINE Messaging API
LINE_TOKEN = os.getenv("LINE_TOKEN")
LINE_API_BASE = os.getenv("LINE_API_BASE", "https://api.line.me")
LINE_DATA_API_BASE = os.getenv("LINE_DATA_API_BASE", "https://api-data.line.me")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", 10))

# Google service account and resources
SHEET_ID = os.getenv("SHEET_ID")
VOICE_FOLDER_ID = os.getenv("VOICE_FOLDER_ID")
GOOGLE_CLIENT_EMAIL = os.getenv("GOOGLE_CLIENT_EMAIL") or None
GOOGLE_PRIVATE_KEY = normalize_private_key(os.getenv("GOOGLE_PRIVATE_KEY"))
GOOGLE_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]

# Sheet layout (fixed, positional columns)
STOCK_RANGE = os.getenv("STOCK_RANGE", "สต็อก!A:E")
ORDERS_RANGE = os.getenv("ORDERS_RANGE", "คำสั่งซื้อ!A:K")

SPEECH_LANGUAGE = os.getenv("SPEECH_LANGUAGE", "th-TH")


def log_diagnostics():
    """Logs masked credential diagnostics and warns about missing settings. Never raises."""
    log.info("DIAG: GOOGLE_CLIENT_EMAIL = %s", mask(GOOGLE_CLIENT_EMAIL, 40, 0))
    log.info("DIAG: GOOGLE_PRIVATE_KEY present? %s", bool(GOOGLE_PRIVATE_KEY))
    if GOOGLE_PRIVATE_KEY:
        log.info("DIAG: PRIVATE_KEY startsWith BEGIN? %s", GOOGLE_PRIVATE_KEY.strip().startswith("-----BEGIN"))
        log.info("DIAG: PRIVATE_KEY length: %d", len(GOOGLE_PRIVATE_KEY))

    if not SHEET_ID:
        log.warning("SHEET_ID missing")
    if not LINE_TOKEN:
        log.warning("LINE_TOKEN missing")
    if not GOOGLE_PRIVATE_KEY or not GOOGLE_CLIENT_EMAIL:
        log.error(
            "Google service account credentials missing or malformed. "
            "Check GOOGLE_PRIVATE_KEY and GOOGLE_CLIENT_EMAIL in env."
        )
