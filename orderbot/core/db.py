from tortoise import Tortoise
from orderbot.core.config import DB_URL
import logging
from logging import INFO

# Set logging level for Tortoise ORM
logging.getLogger('tortoise').setLevel(INFO)
log = logging.getLogger(__name__)

# The ledger itself lives in Google Sheets; the local DB only tracks processed webhook events
MODELS_MODULES = [
    "orderbot.models.processed_event",
]

async def init_db():
    """Initializes the Tortoise ORM connection and generates schemas."""
    try:
        await Tortoise.init(
            db_url=DB_URL,
            modules={"models": MODELS_MODULES},
        )
        await Tortoise.generate_schemas()
        log.info("Database connection established and schemas generated.")
    except Exception as e:
        log.critical(f"Could not connect to database at {DB_URL}. Error: {e}")
        raise

async def close_db():
    """Closes all database connections."""
    await Tortoise.close_connections()
    log.info("Database connections closed.")
