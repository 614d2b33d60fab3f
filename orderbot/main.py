import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from orderbot.core.db import init_db, close_db
from orderbot.core.config import PROJECT_NAME, VERSION, LOG_LEVEL, PORT, log_diagnostics
from orderbot.core.services import build_services
from orderbot.api.v1.webhook import router as webhook_router
from orderbot.api.v1.orders import router as orders_router
from orderbot.api.v1.inventory import router as inventory_router
from orderbot.core.exception_handlers import setup_exception_handlers

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    log_diagnostics()
    await init_db() # Idempotency table for webhook events
    app.state.services = build_services()
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# LINE calls the webhook at the root path; the HTTP order API is versioned
app.include_router(webhook_router, tags=["LINE Webhook"])
app.include_router(orders_router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["Stock"])


setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("orderbot.main:app", host="0.0.0.0", port=PORT)
