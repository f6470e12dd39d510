import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from travelmart.config import settings

# ─── Logging setup (file + console) ───
_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
_LOG_DIR.mkdir(exist_ok=True)

_log_level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)

logging.basicConfig(
    level=_log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    handlers=[
        logging.StreamHandler(),
        RotatingFileHandler(
            _LOG_DIR / "travelmart.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        ),
    ],
)

# Quiet noisy libraries
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

from travelmart.routers import admin, auth, baggage, bookings, cart, checkout, documents, geo, notifications, payments, users

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: launch background scheduler
    scheduler = None
    if settings.scheduler_enabled:
        try:
            from apscheduler.schedulers.asyncio import AsyncIOScheduler
            from apscheduler.triggers.cron import CronTrigger
            from apscheduler.triggers.interval import IntervalTrigger

            scheduler = AsyncIOScheduler()

            async def _expire_pending_payments():
                from travelmart.database import async_session_factory
                from travelmart.services.payment_service import payment_service
                async with async_session_factory() as db:
                    count = await payment_service.expire_stale_payments(db, settings.pending_payment_ttl_hours)
                    if count:
                        logger.info(f"Payments: {count} stale pending payments expired")

            async def _purge_paid_cart_rows():
                from travelmart.database import async_session_factory
                from travelmart.services.cart_service import cart_service
                async with async_session_factory() as db:
                    count = await cart_service.purge_paid(db)
                    if count:
                        logger.info(f"Cart: {count} checked-out rows purged")

            scheduler.add_job(_expire_pending_payments, IntervalTrigger(hours=1), id="expire_payments")
            scheduler.add_job(_purge_paid_cart_rows, CronTrigger(hour=3, minute=0), id="purge_cart")

            scheduler.start()
            logger.info("Background scheduler started")
        except Exception as e:
            logger.error(f"Scheduler failed to start: {e}")

    # Roles, prices, bank accounts and a starter fleet for an empty database
    if settings.seed_on_startup:
        try:
            from travelmart.seed import seed
            await seed()
        except Exception as e:
            logger.warning(f"Auto-seed skipped: {e}")

    yield

    # Shutdown
    from travelmart.services.cache_service import cache_service
    from travelmart.services.geo_service import geo_service
    from travelmart.services.whatsapp_service import whatsapp_service

    await geo_service.close()
    await whatsapp_service.close()
    await cache_service.close()
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")


app = FastAPI(
    title="TravelMart",
    description="Airport services and car rental storefront",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
app.include_router(checkout.router, prefix="/api/checkout", tags=["checkout"])
app.include_router(payments.router, prefix="/api/payments", tags=["payments"])
app.include_router(bookings.router, prefix="/api", tags=["car-rental"])
app.include_router(baggage.router, prefix="/api/baggage", tags=["baggage"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])
app.include_router(geo.router, prefix="/api/geo", tags=["geo"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "service": "travelmart"}


# Uploaded documents and vehicle photos
_storage_dir = Path(settings.storage_dir)
_storage_dir.mkdir(parents=True, exist_ok=True)
app.mount(settings.public_storage_url, StaticFiles(directory=str(_storage_dir)), name="storage")
