import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.api.deps import get_store
from app.storage.base import RentalStore, StorageError
from app.storage.factory import build_store_factory
from app.schemas.report import StatusOut
from app.api.routes.rooms import router as rooms_router
from app.api.routes.tenants import router as tenants_router
from app.api.routes.readings import router as readings_router
from app.api.routes.bills import router as bills_router
from app.api.routes.payments import router as payments_router
from app.api.routes.reports import router as reports_router
from app.api.routes.backup import router as backup_router

APP_VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Storage backend is chosen once per process
    app.state.store_factory = build_store_factory(settings)
    yield


# 1) Create the app FIRST
app = FastAPI(title="Rental Management Backend", version=APP_VERSION, lifespan=lifespan)

# 2) Add CORS Middleware BEFORE routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": f"Storage unavailable: {exc}"})


# 3) Include routers AFTER app is created
app.include_router(rooms_router)
app.include_router(tenants_router)
app.include_router(readings_router)
app.include_router(bills_router)
app.include_router(payments_router)
app.include_router(reports_router)
app.include_router(backup_router)


# 4) Health check endpoints
@app.get("/health")
def health():
    return {"ok": True, "service": "backend"}


@app.get("/status", response_model=StatusOut)
def status(store: RentalStore = Depends(get_store)):
    """Which backend is live (demo or production) and whether it answers."""
    return StatusOut(
        mode="demo" if settings.is_demo_mode else "production",
        storage=store.backend,
        connected=store.ping(),
        app_version=APP_VERSION,
    )
