from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from api.audit import router as audit_router
from api.beds import router as beds_router
from api.clinical import router as clinical_router
from api.healthcheck import router as healthcheck_router
from api.shifts import router as shifts_router
from api.staff import router as staff_router
from config.paths import SNAPSHOT_PATH as DEFAULT_SNAPSHOT_PATH
from facility.carehome import CareHome
from persistence.snapshot import read_snapshot, write_snapshot
from utils.logger import logger
from dotenv import load_dotenv
from typing import Optional
import os
import logging
import secrets

load_dotenv()
# env
API_KEY = os.getenv("API_KEY")
CORS_ALLOW_ORIGINS = [o for o in os.getenv("CORS_ALLOW_ORIGINS", "").split(",") if o]
SNAPSHOT_PATH = os.getenv("CAREHOME_SNAPSHOT_PATH", str(DEFAULT_SNAPSHOT_PATH))
SAVE_ON_SHUTDOWN = os.getenv("CAREHOME_SAVE_ON_SHUTDOWN", "false") == "true"
SEED_LAYOUT = os.getenv("CAREHOME_SEED_LAYOUT", "true") == "true"

# Public paths that should NOT require the API key
PUBLIC_EXACT = {
    "/openapi.json",
    "/redoc",
    "/docs",
    "/api/health/check",
}

PUBLIC_PREFIXES = (
    "/docs/",
    "/api/health/check",
)


def build_home() -> CareHome:
    """Restore the home from the snapshot workbook if it exists, else start empty."""
    if os.path.exists(SNAPSHOT_PATH):
        home = read_snapshot(SNAPSHOT_PATH)
    else:
        home = CareHome()
    if SEED_LAYOUT and not home.has_any_beds():
        home.seed_default_layout()
    return home


def create_app(home: Optional[CareHome] = None, api_key: Optional[str] = API_KEY) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if SAVE_ON_SHUTDOWN:
            Path(SNAPSHOT_PATH).parent.mkdir(parents=True, exist_ok=True)
            write_snapshot(app.state.home, SNAPSHOT_PATH)
            logger.info("Saved snapshot to %s on shutdown", SNAPSHOT_PATH)

    app = FastAPI(title="Care Home Operations API", lifespan=lifespan)
    app.state.home = home if home is not None else build_home()

    # middlewares
    if os.getenv("ENABLE_CORS") == "true":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=CORS_ALLOW_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # API key middleware
    @app.middleware("http")
    async def api_key_guard(request: Request, call_next):
        path = request.url.path

        if request.method == "OPTIONS":
            return await call_next(request)

        if path in PUBLIC_EXACT or any(path.startswith(p) for p in PUBLIC_PREFIXES):
            return await call_next(request)

        if not api_key:
            logging.warning("API_KEY not set; API key auth is DISABLED (dev mode).")
            return await call_next(request)

        client_key = request.headers.get("x-api-key")
        if not client_key or not secrets.compare_digest(str(client_key), str(api_key)):
            return JSONResponse(status_code=401, content={"detail": "Unauthorized"})

        return await call_next(request)

    # Register routers
    app.include_router(staff_router, prefix="/api")
    app.include_router(shifts_router, prefix="/api")
    app.include_router(beds_router, prefix="/api")
    app.include_router(clinical_router, prefix="/api")
    app.include_router(audit_router, prefix="/api")
    app.include_router(healthcheck_router, prefix="/api")
    return app


app = create_app()
