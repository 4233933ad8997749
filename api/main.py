from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from auth import router as auth_router
from auth import security
from core import config, db
from core import logging as app_logging
from core.errors import catch_unhandled_errors, install_error_handlers
from releases import router as releases_router
from shows import router as shows_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Order matters: logging first, then the fatal secret check, then the pool.
    app_logging.configure_logging()
    security.require_jwt_secret()
    await db.init_pool()
    logger.info("startup env=%s version=%s", config.app_env(), config.app_version())
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Middleware added later wraps earlier: access log, then CORS, then the 500 fallback.
app.middleware("http")(catch_unhandled_errors)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(app_logging.log_requests)

install_error_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(shows_router.router, tags=["shows"])
app.include_router(releases_router.router, tags=["releases"])
app.include_router(releases_router.edit_router, tags=["releases"])


@app.get("/api/health")
async def health() -> JSONResponse:
    body = {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": config.app_version(),
        "database": "connected",
        "environment": config.app_env(),
    }
    try:
        await db.ping()
    except Exception as exc:
        logger.warning("health_check_failed error=%s", exc)
        body.update(status="unhealthy", database="disconnected")
        if not config.is_production():
            body["error"] = str(exc)
        return JSONResponse(status_code=503, content=body)
    return JSONResponse(content=body)
