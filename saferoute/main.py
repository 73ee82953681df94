from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from saferoute.core.config import settings
from saferoute.core.exceptions import AppException
from saferoute.domains.common import ApiResponse
from saferoute.domains.incidents import incidents_router
from saferoute.domains.incidents.dependencies import get_incident_refresher
from saferoute.domains.routing import routing_router


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initial incident load, then periodic refresh while the app runs."""
    refresher = get_incident_refresher()
    if settings.incident_refresh_enabled:
        try:
            count = await refresher.refresh_once()
            logger.info(f"initial incident load: {count} incidents")
        except Exception as e:
            logger.error(f"initial incident load failed: {e}", exc_info=True)
        refresher.start()
        logger.info(f"incident refresher started (every {settings.incident_refresh_interval_s}s)")
    yield
    await refresher.stop()
    logger.info("incident refresher stopped")


app = FastAPI(
    title="SafeRoute API",
    description="Hazard-aware driving route planning",
    version="1.0.0",
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=f"{settings.api_prefix}/redoc",
    openapi_url=f"{settings.api_prefix}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    body = ApiResponse.fail(exc.message).model_dump()
    body["error_code"] = exc.error_code
    body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception: {exc}")
    body = ApiResponse.fail("Internal server error").model_dump()
    body["error_code"] = "INTERNAL_ERROR"
    body["details"] = str(exc) if settings.debug else None
    return JSONResponse(status_code=500, content=body)


app.include_router(routing_router, prefix=settings.api_prefix)
app.include_router(incidents_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/")
async def root():
    return {
        "name": "SafeRoute API",
        "version": "1.0.0",
        "docs": f"{settings.api_prefix}/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("saferoute.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
