import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .crud import record_click
from .database import get_db, init_db, close_db
from .api import links
from .middleware import OriginAllowListMiddleware
from .observability import PrometheusMiddleware, metrics_endpoint, REDIRECT_TOTAL, REDIRECT_404_TOTAL
from .logging_config import setup_logging
from .schemas import HealthResponse

setup_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

API_VERSION = "1.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup logic
    await init_db()
    yield
    # Shutdown logic
    await close_db()

app = FastAPI(
    title="TinyLink",
    description="A URL shortener with click tracking",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(PrometheusMiddleware)
# Added before CORSMiddleware so preflights are answered by CORS first
app.add_middleware(OriginAllowListMiddleware, allow_origins=settings.CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid URL"})

app.add_route("/metrics", metrics_endpoint)

app.include_router(links.router, prefix="/api")

@app.get("/healthz", response_model=HealthResponse)
async def health():
    return {"ok": True, "version": API_VERSION}

@app.get("/{code}", include_in_schema=False)
async def redirect_to_url(
    code: str,
    db: AsyncSession = Depends(get_db)
):
    # Browsers land here directly, so errors are plain text
    try:
        link = await record_click(db, code)
    except Exception:
        logger.exception("Failed to record click for %s", code)
        return PlainTextResponse("Server error", status_code=500)

    if not link:
        REDIRECT_404_TOTAL.inc()
        return PlainTextResponse("Not found", status_code=404)

    REDIRECT_TOTAL.inc()
    return RedirectResponse(url=link.target_url, status_code=302)

def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)

if __name__ == "__main__":
    run()
