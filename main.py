import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import Base, engine
from routes import public_router
from services import render_error_page

DEFAULT_ALLOWED_ORIGINS = "http://localhost:3000,http://localhost:3001"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-DNS-Prefetch-Control": "off",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
}

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def get_allowed_origins() -> list[str]:
    raw = os.getenv("ALLOWED_ORIGINS") or DEFAULT_ALLOWED_ORIGINS
    return [o.strip() for o in raw.split(",") if o.strip()]


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails startup if the database is unreachable.
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Review Runner Tracking Server started environment=%s port=%s",
        os.getenv("ENVIRONMENT", "development"),
        os.getenv("PORT", "3001"),
    )
    yield
    logger.info("Shutting down, closing database connections")
    engine.dispose()


app = FastAPI(title="Review Runner Tracking", lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

# ── Middleware ───────────────────────────────────────────────────────────────
app.add_middleware(GZipMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# ── Error pages ──────────────────────────────────────────────────────────────
@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code not in (404, 405):
        return await http_exception_handler(request, exc)
    # Unmatched paths and methods both render the tracking 404 page.
    logger.warning("Route not found method=%s url=%s status=%s", request.method, request.url.path, exc.status_code)
    return HTMLResponse(
        render_error_page(
            "Not Found",
            "The requested tracking link could not be found.",
            "Please check the URL and try again.",
        ),
        status_code=404,
    )


@app.exception_handler(Exception)
async def server_error_handler(request: Request, exc: Exception):
    # Runs in ServerErrorMiddleware, outside security_headers, so headers are set here.
    logger.error("Unhandled server error method=%s url=%s", request.method, request.url.path, exc_info=exc)
    return HTMLResponse(
        render_error_page(
            "Server Error",
            "An unexpected error occurred.",
            "Please try again later.",
        ),
        status_code=500,
        headers=SECURITY_HEADERS,
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(public_router)


# ── Local dev entry point ────────────────────────────────────────────────────
if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description="Review Runner tracking server")
    parser.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3001")))
    args = parser.parse_args()

    os.environ["PORT"] = str(args.port)
    uvicorn.run("main:app", host=args.host, port=args.port, log_level=os.getenv("LOG_LEVEL", "info").lower())
