import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from newsdesk.adapters.sqlite.migrator import SQLiteMigrator
from newsdesk.api.deps import get_settings
from newsdesk.core.errors import (
    AuthorizationError,
    NewsletterError,
    ValidationError,
    format_error_chain,
)
from newsdesk.rules.loader import load_rules

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load rules and bring the schema up to date before serving (fail-fast)."""
    settings = get_settings()

    try:
        rules = load_rules(settings.rules_path)
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        applied = SQLiteMigrator(
            settings.db_path(rules), settings.migrations_dir(rules)
        ).run_migrations()
    except Exception:
        logger.critical("Startup failed", exc_info=True)
        raise

    logger.info(
        "Rules loaded from %s; %d migration(s) applied", settings.rules_path, len(applied)
    )
    yield


app = FastAPI(
    title="newsdesk",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# --- Error mapping ---
@app.exception_handler(NewsletterError)
async def newsletter_error_handler(request: Request, exc: NewsletterError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": exc.reason})
    if isinstance(exc, AuthorizationError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED, content={"detail": exc.reason}
        )

    logger.error(
        "%s %s failed: %s",
        request.method,
        request.url.path,
        format_error_chain(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [str(err["loc"][-1]) for err in exc.errors() if err.get("loc")]
    detail = f"Missing or invalid field(s): {', '.join(fields)}" if fields else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


# --- Routers ---
from newsdesk.api.routes import admin_newsletters, subscriptions  # noqa: E402

app.include_router(subscriptions.router, tags=["Subscriptions"])
app.include_router(admin_newsletters.router, prefix="/admin", tags=["Admin Newsletters"])


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "newsdesk"}
