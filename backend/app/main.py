"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import calculator, claims, clients, endorsements, notes, policies, sequences
from app.core.config import settings
from app.core.errors import BrokerageError
from app.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging(settings.LOG_LEVEL or ("DEBUG" if settings.APP_ENV == "development" else "INFO"))
    startup_logger = get_logger("startup")
    startup_logger.info("Application starting", env=settings.APP_ENV)
    yield
    startup_logger.info("Application shutting down")


app = FastAPI(
    title="Brokerage Back-Office API",
    description="Document numbering and premium calculation for an insurance brokerage",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BrokerageError)
async def brokerage_error_handler(request: Request, exc: BrokerageError) -> JSONResponse:
    """Map domain errors to {"error", "code", "details"} with the error's status."""
    log = logger.bind(path=request.url.path, code=exc.code)
    if exc.http_status >= 500:
        log.error("Request failed", error=exc.message)
    else:
        log.info("Request rejected", error=exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


API_PREFIX = "/api/v1"
app.include_router(sequences.router, prefix=API_PREFIX)
app.include_router(calculator.router, prefix=API_PREFIX)
app.include_router(clients.router, prefix=API_PREFIX)
app.include_router(policies.router, prefix=API_PREFIX)
app.include_router(endorsements.router, prefix=API_PREFIX)
app.include_router(notes.router, prefix=API_PREFIX)
app.include_router(claims.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.APP_ENV == "development",
        log_level=(settings.LOG_LEVEL or "info").lower(),
    )
