"""Memory Lane Backend API - FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import __version__
from .config import get_settings
from .errors import InvalidArgument, NotFoundOrUnauthorized, Unauthenticated
from .logging_config import configure_logging, get_logger
from .rate_limit import limiter
from .routes import media_router, memories_router, reminders_router, suggestions_router

logger = get_logger("memorylane.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    logger.info(f"Starting Memory Lane Backend API (debug={settings.debug})")
    yield
    logger.info("Shutting down Memory Lane Backend API")


app = FastAPI(
    title="Memory Lane Backend API",
    description="Personal memory journal: memories, reminders, suggestions, map and timeline views",
    version=__version__,
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Unauthenticated)
async def unauthenticated_handler(request: Request, exc: Unauthenticated):
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(NotFoundOrUnauthorized)
async def not_found_handler(request: Request, exc: NotFoundOrUnauthorized):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.detail})


@app.exception_handler(InvalidArgument)
async def invalid_argument_handler(request: Request, exc: InvalidArgument):
    content = {"detail": exc.detail}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=content)


# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(memories_router)
app.include_router(media_router)
app.include_router(reminders_router)
app.include_router(suggestions_router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "memorylane-backend",
        "version": __version__,
        "status": "ok",
    }


@app.get("/health")
async def health():
    """Detailed health check with actual database verification."""
    from .database import check_connection, get_supabase_client

    db_status = "disconnected"
    try:
        await check_connection(get_supabase_client())
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)[:50]}"

    overall_status = "healthy" if db_status == "connected" else "degraded"

    return {
        "status": overall_status,
        "database": db_status,
    }
