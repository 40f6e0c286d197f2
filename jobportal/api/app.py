"""FastAPI application."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError

from jobportal import __version__
from jobportal.api.limiter import limiter
from jobportal.config import settings
from jobportal.db.base import init_db
from jobportal.utils.uploads import URL_PREFIX, ensure_upload_dirs, upload_root

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    try:
        init_db()
    except ValueError:
        logger.warning("DATABASE_URL not configured, skipping table creation")
    yield


app = FastAPI(
    title="Job Portal API",
    description="Job postings, applications, saved jobs and profiles",
    version=__version__,
    lifespan=lifespan,
)

app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 with a clear message when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}"},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters are plain bad requests."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError):
    """A unique or foreign key constraint rejected the write."""
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(status_code=409, content={"detail": "Conflict with existing data"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Log the failure and answer with a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


# Import and include routers
from jobportal.api.routes import admin, applications, auth, jobs, profile, saved_jobs  # noqa: E402

app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(jobs.router, prefix="/jobs", tags=["Jobs"])
app.include_router(applications.router, prefix="/applications", tags=["Applications"])
app.include_router(saved_jobs.router, prefix="/saved-jobs", tags=["Saved Jobs"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])


@app.get("/")
def root():
    """API index."""
    return {
        "message": "Job Portal API",
        "version": __version__,
        "endpoints": {
            "auth": "/auth (register, login, me)",
            "profile": "/profile (basic, about, skills, experience, education, resume, avatar)",
            "jobs": "/jobs (CRUD operations)",
            "applications": "/applications (apply, my-applications)",
            "saved_jobs": "/saved-jobs (save, unsave)",
            "admin": "/admin (users, jobs, applications, stats)",
        },
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now(UTC).isoformat()}


# Serve uploaded resumes and avatars
ensure_upload_dirs()
app.mount(URL_PREFIX, StaticFiles(directory=upload_root()), name="uploads")
