import logging

from fastapi import FastAPI
from fastapi import Request as FastAPIRequest
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from vibepilot.api import api_router
from vibepilot.core.config import get_settings
from vibepilot.core.rate_limit import limiter, rate_limit_exceeded_handler
from vibepilot.core.security_headers import SecurityHeadersMiddleware

settings = get_settings()

# Module loggers (search, interpreter, playlists) emit INFO diagnostics
logging.getLogger("vibepilot").setLevel(logging.INFO)

CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]

app = FastAPI(
    title="VibePilot API",
    description="Describe a vibe, get Deezer tracks and playlists",
    version="0.1.0",
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

logger = logging.getLogger(__name__)


@app.exception_handler(Exception)
async def global_exception_handler(request: FastAPIRequest, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a generic 500 response."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if not settings.is_production:
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)


app.add_middleware(SecurityHeadersMiddleware)

if settings.cors_origins.strip() == "*":
    # Bearer tokens, not cookies, so credentials are not needed for wildcard dev CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
else:
    origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=["Authorization", "Content-Type"],
    )

app.include_router(api_router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "ok"}
