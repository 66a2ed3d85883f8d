# api.py
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from fastapi_limiter import FastAPILimiter
from redis import asyncio as aioredis
from typing import Callable, Optional
import asyncio
import uvicorn

from config import Settings, settings as default_settings
from dependencies import api_rate_limit, miner_rate_limit
from middleware import setup_middleware
from pool.clock import current_millis
from pool.context import build_pool_context
from pool.issuance import TokenIssuer
from routes import admin, general, stats
from routes.miner import routes as miner
from utils.logging import logger, set_log_level
from utils.monitoring import StatsReporter

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the FastAPI application"""
    context = app.state.pool
    settings = context.settings
    redis = None

    if settings.REDIS_URL:
        redis = aioredis.from_url(settings.REDIS_URL, encoding="utf8", decode_responses=True)
        await FastAPILimiter.init(redis)
        logger.info("Rate limiter initialized")
    else:
        logger.warning("REDIS_URL not set, request rate limiting disabled")

    reporter = StatsReporter(context, settings.STATS_LOG_INTERVAL)
    app.state.monitor_tasks = [
        asyncio.create_task(reporter.monitor_task())
    ]

    logger.info(f"Mining pool started on {settings.HOST}:{settings.PORT}")
    logger.info(f"Token: {settings.TOKEN_ADDRESS} ({settings.NETWORK})")
    logger.info(f"Pool fee: {settings.POOL_FEE}%")

    yield

    logger.info("Starting application shutdown")
    for task in app.state.monitor_tasks:
        task.cancel()
    await asyncio.gather(*app.state.monitor_tasks, return_exceptions=True)

    await context.issuer.close()
    if redis:
        await redis.close()
        FastAPILimiter.redis = None

    try:
        context.save_snapshot()
    except OSError as e:
        logger.error(f"Failed to save miner data: {str(e)}")

    logger.info("Application shutdown completed")

async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )

async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected malformed body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})

async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})

def create_application(
    settings: Optional[Settings] = None,
    issuer: Optional[TokenIssuer] = None,
    clock: Callable[[], int] = current_millis,
) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or default_settings
    set_log_level(settings.LOG_LEVEL)

    app = FastAPI(
        title="Mining Pool API",
        description="Share submission and reward coordination for a token mining pool",
        version=general.API_VERSION,
        lifespan=lifespan
    )
    app.state.pool = build_pool_context(settings, issuer=issuer, clock=clock)

    # Setup CORS
    if settings.DEBUG:
        # In development, can allow all origins
        origins = ["*"]
    else:
        origins = settings.get_allowed_origins()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        max_age=86400,  # Cache preflight requests for 24 hours
    )

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    api_limiter = Depends(api_rate_limit(settings.API_RATE_LIMIT, settings.API_RATE_WINDOW))
    miner_limiter = Depends(miner_rate_limit(settings.MINER_RATE_LIMIT, settings.MINER_RATE_WINDOW))

    # Include routers
    app.include_router(general.router)
    app.include_router(general.info_router, prefix="/api", dependencies=[api_limiter])
    app.include_router(stats.router, prefix="/api", dependencies=[api_limiter])
    app.include_router(miner.router, prefix="/api/miner", dependencies=[api_limiter, miner_limiter])
    app.include_router(admin.router, prefix="/api/admin", dependencies=[api_limiter])

    # Additional middleware
    setup_middleware(app)

    return app

# Create the application instance
app = create_application()

if __name__ == "__main__":
    uvicorn.run(
        "api:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        access_log=True
    )
