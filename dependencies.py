# dependencies.py
from typing import Optional
from fastapi import Depends, HTTPException, Request, Response, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

from pool.context import PoolContext
from pool.models import SecurityEvent, SecurityEventType

bearer_scheme = HTTPBearer(auto_error=False)

def get_pool_context(request: Request) -> PoolContext:
    """Pool state owned by the running application"""
    return request.app.state.pool

def client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"

def record_security_event(request: Request, context: PoolContext, event_type: SecurityEventType, details: str):
    context.security.record(SecurityEvent(
        ip=client_ip(request),
        user_agent=request.headers.get("user-agent"),
        event_type=event_type,
        details=details,
    ))

async def require_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    context: PoolContext = Depends(get_pool_context),
):
    """
    Verifies the admin token provided as a Bearer credential.
    Raises HTTPException 401 and records a security event when it is missing or wrong.
    """
    token = credentials.credentials if credentials else None
    if not context.security.authorize(token):
        record_security_event(
            request, context, SecurityEventType.UNAUTHORIZED_ACCESS,
            "Attempted admin access without token",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return True

def _limit_callback(message: str):
    async def callback(request: Request, response: Response, pexpire: int):
        get_pool_context(request).security.rate_limit_hits += 1
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=message,
            headers={"Retry-After": str(max(1, pexpire // 1000))},
        )
    return callback

class OptionalRateLimiter(RateLimiter):
    """RateLimiter that stands aside when no redis backend was configured"""
    async def __call__(self, request: Request, response: Response):
        if FastAPILimiter.redis is None:
            return
        return await super().__call__(request, response)

def api_rate_limit(times: int, seconds: int) -> OptionalRateLimiter:
    return OptionalRateLimiter(
        times=times, seconds=seconds,
        callback=_limit_callback("Too many requests, please try again later."),
    )

def miner_rate_limit(times: int, seconds: int) -> OptionalRateLimiter:
    return OptionalRateLimiter(
        times=times, seconds=seconds,
        callback=_limit_callback("Mining rate limit exceeded"),
    )
