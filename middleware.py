# middleware.py
from fastapi import FastAPI, Request
from utils.logging import logger
import time

SECURITY_HEADERS = [
    (b"content-security-policy", b"default-src 'self'; img-src 'self' data: https:; frame-ancestors 'none'"),
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"no-referrer"),
    (b"strict-transport-security", b"max-age=15552000; includeSubDomains"),
    (b"cross-origin-opener-policy", b"same-origin"),
]

async def add_process_time_header(request: Request, call_next):
    """Report the handler time in seconds as X-Process-Time"""
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Process-Time"] = f"{time.perf_counter() - started:.6f}"
    return response

class SecurityHeadersMiddleware:
    """Middleware adding browser hardening headers to every HTTP response"""
    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        async def wrapped_send(message):
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                present = {name.lower() for name, _ in headers}
                headers.extend(h for h in SECURITY_HEADERS if h[0] not in present)
                message["headers"] = headers
            await send(message)

        return await self.app(scope, receive, wrapped_send)

class LoggingMiddleware:
    """Logs method, path, status and duration of every HTTP request"""
    def __init__(self, app: FastAPI):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        started = time.perf_counter()

        async def wrapped_send(message):
            if message["type"] == "http.response.start":
                elapsed = time.perf_counter() - started
                logger.info(f"{scope['method']} {scope['path']} -> {message['status']} ({elapsed:.3f}s)")
            await send(message)

        return await self.app(scope, receive, wrapped_send)

def setup_middleware(app: FastAPI):
    """Install the pool's middleware stack; CORS is configured in create_application"""
    app.middleware("http")(add_process_time_header)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)
    logger.info("Middleware setup completed")
