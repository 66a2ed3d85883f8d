# routes/admin.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Optional

from dependencies import get_pool_context, require_admin
from pool.context import PoolContext
from utils.logging import logger
from utils.monitoring import memory_usage

router = APIRouter(dependencies=[Depends(require_admin)])

class SecurityModeRequest(BaseModel):
    mode: Optional[str] = None
    targetWallet: Optional[str] = None

@router.get("/security")
async def security_dashboard(context: PoolContext = Depends(get_pool_context)):
    """Recent security events, process health and network totals"""
    security = context.security
    view = context.compute_stats()
    return {
        "securityLogs": {
            "recentEvents": [e.to_dict() for e in security.recent(context.settings.ADMIN_RECENT_EVENTS)],
            "totalEvents": len(security.events),
            "rejectedConnections": security.rejected_connections,
            "rateLimitHits": security.rate_limit_hits,
            "securityModeEnabled": security.security_mode_enabled,
            "securityModeStarted": security.security_mode_started,
            "targetWallet": security.target_wallet,
        },
        "systemHealth": {
            "uptime": context.uptime(),
            "memoryUsage": memory_usage(),
            "activeConnections": view.all_time_miners,
            "totalShares": view.total_shares,
        },
        "networkStats": {
            "totalMiners": view.all_time_miners,
            "activeMiners": view.total_miners,
            "totalHashrate": view.total_hashrate,
        },
    }

@router.post("/security-mode")
async def set_security_mode(body: SecurityModeRequest, context: PoolContext = Depends(get_pool_context)):
    """Toggle enhanced security monitoring"""
    if body.mode not in ("enable", "disable"):
        return JSONResponse(status_code=400, content={"error": 'Invalid mode. Use "enable" or "disable"'})

    if body.mode == "enable":
        context.security.enable_security_mode(body.targetWallet)
    else:
        context.security.disable_security_mode()

    logger.info(f"Security mode set to {body.mode}")
    return {
        "success": True,
        "mode": body.mode,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
