# routes/general.py
from fastapi import APIRouter, Depends

from dependencies import get_pool_context
from pool.context import PoolContext

router = APIRouter()
info_router = APIRouter()

API_VERSION = "1.0.0"

@router.get("/")
async def root():
    return {
        "message": "Mining Pool API",
        "version": API_VERSION,
        "endpoints": {
            "stats": "/api/stats",
            "connect": "POST /api/miner/connect",
            "submit": "POST /api/miner/submit-share",
        },
    }

@info_router.get("")
async def api_info(context: PoolContext = Depends(get_pool_context)):
    """Describe the API and the reward token"""
    return {
        "message": "Mining Pool API",
        "version": API_VERSION,
        "token": context.settings.TOKEN_ADDRESS,
        "network": context.settings.NETWORK,
        "endpoints": {
            "stats": "/api/stats",
            "connect": "POST /api/miner/connect",
            "submit": "POST /api/miner/submit-share",
        },
    }

@router.get("/health")
async def health_check(context: PoolContext = Depends(get_pool_context)):
    """Health check endpoint for the API"""
    return {
        "status": "healthy",
        "uptime": context.uptime(),
        "miners": len(context.registry),
        "version": API_VERSION,
    }
