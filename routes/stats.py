# routes/stats.py
from fastapi import APIRouter, Depends

from dependencies import get_pool_context
from pool.context import PoolContext

router = APIRouter()

def truncate_wallet(wallet_address: str) -> str:
    return wallet_address[:8] + "..."

@router.get("/stats")
async def get_pool_stats(context: PoolContext = Depends(get_pool_context)):
    """Live pool-wide statistics derived from the registry"""
    view = context.compute_stats()
    settings = context.settings
    return {
        "totalHashrate": view.total_hashrate,
        "totalMiners": view.total_miners,
        "totalShares": view.total_shares,
        "totalDistributed": view.total_distributed,
        "poolFee": view.pool_fee,
        "activeMiners": view.total_miners,
        "allTimeMiners": view.all_time_miners,
        "tokenAddress": settings.TOKEN_ADDRESS,
        "network": settings.NETWORK,
        "uptime": context.uptime(),
        "miners": [
            {
                "wallet": truncate_wallet(m.wallet_address),
                "hashrate": m.hashrate,
                "shares": m.shares,
                "earnings": m.total_earnings,
            }
            for m in view.active_miners
        ],
    }
