# routes/miner/utils.py
from typing import Any, Dict
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from config import Settings
from dependencies import record_security_event
from pool.context import PoolContext
from pool.rewards import AwardOutcome
from pool.validation import ValidationFailure
from utils.logging import logger

class PoolAPIError(HTTPException):
    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)
        logger.error(f"Pool API Error ({status_code}): {detail}")

def reject(request: Request, context: PoolContext, failure: ValidationFailure) -> JSONResponse:
    """Record the failure as a security event (when it is one) and build the error response"""
    if failure.event_type is not None:
        record_security_event(request, context, failure.event_type, failure.details)
    return JSONResponse(
        status_code=failure.status_code,
        content={"error": failure.message, **failure.extra},
    )

def format_pool_info(settings: Settings) -> Dict[str, Any]:
    return {
        "fee": settings.POOL_FEE,
        "algorithm": settings.ALGORITHM,
        "difficulty": settings.DIFFICULTY,
        "token": settings.TOKEN_ADDRESS,
        "rewardPerShare": settings.REWARD_PER_SHARE,
    }

def format_share_outcome(outcome: AwardOutcome, share_hash: str) -> Dict[str, Any]:
    """Format the share submission response for API output"""
    if outcome.rewarded:
        return {
            "success": True,
            "message": "Share accepted",
            "hnhReward": outcome.reward,
            "totalShares": outcome.total_shares,
            "totalEarnings": outcome.total_earnings,
            "hash": share_hash,
            "txHandle": outcome.tx_handle,
        }
    return {
        "success": True,
        "message": "Share accepted (reward pending)",
        "hnhReward": 0,
        "rewardPending": True,
        "totalShares": outcome.total_shares,
        "totalEarnings": outcome.total_earnings,
        "error": "Reward distribution failed",
    }
