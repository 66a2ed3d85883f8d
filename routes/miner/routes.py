# routes/miner/routes.py
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Any, Dict

from dependencies import get_pool_context
from pool.context import PoolContext
from pool.stats import share_percentage
from pool.validation import MAX_ADDRESS_LENGTH, ValidationFailure, is_safe_text, validate_connect
from utils.logging import logger

from .models import ConnectResponse, MinerDetail, ShareResponse
from .utils import PoolAPIError, format_pool_info, format_share_outcome, reject

router = APIRouter()

@router.post("/connect", response_model=ConnectResponse)
async def connect_miner(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    context: PoolContext = Depends(get_pool_context),
):
    """Register a miner, or replace its entry on reconnect"""
    try:
        result = validate_connect(payload)
        if isinstance(result, ValidationFailure):
            context.security.rejected_connections += 1
            return reject(request, context, result)

        participant = context.registry.register(
            result.wallet_address,
            worker_name=result.worker_name,
            gpu_info=result.gpu_info,
            hashrate=result.hashrate,
        )
        logger.info(f"New miner connected: {participant.wallet_address} ({participant.worker_name})")

        return {
            "success": True,
            "message": "Miner connected successfully",
            "poolInfo": format_pool_info(context.settings),
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Connection error: {str(e)}")
        raise PoolAPIError(500, "Internal server error")

@router.post("/submit-share", response_model=ShareResponse, response_model_exclude_none=True)
async def submit_share(
    request: Request,
    payload: Dict[str, Any] = Body(...),
    context: PoolContext = Depends(get_pool_context),
):
    """
    Validate a share and pay the per-share reward.

    The share is counted before the issuance call. If issuance fails the
    share stays counted and the response reports the reward as pending.
    """
    try:
        result = context.validator.validate(payload)
        if isinstance(result, ValidationFailure):
            return reject(request, context, result)

        participant = result.participant
        context.rewards.record_share(participant, context.clock())
        if context.security.is_watched(participant.wallet_address):
            logger.warning(
                f"[enhanced] Share from watched wallet {participant.wallet_address}: "
                f"nonce={result.submission.nonce} hash={result.submission.hash}"
            )

        outcome = await context.rewards.award(participant)
        return format_share_outcome(outcome, result.submission.hash)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception(f"Share submission error: {str(e)}")
        raise PoolAPIError(500, "Internal server error")

@router.get("/{wallet_address}", response_model=MinerDetail)
async def get_miner(wallet_address: str, context: PoolContext = Depends(get_pool_context)):
    """Get the state of a single miner"""
    if not is_safe_text(wallet_address, MAX_ADDRESS_LENGTH):
        return JSONResponse(status_code=400, content={"error": "Invalid wallet address format"})

    participant = context.registry.get(wallet_address)
    if participant is None:
        return JSONResponse(status_code=404, content={"error": "Miner not found"})

    view = context.compute_stats()
    return {
        **participant.to_dict(),
        "isActive": participant.is_active(context.clock(), context.settings.ACTIVE_WINDOW_MS),
        "poolStats": {
            "totalShares": view.total_shares,
            "totalMiners": view.total_miners,
            "yourSharePercentage": share_percentage(participant.shares, view.total_shares),
        },
    }
