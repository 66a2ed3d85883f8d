# pool/rewards.py
from dataclasses import dataclass
from typing import Optional

from pool.issuance import IssuanceResult, TokenIssuer
from pool.models import Participant, PoolStats
from utils.logging import logger


@dataclass(frozen=True)
class AwardOutcome:
    rewarded: bool
    reward: int
    total_shares: int
    total_earnings: int
    tx_handle: Optional[str] = None
    error: Optional[str] = None


class RewardCoordinator:
    """
    Counts accepted shares and pays the fixed per-share reward.

    ``record_share`` must run before ``award``: share accounting is never
    rolled back when the issuance call fails, and a failed award is final.
    """

    def __init__(self, issuer: TokenIssuer, stats: PoolStats, reward_per_share: int = 1, token_decimals: int = 9):
        self.issuer = issuer
        self.stats = stats
        self.reward_per_share = reward_per_share
        self.token_decimals = token_decimals

    def record_share(self, participant: Participant, now: int):
        participant.shares += 1
        participant.last_seen = now
        self.stats.total_shares += 1

    async def award(self, participant: Participant) -> AwardOutcome:
        reward = self.reward_per_share
        raw_amount = reward * 10 ** self.token_decimals

        try:
            result = await self.issuer.issue(participant.wallet_address, raw_amount)
        except Exception as e:
            logger.exception(f"Token issuer raised for {participant.wallet_address}")
            result = IssuanceResult.failure(str(e))

        if not result.ok:
            logger.error(f"Error distributing tokens to {participant.wallet_address}: {result.error}")
            return AwardOutcome(
                rewarded=False,
                reward=0,
                total_shares=participant.shares,
                total_earnings=participant.total_earnings,
                error=result.error,
            )

        participant.total_earnings += reward
        self.stats.total_distributed += reward
        logger.info(f"Share accepted from {participant.wallet_address}, awarded {reward} tokens")
        return AwardOutcome(
            rewarded=True,
            reward=reward,
            total_shares=participant.shares,
            total_earnings=participant.total_earnings,
            tx_handle=result.tx_handle,
        )
