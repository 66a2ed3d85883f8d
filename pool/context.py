# pool/context.py
import secrets
import time
from typing import Callable, Optional

from config import Settings
from pool.clock import current_millis
from pool.issuance import DisabledTokenIssuer, HttpTokenIssuer, TokenIssuer
from pool.models import PoolStats, PoolStatsView
from pool.registry import ParticipantRegistry
from pool.rewards import RewardCoordinator
from pool.security import SecurityMonitor
from pool.snapshot import write_snapshot
from pool.stats import compute_stats
from pool.validation import ShareValidator
from utils.logging import logger


class PoolContext:
    """All mutable pool state for one application instance"""

    def __init__(self, settings: Settings, issuer: TokenIssuer, admin_token: str,
                 clock: Callable[[], int] = current_millis):
        self.settings = settings
        self.clock = clock
        self.started_at = time.monotonic()
        self.registry = ParticipantRegistry(clock=clock)
        self.stats = PoolStats(pool_fee=settings.POOL_FEE)
        self.security = SecurityMonitor(
            admin_token,
            capacity=settings.SECURITY_LOG_CAPACITY,
            retain=settings.SECURITY_LOG_RETAIN,
            clock=clock,
        )
        self.validator = ShareValidator(
            self.registry,
            share_interval_ms=settings.SHARE_INTERVAL_MS,
            timestamp_tolerance_ms=settings.TIMESTAMP_TOLERANCE_MS,
            difficulty_prefix=settings.DIFFICULTY_PREFIX,
            clock=clock,
        )
        self.rewards = RewardCoordinator(
            issuer,
            self.stats,
            reward_per_share=settings.REWARD_PER_SHARE,
            token_decimals=settings.TOKEN_DECIMALS,
        )

    @property
    def issuer(self) -> TokenIssuer:
        return self.rewards.issuer

    def uptime(self) -> float:
        return time.monotonic() - self.started_at

    def compute_stats(self) -> PoolStatsView:
        return compute_stats(self.registry, self.stats, self.settings.ACTIVE_WINDOW_MS, self.clock())

    def save_snapshot(self, path: Optional[str] = None) -> str:
        path = path or self.settings.SNAPSHOT_PATH
        logger.info("Saving miner data...")
        written = write_snapshot(self.registry, self.stats, path, self.clock())
        logger.info(f"Data saved to {written}")
        return written


def create_issuer(settings: Settings) -> TokenIssuer:
    if settings.ISSUANCE_URL:
        return HttpTokenIssuer(
            settings.ISSUANCE_URL,
            settings.TOKEN_ADDRESS,
            api_key=settings.ISSUANCE_API_KEY,
            timeout=settings.ISSUANCE_TIMEOUT,
        )
    logger.warning("ISSUANCE_URL not set, rewards will stay pending")
    return DisabledTokenIssuer()


def build_pool_context(settings: Settings, issuer: Optional[TokenIssuer] = None,
                       clock: Callable[[], int] = current_millis) -> PoolContext:
    admin_token = settings.ADMIN_TOKEN
    if not admin_token:
        admin_token = secrets.token_hex(32)
        logger.info(f"Admin token: {admin_token}")
    return PoolContext(settings, issuer or create_issuer(settings), admin_token, clock=clock)
