# pool/security.py
import secrets
from typing import Callable, List, Optional

from pool.clock import current_millis
from pool.models import SecurityEvent
from utils.logging import logger


class SecurityMonitor:
    """
    Bounded log of anomalous requests plus the admin token check.

    The log grows append-only until it passes ``capacity`` entries, then
    the oldest entries are dropped in one step so that only the newest
    ``retain`` remain.
    """

    def __init__(
        self,
        admin_token: str,
        capacity: int = 1000,
        retain: int = 500,
        clock: Callable[[], int] = current_millis,
    ):
        if retain > capacity:
            raise ValueError("retain must not exceed capacity")
        self._admin_token = admin_token
        self._clock = clock
        self.capacity = capacity
        self.retain = retain
        self.events: List[SecurityEvent] = []
        self.rejected_connections = 0
        self.rate_limit_hits = 0
        self.security_mode_enabled = False
        self.security_mode_started: Optional[int] = None
        self.target_wallet: Optional[str] = None

    def record(self, event: SecurityEvent):
        self.events.append(event)
        if len(self.events) > self.capacity:
            self.events = self.events[-self.retain:]

        logger.warning(f"Security Event: {event.event_type.value} from {event.ip} - {event.details}")
        if self.security_mode_enabled:
            logger.warning(
                f"[enhanced] {event.event_type.value} ip={event.ip} "
                f"agent={event.user_agent!r} at {event.timestamp}"
            )

    def recent(self, n: int) -> List[SecurityEvent]:
        """The newest ``n`` events, oldest first"""
        if n <= 0:
            return []
        return self.events[-n:]

    def authorize(self, presented_token: Optional[str]) -> bool:
        if not presented_token:
            return False
        return secrets.compare_digest(presented_token.encode(), self._admin_token.encode())

    def enable_security_mode(self, target_wallet: Optional[str] = None):
        self.security_mode_enabled = True
        self.security_mode_started = self._clock()
        self.target_wallet = target_wallet
        logger.info("Security mode enabled - Enhanced monitoring active")

    def disable_security_mode(self):
        self.security_mode_enabled = False
        self.target_wallet = None
        logger.info("Security mode disabled")

    def is_watched(self, wallet_address: str) -> bool:
        return self.security_mode_enabled and self.target_wallet == wallet_address
