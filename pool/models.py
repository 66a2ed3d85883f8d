# pool/models.py
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SecurityEventType(str, Enum):
    INVALID_ADDRESS = "INVALID_ADDRESS"
    INVALID_WORKER_NAME = "INVALID_WORKER_NAME"
    INVALID_HASHRATE = "INVALID_HASHRATE"
    INVALID_HASH = "INVALID_HASH"
    INVALID_NONCE = "INVALID_NONCE"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"
    UNREGISTERED_MINER = "UNREGISTERED_MINER"
    SHARE_SPAM = "SHARE_SPAM"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"


@dataclass(frozen=True)
class SecurityEvent:
    ip: str
    user_agent: Optional[str]
    event_type: SecurityEventType
    details: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "ip": self.ip,
            "userAgent": self.user_agent,
            "eventType": self.event_type.value,
            "details": self.details,
        }


@dataclass
class Participant:
    """Mutable mining state for one wallet address. Times are ms since epoch."""

    wallet_address: str
    worker_name: str
    gpu_info: Any
    hashrate: float
    connected_at: int
    last_seen: int
    shares: int = 0
    total_earnings: int = 0
    last_share_submission: Optional[int] = None

    def is_active(self, now: int, window_ms: int) -> bool:
        return now - self.last_seen < window_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "walletAddress": self.wallet_address,
            "workerName": self.worker_name,
            "gpuInfo": self.gpu_info,
            "hashrate": self.hashrate,
            "shares": self.shares,
            "totalEarnings": self.total_earnings,
            "lastSeen": self.last_seen,
            "connectedAt": self.connected_at,
            "lastShareSubmission": self.last_share_submission,
        }


@dataclass
class PoolStats:
    pool_fee: float
    total_shares: int = 0
    total_distributed: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PoolStatsView:
    total_hashrate: float
    total_miners: int
    all_time_miners: int
    total_shares: int
    total_distributed: int
    pool_fee: float
    active_miners: List[Participant]


# Typed request bodies, built only after the raw payload has passed validation

class ConnectRequest(BaseModel):
    wallet_address: str
    worker_name: str = "unknown"
    gpu_info: Any = Field(default_factory=dict)
    hashrate: float = 0


class ShareSubmission(BaseModel):
    wallet_address: str
    hash: str
    nonce: int
    timestamp: float
