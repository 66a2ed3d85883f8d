# pool/validation.py
import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pool.addresses import is_valid_address
from pool.clock import current_millis
from pool.models import ConnectRequest, Participant, SecurityEventType, ShareSubmission
from pool.registry import ParticipantRegistry

SAFE_TEXT_PATTERN = re.compile(r"[\w\s\-.@]+", re.ASCII)
HASH_PATTERN = re.compile(r"[a-fA-F0-9]{64}")

MAX_ADDRESS_LENGTH = 50
MAX_WORKER_NAME_LENGTH = 30
MAX_HASHRATE = 1_000_000_000
MAX_NONCE = 2**31 - 1


@dataclass(frozen=True)
class ValidationFailure:
    message: str
    status_code: int = 400
    event_type: Optional[SecurityEventType] = None
    details: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ShareAccepted:
    submission: ShareSubmission
    participant: Participant


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_safe_text(value: Any, max_length: int = 100) -> bool:
    """String of bounded length made only of word chars, whitespace, '-', '.' and '@'"""
    if not isinstance(value, str):
        return False
    if len(value) > max_length:
        return False
    return SAFE_TEXT_PATTERN.fullmatch(value) is not None


def is_share_hash(value: Any) -> bool:
    return isinstance(value, str) and HASH_PATTERN.fullmatch(value) is not None


def is_valid_nonce(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= MAX_NONCE


def _check_wallet(wallet_address: Any) -> Optional[ValidationFailure]:
    if not wallet_address or not is_safe_text(wallet_address, MAX_ADDRESS_LENGTH):
        return ValidationFailure(
            "Valid wallet address required",
            event_type=SecurityEventType.INVALID_ADDRESS,
            details="Invalid wallet address format",
        )
    return None


def validate_connect(payload: Mapping[str, Any]) -> Union[ConnectRequest, ValidationFailure]:
    """Check a connect body and parse it into a ConnectRequest"""
    wallet_address = payload.get("walletAddress")
    worker_name = payload.get("workerName")
    hashrate = payload.get("hashrate")

    failure = _check_wallet(wallet_address)
    if failure:
        return failure

    if worker_name and not is_safe_text(worker_name, MAX_WORKER_NAME_LENGTH):
        return ValidationFailure(
            "Invalid worker name format",
            event_type=SecurityEventType.INVALID_WORKER_NAME,
            details="Invalid worker name format",
        )

    if hashrate and (not is_number(hashrate) or not 0 <= hashrate <= MAX_HASHRATE):
        return ValidationFailure(
            "Invalid hashrate value",
            event_type=SecurityEventType.INVALID_HASHRATE,
            details=f"Suspicious hashrate: {hashrate}",
        )

    if not is_valid_address(wallet_address):
        return ValidationFailure(
            "Invalid wallet address",
            event_type=SecurityEventType.INVALID_ADDRESS,
            details=wallet_address,
        )

    return ConnectRequest(
        wallet_address=wallet_address,
        worker_name=worker_name or "unknown",
        gpu_info=payload.get("gpuInfo") or {},
        hashrate=hashrate or 0,
    )


class ShareValidator:
    """
    Runs the share checks in order and stops at the first failure:
    address, hash, nonce, timestamp, registration, submission interval
    and finally the difficulty prefix.

    The interval check and the update of ``last_share_submission`` happen
    in one synchronous step, so two requests for the same wallet can never
    both pass it.
    """

    def __init__(
        self,
        registry: ParticipantRegistry,
        share_interval_ms: int = 1000,
        timestamp_tolerance_ms: int = 300000,
        difficulty_prefix: str = "0000",
        clock: Callable[[], int] = current_millis,
    ):
        self.registry = registry
        self.share_interval_ms = share_interval_ms
        self.timestamp_tolerance_ms = timestamp_tolerance_ms
        self.difficulty_prefix = difficulty_prefix
        self._clock = clock

    def meets_difficulty(self, share_hash: str) -> bool:
        # Placeholder for a real target comparison
        return share_hash.startswith(self.difficulty_prefix)

    def validate(self, payload: Mapping[str, Any]) -> Union[ShareAccepted, ValidationFailure]:
        wallet_address = payload.get("walletAddress")
        share_hash = payload.get("hash")
        nonce = payload.get("nonce")
        timestamp = payload.get("timestamp")

        if not wallet_address or not is_safe_text(wallet_address, MAX_ADDRESS_LENGTH) \
                or not is_valid_address(wallet_address):
            return ValidationFailure(
                "Valid wallet address required",
                event_type=SecurityEventType.INVALID_ADDRESS,
                details="Invalid wallet in share submission",
            )

        if not is_share_hash(share_hash):
            return ValidationFailure(
                "Invalid hash format",
                event_type=SecurityEventType.INVALID_HASH,
                details=f"Invalid hash format: {share_hash}",
            )

        if not is_valid_nonce(nonce):
            return ValidationFailure(
                "Invalid nonce value",
                event_type=SecurityEventType.INVALID_NONCE,
                details=f"Invalid nonce: {nonce}",
            )

        now = self._clock()
        if not is_number(timestamp) or (isinstance(timestamp, float) and not math.isfinite(timestamp)) \
                or abs(now - timestamp) > self.timestamp_tolerance_ms:
            return ValidationFailure(
                "Invalid or stale timestamp",
                event_type=SecurityEventType.INVALID_TIMESTAMP,
                details=f"Invalid timestamp: {timestamp}",
            )

        participant = self.registry.get(wallet_address)
        if participant is None:
            return ValidationFailure(
                "Miner not registered. Connect first.",
                event_type=SecurityEventType.UNREGISTERED_MINER,
                details=wallet_address,
            )

        last = participant.last_share_submission
        if last is not None and now - last < self.share_interval_ms:
            return ValidationFailure(
                "Share submission rate limit exceeded",
                status_code=429,
                event_type=SecurityEventType.SHARE_SPAM,
                details=f"Too frequent submissions from {wallet_address}",
            )
        participant.last_share_submission = now

        if not self.meets_difficulty(share_hash):
            return ValidationFailure(
                "Invalid share - hash does not meet difficulty requirement",
                extra={"hash": share_hash},
            )

        submission = ShareSubmission(
            wallet_address=wallet_address,
            hash=share_hash,
            nonce=nonce,
            timestamp=timestamp,
        )
        return ShareAccepted(submission=submission, participant=participant)
