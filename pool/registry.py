# pool/registry.py
from typing import Any, Callable, Dict, List, Optional

from pool.models import Participant
from pool.clock import current_millis


class ParticipantRegistry:
    """In-memory map of wallet address to mining state, kept in insertion order"""

    def __init__(self, clock: Callable[[], int] = current_millis):
        self._clock = clock
        self._participants: Dict[str, Participant] = {}

    def register(
        self,
        wallet_address: str,
        worker_name: str = "unknown",
        gpu_info: Any = None,
        hashrate: float = 0,
    ) -> Participant:
        """
        Create or replace the entry for a wallet.

        A reconnect overwrites the whole entry, so accumulated shares,
        earnings and the last submission time start again from zero.
        """
        now = self._clock()
        participant = Participant(
            wallet_address=wallet_address,
            worker_name=worker_name or "unknown",
            gpu_info=gpu_info or {},
            hashrate=hashrate or 0,
            connected_at=now,
            last_seen=now,
        )
        # Re-inserting an existing key keeps its original position
        self._participants[wallet_address] = participant
        return participant

    def get(self, wallet_address: str) -> Optional[Participant]:
        return self._participants.get(wallet_address)

    def __contains__(self, wallet_address: str) -> bool:
        return wallet_address in self._participants

    def __len__(self) -> int:
        return len(self._participants)

    def all(self) -> List[Participant]:
        return list(self._participants.values())

    def snapshot_active(self, window_ms: int, now: Optional[int] = None) -> List[Participant]:
        """Participants seen within the freshness window"""
        if now is None:
            now = self._clock()
        return [p for p in self._participants.values() if p.is_active(now, window_ms)]
