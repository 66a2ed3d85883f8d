# pool/snapshot.py
import json
import os
from typing import Any, Dict

from pool.models import PoolStats
from pool.registry import ParticipantRegistry

def build_snapshot(registry: ParticipantRegistry, stats: PoolStats, timestamp: int) -> Dict[str, Any]:
    return {
        "miners": [[p.wallet_address, p.to_dict()] for p in registry.all()],
        "stats": stats.to_dict(),
        "timestamp": timestamp,
    }

def write_snapshot(registry: ParticipantRegistry, stats: PoolStats, path: str, timestamp: int) -> str:
    """
    Serialize participants and pool counters to ``path``.

    Written to a temporary file first and moved into place, so an
    interrupted write never leaves a truncated snapshot behind.
    """
    snapshot = build_snapshot(registry, stats, timestamp)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as fh:
        json.dump(snapshot, fh, indent=2)
    os.replace(tmp_path, path)
    return path
