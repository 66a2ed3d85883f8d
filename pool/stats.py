# pool/stats.py
from pool.models import PoolStats, PoolStatsView
from pool.registry import ParticipantRegistry

def compute_stats(registry: ParticipantRegistry, stats: PoolStats, window_ms: int, now: int) -> PoolStatsView:
    """Derive pool-wide metrics from the registry without mutating anything"""
    active = registry.snapshot_active(window_ms, now=now)
    return PoolStatsView(
        total_hashrate=sum(p.hashrate or 0 for p in active),
        total_miners=len(active),
        all_time_miners=len(registry),
        total_shares=stats.total_shares,
        total_distributed=stats.total_distributed,
        pool_fee=stats.pool_fee,
        active_miners=active,
    )

def share_percentage(participant_shares: int, total_shares: int):
    """Participant's share of all pool shares as a 2-decimal string, or 0"""
    if total_shares <= 0:
        return 0
    return f"{participant_shares / total_shares * 100:.2f}"
