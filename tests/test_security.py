import pytest

from conftest import START_MS, WALLET_A

from pool.models import SecurityEvent, SecurityEventType
from pool.security import SecurityMonitor


def make_event(n: int) -> SecurityEvent:
    return SecurityEvent(
        ip="10.0.0.1",
        user_agent="miner/1.0",
        event_type=SecurityEventType.INVALID_HASH,
        details=f"event {n}",
    )


def test_log_evicts_oldest_half_when_over_capacity():
    monitor = SecurityMonitor("token", capacity=10, retain=5)
    for n in range(10):
        monitor.record(make_event(n))
    assert len(monitor.events) == 10

    monitor.record(make_event(10))
    assert [e.details for e in monitor.events] == [f"event {n}" for n in range(6, 11)]


def test_default_capacity_trims_to_500():
    monitor = SecurityMonitor("token")
    for n in range(1001):
        monitor.record(make_event(n))
    assert len(monitor.events) == 500
    assert monitor.events[-1].details == "event 1000"


def test_recent_returns_newest_last():
    monitor = SecurityMonitor("token")
    for n in range(5):
        monitor.record(make_event(n))
    assert [e.details for e in monitor.recent(3)] == ["event 2", "event 3", "event 4"]
    assert monitor.recent(0) == []
    assert len(monitor.recent(50)) == 5


def test_retain_larger_than_capacity_rejected():
    with pytest.raises(ValueError):
        SecurityMonitor("token", capacity=10, retain=20)


@pytest.mark.parametrize("presented,expected", [
    ("secret", True),
    ("Secret", False),
    ("secret ", False),
    ("", False),
    (None, False),
])
def test_authorize_exact_match(presented, expected):
    assert SecurityMonitor("secret").authorize(presented) is expected


def test_security_mode_toggle(clock):
    monitor = SecurityMonitor("token", clock=clock)
    monitor.enable_security_mode(WALLET_A)
    assert monitor.security_mode_enabled
    assert monitor.security_mode_started == START_MS
    assert monitor.is_watched(WALLET_A)

    monitor.disable_security_mode()
    assert not monitor.security_mode_enabled
    assert not monitor.is_watched(WALLET_A)


def test_event_serialization():
    data = make_event(1).to_dict()
    assert data["eventType"] == "INVALID_HASH"
    assert data["ip"] == "10.0.0.1"
    assert data["userAgent"] == "miner/1.0"
    assert data["timestamp"].endswith("+00:00")
