import pytest

from conftest import GOOD_HASH, START_MS, WALLET_A

from pool.addresses import is_valid_address
from pool.models import ConnectRequest, SecurityEventType
from pool.registry import ParticipantRegistry
from pool.validation import ShareAccepted, ShareValidator, ValidationFailure, is_safe_text, validate_connect


def make_validator(clock):
    registry = ParticipantRegistry(clock=clock)
    return registry, ShareValidator(registry, clock=clock)


def share(**overrides):
    payload = {"walletAddress": WALLET_A, "hash": GOOD_HASH, "nonce": 42, "timestamp": START_MS}
    payload.update(overrides)
    return payload


@pytest.mark.parametrize("address,expected", [
    ("So11111111111111111111111111111111111111112", True),
    ("11111111111111111111111111111111", True),
    ("abc", False),
    ("not-a-wallet", False),
    ("0OIl" * 11, False),
    ("", False),
])
def test_is_valid_address(address, expected):
    assert is_valid_address(address) is expected


def test_is_safe_text():
    assert is_safe_text("rig-01.farm@home")
    assert not is_safe_text("rig;drop")
    assert not is_safe_text("x" * 31, 30)
    assert not is_safe_text(123)


def test_validate_connect_parses_request():
    result = validate_connect({"walletAddress": WALLET_A, "workerName": "rig-a", "hashrate": 500, "gpuInfo": {"n": 2}})
    assert isinstance(result, ConnectRequest)
    assert result.worker_name == "rig-a"
    assert result.hashrate == 500
    assert result.gpu_info == {"n": 2}


def test_validate_connect_defaults():
    result = validate_connect({"walletAddress": WALLET_A})
    assert result.worker_name == "unknown"
    assert result.hashrate == 0
    assert result.gpu_info == {}


@pytest.mark.parametrize("payload,event_type", [
    ({}, SecurityEventType.INVALID_ADDRESS),
    ({"walletAddress": "x" * 51}, SecurityEventType.INVALID_ADDRESS),
    ({"walletAddress": WALLET_A, "workerName": "bad<name>"}, SecurityEventType.INVALID_WORKER_NAME),
    ({"walletAddress": WALLET_A, "hashrate": -5}, SecurityEventType.INVALID_HASHRATE),
    ({"walletAddress": WALLET_A, "hashrate": 2_000_000_000}, SecurityEventType.INVALID_HASHRATE),
    ({"walletAddress": WALLET_A, "hashrate": "fast"}, SecurityEventType.INVALID_HASHRATE),
    ({"walletAddress": "not-a-wallet"}, SecurityEventType.INVALID_ADDRESS),
])
def test_validate_connect_rejections(payload, event_type):
    result = validate_connect(payload)
    assert isinstance(result, ValidationFailure)
    assert result.status_code == 400
    assert result.event_type is event_type


def test_accepts_valid_share(clock):
    registry, validator = make_validator(clock)
    participant = registry.register(WALLET_A)

    result = validator.validate(share())
    assert isinstance(result, ShareAccepted)
    assert result.participant is participant
    assert result.submission.nonce == 42
    assert participant.last_share_submission == START_MS
    # Counting is left to the reward coordinator
    assert participant.shares == 0


def test_mixed_case_hash_accepted(clock):
    registry, validator = make_validator(clock)
    registry.register(WALLET_A)
    assert isinstance(validator.validate(share(hash="0000" + "AbCd" * 15)), ShareAccepted)


def test_nonce_zero_accepted(clock):
    registry, validator = make_validator(clock)
    registry.register(WALLET_A)
    assert isinstance(validator.validate(share(nonce=0)), ShareAccepted)


def test_largest_nonce_accepted(clock):
    registry, validator = make_validator(clock)
    registry.register(WALLET_A)
    assert isinstance(validator.validate(share(nonce=2**31 - 1)), ShareAccepted)


@pytest.mark.parametrize("overrides,event_type", [
    ({"walletAddress": None}, SecurityEventType.INVALID_ADDRESS),
    ({"walletAddress": "abc"}, SecurityEventType.INVALID_ADDRESS),
    ({"hash": None}, SecurityEventType.INVALID_HASH),
    ({"hash": "0000abc"}, SecurityEventType.INVALID_HASH),
    ({"hash": "0000" + "zz" * 30}, SecurityEventType.INVALID_HASH),
    ({"nonce": -1}, SecurityEventType.INVALID_NONCE),
    ({"nonce": 2**31}, SecurityEventType.INVALID_NONCE),
    ({"nonce": "42"}, SecurityEventType.INVALID_NONCE),
    ({"nonce": True}, SecurityEventType.INVALID_NONCE),
    ({"timestamp": None}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": START_MS - 300_001}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": START_MS + 300_001}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": "now"}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": 10**400}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": float("nan")}, SecurityEventType.INVALID_TIMESTAMP),
    ({"timestamp": float("inf")}, SecurityEventType.INVALID_TIMESTAMP),
])
def test_format_rejections_leave_registry_untouched(clock, overrides, event_type):
    registry, validator = make_validator(clock)
    participant = registry.register(WALLET_A)

    result = validator.validate(share(**overrides))
    assert isinstance(result, ValidationFailure)
    assert result.event_type is event_type
    assert result.status_code == 400
    assert participant.last_share_submission is None


def test_timestamp_at_tolerance_edge_accepted(clock):
    registry, validator = make_validator(clock)
    registry.register(WALLET_A)
    assert isinstance(validator.validate(share(timestamp=START_MS - 300_000)), ShareAccepted)


def test_checks_stop_at_first_failure(clock):
    _, validator = make_validator(clock)
    result = validator.validate(share(hash="bad", nonce=-1))
    assert result.event_type is SecurityEventType.INVALID_HASH


def test_unregistered_wallet_rejected(clock):
    _, validator = make_validator(clock)
    result = validator.validate(share())
    assert result.event_type is SecurityEventType.UNREGISTERED_MINER
    assert result.message == "Miner not registered. Connect first."


def test_submission_interval_enforced(clock):
    registry, validator = make_validator(clock)
    participant = registry.register(WALLET_A)
    assert isinstance(validator.validate(share()), ShareAccepted)

    clock.advance(500)
    result = validator.validate(share(timestamp=clock.now))
    assert result.status_code == 429
    assert result.event_type is SecurityEventType.SHARE_SPAM
    assert participant.last_share_submission == START_MS

    clock.advance(500)
    assert isinstance(validator.validate(share(timestamp=clock.now)), ShareAccepted)
    assert participant.last_share_submission == START_MS + 1000


def test_low_difficulty_share_uses_up_interval(clock):
    registry, validator = make_validator(clock)
    participant = registry.register(WALLET_A)

    result = validator.validate(share(hash="1" + GOOD_HASH[1:]))
    assert isinstance(result, ValidationFailure)
    assert result.event_type is None
    assert result.extra == {"hash": "1" + GOOD_HASH[1:]}
    assert participant.last_share_submission == START_MS

    result = validator.validate(share())
    assert result.status_code == 429


def test_custom_difficulty_prefix(clock):
    registry = ParticipantRegistry(clock=clock)
    registry.register(WALLET_A)
    validator = ShareValidator(registry, difficulty_prefix="00000", clock=clock)
    result = validator.validate(share())
    assert isinstance(result, ValidationFailure)
    assert "difficulty" in result.message
