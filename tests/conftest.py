import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from config import Settings  # noqa: E402
from pool.issuance import IssuanceResult, TokenIssuer  # noqa: E402

WALLET_A = "So11111111111111111111111111111111111111112"
WALLET_B = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
ADMIN_TOKEN = "test-admin-token"
START_MS = 1_700_000_000_000
GOOD_HASH = "0000" + "ab" * 30


class FakeClock:
    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int):
        self.now += ms


class FakeIssuer(TokenIssuer):
    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.calls = []
        self.closed = False

    async def issue(self, wallet_address: str, amount: int) -> IssuanceResult:
        self.calls.append((wallet_address, amount))
        if self.succeed:
            return IssuanceResult.success(f"sig-{len(self.calls)}")
        return IssuanceResult.failure("ledger unavailable")

    async def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def issuer():
    return FakeIssuer()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        ADMIN_TOKEN=ADMIN_TOKEN,
        REDIS_URL="",
        ISSUANCE_URL="",
        DEBUG=True,
        SNAPSHOT_PATH=str(tmp_path / "miners-backup.json"),
    )
