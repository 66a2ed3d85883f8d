# pool/issuance.py
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import aiohttp

from utils.logging import logger


@dataclass(frozen=True)
class IssuanceResult:
    ok: bool
    tx_handle: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, tx_handle: str) -> "IssuanceResult":
        return cls(ok=True, tx_handle=tx_handle)

    @classmethod
    def failure(cls, error: str) -> "IssuanceResult":
        return cls(ok=False, error=error)


class TokenIssuer(ABC):
    """Credits reward tokens to a wallet on the external ledger"""

    @abstractmethod
    async def issue(self, wallet_address: str, amount: int) -> IssuanceResult:
        ...

    async def close(self):
        pass


class DisabledTokenIssuer(TokenIssuer):
    """Used when no issuance service is configured; every reward stays pending."""

    async def issue(self, wallet_address: str, amount: int) -> IssuanceResult:
        return IssuanceResult.failure("Token issuance is not configured")


class HttpTokenIssuer(TokenIssuer):
    """
    Requests issuance from a ledger service over HTTP.

    POSTs ``{"recipient", "amount", "mint"}`` to the configured URL and
    expects ``{"signature": ...}`` back. Timeouts belong to this client;
    every transport or service error is turned into a failed result.
    """

    def __init__(self, url: str, mint_address: str, api_key: str = "", timeout: int = 30):
        self.url = url
        self.mint_address = mint_address
        self.api_key = api_key
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else None
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=headers)
        return self._session

    async def issue(self, wallet_address: str, amount: int) -> IssuanceResult:
        payload = {
            "recipient": wallet_address,
            "amount": str(amount),
            "mint": self.mint_address,
        }
        try:
            session = self._get_session()
            async with session.post(self.url, json=payload) as response:
                if response.status >= 300:
                    body = await response.text()
                    logger.error(f"Issuance service returned {response.status}: {body[:200]}")
                    return IssuanceResult.failure(f"Issuance service returned {response.status}")

                data = await response.json(content_type=None)
                signature = data.get("signature") if isinstance(data, dict) else None
                if not signature:
                    logger.error(f"Issuance response missing signature: {data}")
                    return IssuanceResult.failure("Issuance response missing signature")

                logger.info(f"Distributed {amount} raw units to {wallet_address} (tx {signature})")
                return IssuanceResult.success(signature)
        except asyncio.TimeoutError:
            logger.error(f"Issuance request for {wallet_address} timed out")
            return IssuanceResult.failure("Issuance request timed out")
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Failed to distribute tokens to {wallet_address}: {str(e)}")
            return IssuanceResult.failure(str(e))

    async def close(self):
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
