"""
Wallet session manager.

Holds at most one WalletSession for the whole service and gates whether
write-intents can be offered to the user.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

from eth_utils import is_address, to_checksum_address
from web3 import AsyncWeb3

from ..chain.gateway import build_web3
from ..errors import ChainCallFailedError, InvalidAddressFormatError, NotConnectedError
from .models import WalletBalance, WalletSession, WalletType


logger = logging.getLogger(__name__)


class ReadWriteLock:
    """
    Asyncio readers-writer lock.

    Any number of readers may hold the lock together; a writer holds it
    alone. Waiting writers block new readers so writes are not starved.
    """

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._writers_waiting == 0)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class WalletSessionManager:
    """
    Single-tenant wallet session.

    Invariant: one service instance serves one end user. Connecting a second
    wallet replaces the first (last write wins), so this manager must not be
    shared between users. The instance is owned by the application state and
    lives as long as the app.
    """

    def __init__(
        self,
        provider_url: str,
        w3: Optional[AsyncWeb3] = None,
        request_timeout: float = 30.0,
    ):
        self.provider_url = provider_url
        self._w3 = w3 or build_web3(provider_url, request_timeout)
        self._session: Optional[WalletSession] = None
        self._lock = ReadWriteLock()

    async def connect(self, address: str, chain_id: int, wallet_type: WalletType) -> WalletSession:
        """Record ``address`` as the connected wallet, replacing any previous one."""
        if not is_address(address):
            raise InvalidAddressFormatError(address)

        session = WalletSession(
            address=to_checksum_address(address),
            chain_id=chain_id,
            provider_url=self.provider_url,
            wallet_type=wallet_type,
        )
        async with self._lock.write():
            previous = self._session
            self._session = session

        if previous is not None and previous.address != session.address:
            logger.info(f"Wallet {previous.address} replaced by {session.address}")
        logger.info(f"Wallet connected: {session.address} on chain {chain_id}")
        return session

    async def disconnect(self) -> bool:
        """Clear the session. Returns whether a session was present."""
        async with self._lock.write():
            previous = self._session
            self._session = None

        if previous is not None:
            logger.info(f"Wallet disconnected: {previous.address}")
        return previous is not None

    async def get_session(self) -> Optional[WalletSession]:
        async with self._lock.read():
            return self._session

    async def is_connected(self) -> bool:
        return await self.get_session() is not None

    async def require_session(self) -> WalletSession:
        session = await self.get_session()
        if session is None:
            raise NotConnectedError()
        return session

    async def get_balance(self) -> WalletBalance:
        """Native balance of the connected wallet."""
        session = await self.require_session()
        try:
            wei = await self._w3.eth.get_balance(session.address)
        except Exception as e:
            raise ChainCallFailedError(f"Failed to read balance of {session.address}: {e}") from e
        return WalletBalance.from_wei(session.address, wei)

    async def sign_message(self, message: str) -> Dict[str, object]:
        """
        Placeholder signature.

        Real signing happens in the user's wallet; the value returned here is
        not a cryptographic signature and is labeled as such.
        """
        session = await self.require_session()
        return {
            "message": message,
            "signature": f"signed:{message}",
            "address": session.address,
            "authoritative": False,
        }
