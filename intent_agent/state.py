"""
Application-scoped services.

One ServiceState lives on ``app.state.service`` for the lifetime of the app.
It owns the single wallet session manager and the optional intent agent.
"""

import asyncio
import logging
from typing import Optional, Set

from fastapi import Request

from .config import settings
from .core.chain import ChainGateway
from .core.intents import IntentAgent
from .core.wallet import WalletSessionManager
from .providers.llm import get_llm_provider


logger = logging.getLogger(__name__)


class ServiceState:
    def __init__(self, wallet_manager: WalletSessionManager, agent: Optional[IntentAgent] = None):
        self.wallet_manager = wallet_manager
        self._agent = agent
        self._agent_lock = asyncio.Lock()
        self._retiring: Set["asyncio.Task[None]"] = set()

    @property
    def agent(self) -> Optional[IntentAgent]:
        return self._agent

    async def set_agent(self, agent: Optional[IntentAgent]) -> None:
        """
        Replace the agent.

        The previous agent is closed in the background once its in-flight
        requests have finished; ``close`` waits for those retirements.
        """
        async with self._agent_lock:
            previous, self._agent = self._agent, agent
        if previous is not None and previous is not agent:
            task = asyncio.create_task(self._retire(previous))
            self._retiring.add(task)
            task.add_done_callback(self._retiring.discard)

    @staticmethod
    async def _retire(agent: IntentAgent) -> None:
        try:
            await agent.close()
        except Exception as e:
            logger.warning(f"Closing replaced agent {agent.name} failed: {e}")

    async def close(self) -> None:
        await self.set_agent(None)
        if self._retiring:
            await asyncio.gather(*self._retiring)


def build_agent(
    api_key: str,
    rpc_url: str,
    contract_address: str,
    wallet_manager: Optional[WalletSessionManager] = None,
) -> IntentAgent:
    """
    Create a read-only intent agent.

    Users sign their own transactions, so the gateway never gets a key here.
    Raises ValueError for a missing key and InvalidAddressFormatError for a
    malformed contract address.
    """
    gateway = ChainGateway.read_only(
        rpc_url,
        contract_address,
        request_timeout=settings.chain_request_timeout_seconds,
        receipt_timeout=settings.receipt_timeout_seconds,
        receipt_poll_interval=settings.receipt_poll_seconds,
    )
    provider = get_llm_provider(api_key=api_key)
    logger.info(f"Agent gateway ready (read-only) for {gateway.provider_url}")
    return IntentAgent.create(
        name=settings.agent_name,
        gateway=gateway,
        provider=provider,
        wallet_manager=wallet_manager,
        assistant_name=settings.assistant_name,
        fallback_chain_id=settings.fallback_chain_id,
        ledger_size=settings.intent_ledger_size,
    )


def get_service_state(request: Request) -> ServiceState:
    return request.app.state.service
