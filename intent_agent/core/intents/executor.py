"""
Intent execution.

Read-intents query the chain gateway. Write-intents never touch a key: they
produce an unsigned TransactionDescriptor for the user's wallet to sign.
"""

import logging
import math
import time
from decimal import Decimal
from typing import Any, Dict, Optional

from ...config import ZERO_ADDRESS
from ..chain import ChainGateway
from ..chain.abi import CREATE_PROJECT_FUNCTION
from ..errors import NotConnectedError, TransactionError
from ..wallet import WalletSessionManager
from .models import (
    ClaimTokens,
    CreateProject,
    ExecutionResult,
    GetProjectInfo,
    GetProjectStatistics,
    GetUserBalance,
    Intent,
    Invest,
    ListProjects,
    TransactionDescriptor,
)


logger = logging.getLogger(__name__)

WEI_PER_ETH = Decimal(10) ** 18
DEFAULT_CHAIN_ID = 97

# createProjectWithTokenViaTelegram defaults
TOKEN_DECIMALS = 18
INITIAL_SUPPLY = 1000 * 10 ** 18
SOFT_CAP = 1 * 10 ** 18
HARD_CAP = 10 * 10 ** 18
START_DELAY_SECONDS = 300
SALE_DURATION_SECONDS = 30 * 24 * 60 * 60
TOKEN_PRICE_WEI = 10 ** 14
SALE_ALLOCATION_PERCENT = 70
LIQUIDITY_BPS = 3000
MARKETING_BPS = 500


def _format_amount(amount: Decimal) -> str:
    """``0.5`` -> ``"0.5"``, ``1.0`` -> ``"1"``."""
    return format(amount.normalize(), "f")


def build_project_parameters(name: str, symbol: str, now: Optional[int] = None) -> Dict[str, Any]:
    """Full parameter bag for a conversational project creation."""
    start_time = (int(time.time()) if now is None else now) + START_DELAY_SECONDS
    return {
        "creator": ZERO_ADDRESS,
        "project_name": name,
        "token_name": f"{name} Token",
        "token_symbol": symbol,
        "token_decimals": TOKEN_DECIMALS,
        "initial_supply": str(INITIAL_SUPPLY),
        "soft_cap": str(SOFT_CAP),
        "hard_cap": str(HARD_CAP),
        "start_time": str(start_time),
        "end_time": str(start_time + SALE_DURATION_SECONDS),
        "token_price": str(TOKEN_PRICE_WEI),
        "tokens_for_sale": str(INITIAL_SUPPLY * SALE_ALLOCATION_PERCENT // 100),
        "liquidity_percent": LIQUIDITY_BPS,
        "marketing_percent": MARKETING_BPS,
        "marketing_telegram_id": "0",
    }


class IntentExecutor:
    """
    Stateless per-intent dispatch.

    Transaction *preparation* always succeeds when its inputs are valid:
    failed address or chain id reads fall back to placeholders since no
    funds move until the user signs.
    """

    def __init__(
        self,
        gateway: ChainGateway,
        wallet_manager: Optional[WalletSessionManager] = None,
        fallback_chain_id: int = DEFAULT_CHAIN_ID,
    ):
        self.gateway = gateway
        self.wallet_manager = wallet_manager
        self.fallback_chain_id = fallback_chain_id

    async def execute(self, intent: Intent, user_input: str) -> ExecutionResult:
        if isinstance(intent, CreateProject):
            return await self._create_project(intent)
        if isinstance(intent, Invest):
            return await self._invest(intent)
        if isinstance(intent, ClaimTokens):
            return await self._claim_tokens(intent)
        if isinstance(intent, GetProjectInfo):
            return await self._get_project_info(intent)
        if isinstance(intent, ListProjects):
            return await self._list_projects()
        if isinstance(intent, GetUserBalance):
            return await self._get_user_balance()
        if isinstance(intent, GetProjectStatistics):
            return await self._get_project_statistics()
        return ExecutionResult(
            success=False,
            message=f"Could not understand intent: {user_input}",
        )

    # ------------------------------------------------------------------
    # Write intents
    # ------------------------------------------------------------------

    async def _wallet_chain_id(self) -> int:
        try:
            chain_id = await self.gateway.get_chain_id()
        except TransactionError as e:
            logger.warning(f"Chain id unavailable, using {self.fallback_chain_id}: {e}")
            return self.fallback_chain_id
        if not chain_id:
            logger.warning(f"Chain id is 0, defaulting to {self.fallback_chain_id}")
            return self.fallback_chain_id
        return chain_id

    async def _create_project(self, intent: CreateProject) -> ExecutionResult:
        logger.info(f"Preparing project creation: {intent.name} ({intent.symbol})")
        chain_id = await self._wallet_chain_id()
        try:
            contract_address = await self.gateway.get_contract_address()
        except TransactionError as e:
            logger.warning(f"Contract address unavailable, using zero address: {e}")
            contract_address = ZERO_ADDRESS

        description = f"Create {intent.name} token with symbol {intent.symbol}"
        descriptor = TransactionDescriptor(
            to=contract_address,
            # Call data is ABI-encoded client-side from ``parameters``
            data="0x",
            value="0",
            chain_id=chain_id,
            description=description,
        )
        return ExecutionResult(
            success=True,
            message="Transaction prepared for project creation",
            transaction_descriptor=descriptor,
            data={
                "action": "create_project",
                "name": intent.name,
                "symbol": intent.symbol,
                "contract_address": contract_address,
                "chain_id": chain_id,
                "requires_signing": True,
                "is_contract_call": True,
                "function_name": CREATE_PROJECT_FUNCTION,
                "parameters": build_project_parameters(intent.name, intent.symbol),
            },
        )

    async def _invest(self, intent: Invest) -> ExecutionResult:
        if not math.isfinite(intent.amount) or intent.amount < 0:
            return ExecutionResult(
                success=False,
                message=f"Invalid investment amount: {intent.amount}",
                data={"action": "invest", "project_id": intent.project_id, "requires_signing": False},
            )

        amount = Decimal(str(intent.amount))
        amount_text = _format_amount(amount)
        logger.info(f"Preparing investment of {amount_text} in {intent.project_id}")

        descriptor = TransactionDescriptor(
            to=intent.project_id,
            data=f"invest:{amount_text}",
            value=str(int(amount * WEI_PER_ETH)),
            chain_id=await self._wallet_chain_id(),
            description=f"Invest {amount_text} ETH in project {intent.project_id}",
        )
        return ExecutionResult(
            success=True,
            message="Transaction prepared for investment",
            transaction_descriptor=descriptor,
            data={
                "action": "invest",
                "project_id": intent.project_id,
                "amount": amount_text,
                "requires_signing": True,
            },
        )

    async def _claim_tokens(self, intent: ClaimTokens) -> ExecutionResult:
        descriptor = TransactionDescriptor(
            to=intent.project_id,
            data="claimTokens",
            value="0",
            chain_id=await self._wallet_chain_id(),
            description=f"Claim tokens from project {intent.project_id}",
        )
        return ExecutionResult(
            success=True,
            message="Transaction prepared for token claim",
            transaction_descriptor=descriptor,
            data={
                "action": "claim_tokens",
                "project_id": intent.project_id,
                "requires_signing": True,
            },
        )

    # ------------------------------------------------------------------
    # Read intents
    # ------------------------------------------------------------------

    async def _get_project_info(self, intent: GetProjectInfo) -> ExecutionResult:
        project = await self.gateway.get_project(intent.project_id)
        if project is None:
            return ExecutionResult(success=False, message=f"Project not found: {intent.project_id}")
        return ExecutionResult(
            success=True,
            message="Project information retrieved",
            data={
                "project": project.to_dict(),
                "action": "get_project_info",
                "requires_signing": False,
            },
        )

    async def _list_projects(self) -> ExecutionResult:
        projects = await self.gateway.get_all_projects()
        return ExecutionResult(
            success=True,
            message=f"Found {len(projects)} projects",
            data={
                "projects": [project.to_dict() for project in projects],
                "count": len(projects),
                "action": "list_projects",
                "requires_signing": False,
            },
        )

    async def _get_project_statistics(self) -> ExecutionResult:
        statistics = await self.gateway.get_project_statistics()
        return ExecutionResult(
            success=True,
            message="Project statistics retrieved",
            data={
                "statistics": statistics.to_dict(),
                "action": "get_statistics",
                "requires_signing": False,
            },
        )

    async def _get_user_balance(self) -> ExecutionResult:
        not_connected = ExecutionResult(
            success=False,
            message="No wallet connected. Connect your wallet to check your balance.",
            data={"action": "get_balance", "requires_signing": False},
        )
        if self.wallet_manager is None:
            return not_connected

        try:
            balance = await self.wallet_manager.get_balance()
        except NotConnectedError:
            return not_connected

        return ExecutionResult(
            success=True,
            message="Wallet balance retrieved",
            data={
                "action": "get_balance",
                "address": balance.address,
                "balance": balance.wei,
                "balance_eth": balance.eth,
                "requires_signing": False,
            },
        )
