"""
Chain gateway for the launchpad contract.

The gateway owns exactly one contract binding and runs in one of two modes:
- signing: a configured private key signs and submits transactions
- read-only: an ephemeral key is generated so the binding has a sender
  address, but it is never persisted and never used to sign; every mutating
  call is rejected before any network I/O

All chain access goes through AsyncWeb3 with an explicit request timeout.
"""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from aiohttp import ClientTimeout
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import is_address, to_checksum_address
from web3 import AsyncWeb3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, TimeExhausted
from web3.logs import DISCARD

from ..errors import (
    AddressNotFoundError,
    ChainCallFailedError,
    InvalidAddressFormatError,
    NoReceiptError,
    ReadOnlyViolationError,
    TransactionError,
)
from .abi import (
    EVENT_NAMES,
    LAUNCHPAD_ABI,
    PROJECT_CREATED_EVENT,
)
from .models import (
    ACTIVE_PROJECT_STATUS,
    ChainEvent,
    MarketingInfo,
    Project,
    ProjectDetails,
    ProjectStatistics,
    TokenData,
    TxReceipt,
    UserInfo,
    decode_event,
    decode_marketing_info,
    decode_project,
    decode_statistics,
    decode_user_info,
)


logger = logging.getLogger(__name__)

# Gas used when estimation fails for project creation
DEFAULT_CREATE_PROJECT_GAS = 300_000
CREATE_PROJECT_GAS_MARGIN_PERCENT = 20

# Contract-level "not found" outcomes, as opposed to transport failures
_ABSENT_ERRORS = (ContractLogicError, BadFunctionCallOutput)


@dataclass(frozen=True)
class _Binding:
    """Everything a call needs, swapped as one unit on mode change."""
    w3: AsyncWeb3
    contract: Any
    account: LocalAccount
    chain_id: Optional[int]
    read_only: bool


def build_web3(provider_url: str, timeout: float = 30.0) -> AsyncWeb3:
    """Create an AsyncWeb3 client for ``provider_url`` with a bounded request timeout."""
    return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
        provider_url,
        request_kwargs={"timeout": ClientTimeout(total=timeout)},
    ))


def require_address(value: str) -> str:
    """Return the checksummed form of ``value`` or raise InvalidAddressFormatError."""
    if not isinstance(value, str) or not is_address(value):
        raise InvalidAddressFormatError(str(value))
    return to_checksum_address(value)


class ChainGateway:
    """
    Single point of contact with one deployed launchpad contract.

    Use ``ChainGateway.with_signer`` for a signing gateway and
    ``ChainGateway.read_only`` for one that can only read. A read-only
    gateway can be upgraded in place with ``set_wallet_signer``; the switch
    replaces the whole binding at once so concurrent callers see either the
    old mode or the new one.
    """

    def __init__(
        self,
        provider_url: str,
        contract_address: str,
        binding: _Binding,
        *,
        receipt_timeout: float = 120.0,
        receipt_poll_interval: float = 0.5,
    ):
        self._provider_url = provider_url
        self._contract_address = contract_address
        self._binding = binding
        self._mode_lock = asyncio.Lock()
        self.receipt_timeout = receipt_timeout
        self.receipt_poll_interval = receipt_poll_interval

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def with_signer(
        cls,
        provider_url: str,
        contract_address: str,
        private_key: str,
        chain_id: int,
        *,
        w3: Optional[AsyncWeb3] = None,
        request_timeout: float = 30.0,
        **kwargs: Any,
    ) -> "ChainGateway":
        """Create a gateway that signs transactions with ``private_key``."""
        address = require_address(contract_address)
        w3 = w3 or build_web3(provider_url, request_timeout)
        binding = _Binding(
            w3=w3,
            contract=w3.eth.contract(address=address, abi=LAUNCHPAD_ABI),
            account=Account.from_key(private_key),
            chain_id=chain_id,
            read_only=False,
        )
        return cls(provider_url, address, binding, **kwargs)

    @classmethod
    def read_only(
        cls,
        provider_url: str,
        contract_address: str,
        chain_id: Optional[int] = None,
        *,
        w3: Optional[AsyncWeb3] = None,
        request_timeout: float = 30.0,
        **kwargs: Any,
    ) -> "ChainGateway":
        """
        Create a gateway that can only read.

        When ``chain_id`` is omitted it is read from the node on demand.
        """
        address = require_address(contract_address)
        w3 = w3 or build_web3(provider_url, request_timeout)
        binding = _Binding(
            w3=w3,
            contract=w3.eth.contract(address=address, abi=LAUNCHPAD_ABI),
            # Sender identity only; never persisted, never used to sign
            account=Account.create(),
            chain_id=chain_id,
            read_only=True,
        )
        return cls(provider_url, address, binding, **kwargs)

    async def set_wallet_signer(self, private_key: str, chain_id: int) -> None:
        """Switch this gateway into signing mode."""
        account = Account.from_key(private_key)
        async with self._mode_lock:
            self._binding = replace(
                self._binding,
                account=account,
                chain_id=chain_id,
                read_only=False,
            )
        logger.info(f"Gateway upgraded to signing mode on chain {chain_id}")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def is_read_only(self) -> bool:
        return self._binding.read_only

    @property
    def provider_url(self) -> str:
        return self._provider_url

    @property
    def chain_id(self) -> Optional[int]:
        """Configured chain id, or ``None`` when it has to be read from the node."""
        return self._binding.chain_id

    async def get_contract_address(self) -> str:
        return self._contract_address

    async def get_chain_id(self) -> int:
        binding = self._binding
        if binding.chain_id is not None:
            return binding.chain_id
        try:
            return int(await binding.w3.eth.chain_id)
        except Exception as e:
            raise ChainCallFailedError(f"Failed to read chain id: {e}") from e

    async def check_connection(self) -> bool:
        try:
            await self.get_project_statistics()
        except TransactionError as e:
            raise ChainCallFailedError(f"Connection failed: {e}") from e
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def _call(self, fn: Any, description: str) -> Any:
        try:
            return await fn.call()
        except Exception as e:
            logger.error(f"{description} failed: {e}")
            raise ChainCallFailedError(f"{description} failed: {e}") from e

    async def get_project(self, project_id: str, include_marketing: bool = False) -> Optional[Project]:
        """
        Read a single project.

        Raises InvalidAddressFormatError for a malformed id and
        ChainCallFailedError for transport failures. A well-formed id with
        no project behind it returns ``None``.
        """
        address = require_address(project_id)
        contract = self._binding.contract

        try:
            raw = await contract.functions.getProject(address).call()
        except _ABSENT_ERRORS as e:
            logger.debug(f"Project {address} not found: {e}")
            return None
        except Exception as e:
            raise ChainCallFailedError(f"getProject failed for {address}: {e}") from e

        project = decode_project(address, raw)
        if project is not None and include_marketing:
            try:
                project.marketing = await self.get_project_marketing_info(address)
            except TransactionError as e:
                logger.warning(f"Marketing info unavailable for {address}: {e}")
        return project

    async def get_project_full_details(self, project_id: str) -> Optional[Tuple[Project, ProjectDetails]]:
        project = await self.get_project(project_id, include_marketing=True)
        if project is None:
            return None
        return project, ProjectDetails()

    async def get_project_marketing_info(self, project_id: str) -> Optional[MarketingInfo]:
        address = require_address(project_id)
        contract = self._binding.contract
        try:
            raw = await contract.functions.getProjectMarketingInfo(address).call()
        except _ABSENT_ERRORS:
            return None
        except Exception as e:
            raise ChainCallFailedError(f"getProjectMarketingInfo failed for {address}: {e}") from e
        return decode_marketing_info(raw)

    async def _try_get_project(self, address: str) -> Optional[Project]:
        try:
            return await self.get_project(address)
        except TransactionError as e:
            logger.debug(f"Skipping project {address}: {e}")
            return None

    async def _load_projects(self, addresses: Sequence[str]) -> List[Project]:
        results = await asyncio.gather(*(self._try_get_project(a) for a in addresses))
        return [project for project in results if project is not None]

    async def get_all_project_addresses(self) -> List[str]:
        contract = self._binding.contract
        addresses = await self._call(contract.functions.getAllProjects(), "getAllProjects")
        return [to_checksum_address(a) for a in addresses]

    async def get_all_projects(self) -> List[Project]:
        return await self._load_projects(await self.get_all_project_addresses())

    async def get_trending_projects(self, limit: int = 10) -> List[Project]:
        contract = self._binding.contract
        addresses = await self._call(contract.functions.getTrendingProjects(limit), "getTrendingProjects")
        return await self._load_projects(addresses)

    async def get_newly_launched_projects(self, limit: int = 10) -> List[Project]:
        contract = self._binding.contract
        addresses = await self._call(
            contract.functions.getNewlyLaunchedProjects(limit), "getNewlyLaunchedProjects"
        )
        return await self._load_projects(addresses)

    async def get_projects_by_status(self, status: int, page: int = 1, page_size: int = 50) -> List[Project]:
        contract = self._binding.contract
        addresses = await self._call(
            contract.functions.getProjectsByStatus(status, page, page_size), "getProjectsByStatus"
        )
        return await self._load_projects(addresses)

    async def get_active_projects(self) -> List[Project]:
        return await self.get_projects_by_status(ACTIVE_PROJECT_STATUS, 1, 50)

    async def search_projects(self, term: str) -> List[Project]:
        contract = self._binding.contract
        addresses = await self._call(contract.functions.searchProjects(term), "searchProjects")
        return await self._load_projects(addresses)

    async def get_project_statistics(self) -> ProjectStatistics:
        contract = self._binding.contract
        raw = await self._call(contract.functions.getProjectStatistics(), "getProjectStatistics")
        return decode_statistics(raw)

    async def get_user_by_telegram_id(self, telegram_id: int) -> Optional[UserInfo]:
        contract = self._binding.contract
        try:
            raw = await contract.functions.getUserByTelegramId(telegram_id).call()
        except _ABSENT_ERRORS:
            return None
        except Exception as e:
            raise ChainCallFailedError(f"getUserByTelegramId failed: {e}") from e
        return decode_user_info(raw)

    async def get_token_data(self, project_id: str) -> Optional[TokenData]:
        project = await self.get_project(project_id)
        if project is None:
            return None
        return TokenData(address=project.address, name=project.name, symbol=project.symbol)

    async def get_events(
        self,
        event_name: str,
        from_block: Union[int, str] = 0,
        to_block: Union[int, str] = "latest",
    ) -> List[ChainEvent]:
        """Fetch and decode logs for one of the contract's event topics."""
        if event_name not in EVENT_NAMES:
            raise ValueError(f"Unknown event '{event_name}'. Available events: {', '.join(EVENT_NAMES)}")

        event = getattr(self._binding.contract.events, event_name)
        try:
            logs = await event().get_logs(from_block=from_block, to_block=to_block)
        except Exception as e:
            raise ChainCallFailedError(f"Fetching {event_name} logs failed: {e}") from e
        return [decode_event(log) for log in logs]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _signing_binding(self, action: str) -> _Binding:
        binding = self._binding
        if binding.read_only:
            raise ReadOnlyViolationError(
                f"Cannot {action}: gateway is in read-only mode. Connect wallet first."
            )
        return binding

    async def _transact(
        self,
        binding: _Binding,
        fn: Any,
        description: str,
        value: int = 0,
        gas: Optional[int] = None,
        gas_price: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Sign, submit and wait for a contract call; returns the raw receipt."""
        sender = binding.account.address
        try:
            tx_params: Dict[str, Any] = {
                "from": sender,
                "value": value,
                "nonce": await binding.w3.eth.get_transaction_count(sender),
                "chainId": binding.chain_id,
            }
            if gas is not None:
                tx_params["gas"] = gas
            if gas_price is not None:
                tx_params["gasPrice"] = gas_price

            tx = await fn.build_transaction(tx_params)
            signed = binding.account.sign_transaction(tx)
            tx_hash = await binding.w3.eth.send_raw_transaction(signed.raw_transaction)
        except Exception as e:
            logger.error(f"{description} submission failed: {e}")
            raise ChainCallFailedError(f"{description} failed: {e}") from e

        tx_hash_hex = "0x" + bytes(tx_hash).hex()
        logger.info(f"{description} sent: {tx_hash_hex}")

        try:
            receipt = await binding.w3.eth.wait_for_transaction_receipt(
                tx_hash,
                timeout=self.receipt_timeout,
                poll_latency=self.receipt_poll_interval,
            )
        except TimeExhausted as e:
            raise NoReceiptError(f"{description}: no receipt for {tx_hash_hex}", tx_hash=tx_hash_hex) from e
        except Exception as e:
            raise ChainCallFailedError(f"{description}: waiting for receipt failed: {e}") from e

        if not receipt:
            raise NoReceiptError(f"{description}: no receipt for {tx_hash_hex}", tx_hash=tx_hash_hex)
        if receipt.get("status") == 0:
            raise ChainCallFailedError(f"{description} reverted on-chain: {tx_hash_hex}")
        return receipt

    @staticmethod
    def _to_receipt(receipt: Dict[str, Any]) -> TxReceipt:
        tx_hash = receipt.get("transactionHash")
        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = "0x" + bytes(tx_hash).hex()
        return TxReceipt(
            tx_hash=str(tx_hash),
            block_number=receipt.get("blockNumber"),
            status=receipt.get("status"),
            gas_used=receipt.get("gasUsed"),
        )

    async def invest(self, project_id: str, amount_wei: int) -> TxReceipt:
        binding = self._signing_binding("invest")
        project = require_address(project_id)
        fn = binding.contract.functions.invest(project)
        receipt = await self._transact(binding, fn, f"invest in {project}", value=amount_wei)
        return self._to_receipt(receipt)

    async def claim_tokens(self, project_id: str) -> TxReceipt:
        binding = self._signing_binding("claim tokens")
        project = require_address(project_id)
        fn = binding.contract.functions.claimTokens(project)
        return self._to_receipt(await self._transact(binding, fn, f"claimTokens {project}"))

    async def complete_project(self, project_id: str) -> TxReceipt:
        binding = self._signing_binding("complete project")
        project = require_address(project_id)
        fn = binding.contract.functions.completeProject(project)
        return self._to_receipt(await self._transact(binding, fn, f"completeProject {project}"))

    async def claim_refund(self, project_id: str) -> TxReceipt:
        binding = self._signing_binding("claim refund")
        project = require_address(project_id)
        fn = binding.contract.functions.claimRefund(project)
        return self._to_receipt(await self._transact(binding, fn, f"claimRefund {project}"))

    async def register_user(self, telegram_id: int, telegram_username: str) -> TxReceipt:
        binding = self._signing_binding("register user")
        fn = binding.contract.functions.registerUser(telegram_id, telegram_username)
        return self._to_receipt(await self._transact(binding, fn, f"registerUser {telegram_id}"))

    async def create_project(
        self,
        creator: str,
        token_name: str,
        token_symbol: str,
        token_decimals: int,
        initial_supply: int,
    ) -> str:
        """
        Create a project and return the new project's address.

        Gas is estimated and padded by 20%, and the current gas price is
        attached explicitly. Raises AddressNotFoundError when the transaction
        succeeded but no ProjectCreated log could be decoded.
        """
        binding = self._signing_binding("create project")
        creator = require_address(creator)
        fn = binding.contract.functions.createProjectWithTokenViaTelegram(
            creator,
            token_name,
            token_symbol,
            token_decimals,
            initial_supply,
        )

        try:
            gas_estimate = await fn.estimate_gas({"from": binding.account.address})
            logger.debug(f"Estimated gas: {gas_estimate}")
        except Exception as e:
            gas_estimate = DEFAULT_CREATE_PROJECT_GAS
            logger.warning(f"Gas estimation failed, using default: {gas_estimate}. Error: {e}")
        gas = gas_estimate * (100 + CREATE_PROJECT_GAS_MARGIN_PERCENT) // 100

        try:
            gas_price = await binding.w3.eth.gas_price
        except Exception as e:
            raise ChainCallFailedError(f"Failed to fetch gas price: {e}") from e

        receipt = await self._transact(
            binding, fn, f"create project {token_symbol}", gas=gas, gas_price=gas_price
        )
        tx_hash = self._to_receipt(receipt).tx_hash

        event = getattr(binding.contract.events, PROJECT_CREATED_EVENT)
        for log in event().process_receipt(receipt, errors=DISCARD):
            project_address = log["args"].get("project")
            if project_address:
                project_address = to_checksum_address(project_address)
                logger.info(f"Project created at {project_address} in {tx_hash}")
                return project_address

        raise AddressNotFoundError(
            f"Failed to parse project address from transaction receipt {tx_hash}",
            tx_hash=tx_hash,
        )


__all__ = [
    "ChainGateway",
    "build_web3",
    "require_address",
    "DEFAULT_CREATE_PROJECT_GAS",
]
