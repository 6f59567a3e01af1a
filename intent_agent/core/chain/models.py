"""
Launchpad contract data models.

Raw ABI tuples are decoded here into typed records. Token amounts are
uint256 on-chain and are carried as exact decimal strings; they are never
routed through float.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from eth_utils import to_checksum_address

from ...config import ZERO_ADDRESS

# getProjectsByStatus status code for projects currently raising
ACTIVE_PROJECT_STATUS = 3


def _amount(value: Any) -> str:
    """Render a uint256 as an exact decimal string."""
    return str(int(value))


def _address(value: Any) -> str:
    if isinstance(value, bytes):
        value = "0x" + value.hex()
    return to_checksum_address(value)


@dataclass
class MarketingInfo:
    """Marketing allocation of a project."""
    telegram_id: str
    wallet: str
    percent: int
    claimed: bool
    amount: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Project:
    """
    A launchpad project as read from ``getProject``.

    ``getProject`` returns no decimals, price or allocation fields.
    ``decimals`` is a fixed 18 (the value every conversational project is
    created with); the allocation percentage comes from the marketing read
    and is only known when the project was loaded with ``include_marketing``.
    """
    address: str
    creator: str
    offering_token: str
    name: str
    symbol: str
    soft_cap: str
    hard_cap: str
    total_raised: str
    start_time: int
    end_time: int
    status: int
    decimals: int = 18
    marketing: Optional[MarketingInfo] = None

    @property
    def progress_percent(self) -> int:
        hard_cap = int(self.hard_cap)
        if hard_cap <= 0:
            return 0
        return int(self.total_raised) * 100 // hard_cap

    @property
    def allocation_percent(self) -> Optional[int]:
        return self.marketing.percent if self.marketing else None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["progress_percent"] = self.progress_percent
        data["allocation_percent"] = self.allocation_percent
        data["marketing"] = self.marketing.to_dict() if self.marketing else None
        return data


@dataclass
class ProjectDetails:
    """Off-chain presentation details; the contract does not store them."""
    description: str = ""
    website: str = ""
    whitepaper: str = ""
    telegram_group: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ProjectStatistics:
    """Aggregate launchpad counters from ``getProjectStatistics``."""
    total_projects: int
    active_projects: int
    completed_projects: int
    total_raised: str
    total_investors: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UserInfo:
    """A registered launchpad user."""
    tier: int
    total_invested: str
    total_projects_invested: int
    join_date: int
    telegram_id: str
    telegram_username: str
    wallet: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TokenData:
    address: str
    name: str
    symbol: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChainEvent:
    """A decoded contract log."""
    event: str
    args: Dict[str, Any] = field(default_factory=dict)
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    log_index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class TxReceipt:
    """The subset of a transaction receipt the gateway reports back."""
    tx_hash: str
    block_number: Optional[int] = None
    status: Optional[int] = None
    gas_used: Optional[int] = None

    @property
    def succeeded(self) -> bool:
        return self.status == 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# =============================================================================
# Decoders
# =============================================================================

def decode_project(address: str, raw: Sequence[Any]) -> Optional[Project]:
    """
    Decode a ``getProject`` tuple.

    Returns ``None`` when the creator is the zero address, which is how the
    contract reports an unknown project without reverting.
    """
    (
        creator,
        offering_token,
        name,
        symbol,
        soft_cap,
        hard_cap,
        total_raised,
        start_time,
        end_time,
        status,
    ) = raw

    creator = _address(creator)
    if creator == ZERO_ADDRESS:
        return None

    return Project(
        address=_address(address),
        creator=creator,
        offering_token=_address(offering_token),
        name=str(name),
        symbol=str(symbol),
        soft_cap=_amount(soft_cap),
        hard_cap=_amount(hard_cap),
        total_raised=_amount(total_raised),
        start_time=int(start_time),
        end_time=int(end_time),
        status=int(status),
    )


def decode_statistics(raw: Sequence[Any]) -> ProjectStatistics:
    """Decode the fixed ``(total, active, completed, total_raised, investors)`` tuple."""
    total, active, completed, total_raised, investors = raw
    return ProjectStatistics(
        total_projects=int(total),
        active_projects=int(active),
        completed_projects=int(completed),
        total_raised=_amount(total_raised),
        total_investors=int(investors),
    )


def decode_marketing_info(raw: Sequence[Any]) -> MarketingInfo:
    telegram_id, wallet, percent, claimed, amount = raw
    return MarketingInfo(
        telegram_id=_amount(telegram_id),
        wallet=_address(wallet),
        percent=int(percent),
        claimed=bool(claimed),
        amount=_amount(amount),
    )


def decode_user_info(raw: Sequence[Any]) -> Optional[UserInfo]:
    """Decode ``getUserByTelegramId``; an unregistered id has a zero wallet."""
    tier, total_invested, projects_invested, join_date, telegram_id, username, wallet = raw
    wallet = _address(wallet)
    if wallet == ZERO_ADDRESS:
        return None
    return UserInfo(
        tier=int(tier),
        total_invested=_amount(total_invested),
        total_projects_invested=int(projects_invested),
        join_date=int(join_date),
        telegram_id=_amount(telegram_id),
        telegram_username=str(username),
        wallet=wallet,
    )


def _hex(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    text = str(value)
    return text if text.startswith("0x") else "0x" + text


def decode_event(log: Mapping[str, Any]) -> ChainEvent:
    """Convert a web3 event ``AttributeDict`` into a ChainEvent."""
    args: Dict[str, Any] = {}
    for key, value in dict(log.get("args", {})).items():
        if isinstance(value, bool):
            args[key] = value
        elif isinstance(value, int):
            # uint256 values stay exact
            args[key] = str(value)
        elif isinstance(value, (bytes, bytearray)):
            args[key] = "0x" + bytes(value).hex()
        else:
            args[key] = value

    block_number = log.get("blockNumber")
    log_index = log.get("logIndex")
    return ChainEvent(
        event=str(log.get("event", "")),
        args=args,
        tx_hash=_hex(log.get("transactionHash")),
        block_number=int(block_number) if block_number is not None else None,
        log_index=int(log_index) if log_index is not None else None,
    )
