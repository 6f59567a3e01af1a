"""
Wallet session models.

A session only records which externally-owned wallet the user connected;
it never holds key material.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

WEI_PER_ETH = Decimal(10) ** 18
BALANCE_DISPLAY_QUANTUM = Decimal("0.000001")


class WalletKind(str, Enum):
    """Wallet families the frontend can report."""
    METAMASK = "MetaMask"
    WALLETCONNECT = "WalletConnect"
    COINBASE = "CoinbaseWallet"
    PHANTOM = "Phantom"
    OTHER = "Other"


_KNOWN_KINDS = {
    "metamask": WalletKind.METAMASK,
    "walletconnect": WalletKind.WALLETCONNECT,
    "coinbase": WalletKind.COINBASE,
    "coinbasewallet": WalletKind.COINBASE,
    "phantom": WalletKind.PHANTOM,
}

# Recognized wallets without a dedicated kind, mapped to their display label
_LABELED_OTHERS = {
    "trustwallet": "TrustWallet",
    "rainbow": "Rainbow",
    "argent": "Argent",
}


@dataclass(frozen=True)
class WalletType:
    """
    Closed wallet variant with one labeled open case.

    ``label`` is only set for ``WalletKind.OTHER``.
    """
    kind: WalletKind
    label: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "WalletType":
        key = (raw or "").strip().lower()
        if key in _KNOWN_KINDS:
            return cls(_KNOWN_KINDS[key])
        if key in _LABELED_OTHERS:
            return cls(WalletKind.OTHER, _LABELED_OTHERS[key])
        return cls(WalletKind.OTHER, raw)

    @property
    def display_name(self) -> str:
        if self.kind is WalletKind.OTHER:
            return self.label or WalletKind.OTHER.value
        return self.kind.value

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "label": self.label}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WalletSession:
    """The currently connected wallet."""
    address: str
    chain_id: int
    provider_url: str
    wallet_type: WalletType
    connected_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "chain_id": self.chain_id,
            "provider_url": self.provider_url,
            "wallet_type": self.wallet_type.display_name,
            "connected_at": self.connected_at.isoformat(),
        }


def format_eth(wei: int) -> str:
    """Render a wei amount as ETH with six decimal places."""
    eth = Decimal(int(wei)) / WEI_PER_ETH
    return str(eth.quantize(BALANCE_DISPLAY_QUANTUM))


@dataclass(frozen=True)
class WalletBalance:
    address: str
    wei: str
    eth: str

    @classmethod
    def from_wei(cls, address: str, wei: int) -> "WalletBalance":
        return cls(address=address, wei=str(int(wei)), eth=format_eth(wei))

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "balance": self.wei, "balance_eth": self.eth}
