"""
Wallet session management.

Usage:
    from intent_agent.core.wallet import WalletSessionManager, WalletType

    manager = WalletSessionManager(settings.default_rpc_url)
    await manager.connect("0x...", 97, WalletType.parse("metamask"))
"""

from .models import WalletBalance, WalletKind, WalletSession, WalletType, format_eth
from .session_manager import ReadWriteLock, WalletSessionManager

__all__ = [
    "WalletBalance",
    "WalletKind",
    "WalletSession",
    "WalletType",
    "format_eth",
    "ReadWriteLock",
    "WalletSessionManager",
]
