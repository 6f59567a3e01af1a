"""
Launchpad chain access.

Usage:
    from intent_agent.core.chain import ChainGateway

    gateway = ChainGateway.read_only(rpc_url, contract_address)
    stats = await gateway.get_project_statistics()
"""

from .gateway import ChainGateway, DEFAULT_CREATE_PROJECT_GAS, build_web3, require_address
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
)

__all__ = [
    "ChainGateway",
    "DEFAULT_CREATE_PROJECT_GAS",
    "build_web3",
    "require_address",
    "ACTIVE_PROJECT_STATUS",
    "ChainEvent",
    "MarketingInfo",
    "Project",
    "ProjectDetails",
    "ProjectStatistics",
    "TokenData",
    "TxReceipt",
    "UserInfo",
]
