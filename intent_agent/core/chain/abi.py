"""ABI fragments for the launchpad contract."""

from typing import Any, Dict, List, Sequence, Tuple

Param = Tuple[str, str]


def _params(params: Sequence[Param]) -> List[Dict[str, Any]]:
    return [{"internalType": kind, "name": name, "type": kind} for name, kind in params]


def _function(
    name: str,
    inputs: Sequence[Param] = (),
    outputs: Sequence[Param] = (),
    mutability: str = "view",
) -> Dict[str, Any]:
    return {
        "inputs": _params(inputs),
        "name": name,
        "outputs": _params(outputs),
        "stateMutability": mutability,
        "type": "function",
    }


def _event(name: str, inputs: Sequence[Tuple[str, str, bool]]) -> Dict[str, Any]:
    return {
        "anonymous": False,
        "inputs": [
            {"indexed": indexed, "internalType": kind, "name": arg, "type": kind}
            for arg, kind, indexed in inputs
        ],
        "name": name,
        "type": "event",
    }


_PROJECT_ARG: Sequence[Param] = (("project", "address"),)

LAUNCHPAD_ABI: List[Dict[str, Any]] = [
    # Writes
    _function(
        "createProjectWithTokenViaTelegram",
        inputs=(
            ("creator", "address"),
            ("tokenName", "string"),
            ("tokenSymbol", "string"),
            ("tokenDecimals", "uint8"),
            ("initialSupply", "uint256"),
        ),
        outputs=(("project", "address"),),
        mutability="nonpayable",
    ),
    _function("invest", inputs=_PROJECT_ARG, mutability="payable"),
    _function("claimTokens", inputs=_PROJECT_ARG, mutability="nonpayable"),
    _function("completeProject", inputs=_PROJECT_ARG, mutability="nonpayable"),
    _function("claimRefund", inputs=_PROJECT_ARG, mutability="nonpayable"),
    _function(
        "registerUser",
        inputs=(("telegramId", "uint256"), ("telegramUsername", "string")),
        mutability="nonpayable",
    ),
    # Reads
    _function(
        "getProject",
        inputs=_PROJECT_ARG,
        outputs=(
            ("creator", "address"),
            ("offeringToken", "address"),
            ("name", "string"),
            ("symbol", "string"),
            ("softCap", "uint256"),
            ("hardCap", "uint256"),
            ("totalRaised", "uint256"),
            ("startTime", "uint256"),
            ("endTime", "uint256"),
            ("status", "uint8"),
        ),
    ),
    _function(
        "getProjectStatistics",
        outputs=(
            ("totalProjects", "uint256"),
            ("activeProjects", "uint256"),
            ("completedProjects", "uint256"),
            ("totalRaised", "uint256"),
            ("totalInvestors", "uint256"),
        ),
    ),
    _function("getAllProjects", outputs=(("projects", "address[]"),)),
    _function("getTrendingProjects", inputs=(("limit", "uint256"),), outputs=(("projects", "address[]"),)),
    _function("getNewlyLaunchedProjects", inputs=(("limit", "uint256"),), outputs=(("projects", "address[]"),)),
    _function(
        "getProjectsByStatus",
        inputs=(("status", "uint8"), ("page", "uint256"), ("pageSize", "uint256")),
        outputs=(("projects", "address[]"),),
    ),
    _function("searchProjects", inputs=(("term", "string"),), outputs=(("projects", "address[]"),)),
    _function(
        "getUserByTelegramId",
        inputs=(("telegramId", "uint256"),),
        outputs=(
            ("tier", "uint8"),
            ("totalInvested", "uint256"),
            ("totalProjectsInvested", "uint256"),
            ("joinDate", "uint256"),
            ("telegramId", "uint256"),
            ("telegramUsername", "string"),
            ("wallet", "address"),
        ),
    ),
    _function(
        "getProjectMarketingInfo",
        inputs=_PROJECT_ARG,
        outputs=(
            ("marketingTelegramId", "uint256"),
            ("marketingWallet", "address"),
            ("marketingPercent", "uint256"),
            ("marketingClaimed", "bool"),
            ("marketingAmount", "uint256"),
        ),
    ),
    # Events
    _event(
        "ProjectCreated",
        (
            ("project", "address", True),
            ("creator", "address", True),
            ("createdAt", "uint256", False),
            ("name", "string", False),
        ),
    ),
    _event(
        "Invested",
        (
            ("project", "address", True),
            ("investor", "address", True),
            ("amount", "uint256", False),
            ("tokenAmount", "uint256", False),
            ("timestamp", "uint256", False),
            ("tier", "uint8", False),
        ),
    ),
    _event(
        "ProjectStatusChanged",
        (
            ("project", "address", True),
            ("status", "uint8", False),
        ),
    ),
]

CREATE_PROJECT_FUNCTION = "createProjectWithTokenViaTelegram"

PROJECT_CREATED_EVENT = "ProjectCreated"
INVESTED_EVENT = "Invested"
PROJECT_STATUS_CHANGED_EVENT = "ProjectStatusChanged"

EVENT_NAMES = (PROJECT_CREATED_EVENT, INVESTED_EVENT, PROJECT_STATUS_CHANGED_EVENT)
