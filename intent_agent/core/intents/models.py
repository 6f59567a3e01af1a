"""
Intent pipeline models.

Intents are a closed set of variants. Write-intents (CreateProject, Invest,
ClaimTokens) produce an unsigned TransactionDescriptor; read-intents never do.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Union


class IntentKind(str, Enum):
    CREATE_PROJECT = "CreateProject"
    INVEST = "Invest"
    CLAIM_TOKENS = "ClaimTokens"
    GET_PROJECT_INFO = "GetProjectInfo"
    LIST_PROJECTS = "ListProjects"
    GET_USER_BALANCE = "GetUserBalance"
    GET_PROJECT_STATISTICS = "GetProjectStatistics"
    UNKNOWN = "Unknown"

    @property
    def is_write(self) -> bool:
        return self in WRITE_INTENTS


WRITE_INTENTS = frozenset({IntentKind.CREATE_PROJECT, IntentKind.INVEST, IntentKind.CLAIM_TOKENS})


@dataclass(frozen=True)
class CreateProject:
    kind: ClassVar[IntentKind] = IntentKind.CREATE_PROJECT
    name: str
    symbol: str


@dataclass(frozen=True)
class Invest:
    kind: ClassVar[IntentKind] = IntentKind.INVEST
    project_id: str
    amount: float


@dataclass(frozen=True)
class ClaimTokens:
    kind: ClassVar[IntentKind] = IntentKind.CLAIM_TOKENS
    project_id: str


@dataclass(frozen=True)
class GetProjectInfo:
    kind: ClassVar[IntentKind] = IntentKind.GET_PROJECT_INFO
    project_id: str


@dataclass(frozen=True)
class ListProjects:
    kind: ClassVar[IntentKind] = IntentKind.LIST_PROJECTS


@dataclass(frozen=True)
class GetUserBalance:
    kind: ClassVar[IntentKind] = IntentKind.GET_USER_BALANCE


@dataclass(frozen=True)
class GetProjectStatistics:
    kind: ClassVar[IntentKind] = IntentKind.GET_PROJECT_STATISTICS


@dataclass(frozen=True)
class Unknown:
    kind: ClassVar[IntentKind] = IntentKind.UNKNOWN


Intent = Union[
    CreateProject,
    Invest,
    ClaimTokens,
    GetProjectInfo,
    ListProjects,
    GetUserBalance,
    GetProjectStatistics,
    Unknown,
]


@dataclass(frozen=True)
class TransactionDescriptor:
    """
    An unsigned transaction for the user's wallet to review and sign.

    ``value`` is an exact decimal wei string. Never carries key material or
    a signature.
    """
    to: str
    data: str
    value: str
    chain_id: int
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExecutionResult:
    """Outcome of executing one intent, before synthesis."""
    success: bool
    message: str
    transaction_descriptor: Optional[TransactionDescriptor] = None
    transaction_hash: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


@dataclass
class IntentResult:
    """The answer to one natural-language request."""
    id: str
    success: bool
    message: str
    ai_message: str
    intent: IntentKind = IntentKind.UNKNOWN
    transaction_descriptor: Optional[TransactionDescriptor] = None
    transaction_hash: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def status(self) -> str:
        return "completed" if self.success else "failed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "success": self.success,
            "status": self.status,
            "message": self.message,
            "ai_message": self.ai_message,
            "intent": self.intent.value,
            "transaction_descriptor": (
                self.transaction_descriptor.to_dict() if self.transaction_descriptor else None
            ),
            "transaction_hash": self.transaction_hash,
            "data": self.data,
            "created_at": self.created_at.isoformat(),
        }
