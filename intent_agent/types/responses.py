from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from ..core.intents import IntentResult
from .requests import TransactionData


class HelloResponse(BaseModel):
    message: str
    timestamp: str


class HealthResponse(BaseModel):
    status: str = Field(description="Service status")
    version: str = Field(description="Service version")
    agent_initialized: bool = Field(description="Whether an intent agent is configured")
    wallet_connected: bool = Field(description="Whether a wallet session exists")


class IntentResponse(BaseModel):
    intent_id: str = Field(description="Identifier minted for this request")
    status: str = Field(description="completed or failed")
    message: str = Field(description="Diagnostic message")
    ai_message: str = Field(description="User-facing markdown reply")
    intent: Optional[str] = Field(default=None, description="Classified intent kind")
    transaction_hash: Optional[str] = Field(default=None)
    transaction_data: Optional[TransactionData] = Field(
        default=None,
        description="Unsigned transaction for the user's wallet, write intents only",
    )
    data: Optional[Dict[str, Any]] = Field(default=None, description="Structured result data")
    created_at: Optional[str] = Field(default=None)

    @classmethod
    def from_result(cls, result: IntentResult) -> "IntentResponse":
        tx = result.transaction_descriptor
        return cls(
            intent_id=result.id,
            status=result.status,
            message=result.message,
            ai_message=result.ai_message,
            intent=result.intent.value,
            transaction_hash=result.transaction_hash,
            transaction_data=TransactionData(**tx.to_dict()) if tx else None,
            data=result.data,
            created_at=result.created_at.isoformat(),
        )


class AgentInitializeResponse(BaseModel):
    success: bool
    message: str
    agent_name: Optional[str] = None
    read_only: Optional[bool] = None
    wallet_required: Optional[bool] = None


class AgentStatusResponse(BaseModel):
    initialized: bool
    status: str = Field(description="ready or uninitialized")
    wallet_connected: bool
    requires_wallet: bool = True
    agent_name: Optional[str] = None
    active_intents: int = 0
    read_only: Optional[bool] = None
    message: Optional[str] = None


class WalletConnectResponse(BaseModel):
    success: bool
    message: str
    address: Optional[str] = None
    chain_id: Optional[int] = None


class WalletStatusResponse(BaseModel):
    connected: bool
    address: Optional[str] = None
    chain_id: Optional[int] = None
    balance: Optional[str] = Field(default=None, description="Balance in wei")
    balance_eth: Optional[str] = Field(default=None, description="Balance in ETH, six decimals")
    wallet_type: Optional[str] = None
    connected_at: Optional[str] = None


class WalletBalanceResponse(BaseModel):
    success: bool
    balance: Optional[str] = None
    balance_eth: Optional[str] = None
    message: Optional[str] = None


class SignMessageResponse(BaseModel):
    success: bool
    message: str
    signature: Optional[str] = Field(default=None, description="Placeholder, not a cryptographic signature")
    authoritative: bool = Field(default=False, description="Always false for server-side placeholders")


class SignTransactionResponse(BaseModel):
    success: bool
    message: str
    transaction_hash: Optional[str] = None
    simulated: bool = Field(default=True, description="The hash is a display artifact, nothing was broadcast")
