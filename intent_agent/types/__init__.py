from .requests import (
    CreateIntentRequest,
    HelloRequest,
    InitializeAgentRequest,
    SignedIntentRequest,
    SignMessageRequest,
    SignTransactionRequest,
    TransactionData,
    WalletConnectRequest,
)
from .responses import (
    AgentInitializeResponse,
    AgentStatusResponse,
    HealthResponse,
    HelloResponse,
    IntentResponse,
    SignMessageResponse,
    SignTransactionResponse,
    WalletBalanceResponse,
    WalletConnectResponse,
    WalletStatusResponse,
)

__all__ = [
    "CreateIntentRequest",
    "HelloRequest",
    "InitializeAgentRequest",
    "SignedIntentRequest",
    "SignMessageRequest",
    "SignTransactionRequest",
    "TransactionData",
    "WalletConnectRequest",
    "AgentInitializeResponse",
    "AgentStatusResponse",
    "HealthResponse",
    "HelloResponse",
    "IntentResponse",
    "SignMessageResponse",
    "SignTransactionResponse",
    "WalletBalanceResponse",
    "WalletConnectResponse",
    "WalletStatusResponse",
]
