from typing import Optional
from pydantic import BaseModel, Field


class HelloRequest(BaseModel):
    name: str = Field(description="Name to greet")


class CreateIntentRequest(BaseModel):
    user_input: str = Field(min_length=1, description="Natural-language request")
    user_id: Optional[int] = Field(default=None, description="Optional caller identifier, logged only")
    idempotency_key: Optional[str] = Field(
        default=None,
        description="Resubmissions with the same key return the first result",
    )


class SignedIntentRequest(BaseModel):
    user_input: str = Field(min_length=1, description="Natural-language request")
    signature: str = Field(description="Wallet signature over the request (not verified)")
    address: str = Field(description="Signing wallet address")
    chain_id: int = Field(description="Chain the wallet is connected to")
    idempotency_key: Optional[str] = Field(default=None, description="Optional idempotency key")


class InitializeAgentRequest(BaseModel):
    deepseek_api_key: Optional[str] = Field(default=None, description="Oracle API key; defaults to configuration")
    rpc_url: Optional[str] = Field(default=None, description="EVM JSON-RPC endpoint; defaults to configuration")
    contract_address: Optional[str] = Field(default=None, description="Launchpad contract; defaults to configuration")


class WalletConnectRequest(BaseModel):
    address: str = Field(description="Wallet address")
    chain_id: int = Field(description="Chain the wallet is connected to")
    wallet_type: str = Field(default="metamask", description="Wallet family, e.g. metamask, walletconnect")


class SignMessageRequest(BaseModel):
    message: str = Field(default="", description="Message to sign")


class TransactionData(BaseModel):
    to: str = Field(description="Target address")
    data: str = Field(description="Call data or method tag")
    value: str = Field(description="Value in wei as a decimal string")
    chain_id: int = Field(description="Chain id")
    description: str = Field(description="Human-readable summary")


class SignTransactionRequest(BaseModel):
    transaction_data: TransactionData = Field(description="Unsigned transaction descriptor")
    address: str = Field(description="Wallet that would sign")
    chain_id: int = Field(description="Chain id")
