import os

from pathlib import Path
from typing import Any, List, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Ensure we pick up legacy environment variable aliases."""

        super().model_post_init(__context)

        if not self.deepseek_api_key:
            fallback = os.getenv("LLM_API_KEY")
            if fallback:
                object.__setattr__(self, "deepseek_api_key", fallback)

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=3001, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: Optional[bool] = Field(
        default=None,
        description="Force JSON (true) or console (false) logs; unset means JSON unless DEBUG",
    )
    cors_allow_origins: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    # LLM Provider Settings
    llm_provider: str = Field(default="deepseek", description="Default LLM provider")
    deepseek_api_key: str = Field(
        default="",
        description="DeepSeek API key",
        validation_alias=AliasChoices("deepseek_api_key", "DEEPSEEK_API_KEY", "DEEPSEEK_KEY"),
    )
    llm_model: str = Field(default="deepseek-chat", description="Default LLM model")
    llm_base_url: str = Field(default="https://api.deepseek.com", description="Chat completion API base URL")
    llm_timeout_seconds: float = Field(default=70.0, gt=0, description="Oracle request timeout")
    max_tokens: int = Field(default=500, description="Maximum tokens for LLM response")
    temperature: float = Field(default=0.7, description="LLM temperature setting")
    assistant_name: str = Field(default="Teemah AI", description="Persona name used in prompts")

    # Chain Settings
    default_rpc_url: str = Field(
        default="https://data-seed-prebsc-1-s1.binance.org:8545",
        description="RPC endpoint used for wallet balances and default agent initialization",
    )
    contract_address: str = Field(default="", description="Launchpad contract address")
    fallback_chain_id: int = Field(
        default=97,
        description="Network id shown to wallets when the gateway reports none (BSC testnet)",
    )
    chain_request_timeout_seconds: float = Field(default=30.0, gt=0, description="JSON-RPC request timeout")
    receipt_timeout_seconds: float = Field(default=120.0, gt=0, description="Max wait for a transaction receipt")
    receipt_poll_seconds: float = Field(default=0.5, gt=0, description="Receipt polling interval")

    # Agent Settings
    agent_name: str = Field(default="TeemahAgent", description="Name reported by the agent status endpoint")
    auto_initialize_agent: bool = Field(
        default=False,
        description="Initialize a read-only agent at startup from configured keys",
    )
    intent_ledger_size: int = Field(
        default=500,
        ge=1,
        description="Maximum number of intent results kept in memory",
    )

    @property
    def has_llm_key(self) -> bool:
        """Check if we have an API key for the configured LLM provider"""
        if self.llm_provider.lower() in ["deepseek", "ds"]:
            return bool(self.deepseek_api_key)
        return False

    @property
    def can_auto_initialize(self) -> bool:
        return self.auto_initialize_agent and self.has_llm_key and bool(self.contract_address)


# Global settings instance
settings = Settings()
