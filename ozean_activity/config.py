"""
Configuration for the Ozean activity verifier.
"""

from functools import lru_cache
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .address import address_problem

DEFAULT_BRIDGE_TOKENS = {
    "USDC": "0x94a9D9AC8a22534E3FaCa9F4e7F2E2cf85d5E4C8",
    "USDT": "0xaA8E23Fb1079EA71e0a56F48a2aA51851D8433D0",
    "USDT_ALT": "0x7169D38820dfd117C3FA1f22a697dBA58d90BA06",
    "DAI": "0xFF34B3d4Aee8ddCd6F9AFFFB6Fe49bD371b8a357",
}


class Settings(BaseSettings):
    """
    Verifier configuration settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Server
    host: str = Field(default="127.0.0.1", description="API host")
    port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="CORS allowed origins"
    )
    default_address: str = Field(
        default="0x73cb4Cf464Ba30bBB369Ce7AC58C0e1B1920EAF6",
        description="Address checked when a request carries none"
    )

    # Networks
    sepolia_rpc_url: str = Field(
        default="https://eth-sepolia.g.alchemy.com/v2",
        description="Bridge source chain RPC URL (Sepolia)"
    )
    ozean_rpc_url: str = Field(
        default="https://ozean-testnet.rpc.caldera.xyz/http",
        description="Staking/wrapping chain RPC URL (Ozean)"
    )
    rpc_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-call timeout for log and state queries"
    )

    # Contracts
    bridge_contract_address: str = Field(
        default="0x084c27a0be5df26ed47f00678027a6e76b14a0b4",
        description="Bridge contract on Sepolia"
    )
    staking_contract_address: str = Field(
        default="0x1Ce4888a6dED8d6aE5F5D9ca1CABc758c680950b",
        description="Staking contract on Ozean"
    )
    token_contract_address: str = Field(
        default="0x2f6807b76c426527C3a5C442E8697f12C554195b",
        description="Wrapped token contract on Ozean"
    )
    bridge_tokens: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_BRIDGE_TOKENS),
        description="Bridged token symbol -> source token address"
    )

    # Log query range
    log_from_block: int = Field(default=0, ge=0, description="First block scanned for events")
    log_to_block: Union[int, str] = Field(default="latest", description="Last block scanned for events")

    # Wrapping check
    # Unwrap (burn to zero address) detection stays off unless explicitly enabled.
    count_unwrap_events: bool = Field(
        default=False,
        description="Also count transfers to the zero address as wrapping activity"
    )

    @field_validator(
        "default_address",
        "bridge_contract_address",
        "staking_contract_address",
        "token_contract_address",
    )
    @classmethod
    def _check_address(cls, value: str) -> str:
        reason = address_problem(value)
        if reason is not None:
            raise ValueError(f"invalid address {value!r}: {reason}")
        return value

    @field_validator("bridge_tokens")
    @classmethod
    def _check_bridge_tokens(cls, value: dict[str, str]) -> dict[str, str]:
        if not value:
            raise ValueError("at least one bridge token is required")
        for symbol, address in value.items():
            reason = address_problem(address)
            if reason is not None:
                raise ValueError(f"invalid address for bridge token {symbol}: {reason}")
        return value

    @field_validator("log_to_block")
    @classmethod
    def _check_to_block(cls, value: Union[int, str]) -> Union[int, str]:
        if isinstance(value, str):
            if value.isdigit():
                return int(value)
            if value not in ("latest", "safe", "finalized"):
                raise ValueError(f"log_to_block must be a block number or tag, got {value!r}")
        elif value < 0:
            raise ValueError("log_to_block must be non-negative")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
