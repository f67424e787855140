"""Pydantic data models for dexswap.

All data structures are immutable (frozen) after creation. They are built
per call and discarded once the orchestration returns.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .types import TradeType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenDescriptor(BaseModel):
    """Resolved identity of a token on a specific chain.

    Identity is (chain_id, address). Symbol, name and decimals are display
    metadata and may be overwritten by resolution.
    """

    chain_id: int
    address: str
    symbol: str | None = None
    name: str | None = None
    decimals: int | None = None

    model_config = {"frozen": True}

    @property
    def identity(self) -> tuple[int, str]:
        """(chain_id, lower-cased address) key."""
        return (self.chain_id, self.address.lower())

    @property
    def label(self) -> str:
        """Short display label, symbol when known."""
        return self.symbol or self.address


class TokenAmount(BaseModel):
    """Raw base-unit amount of a token."""

    token: TokenDescriptor
    amount: int

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Amount must be non-negative, got {v}")
        return v

    def to_decimal_string(self) -> str | None:
        """Human-readable amount using token decimals, if known."""
        decimals = self.token.decimals
        if decimals is None:
            return None
        if decimals == 0:
            return str(self.amount)
        whole, frac = divmod(self.amount, 10**decimals)
        frac_str = str(frac).rjust(decimals, "0").rstrip("0")
        return f"{whole}.{frac_str}" if frac_str else str(whole)


class TxOverrides(BaseModel):
    """Optional transaction field overrides for the provider."""

    gas_limit: int | None = None
    gas_price: int | None = None
    nonce: int | None = None
    value: int | None = None

    model_config = {"frozen": True}

    def as_tx_params(self) -> dict[str, int]:
        """Non-empty overrides keyed by web3 transaction field names."""
        mapping = {
            "gas": self.gas_limit,
            "gasPrice": self.gas_price,
            "nonce": self.nonce,
            "value": self.value,
        }
        return {k: v for k, v in mapping.items() if v is not None}


class SwapRequest(BaseModel):
    """Single-hop trade request handed to the provider's swap executor."""

    token_in: TokenDescriptor
    token_out: TokenDescriptor
    amount: int
    trade_type: TradeType = TradeType.EXACT_INPUT
    trade_options: dict[str, Any] = Field(default_factory=dict)
    tx_overrides: TxOverrides | None = None

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Amount must be non-negative, got {v}")
        return v


class ProviderTxResponse(BaseModel):
    """Raw transaction response returned by a provider's swap executor."""

    hash: str

    model_config = {"frozen": True}


class SwapOutput(BaseModel):
    """Result of a swap call."""

    tx_hash: str

    model_config = {"frozen": True}


class AuditEntry(BaseModel):
    """Audit trail entry for a provider call."""

    timestamp: datetime = Field(default_factory=_utcnow)
    provider: str
    action: str  # "fetch_token_data", "fetch_total_supply", "swap"
    success: bool = True
    error_message: str | None = None
    duration_ms: int | None = None
    notes: str | None = None

    model_config = {"frozen": True}
