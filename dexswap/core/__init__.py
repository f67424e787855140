"""Core module - data models, types, and exceptions."""

from .models import (
    AuditEntry,
    ProviderTxResponse,
    SwapOutput,
    SwapRequest,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from .types import (
    ChainId,
    TradeOptions,
    TradeType,
)
from .exceptions import (
    ConfigurationError,
    DexSwapError,
    InvalidInputError,
    ProviderError,
    ResolutionError,
    SwapExecutionError,
)

__all__ = [
    # Models
    "AuditEntry",
    "ProviderTxResponse",
    "SwapOutput",
    "SwapRequest",
    "TokenAmount",
    "TokenDescriptor",
    "TxOverrides",
    # Types
    "ChainId",
    "TradeOptions",
    "TradeType",
    # Exceptions
    "ConfigurationError",
    "DexSwapError",
    "InvalidInputError",
    "ProviderError",
    "ResolutionError",
    "SwapExecutionError",
]
