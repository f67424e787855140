"""Base classes for token/swap providers."""

import logging
import time
from abc import ABC, abstractmethod
from collections import deque
from typing import Any

from ..core.models import (
    AuditEntry,
    ProviderTxResponse,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from ..core.types import TradeType

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for all providers.

    The audit trail keeps only the most recent MAX_AUDIT_ENTRIES entries, so
    a long-lived provider does not grow without bound.
    """

    # Subclasses must define their name
    NAME: str = "unknown"

    MAX_AUDIT_ENTRIES: int = 1000

    def __init__(self) -> None:
        self._audit_entries: deque[AuditEntry] = deque(maxlen=self.MAX_AUDIT_ENTRIES)

    def _record_audit(
        self,
        action: str,
        success: bool = True,
        error_message: str | None = None,
        started_at: float | None = None,
        notes: str | None = None,
    ) -> AuditEntry:
        """Record an audit entry for this provider action."""
        duration_ms = None
        if started_at is not None:
            duration_ms = int((time.time() - started_at) * 1000)
        entry = AuditEntry(
            provider=self.NAME,
            action=action,
            success=success,
            error_message=error_message,
            duration_ms=duration_ms,
            notes=notes,
        )
        self._audit_entries.append(entry)
        if not success:
            logger.debug(f"[{self.NAME}] {action} failed: {error_message}")
        return entry

    def get_audit_trail(self) -> list[AuditEntry]:
        """Return the retained audit entries, oldest first."""
        return list(self._audit_entries)

    def clear_audit_trail(self) -> None:
        """Clear the audit trail."""
        self._audit_entries.clear()

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available and configured."""
        pass


class SwapProvider(BaseProvider):
    """Token lookup, supply query and swap execution capability.

    Implementations translate their own failures into dexswap errors:
    ResolutionError from fetch_token_data, ProviderError from
    fetch_total_supply and SwapExecutionError from swap.
    """

    @abstractmethod
    def fetch_token_data(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenDescriptor:
        """Resolve a token by chain and address."""
        pass

    @abstractmethod
    def fetch_total_supply(self, token: TokenDescriptor) -> TokenAmount:
        """Return the total supply of a resolved token."""
        pass

    @abstractmethod
    def swap(
        self,
        token_in: TokenDescriptor,
        token_out: TokenDescriptor,
        amount: int,
        trade_type: TradeType = TradeType.EXACT_INPUT,
        trade_options: dict[str, Any] | None = None,
        tx_overrides: TxOverrides | None = None,
    ) -> ProviderTxResponse:
        """Execute a single-hop swap and return the transaction response."""
        pass
