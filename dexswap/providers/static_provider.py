"""Offline provider backed by a static token registry.

Lets analysts rehearse supply queries and swaps without a node. The
registry is a YAML/JSON file of the form::

    tokens:
      - chain_id: 1
        address: "0x6B175474E89094C44Da98b954EedeAC495271d0F"
        symbol: DAI
        name: Dai Stablecoin
        decimals: 18
        total_supply: 5000000000000000000000000000

Swaps are simulated: nothing is broadcast, and the returned hash is a
deterministic digest of the request.
"""

import hashlib
import json
import logging
import threading
import time
from collections import deque
from pathlib import Path
from typing import Any

import yaml

from ..core.exceptions import (
    ConfigurationError,
    ProviderError,
    ResolutionError,
    SwapExecutionError,
)
from ..core.models import (
    ProviderTxResponse,
    SwapRequest,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from ..core.types import TradeType
from .base import SwapProvider

logger = logging.getLogger(__name__)


class StaticProvider(SwapProvider):
    """Serves token data from an in-memory registry and simulates swaps."""

    NAME = "static"

    MAX_EXECUTED_SWAPS: int = 1000

    def __init__(
        self,
        tokens: list[dict[str, Any]] | None = None,
        reject_reason: str | None = None,
    ):
        """
        Initialize static provider.

        Args:
            tokens: Registry entries with chain_id, address and optional
                symbol, name, decimals and total_supply
            reject_reason: If set, every swap is rejected with this reason

        Only the most recent MAX_EXECUTED_SWAPS accepted swaps are kept.
        """
        super().__init__()
        self.reject_reason = reject_reason
        self._tokens: dict[tuple[int, str], TokenDescriptor] = {}
        self._supplies: dict[tuple[int, str], int] = {}
        self._executed: deque[SwapRequest] = deque(maxlen=self.MAX_EXECUTED_SWAPS)
        self._nonce = 0
        self._lock = threading.Lock()

        for entry in tokens or []:
            self.register(**entry)

    @classmethod
    def from_file(cls, path: Path | str, **kwargs: Any) -> "StaticProvider":
        """Load a registry from a YAML or JSON file."""
        filepath = Path(path)
        if not filepath.exists():
            raise ConfigurationError("registry_path", f"File not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                if filepath.suffix in (".yaml", ".yml"):
                    data = yaml.safe_load(f) or {}
                else:
                    data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError("registry_path", f"Failed to parse {filepath}: {e}") from e

        tokens = (data.get("tokens") if isinstance(data, dict) else None) or []
        provider = cls(**kwargs)
        for entry in tokens:
            try:
                provider.register(**entry)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    "registry_path", f"Invalid registry entry {entry!r}: {e}"
                ) from e

        logger.info(f"Loaded {len(tokens)} tokens from {filepath}")
        return provider

    def register(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
        decimals: int | None = None,
        total_supply: int | str | None = None,
    ) -> TokenDescriptor:
        """Add or replace a registry entry."""
        token = TokenDescriptor(
            chain_id=int(chain_id),
            address=address,
            symbol=symbol,
            name=name,
            decimals=decimals,
        )
        self._tokens[token.identity] = token
        if total_supply is not None:
            self._supplies[token.identity] = int(total_supply)
        return token

    def is_available(self) -> bool:
        """Static registry is always available."""
        return True

    @property
    def executed_swaps(self) -> list[SwapRequest]:
        """Most recent accepted swaps, oldest first."""
        with self._lock:
            return list(self._executed)

    def fetch_token_data(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenDescriptor:
        started_at = time.time()
        token = self._tokens.get((chain_id, address.lower()))
        if token is None:
            self._record_audit(
                "fetch_token_data",
                success=False,
                error_message=f"unknown token {address}",
                started_at=started_at,
            )
            raise ResolutionError(chain_id, address, "token not in registry")

        self._record_audit(
            "fetch_token_data",
            started_at=started_at,
            notes=f"Resolved to {token.label}",
        )
        return token

    def fetch_total_supply(self, token: TokenDescriptor) -> TokenAmount:
        started_at = time.time()
        supply = self._supplies.get(token.identity)
        if supply is None:
            self._record_audit(
                "fetch_total_supply",
                success=False,
                error_message=f"no supply for {token.address}",
                started_at=started_at,
            )
            raise ProviderError(
                self.NAME,
                f"No total supply recorded for {token.address} on chain {token.chain_id}",
                operation="fetch_total_supply",
            )

        self._record_audit("fetch_total_supply", started_at=started_at)
        return TokenAmount(token=token, amount=supply)

    def swap(
        self,
        token_in: TokenDescriptor,
        token_out: TokenDescriptor,
        amount: int,
        trade_type: TradeType = TradeType.EXACT_INPUT,
        trade_options: dict[str, Any] | None = None,
        tx_overrides: TxOverrides | None = None,
    ) -> ProviderTxResponse:
        started_at = time.time()

        reason = None
        if self.reject_reason:
            reason = self.reject_reason
        else:
            for token in (token_in, token_out):
                if token.identity not in self._tokens:
                    reason = f"unknown token {token.address}"
                    break

        if reason:
            self._record_audit(
                "swap", success=False, error_message=reason, started_at=started_at
            )
            raise SwapExecutionError(self.NAME, reason, reason=reason)

        request = SwapRequest(
            token_in=token_in,
            token_out=token_out,
            amount=amount,
            trade_type=trade_type,
            trade_options=trade_options or {},
            tx_overrides=tx_overrides,
        )
        with self._lock:
            nonce = self._nonce
            self._nonce += 1
            self._executed.append(request)

        tx_hash = self._simulated_hash(request, nonce)
        self._record_audit(
            "swap",
            started_at=started_at,
            notes=f"{trade_type.value} {amount} {token_in.label} -> {token_out.label}",
        )
        return ProviderTxResponse(hash=tx_hash)

    @staticmethod
    def _simulated_hash(request: SwapRequest, nonce: int) -> str:
        payload = json.dumps(
            {"nonce": nonce, "request": request.model_dump(mode="json")},
            sort_keys=True,
            default=str,
        )
        return "0x" + hashlib.sha256(payload.encode("utf-8")).hexdigest()
