"""Pytest configuration and fixtures for dexswap tests."""

import threading
from pathlib import Path
from typing import Any

import pytest
import yaml

from dexswap.core.exceptions import ProviderError, ResolutionError, SwapExecutionError
from dexswap.core.models import (
    ProviderTxResponse,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from dexswap.core.types import TradeType
from dexswap.providers.base import SwapProvider
from dexswap.providers.static_provider import StaticProvider

SWAP_TX_HASH = "0xabc0000000000000000000000000000000000000000000000000000000000def"


class RecordingProvider(SwapProvider):
    """In-memory provider that records every call it receives."""

    NAME = "recording"

    def __init__(
        self,
        tokens: dict[tuple[int, str], TokenDescriptor] | None = None,
        supplies: dict[tuple[int, str], int] | None = None,
        tx_hash: str = SWAP_TX_HASH,
    ):
        super().__init__()
        self.tokens = tokens or {}
        self.supplies = supplies or {}
        self.tx_hash = tx_hash
        self.swap_error: Exception | None = None
        self.supply_error: Exception | None = None
        self.resolution_barrier: threading.Barrier | None = None
        self.calls: list[tuple[str, Any]] = []
        self._lock = threading.Lock()

    def _record(self, name: str, payload: Any) -> None:
        with self._lock:
            self.calls.append((name, payload))

    def calls_to(self, name: str) -> list[Any]:
        return [payload for call, payload in self.calls if call == name]

    def is_available(self) -> bool:
        return True

    def fetch_token_data(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenDescriptor:
        self._record("fetch_token_data", (chain_id, address, symbol, name))
        if self.resolution_barrier is not None:
            self.resolution_barrier.wait()
        token = self.tokens.get((chain_id, address.lower()))
        if token is None:
            raise ResolutionError(chain_id, address, "unknown token")
        return token

    def fetch_total_supply(self, token: TokenDescriptor) -> TokenAmount:
        self._record("fetch_total_supply", token)
        if self.supply_error is not None:
            raise self.supply_error
        return TokenAmount(token=token, amount=self.supplies.get(token.identity, 0))

    def swap(
        self,
        token_in: TokenDescriptor,
        token_out: TokenDescriptor,
        amount: int,
        trade_type: TradeType = TradeType.EXACT_INPUT,
        trade_options: dict[str, Any] | None = None,
        tx_overrides: TxOverrides | None = None,
    ) -> ProviderTxResponse:
        self._record(
            "swap",
            {
                "token_in": token_in,
                "token_out": token_out,
                "amount": amount,
                "trade_type": trade_type,
                "trade_options": trade_options,
                "tx_overrides": tx_overrides,
            },
        )
        if self.swap_error is not None:
            raise self.swap_error
        return ProviderTxResponse(hash=self.tx_hash)


@pytest.fixture
def foo_token() -> TokenDescriptor:
    """FOO token as the provider reports it."""
    return TokenDescriptor(chain_id=1, address="0xTOKENIN", symbol="FOO", name="Foo Token")


@pytest.fixture
def token_a() -> TokenDescriptor:
    return TokenDescriptor(chain_id=1, address="0xA", symbol="AAA", name="Token A", decimals=18)


@pytest.fixture
def token_b() -> TokenDescriptor:
    return TokenDescriptor(chain_id=1, address="0xB", symbol="BBB", name="Token B", decimals=6)


@pytest.fixture
def provider(
    foo_token: TokenDescriptor,
    token_a: TokenDescriptor,
    token_b: TokenDescriptor,
) -> RecordingProvider:
    """Recording provider knowing FOO, A and B on chain 1."""
    tokens = {t.identity: t for t in (foo_token, token_a, token_b)}
    return RecordingProvider(tokens=tokens, supplies={foo_token.identity: 1_000_000})


@pytest.fixture
def rejecting_provider(provider: RecordingProvider) -> RecordingProvider:
    """Provider whose swap executor rejects on slippage."""
    provider.swap_error = SwapExecutionError(
        "recording", "Too little received", reason="slippage_exceeded"
    )
    return provider


@pytest.fixture
def failing_supply_provider(provider: RecordingProvider) -> RecordingProvider:
    """Provider whose supply query fails."""
    provider.supply_error = ProviderError("recording", "node timeout", operation="fetch_total_supply")
    return provider


@pytest.fixture
def registry_entries() -> list[dict[str, Any]]:
    """Registry entries for the static provider."""
    return [
        {
            "chain_id": 1,
            "address": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
            "symbol": "DAI",
            "name": "Dai Stablecoin",
            "decimals": 18,
            "total_supply": "5000000000000000000000000000",
        },
        {
            "chain_id": 1,
            "address": "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
            "symbol": "WETH",
            "name": "Wrapped Ether",
            "decimals": 18,
            "total_supply": 3000000000000000000000000,
        },
        {
            "chain_id": 1,
            "address": "0x0000000000000000000000000000000000000bad",
        },
    ]


@pytest.fixture
def static_provider(registry_entries: list[dict[str, Any]]) -> StaticProvider:
    return StaticProvider(tokens=registry_entries)


@pytest.fixture
def registry_file(tmp_path: Path, registry_entries: list[dict[str, Any]]) -> Path:
    """Registry written to a YAML file."""
    path = tmp_path / "tokens.yaml"
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump({"tokens": registry_entries}, f)
    return path


@pytest.fixture
def swap_tx_hash() -> str:
    """Hash the recording provider returns for every swap."""
    return SWAP_TX_HASH
