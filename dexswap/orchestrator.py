"""Orchestrators composing token resolution with supply queries and swaps.

Each call is an independent pipeline::

    start -> resolve(s) -> provider call -> return | fail

No state is kept between calls and no step is retried. Errors from the
provider keep their type; the orchestrator only tags them with the step
that produced them.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from .core.exceptions import (
    DexSwapError,
    InvalidInputError,
    ProviderError,
    SwapExecutionError,
)
from .core.models import (
    SwapOutput,
    SwapRequest,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from .core.types import TradeType
from .providers.base import SwapProvider
from .resolution.token_resolver import TokenResolver

logger = logging.getLogger(__name__)


def _provider_name(provider: SwapProvider) -> str:
    return getattr(provider, "NAME", type(provider).__name__)


def parse_amount(value: int | str, field: str = "amount") -> int:
    """
    Parse a raw base-unit amount given as int or decimal-digit string.

    Raises:
        InvalidInputError: If the value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise InvalidInputError(field, value, "expected an integer amount")
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("-") else text
        if not (digits.isascii() and digits.isdigit()):
            raise InvalidInputError(field, value, "expected a base-10 integer string")
        parsed = int(text)
    else:
        raise InvalidInputError(field, value, "expected an integer amount")

    if parsed < 0:
        raise InvalidInputError(field, value, "amount must be non-negative")
    return parsed


class SupplyQueryOrchestrator:
    """Resolves a token and reads its total supply."""

    def __init__(self, provider: SwapProvider, resolver: TokenResolver | None = None):
        self.provider = provider
        self.resolver = resolver or TokenResolver(provider)

    def fetch_token_total_supply(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenAmount:
        """
        Resolve a token, then query its total supply.

        Args:
            chain_id: Network the token lives on
            address: Token contract address
            symbol: Optional display hint
            name: Optional display hint

        Returns:
            TokenAmount for the resolved token

        Raises:
            ResolutionError: If the token cannot be resolved
            ProviderError: If the supply query fails
        """
        logger.info(f"Fetching total supply for {address} on chain {chain_id}")

        try:
            token = self.resolver.resolve(chain_id, address, symbol, name)
        except DexSwapError as e:
            logger.error(f"Failed to resolve token: {e}")
            raise e.with_step("resolve_token")

        try:
            supply = self.provider.fetch_total_supply(token)
        except DexSwapError as e:
            logger.error(f"Failed to query supply: {e}")
            raise e.with_step("query_supply")
        except Exception as e:
            logger.error(f"Failed to query supply: {e}")
            raise ProviderError(
                _provider_name(self.provider), str(e), operation="fetch_total_supply"
            ).with_step("query_supply") from e

        logger.info(f"Total supply of {token.label}: {supply.amount}")
        return supply


class SwapOrchestrator:
    """Resolves both sides of a trade and submits it to the provider."""

    def __init__(
        self,
        provider: SwapProvider,
        resolver: TokenResolver | None = None,
        max_workers: int = 2,
    ):
        """
        Initialize the swap orchestrator.

        Args:
            provider: Provider with token lookup and swap execution
            resolver: Token resolver (defaults to one over the same provider)
            max_workers: Threads used to resolve token_in and token_out;
                1 resolves them one after the other
        """
        self.provider = provider
        self.resolver = resolver or TokenResolver(provider)
        self.max_workers = max_workers

    def _resolve_pair(
        self,
        chain_id: int,
        token_in_address: str,
        token_out_address: str,
    ) -> tuple[TokenDescriptor, TokenDescriptor]:
        """Resolve both tokens concurrently and join on the results."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_in = executor.submit(self.resolver.resolve, chain_id, token_in_address)
            future_out = executor.submit(self.resolver.resolve, chain_id, token_out_address)

        results = []
        for future, step in (
            (future_in, "resolve_token_in"),
            (future_out, "resolve_token_out"),
        ):
            try:
                results.append(future.result())
            except DexSwapError as e:
                logger.error(f"Failed to resolve token ({step}): {e}")
                raise e.with_step(step)
        return results[0], results[1]

    def build_request(
        self,
        token_in: TokenDescriptor,
        token_out: TokenDescriptor,
        amount: int,
        trade_type: TradeType,
        trade_options: dict[str, Any] | None,
        tx_overrides: TxOverrides | None = None,
    ) -> SwapRequest:
        """Build the request handed to the provider's swap executor."""
        return SwapRequest(
            token_in=token_in,
            token_out=token_out,
            amount=amount,
            trade_type=trade_type,
            trade_options=trade_options if trade_options is not None else {},
            tx_overrides=tx_overrides,
        )

    def execute(self, request: SwapRequest) -> SwapOutput:
        """Submit a built request and extract the transaction hash."""
        try:
            response = self.provider.swap(
                request.token_in,
                request.token_out,
                request.amount,
                trade_type=request.trade_type,
                trade_options=request.trade_options,
                tx_overrides=request.tx_overrides,
            )
        except DexSwapError as e:
            logger.error(f"Swap execution failed: {e}")
            raise e.with_step("execute_swap")
        except Exception as e:
            logger.error(f"Swap execution failed: {e}")
            raise SwapExecutionError(
                _provider_name(self.provider), str(e)
            ).with_step("execute_swap") from e

        logger.info(f"Swap submitted: {response.hash}")
        return SwapOutput(tx_hash=response.hash)

    def swap(
        self,
        chain_id: int,
        token_in_address: str,
        token_out_address: str,
        amount: int | str,
        trade_type: TradeType = TradeType.EXACT_INPUT,
        trade_options: dict[str, Any] | None = None,
        tx_overrides: TxOverrides | None = None,
    ) -> SwapOutput:
        """
        Execute a single-hop swap in either direction.

        For EXACT_INPUT the amount is of token_in, for EXACT_OUTPUT of token_out.

        Raises:
            InvalidInputError: If the amount is malformed or negative
            ResolutionError: If either token cannot be resolved
            SwapExecutionError: If the provider rejects the trade
        """
        raw_amount = parse_amount(amount)
        logger.info(
            f"Swap {trade_type.value}: {raw_amount} {token_in_address} -> "
            f"{token_out_address} on chain {chain_id}"
        )

        token_in, token_out = self._resolve_pair(
            chain_id, token_in_address, token_out_address
        )
        request = self.build_request(
            token_in, token_out, raw_amount, trade_type, trade_options, tx_overrides
        )
        return self.execute(request)

    def simple_swap(
        self,
        chain_id: int,
        token_in_address: str,
        token_out_address: str,
        token_in_amount: int | str,
        trade_options: dict[str, Any] | None = None,
    ) -> SwapOutput:
        """
        Swap an exact amount of token_in for as much token_out as the market gives.

        Args:
            chain_id: Network both tokens live on
            token_in_address: Address of the token sold
            token_out_address: Address of the token bought
            token_in_amount: Raw base-unit amount of token_in
            trade_options: Forwarded to the provider unmodified

        Returns:
            SwapOutput with the provider's transaction hash
        """
        return self.swap(
            chain_id,
            token_in_address,
            token_out_address,
            token_in_amount,
            trade_type=TradeType.EXACT_INPUT,
            trade_options=trade_options,
            tx_overrides=None,
        )


def fetch_token_total_supply(
    provider: SwapProvider,
    chain_id: int,
    address: str,
    symbol: str | None = None,
    name: str | None = None,
) -> TokenAmount:
    """Resolve a token and return its total supply."""
    return SupplyQueryOrchestrator(provider).fetch_token_total_supply(
        chain_id, address, symbol, name
    )


def simple_swap(
    provider: SwapProvider,
    chain_id: int,
    token_in_address: str,
    token_out_address: str,
    token_in_amount: int | str,
    trade_options: dict[str, Any] | None = None,
) -> SwapOutput:
    """Execute an exact-input single-hop swap and return its tx hash."""
    return SwapOrchestrator(provider).simple_swap(
        chain_id, token_in_address, token_out_address, token_in_amount, trade_options
    )
