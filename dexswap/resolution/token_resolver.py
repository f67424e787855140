"""Token resolution - turns (chain id, address) into a TokenDescriptor.

The provider is the authority on symbol and name. Caller-supplied hints
only fill in fields the provider could not look up itself.
"""

import logging

from ..core.exceptions import DexSwapError, ResolutionError
from ..core.models import TokenDescriptor
from ..providers.base import SwapProvider

logger = logging.getLogger(__name__)


class TokenResolver:
    """Resolves token identifiers through a provider."""

    def __init__(self, provider: SwapProvider):
        """
        Initialize the token resolver.

        Args:
            provider: Provider that performs the token lookup
        """
        self.provider = provider

    def resolve(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenDescriptor:
        """
        Resolve a token to a fully populated descriptor.

        Args:
            chain_id: Network the token lives on
            address: Token contract address
            symbol: Optional display hint
            name: Optional display hint

        Returns:
            TokenDescriptor as reported by the provider

        Raises:
            ResolutionError: If the provider cannot find or validate the token
        """
        logger.debug(f"Resolving token {address} on chain {chain_id}")

        try:
            token = self.provider.fetch_token_data(chain_id, address, symbol, name)
        except DexSwapError:
            raise
        except Exception as e:
            raise ResolutionError(chain_id, address, str(e)) from e

        if token is None:
            raise ResolutionError(chain_id, address, "provider returned no token data")

        # Hints are a fallback, never an override
        updates = {}
        if token.symbol is None and symbol is not None:
            updates["symbol"] = symbol
        if token.name is None and name is not None:
            updates["name"] = name
        if updates:
            token = token.model_copy(update=updates)

        logger.debug(f"Resolved {address} to {token.label}")
        return token
