"""Token/swap providers for dexswap.

This module contains providers for:
- On-chain ERC-20 data and Uniswap V3 swaps (web3)
- Offline token registries with simulated swaps (static)
"""

from .base import BaseProvider, SwapProvider
from .factory import create_provider
from .static_provider import StaticProvider
from .web3_provider import Web3Provider

__all__ = [
    "BaseProvider",
    "SwapProvider",
    "StaticProvider",
    "Web3Provider",
    "create_provider",
]
