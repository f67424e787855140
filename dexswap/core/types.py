"""Type definitions and enums for dexswap."""

from enum import Enum, IntEnum
from typing import Any, Literal


class TradeType(str, Enum):
    """Direction of a single-hop trade."""

    EXACT_INPUT = "EXACT_INPUT"     # Input amount fixed, output set by the market
    EXACT_OUTPUT = "EXACT_OUTPUT"   # Output amount fixed, input set by the market


class ChainId(IntEnum):
    """EVM networks with known Uniswap V3 deployments."""

    MAINNET = 1
    GOERLI = 5
    OPTIMISM = 10
    BSC = 56
    POLYGON = 137
    BASE = 8453
    ARBITRUM_ONE = 42161
    SEPOLIA = 11155111

    @property
    def display_name(self) -> str:
        """Human-readable network name."""
        names = {
            self.MAINNET: "Ethereum",
            self.GOERLI: "Goerli",
            self.OPTIMISM: "Optimism",
            self.BSC: "BNB Chain",
            self.POLYGON: "Polygon",
            self.BASE: "Base",
            self.ARBITRUM_ONE: "Arbitrum One",
            self.SEPOLIA: "Sepolia",
        }
        return names.get(self, self.name.title())

    @classmethod
    def describe(cls, chain_id: int) -> str:
        """Display name for any chain id, known or not."""
        try:
            return cls(chain_id).display_name
        except ValueError:
            return f"chain {chain_id}"


# Opaque caller configuration forwarded to the provider untouched
TradeOptions = dict[str, Any]

# Orchestration step names used to tag errors
Step = Literal[
    "resolve_token",
    "resolve_token_in",
    "resolve_token_out",
    "query_supply",
    "execute_swap",
]
