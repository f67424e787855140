"""Configuration management for provider settings.

Loads configuration from environment variables or .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

# Uniswap V3 deployments on Ethereum mainnet
DEFAULT_SWAP_ROUTER = "0xE592427A0AEce92De3Edee1F18E0157C05861564"  # SwapRouter
DEFAULT_QUOTER = "0x61fFE014bA17989E743c5F6cB21bF9697530B21e"  # QuoterV2


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(key, f"expected an integer, got {raw!r}")


@dataclass
class ProviderConfig:
    """Provider configuration for dexswap."""

    # JSON-RPC endpoint of a node (enables the on-chain provider)
    rpc_url: Optional[str] = None

    # Node-managed account used as transaction sender
    sender_address: Optional[str] = None

    # Uniswap V3 contracts
    swap_router_address: str = DEFAULT_SWAP_ROUTER
    quoter_address: str = DEFAULT_QUOTER

    # Swap defaults when trade options leave them out
    default_pool_fee: int = 3000
    default_deadline_sec: int = 1200

    # YAML/JSON token registry (enables the offline provider)
    registry_path: Optional[Path] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ProviderConfig":
        """Load configuration from environment variables."""
        registry = os.getenv("DEXSWAP_REGISTRY")
        return cls(
            rpc_url=os.getenv("DEXSWAP_RPC_URL"),
            sender_address=os.getenv("DEXSWAP_SENDER_ADDRESS"),
            swap_router_address=os.getenv("DEXSWAP_SWAP_ROUTER", DEFAULT_SWAP_ROUTER),
            quoter_address=os.getenv("DEXSWAP_QUOTER", DEFAULT_QUOTER),
            default_pool_fee=_int_env("DEXSWAP_DEFAULT_POOL_FEE", 3000),
            default_deadline_sec=_int_env("DEXSWAP_DEADLINE_SEC", 1200),
            registry_path=Path(registry) if registry else None,
            log_level=os.getenv("DEXSWAP_LOG_LEVEL", "INFO"),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "ProviderConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the project root.

        Returns:
            ProviderConfig instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()

    def has_rpc(self) -> bool:
        """Check if an RPC endpoint is configured."""
        return bool(self.rpc_url)

    def has_registry(self) -> bool:
        """Check if a token registry file is configured."""
        return self.registry_path is not None

    def get_available_providers(self) -> list[str]:
        """Get list of providers that can be built from this config."""
        providers = []
        if self.has_rpc():
            providers.append("web3")
        if self.has_registry():
            providers.append("static")
        return providers


# Global config instance (lazy loaded)
_config: Optional[ProviderConfig] = None


def get_config() -> ProviderConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ProviderConfig.load()
    return _config


def reload_config(env_file: Optional[Path] = None) -> ProviderConfig:
    """Reload configuration from environment."""
    global _config
    _config = ProviderConfig.load(env_file)
    return _config
