"""Builds the provider selected by configuration."""

import logging
from pathlib import Path

from ..core.config import ProviderConfig
from ..core.exceptions import ConfigurationError
from .base import SwapProvider
from .static_provider import StaticProvider
from .web3_provider import Web3Provider

logger = logging.getLogger(__name__)


def create_provider(
    config: ProviderConfig,
    registry_path: Path | str | None = None,
) -> SwapProvider:
    """
    Create a provider from configuration.

    An explicit registry path wins, then a configured RPC endpoint, then
    the configured registry file.

    Raises:
        ConfigurationError: If neither an RPC URL nor a registry is available
    """
    if registry_path is not None:
        logger.info(f"Using static registry {registry_path}")
        return StaticProvider.from_file(registry_path)

    if config.has_rpc():
        logger.info("Using on-chain provider")
        return Web3Provider.from_config(config)

    if config.has_registry():
        logger.info(f"Using static registry {config.registry_path}")
        return StaticProvider.from_file(config.registry_path)

    raise ConfigurationError(
        "DEXSWAP_RPC_URL",
        "Set DEXSWAP_RPC_URL or DEXSWAP_REGISTRY (or pass --registry)",
    )
