"""Custom exceptions for dexswap."""

from typing import Any

from .types import Step


class DexSwapError(Exception):
    """Base exception for all dexswap errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})
        self.step: Step | None = None

    def with_step(self, step: Step) -> "DexSwapError":
        """Tag the error with the orchestration step that produced it."""
        self.step = step
        self.details["step"] = step
        return self


class ResolutionError(DexSwapError):
    """Raised when a token cannot be found or validated by the provider."""

    def __init__(self, chain_id: int, address: str, reason: str | None = None):
        message = f"Could not resolve token {address} on chain {chain_id}"
        if reason:
            message += f": {reason}"
        super().__init__(
            message,
            {"chain_id": chain_id, "address": address, "reason": reason},
        )
        self.chain_id = chain_id
        self.address = address
        self.reason = reason


class ProviderError(DexSwapError):
    """Raised when a provider query fails for reasons unrelated to resolution."""

    def __init__(
        self,
        provider: str,
        message: str,
        operation: str | None = None,
    ):
        full_message = f"[{provider}] {message}"
        super().__init__(
            full_message,
            {"provider": provider, "operation": operation},
        )
        self.provider = provider
        self.operation = operation


class SwapExecutionError(DexSwapError):
    """Raised when the provider rejects or fails to execute a trade."""

    def __init__(
        self,
        provider: str,
        message: str,
        reason: str | None = None,
        tx_hash: str | None = None,
    ):
        full_message = f"[{provider}] Swap failed: {message}"
        super().__init__(
            full_message,
            {"provider": provider, "reason": reason, "tx_hash": tx_hash},
        )
        self.provider = provider
        self.reason = reason
        self.tx_hash = tx_hash


class InvalidInputError(DexSwapError):
    """Raised when caller-supplied input is malformed."""

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Invalid input for {field}={value!r}: {reason}"
        super().__init__(message, {"field": field, "value": value, "reason": reason})
        self.field = field
        self.value = value
        self.reason = reason


class ConfigurationError(DexSwapError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, config_key: str, message: str):
        full_message = f"Configuration error [{config_key}]: {message}"
        super().__init__(full_message, {"config_key": config_key})
        self.config_key = config_key
