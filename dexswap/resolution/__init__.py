"""Token resolution module - resolves chain/address pairs to token descriptors."""

from .token_resolver import TokenResolver

__all__ = ["TokenResolver"]
