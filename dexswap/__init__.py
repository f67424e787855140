"""dexswap - token supply queries and single-hop DEX swaps.

Composes token resolution with supply queries and exact-input swap
execution against a pluggable on-chain provider.
"""

__version__ = "0.1.0"
