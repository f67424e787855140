"""Command-line interface for dexswap."""
