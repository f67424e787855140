"""CLI entry point for dexswap.

Usage:
    dexswap supply 1 0x6B175474E89094C44Da98b954EedeAC495271d0F
    dexswap supply 1 0xTOKEN --registry tokens.yaml --output json
    dexswap swap 1 0xTOKENIN 0xTOKENOUT 1000000000000000000 --slippage 0.5
    dexswap supply 1 0xTOKEN --registry tokens.yaml --save results/dai --audit
"""

import logging
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.text import Text

from ..core.config import ProviderConfig, reload_config
from ..core.exceptions import DexSwapError
from ..orchestrator import SupplyQueryOrchestrator, SwapOrchestrator
from ..output.audit_trail import AuditTrailFormatter
from ..output.formatters import JSONFormatter, OutputFormatter, TableFormatter
from ..providers.base import SwapProvider
from ..providers.factory import create_provider

# Initialize app
app = typer.Typer(
    name="dexswap",
    help="Token supply queries and single-hop DEX swaps",
    add_completion=False,
)

console = Console()


def setup_logging(verbose: bool = False, log_level: str = "INFO") -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
    )


def _formatter(output: str) -> OutputFormatter:
    if output.lower() == "json":
        return JSONFormatter()
    return TableFormatter()


def _load_config(verbose: bool) -> ProviderConfig:
    # Re-read per command so environment changes are picked up
    try:
        config = reload_config()
    except DexSwapError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)
    setup_logging(verbose, config.log_level)
    return config


def _build_provider(config: ProviderConfig, registry: Optional[Path]) -> SwapProvider:
    try:
        return create_provider(config, registry_path=registry)
    except DexSwapError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


def _show(
    result: Any,
    output: str,
    provider: SwapProvider,
    audit: bool,
    save: Optional[Path] = None,
) -> None:
    formatter = _formatter(output)
    formatted = formatter.format(result)
    if output.lower() == "json":
        print(formatted)
    else:
        console.print(Text.from_ansi(formatted))

    audit_formatter = AuditTrailFormatter()
    entries = provider.get_audit_trail()
    if audit:
        console.print("\n")
        console.print(audit_formatter.format_summary(entries))

    # Save if requested
    if save:
        save.parent.mkdir(parents=True, exist_ok=True)
        save_path = save.with_suffix(".json" if output.lower() == "json" else ".txt")
        formatter.format_to_file(result, str(save_path))
        console.print(f"[green]Saved to {escape(str(save_path))}[/]")

        if audit:
            audit_path = save_path.with_name(f"{save_path.stem}_audit.txt")
            audit_formatter.format_to_file(entries, str(audit_path))
            console.print(f"[green]Audit trail saved to {escape(str(audit_path))}[/]")


@app.command()
def supply(
    chain_id: int = typer.Argument(..., help="Chain id (e.g., 1 for Ethereum)"),
    address: str = typer.Argument(..., help="Token contract address"),
    symbol: Optional[str] = typer.Option(None, "--symbol", help="Symbol hint"),
    name: Optional[str] = typer.Option(None, "--name", help="Name hint"),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json",
    ),
    save: Optional[Path] = typer.Option(
        None,
        "--save",
        help="Save output to file",
    ),
    registry: Optional[Path] = typer.Option(
        None,
        "--registry", "-r",
        help="Static token registry (YAML/JSON) instead of an RPC node",
    ),
    audit: bool = typer.Option(
        False,
        "--audit", "-a",
        help="Show provider audit trail",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Resolve a token and show its total supply.

    Examples:
        dexswap supply 1 0x6B175474E89094C44Da98b954EedeAC495271d0F
        dexswap supply 1 0xTOKEN --registry tokens.yaml -o json
    """
    config = _load_config(verbose)
    provider = _build_provider(config, registry)

    try:
        result = SupplyQueryOrchestrator(provider).fetch_token_total_supply(
            chain_id, address, symbol, name
        )
    except DexSwapError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    _show(result, output, provider, audit, save)


@app.command()
def swap(
    chain_id: int = typer.Argument(..., help="Chain id (e.g., 1 for Ethereum)"),
    token_in: str = typer.Argument(..., help="Address of the token to sell"),
    token_out: str = typer.Argument(..., help="Address of the token to buy"),
    amount: str = typer.Argument(..., help="Exact input amount in raw base units"),
    slippage: Optional[float] = typer.Option(
        None,
        "--slippage", "-s",
        help="Slippage tolerance in percent (e.g., 0.5)",
    ),
    recipient: Optional[str] = typer.Option(
        None,
        "--recipient",
        help="Recipient of the output tokens (defaults to sender)",
    ),
    deadline: Optional[int] = typer.Option(
        None,
        "--deadline",
        help="Unix timestamp after which the swap reverts",
    ),
    fee: Optional[int] = typer.Option(
        None,
        "--fee",
        help="Pool fee tier (500, 3000, 10000)",
    ),
    output: str = typer.Option(
        "table",
        "--output", "-o",
        help="Output format: table, json",
    ),
    save: Optional[Path] = typer.Option(
        None,
        "--save",
        help="Save output to file",
    ),
    registry: Optional[Path] = typer.Option(
        None,
        "--registry", "-r",
        help="Static token registry (YAML/JSON); swaps are simulated",
    ),
    audit: bool = typer.Option(
        False,
        "--audit", "-a",
        help="Show provider audit trail",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
) -> None:
    """
    Swap an exact amount of one token for another.

    Examples:
        dexswap swap 1 0xA 0xB 1000000000000000000 --slippage 0.5
    """
    config = _load_config(verbose)

    trade_options: dict[str, Any] = {}
    if slippage is not None:
        trade_options["slippage"] = slippage
    if recipient:
        trade_options["recipient"] = recipient
    if deadline is not None:
        trade_options["deadline"] = deadline
    if fee is not None:
        trade_options["fee"] = fee

    provider = _build_provider(config, registry)
    console.print(f"[bold]Swapping {amount} {token_in} -> {token_out}...[/]")

    try:
        result = SwapOrchestrator(provider).simple_swap(
            chain_id, token_in, token_out, amount, trade_options
        )
    except DexSwapError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    _show(result, output, provider, audit, save)


@app.command()
def version() -> None:
    """Show version information."""
    from .. import __version__
    console.print(f"dexswap v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
