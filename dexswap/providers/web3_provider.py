"""On-chain provider using web3.py and Uniswap V3.

Token metadata and supply are read from the ERC-20 contract. Swaps go
through the Uniswap V3 SwapRouter with bounds derived from a QuoterV2
quote and the caller's slippage tolerance.

Transactions are sent with eth_sendTransaction from an account managed by
the node, so no private keys pass through this module. Token approvals
for the router must already be in place.
"""

import logging
import time
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from typing import Any

from web3 import Web3
from web3.exceptions import ContractLogicError, Web3Exception

from ..core.config import DEFAULT_QUOTER, DEFAULT_SWAP_ROUTER, ProviderConfig
from ..core.exceptions import (
    ConfigurationError,
    ProviderError,
    ResolutionError,
    SwapExecutionError,
)
from ..core.models import (
    ProviderTxResponse,
    TokenAmount,
    TokenDescriptor,
    TxOverrides,
)
from ..core.types import ChainId, TradeType
from .base import SwapProvider

logger = logging.getLogger(__name__)

# Errors web3 raises for RPC, ABI and transport failures
WEB3_ERRORS = (Web3Exception, ValueError, OSError)

DEFAULT_SLIPPAGE_PCT = Decimal("0.5")

# ---- minimal ABIs ----
ABI_ERC20 = [
    {"name": "name", "outputs": [{"type": "string"}], "inputs": [], "stateMutability": "view", "type": "function"},
    {"name": "symbol", "outputs": [{"type": "string"}], "inputs": [], "stateMutability": "view", "type": "function"},
    {"name": "decimals", "outputs": [{"type": "uint8"}], "inputs": [], "stateMutability": "view", "type": "function"},
    {"name": "totalSupply", "outputs": [{"type": "uint256"}], "inputs": [], "stateMutability": "view", "type": "function"},
]

ABI_QUOTER_V2 = [
    {"name": "quoteExactInputSingle",
     "outputs": [
        {"type": "uint256", "name": "amountOut"},
        {"type": "uint160", "name": "sqrtPriceX96After"},
        {"type": "uint32", "name": "initializedTicksCrossed"},
        {"type": "uint256", "name": "gasEstimate"}],
     "inputs": [{"components": [
        {"type": "address", "name": "tokenIn"},
        {"type": "address", "name": "tokenOut"},
        {"type": "uint256", "name": "amountIn"},
        {"type": "uint24", "name": "fee"},
        {"type": "uint160", "name": "sqrtPriceLimitX96"}],
       "type": "tuple", "name": "params"}],
     "stateMutability": "nonpayable", "type": "function"},
    {"name": "quoteExactOutputSingle",
     "outputs": [
        {"type": "uint256", "name": "amountIn"},
        {"type": "uint160", "name": "sqrtPriceX96After"},
        {"type": "uint32", "name": "initializedTicksCrossed"},
        {"type": "uint256", "name": "gasEstimate"}],
     "inputs": [{"components": [
        {"type": "address", "name": "tokenIn"},
        {"type": "address", "name": "tokenOut"},
        {"type": "uint256", "name": "amount"},
        {"type": "uint24", "name": "fee"},
        {"type": "uint160", "name": "sqrtPriceLimitX96"}],
       "type": "tuple", "name": "params"}],
     "stateMutability": "nonpayable", "type": "function"},
]

ABI_SWAP_ROUTER = [
    {"name": "exactInputSingle",
     "outputs": [{"type": "uint256", "name": "amountOut"}],
     "inputs": [{"components": [
        {"type": "address", "name": "tokenIn"},
        {"type": "address", "name": "tokenOut"},
        {"type": "uint24", "name": "fee"},
        {"type": "address", "name": "recipient"},
        {"type": "uint256", "name": "deadline"},
        {"type": "uint256", "name": "amountIn"},
        {"type": "uint256", "name": "amountOutMinimum"},
        {"type": "uint160", "name": "sqrtPriceLimitX96"}],
       "type": "tuple", "name": "params"}],
     "stateMutability": "payable", "type": "function"},
    {"name": "exactOutputSingle",
     "outputs": [{"type": "uint256", "name": "amountIn"}],
     "inputs": [{"components": [
        {"type": "address", "name": "tokenIn"},
        {"type": "address", "name": "tokenOut"},
        {"type": "uint24", "name": "fee"},
        {"type": "address", "name": "recipient"},
        {"type": "uint256", "name": "deadline"},
        {"type": "uint256", "name": "amountOut"},
        {"type": "uint256", "name": "amountInMaximum"},
        {"type": "uint160", "name": "sqrtPriceLimitX96"}],
       "type": "tuple", "name": "params"}],
     "stateMutability": "payable", "type": "function"},
]


def apply_slippage(quoted: int, slippage_pct: Decimal, trade_type: TradeType) -> int:
    """
    Bound a quoted amount by a slippage tolerance.

    Args:
        quoted: Quoted output (exact input) or input (exact output) amount
        slippage_pct: Tolerance in percent, e.g. 0.5 for 0.5%
        trade_type: Direction of the trade

    Returns:
        Minimum acceptable output for EXACT_INPUT, maximum input for EXACT_OUTPUT
    """
    if trade_type == TradeType.EXACT_INPUT:
        factor = (Decimal(100) - slippage_pct) / Decimal(100)
        return int((Decimal(quoted) * factor).to_integral_value(rounding=ROUND_FLOOR))
    factor = (Decimal(100) + slippage_pct) / Decimal(100)
    return int((Decimal(quoted) * factor).to_integral_value(rounding=ROUND_CEILING))


def _decode_text(value: Any) -> str | None:
    # Some legacy tokens (MKR, SAI) return bytes32 instead of string
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).rstrip(b"\x00").decode("utf-8", errors="ignore")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class Web3Provider(SwapProvider):
    """Reads ERC-20 data and executes Uniswap V3 single-hop swaps."""

    NAME = "web3"

    def __init__(
        self,
        rpc_url: str | None = None,
        w3: Web3 | None = None,
        sender_address: str | None = None,
        swap_router_address: str = DEFAULT_SWAP_ROUTER,
        quoter_address: str = DEFAULT_QUOTER,
        default_pool_fee: int = 3000,
        default_deadline_sec: int = 1200,
    ):
        """
        Initialize web3 provider.

        Args:
            rpc_url: JSON-RPC endpoint (ignored when w3 is given)
            w3: Pre-built Web3 instance
            sender_address: Node-managed account that sends swaps
            swap_router_address: Uniswap V3 SwapRouter address
            quoter_address: Uniswap V3 QuoterV2 address
            default_pool_fee: Pool fee tier when trade options omit "fee"
            default_deadline_sec: Deadline offset when trade options omit "deadline"
        """
        super().__init__()
        if w3 is None:
            if not rpc_url:
                raise ConfigurationError("rpc_url", "An RPC URL or Web3 instance is required")
            w3 = Web3(Web3.HTTPProvider(rpc_url))
        self.w3 = w3
        self.sender_address = (
            Web3.to_checksum_address(sender_address) if sender_address else None
        )
        self.swap_router_address = Web3.to_checksum_address(swap_router_address)
        self.quoter_address = Web3.to_checksum_address(quoter_address)
        self.default_pool_fee = default_pool_fee
        self.default_deadline_sec = default_deadline_sec
        self._chain_id: int | None = None

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "Web3Provider":
        """Build a provider from loaded configuration."""
        return cls(
            rpc_url=config.rpc_url,
            sender_address=config.sender_address,
            swap_router_address=config.swap_router_address,
            quoter_address=config.quoter_address,
            default_pool_fee=config.default_pool_fee,
            default_deadline_sec=config.default_deadline_sec,
        )

    def is_available(self) -> bool:
        """Check if the node answers."""
        try:
            return bool(self.w3.is_connected())
        except WEB3_ERRORS:
            return False

    # ---------- helpers ----------

    @property
    def chain_id(self) -> int:
        """Chain id reported by the connected node (cached)."""
        if self._chain_id is None:
            self._chain_id = int(self.w3.eth.chain_id)
        return self._chain_id

    def erc20(self, address: str):
        return self.w3.eth.contract(
            address=Web3.to_checksum_address(address), abi=ABI_ERC20
        )

    def _check_chain(self, chain_id: int) -> str | None:
        """Return a reason string if chain_id is not served by this node."""
        try:
            node_chain = self.chain_id
        except WEB3_ERRORS as e:
            return f"could not read node chain id: {e}"
        if node_chain != chain_id:
            return (
                f"node serves {ChainId.describe(node_chain)}, "
                f"not {ChainId.describe(chain_id)}"
            )
        return None

    def _optional_call(self, fn) -> Any:
        # Optional ERC-20 metadata; absent on some tokens
        try:
            return fn.call()
        except WEB3_ERRORS as e:
            logger.debug(f"[{self.NAME}] Optional call failed: {e}")
            return None

    # ---------- SwapProvider ----------

    def fetch_token_data(
        self,
        chain_id: int,
        address: str,
        symbol: str | None = None,
        name: str | None = None,
    ) -> TokenDescriptor:
        started_at = time.time()

        def fail(reason: str) -> ResolutionError:
            self._record_audit(
                "fetch_token_data",
                success=False,
                error_message=reason,
                started_at=started_at,
            )
            return ResolutionError(chain_id, address, reason)

        if not Web3.is_address(address):
            raise fail("invalid address")

        reason = self._check_chain(chain_id)
        if reason:
            raise fail(reason)

        checksum = Web3.to_checksum_address(address)
        try:
            code = self.w3.eth.get_code(checksum)
        except WEB3_ERRORS as e:
            raise fail(f"could not read contract code: {e}") from e
        if not code:
            raise fail("no contract at address")

        contract = self.erc20(checksum)
        onchain_symbol = _decode_text(self._optional_call(contract.functions.symbol()))
        onchain_name = _decode_text(self._optional_call(contract.functions.name()))
        decimals = self._optional_call(contract.functions.decimals())

        token = TokenDescriptor(
            chain_id=chain_id,
            address=checksum,
            symbol=onchain_symbol or symbol,
            name=onchain_name or name,
            decimals=int(decimals) if decimals is not None else None,
        )
        self._record_audit(
            "fetch_token_data",
            started_at=started_at,
            notes=f"Resolved to {token.label}",
        )
        return token

    def fetch_total_supply(self, token: TokenDescriptor) -> TokenAmount:
        started_at = time.time()
        reason = self._check_chain(token.chain_id)
        if reason is None:
            try:
                supply = int(self.erc20(token.address).functions.totalSupply().call())
            except WEB3_ERRORS as e:
                reason = f"totalSupply call failed: {e}"

        if reason:
            self._record_audit(
                "fetch_total_supply",
                success=False,
                error_message=reason,
                started_at=started_at,
            )
            raise ProviderError(self.NAME, reason, operation="fetch_total_supply")

        self._record_audit("fetch_total_supply", started_at=started_at)
        return TokenAmount(token=token, amount=supply)

    def swap(
        self,
        token_in: TokenDescriptor,
        token_out: TokenDescriptor,
        amount: int,
        trade_type: TradeType = TradeType.EXACT_INPUT,
        trade_options: dict[str, Any] | None = None,
        tx_overrides: TxOverrides | None = None,
    ) -> ProviderTxResponse:
        started_at = time.time()
        options = trade_options or {}

        def fail(message: str, reason: str) -> SwapExecutionError:
            self._record_audit(
                "swap", success=False, error_message=message, started_at=started_at
            )
            return SwapExecutionError(self.NAME, message, reason=reason)

        if not self.sender_address:
            raise fail("no sender account configured", "no_sender")

        for token in (token_in, token_out):
            chain_reason = self._check_chain(token.chain_id)
            if chain_reason:
                raise fail(chain_reason, "wrong_chain")

        try:
            slippage = Decimal(str(options.get("slippage", DEFAULT_SLIPPAGE_PCT)))
            if not slippage.is_finite() or not Decimal(0) <= slippage < Decimal(100):
                raise ValueError(f"slippage must be a percentage in [0, 100), got {slippage}")
            fee = int(options.get("fee", self.default_pool_fee))
            deadline = int(
                options.get("deadline") or int(time.time()) + self.default_deadline_sec
            )
            recipient = Web3.to_checksum_address(
                options.get("recipient") or self.sender_address
            )
        except (ArithmeticError, TypeError, ValueError) as e:
            raise fail(f"invalid trade options: {e}", "invalid_options") from e

        tin = Web3.to_checksum_address(token_in.address)
        tout = Web3.to_checksum_address(token_out.address)
        quoter = self.w3.eth.contract(address=self.quoter_address, abi=ABI_QUOTER_V2)
        router = self.w3.eth.contract(address=self.swap_router_address, abi=ABI_SWAP_ROUTER)

        try:
            if trade_type == TradeType.EXACT_INPUT:
                quoted = quoter.functions.quoteExactInputSingle(
                    (tin, tout, int(amount), fee, 0)
                ).call()[0]
            else:
                quoted = quoter.functions.quoteExactOutputSingle(
                    (tin, tout, int(amount), fee, 0)
                ).call()[0]
        except WEB3_ERRORS as e:
            raise fail(f"quote failed: {e}", "quote_failed") from e

        bound = apply_slippage(int(quoted), slippage, trade_type)
        logger.debug(
            f"[{self.NAME}] {trade_type.value} quote={quoted} bound={bound} "
            f"fee={fee} slippage={slippage}%"
        )

        if trade_type == TradeType.EXACT_INPUT:
            fn = router.functions.exactInputSingle(
                (tin, tout, fee, recipient, deadline, int(amount), bound, 0)
            )
        else:
            fn = router.functions.exactOutputSingle(
                (tin, tout, fee, recipient, deadline, int(amount), bound, 0)
            )

        tx_params: dict[str, Any] = {"from": self.sender_address}
        if tx_overrides is not None:
            tx_params.update(tx_overrides.as_tx_params())

        try:
            tx_hash = fn.transact(tx_params)
        except ContractLogicError as e:
            raise fail(f"execution reverted: {e}", "execution_reverted") from e
        except WEB3_ERRORS as e:
            raise fail(f"broadcast failed: {e}", "broadcast_failed") from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        self._record_audit(
            "swap",
            started_at=started_at,
            notes=f"{trade_type.value} {amount} {token_in.label} -> {token_out.label}",
        )
        logger.info(f"[{self.NAME}] Swap submitted: {tx_hash_hex}")
        return ProviderTxResponse(hash=tx_hash_hex)
