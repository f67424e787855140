"""Tests for core models, types and exceptions."""

import pytest
from pydantic import ValidationError

from dexswap.core.exceptions import DexSwapError, ResolutionError, SwapExecutionError
from dexswap.core.models import SwapRequest, TokenAmount, TokenDescriptor, TxOverrides
from dexswap.core.types import ChainId, TradeType


class TestTokenDescriptor:
    """Tests for TokenDescriptor."""

    def test_identity_ignores_address_case(self):
        upper = TokenDescriptor(chain_id=1, address="0xABCDEF")
        lower = TokenDescriptor(chain_id=1, address="0xabcdef", symbol="X")

        assert upper.identity == lower.identity

    def test_identity_includes_chain(self):
        mainnet = TokenDescriptor(chain_id=1, address="0xabc")
        base = TokenDescriptor(chain_id=8453, address="0xabc")

        assert mainnet.identity != base.identity

    def test_frozen(self):
        token = TokenDescriptor(chain_id=1, address="0xabc")

        with pytest.raises(ValidationError):
            token.symbol = "NEW"

    def test_label(self):
        assert TokenDescriptor(chain_id=1, address="0xabc", symbol="FOO").label == "FOO"
        assert TokenDescriptor(chain_id=1, address="0xabc").label == "0xabc"


class TestTokenAmount:
    """Tests for TokenAmount."""

    @pytest.fixture
    def token(self):
        return TokenDescriptor(chain_id=1, address="0xabc", symbol="FOO", decimals=6)

    def test_negative_amount_rejected(self, token):
        with pytest.raises(ValidationError):
            TokenAmount(token=token, amount=-1)

    def test_arbitrary_precision(self, token):
        amount = TokenAmount(token=token, amount=2**256 + 1)

        assert amount.amount == 2**256 + 1

    def test_decimal_string(self, token):
        assert TokenAmount(token=token, amount=1_500_000).to_decimal_string() == "1.5"
        assert TokenAmount(token=token, amount=2_000_000).to_decimal_string() == "2"
        assert TokenAmount(token=token, amount=1).to_decimal_string() == "0.000001"

    def test_decimal_string_without_decimals(self):
        token = TokenDescriptor(chain_id=1, address="0xabc")

        assert TokenAmount(token=token, amount=5).to_decimal_string() is None


class TestSwapRequest:
    """Tests for SwapRequest and TxOverrides."""

    def test_defaults_to_exact_input(self):
        token = TokenDescriptor(chain_id=1, address="0xabc")

        request = SwapRequest(token_in=token, token_out=token, amount=1)

        assert request.trade_type == TradeType.EXACT_INPUT
        assert request.trade_options == {}
        assert request.tx_overrides is None

    def test_overrides_as_tx_params(self):
        overrides = TxOverrides(gas_limit=21_000, gas_price=10**9)

        assert overrides.as_tx_params() == {"gas": 21_000, "gasPrice": 10**9}
        assert TxOverrides().as_tx_params() == {}


class TestTypesAndErrors:
    """Tests for enums and the error taxonomy."""

    def test_chain_names(self):
        assert ChainId.describe(1) == "Ethereum"
        assert ChainId.describe(42161) == "Arbitrum One"
        assert ChainId.describe(999999) == "chain 999999"

    def test_with_step_returns_same_instance(self):
        error = ResolutionError(1, "0xabc", "unknown")

        tagged = error.with_step("resolve_token_in")

        assert tagged is error
        assert error.step == "resolve_token_in"
        assert error.details["step"] == "resolve_token_in"
        assert error.details["address"] == "0xabc"

    def test_swap_error_message(self):
        error = SwapExecutionError("web3", "execution reverted", reason="execution_reverted")

        assert str(error) == "[web3] Swap failed: execution reverted"
        assert error.step is None

    def test_caller_details_are_copied(self):
        details = {"source": "registry"}
        error = DexSwapError("boom", details)

        error.with_step("query_supply")

        assert details == {"source": "registry"}
        assert error.details == {"source": "registry", "step": "query_supply"}
