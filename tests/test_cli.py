"""Tests for the dexswap command line."""

import json

import pytest
import yaml
from typer.testing import CliRunner

from dexswap import __version__
from dexswap.cli.main import app

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestSupplyCommand:
    """Tests for `dexswap supply`."""

    def test_supply_json(self, runner, registry_file):
        result = runner.invoke(
            app, ["supply", "1", DAI, "--registry", str(registry_file), "--output", "json"]
        )

        assert result.exit_code == 0, result.output
        assert '"amount": "5000000000000000000000000000"' in result.output
        assert '"symbol": "DAI"' in result.output

    def test_supply_with_audit(self, runner, registry_file):
        result = runner.invoke(
            app, ["supply", "1", WETH, "--registry", str(registry_file), "--audit"]
        )

        assert result.exit_code == 0, result.output
        assert "AUDIT TRAIL SUMMARY" in result.output
        assert "static.fetch_total_supply: OK" in result.output

    def test_unknown_token_exits_with_error(self, runner, registry_file):
        result = runner.invoke(
            app,
            ["supply", "1", "0x0000000000000000000000000000000000000001", "--registry", str(registry_file)],
        )

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_invalid_registry_entry(self, runner, tmp_path):
        path = tmp_path / "tokens.yaml"
        path.write_text(
            yaml.safe_dump({"tokens": [{"chain_id": 1, "address": "0xA", "supply": 5}]}),
            encoding="utf-8",
        )

        result = runner.invoke(app, ["supply", "1", "0xA", "--registry", str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Invalid registry entry" in result.output

    def test_invalid_environment_config(self, runner, registry_file, monkeypatch):
        monkeypatch.setenv("DEXSWAP_DEFAULT_POOL_FEE", "abc")

        result = runner.invoke(app, ["supply", "1", DAI, "--registry", str(registry_file)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "DEXSWAP_DEFAULT_POOL_FEE" in result.output

    def test_save_json_with_audit(self, runner, registry_file, tmp_path):
        save = tmp_path / "out" / "supply"

        result = runner.invoke(
            app,
            [
                "supply", "1", DAI,
                "--registry", str(registry_file),
                "--output", "json",
                "--save", str(save),
                "--audit",
            ],
        )

        assert result.exit_code == 0, result.output
        saved = json.loads((tmp_path / "out" / "supply.json").read_text(encoding="utf-8"))
        assert saved["amount"] == "5000000000000000000000000000"
        audit_text = (tmp_path / "out" / "supply_audit.txt").read_text(encoding="utf-8")
        assert "static.fetch_total_supply: OK" in audit_text


class TestSwapCommand:
    """Tests for `dexswap swap`."""

    def test_swap_json(self, runner, registry_file):
        result = runner.invoke(
            app,
            [
                "swap", "1", DAI, WETH, "1000000000000000000",
                "--slippage", "0.5",
                "--registry", str(registry_file),
                "--output", "json",
            ],
        )

        assert result.exit_code == 0, result.output
        assert '"tx_hash": "0x' in result.output

    def test_save_table(self, runner, registry_file, tmp_path):
        result = runner.invoke(
            app,
            [
                "swap", "1", DAI, WETH, "1000",
                "--registry", str(registry_file),
                "--save", str(tmp_path / "swap"),
            ],
        )

        assert result.exit_code == 0, result.output
        content = (tmp_path / "swap.txt").read_text(encoding="utf-8")
        assert "SWAP SUBMITTED" in content
        assert "\x1b[" not in content

    def test_negative_amount(self, runner, registry_file):
        result = runner.invoke(
            app, ["swap", "1", DAI, WETH, "-5", "--registry", str(registry_file)]
        )

        assert result.exit_code != 0

    def test_malformed_amount(self, runner, registry_file):
        result = runner.invoke(
            app, ["swap", "1", DAI, WETH, "1.5", "--registry", str(registry_file)]
        )

        assert result.exit_code == 1
        assert "Invalid input" in result.output


def test_version(runner):
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
