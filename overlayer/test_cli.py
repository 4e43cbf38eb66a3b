"""
Tests for the command line entry point
"""

from unittest.mock import MagicMock, patch

import pytest
from eth_abi import encode

from overlayer import addresses, cli
from overlayer.abi_codec import selector
from overlayer.config import SIGNER_KEY_VARS

ALICE = "0x" + "11" * 20

LIMIT_EXCEEDED = {
    "type": "error",
    "name": "MaxSupplyExceeded",
    "inputs": [{"name": "requested", "type": "uint256"}],
}


class RevertError(Exception):
    def __init__(self, message, data):
        super().__init__(message)
        self.data = data


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in SIGNER_KEY_VARS + ["PRIVATE_KEY", "NETWORK", "RPC_URL", "LOG_LEVEL", "LOG_FILE"]:
        monkeypatch.delenv(var, raising=False)
    with patch("overlayer.cli.configure_logging"):
        yield


class TestParser:
    """Test argument parsing"""

    def setup_method(self):
        """Set up the parser"""
        self.parser = cli.build_parser()

    def test_global_options(self):
        """Test global options and defaults"""
        args = self.parser.parse_args([
            "--network", "sepolia", "--gas-limit", "1000000", "--max-fee-gwei", "10",
            "whitelist-count",
        ])
        assert args.network == "sepolia"
        assert args.gas_limit == 1000000
        assert args.max_fee_gwei == "10"
        assert args.whitelist == addresses.OVA_WHITELIST_SEPOLIA
        assert args.func is cli.cmd_whitelist_count
        assert not args.deployment

    def test_deployment_flag(self):
        """Test deployment commands are flagged"""
        args = self.parser.parse_args(["deploy-fixed-supply", "--name", "USDT", "--supply", "1000"])
        assert args.deployment
        assert args.contracts == ["FixedSupplyERC20"]
        assert args.count == 1

    def test_unknown_network(self):
        """Test unknown networks are rejected"""
        with pytest.raises(SystemExit):
            self.parser.parse_args(["--network", "ropsten", "whitelist-count"])

    def test_tri_stable_takes_three_tokens(self):
        """Test tri-stable arguments and pool default"""
        args = self.parser.parse_args([
            "add-liquidity-tri", "--proxy", ALICE,
            "--tokens", addresses.DAI_ADDRESS, addresses.USDC_ADDRESS, addresses.USDT_ADDRESS,
            "--decimals", "18", "6", "6", "--amounts", "1", "1", "1",
        ])
        assert args.pool == addresses.CURVE_DAI_USDC_USDT_POOL
        assert args.decimals == [18, 6, 6]

    def test_rova_needs_a_source(self):
        """Test rova-add-batch needs a CSV or lists"""
        with pytest.raises(SystemExit):
            self.parser.parse_args(["rova-add-batch"])


class TestMain:
    """Test command dispatch and exit codes"""

    def test_read_only_command(self, capsys):
        """Test read commands print their result"""
        with patch("overlayer.cli.Session") as session_cls, \
                patch("overlayer.operations.erc20.eth_balance", return_value="1.5") as balance:
            assert cli.main(["eth-balance", "--address", ALICE]) == 0
        balance.assert_called_once_with(session_cls.return_value.w3, ALICE)
        assert capsys.readouterr().out == "1.5\n"

    def test_tx_options_from_flags(self):
        """Test gas and max fee flags reach the session"""
        with patch("overlayer.cli.Session") as session_cls, \
                patch("overlayer.operations.whitelist.count", return_value=3):
            cli.main(["--gas-limit", "500000", "--max-fee-gwei", "1.5", "whitelist-count"])
        settings, options = session_cls.call_args.args
        assert options == {"gas": 500000, "maxFeePerGas": 1500000000}
        assert settings.network == "localhost"

    def test_deployment_prints_address(self, capsys):
        """Test deployments print the new address"""
        with patch("overlayer.cli.Session"), \
                patch("overlayer.operations.erc20.deploy_fixed_supply_tokens", return_value=[ALICE]) as deploy:
            assert cli.main(["deploy-fixed-supply", "--name", "USDT", "--supply", "1000", "--count", "1"]) == 0
        assert deploy.call_args.args[1:] == ("USDT", 1000, 1)
        assert capsys.readouterr().out.strip() == ALICE

    def test_operation_failure(self, caplog):
        """Test failures log and exit 1"""
        with patch("overlayer.cli.Session"), \
                patch("overlayer.operations.whitelist.add", side_effect=ValueError("boom")):
            assert cli.main(["whitelist-add", "--target", ALICE]) == 1
        assert "ValueError: boom" in caplog.text
        assert "🛑 Operation failed" in caplog.text

    def test_deployment_failure_decodes_custom_error(self, caplog):
        """Test custom errors are decoded from the artifact"""
        payload = selector(LIMIT_EXCEEDED) + encode(["uint256"], [5])
        error = RevertError("execution reverted", "0x" + payload.hex())
        with patch("overlayer.cli.Session") as session_cls, \
                patch("overlayer.operations.erc20.deploy_mintable_fixed_supply", side_effect=error):
            session_cls.return_value.artifact.return_value.abi = [LIMIT_EXCEEDED]
            code = cli.main(["deploy-mintable", "--initial-supply", "1", "--max-supply", "2",
                             "--name", "Ova", "--symbol", "OVA"])
        assert code == 1
        assert "Custom error: MaxSupplyExceeded(5,)" in caplog.text
        assert "🛑 Deployment failed" in caplog.text

    def test_configuration_error(self, caplog):
        """Test a missing key variable exits 1"""
        assert cli.main(["--key-env", "MISSING_DEPLOYER_KEY", "whitelist-count"]) == 1
        assert "MISSING_DEPLOYER_KEY" in caplog.text

    def test_rova_from_csv(self, tmp_path):
        """Test allocations are read from a CSV"""
        path = tmp_path / "alloc.csv"
        path.write_text(f"address,amount\n{ALICE},1\n")
        with patch("overlayer.cli.Session") as session_cls, \
                patch("overlayer.operations.rova.add_batch", return_value=[]) as add_batch:
            assert cli.main(["rova-add-batch", "--csv", str(path), "--kind", "1"]) == 0
        add_batch.assert_called_once_with(
            session_cls.return_value, addresses.ROVA_V2_MAINNET, [ALICE], ["1"], 1
        )

    def test_pyth_price(self, capsys):
        """Test prices are printed per feed"""
        feed = {"id": "475a", "price": {"price": "7712345", "expo": -8, "conf": "12", "publish_time": 1}}
        with patch("overlayer.cli.Session"), \
                patch("overlayer.cli.PriceServiceClient") as client_cls:
            client_cls.return_value.get_latest_price_feeds.return_value = [feed]
            assert cli.main(["pyth-price"]) == 0
        client_cls.return_value.get_latest_price_feeds.assert_called_once_with(
            ["0x475a251c7cbded7645a146fc049d44058aa977e6850f20f4c86e289fb8dbe4f8"]
        )
        assert "475a: 7712345 x 10^-8" in capsys.readouterr().out

    def test_listen_with_erc20_abi(self):
        """Test the listener defaults to the ERC20 ABI"""
        with patch("overlayer.cli.Session") as session_cls, \
                patch("overlayer.cli.EventListener") as listener_cls:
            session_cls.return_value.settings.poll_interval = 5
            assert cli.main(["listen", "--address", ALICE]) == 0
        listener_cls.assert_called_once_with(session_cls.return_value.w3, ALICE, cli.ERC20_ABI, None)
        listener_cls.return_value.run.assert_called_once_with(5)
