"""
Tests for stablecoin, staking vault and OverlayerWrap operations
"""

from unittest.mock import MagicMock

import pytest

from overlayer.addresses import USDC_ADDRESS, USDT_ADDRESS
from overlayer.chain import role_hash
from overlayer.operations import stablecoin

ADMIN = "0x" + "a1" * 20
TEAM = "0x" + "b2" * 20
USDO = "0x" + "01" * 20
SUSDO = "0x" + "02" * 20
DISTRIBUTOR = "0x" + "03" * 20
WRAP = "0x" + "04" * 20


def make_session(*addresses):
    session = MagicMock()
    signers = [MagicMock(address=a) for a in addresses]
    session.signers = signers
    session.signer = signers[0]
    return session


class TestUsdo:
    """Test USDO and USDxM deployments"""

    def test_team_wallet_is_second_signer(self):
        """Test the team wallet is the second signer"""
        session = make_session(ADMIN, TEAM)
        stablecoin.deploy_usdo(session)
        args = session.deploy.call_args.args
        assert args[0] == "USDOM"
        assert args[1] == ADMIN
        assert args[2] == {"addr": USDC_ADDRESS, "decimals": 6}
        assert args[3] == {"addr": USDT_ADDRESS, "decimals": 6}
        assert args[4] == TEAM
        assert args[5] == args[6] == 100000000 * 10**18

    def test_team_wallet_falls_back_to_deployer(self):
        """Test a single signer is also the team wallet"""
        session = make_session(ADMIN)
        stablecoin.deploy_usdo(session, "USDO")
        args = session.deploy.call_args.args
        assert args[0] == "USDO"
        assert args[4] == ADMIN

    def test_usdxm_uses_deployer_for_both(self):
        """Test USDxM uses the deployer as admin and team"""
        session = make_session(ADMIN, TEAM)
        stablecoin.deploy_usdxm(session)
        args = session.deploy.call_args.args
        assert args[0] == "USDxM"
        assert args[1] == args[4] == ADMIN

    def test_bad_collateral(self):
        """Test a bad collateral address is rejected"""
        session = make_session(ADMIN)
        with pytest.raises(ValueError):
            stablecoin.deploy_usdo(session, usdc="0xnope")


class TestStaking:
    """Test the staked vault and rewards distributor"""

    def test_deploy_staked(self):
        """Test staked vault constructor arguments"""
        session = make_session(ADMIN)
        stablecoin.deploy_staked(session, USDO)
        args = session.deploy.call_args.args
        assert args[0] == stablecoin.STAKED_USDO
        assert args[1].lower() == USDO
        assert args[2:] == (ADMIN, ADMIN, 0)

    def test_set_cooldown(self):
        """Test the cooldown duration call"""
        session = make_session(ADMIN)
        vault = session.contract.return_value
        stablecoin.set_cooldown(session, SUSDO, 3600)
        vault.functions.setCooldownDuration.assert_called_once_with(3600)
        session.transact.assert_called_once_with(vault.functions.setCooldownDuration.return_value)

    def test_distributor_with_rewarder_role(self):
        """Test the distributor is granted REWARDER_ROLE"""
        session = make_session(ADMIN)
        session.deploy.return_value = DISTRIBUTOR
        vault = session.contract.return_value

        address = stablecoin.deploy_staking_rewards_distributor(session, SUSDO, USDO, True)

        assert address == DISTRIBUTOR
        args = session.deploy.call_args.args
        assert args[0] == stablecoin.DISTRIBUTOR
        assert [a.lower() for a in args[1:3]] == [SUSDO, USDO]
        assert args[5:] == (ADMIN, ADMIN)
        session.contract.assert_called_once_with(SUSDO, stablecoin.STAKED_USDO)
        vault.functions.grantRole.assert_called_once_with(role_hash("REWARDER_ROLE"), DISTRIBUTOR)

    def test_distributor_without_role(self):
        """Test no role grant when not asked"""
        session = make_session(ADMIN)
        stablecoin.deploy_staking_rewards_distributor(session, SUSDO, USDO, False)
        session.transact.assert_not_called()

    def test_staked_amounts(self):
        """Test supply and assets in ether"""
        session = make_session(ADMIN)
        vault = session.contract.return_value
        vault.functions.totalSupply.return_value.call.return_value = 2 * 10**18
        vault.functions.totalAssets.return_value.call.return_value = 25 * 10**17
        assert stablecoin.staked_amounts(session, SUSDO) == ("2.0", "2.5")


class TestOverlayerWrap:
    """Test OverlayerWrap mint, spender and faucet"""

    def test_mint_order(self):
        """Test the mint order amounts and parties"""
        session = make_session(ADMIN)
        session.transact.return_value = {"transactionHash": b"\x01" * 32}
        wrap = session.contract.return_value

        stablecoin.mint_overlayer_wrap(session, WRAP, USDT_ADDRESS, "10")

        order = wrap.functions.mint.call_args.args[0]
        assert order == {
            "benefactor": ADMIN,
            "beneficiary": ADMIN,
            "collateral": USDT_ADDRESS,
            "collateralAmount": 10 * 10**6,
            "overlayerWrapAmount": 10 * 10**18,
        }

    def test_check_spender(self):
        """Test the spender proposal fields"""
        session = make_session(ADMIN)
        wrap = session.contract.return_value
        wrap.functions.proposedSpender.return_value.call.return_value = TEAM
        wrap.functions.getSpender.return_value.call.return_value = ADMIN
        wrap.functions.proposalTime.return_value.call.return_value = 1700000000
        assert stablecoin.check_spender(session, WRAP) == {
            "proposedSpender": TEAM,
            "approvedCollateralSpender": ADMIN,
            "proposalTime": 1700000000,
        }

    def test_faucet(self):
        """Test faucet constructor arguments"""
        session = make_session(ADMIN)
        stablecoin.deploy_faucet(session, USDT_ADDRESS, WRAP)
        args = session.deploy.call_args.args
        assert args[0] == stablecoin.FAUCET
        assert args[1] == USDT_ADDRESS
        assert args[2].lower() == WRAP


class TestLocalFork:
    """Test the local fork deployment sequence"""

    def test_deploys_in_order_and_chains_addresses(self):
        """Test each deployment feeds the next"""
        session = make_session(ADMIN, TEAM)
        session.deploy.side_effect = [USDO, SUSDO, DISTRIBUTOR]

        deployed = stablecoin.deploy_all_local_fork(session)

        assert deployed == {"USDO": USDO, "StakedUSDO": SUSDO, "StakingRewardsDistributor": DISTRIBUTOR}
        names = [c.args[0] for c in session.deploy.call_args_list]
        assert names == ["USDOM", stablecoin.STAKED_USDO, stablecoin.DISTRIBUTOR]
        assert session.deploy.call_args_list[1].args[1].lower() == USDO
        session.contract.return_value.functions.grantRole.assert_called_once()

    def test_mismatch_is_logged(self, caplog):
        """Test only mismatched addresses are logged"""
        session = make_session(ADMIN)
        session.deploy.side_effect = [USDO, SUSDO, DISTRIBUTOR]
        stablecoin.deploy_all_local_fork(session, {"USDO": USDO, "StakedUSDO": TEAM})
        assert f"StakedUSDO deployed at {SUSDO}, expected {TEAM}" in caplog.text
        assert f"USDO deployed at {USDO}" not in caplog.text

    def test_stops_at_first_error(self):
        """Test the sequence stops at the first failure"""
        session = make_session(ADMIN)
        session.deploy.side_effect = [USDO, RuntimeError("reverted")]
        with pytest.raises(RuntimeError):
            stablecoin.deploy_all_local_fork(session)
        assert session.deploy.call_count == 2
