"""
USDO / USDxM stablecoins, their staked vaults, the staking rewards
distributor, OverlayerWrap and the Sepolia faucet.
"""

import logging
from typing import Dict, Optional, Tuple

from web3 import Web3

from ..addresses import USDC_ADDRESS, USDT_ADDRESS
from ..chain import Session, require_address, role_hash
from ..units import format_ether, parse_ether, parse_units

logger = logging.getLogger(__name__)

STABLE_DECIMALS = 6
MINT_REDEEM_LIMIT = "100000000"
REWARDER_ROLE = "REWARDER_ROLE"

STAKED_USDO = "StakedUSDOFront"
STAKED_USDX = "StakedUSDx"
DISTRIBUTOR = "StakingRewardsDistributor"
OVERLAYER_WRAP = "OverlayerWrap"
FAUCET = "SepoliaFaucet"


def _collateral(address: str) -> Dict:
    return {"addr": require_address(address, "collateral"), "decimals": STABLE_DECIMALS}


def deploy_usdo(session: Session, contract_name: str = "USDOM",
                usdc: str = USDC_ADDRESS, usdt: str = USDT_ADDRESS) -> str:
    """Admin is the deployer, minted collateral goes to the team wallet (second signer)."""
    deployer = session.signer
    team = session.signers[1] if len(session.signers) > 1 else deployer
    address = session.deploy(
        contract_name,
        deployer.address,
        _collateral(usdc),
        _collateral(usdt),
        team.address,
        parse_ether(MINT_REDEEM_LIMIT),
        parse_ether(MINT_REDEEM_LIMIT),
    )
    logger.info(f"Destination asset wallet: {team.address}")
    return address


def deploy_usdxm(session: Session, usdc: str = USDC_ADDRESS, usdt: str = USDT_ADDRESS) -> str:
    deployer = session.signer
    return session.deploy(
        "USDxM",
        deployer.address,
        _collateral(usdc),
        _collateral(usdt),
        deployer.address,
        parse_ether(MINT_REDEEM_LIMIT),
        parse_ether(MINT_REDEEM_LIMIT),
    )


def deploy_staked(session: Session, usdo: str, contract_name: str = STAKED_USDO) -> str:
    deployer = session.signer
    return session.deploy(
        contract_name,
        require_address(usdo, "usdo"),
        deployer.address,
        deployer.address,
        0,
    )


def set_cooldown(session: Session, staked: str, seconds: int):
    logger.info(f"Setting cooldown to staking with account: {session.signer.address}")
    vault = session.contract(staked, STAKED_USDO)
    receipt = session.transact(vault.functions.setCooldownDuration(int(seconds)))
    logger.info("Operation passed")
    return receipt


def deploy_staking_rewards_distributor(session: Session, staked: str, usdo: str,
                                       grant_rewarder_role: bool,
                                       usdc: str = USDC_ADDRESS, usdt: str = USDT_ADDRESS) -> str:
    deployer = session.signer
    logger.info(f"USDO: {usdo}")
    logger.info(f"StakedUSDO: {staked}")

    address = session.deploy(
        DISTRIBUTOR,
        require_address(staked, "staked"),
        require_address(usdo, "usdo"),
        require_address(usdc, "usdc"),
        require_address(usdt, "usdt"),
        deployer.address,
        deployer.address,
    )

    if grant_rewarder_role:
        vault = session.contract(staked, STAKED_USDO)
        session.transact(vault.functions.grantRole(role_hash(REWARDER_ROLE), address))
        logger.info(f"Rewarder role attributed to: {address}")
    return address


def staked_amounts(session: Session, staked: str) -> Tuple[str, str]:
    vault = session.contract(staked, STAKED_USDO)
    total_supply = format_ether(vault.functions.totalSupply().call())
    total_assets = format_ether(vault.functions.totalAssets().call())
    return total_supply, total_assets


def mint_overlayer_wrap(session: Session, wrap: str, collateral: str, amount: str,
                        decimals: int = STABLE_DECIMALS):
    admin = session.signer
    logger.info(f"Signer {admin.address}")
    contract = session.contract(wrap, OVERLAYER_WRAP)
    order = {
        "benefactor": admin.address,
        "beneficiary": admin.address,
        "collateral": require_address(collateral, "collateral"),
        "collateralAmount": parse_units(amount, decimals),
        "overlayerWrapAmount": parse_ether(amount),
    }
    receipt = session.transact(contract.functions.mint(order))
    logger.info(f"Transaction executed {Web3.to_hex(receipt['transactionHash'])}")
    return receipt


def check_spender(session: Session, wrap: str) -> Dict:
    contract = session.contract(wrap, OVERLAYER_WRAP)
    return {
        "proposedSpender": contract.functions.proposedSpender().call(),
        "approvedCollateralSpender": contract.functions.getSpender().call(),
        "proposalTime": contract.functions.proposalTime().call(),
    }


def deploy_faucet(session: Session, usdt: str, overlayer_wrap_usdt: str) -> str:
    return session.deploy(
        FAUCET,
        require_address(usdt, "usdt"),
        require_address(overlayer_wrap_usdt, "overlayer wrap usdt"),
    )


def deploy_all_local_fork(session: Session, expected: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """USDO, sUSDO and the rewards distributor (with rewarder role), in order.

    On a local mainnet fork the addresses are reproducible for a fresh
    deployer nonce; a mismatch against expected is logged as a warning.
    """
    usdo = deploy_usdo(session)
    susdo = deploy_staked(session, usdo)
    distributor = deploy_staking_rewards_distributor(session, susdo, usdo, True)
    deployed = {"USDO": usdo, "StakedUSDO": susdo, "StakingRewardsDistributor": distributor}

    for name, address in (expected or {}).items():
        if name in deployed and deployed[name].lower() != address.lower():
            logger.warning(f"{name} deployed at {deployed[name]}, expected {address}")
    return deployed
