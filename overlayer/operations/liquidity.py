"""
Liquidity farm, Curve pools and staking pool rewards
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from web3 import Web3

from ..addresses import CURVE_STABLE_SWAP_FACTORY, ZERO_ADDRESS
from ..chain import Session, advance_time, require_address
from ..units import format_ether, parse_units

logger = logging.getLogger(__name__)

LIQUIDITY = "Liquidity"
CURVE_STABLE_STAKE = "CurveStableStake"
OVA_REFERRAL = "OvaReferral"
POOL_DEPLOYER = "CurvePoolDeployer"
LIQUIDITY_PROXY = "CurveStableSwapLiquidityProxy"


@dataclass
class PlainPoolParams:
    """Arguments of CurvePoolDeployer.deployPlainPool"""
    name: str
    symbol: str
    coins: List[str]
    A: int = 250
    fee: int = 4000000
    offpeg_fee_multiplier: int = 100000000000
    ma_exp_time: int = 866
    implementation_idx: int = 0
    asset_types: List[int] = field(default_factory=list)
    method_ids: List[bytes] = field(default_factory=list)
    oracles: List[str] = field(default_factory=list)

    def as_struct(self) -> Dict[str, Any]:
        count = len(self.coins)
        return {
            "name": self.name,
            "symbol": self.symbol,
            "coins": [require_address(c, "coin") for c in self.coins],
            "A": self.A,
            "fee": self.fee,
            "offpeg_fee_multiplier": self.offpeg_fee_multiplier,
            "ma_exp_time": self.ma_exp_time,
            "implementation_idx": self.implementation_idx,
            "asset_types": self.asset_types or [0] * count,
            "method_ids": self.method_ids or [b"\x00" * 4] * count,
            "oracles": self.oracles or [ZERO_ADDRESS] * count,
        }


def deploy_liquidity(session: Session, dev_address: str, starting_block: int) -> str:
    return session.deploy(LIQUIDITY, require_address(dev_address, "dev"), int(starting_block))


def pending_rewards(session: Session, staking: str, pid: int, user: str,
                    advance: int = 0) -> Dict[str, Any]:
    """userInfo and pendingReward of user in pool pid, optionally after moving a dev node clock."""
    if advance:
        advance_time(session.w3, advance)
    contract = session.contract(staking, CURVE_STABLE_STAKE)
    user = require_address(user, "user")
    return {
        "userInfo": contract.functions.userInfo(pid, user).call(),
        "pendingReward": format_ether(contract.functions.pendingReward(pid, user).call()),
    }


def set_staking_pools(session: Session, referral: str, pools: Sequence[str]):
    contract = session.contract(referral, OVA_REFERRAL)
    return session.transact(
        contract.functions.setStakingPools([require_address(p, "pool") for p in pools])
    )


def deploy_pool_deployer(session: Session, factory: str = CURVE_STABLE_SWAP_FACTORY,
                         fee_multiplier: int = 2) -> str:
    return session.deploy(
        POOL_DEPLOYER,
        require_address(factory, "factory"),
        tx_options=session.default_fee_options(fee_multiplier),
    )


def deploy_plain_pool(session: Session, pool_deployer: str, params: PlainPoolParams,
                      fee_multiplier: int = 2) -> Dict[str, str]:
    if len(params.coins) < 2:
        raise ValueError("A plain pool needs at least two coins")
    factory = session.contract(pool_deployer, POOL_DEPLOYER)
    receipt = session.transact(
        factory.functions.deployPlainPool(params.as_struct()),
        tx_options=session.default_fee_options(fee_multiplier),
    )
    coins = [require_address(c, "coin") for c in params.coins]
    pool = factory.functions.findPoolForCoins(coins[0], coins[1]).call()
    logger.info(f"Pool created at: {pool}")
    return {"pool": pool, "transactionHash": Web3.to_hex(receipt["transactionHash"])}


def _validate(addresses: Sequence[str]) -> List[str]:
    return [require_address(a) for a in addresses]


def add_liquidity_stable(session: Session, proxy: str, pool: str, lp: str,
                         tokens: Sequence[str], decimals: Sequence[int], amounts: Sequence[str]):
    if not (len(tokens) == len(decimals) == len(amounts) == 2):
        raise ValueError("Stable swap liquidity takes exactly two tokens, decimals and amounts")
    pool, lp, token0, token1 = _validate([pool, lp, *tokens])
    contract = session.contract(proxy, LIQUIDITY_PROXY)
    return session.transact(contract.functions.addStableSwap(
        pool, lp, token0, token1,
        parse_units(amounts[0], decimals[0]),
        parse_units(amounts[1], decimals[1]),
    ))


def add_liquidity_tri_stable(session: Session, proxy: str, pool: str, lp: str,
                             tokens: Sequence[str], decimals: Sequence[int], amounts: Sequence[str]):
    if not (len(tokens) == len(decimals) == len(amounts) == 3):
        raise ValueError("Tri stable swap liquidity takes exactly three tokens, decimals and amounts")
    pool, lp, token0, token1, token2 = _validate([pool, lp, *tokens])
    contract = session.contract(proxy, LIQUIDITY_PROXY)
    return session.transact(contract.functions.addTriStableSwap(
        pool, lp, token0, token1, token2,
        parse_units(amounts[0], decimals[0]),
        parse_units(amounts[1], decimals[1]),
        parse_units(amounts[2], decimals[2]),
    ))
