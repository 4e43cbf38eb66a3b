"""
UniswapV3 liquidity proxy and staker deployments
"""

import logging
from typing import Any, Dict

from ..abi_codec import decode_log, event_values
from ..addresses import SUPPORTED_UNISWAP_TOKENS
from ..artifacts import ERC20_ABI
from ..chain import Session, require_address
from ..units import MAX_UINT256, parse_units

logger = logging.getLogger(__name__)

LIQUIDITY_PROXY = "UniswapV3LiquidityProxy"
V3_STAKER = "UniswapV3Staker"
# Test networks need a generous max fee
FEE_MULTIPLIER = 10

_SUPPORTED = {a.lower() for a in SUPPORTED_UNISWAP_TOKENS}


def parse_position_log(proxy, log: Dict[str, Any]) -> Dict[str, Any]:
    """Position minted event -> tokenId, liquidity, token0, token1, fee (amounts in wei)."""
    decoded = decode_log(proxy, log)
    if decoded is None:
        raise ValueError("Last log of the mint transaction is not a known proxy event")
    values = event_values(proxy, decoded)
    return {
        "tokenId": values[0],
        "liquidity": values[1],
        "token0": values[2],
        "token1": values[3],
        "fee": values[4],
    }


def mint_position(session: Session, token0: str, token1: str, decimals0: int, decimals1: int,
                  amount0: str, amount1: str, fee: int) -> Dict[str, Any]:
    """Deploys a liquidity proxy and mints a new position through it.

    The proxy's ticks are hardcoded for the pair it was written for; the
    signer must already hold both tokens.
    """
    for label, token in (("token0", token0), ("token1", token1)):
        if token.lower() not in _SUPPORTED:
            raise ValueError(f"Invalid {label}")

    options = session.default_fee_options(FEE_MULTIPLIER)
    proxy_address = session.deploy(LIQUIDITY_PROXY, tx_options=options)
    proxy = session.contract(proxy_address, LIQUIDITY_PROXY)

    logger.info("Approving the uni proxy contract...")
    for token in (token0, token1):
        erc20 = session.contract(token, ERC20_ABI)
        session.transact(erc20.functions.approve(proxy_address, MAX_UINT256))
    logger.info("Spender approved")

    receipt = session.transact(
        proxy.functions.mintNewPosition(
            require_address(token0, "token0"),
            require_address(token1, "token1"),
            parse_units(amount0, decimals0),
            parse_units(amount1, decimals1),
            int(fee),
        ),
        tx_options=options,
    )
    logs = receipt["logs"]
    if not logs:
        raise ValueError("Mint transaction emitted no logs")
    return parse_position_log(proxy, logs[-1])


def deploy_v3_staker(session: Session, factory: str, position_manager: str,
                     max_incentive_start_lead_time: int, max_incentive_duration: int) -> str:
    return session.deploy(
        V3_STAKER,
        require_address(factory, "factory"),
        require_address(position_manager, "position manager"),
        int(max_incentive_start_lead_time),
        int(max_incentive_duration),
        tx_options=session.default_fee_options(FEE_MULTIPLIER),
    )
