"""
Command line entry point: one subcommand per operation.

    overlayer --network sepolia deploy-mintable --initial-supply 1000 ...
    python -m overlayer token-balance --token 0x... --holder 0x...
"""

import argparse
import json
import logging
import os
from typing import Any, List, Optional, Sequence

from web3 import Web3

from . import addresses
from .abi_codec import decode_custom_error
from .artifacts import ERC20_ABI, ArtifactNotFoundError
from .chain import Session, build_tx_options
from .config import NETWORKS, configure_logging, get_settings, load_environment
from .events import EventListener
from .operations import erc20, liquidity, rova, stablecoin, uniswap, vrf, whitelist
from .pyth import CRO_USD_TESTNET_PRICE_ID, PYTH_TESTNET_ENDPOINT, PriceServiceClient
from .units import parse_units

logger = logging.getLogger(__name__)


def _tx_hash(receipt) -> str:
    return Web3.to_hex(receipt["transactionHash"])


def _print_receipt(receipt):
    print(_tx_hash(receipt))


def _print_json(value: Any):
    print(json.dumps(value, indent=2, default=str))


# erc20

def cmd_deploy_mintable(session: Session, args):
    print(erc20.deploy_mintable_fixed_supply(session, args.initial_supply, args.max_supply,
                                             args.name, args.symbol))


def cmd_deploy_lending_token(session: Session, args):
    print(erc20.deploy_lending_token(session, args.minter, args.allowed_transferer,
                                     args.initial_supply, args.name, args.symbol))


def cmd_deploy_fixed_supply(session: Session, args):
    for address in erc20.deploy_fixed_supply_tokens(session, args.name, args.supply, args.count):
        print(address)


def cmd_mint(session: Session, args):
    _print_receipt(erc20.mint(session, args.contract, args.amount))


def cmd_set_minter(session: Session, args):
    _print_receipt(erc20.set_minter(session, args.contract, args.minter))


def cmd_remove_minter(session: Session, args):
    _print_receipt(erc20.remove_minter(session, args.contract, args.minter))


def cmd_update_transferer(session: Session, args):
    _print_receipt(erc20.update_lending_transferer(session, args.contract, args.transferer))


def cmd_give_allowance(session: Session, args):
    _print_receipt(erc20.give_allowance(session, args.contract, args.spender, args.amount, args.decimals))


def cmd_transfer(session: Session, args):
    _print_receipt(erc20.transfer(session, args.token, args.to, args.amount, args.decimals))


def cmd_give_funds(session: Session, args):
    _print_receipt(erc20.give_funds(session, args.to, args.amount))


def cmd_token_balance(session: Session, args):
    print(erc20.token_balance(session.w3, args.token, args.holder, args.decimals))


def cmd_eth_balance(session: Session, args):
    print(erc20.eth_balance(session.w3, args.address))


# stablecoin

def cmd_deploy_usdo(session: Session, args):
    print(stablecoin.deploy_usdo(session, args.contract_name, args.usdc, args.usdt))


def cmd_deploy_usdxm(session: Session, args):
    print(stablecoin.deploy_usdxm(session, args.usdc, args.usdt))


def cmd_deploy_staked(session: Session, args):
    print(stablecoin.deploy_staked(session, args.usdo, args.contract_name))


def cmd_set_cooldown(session: Session, args):
    _print_receipt(stablecoin.set_cooldown(session, args.staked, args.seconds))


def cmd_deploy_distributor(session: Session, args):
    print(stablecoin.deploy_staking_rewards_distributor(
        session, args.staked, args.usdo, args.grant_rewarder_role, args.usdc, args.usdt))


def cmd_staked_amounts(session: Session, args):
    total_supply, total_assets = stablecoin.staked_amounts(session, args.staked)
    print(f"Total supply: {total_supply}")
    print(f"Total assets: {total_assets}")


def cmd_mint_wrap(session: Session, args):
    _print_receipt(stablecoin.mint_overlayer_wrap(session, args.wrap, args.collateral,
                                                  args.amount, args.decimals))


def cmd_check_spender(session: Session, args):
    _print_json(stablecoin.check_spender(session, args.wrap))


def cmd_deploy_faucet(session: Session, args):
    print(stablecoin.deploy_faucet(session, args.usdt, args.wrap))


def cmd_deploy_local_fork(session: Session, args):
    expected = {"USDO": addresses.USDO_LOCAL_FORK, "StakedUSDO": addresses.SUSDO_LOCAL_FORK}
    _print_json(stablecoin.deploy_all_local_fork(session, expected))


# liquidity

def cmd_deploy_liquidity(session: Session, args):
    print(liquidity.deploy_liquidity(session, args.dev, args.starting_block))


def cmd_pending_rewards(session: Session, args):
    _print_json(liquidity.pending_rewards(session, args.staking, args.pid, args.user, args.advance))


def cmd_set_staking_pools(session: Session, args):
    _print_receipt(liquidity.set_staking_pools(session, args.referral, args.pools))


def cmd_deploy_pool_deployer(session: Session, args):
    print(liquidity.deploy_pool_deployer(session, args.factory, args.fee_multiplier))


def cmd_deploy_plain_pool(session: Session, args):
    params = liquidity.PlainPoolParams(
        name=args.name,
        symbol=args.symbol,
        coins=args.coins,
        A=args.a,
        fee=args.fee,
        offpeg_fee_multiplier=args.offpeg_fee_multiplier,
        ma_exp_time=args.ma_exp_time,
        implementation_idx=args.implementation_idx,
    )
    _print_json(liquidity.deploy_plain_pool(session, args.deployer, params, args.fee_multiplier))


def cmd_add_liquidity_stable(session: Session, args):
    _print_receipt(liquidity.add_liquidity_stable(session, args.proxy, args.pool, args.lp,
                                                  args.tokens, args.decimals, args.amounts))


def cmd_add_liquidity_tri(session: Session, args):
    _print_receipt(liquidity.add_liquidity_tri_stable(session, args.proxy, args.pool, args.lp,
                                                      args.tokens, args.decimals, args.amounts))


# uniswap

def cmd_uniswap_mint(session: Session, args):
    _print_json(uniswap.mint_position(session, args.token0, args.token1, args.decimals0, args.decimals1,
                                      args.amount0, args.amount1, args.fee))


def cmd_deploy_v3_staker(session: Session, args):
    print(uniswap.deploy_v3_staker(session, args.factory, args.position_manager,
                                   args.lead_time, args.duration))


# whitelist

def cmd_whitelist_add(session: Session, args):
    _print_receipt(whitelist.add(session, args.whitelist, args.target))


def cmd_whitelist_add_batch(session: Session, args):
    _print_receipt(whitelist.add_batch(session, args.whitelist, args.targets))


def cmd_whitelist_count(session: Session, args):
    print(whitelist.count(session, args.whitelist))


def cmd_whitelist_verify(session: Session, args):
    for address, listed in whitelist.verify(session, args.whitelist, args.targets).items():
        print(f"{address}: {listed}")


# rova

def cmd_rova_add_batch(session: Session, args):
    if args.csv:
        who, amounts = rova.load_batch_csv(args.csv)
    else:
        who, amounts = args.who or [], args.amounts or []
    for receipt in rova.add_batch(session, args.rova, who, amounts, args.kind):
        _print_receipt(receipt)


# vrf

def cmd_vrf_request(session: Session, args):
    result = vrf.request_words(session, args.consumer)
    _print_receipt(result["receipt"])
    if result["requestId"] is not None:
        print(f"Request id: {result['requestId']}")


def cmd_vrf_get_words(session: Session, args):
    _print_json(vrf.get_words(session, args.consumer, args.request_id))


def cmd_vrf_add_participants(session: Session, args):
    _print_receipt(vrf.add_participants(session, args.consumer, args.handles))


def cmd_test_math_mod(session: Session, args):
    print(vrf.test_math_mod(session, args.contract, args.a, args.b))


# events and prices

def cmd_listen(session: Session, args):
    abi = ERC20_ABI if args.contract == "ERC20" else session.artifact(args.contract).abi
    listener = EventListener(session.w3, args.address, abi, args.from_block)
    listener.run(args.interval or session.settings.poll_interval)


def cmd_pyth_price(session: Session, args):
    client = PriceServiceClient(args.endpoint)
    if args.update_data:
        for data in client.get_price_feeds_update_data(args.ids):
            print(data)
        return
    for feed in client.get_latest_price_feeds(args.ids):
        price = feed.get("price", {})
        print(f"{feed.get('id')}: {price.get('price')} x 10^{price.get('expo')} "
              f"(conf {price.get('conf')}, publish time {price.get('publish_time')})")


def _command(sub, name: str, func, help: str, contracts: Sequence[str] = (),
             deployment: bool = False) -> argparse.ArgumentParser:
    parser = sub.add_parser(name, help=help)
    parser.set_defaults(func=func, contracts=list(contracts), deployment=deployment)
    return parser


def _add_erc20_commands(sub):
    p = _command(sub, "deploy-mintable", cmd_deploy_mintable,
                 "Deploy MintableERC20WithFixedTotalSupply", [erc20.MINTABLE_FIXED_SUPPLY], True)
    p.add_argument("--initial-supply", required=True, help="Whole tokens")
    p.add_argument("--max-supply", required=True, help="Whole tokens")
    p.add_argument("--name", required=True)
    p.add_argument("--symbol", required=True)

    p = _command(sub, "deploy-lending-token", cmd_deploy_lending_token,
                 "Deploy AegisLendingToken", [erc20.LENDING_TOKEN], True)
    p.add_argument("--minter", required=True)
    p.add_argument("--allowed-transferer", required=True)
    p.add_argument("--initial-supply", required=True, help="Whole tokens")
    p.add_argument("--name", required=True)
    p.add_argument("--symbol", required=True)

    p = _command(sub, "deploy-fixed-supply", cmd_deploy_fixed_supply,
                 "Deploy FixedSupplyERC20 mock tokens", [erc20.FIXED_SUPPLY_ERC20], True)
    p.add_argument("--name", required=True, help="Name and symbol (prefix when --count > 1)")
    p.add_argument("--supply", type=int, required=True, help="Whole tokens")
    p.add_argument("--count", type=int, default=1)

    p = _command(sub, "mint", cmd_mint, "Mint tokens", [erc20.MINTABLE_FIXED_SUPPLY])
    p.add_argument("--contract", required=True)
    p.add_argument("--amount", required=True, help="Whole tokens")

    for name, func, help in (("set-minter", cmd_set_minter, "Grant the minter role"),
                             ("remove-minter", cmd_remove_minter, "Revoke the minter role")):
        p = _command(sub, name, func, help, [erc20.MINTABLE_FIXED_SUPPLY])
        p.add_argument("--contract", required=True)
        p.add_argument("--minter", required=True)

    p = _command(sub, "update-transferer", cmd_update_transferer,
                 "Update the AegisLendingToken allowed transferer", [erc20.LENDING_TOKEN])
    p.add_argument("--contract", required=True)
    p.add_argument("--transferer", required=True)

    p = _command(sub, "give-allowance", cmd_give_allowance, "Approve a spender (unlimited by default)")
    p.add_argument("--contract", required=True)
    p.add_argument("--spender", required=True)
    p.add_argument("--amount", help="Token units; omit for an unlimited allowance")
    p.add_argument("--decimals", type=int, default=18)

    p = _command(sub, "transfer", cmd_transfer, "Transfer ERC20 tokens")
    p.add_argument("--token", required=True)
    p.add_argument("--to", required=True)
    p.add_argument("--amount", required=True)
    p.add_argument("--decimals", type=int, default=18)

    p = _command(sub, "give-funds", cmd_give_funds, "Send ETH")
    p.add_argument("--to", required=True)
    p.add_argument("--amount", required=True, help="ETH")

    p = _command(sub, "token-balance", cmd_token_balance, "Print an ERC20 balance")
    p.add_argument("--token", required=True)
    p.add_argument("--holder", required=True)
    p.add_argument("--decimals", type=int, help="Read from the token when omitted")

    p = _command(sub, "eth-balance", cmd_eth_balance, "Print an ETH balance")
    p.add_argument("--address", required=True)


def _add_stablecoin_commands(sub):
    p = _command(sub, "deploy-usdo", cmd_deploy_usdo, "Deploy USDO (USDOM by default)", ["USDOM"], True)
    p.add_argument("--contract-name", default="USDOM")
    p.add_argument("--usdc", default=addresses.USDC_ADDRESS)
    p.add_argument("--usdt", default=addresses.USDT_ADDRESS)

    p = _command(sub, "deploy-usdxm", cmd_deploy_usdxm, "Deploy USDxM", ["USDxM"], True)
    p.add_argument("--usdc", default=addresses.USDC_ADDRESS)
    p.add_argument("--usdt", default=addresses.USDT_ADDRESS)

    p = _command(sub, "deploy-staked", cmd_deploy_staked, "Deploy the staked USDO vault",
                 [stablecoin.STAKED_USDO], True)
    p.add_argument("--usdo", default=addresses.USDO_LOCAL_FORK)
    p.add_argument("--contract-name", default=stablecoin.STAKED_USDO,
                   help=f"{stablecoin.STAKED_USDO} or {stablecoin.STAKED_USDX}")

    p = _command(sub, "set-cooldown", cmd_set_cooldown, "Set the staked vault cooldown",
                 [stablecoin.STAKED_USDO])
    p.add_argument("--staked", default=addresses.SUSDO_LOCAL_FORK)
    p.add_argument("--seconds", type=int, required=True)

    p = _command(sub, "deploy-distributor", cmd_deploy_distributor, "Deploy StakingRewardsDistributor",
                 [stablecoin.DISTRIBUTOR, stablecoin.STAKED_USDO], True)
    p.add_argument("--staked", default=addresses.SUSDO_LOCAL_FORK)
    p.add_argument("--usdo", default=addresses.USDO_LOCAL_FORK)
    p.add_argument("--usdc", default=addresses.USDC_ADDRESS)
    p.add_argument("--usdt", default=addresses.USDT_ADDRESS)
    p.add_argument("--grant-rewarder-role", action="store_true",
                   help="Grant REWARDER_ROLE on the staked vault to the distributor")

    p = _command(sub, "staked-amounts", cmd_staked_amounts, "Print staked vault supply and assets",
                 [stablecoin.STAKED_USDO])
    p.add_argument("--staked", default=addresses.SUSDO_LOCAL_FORK)

    p = _command(sub, "mint-wrap", cmd_mint_wrap, "Mint OverlayerWrap against collateral",
                 [stablecoin.OVERLAYER_WRAP])
    p.add_argument("--wrap", default=addresses.OVERLAYER_WRAP_USDT_SEPOLIA)
    p.add_argument("--collateral", default=addresses.USDT_SEPOLIA_ADDRESS)
    p.add_argument("--amount", required=True)
    p.add_argument("--decimals", type=int, default=stablecoin.STABLE_DECIMALS)

    p = _command(sub, "check-spender", cmd_check_spender, "Print the OverlayerWrap collateral spender",
                 [stablecoin.OVERLAYER_WRAP])
    p.add_argument("--wrap", default=addresses.OVERLAYER_WRAP_USDT_SEPOLIA)

    p = _command(sub, "deploy-faucet", cmd_deploy_faucet, "Deploy SepoliaFaucet", [stablecoin.FAUCET], True)
    p.add_argument("--usdt", default=addresses.USDT_SEPOLIA_ADDRESS)
    p.add_argument("--wrap", default=addresses.OVERLAYER_WRAP_USDT_SEPOLIA)

    _command(sub, "deploy-local-fork", cmd_deploy_local_fork,
             "Deploy USDO, staked USDO and the rewards distributor on a local fork",
             ["USDOM", stablecoin.STAKED_USDO, stablecoin.DISTRIBUTOR], True)


def _add_liquidity_commands(sub):
    p = _command(sub, "deploy-liquidity", cmd_deploy_liquidity, "Deploy the Liquidity farm",
                 [liquidity.LIQUIDITY], True)
    p.add_argument("--dev", required=True)
    p.add_argument("--starting-block", type=int, required=True)

    p = _command(sub, "pending-rewards", cmd_pending_rewards, "Print a staking pool user's pending reward",
                 [liquidity.CURVE_STABLE_STAKE])
    p.add_argument("--staking", default=addresses.CURVE_STABLE_STAKE_BETA)
    p.add_argument("--pid", type=int, default=0)
    p.add_argument("--user", required=True)
    p.add_argument("--advance", type=int, default=0, help="Seconds to move a dev node clock first")

    p = _command(sub, "set-staking-pools", cmd_set_staking_pools, "Set OvaReferral staking pools",
                 [liquidity.OVA_REFERRAL])
    p.add_argument("--referral", default=addresses.OVA_REFERRAL_BETA)
    p.add_argument("--pools", nargs="+", required=True)

    p = _command(sub, "deploy-pool-deployer", cmd_deploy_pool_deployer, "Deploy CurvePoolDeployer",
                 [liquidity.POOL_DEPLOYER], True)
    p.add_argument("--factory", default=addresses.CURVE_STABLE_SWAP_FACTORY)
    p.add_argument("--fee-multiplier", type=int, default=2)

    p = _command(sub, "deploy-plain-pool", cmd_deploy_plain_pool, "Deploy a Curve plain pool",
                 [liquidity.POOL_DEPLOYER])
    p.add_argument("--deployer", required=True, help="CurvePoolDeployer address")
    p.add_argument("--name", required=True)
    p.add_argument("--symbol", required=True)
    p.add_argument("--coins", nargs="+", required=True)
    p.add_argument("--a", type=int, default=250)
    p.add_argument("--fee", type=int, default=4000000)
    p.add_argument("--offpeg-fee-multiplier", type=int, default=100000000000)
    p.add_argument("--ma-exp-time", type=int, default=866)
    p.add_argument("--implementation-idx", type=int, default=0)
    p.add_argument("--fee-multiplier", type=int, default=2)

    for name, func, size in (("add-liquidity-stable", cmd_add_liquidity_stable, 2),
                             ("add-liquidity-tri", cmd_add_liquidity_tri, 3)):
        p = _command(sub, name, func, f"Add liquidity to a {size} coin Curve pool",
                     [liquidity.LIQUIDITY_PROXY])
        p.add_argument("--proxy", required=True)
        p.add_argument("--pool", default=addresses.CURVE_DAI_USDC_USDT_POOL if size == 3 else None,
                       required=size == 2)
        p.add_argument("--lp", default=addresses.CURVE_DAI_USDC_USDT_LP if size == 3 else None,
                       required=size == 2)
        p.add_argument("--tokens", nargs=size, required=True)
        p.add_argument("--decimals", nargs=size, type=int, required=True)
        p.add_argument("--amounts", nargs=size, required=True)


def _add_uniswap_commands(sub):
    p = _command(sub, "uniswap-mint-position", cmd_uniswap_mint,
                 "Mint a UniswapV3 position through a fresh liquidity proxy", [uniswap.LIQUIDITY_PROXY], True)
    p.add_argument("--token0", required=True)
    p.add_argument("--token1", required=True)
    p.add_argument("--decimals0", type=int, required=True)
    p.add_argument("--decimals1", type=int, required=True)
    p.add_argument("--amount0", required=True)
    p.add_argument("--amount1", required=True)
    p.add_argument("--fee", type=int, required=True, help="Pool fee tier (100, 500, 3000, 10000)")

    p = _command(sub, "deploy-v3-staker", cmd_deploy_v3_staker, "Deploy UniswapV3Staker",
                 [uniswap.V3_STAKER], True)
    p.add_argument("--factory", default=addresses.UNISWAP_V3_FACTORY)
    p.add_argument("--position-manager", default=addresses.UNISWAP_V3_POSITION_MANAGER)
    p.add_argument("--lead-time", type=int, required=True, help="Max incentive start lead time (s)")
    p.add_argument("--duration", type=int, required=True, help="Max incentive duration (s)")


def _add_whitelist_commands(sub):
    contracts = [whitelist.OVA_WHITELIST]
    p = _command(sub, "whitelist-add", cmd_whitelist_add, "Whitelist an address", contracts)
    p.add_argument("--whitelist", default=addresses.OVA_WHITELIST_SEPOLIA)
    p.add_argument("--target", required=True)

    p = _command(sub, "whitelist-add-batch", cmd_whitelist_add_batch, "Whitelist several addresses", contracts)
    p.add_argument("--whitelist", default=addresses.OVA_WHITELIST_SEPOLIA)
    p.add_argument("--targets", nargs="+", required=True)

    p = _command(sub, "whitelist-count", cmd_whitelist_count, "Print the number of whitelisted addresses",
                 contracts)
    p.add_argument("--whitelist", default=addresses.OVA_WHITELIST_SEPOLIA)

    p = _command(sub, "whitelist-verify", cmd_whitelist_verify, "Check whether addresses are whitelisted",
                 contracts)
    p.add_argument("--whitelist", default=addresses.OVA_WHITELIST_SEPOLIA)
    p.add_argument("--targets", nargs="+", required=True)


def _add_rova_commands(sub):
    p = _command(sub, "rova-add-batch", cmd_rova_add_batch, "Add rOVA / rOVAV2 allocations",
                 [rova.ROVA, rova.ROVA_V2])
    p.add_argument("--rova", default=addresses.ROVA_V2_MAINNET)
    p.add_argument("--kind", type=int, help="rOVA allocation kind; omit for rOVAV2")
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--csv", help="CSV file with address,amount columns")
    source.add_argument("--who", nargs="+")
    p.add_argument("--amounts", nargs="+", help="Whole tokens, one per --who")


def _add_vrf_commands(sub):
    contracts = [vrf.VRF_CONSUMER]
    p = _command(sub, "vrf-request", cmd_vrf_request, "Request random words", contracts)
    p.add_argument("--consumer", default=addresses.VRF_CONSUMER_SEPOLIA)

    p = _command(sub, "vrf-get-words", cmd_vrf_get_words, "Print a random words request status", contracts)
    p.add_argument("--consumer", default=addresses.VRF_CONSUMER_SEPOLIA)
    p.add_argument("--request-id", type=int, required=True)

    p = _command(sub, "vrf-add-participants", cmd_vrf_add_participants, "Add extractor participants",
                 contracts)
    p.add_argument("--consumer", default=addresses.OVA_EXTRACTOR_SEPOLIA)
    p.add_argument("--handles", nargs="+", required=True)

    p = _command(sub, "test-math-mod", cmd_test_math_mod, "Call TestMath.mod(a, b)", [vrf.TEST_MATH])
    p.add_argument("--contract", default=addresses.TEST_MATH_SEPOLIA)
    p.add_argument("--a", type=int, required=True)
    p.add_argument("--b", type=int, required=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="overlayer", description="Overlayer contract operations")
    parser.add_argument("--network", choices=sorted(NETWORKS), help="Default: $NETWORK or localhost")
    parser.add_argument("--rpc-url", help="Overrides the network RPC URL")
    parser.add_argument("--key-env", help="Environment variable holding the signing key")
    parser.add_argument("--artifacts-dir", help="Hardhat artifacts directory")
    parser.add_argument("--gas-limit", type=int)
    parser.add_argument("--max-fee-gwei", help="maxFeePerGas in gwei")
    parser.add_argument("--log-level", help="Default: $LOG_LEVEL or INFO")
    parser.add_argument("--log-file")

    sub = parser.add_subparsers(dest="command", required=True)
    _add_erc20_commands(sub)
    _add_stablecoin_commands(sub)
    _add_liquidity_commands(sub)
    _add_uniswap_commands(sub)
    _add_whitelist_commands(sub)
    _add_rova_commands(sub)
    _add_vrf_commands(sub)

    p = _command(sub, "listen", cmd_listen, "Print the events a contract emits")
    p.add_argument("--address", required=True)
    p.add_argument("--contract", default="ERC20", help="Artifact name for the ABI (default: ERC20)")
    p.add_argument("--from-block", type=int)
    p.add_argument("--interval", type=int, help="Polling interval in seconds")

    p = _command(sub, "pyth-price", cmd_pyth_price, "Fetch prices from a Pyth price service")
    p.add_argument("--endpoint", default=PYTH_TESTNET_ENDPOINT)
    p.add_argument("--ids", nargs="+", default=[CRO_USD_TESTNET_PRICE_ID])
    p.add_argument("--update-data", action="store_true", help="Print update data instead of prices")
    return parser


def _log_custom_error(session: Optional[Session], error: Exception, contracts: List[str]):
    if session is None:
        return
    for name in contracts:
        try:
            abi = session.artifact(name).abi
        except (ArtifactNotFoundError, OSError, ValueError):
            continue
        decoded = decode_custom_error(error, abi)
        if decoded is not None:
            logger.error(f"Custom error: {decoded.name}{tuple(decoded.args)}")
            return


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    load_environment()
    configure_logging(args.log_level or os.getenv("LOG_LEVEL", "INFO"),
                      args.log_file or os.getenv("LOG_FILE"))

    session = None
    try:
        settings = get_settings(args.network, args.rpc_url, args.key_env, args.artifacts_dir)
        max_fee = parse_units(args.max_fee_gwei, 9) if args.max_fee_gwei else None
        session = Session(settings, build_tx_options(args.gas_limit, max_fee))
        args.func(session, args)
    except Exception as e:
        logger.error(f"{type(e).__name__}: {e}")
        _log_custom_error(session, e, args.contracts)
        logger.error("🛑 Deployment failed" if args.deployment else "🛑 Operation failed")
        return 1
    return 0
