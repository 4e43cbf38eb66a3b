import logging
from typing import List, Optional

from web3 import Web3

from ..artifacts import ERC20_ABI
from ..chain import Session, attach, require_address
from ..units import MAX_UINT256, format_ether, format_units, parse_ether, parse_units

logger = logging.getLogger(__name__)

MINTABLE_FIXED_SUPPLY = "MintableERC20WithFixedTotalSupply"
LENDING_TOKEN = "AegisLendingToken"
FIXED_SUPPLY_ERC20 = "FixedSupplyERC20"


def deploy_mintable_fixed_supply(session: Session, initial_supply: str, max_supply: str,
                                 name: str, symbol: str) -> str:
    """Supplies are in whole tokens (18 decimals)."""
    return session.deploy(
        MINTABLE_FIXED_SUPPLY,
        parse_ether(initial_supply),
        parse_ether(max_supply),
        name,
        symbol,
    )


def deploy_lending_token(session: Session, minter: str, allowed_transferer: str,
                         initial_supply: str, name: str, symbol: str) -> str:
    return session.deploy(
        LENDING_TOKEN,
        require_address(minter, "minter"),
        require_address(allowed_transferer, "allowed transferer"),
        parse_ether(initial_supply),
        name,
        symbol,
    )


def deploy_fixed_supply_tokens(session: Session, name_prefix: str, supply: int,
                               count: int = 1) -> List[str]:
    """Mock tokens; supply is in whole tokens, the contract scales it by its decimals.

    More than one token gets a numeric suffix (token0, token1...).
    """
    if count < 1:
        raise ValueError("count must be at least 1")
    addresses = []
    for i in range(count):
        name = name_prefix if count == 1 else f"{name_prefix}{i}"
        addresses.append(session.deploy(FIXED_SUPPLY_ERC20, int(supply), name, name))
    return addresses


def mint(session: Session, contract: str, amount: str):
    token = session.contract(contract, MINTABLE_FIXED_SUPPLY)
    logger.info(f"Minting {amount} tokens on {token.address}")
    return session.transact(token.functions.mint(parse_ether(amount)))


def set_minter(session: Session, contract: str, minter: str):
    token = session.contract(contract, MINTABLE_FIXED_SUPPLY)
    return session.transact(token.functions.setMinter(require_address(minter, "minter")))


def remove_minter(session: Session, contract: str, minter: str):
    token = session.contract(contract, MINTABLE_FIXED_SUPPLY)
    return session.transact(token.functions.removeMinter(require_address(minter, "minter")))


def update_lending_transferer(session: Session, contract: str, transferer: str):
    token = session.contract(contract, LENDING_TOKEN)
    return session.transact(
        token.functions.updateAllowedTransferer(require_address(transferer, "transferer"))
    )


def give_allowance(session: Session, contract: str, spender: str,
                   amount: Optional[str] = None, decimals: int = 18):
    token = session.contract(contract, ERC20_ABI)
    value = MAX_UINT256 if amount is None else parse_units(amount, decimals)
    return session.transact(token.functions.approve(require_address(spender, "spender"), value))


def transfer(session: Session, token: str, dest: str, amount: str, decimals: int):
    contract = session.contract(token, ERC20_ABI)
    receipt = session.transact(
        contract.functions.transfer(require_address(dest, "destination"), parse_units(amount, decimals))
    )
    logger.info("Transfer completed")
    return receipt


def give_funds(session: Session, to: str, amount: str):
    logger.info(f"Giving funds from {session.signer.address} to {to}")
    return session.send_value(to, parse_ether(amount))


def token_balance(w3: Web3, token: str, holder: str, decimals: Optional[int] = None) -> str:
    contract = attach(w3, token, ERC20_ABI)
    if decimals is None:
        decimals = contract.functions.decimals().call()
    balance = contract.functions.balanceOf(require_address(holder, "holder")).call()
    return format_units(balance, decimals)


def eth_balance(w3: Web3, address: str) -> str:
    return format_ether(w3.eth.get_balance(require_address(address)))
