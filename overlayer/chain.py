"""
Connect, resolve signer, attach/deploy, submit or read, report.

Every operation in this package goes through these helpers so that
transactions are built, signed, sent and confirmed the same way.
"""

import logging
from typing import Any, Dict, List, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .artifacts import Artifact, load_artifact
from .config import NETWORKS, ConfigurationError, Settings, resolve_rpc_url

logger = logging.getLogger(__name__)


class NodeConnectionError(Exception):
    """Raised when the RPC node cannot be reached"""


class TransactionFailedError(Exception):
    """Raised when a mined transaction reports a failed status"""

    def __init__(self, message: str, receipt: Any = None):
        super().__init__(message)
        self.receipt = receipt


def connect(rpc_url: str) -> Web3:
    w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 30}))
    # Sepolia and some side chains return PoA extraData
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    if not w3.is_connected():
        raise NodeConnectionError(f"Could not connect to RPC URL: {rpc_url}")
    logger.info(f"Connected to blockchain at {rpc_url}")
    return w3


def resolve_signer(private_key: Optional[str]) -> LocalAccount:
    if not private_key:
        raise ConfigurationError("No signing key configured (set PRIVATE_KEY or ADMIN_WALLET_KEY)")
    return Account.from_key(private_key)


def require_address(value: str, label: str = "address") -> str:
    if not value or not Web3.is_address(value):
        raise ValueError(f"{value!r} is not an address ({label})")
    return Web3.to_checksum_address(value)


def attach(w3: Web3, address: str, abi: List[Dict[str, Any]]):
    return w3.eth.contract(address=require_address(address), abi=abi)


def role_hash(name: str) -> bytes:
    return bytes(Web3.keccak(text=name))


def fee_options(w3: Web3, multiplier: int = 2) -> Dict[str, int]:
    """maxFeePerGas as a multiple of the latest base fee (empty on pre-London chains)."""
    block = w3.eth.get_block("latest")
    base_fee = block.get("baseFeePerGas")
    if base_fee is None:
        return {}
    return {"maxFeePerGas": int(base_fee) * multiplier}


def build_tx_options(gas_limit: Optional[int] = None,
                     max_fee_per_gas: Optional[int] = None) -> Dict[str, int]:
    options: Dict[str, int] = {}
    if gas_limit is not None:
        options["gas"] = int(gas_limit)
    if max_fee_per_gas is not None:
        options["maxFeePerGas"] = int(max_fee_per_gas)
    return options


def _base_tx(w3: Web3, signer: LocalAccount, tx_options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    tx = {
        "from": signer.address,
        "nonce": w3.eth.get_transaction_count(signer.address),
        "chainId": w3.eth.chain_id,
    }
    tx.update(tx_options or {})
    if "maxFeePerGas" in tx and "maxPriorityFeePerGas" not in tx:
        # The node suggestion can exceed a low user max fee
        tx["maxPriorityFeePerGas"] = min(w3.eth.max_priority_fee, tx["maxFeePerGas"])
    return tx


def send_signed(w3: Web3, signer: LocalAccount, tx: Dict[str, Any], timeout: int = 300):
    signed = signer.sign_transaction(tx)
    tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
    logger.info(f"Transaction sent! Hash: {Web3.to_hex(tx_hash)}")

    receipt = w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
    if receipt["status"] != 1:
        raise TransactionFailedError(f"Transaction {Web3.to_hex(tx_hash)} reverted", receipt)
    logger.info(f"Transaction confirmed in block {receipt['blockNumber']}")
    return receipt


def transact(w3: Web3, signer: LocalAccount, call, tx_options: Optional[Dict[str, Any]] = None,
             timeout: int = 300):
    """Builds, signs and sends a contract function call, then waits for its receipt."""
    tx = call.build_transaction(_base_tx(w3, signer, tx_options))
    return send_signed(w3, signer, tx, timeout=timeout)


def send_value(w3: Web3, signer: LocalAccount, to: str, amount_wei: int,
               tx_options: Optional[Dict[str, Any]] = None, timeout: int = 300):
    tx = _base_tx(w3, signer, tx_options)
    tx["to"] = require_address(to, "recipient")
    tx["value"] = int(amount_wei)
    if "gas" not in tx:
        tx["gas"] = w3.eth.estimate_gas(tx)
    if "maxFeePerGas" not in tx and "gasPrice" not in tx:
        tx["gasPrice"] = w3.eth.gas_price
    return send_signed(w3, signer, tx, timeout=timeout)


def deploy(w3: Web3, signer: LocalAccount, artifact: Artifact, *args,
           tx_options: Optional[Dict[str, Any]] = None, timeout: int = 300) -> str:
    """Deploys artifact with constructor args and returns the contract address."""
    if not artifact.deployable:
        raise ValueError(f"Artifact {artifact.name} has no bytecode")
    if "__$" in artifact.bytecode:
        raise ValueError(f"Artifact {artifact.name} has unlinked libraries. Link before deploy.")

    factory = w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)
    receipt = transact(w3, signer, factory.constructor(*args), tx_options, timeout=timeout)
    address = receipt["contractAddress"]
    logger.info(f"Contract deployed at: {address}")
    return address


def advance_time(w3: Web3, seconds: int):
    """Moves a development node (hardhat/anvil) clock forward and mines a block."""
    w3.provider.make_request("evm_increaseTime", [int(seconds)])
    w3.provider.make_request("evm_mine", [])


class Session:
    """Lazily connected node, signers and artifacts for one command run"""

    def __init__(self, settings: Settings, tx_options: Optional[Dict[str, Any]] = None,
                 w3: Optional[Web3] = None):
        self.settings = settings
        self.tx_options = dict(tx_options or {})
        self._w3 = w3
        self._signers: Optional[List[LocalAccount]] = None
        self._artifacts: Dict[str, Artifact] = {}

    @property
    def w3(self) -> Web3:
        if self._w3 is None:
            w3 = connect(resolve_rpc_url(self.settings))
            expected = NETWORKS[self.settings.network].get("chain_id")
            if expected is not None and w3.eth.chain_id != expected:
                raise ConfigurationError(
                    f"Node reports chain id {w3.eth.chain_id}, expected {expected} for {self.settings.network}"
                )
            self._w3 = w3
        return self._w3

    @property
    def signers(self) -> List[LocalAccount]:
        if self._signers is None:
            self._signers = [resolve_signer(key) for key in self.settings.signer_keys]
        return self._signers

    @property
    def signer(self) -> LocalAccount:
        if not self.signers:
            raise ConfigurationError("No signing key configured (set PRIVATE_KEY or ADMIN_WALLET_KEY)")
        return self.signers[0]

    def default_fee_options(self, multiplier: int = 2) -> Dict[str, int]:
        """Base-fee multiple, unless a max fee or gas price was given for the run."""
        if "maxFeePerGas" in self.tx_options or "gasPrice" in self.tx_options:
            return {}
        return fee_options(self.w3, multiplier)

    def artifact(self, name: str) -> Artifact:
        if name not in self._artifacts:
            self._artifacts[name] = load_artifact(name, self.settings.artifacts_dir)
        return self._artifacts[name]

    def contract(self, address: str, name_or_abi):
        abi = self.artifact(name_or_abi).abi if isinstance(name_or_abi, str) else name_or_abi
        return attach(self.w3, address, abi)

    def deploy(self, name: str, *args, tx_options: Optional[Dict[str, Any]] = None) -> str:
        logger.info(f"Deploying {name} contract with address: {self.signer.address}")
        options = {**self.tx_options, **(tx_options or {})}
        return deploy(self.w3, self.signer, self.artifact(name), *args,
                      tx_options=options, timeout=self.settings.receipt_timeout)

    def transact(self, call, signer: Optional[LocalAccount] = None,
                 tx_options: Optional[Dict[str, Any]] = None):
        options = {**self.tx_options, **(tx_options or {})}
        return transact(self.w3, signer or self.signer, call, options,
                        timeout=self.settings.receipt_timeout)

    def send_value(self, to: str, amount_wei: int, signer: Optional[LocalAccount] = None):
        return send_value(self.w3, signer or self.signer, to, amount_wei, self.tx_options,
                          timeout=self.settings.receipt_timeout)
