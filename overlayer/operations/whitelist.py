import logging
from typing import Dict, Sequence

from ..chain import Session, require_address

logger = logging.getLogger(__name__)

OVA_WHITELIST = "OvaWhitelist"


def add(session: Session, whitelist: str, target: str):
    contract = session.contract(whitelist, OVA_WHITELIST)
    receipt = session.transact(contract.functions.add(require_address(target, "target")))
    logger.info(f"Completed adding {target} to OvaWhitelist")
    return receipt


def add_batch(session: Session, whitelist: str, targets: Sequence[str]):
    if not targets:
        raise ValueError("No targets to add")
    contract = session.contract(whitelist, OVA_WHITELIST)
    receipt = session.transact(
        contract.functions.addBatch([require_address(t, "target") for t in targets])
    )
    logger.info(f"Completed adding {len(targets)} target(s) to OvaWhitelist")
    return receipt


def count(session: Session, whitelist: str) -> int:
    contract = session.contract(whitelist, OVA_WHITELIST)
    return contract.functions.count().call()


def verify(session: Session, whitelist: str, targets: Sequence[str]) -> Dict[str, bool]:
    contract = session.contract(whitelist, OVA_WHITELIST)
    result = {}
    for target in targets:
        address = require_address(target, "target")
        result[address] = contract.functions.isWhitelisted(address).call()
    return result
