"""
rOVA / rOVAV2 reward allocations
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..chain import Session, require_address
from ..units import parse_ether

logger = logging.getLogger(__name__)

ROVA = "rOVA"
ROVA_V2 = "rOVAV2"


def load_batch_csv(filepath: str) -> Tuple[List[str], List[str]]:
    """Reads an address,amount CSV into the two lists add_batch takes."""
    data = pd.read_csv(filepath, dtype=str)
    missing = {"address", "amount"} - set(data.columns)
    if missing:
        raise ValueError(f"{filepath} is missing column(s): {', '.join(sorted(missing))}")
    data = data.dropna(subset=["address", "amount"])
    logger.info(f"Loaded {len(data)} allocation(s) from {filepath}")
    return data["address"].str.strip().tolist(), data["amount"].str.strip().tolist()


def add_batch(session: Session, rova: str, who: Sequence[str], amounts: Sequence[str],
              kind: Optional[int] = None, tx_options: Optional[Dict[str, Any]] = None) -> List[Any]:
    """Adds each (who, amount) pair, amounts in whole tokens.

    With kind set the contract is rOVA (add(who, kind, amount)), without it
    rOVAV2 (add(who, amount)).
    """
    if len(who) != len(amounts):
        raise ValueError("who and amounts must have the same length")
    if not who:
        raise ValueError("Nothing to add")

    contract = session.contract(rova, ROVA if kind is not None else ROVA_V2)
    receipts = []
    for target, amount in zip(who, amounts):
        target = require_address(target, "who")
        if kind is not None:
            call = contract.functions.add(target, int(kind), parse_ether(amount))
        else:
            call = contract.functions.add(target, parse_ether(amount))
        receipts.append(session.transact(call, tx_options=tx_options))
        logger.info(f"Added {amount} for {target}")
    return receipts
