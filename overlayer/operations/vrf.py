"""
Chainlink VRF subscription consumer (OvaExtractor) and the TestMath helper
"""

import logging
from typing import Any, Dict, List, Sequence

from ..abi_codec import decode_log
from ..chain import Session

logger = logging.getLogger(__name__)

VRF_CONSUMER = "SubscriptionConsumerSepolia"
TEST_MATH = "TestMath"


def request_words(session: Session, consumer: str) -> Dict[str, Any]:
    """Sends requestRandomWords and returns the receipt with any decoded request id."""
    contract = session.contract(consumer, VRF_CONSUMER)
    receipt = session.transact(contract.functions.requestRandomWords())
    request_id = None
    for log in receipt["logs"]:
        decoded = decode_log(contract, log)
        if decoded is not None and "requestId" in decoded["args"]:
            request_id = decoded["args"]["requestId"]
            logger.info(f"Request id: {request_id}")
            break
    return {"receipt": receipt, "requestId": request_id}


def get_words(session: Session, consumer: str, request_id: int) -> Dict[str, Any]:
    contract = session.contract(consumer, VRF_CONSUMER)
    fulfilled, words = contract.functions.getRequestStatus(int(request_id)).call()
    return {"fulfilled": fulfilled, "randomWords": list(words)}


def add_participants(session: Session, consumer: str, handles: Sequence[str]):
    if not handles:
        raise ValueError("No participants to add")
    contract = session.contract(consumer, VRF_CONSUMER)
    return session.transact(contract.functions.addParticipants(list(handles)))


def test_math_mod(session: Session, contract: str, a: int, b: int) -> int:
    math = session.contract(contract, TEST_MATH)
    return math.functions.mod(int(a), int(b)).call()
