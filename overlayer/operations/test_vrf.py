"""
Tests for the VRF consumer and TestMath helpers
"""

from unittest.mock import MagicMock

import pytest
from eth_abi import encode
from web3 import Web3

from overlayer.abi_codec import event_topic
from overlayer.operations import vrf

CONSUMER = Web3.to_checksum_address("0x" + "0c" * 20)

REQUEST_SENT = {
    "type": "event",
    "name": "RequestSent",
    "anonymous": False,
    "inputs": [
        {"indexed": False, "name": "requestId", "type": "uint256"},
        {"indexed": False, "name": "numWords", "type": "uint32"},
    ],
}


def receipt_log(topics, data=b""):
    return {
        "address": CONSUMER,
        "topics": topics,
        "data": data,
        "logIndex": 0,
        "transactionIndex": 0,
        "transactionHash": b"\x00" * 32,
        "blockHash": b"\x00" * 32,
        "blockNumber": 1,
    }


class TestConsumer:
    """Test the subscription consumer operations"""

    def setup_method(self):
        """Set up a consumer whose events decode RequestSent"""
        self.session = MagicMock()
        self.contract = self.session.contract.return_value
        self.contract.abi = [REQUEST_SENT]
        self.contract.events = Web3().eth.contract(address=CONSUMER, abi=[REQUEST_SENT]).events

    def test_request_words_reports_request_id(self):
        """Test the request id is read from the RequestSent log"""
        log = receipt_log([event_topic(REQUEST_SENT)], encode(["uint256", "uint32"], [777, 2]))
        self.session.transact.return_value = {"logs": [receipt_log([b"\x02" * 32]), log]}
        result = vrf.request_words(self.session, CONSUMER)
        assert result["requestId"] == 777
        self.session.contract.assert_called_once_with(CONSUMER, vrf.VRF_CONSUMER)

    def test_request_words_without_event(self):
        """Test a receipt without RequestSent has no request id"""
        self.session.transact.return_value = {"logs": []}
        assert vrf.request_words(self.session, CONSUMER)["requestId"] is None

    def test_get_words(self):
        """Test the request status is returned as a dict"""
        self.contract.functions.getRequestStatus.return_value.call.return_value = (True, (5, 9))
        assert vrf.get_words(self.session, CONSUMER, "777") == {"fulfilled": True, "randomWords": [5, 9]}
        self.contract.functions.getRequestStatus.assert_called_once_with(777)

    def test_add_participants(self):
        """Test handles are sent as a list"""
        vrf.add_participants(self.session, CONSUMER, ("@alice", "@bob"))
        self.contract.functions.addParticipants.assert_called_once_with(["@alice", "@bob"])

    def test_add_participants_empty(self):
        """Test an empty participant list is rejected"""
        with pytest.raises(ValueError):
            vrf.add_participants(self.session, CONSUMER, [])


def test_math_mod_call():
    """Test TestMath.mod is called with integer arguments"""
    session = MagicMock()
    session.contract.return_value.functions.mod.return_value.call.return_value = 1
    assert vrf.test_math_mod(session, CONSUMER, 10, 3) == 1
    session.contract.return_value.functions.mod.assert_called_once_with(10, 3)
