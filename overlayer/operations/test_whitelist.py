"""
Tests for OvaWhitelist operations
"""

from unittest.mock import MagicMock

import pytest
from web3 import Web3

from overlayer.operations import whitelist

WHITELIST = "0x" + "0f" * 20
ALICE = "0x" + "11" * 20
BOB = "0x" + "22" * 20


class TestWhitelist:
    """Test OvaWhitelist operations"""

    def setup_method(self):
        """Set up a mocked whitelist contract"""
        self.session = MagicMock()
        self.contract = self.session.contract.return_value

    def test_add(self):
        """Test a single address is added"""
        whitelist.add(self.session, WHITELIST, ALICE)
        self.session.contract.assert_called_once_with(WHITELIST, whitelist.OVA_WHITELIST)
        self.contract.functions.add.assert_called_once_with(Web3.to_checksum_address(ALICE))
        self.session.transact.assert_called_once_with(self.contract.functions.add.return_value)

    def test_add_batch(self):
        """Test a batch is checksummed"""
        whitelist.add_batch(self.session, WHITELIST, [ALICE, BOB])
        targets = self.contract.functions.addBatch.call_args.args[0]
        assert [t.lower() for t in targets] == [ALICE, BOB]

    def test_add_batch_empty(self):
        """Test an empty batch is rejected"""
        with pytest.raises(ValueError):
            whitelist.add_batch(self.session, WHITELIST, [])

    def test_add_batch_rejects_any_bad_address(self):
        """Test one bad address stops the batch"""
        with pytest.raises(ValueError):
            whitelist.add_batch(self.session, WHITELIST, [ALICE, "bob"])
        self.session.transact.assert_not_called()

    def test_count(self):
        """Test the whitelist size"""
        self.contract.functions.count.return_value.call.return_value = 17
        assert whitelist.count(self.session, WHITELIST) == 17

    def test_verify(self):
        """Test membership is keyed by checksum address"""
        self.contract.functions.isWhitelisted.return_value.call.side_effect = [True, False]
        result = whitelist.verify(self.session, WHITELIST, [ALICE, BOB])
        assert result == {
            Web3.to_checksum_address(ALICE): True,
            Web3.to_checksum_address(BOB): False,
        }
