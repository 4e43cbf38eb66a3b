"""
Contract event listener: prints the name of every event a contract emits.
"""

import logging
import time
from typing import Any, Dict, List, Optional

import schedule
from web3 import Web3

from .abi_codec import decode_log
from .chain import attach

logger = logging.getLogger(__name__)

UNKNOWN_EVENT = "<unknown>"


class EventListener:
    def __init__(self, w3: Web3, address: str, abi: List[Dict[str, Any]],
                 from_block: Optional[int] = None):
        self.w3 = w3
        self.contract = attach(w3, address, abi)
        self.address = self.contract.address
        self.next_block = from_block
        self.seen = 0

    def poll(self) -> List[str]:
        """Fetches logs since the last poll and prints each event name."""
        latest = self.w3.eth.block_number
        if self.next_block is None:
            # Start from the head like a fresh subscription
            self.next_block = latest
        if latest < self.next_block:
            return []

        logs = self.w3.eth.get_logs({
            "address": self.address,
            "fromBlock": self.next_block,
            "toBlock": latest,
        })
        self.next_block = latest + 1

        names = []
        for log in logs:
            decoded = decode_log(self.contract, log)
            if decoded is None:
                topics = log.get("topics") or []
                topic0 = Web3.to_hex(topics[0]) if topics else "-"
                name = f"{UNKNOWN_EVENT} {topic0}"
            else:
                name = decoded["event"]
            print(name)
            names.append(name)
        self.seen += len(names)
        return names

    def run(self, interval: int = 5):
        logger.info(f"Listening for events on {self.address} (every {interval}s)...")
        job = schedule.every(interval).seconds.do(self.poll)
        try:
            self.poll()
            while True:
                schedule.run_pending()
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info(f"Listener stopped by user after {self.seen} event(s)")
        finally:
            schedule.cancel_job(job)
