"""
Pyth price service client.

Price update data has to be submitted to the Pyth contract on the target
chain before a consumer contract can read the price; this client fetches
that data (and the latest feeds for display) from a price service.
"""

import base64
import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)

PYTH_TESTNET_ENDPOINT = "https://xc-testnet.pyth.network"
# CRO/USD on the Pyth EVM testnet
CRO_USD_TESTNET_PRICE_ID = "0x475a251c7cbded7645a146fc049d44058aa977e6850f20f4c86e289fb8dbe4f8"


class PriceServiceClient:
    def __init__(self, endpoint: str = PYTH_TESTNET_ENDPOINT, timeout: int = 30):
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout

    def _get(self, path: str, ids: List[str]) -> Any:
        if not ids:
            raise ValueError("At least one price id is required")
        url = f"{self.endpoint}{path}"
        logger.info(f"Fetching from network: {url}")
        response = requests.get(url, params={"ids[]": ids}, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def get_price_feeds_update_data(self, ids: List[str]) -> List[str]:
        """Latest VAAs for ids, hex encoded for contract calls."""
        vaas = self._get("/api/latest_vaas", ids)
        return ["0x" + base64.b64decode(vaa).hex() for vaa in vaas]

    def get_latest_price_feeds(self, ids: List[str]) -> List[Dict[str, Any]]:
        return self._get("/api/latest_price_feeds", ids)
