"""
Environment configuration, network table and logging setup
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

ALCHEMY_ETH_PREFIX = "https://eth-mainnet.g.alchemy.com/v2/"
ALCHEMY_ETH_SEPOLIA_PREFIX = "https://eth-sepolia.g.alchemy.com/v2/"

NETWORKS: Dict[str, Dict] = {
    # Local nodes may fork any chain, so their chain id is not checked
    "localhost": {
        "rpc_url": "http://127.0.0.1:8545",
    },
    "mainnet": {
        "chain_id": 1,
        "alchemy_prefix": ALCHEMY_ETH_PREFIX,
    },
    "sepolia": {
        "chain_id": 11155111,
        "alchemy_prefix": ALCHEMY_ETH_SEPOLIA_PREFIX,
    },
    "ova_beta": {
        "rpc_env": "OVA_BETA_RPC",
    },
}

# Order matches the signer list of the hardhat network config
SIGNER_KEY_VARS = [
    "ADMIN_WALLET_KEY",
    "TEAM_WALLET_KEY",
    "USER_A_WALLET_KEY",
    "USER_B_WALLET_KEY",
    "USER_C_WALLET_KEY",
]


class ConfigurationError(Exception):
    """Raised when a required setting is missing or invalid"""


@dataclass(frozen=True)
class Settings:
    network: str = "localhost"
    rpc_url: Optional[str] = None
    alchemy_key: Optional[str] = None
    signer_keys: List[str] = field(default_factory=list)
    artifacts_dir: Path = Path("artifacts")
    receipt_timeout: int = 300
    poll_interval: int = 5


def load_environment(base_dir: Optional[Path] = None):
    """Loads .env and process.env from base_dir (default: cwd) without overriding set variables."""
    base_dir = base_dir or Path.cwd()
    for name in (".env", "process.env"):
        path = base_dir / name
        if path.exists():
            load_dotenv(path, override=False)


def _signer_keys(key_env: Optional[str] = None) -> List[str]:
    keys = []
    if key_env:
        value = os.getenv(key_env)
        if not value:
            raise ConfigurationError(f"{key_env} not found in environment")
        keys.append(value)
    else:
        deployer = os.getenv("PRIVATE_KEY") or os.getenv("ADMIN_WALLET_KEY")
        if deployer:
            keys.append(deployer)
    for var in SIGNER_KEY_VARS[1:]:
        value = os.getenv(var)
        if value:
            keys.append(value)
    return keys


def get_settings(network: Optional[str] = None,
                 rpc_url: Optional[str] = None,
                 key_env: Optional[str] = None,
                 artifacts_dir: Optional[str] = None) -> Settings:
    """Builds Settings from the environment; explicit arguments take precedence."""
    network = (network or os.getenv("NETWORK", "localhost")).strip().lower()
    if network not in NETWORKS:
        raise ConfigurationError(f"Unknown network '{network}', expected one of {sorted(NETWORKS)}")

    return Settings(
        network=network,
        rpc_url=rpc_url or os.getenv("RPC_URL") or None,
        alchemy_key=os.getenv("ALCHEMY_KEY") or None,
        signer_keys=_signer_keys(key_env),
        artifacts_dir=Path(artifacts_dir or os.getenv("ARTIFACTS_DIR", "artifacts")),
        receipt_timeout=int(os.getenv("RECEIPT_TIMEOUT", "300")),
        poll_interval=int(os.getenv("POLL_INTERVAL", "5")),
    )


def resolve_rpc_url(settings: Settings) -> str:
    if settings.rpc_url:
        return settings.rpc_url

    network = NETWORKS[settings.network]
    if "rpc_url" in network:
        return network["rpc_url"]
    if "alchemy_prefix" in network:
        if not settings.alchemy_key:
            raise ConfigurationError(f"ALCHEMY_KEY is required for network '{settings.network}'")
        return network["alchemy_prefix"] + settings.alchemy_key

    url = os.getenv(network["rpc_env"])
    if not url:
        raise ConfigurationError(f"{network['rpc_env']} is required for network '{settings.network}'")
    return url


def configure_logging(level: str = "INFO", log_file: Optional[str] = None):
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
