"""
Hardhat artifact loading
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Union


class ArtifactNotFoundError(Exception):
    """Raised when no compiled artifact exists for a contract name"""


@dataclass
class Artifact:
    name: str
    abi: List[Dict[str, Any]]
    bytecode: str = ""

    @property
    def deployable(self) -> bool:
        return bool(self.bytecode) and self.bytecode != "0x"


ERC20_ABI: List[Dict[str, Any]] = [
    {"inputs": [], "name": "name", "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "symbol", "outputs": [{"name": "", "type": "string"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "decimals", "outputs": [{"name": "", "type": "uint8"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [], "name": "totalSupply", "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "account", "type": "address"}], "name": "balanceOf",
     "outputs": [{"name": "", "type": "uint256"}], "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}],
     "name": "allowance", "outputs": [{"name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"inputs": [{"name": "to", "type": "address"}, {"name": "value", "type": "uint256"}],
     "name": "transfer", "outputs": [{"name": "", "type": "bool"}],
     "stateMutability": "nonpayable", "type": "function"},
    {"inputs": [{"name": "spender", "type": "address"}, {"name": "value", "type": "uint256"}],
     "name": "approve", "outputs": [{"name": "", "type": "bool"}],
     "stateMutability": "nonpayable", "type": "function"},
    {"anonymous": False, "name": "Transfer", "type": "event",
     "inputs": [{"indexed": True, "name": "from", "type": "address"},
                {"indexed": True, "name": "to", "type": "address"},
                {"indexed": False, "name": "value", "type": "uint256"}]},
    {"anonymous": False, "name": "Approval", "type": "event",
     "inputs": [{"indexed": True, "name": "owner", "type": "address"},
                {"indexed": True, "name": "spender", "type": "address"},
                {"indexed": False, "name": "value", "type": "uint256"}]},
]


def get_contract_abi(file_path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Loads a contract ABI from its JSON artifact."""
    with open(file_path, 'r') as f:
        data = json.load(f)
    if isinstance(data, list):
        return data
    return data['abi']


def find_artifact_path(name: str, artifacts_dir: Union[str, Path]) -> Path:
    artifacts_dir = Path(artifacts_dir)
    matches = sorted(
        p for p in artifacts_dir.rglob(f"{name}.json")
        if not p.name.endswith(".dbg.json")
    )
    if not matches:
        raise ArtifactNotFoundError(
            f"No artifact for {name} under {artifacts_dir}. Compile the contracts first."
        )
    # Prefer the Hardhat layout contracts/<Source>.sol/<Name>.json
    for path in matches:
        if path.parent.name.endswith(".sol"):
            return path
    return matches[0]


def load_artifact(name: str, artifacts_dir: Union[str, Path]) -> Artifact:
    path = find_artifact_path(name, artifacts_dir)
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return Artifact(name=name, abi=data)

    bytecode = data.get("bytecode") or ""
    if isinstance(bytecode, dict):
        bytecode = bytecode.get("object", "")
    if bytecode and not bytecode.startswith("0x"):
        bytecode = "0x" + bytecode
    return Artifact(name=data.get("contractName") or name, abi=data["abi"], bytecode=bytecode)
