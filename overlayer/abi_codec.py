"""
ABI helpers: selectors, custom error and event log decoding
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from eth_abi import decode
from eth_utils import collapse_if_tuple, event_abi_to_log_topic, function_abi_to_4byte_selector
from hexbytes import HexBytes
from web3.exceptions import LogTopicError, MismatchedABI


@dataclass
class DecodedError:
    name: str
    args: Tuple[Any, ...] = ()


def selector(entry: Dict[str, Any]) -> bytes:
    """4-byte selector of a function or custom error ABI entry."""
    return bytes(function_abi_to_4byte_selector(entry))


def event_topic(entry: Dict[str, Any]) -> bytes:
    return bytes(event_abi_to_log_topic(entry))


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return bytes(HexBytes(value))


def _revert_data(error: Any) -> Optional[bytes]:
    if isinstance(error, (str, bytes, bytearray)):
        data = error
    else:
        data = getattr(error, "data", None)
        if data is None and getattr(error, "args", None):
            # web3 puts the revert payload in the second positional arg
            candidates = [a for a in error.args if isinstance(a, (str, bytes)) and str(a).startswith("0x")]
            data = candidates[-1] if candidates else None
    if data is None:
        return None
    if isinstance(data, dict):
        data = data.get("data")
        if data is None:
            return None
    try:
        return _to_bytes(data)
    except (ValueError, TypeError):
        return None


def decode_custom_error(error: Any, abi: List[Dict[str, Any]]) -> Optional[DecodedError]:
    """Matches revert data (or an exception carrying it) against the ABI's custom errors."""
    data = _revert_data(error)
    if not data or len(data) < 4:
        return None

    for entry in abi:
        if entry.get("type") != "error":
            continue
        if selector(entry) != data[:4]:
            continue
        types = [collapse_if_tuple(p) for p in entry.get("inputs", [])]
        args = decode(types, data[4:]) if types else ()
        return DecodedError(name=entry["name"], args=tuple(args))
    return None


def decode_log(contract, log):
    """Tries every event of contract on a receipt log; None when none of them match."""
    for entry in contract.abi:
        if entry.get("type") != "event":
            continue
        event = getattr(contract.events, entry["name"])()
        try:
            return event.process_log(log)
        except (MismatchedABI, LogTopicError):
            continue
    return None


def event_values(contract, decoded) -> List[Any]:
    """Decoded event args in ABI input order (process_log puts indexed args first)."""
    entry = next(e for e in contract.abi if e.get("type") == "event" and e["name"] == decoded["event"])
    return [decoded["args"][p["name"]] for p in entry.get("inputs", [])]
