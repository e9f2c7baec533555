"""Shared state and address helpers for the discovery flow."""

from dataclasses import dataclass
from typing import Any, Optional

from web3 import Web3

from ..clients.base import AbiSource, ChainProbe
from ..clients.constants import ZERO_ADDRESS
from ..models import Network


@dataclass(frozen=True)
class DiscoveryContext:
    """Everything a module-address source needs for one run."""
    address: str  # contract the accessor/getters are called on
    network: Network
    chain_probe: ChainProbe
    abi_source: AbiSource
    max_workers: int = 4


def to_module_address(value: Any) -> Optional[str]:
    """
    Interpret a decoded call result as an address.

    Single-element tuples/lists are unwrapped (functions with one named output
    may decode that way). Returns a checksum address, or None if the value is
    not an address.
    """
    if isinstance(value, (tuple, list)) and len(value) == 1:
        value = value[0]
    if isinstance(value, (bytes, bytearray)) and len(value) == 20:
        value = '0x' + bytes(value).hex()
    if isinstance(value, str) and Web3.is_address(value):
        return Web3.to_checksum_address(value)
    return None


def is_zero_address(address: str) -> bool:
    return address.lower() == ZERO_ADDRESS
