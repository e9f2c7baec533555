"""Collaborator clients: block explorer ABI source and JSON-RPC chain probe."""

from .base import AbiSource, ChainProbe
from .chain import Web3ChainProbe
from .constants import (
    EIP1967_IMPLEMENTATION_SLOT,
    NETWORKS,
    ZERO_ADDRESS,
    resolve_network,
)
from .explorer import EtherscanAbiSource

__all__ = [
    "AbiSource",
    "ChainProbe",
    "EIP1967_IMPLEMENTATION_SLOT",
    "EtherscanAbiSource",
    "NETWORKS",
    "Web3ChainProbe",
    "ZERO_ADDRESS",
    "resolve_network",
]
