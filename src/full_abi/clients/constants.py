"""Supported networks and chain-level constants."""

from typing import Dict, Optional

from ..errors import UnsupportedNetworkError
from ..models import Network

ETHERSCAN_API_URL = "https://api.etherscan.io/v2/api"

# keccak256("eip1967.proxy.implementation") - 1
EIP1967_IMPLEMENTATION_SLOT = '0x360894a13ba1a3210667c828492db98dca3e2076cc3735a920a3ca505d382bbc'

ZERO_ADDRESS = '0x' + '0' * 40

NETWORKS: Dict[str, Network] = {
    "mainnet": Network("mainnet", 1, "https://eth.merkle.io"),
    "sepolia": Network("sepolia", 11155111, "https://sepolia.drpc.org"),
    "hoodi": Network("hoodi", 560048, "https://ethereum-hoodi-rpc.publicnode.com"),
}


def resolve_network(name: Optional[str], rpc_url: Optional[str] = None) -> Network:
    """
    Look up a supported network by name (case-insensitive).

    Args:
        name: Network identifier, e.g. "mainnet"
        rpc_url: Optional RPC endpoint overriding the network default

    Returns:
        Network definition

    Raises:
        UnsupportedNetworkError: if the name is not one of NETWORKS
    """
    network = NETWORKS.get((name or "").strip().lower())
    if network is None:
        raise UnsupportedNetworkError(name or "", NETWORKS.keys())
    if rpc_url:
        network = Network(network.name, network.chain_id, rpc_url)
    return network
