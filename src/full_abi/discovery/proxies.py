"""EIP-1967 proxy implementation lookup."""

import logging

from web3 import Web3

from ..clients.base import ChainProbe
from ..clients.constants import EIP1967_IMPLEMENTATION_SLOT
from ..errors import ProxyResolutionFailed, RpcError
from ..models import Network

logger = logging.getLogger(__name__)


class ProxyResolver:
    def __init__(self, chain_probe: ChainProbe, slot: str = EIP1967_IMPLEMENTATION_SLOT):
        self.chain_probe = chain_probe
        self.slot = slot

    def resolve(self, contract_address: str, network: Network) -> str:
        """
        Read the EIP-1967 implementation slot of a proxy.

        A single storage read is attempted; there are no retries.

        Args:
            contract_address: Proxy contract address
            network: Network the proxy lives on

        Returns:
            Checksum address held in the low 20 bytes of the slot

        Raises:
            ProxyResolutionFailed: the read failed or the slot is empty
        """
        logger.info(f"Checking if {contract_address} is a proxy contract on {network.name}...")
        try:
            word = self.chain_probe.read_storage(contract_address, self.slot)
        except RpcError as e:
            raise ProxyResolutionFailed(contract_address, f"storage read failed: {e}") from e

        logger.info(f"  RPC storage slot result: 0x{word.hex()}")

        if len(word) != 32:
            raise ProxyResolutionFailed(contract_address, f"unexpected storage word length {len(word)}")

        # Extract address from storage slot (last 20 bytes)
        address_bytes = word[-20:]
        if not any(address_bytes):
            raise ProxyResolutionFailed(contract_address, "implementation slot is empty (all zeros)")

        impl_address = Web3.to_checksum_address('0x' + address_bytes.hex())
        logger.info(f"Detected EIP-1967 proxy, implementation: {impl_address}")
        return impl_address
