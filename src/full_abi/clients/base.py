"""Narrow collaborator interfaces consumed by the discovery core."""

from typing import Any, Sequence

from ..models import AbiEntry, ContractAbi, Network


class AbiSource:
    """Fetches a contract's ABI description."""

    def fetch(self, address: str, network: Network) -> ContractAbi:
        """
        Args:
            address: Contract address
            network: Network the contract is deployed on

        Returns:
            Contract ABI, entries in the order the source returned them

        Raises:
            AbiNotFound: the source has no ABI for this address
            TransportError: the source could not be reached
        """
        raise NotImplementedError


class ChainProbe:
    """Read-only contract calls and raw storage reads against one network."""

    def read_storage(self, address: str, slot: str) -> bytes:
        """Return the 32-byte storage word at `slot`. Raises RpcError."""
        raise NotImplementedError

    def call(self, address: str, abi_entry: AbiEntry, function_name: str, args: Sequence[Any] = ()) -> Any:
        """Return the decoded result. Raises CallReverted, CallDecodeError or RpcError."""
        raise NotImplementedError
