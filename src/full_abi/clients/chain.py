"""web3-backed chain probe."""

import logging
from typing import Any, Optional, Sequence

import requests
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from ..errors import CallDecodeError, CallReverted, RpcError
from ..models import AbiEntry
from .base import ChainProbe

logger = logging.getLogger(__name__)

# Everything a provider may raise for a failed round trip.
TRANSPORT_ERRORS = (Web3Exception, requests.RequestException, OSError, ValueError)


class Web3ChainProbe(ChainProbe):
    def __init__(self, rpc_url: str, timeout: int = 10, w3: Optional[Web3] = None):
        self.rpc_url = rpc_url
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url, request_kwargs={'timeout': timeout}))

    def read_storage(self, address: str, slot: str) -> bytes:
        logger.debug(f"eth_getStorageAt {address} slot {slot}")
        try:
            value = self.w3.eth.get_storage_at(Web3.to_checksum_address(address), int(slot, 16))
        except TRANSPORT_ERRORS as e:
            raise RpcError(f"Error reading storage of {address} via RPC: {e}") from e
        return bytes(value)

    def call(self, address: str, abi_entry: AbiEntry, function_name: str, args: Sequence[Any] = ()) -> Any:
        logger.debug(f"eth_call {address}.{function_name}{tuple(args)}")
        try:
            contract = self.w3.eth.contract(
                address=Web3.to_checksum_address(address),
                abi=[abi_entry.model_dump(mode="json", exclude_none=True)]
            )
            return contract.get_function_by_name(function_name)(*args).call()
        except ContractLogicError as e:
            raise CallReverted(f"{function_name}{tuple(args)} reverted: {e}", data=getattr(e, 'data', None)) from e
        except BadFunctionCallOutput as e:
            raise CallDecodeError(f"Could not decode {function_name}{tuple(args)} output: {e}") from e
        except TRANSPORT_ERRORS as e:
            raise RpcError(f"Error calling {function_name}{tuple(args)} on {address}: {e}") from e
