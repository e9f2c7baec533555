"""In-memory collaborators and ABI builders shared by the test modules."""

import threading

from web3 import Web3

from full_abi.clients.base import AbiSource, ChainProbe
from full_abi.errors import AbiNotFound, CallReverted, PersistenceError
from full_abi.models import dump_abi, parse_abi
from full_abi.persistence import Persistence

MAIN = "0x" + "1" * 40
IMPL = "0x" + "2" * 40
MOD_A = Web3.to_checksum_address("0x" + "a" * 40)
MOD_B = Web3.to_checksum_address("0x" + "b" * 40)
MOD_C = Web3.to_checksum_address("0x" + "c" * 40)
ZERO = "0x" + "0" * 40


def param(type_, name=""):
    return {"internalType": type_, "name": name, "type": type_}


def function(name, inputs=(), outputs=("address",), mutability="view"):
    return {
        "inputs": [param(t) for t in inputs],
        "name": name,
        "outputs": [param(t) for t in outputs],
        "stateMutability": mutability,
        "type": "function",
    }


def event(name, *params, anonymous=False):
    """params are (type, name) pairs."""
    return {
        "anonymous": anonymous,
        "inputs": [dict(param(t, n), indexed=False) for t, n in params],
        "name": name,
        "type": "event",
    }


def accessor(name="modules"):
    return function(name, inputs=("uint256",), outputs=("address",))


class FakeChainProbe(ChainProbe):
    """
    responses maps (function_name, args tuple) to a value, an exception, or a
    list of those consumed one per call. Unknown calls revert.
    """

    def __init__(self, responses=None, storage=None):
        self.responses = dict(responses or {})
        self.storage = dict(storage or {})
        self.calls = []
        self.storage_reads = []

    def read_storage(self, address, slot):
        self.storage_reads.append((address, slot))
        value = self.storage.get(address.lower(), bytes(32))
        if isinstance(value, Exception):
            raise value
        return value

    def call(self, address, abi_entry, function_name, args=()):
        key = (function_name, tuple(args))
        self.calls.append((address, function_name, tuple(args)))
        if key not in self.responses:
            raise CallReverted("execution reverted")
        value = self.responses[key]
        if isinstance(value, list):
            value = value.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


class FakeAbiSource(AbiSource):
    """abis maps an address to a raw ABI list or an exception to raise."""

    def __init__(self, abis):
        self.abis = {address.lower(): value for address, value in abis.items()}
        self.fetched = []
        self._lock = threading.Lock()

    def fetch(self, address, network):
        with self._lock:
            self.fetched.append(address.lower())
        value = self.abis.get(address.lower())
        if value is None:
            raise AbiNotFound(address, f"Contract source code not verified: {address}")
        if isinstance(value, Exception):
            raise value
        return parse_abi(value)


class MemoryPersistence(Persistence):
    def __init__(self, fail_labels=()):
        self.saved = {}
        self.fail_labels = set(fail_labels)

    def save(self, document, label):
        if label in self.fail_labels:
            raise PersistenceError(label, f"disk full while saving {label}")
        self.saved[label] = dump_abi(document) if isinstance(document, tuple) else document
