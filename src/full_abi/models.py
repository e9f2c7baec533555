"""Structured models used by the module discovery and merge pipeline."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from eth_utils import keccak
from pydantic import BaseModel, ConfigDict, PrivateAttr


class AbiKind(str, Enum):
    FUNCTION = "function"
    EVENT = "event"
    CONSTRUCTOR = "constructor"
    FALLBACK = "fallback"
    ERROR = "error"
    OTHER = "other"


class AbiParameter(BaseModel):
    """One typed parameter. Unknown keys such as internalType are kept as-is."""
    model_config = ConfigDict(extra="allow", frozen=True)

    type: str
    name: Optional[str] = None
    indexed: Optional[bool] = None
    components: Optional[Tuple["AbiParameter", ...]] = None


class AbiEntry(BaseModel):
    """
    One ABI element exactly as the explorer returned it.

    Only `type` is required; every other key is optional because constructors,
    fallbacks and receive entries carry only a subset of them.
    """
    model_config = ConfigDict(extra="allow", frozen=True)

    type: str = "function"
    name: Optional[str] = None
    inputs: Tuple[AbiParameter, ...] = ()
    outputs: Tuple[AbiParameter, ...] = ()
    stateMutability: Optional[str] = None
    anonymous: Optional[bool] = None

    # Raw mapping the entry was parsed from, key order included
    _source: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @property
    def kind(self) -> AbiKind:
        try:
            kind = AbiKind(self.type)
        except ValueError:
            return AbiKind.OTHER
        return kind

    @property
    def mutability(self) -> str:
        """stateMutability, with legacy `constant: true` entries reported as view."""
        if self.stateMutability:
            return self.stateMutability
        extra = self.model_extra or {}
        if extra.get("constant"):
            return "view"
        if extra.get("payable"):
            return "payable"
        return "nonpayable"

    def to_dict(self) -> Dict[str, Any]:
        """
        Dump the entry as it appeared in the source document.

        Entries built by parse_abi return a copy of the original mapping, so
        key order and unknown keys survive a save. Entries constructed
        directly fall back to the keys that were explicitly set.
        """
        if self._source is not None:
            return copy.deepcopy(self._source)
        return self.model_dump(mode="json", exclude_unset=True)


AbiParameter.model_rebuild()

ContractAbi = Tuple[AbiEntry, ...]


def parse_abi(raw: List[Dict[str, Any]]) -> ContractAbi:
    """Validate a raw ABI list (as decoded from JSON) into immutable entries."""
    entries = []
    for item in raw:
        entry = AbiEntry.model_validate(item)
        entry._source = copy.deepcopy(item)
        entries.append(entry)
    return tuple(entries)


def dump_abi(abi: ContractAbi) -> List[Dict[str, Any]]:
    return [entry.to_dict() for entry in abi]


@dataclass(frozen=True)
class EventSignature:
    """Deduplication key for events: name plus ordered canonical input types."""
    name: str
    inputs: Tuple[str, ...]

    @property
    def text(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def topic(self) -> str:
        return "0x" + keccak(text=self.text).hex()


@dataclass(frozen=True)
class Network:
    name: str
    chain_id: int
    rpc_url: str


@dataclass(frozen=True)
class ModuleRecord:
    index: int
    address: str
    abi: ContractAbi
    label: str


class StopReason(str, Enum):
    REVERTED = "reverted"
    TRANSPORT_ERROR = "transport-error"
    DECODE_ERROR = "decode-error"
    ABI_UNAVAILABLE = "abi-unavailable"
    LIMIT_REACHED = "limit-reached"


@dataclass(frozen=True)
class ProbeSuccess:
    index: int
    address: str


@dataclass(frozen=True)
class ProbeStop:
    index: int
    reason: StopReason
    detail: str = ""


@dataclass(frozen=True)
class EnumerationResult:
    records: Tuple[ModuleRecord, ...]
    last_index: Optional[int]  # highest successfully probed index
    stop: ProbeStop


@dataclass
class DiscoveryResult:
    records: List[ModuleRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass
class MergeStats:
    base_entries: int = 0
    base_events: int = 0
    candidate_events: int = 0
    duplicate_events: int = 0
    added_events: int = 0


@dataclass(frozen=True)
class MergeResult:
    full_abi: ContractAbi
    added_events: Tuple[AbiEntry, ...]
    stats: MergeStats


@dataclass
class AssemblyResult:
    network: Network
    address: str
    abi_address: str
    base_abi: ContractAbi
    modules: List[ModuleRecord]
    full_abi: ContractAbi
    added_events: Tuple[AbiEntry, ...]
    warnings: List[str] = field(default_factory=list)
