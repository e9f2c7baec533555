"""
ABI handling for full ABI assembly.

This module provides canonical type/signature utilities and the lookups used
to validate module accessors and getters against a base contract ABI.
"""

import re
from typing import Iterator, List, Optional, Set

from .models import AbiEntry, AbiKind, AbiParameter, ContractAbi, EventSignature

_INTEGER_TYPE = re.compile(r'^u?int(\d{1,3})?$')


def canonical_type(param: AbiParameter) -> str:
    """
    Get canonical type string for a parameter.

    Handles tuples, arrays of tuples, and basic types. Component names are
    dropped so that only the type structure remains.

    Args:
        param: Parameter definition from ABI

    Returns:
        Type string for signature (e.g., "address", "(uint256,address)[]")
    """
    param_type = param.type

    if param_type.startswith('tuple') and param.components:
        inner = ','.join(canonical_type(c) for c in param.components)
        # Keep any array suffix: tuple[] / tuple[3]
        return f"({inner})" + param_type[len('tuple'):]

    return param_type


def event_signature(entry: AbiEntry) -> Optional[EventSignature]:
    """
    Generate the deduplication key of an event entry.

    Returns:
        EventSignature, or None for non-events and unnamed entries
    """
    if entry.kind is not AbiKind.EVENT or not entry.name:
        return None
    return EventSignature(entry.name, tuple(canonical_type(p) for p in entry.inputs))


def is_integer_type(type_str: str) -> bool:
    return bool(_INTEGER_TYPE.match(type_str))


class ABI:
    """
    Class to interact with contract ABI.
    Handles function lookups and event signature extraction.
    """

    def __init__(self, abi: ContractAbi):
        """
        Initialize with an ABI.

        Args:
            abi: Parsed contract ABI
        """
        self.abi = abi

    def functions(self, name: str) -> Iterator[AbiEntry]:
        for item in self.abi:
            if item.kind is AbiKind.FUNCTION and item.name == name:
                yield item

    def events(self) -> List[AbiEntry]:
        return [item for item in self.abi if item.kind is AbiKind.EVENT]

    def event_signatures(self) -> Set[EventSignature]:
        signatures = set()
        for item in self.events():
            signature = event_signature(item)
            if signature:
                signatures.add(signature)
        return signatures

    def find_module_accessor(self, name: str) -> Optional[AbiEntry]:
        """
        Find the index-based module accessor.

        The accessor must be a view function with exactly one integer input
        and at least one output, e.g. `modules(uint256) view returns (address)`.

        Args:
            name: Accessor function name

        Returns:
            Matching ABI entry, or None if the ABI exposes no such function
        """
        for item in self.functions(name):
            if (
                item.mutability == 'view'
                and len(item.inputs) == 1
                and is_integer_type(item.inputs[0].type)
                and len(item.outputs) > 0
            ):
                return item
        return None

    def find_getter(self, name: str) -> Optional[AbiEntry]:
        """Find a view function with at least one output (a submodule getter)."""
        for item in self.functions(name):
            if item.mutability == 'view' and len(item.outputs) > 0:
                return item
        return None
