"""Discover the submodules of a modular contract and merge their events into one ABI."""

from .abi_merger import AbiMerger
from .core import AbiAssembler
from .models import AbiEntry, AssemblyResult, ContractAbi, ModuleRecord, dump_abi, parse_abi

__all__ = [
    "AbiAssembler",
    "AbiEntry",
    "AbiMerger",
    "AssemblyResult",
    "ContractAbi",
    "ModuleRecord",
    "dump_abi",
    "parse_abi",
]
