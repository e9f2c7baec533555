"""Base assembler state and shared configuration."""

from typing import Optional

from ..abi_merger import AbiMerger
from ..clients.base import AbiSource, ChainProbe
from ..discovery import IndexProbeSource, ModuleAddressSource
from ..persistence import Persistence


class AssemblerBase:
    """Base class for assembler runtime state."""

    BASE_ABI_LABEL = "baseAbi"
    FULL_ABI_LABEL = "fullAbi"

    def __init__(
        self,
        abi_source: AbiSource,
        chain_probe: ChainProbe,
        persistence: Persistence,
        source: Optional[ModuleAddressSource] = None,
        max_workers: int = 4,
    ):
        self.abi_source = abi_source
        self.chain_probe = chain_probe
        self.persistence = persistence
        self.source = source or IndexProbeSource()
        self.max_workers = max_workers
        self.merger = AbiMerger()
