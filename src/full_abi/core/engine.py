"""Public assembler engine composed from focused mixins."""

from .base import AssemblerBase
from .checkpoints import AssemblerCheckpointMixin
from .pipeline import AssemblerPipelineMixin


class AbiAssembler(
    AssemblerBase,
    AssemblerCheckpointMixin,
    AssemblerPipelineMixin,
):
    """Full ABI assembler with modular flow-oriented implementation."""

    pass
