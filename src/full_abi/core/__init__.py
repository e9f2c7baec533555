"""Assembler flow package."""

from .engine import AbiAssembler

__all__ = [
    "AbiAssembler",
]
