"""
Core schema definitions for validators and block synthesizers.

These domain-agnostic protocols and dataclasses are the contract between
the refinement loop and the structural checks it drives.
"""

from satloop.core.schema.validator import (
    BlockSynthesizer,
    ValidationOutcome,
    Validator,
)

__all__ = [
    "BlockSynthesizer",
    "ValidationOutcome",
    "Validator",
]
