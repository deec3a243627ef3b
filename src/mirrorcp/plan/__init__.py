"""Copy and mirror planning: argument shapes, copy plans, mirror deltas."""

from ._types import CopyInstruction, CopyShape, MirrorInstruction
from ._classify import check_copy_syntax, check_mirror_syntax, guess_copy_shape
from ._copy import (
    prepare_copy_a,
    prepare_copy_b,
    prepare_copy_c,
    prepare_copy_d,
    prepare_copy_urls,
)
from ._mirror import AvailabilityOracle, prepare_mirror_urls

__all__ = [
    "CopyInstruction", "CopyShape", "MirrorInstruction",
    "check_copy_syntax", "check_mirror_syntax", "guess_copy_shape",
    "prepare_copy_a", "prepare_copy_b", "prepare_copy_c", "prepare_copy_d",
    "prepare_copy_urls",
    "AvailabilityOracle", "prepare_mirror_urls",
]
