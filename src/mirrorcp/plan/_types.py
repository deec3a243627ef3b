"""Data structures for copy and mirror plans."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..client import Content
from ..exceptions import MirrorCpError


class CopyShape(str, Enum):
    """How the arguments of a copy combine.

    Members: ``SINGLE_FILE_TO_FILE`` (A), ``SINGLE_FILE_TO_DIRECTORY`` (B),
    ``RECURSIVE_DIR_TO_DIRECTORY`` (C), ``MULTI_SOURCE_TO_DIRECTORY`` (D),
    ``INVALID``.
    """
    SINGLE_FILE_TO_FILE = "A"
    SINGLE_FILE_TO_DIRECTORY = "B"
    RECURSIVE_DIR_TO_DIRECTORY = "C"
    MULTI_SOURCE_TO_DIRECTORY = "D"
    INVALID = "invalid"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class CopyInstruction:
    """One file-to-file transfer, or an error found while planning.

    Attributes:
        source: The source object (with its size and time).
        target: The target; only ``url`` is meaningful.
        error: Set instead of *source*/*target* when planning failed.
    """
    source: Content | None = None
    target: Content | None = None
    error: MirrorCpError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class MirrorInstruction:
    """One source object and the targets that still need it.

    Attributes:
        source: The source object.
        targets: Non-empty list of target objects (only ``url`` is meaningful).
        error: Set instead of *source*/*targets* when planning failed.
    """
    source: Content | None = None
    targets: list[Content] = field(default_factory=list)
    error: MirrorCpError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
