"""Data structures shared by the storage clients."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import BinaryIO, Iterator, Protocol

from ..exceptions import MirrorCpError
from ..url import ObjectURL


class ContentKind(str, Enum):
    """Kind of a listed node: ``FILE`` or ``DIRECTORY``."""
    FILE = "file"
    DIRECTORY = "directory"

    def __str__(self) -> str:          # noqa: D105
        return self.value


@dataclass
class Content:
    """One filesystem or object-storage node.

    Attributes:
        url: Full URL string of the node.  Directories produced by a
            listing end with the backend separator.
        kind: :class:`ContentKind` of the node.
        size: Size in bytes (``0`` for directories).
        time: Last modification time, if known.
    """
    url: str
    kind: ContentKind
    size: int = 0
    time: datetime | None = None

    @property
    def is_file(self) -> bool:
        return self.kind is ContentKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is ContentKind.DIRECTORY


@dataclass
class ContentEvent:
    """One item of a listing stream: a :class:`Content` or an error."""
    content: Content | None = None
    error: MirrorCpError | None = None


class Client(Protocol):
    """A storage client bound to a single URL."""

    url: ObjectURL

    def stat(self) -> Content:
        """Return metadata for the URL; raise ``PathNotFound`` if absent."""
        ...

    def list(self, recursive: bool = False) -> Iterator[ContentEvent]:
        """Yield the nodes at or below the URL.

        With *recursive*, nodes come in non-decreasing order of their
        full URL string.  I/O errors are yielded as events.
        """
        ...

    def get(self) -> tuple[BinaryIO, int]:
        """Open the object for reading; return ``(reader, size)``."""
        ...

    def put(self, size: int, data: BinaryIO) -> None:
        """Write *size* bytes from *data* to the URL."""
        ...

    def make_bucket(self) -> None:
        """Create the bucket (or directory) named by the URL."""
        ...
