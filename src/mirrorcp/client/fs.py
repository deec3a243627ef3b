"""Local filesystem client."""

from __future__ import annotations

import logging
import os
import shutil
import stat
from datetime import datetime, timezone
from typing import BinaryIO, Iterator

from ..exceptions import BackendError, ListingError, PathNotFound, SourceIsNotFile
from ..url import ObjectURL
from ._types import Content, ContentEvent, ContentKind

logger = logging.getLogger(__name__)


def _content_from_stat(path: str, st: os.stat_result) -> Content:
    """Build a :class:`Content`; raise :class:`SourceIsNotFile` for FIFOs, sockets and devices."""
    if stat.S_ISDIR(st.st_mode):
        kind = ContentKind.DIRECTORY
        size = 0
    elif stat.S_ISREG(st.st_mode):
        kind = ContentKind.FILE
        size = st.st_size
    else:
        raise SourceIsNotFile(path)
    return Content(
        url=path,
        kind=kind,
        size=size,
        time=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
    )


class FSClient:
    """Client for a path on the local filesystem."""

    def __init__(self, url: ObjectURL) -> None:
        self.url = url
        self._path = url.path

    def __repr__(self) -> str:
        return f"FSClient({self._path!r})"

    def _stat(self) -> os.stat_result:
        try:
            return os.stat(self._path)
        except (FileNotFoundError, NotADirectoryError):
            raise PathNotFound(self._path) from None
        except OSError as exc:
            raise BackendError(self._path, exc) from exc

    # ------------------------------------------------------------------
    def stat(self) -> Content:
        return _content_from_stat(self._path, self._stat())

    # ------------------------------------------------------------------
    def list(self, recursive: bool = False) -> Iterator[ContentEvent]:
        try:
            st = os.stat(self._path)
        except OSError as exc:
            yield ContentEvent(error=ListingError(self._path, exc))
            return
        if not stat.S_ISDIR(st.st_mode):
            try:
                content = _content_from_stat(self._path, st)
            except SourceIsNotFile as exc:
                yield ContentEvent(error=exc)
                return
            yield ContentEvent(content=content)
            return

        root = self._path if self._path.endswith(os.sep) else self._path + os.sep
        logger.debug("listing %s (recursive=%s)", root, recursive)
        yield from self._list_dir(root, recursive)

    def _list_dir(self, dir_path: str, recursive: bool) -> Iterator[ContentEvent]:
        """Yield the children of *dir_path* sorted by full path string.

        Directory names are sorted with their trailing separator, which
        keeps ``a-b`` ahead of ``a/`` and therefore keeps the whole
        depth-first walk in lexicographic order.
        """
        try:
            with os.scandir(dir_path) as it:
                children = []
                for entry in it:
                    try:
                        is_dir = entry.is_dir()
                    except OSError:
                        is_dir = False
                    key = entry.name + os.sep if is_dir else entry.name
                    children.append((key, is_dir, entry))
        except OSError as exc:
            logger.warning("unable to list %s: %s", dir_path, exc)
            yield ContentEvent(error=ListingError(dir_path, exc))
            return

        children.sort(key=lambda c: c[0])
        for key, is_dir, entry in children:
            full = dir_path + key
            try:
                content = _content_from_stat(full, entry.stat())
            except SourceIsNotFile as exc:
                yield ContentEvent(error=exc)
                continue
            except OSError as exc:
                yield ContentEvent(error=ListingError(full, exc))
                continue
            yield ContentEvent(content=content)
            # Symlinked directories are listed but not descended into.
            if recursive and is_dir and not entry.is_symlink():
                yield from self._list_dir(full, recursive)

    # ------------------------------------------------------------------
    def get(self) -> tuple[BinaryIO, int]:
        # Opening a FIFO for reading would block, so check the type first.
        if not stat.S_ISREG(self._stat().st_mode):
            raise SourceIsNotFile(self._path)
        try:
            f = open(self._path, "rb")
        except FileNotFoundError:
            raise PathNotFound(self._path) from None
        except OSError as exc:
            raise BackendError(self._path, exc) from exc
        return f, os.fstat(f.fileno()).st_size

    def put(self, size: int, data: BinaryIO) -> None:
        parent = os.path.dirname(self._path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(self._path, "wb") as f:
            shutil.copyfileobj(data, f)

    def make_bucket(self) -> None:
        os.makedirs(self._path, exist_ok=True)
