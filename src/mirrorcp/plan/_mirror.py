"""Mirror delta: which source objects each target is still missing.

The source tree and every target tree are listed recursively, each in
lexicographic order of the full URL.  One :class:`AvailabilityOracle`
per target walks that target's listing forward exactly once, answering
"is this suffix already there, with the same size?" for the source
entries as they stream past.  Nothing is rewound and no tree is held in
memory, so the cost is one linear pass over each listing.

The merge is only correct when the source listing and the queries are in
the same non-decreasing order as the target listings; a query that goes
backwards would be answered "not available" for an object that exists.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Iterator, Sequence

from .._stream import background
from ..client import Content, ContentEvent, ContentKind, new_client
from ..exceptions import InvalidSource, MirrorCpError, OverwriteNotAllowed, PathNotFound, TypeMismatch
from ..url import (
    ObjectURL,
    ensure_trailing_separator,
    has_trailing_separator,
    strip_recursive,
    url_basename,
    url_join_path,
)
from ._types import MirrorInstruction

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


class AvailabilityOracle:
    """Forward-only cursor over one target's recursive listing.

    Entries are compared by their listed URL, directories included with
    their trailing separator, so the cursor only ever moves forward.  A
    source file ``a`` can still meet a target directory ``a/`` further
    on, past siblings such as ``a-b`` that sort between the two; those
    siblings are held in a small look-ahead buffer until a later query
    passes them.

    Args:
        root: Target root URL, ending with its separator.
        events: The target's recursive listing.
        force: Report a same-named object of a different size as needing
            transfer instead of raising :class:`OverwriteNotAllowed`.
    """

    def __init__(self, root: str, events: Iterator[ContentEvent], *, force: bool = False) -> None:
        self.root = root
        self.force = force
        self._sep = ObjectURL.parse(root).separator
        self._events = events
        self._ahead: deque[Content] = deque()
        self._eof = False

    def _peek(self, index: int) -> Content | None:
        """Return the listing entry *index* places past the cursor, or None at the end."""
        while len(self._ahead) <= index:
            if self._eof:
                return None
            event = next(self._events, None)
            if event is None:
                logger.debug("reached end of %s", self.root)
                self._eof = True
                return None
            if event.error is not None:
                raise event.error
            self._ahead.append(event.content)
        return self._ahead[index]

    def is_available(self, suffix: str, kind: ContentKind, size: int) -> bool:
        """Return True if *suffix* exists in the target and is up to date.

        Raises :class:`TypeMismatch` when the target holds a directory
        where the source has a file, :class:`OverwriteNotAllowed` for a
        size difference without *force*, and forwards listing errors.
        """
        expected = url_join_path(self.root, suffix)
        current = self._peek(0)
        while current is not None and current.url < expected:
            self._ahead.popleft()
            current = self._peek(0)
        if current is None:
            return False

        if current.url == expected:
            if kind is ContentKind.FILE and not current.is_file:
                raise TypeMismatch(expected, str(kind), str(current.kind))
            if current.size != size:
                if not self.force:
                    raise OverwriteNotAllowed(expected, size, current.size)
                return False
            return True

        if kind is ContentKind.FILE:
            as_dir = expected + self._sep
            index = 0
            while (current is not None and current.url.startswith(expected)
                   and current.url < as_dir):
                index += 1
                current = self._peek(index)
            if current is not None and current.url.startswith(as_dir):
                raise TypeMismatch(expected, str(kind), str(ContentKind.DIRECTORY))
        return False

    def close(self) -> None:
        close = getattr(self._events, "close", None)
        if close is not None:
            close()


def _target_events(url: str, config: Config | None, concurrent: bool) -> Iterator[ContentEvent]:
    client = new_client(url, config)
    try:
        client.stat()
    except PathNotFound:
        logger.debug("target %s does not exist yet", url)
        return iter(())
    events = client.list(recursive=True)
    if concurrent:
        return background(events, name=f"target:{url}")
    return events


def _normalize_source(source: str) -> tuple[str, str]:
    """Return ``(source_root, base_dir)``.

    Without a trailing separator the directory itself is mirrored, so its
    name becomes *base_dir* and is put in front of every suffix.  With
    one, only the contents are mirrored and *base_dir* is empty.
    """
    source = strip_recursive(source)
    if has_trailing_separator(source):
        return source, ""
    base_dir = url_basename(source)
    if base_dir in (".", ".."):
        base_dir = ""
    return ensure_trailing_separator(source), base_dir


def prepare_mirror_urls(
    source: str,
    targets: Sequence[str],
    *,
    force: bool = False,
    config: Config | None = None,
    concurrent: bool = True,
) -> Iterator[MirrorInstruction]:
    """Plan a mirror of *source* into every one of *targets*.

    Yields one :class:`MirrorInstruction` per source file that at least
    one target is missing (or holds with a different size under
    *force*).  Errors are yielded as instructions and do not stop the
    walk.  With *concurrent*, the listings are produced in background
    threads, one entry ahead of the merge.
    """
    source_root, base_dir = _normalize_source(source)
    target_roots = [ensure_trailing_separator(t) for t in targets]
    source_sep = ObjectURL.parse(source_root).separator

    oracles: list[AvailabilityOracle] = []
    source_events = None
    try:
        for root in target_roots:
            try:
                events = _target_events(root, config, concurrent)
            except MirrorCpError as exc:
                yield MirrorInstruction(error=exc)
                return
            oracles.append(AvailabilityOracle(root, events, force=force))

        try:
            source_events = new_client(source_root, config).list(recursive=True)
        except MirrorCpError as exc:
            yield MirrorInstruction(error=exc)
            return
        if concurrent:
            source_events = background(source_events, name=f"source:{source_root}")

        for event in source_events:
            if event.error is not None:
                yield MirrorInstruction(error=event.error)
                continue
            content = event.content
            if content.is_dir:
                continue
            if not content.url.startswith(source_root):
                yield MirrorInstruction(error=InvalidSource(content.url))
                continue
            suffix = content.url[len(source_root):]
            if base_dir:
                suffix = base_dir + source_sep + suffix

            needed: list[Content] = []
            failed = False
            for oracle in oracles:
                try:
                    available = oracle.is_available(suffix, content.kind, content.size)
                except MirrorCpError as exc:
                    failed = True
                    yield MirrorInstruction(error=exc)
                    continue
                if not available:
                    needed.append(Content(
                        url=url_join_path(oracle.root, suffix),
                        kind=ContentKind.FILE,
                    ))
            if needed:
                yield MirrorInstruction(source=content, targets=needed)
            elif not failed:
                logger.debug("%s already mirrored", suffix)
    finally:
        close = getattr(source_events, "close", None)
        if close is not None:
            close()
        for oracle in oracles:
            oracle.close()
