"""Copy plan generators, one per :class:`CopyShape`.

Every generator yields :class:`CopyInstruction` objects.  Problems found
while planning (missing source, a directory where a file was needed, an
unparsable URL, a failed listing) are yielded as instructions with
``error`` set; they never escape the generator as exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterator, Sequence

from ..client import Content, ContentKind, url_stat
from ..exceptions import (
    InvalidArgument,
    InvalidSource,
    InvalidTarget,
    InvalidURL,
    MirrorCpError,
    PathNotFound,
    SourceIsNotDir,
    SourceIsNotFile,
    SourceListEmpty,
    SourceNotFound,
    SourceNotRecursive,
)
from ..url import (
    ObjectURL,
    ensure_trailing_separator,
    is_recursive,
    strip_recursive,
    url_basename,
    url_join_path,
)
from ._classify import guess_copy_shape
from ._types import CopyInstruction, CopyShape

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


def _parse_target(target: str) -> MirrorCpError | None:
    try:
        ObjectURL.parse(target)
    except InvalidURL:
        return InvalidTarget(target)
    return None


def _copy_pair(source: Content, target: str) -> CopyInstruction:
    return CopyInstruction(
        source=source,
        target=Content(url=target, kind=ContentKind.FILE),
    )


# ---------------------------------------------------------------------------
# A: copy(f, f)
# ---------------------------------------------------------------------------

def prepare_copy_a(source: str, target: str, config: Config | None = None) -> Iterator[CopyInstruction]:
    """Single file to file: one instruction, paths unchanged."""
    err = _parse_target(target)
    if err is not None:
        yield CopyInstruction(error=err)
        return
    try:
        _, content = url_stat(source, config)
    except InvalidURL:
        yield CopyInstruction(error=InvalidSource(source))
        return
    except PathNotFound:
        yield CopyInstruction(error=SourceNotFound(source))
        return
    except MirrorCpError as exc:
        yield CopyInstruction(error=exc)
        return
    if not content.is_file:
        yield CopyInstruction(error=SourceIsNotFile(source))
        return
    content.url = source
    yield _copy_pair(content, target)


# ---------------------------------------------------------------------------
# B: copy(f, d) -> copy(f, d/f)
# ---------------------------------------------------------------------------

def prepare_copy_b(source: str, target: str, config: Config | None = None) -> Iterator[CopyInstruction]:
    """Single file into an existing directory, keeping its name."""
    err = _parse_target(target)
    if err is not None:
        yield CopyInstruction(error=err)
        return
    try:
        name = url_basename(source)
    except InvalidURL:
        yield CopyInstruction(error=InvalidSource(source))
        return
    if not name:
        yield CopyInstruction(error=InvalidSource(source))
        return
    yield from prepare_copy_a(source, url_join_path(target, name), config)


# ---------------------------------------------------------------------------
# C: copy(d1..., d2) -> [copy(d1/f, d2/f)]
# ---------------------------------------------------------------------------

def prepare_copy_c(source: str, target: str, config: Config | None = None) -> Iterator[CopyInstruction]:
    """Every regular file under a recursive source, relative to its root.

    Listed files are already known to be regular files, so they are
    paired directly instead of being looked up again one by one.
    """
    if not is_recursive(source):
        yield CopyInstruction(error=SourceNotRecursive(source))
        return
    err = _parse_target(target)
    if err is not None:
        yield CopyInstruction(error=err)
        return

    root = strip_recursive(source)
    try:
        client, content = url_stat(root, config)
    except InvalidURL:
        yield CopyInstruction(error=InvalidSource(root))
        return
    except PathNotFound:
        yield CopyInstruction(error=SourceNotFound(root))
        return
    except MirrorCpError as exc:
        yield CopyInstruction(error=exc)
        return
    if not content.is_dir:
        yield CopyInstruction(error=SourceIsNotDir(root))
        return

    prefix = ensure_trailing_separator(root)
    logger.debug("expanding %s into %s", prefix, target)
    for event in client.list(recursive=True):
        if event.error is not None:
            yield CopyInstruction(error=event.error)
            continue
        entry = event.content
        if not entry.is_file:
            continue
        if not entry.url.startswith(prefix):
            yield CopyInstruction(error=InvalidSource(entry.url))
            continue
        rel = entry.url[len(prefix):]
        yield _copy_pair(entry, url_join_path(target, rel))


# ---------------------------------------------------------------------------
# D: copy([]f, d) -> [B or C]
# ---------------------------------------------------------------------------

def prepare_copy_d(sources: Sequence[str], target: str, config: Config | None = None) -> Iterator[CopyInstruction]:
    """Several sources into one directory, in argument order."""
    if not sources:
        yield CopyInstruction(error=SourceListEmpty())
        return
    for source in sources:
        if is_recursive(source):
            yield from prepare_copy_c(source, target, config)
        else:
            yield from prepare_copy_b(source, target, config)


def prepare_copy_urls(
    sources: Sequence[str],
    target: str,
    config: Config | None = None,
    *,
    shape: CopyShape | None = None,
) -> Iterator[CopyInstruction]:
    """Plan a copy of *sources* to *target*.

    *shape* can be passed when the arguments were already classified by
    :func:`~mirrorcp.plan.check_copy_syntax`.
    """
    if shape is None:
        shape = guess_copy_shape(sources, target, config)
    logger.debug("copy shape %s for %s -> %s", shape.name, list(sources), target)
    if shape is CopyShape.SINGLE_FILE_TO_FILE:
        yield from prepare_copy_a(sources[0], target, config)
    elif shape is CopyShape.SINGLE_FILE_TO_DIRECTORY:
        yield from prepare_copy_b(sources[0], target, config)
    elif shape is CopyShape.RECURSIVE_DIR_TO_DIRECTORY:
        yield from prepare_copy_c(sources[0], target, config)
    elif shape is CopyShape.MULTI_SOURCE_TO_DIRECTORY:
        yield from prepare_copy_d(sources, target, config)
    else:
        yield CopyInstruction(error=InvalidArgument("Unable to determine how to copy."))


__all__ = [
    "prepare_copy_a", "prepare_copy_b", "prepare_copy_c", "prepare_copy_d",
    "prepare_copy_urls",
]
