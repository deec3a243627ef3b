"""Argument classification and validation for cp and mirror.

Valid copy shapes, all reduced to A: ``copy(file, file)``::

    A: copy(f, f)       -> copy(f, f)
    B: copy(f, d)       -> copy(f, d/f) -> A
    C: copy(d1..., d2)  -> [copy(d1/f, d2/f)] -> [A]
    D: copy([]f, d)     -> [B or C]

Invalid: a recursive target, a recursive source that is not a
directory, several sources into something that is not a directory.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from ..client import is_dir_url, url_stat
from ..exceptions import (
    InvalidArgument,
    InvalidURL,
    MissingBucket,
    PathNotFound,
    RecursiveTarget,
    SourceIsNotDir,
    SourceListEmpty,
    SourceNotFound,
    TargetIsNotDir,
    TargetNotFound,
)
from ..url import ObjectURL, has_trailing_separator, is_recursive, strip_recursive
from ._types import CopyShape

if TYPE_CHECKING:
    from ..config import Config


def _is_target_dir(target: str, config: Config | None) -> bool:
    # A target that does not exist yet but ends with a separator names a
    # directory to be created.
    if is_dir_url(target, config):
        return True
    try:
        parsed = ObjectURL.parse(target)
    except InvalidURL:
        return False
    return has_trailing_separator(target) and not parsed.is_storage_root


def guess_copy_shape(
    sources: Sequence[str], target: str, config: Config | None = None,
) -> CopyShape:
    """Classify ``(sources, target)`` into a :class:`CopyShape`.

    Only the target is looked up (to tell B from A); sources are judged
    by their shape alone so that the planners can report precise errors.
    """
    if not target or not target.strip():
        return CopyShape.INVALID
    if not sources:
        return CopyShape.INVALID
    if len(sources) == 1:
        if is_recursive(sources[0]):
            return CopyShape.RECURSIVE_DIR_TO_DIRECTORY
        if _is_target_dir(target, config):
            return CopyShape.SINGLE_FILE_TO_DIRECTORY
        return CopyShape.SINGLE_FILE_TO_FILE
    return CopyShape.MULTI_SOURCE_TO_DIRECTORY


def _check_target(target: str) -> None:
    if is_recursive(target):
        raise RecursiveTarget(target)
    if ObjectURL.parse(target).is_storage_root:
        raise MissingBucket(target)


def check_copy_syntax(
    sources: Sequence[str], target: str, config: Config | None = None,
) -> CopyShape:
    """Validate cp arguments and return their shape.

    Raises a :class:`~mirrorcp.exceptions.MirrorCpError` before anything
    is planned or transferred.
    """
    if not sources:
        raise SourceListEmpty()
    if not target or not target.strip():
        raise InvalidArgument("Target is empty.")
    for src in sources:
        ObjectURL.parse(src)
    _check_target(target)

    shape = guess_copy_shape(sources, target, config)
    if shape is CopyShape.RECURSIVE_DIR_TO_DIRECTORY:
        for src in sources:
            root = strip_recursive(src)
            try:
                _, content = url_stat(root, config)
            except PathNotFound:
                raise SourceNotFound(root) from None
            if not content.is_dir:
                raise SourceIsNotDir(root)
    elif shape is CopyShape.MULTI_SOURCE_TO_DIRECTORY:
        try:
            _, content = url_stat(target, config)
        except PathNotFound:
            raise TargetNotFound(target) from None
        if not content.is_dir:
            raise TargetIsNotDir(target)
    elif shape is CopyShape.INVALID:
        raise InvalidArgument("Unable to determine how to copy.")
    return shape


def check_mirror_syntax(
    source: str, targets: Sequence[str], config: Config | None = None,
) -> None:
    """Validate mirror arguments.

    The source must be an existing directory.  Targets may not exist yet,
    but an existing target must be a directory.
    """
    if not source or not source.strip():
        raise SourceListEmpty()
    if not targets:
        raise InvalidArgument("Invalid target arguments to mirror command.")

    root = strip_recursive(source)
    try:
        _, content = url_stat(root, config)
    except PathNotFound:
        raise SourceNotFound(root) from None
    if not content.is_dir:
        raise SourceIsNotDir(root)

    for target in targets:
        _check_target(target)
        try:
            _, content = url_stat(target, config)
        except PathNotFound:
            continue
        if not content.is_dir:
            raise TargetIsNotDir(target)
