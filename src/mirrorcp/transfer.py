"""Execute copy and mirror plans by streaming bytes between clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable

from .client import Content, new_client
from .exceptions import MirrorCpError, TransferError

if TYPE_CHECKING:
    from .config import Config
    from .plan import CopyInstruction, MirrorInstruction

logger = logging.getLogger(__name__)


@dataclass
class TransferReport:
    """Result of running a plan.

    Attributes:
        copied: Number of objects written (or that would be, in a dry run).
        bytes: Total bytes written (or that would be).
        errors: Planning and transfer errors, in the order they occurred.
    """
    copied: int = 0
    bytes: int = 0
    errors: list[MirrorCpError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def copy_object(source: Content, target_url: str, config: Config | None = None) -> int:
    """Copy one object from *source* to *target_url*; return bytes written.

    Raises :class:`TransferError` on any failure.
    """
    try:
        reader, size = new_client(source.url, config).get()
    except (MirrorCpError, OSError) as exc:
        raise TransferError(source.url, target_url, exc) from exc
    try:
        new_client(target_url, config).put(size, reader)
    except (MirrorCpError, OSError) as exc:
        raise TransferError(source.url, target_url, exc) from exc
    finally:
        reader.close()
    logger.debug("copied %s -> %s (%d bytes)", source.url, target_url, size)
    return size


def run_copy(
    instructions: Iterable[CopyInstruction],
    config: Config | None = None,
    *,
    dry_run: bool = False,
    on_message: Callable[[CopyInstruction], None] | None = None,
) -> TransferReport:
    """Run a copy plan to the end, collecting errors instead of stopping."""
    report = TransferReport()
    for inst in instructions:
        if inst.error is not None:
            report.errors.append(inst.error)
            continue
        if dry_run:
            size = inst.source.size
        else:
            try:
                size = copy_object(inst.source, inst.target.url, config)
            except TransferError as exc:
                report.errors.append(exc)
                continue
        report.copied += 1
        report.bytes += size
        if on_message is not None:
            on_message(inst)
    return report


def run_mirror(
    instructions: Iterable[MirrorInstruction],
    config: Config | None = None,
    *,
    dry_run: bool = False,
    on_message: Callable[[MirrorInstruction], None] | None = None,
) -> TransferReport:
    """Run a mirror plan, copying each source object to every target that needs it.

    *on_message* is called once per instruction, with only the targets
    that were written successfully.
    """
    report = TransferReport()
    for inst in instructions:
        if inst.error is not None:
            report.errors.append(inst.error)
            continue
        done: list[Content] = []
        for target in inst.targets:
            if dry_run:
                size = inst.source.size
            else:
                try:
                    size = copy_object(inst.source, target.url, config)
                except TransferError as exc:
                    report.errors.append(exc)
                    continue
            report.copied += 1
            report.bytes += size
            done.append(target)
        if done and on_message is not None:
            if len(done) == len(inst.targets):
                on_message(inst)
            else:
                on_message(type(inst)(source=inst.source, targets=done))
    return report
