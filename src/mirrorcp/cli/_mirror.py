"""The mirror command."""

from __future__ import annotations

import click

from ..exceptions import MirrorCpError
from ..plan import check_mirror_syntax, prepare_mirror_urls
from ..transfer import run_mirror
from ._helpers import (
    main,
    MirrorMessage,
    _dry_run_option,
    _emit,
    _finish,
    _load_config,
    _status,
)


@main.command()
@click.argument("source")
@click.argument("targets", nargs=-1, required=True)
@click.option("-f", "--force", is_flag=True, default=False,
              help="Overwrite target objects whose size differs from the source.")
@_dry_run_option
@click.pass_context
def mirror(ctx, source, targets, force, dry_run):
    """Mirror a directory tree into one or more targets.

    Only objects missing from a target are copied; objects present with
    the same size are skipped.  An object present with a different size
    is an error unless --force is given.  Nothing is ever deleted.

    \b
    'dir' and 'dir/...' mirror the directory itself (TARGET/dir/...);
    'dir/' mirrors only its contents (TARGET/...).

    \b
    Examples:
        mirrorcp mirror photos/ play:bucket/photos/
        mirrorcp mirror photos play:bucket/ s3:backup/
    """
    config = _load_config(ctx)
    source = config.expand_alias(source)
    targets = [config.expand_alias(t) for t in targets]

    try:
        check_mirror_syntax(source, targets, config)
    except MirrorCpError as exc:
        raise click.ClickException(str(exc))
    _status(ctx, f"Mirroring {source} to {len(targets)} target(s)")

    report = run_mirror(
        prepare_mirror_urls(source, targets, force=force, config=config),
        config,
        dry_run=dry_run,
        on_message=lambda inst: _emit(ctx, MirrorMessage.from_instruction(inst)),
    )
    _finish(ctx, report, "Would copy" if dry_run else "Copied")
