"""The cp command."""

from __future__ import annotations

import click

from ..exceptions import MirrorCpError
from ..plan import check_copy_syntax, prepare_copy_urls
from ..transfer import run_copy
from ._helpers import (
    main,
    CopyMessage,
    _dry_run_option,
    _emit,
    _finish,
    _load_config,
    _status,
)


@main.command()
@click.argument("args", nargs=-1, required=True)
@_dry_run_option
@click.pass_context
def cp(ctx, args, dry_run):
    """Copy objects and directories between disk and object storage.

    The last argument is the target; all preceding arguments are sources.
    A source ending in '...' is copied recursively: every file below it is
    copied to the same relative path under the target.  With several
    sources the target must be an existing directory.

    \b
    Examples:
        mirrorcp cp a.txt b.txt                  # file to file
        mirrorcp cp a.txt play:bucket/dir/       # file into a directory
        mirrorcp cp photos/... play:bucket/p/    # whole tree
        mirrorcp cp a.txt b.txt logs/... out/    # several sources
    """
    if len(args) < 2:
        raise click.ClickException("cp requires at least two arguments (SOURCE... TARGET)")

    config = _load_config(ctx)
    sources = [config.expand_alias(a) for a in args[:-1]]
    target = config.expand_alias(args[-1])

    try:
        shape = check_copy_syntax(sources, target, config)
    except MirrorCpError as exc:
        raise click.ClickException(str(exc))
    _status(ctx, f"Copying {len(sources)} source(s) to {target} (shape {shape})")

    report = run_copy(
        prepare_copy_urls(sources, target, config, shape=shape),
        config,
        dry_run=dry_run,
        on_message=lambda inst: _emit(ctx, CopyMessage.from_instruction(inst)),
    )
    _finish(ctx, report, "Would copy" if dry_run else "Copied")
