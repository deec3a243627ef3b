"""Basic commands: cat, ls, mb."""

from __future__ import annotations

import shutil

import click

from ..client import new_client
from ..exceptions import MirrorCpError
from ..url import (
    ensure_trailing_separator,
    is_recursive,
    strip_recursive,
    url_basename,
)
from ._helpers import (
    main,
    ContentMessage,
    _emit,
    _load_config,
    _print_error,
    _status,
)

_CHUNK_SIZE = 64 * 1024


# ---------------------------------------------------------------------------
# cat
# ---------------------------------------------------------------------------

@main.command()
@click.argument("sources", nargs=-1, required=True)
@click.pass_context
def cat(ctx, sources):
    """Concatenate object contents to stdout."""
    config = _load_config(ctx)
    out = click.get_binary_stream("stdout")
    failed = False
    for raw in sources:
        url = config.expand_alias(raw)
        try:
            reader, _ = new_client(url, config).get()
        except (MirrorCpError, OSError) as exc:
            _print_error(exc)
            failed = True
            continue
        try:
            shutil.copyfileobj(reader, out, _CHUNK_SIZE)
            out.flush()
        except BrokenPipeError:
            # Reader went away (e.g. piped into head); stop quietly.
            ctx.exit(0)
        finally:
            reader.close()
    if failed:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# ls
# ---------------------------------------------------------------------------

@main.command()
@click.argument("target", required=False, default=".")
@click.pass_context
def ls(ctx, target):
    """List files and directories at TARGET (default: current directory).

    A TARGET ending in '...' is listed recursively.  Without a bucket,
    an object-storage URL lists its buckets.

    \b
    Examples:
        mirrorcp ls photos/
        mirrorcp ls play:mybucket/...
        mirrorcp --json ls play:
    """
    config = _load_config(ctx)
    url = config.expand_alias(target)
    recursive = is_recursive(url)
    url = strip_recursive(url)

    try:
        client = new_client(url, config)
        content = client.stat()
    except MirrorCpError as exc:
        raise click.ClickException(str(exc))

    prefix = ensure_trailing_separator(url) if content.is_dir else None
    failed = False
    for event in client.list(recursive=recursive):
        if event.error is not None:
            _print_error(event.error)
            failed = True
            continue
        entry = event.content
        if prefix is not None and entry.url.startswith(prefix):
            name = entry.url[len(prefix):]
        else:
            name = url_basename(entry.url)
        if not name:
            continue
        _emit(ctx, ContentMessage(
            name=name, kind=str(entry.kind), size=entry.size, time=entry.time,
        ))
    if failed:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# mb
# ---------------------------------------------------------------------------

@main.command()
@click.argument("targets", nargs=-1, required=True)
@click.pass_context
def mb(ctx, targets):
    """Make buckets (or local directories)."""
    config = _load_config(ctx)
    failed = False
    for raw in targets:
        url = config.expand_alias(raw)
        try:
            new_client(url, config).make_bucket()
        except (MirrorCpError, OSError) as exc:
            _print_error(exc)
            failed = True
            continue
        _status(ctx, f"Bucket created successfully ‘{url}’.")
    if failed:
        ctx.exit(1)
