"""Shared helpers, option decorators, output messages, and the main CLI group."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime

import click

from ..config import Config, load_config
from ..exceptions import MirrorCpError

OUTPUT_VERSION = "1.0.0"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _status(ctx, msg):
    """Emit a status message to stderr when verbose mode (-v) is on."""
    if ctx.obj.get("verbose"):
        click.echo(msg, err=True)


class _EchoHandler(logging.Handler):
    """Logging handler that writes through click.echo to stderr."""

    def emit(self, record):
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def _setup_logging(verbose: bool) -> None:
    """Send mirrorcp's debug log to stderr in verbose mode, nowhere otherwise."""
    logger = logging.getLogger("mirrorcp")
    for handler in [h for h in logger.handlers if isinstance(h, _EchoHandler)]:
        logger.removeHandler(handler)
    if not verbose:
        logger.setLevel(logging.NOTSET)
        return
    handler = _EchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


def _store_config_path(ctx, param, value):
    """Click callback: store --config value in the context."""
    ctx.ensure_object(dict)
    if value is not None:
        ctx.obj["config_path"] = value
    return value


def _load_config(ctx) -> Config:
    """Load (once) the config named by --config / MIRRORCP_CONFIG."""
    config = ctx.obj.get("config")
    if config is None:
        try:
            config = load_config(ctx.obj.get("config_path"))
        except MirrorCpError as exc:
            raise click.ClickException(str(exc))
        ctx.obj["config"] = config
    return config


def _dry_run_option(f):
    """Shared --dry-run flag for commands that write."""
    return click.option(
        "-n", "--dry-run", is_flag=True, default=False,
        help="Show what would be copied without writing anything.",
    )(f)


def _print_error(exc) -> None:
    click.echo(f"mirrorcp: {exc}", err=True)


def _finish(ctx, report, verb: str = "Copied") -> None:
    """Print per-object errors and a summary; exit 1 if anything failed."""
    for exc in report.errors:
        _print_error(exc)
    _status(ctx, f"{verb} {report.copied} object(s), {report.bytes} bytes, "
                 f"{len(report.errors)} error(s)")
    if report.errors:
        ctx.exit(1)


# ---------------------------------------------------------------------------
# Output messages
# ---------------------------------------------------------------------------

def _format_time(time: datetime | None) -> str:
    if time is None:
        return " " * 23
    return time.strftime("%Y-%m-%d %H:%M:%S %Z").ljust(23)


@dataclass
class CopyMessage:
    """One object copied by ``cp``."""
    source: str
    target: str
    size: int

    @classmethod
    def from_instruction(cls, inst) -> CopyMessage:
        return cls(source=inst.source.url, target=inst.target.url, size=inst.source.size)

    def to_text(self) -> str:
        return f"‘{self.source}’ -> ‘{self.target}’"

    def to_json(self) -> str:
        return json.dumps({
            "version": OUTPUT_VERSION,
            "status": "success",
            "source": self.source,
            "target": self.target,
            "size": self.size,
        }, indent=2)


@dataclass
class MirrorMessage:
    """One source object mirrored to one or more targets."""
    source: str
    targets: list[str]
    size: int

    @classmethod
    def from_instruction(cls, inst) -> MirrorMessage:
        return cls(
            source=inst.source.url,
            targets=[t.url for t in inst.targets],
            size=inst.source.size,
        )

    def to_text(self) -> str:
        targets = ", ".join(f"‘{t}’" for t in self.targets)
        return f"‘{self.source}’ -> [{targets}]"

    def to_json(self) -> str:
        return json.dumps({
            "version": OUTPUT_VERSION,
            "status": "success",
            "source": self.source,
            "targets": self.targets,
            "size": self.size,
        }, indent=2)


@dataclass
class ContentMessage:
    """One line of ``ls`` output."""
    name: str
    kind: str
    size: int
    time: datetime | None = None

    def to_text(self) -> str:
        return f"[{_format_time(self.time)}] {self.size:>10}B {self.name}"

    def to_json(self) -> str:
        return json.dumps({
            "version": OUTPUT_VERSION,
            "status": "success",
            "name": self.name,
            "type": self.kind,
            "size": self.size,
            "time": self.time.isoformat() if self.time is not None else None,
        }, indent=2)


def _emit(ctx, msg) -> None:
    """Print *msg* as text or JSON depending on --json."""
    if ctx.obj.get("json"):
        click.echo(msg.to_json())
    else:
        click.echo(msg.to_text())


# ---------------------------------------------------------------------------
# Main group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "-C", type=click.Path(dir_okay=False), envvar="MIRRORCP_CONFIG",
              help="Path to the config file (or set MIRRORCP_CONFIG).",
              expose_value=False, callback=_store_config_path, is_eager=True)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output on stderr.")
@click.option("--json", "json_output", is_flag=True, help="Print JSON messages instead of text.")
@click.pass_context
def main(ctx, verbose, json_output):
    """mirrorcp — copy and mirror between local disk and S3-compatible storage.

    \b
    Quick start:
      mirrorcp cp photo.jpg play:mybucket/
      mirrorcp cp photos/... play:mybucket/photos/
      mirrorcp mirror photos/ play:mybucket/photos/ s3:backup/photos/
      mirrorcp ls play:mybucket/...

    \b
    A source ending in '...' means "everything below this directory".
    Endpoint aliases ('alias:bucket/key') and credentials are read from
    the config file; see --config.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["json"] = json_output
    _setup_logging(verbose)
