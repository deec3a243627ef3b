"""Storage clients: local filesystem and S3-compatible object storage."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import MirrorCpError
from ..url import ObjectURL
from ._types import Client, Content, ContentEvent, ContentKind
from .fs import FSClient

if TYPE_CHECKING:
    from ..config import Config


def new_client(url: str, config: Config | None = None) -> Client:
    """Return the client for *url* (raises ``InvalidURL``/``UnsupportedScheme``)."""
    parsed = ObjectURL.parse(url)
    if parsed.type == "fs":
        return FSClient(parsed)
    from .s3 import S3Client
    host_config = config.host_config(parsed.host) if config is not None else None
    return S3Client(parsed, host_config)


def url_stat(url: str, config: Config | None = None) -> tuple[Client, Content]:
    """Return ``(client, content)`` for *url*.

    Raises ``PathNotFound`` if nothing exists there.
    """
    client = new_client(url, config)
    return client, client.stat()


def is_dir_url(url: str, config: Config | None = None) -> bool:
    """True if *url* exists and is a directory (or bucket)."""
    try:
        _, content = url_stat(url, config)
    except MirrorCpError:
        return False
    return content.is_dir


__all__ = [
    "Client", "Content", "ContentEvent", "ContentKind",
    "FSClient", "new_client", "url_stat", "is_dir_url",
]
