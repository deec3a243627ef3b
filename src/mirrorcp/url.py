"""URL parsing and path helpers shared by the planner and the clients.

Two URL flavours exist:

- local paths (``/data/photos``, ``./dir/file.txt``), handled by the
  filesystem client and joined with ``os.sep``;
- object-storage URLs (``https://host[:port]/bucket/key``), handled by the
  S3 client and always joined with ``/``.

A source argument ending in ``...`` is *recursive*: it stands for the
whole tree below the directory it names.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace

from .exceptions import InvalidURL, UnsupportedScheme

RECURSIVE_MARKER = "..."

_REMOTE_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class ObjectURL:
    """A parsed source or target argument.

    Attributes:
        scheme: ``"http"``/``"https"`` for object storage, ``""`` for local paths.
        host: ``host[:port]`` of the endpoint, ``""`` for local paths.
        path: Path component; for object storage it starts with ``/`` and
            holds ``/bucket/key``.
        separator: Path separator of the backend.
    """
    scheme: str
    host: str
    path: str
    separator: str

    @classmethod
    def parse(cls, raw: str) -> ObjectURL:
        if not raw or not raw.strip():
            raise InvalidURL(raw)
        if "://" in raw:
            scheme, rest = raw.split("://", 1)
            scheme = scheme.lower()
            if scheme not in _REMOTE_SCHEMES:
                raise UnsupportedScheme(raw, scheme)
            host, slash, path = rest.partition("/")
            if not host:
                raise InvalidURL(raw)
            return cls(scheme, host, slash + path, "/")
        return cls("", "", raw, os.sep)

    @property
    def type(self) -> str:
        """Backend name: ``"s3"`` or ``"fs"``."""
        return "s3" if self.scheme else "fs"

    @property
    def endpoint(self) -> str:
        return f"{self.scheme}://{self.host}" if self.scheme else ""

    def __str__(self) -> str:
        if self.scheme:
            return f"{self.scheme}://{self.host}{self.path}"
        return self.path

    def with_path(self, path: str) -> ObjectURL:
        return replace(self, path=path)

    def bucket_and_key(self) -> tuple[str, str]:
        """Split an object-storage path into ``(bucket, key)``.

        Either part may be empty: ``https://host`` has neither, and
        ``https://host/bucket`` has no key.
        """
        splits = self.path.split("/", 2)
        if len(splits) < 2:
            return "", ""
        if len(splits) == 2:
            return splits[1], ""
        return splits[1], splits[2]

    @property
    def is_storage_root(self) -> bool:
        """True for an object-storage URL without a bucket segment."""
        return self.type == "s3" and not self.bucket_and_key()[0]


def _separators(url: str) -> str:
    return "/" if "://" in url else "/" + os.sep


def is_recursive(url: str) -> bool:
    """Return True if *url* carries the ``...`` marker.

    Trailing separators after the marker are ignored, so ``dir/...``
    and ``dir/.../`` are both recursive.
    """
    return url.rstrip(_separators(url)).endswith(RECURSIVE_MARKER)


def strip_recursive(url: str) -> str:
    """Remove the ``...`` marker and the separator in front of it.

    ``dir/...``, ``dir...`` and ``dir/.../`` all become ``dir``.  A bare
    ``...`` becomes ``.``; ``/...`` stays the filesystem root ``/``.
    """
    if not is_recursive(url):
        return url
    seps = _separators(url)
    stripped = url.rstrip(seps)[:-len(RECURSIVE_MARKER)]
    if not stripped:
        return "."
    trimmed = stripped.rstrip(seps)
    if not trimmed:
        return stripped[0]
    if trimmed.endswith(":/") or trimmed.endswith("://"):
        return stripped
    return trimmed


def has_trailing_separator(url: str) -> bool:
    return url.endswith(tuple(_separators(url)))


def ensure_trailing_separator(url: str) -> str:
    if has_trailing_separator(url):
        return url
    return url + ObjectURL.parse(url).separator


def url_join_path(base: str, suffix: str) -> str:
    """Join *suffix* onto *base* using the separator of *base*.

    Separators inside *suffix* are converted, so a suffix computed from
    a local listing can be joined onto an object-storage URL and vice
    versa.
    """
    if not suffix:
        return base
    sep = ObjectURL.parse(base).separator
    if sep != "/":
        suffix = suffix.replace("/", sep)
    elif os.sep != "/":
        suffix = suffix.replace(os.sep, "/")
    suffix = suffix.lstrip(sep)
    if base.endswith(sep):
        return base + suffix
    return base + sep + suffix


def url_basename(url: str) -> str:
    """Return the last non-empty path segment of *url*."""
    parsed = ObjectURL.parse(url)
    path = parsed.path.rstrip(_separators(url))
    if parsed.type == "fs":
        path = path.replace(os.sep, "/")
    return path.rsplit("/", 1)[-1]
