"""Shared fixtures for mirrorcp tests."""

import pytest
from click.testing import CliRunner

from mirrorcp.client import Content, ContentEvent, ContentKind


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def make_tree():
    """Return a function that writes ``{relpath: data}`` under a directory.

    ``data`` may be ``str`` or ``bytes``; ``None`` creates an empty
    directory.  The function returns the root as a string.
    """
    def _make(root, files):
        root.mkdir(parents=True, exist_ok=True)
        for rel, data in files.items():
            p = root / rel
            if data is None:
                p.mkdir(parents=True, exist_ok=True)
                continue
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_bytes(data.encode() if isinstance(data, str) else data)
        return str(root)
    return _make


@pytest.fixture
def source_tree(tmp_path, make_tree):
    """``src/`` with a.txt (5 bytes) and sub/b.txt (3 bytes)."""
    return make_tree(tmp_path / "src", {"a.txt": "hello", "sub/b.txt": "abc"})


@pytest.fixture
def listing():
    """Return a function that turns ``[(url, size)]`` into listing events.

    URLs ending in ``/`` become directories.
    """
    def _listing(entries):
        for url, size in entries:
            kind = ContentKind.DIRECTORY if url.endswith("/") else ContentKind.FILE
            yield ContentEvent(content=Content(url=url, kind=kind, size=size))
    return _listing


class _StaticClient:
    """In-memory client that stats as a directory and lists fixed events."""

    def __init__(self, url, events):
        self.url = url
        self._events = events

    def stat(self):
        return Content(url=self.url, kind=ContentKind.DIRECTORY)

    def list(self, recursive=False):
        yield from self._events


@pytest.fixture
def static_client():
    """Return the in-memory client class for listings that fail part-way."""
    return _StaticClient
