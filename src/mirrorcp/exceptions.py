"""Exceptions for mirrorcp.

Every error the planner can produce is a :class:`MirrorCpError` subclass
with structured fields, so callers can inspect the offending path (and
sizes, kinds, causes) instead of parsing messages.  Planning errors are
not raised out of the instruction stream; they travel inside
:class:`~mirrorcp.plan.CopyInstruction` / :class:`~mirrorcp.plan.MirrorInstruction`
objects as the ``error`` attribute.
"""

from __future__ import annotations


class MirrorCpError(Exception):
    """Base class for all mirrorcp errors."""

    def __str__(self) -> str:          # noqa: D105
        return self.message()

    def message(self) -> str:
        return self.__class__.__name__


# ---------------------------------------------------------------------------
# Argument errors (fatal before planning starts)
# ---------------------------------------------------------------------------

class InvalidArgument(MirrorCpError):
    """Arguments cannot be turned into a copy or mirror plan."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason)
        self.reason = reason

    def message(self) -> str:
        return f"Invalid argument. {self.reason}".rstrip()


class SourceListEmpty(InvalidArgument):
    """No source was given."""

    def __init__(self) -> None:
        super().__init__("Source list is empty.")

    def message(self) -> str:
        return "Source list is empty."


class ConfigError(MirrorCpError):
    """The configuration file exists but cannot be used."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def message(self) -> str:
        return f"Unable to load config ‘{self.path}’: {self.reason}"


# ---------------------------------------------------------------------------
# Errors about a single URL
# ---------------------------------------------------------------------------

class URLError(MirrorCpError):
    """An error attached to one URL."""

    def __init__(self, url: str) -> None:
        super().__init__(url)
        self.url = url

    def message(self) -> str:
        return f"Invalid url {self.url}"


class InvalidURL(URLError):
    pass


class UnsupportedScheme(InvalidURL):
    def __init__(self, url: str, scheme: str) -> None:
        super().__init__(url)
        self.scheme = scheme

    def message(self) -> str:
        return f"Unsupported URL scheme ‘{self.scheme}’ in {self.url}"


class InvalidSource(URLError):
    def message(self) -> str:
        return f"Invalid source {self.url}"


class InvalidTarget(URLError):
    def message(self) -> str:
        return f"Invalid target {self.url}"


class MissingBucket(URLError):
    """A storage-backend URL has no bucket segment."""

    def message(self) -> str:
        return f"Target ‘{self.url}’ does not contain bucket name."


class PathNotFound(URLError):
    """Raised by ``Client.stat()`` when nothing exists at the URL."""

    def message(self) -> str:
        return f"‘{self.url}’ does not exist."


class SourceNotFound(PathNotFound):
    def message(self) -> str:
        return f"Source ‘{self.url}’ does not exist."


class TargetNotFound(PathNotFound):
    def message(self) -> str:
        return f"Target directory ‘{self.url}’ does not exist."


class SourceIsNotDir(URLError):
    def message(self) -> str:
        return f"Source ‘{self.url}’ is not a directory."


class SourceIsNotFile(URLError):
    def message(self) -> str:
        return f"Source ‘{self.url}’ is not a regular file."


class TargetIsNotDir(URLError):
    def message(self) -> str:
        return f"Target ‘{self.url}’ is not a directory."


class SourceNotRecursive(URLError):
    def message(self) -> str:
        return f"Source ‘{self.url}’ is not recursive."


class RecursiveTarget(URLError):
    def message(self) -> str:
        return f"Target ‘{self.url}’ cannot be recursive."


# ---------------------------------------------------------------------------
# Per-object mirror errors
# ---------------------------------------------------------------------------

class TypeMismatch(URLError):
    """Source and target exist at the same path with different kinds."""

    def __init__(self, url: str, expected: str, actual: str) -> None:
        super().__init__(url)
        self.expected = expected
        self.actual = actual

    def message(self) -> str:
        return (f"Target ‘{self.url}’ is a {self.actual}, "
                f"expected a {self.expected}.")


class OverwriteNotAllowed(URLError):
    """Target object exists with a different size and force is off."""

    def __init__(self, url: str, source_size: int, target_size: int) -> None:
        super().__init__(url)
        self.source_size = source_size
        self.target_size = target_size

    def message(self) -> str:
        return (f"Overwrite not allowed for ‘{self.url}’ "
                f"(source {self.source_size} bytes, target {self.target_size} bytes). "
                f"Use --force to override.")


class BackendError(URLError):
    """A storage backend call failed for a reason other than not-found."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        super().__init__(url)
        self.cause = cause

    def message(self) -> str:
        return f"Request for ‘{self.url}’ failed: {self.cause}"


class ListingError(URLError):
    """A backend enumeration failed mid-stream."""

    def __init__(self, url: str, cause: BaseException | str) -> None:
        super().__init__(url)
        self.cause = cause

    def message(self) -> str:
        return f"Unable to list ‘{self.url}’: {self.cause}"


class TransferError(MirrorCpError):
    """Copying one object failed."""

    def __init__(self, source: str, target: str, cause: BaseException | str) -> None:
        super().__init__(source, target)
        self.source = source
        self.target = target
        self.cause = cause

    def message(self) -> str:
        return f"Failed to copy ‘{self.source}’ to ‘{self.target}’: {self.cause}"
