"""S3-compatible object storage client (boto3).

URLs look like ``https://host[:port]/bucket/key``.  Path-style
addressing is used so that any S3-compatible endpoint works, not only
AWS virtual-hosted buckets.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, BinaryIO, Iterator

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import (
    BackendError,
    InvalidTarget,
    ListingError,
    MissingBucket,
    PathNotFound,
)
from ..url import ObjectURL
from ._types import Content, ContentEvent, ContentKind

if TYPE_CHECKING:
    from ..config import HostConfig

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NoSuchBucket", "NotFound"}
_DEFAULT_REGION = "us-east-1"


def _is_not_found(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES


def new_api(url: ObjectURL, host_config: HostConfig | None = None):
    """Create a boto3 S3 client for the endpoint of *url*."""
    kwargs = {}
    region = _DEFAULT_REGION
    if host_config is not None:
        if host_config.access_key:
            kwargs["aws_access_key_id"] = host_config.access_key
            kwargs["aws_secret_access_key"] = host_config.secret_key
        region = host_config.region or region
    return boto3.client(
        "s3",
        endpoint_url=url.endpoint,
        region_name=region,
        config=BotoConfig(
            signature_version="s3v4",
            s3={"addressing_style": "path"},
        ),
        **kwargs,
    )


class S3Client:
    """Client for a bucket, prefix, or object on an S3-compatible endpoint."""

    def __init__(self, url: ObjectURL, host_config: HostConfig | None = None, *, api=None) -> None:
        self.url = url
        self._bucket, self._key = url.bucket_and_key()
        self._api = api if api is not None else new_api(url, host_config)

    def __repr__(self) -> str:
        return f"S3Client({str(self.url)!r})"

    def _object_url(self, bucket: str, key: str = "") -> str:
        return str(self.url.with_path(f"/{bucket}/{key}"))

    # ------------------------------------------------------------------
    def stat(self) -> Content:
        url = str(self.url)
        try:
            if not self._bucket:
                self._api.list_buckets()
                return Content(url=url, kind=ContentKind.DIRECTORY)
            if not self._key:
                self._api.head_bucket(Bucket=self._bucket)
                return Content(url=url, kind=ContentKind.DIRECTORY)
            if not self._key.endswith("/"):
                try:
                    meta = self._api.head_object(Bucket=self._bucket, Key=self._key)
                except ClientError as exc:
                    if not _is_not_found(exc):
                        raise
                else:
                    return Content(
                        url=url,
                        kind=ContentKind.FILE,
                        size=meta["ContentLength"],
                        time=meta.get("LastModified"),
                    )
            # No object by that name: it is a directory if anything lives below it.
            prefix = self._key.rstrip("/") + "/"
            response = self._api.list_objects_v2(
                Bucket=self._bucket, Prefix=prefix, MaxKeys=1,
            )
        except ClientError as exc:
            if _is_not_found(exc):
                raise PathNotFound(url) from None
            raise BackendError(url, exc) from exc
        except BotoCoreError as exc:
            raise BackendError(url, exc) from exc
        if response.get("KeyCount", 0) or response.get("Contents"):
            return Content(url=url, kind=ContentKind.DIRECTORY)
        raise PathNotFound(url)

    # ------------------------------------------------------------------
    def list(self, recursive: bool = False) -> Iterator[ContentEvent]:
        try:
            if not self._bucket:
                yield from self._list_buckets(recursive)
                return
            if self._key and not self._key.endswith("/"):
                try:
                    meta = self._api.head_object(Bucket=self._bucket, Key=self._key)
                except ClientError as exc:
                    if not _is_not_found(exc):
                        raise
                else:
                    yield ContentEvent(content=Content(
                        url=str(self.url),
                        kind=ContentKind.FILE,
                        size=meta["ContentLength"],
                        time=meta.get("LastModified"),
                    ))
                    return
            prefix = self._key.rstrip("/") + "/" if self._key else ""
            logger.debug("listing s3 bucket=%s prefix=%s (recursive=%s)",
                         self._bucket, prefix, recursive)
            yield from self._list_objects(self._bucket, prefix, recursive)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("unable to list %s: %s", self.url, exc)
            yield ContentEvent(error=ListingError(str(self.url), exc))

    def _list_buckets(self, recursive: bool) -> Iterator[ContentEvent]:
        response = self._api.list_buckets()
        for name in sorted(b["Name"] for b in response.get("Buckets", [])):
            yield ContentEvent(content=Content(
                url=self._object_url(name),
                kind=ContentKind.DIRECTORY,
            ))
            if recursive:
                yield from self._list_objects(name, "", True)

    def _list_objects(self, bucket: str, prefix: str, recursive: bool) -> Iterator[ContentEvent]:
        paginator = self._api.get_paginator("list_objects_v2")
        kwargs = {"Bucket": bucket, "Prefix": prefix}
        if not recursive:
            kwargs["Delimiter"] = "/"
        for page in paginator.paginate(**kwargs):
            items = []
            for obj in page.get("Contents", []):
                key = obj["Key"]
                if key == prefix:
                    continue
                kind = ContentKind.DIRECTORY if key.endswith("/") else ContentKind.FILE
                items.append(Content(
                    url=self._object_url(bucket, key),
                    kind=kind,
                    size=obj.get("Size", 0) if kind is ContentKind.FILE else 0,
                    time=obj.get("LastModified"),
                ))
            for common in page.get("CommonPrefixes", []):
                items.append(Content(
                    url=self._object_url(bucket, common["Prefix"]),
                    kind=ContentKind.DIRECTORY,
                ))
            if not recursive:
                items.sort(key=lambda c: c.url)
            for content in items:
                yield ContentEvent(content=content)

    # ------------------------------------------------------------------
    def get(self) -> tuple[BinaryIO, int]:
        url = str(self.url)
        if not self._key:
            raise InvalidTarget(url)
        try:
            response = self._api.get_object(Bucket=self._bucket, Key=self._key)
        except ClientError as exc:
            if _is_not_found(exc):
                raise PathNotFound(url) from None
            raise BackendError(url, exc) from exc
        return response["Body"], response["ContentLength"]

    def put(self, size: int, data: BinaryIO) -> None:
        url = str(self.url)
        if not self._bucket:
            raise MissingBucket(url)
        if not self._key or self._key.endswith("/"):
            raise InvalidTarget(url)
        try:
            self._api.put_object(
                Bucket=self._bucket, Key=self._key, Body=data, ContentLength=size,
            )
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(url, exc) from exc

    def make_bucket(self) -> None:
        url = str(self.url)
        if not self._bucket:
            raise MissingBucket(url)
        if self._key.strip("/"):
            raise InvalidTarget(url)
        try:
            self._api.create_bucket(Bucket=self._bucket)
        except (ClientError, BotoCoreError) as exc:
            raise BackendError(url, exc) from exc
