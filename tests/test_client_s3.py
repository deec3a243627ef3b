"""Tests for the S3 client against a mocked boto3 API."""

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from mirrorcp.client import ContentKind, new_client
from mirrorcp.client.s3 import S3Client
from mirrorcp.config import Config, HostConfig
from mirrorcp.exceptions import BackendError, InvalidTarget, ListingError, MissingBucket, PathNotFound
from mirrorcp.url import ObjectURL

WHEN = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _error(code, op="HeadObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, op)


def _client(url, api=None):
    return S3Client(ObjectURL.parse(url), api=api or MagicMock())


def _pages(api, *pages):
    api.get_paginator.return_value.paginate.return_value = list(pages)


class TestNewApi:
    def test_endpoint_and_credentials(self):
        config = Config(hosts={"localhost:*": HostConfig("ak", "sk", "eu-west-1")})
        with patch("mirrorcp.client.s3.boto3.client") as mk:
            client = new_client("http://localhost:9000/bucket/key", config)
        assert isinstance(client, S3Client)
        args, kwargs = mk.call_args
        assert args == ("s3",)
        assert kwargs["endpoint_url"] == "http://localhost:9000"
        assert kwargs["region_name"] == "eu-west-1"
        assert kwargs["aws_access_key_id"] == "ak"
        assert kwargs["aws_secret_access_key"] == "sk"
        assert kwargs["config"].signature_version == "s3v4"

    def test_anonymous_defaults(self):
        with patch("mirrorcp.client.s3.boto3.client") as mk:
            new_client("https://play.min.io/bucket")
        kwargs = mk.call_args.kwargs
        assert kwargs["region_name"] == "us-east-1"
        assert "aws_access_key_id" not in kwargs


class TestStat:
    def test_object(self):
        api = MagicMock()
        api.head_object.return_value = {"ContentLength": 5, "LastModified": WHEN}
        c = _client("https://h/bkt/a.txt", api).stat()
        assert c.kind is ContentKind.FILE
        assert c.size == 5
        assert c.time == WHEN
        api.head_object.assert_called_once_with(Bucket="bkt", Key="a.txt")

    def test_prefix_is_directory(self):
        api = MagicMock()
        api.head_object.side_effect = _error("404")
        api.list_objects_v2.return_value = {"KeyCount": 1}
        c = _client("https://h/bkt/dir", api).stat()
        assert c.is_dir
        api.list_objects_v2.assert_called_once_with(Bucket="bkt", Prefix="dir/", MaxKeys=1)

    def test_missing(self):
        api = MagicMock()
        api.head_object.side_effect = _error("404")
        api.list_objects_v2.return_value = {"KeyCount": 0}
        with pytest.raises(PathNotFound):
            _client("https://h/bkt/nope", api).stat()

    def test_bucket(self):
        api = MagicMock()
        assert _client("https://h/bkt", api).stat().is_dir
        api.head_bucket.assert_called_once_with(Bucket="bkt")

    def test_missing_bucket(self):
        api = MagicMock()
        api.head_bucket.side_effect = _error("NoSuchBucket", "HeadBucket")
        with pytest.raises(PathNotFound):
            _client("https://h/bkt/", api).stat()

    def test_other_error(self):
        api = MagicMock()
        api.head_object.side_effect = _error("AccessDenied")
        with pytest.raises(BackendError) as exc_info:
            _client("https://h/bkt/a.txt", api).stat()
        assert "AccessDenied" in str(exc_info.value)


class TestList:
    def test_recursive(self):
        api = MagicMock()
        _pages(api,
               {"Contents": [{"Key": "dir/", "Size": 0},
                             {"Key": "dir/a.txt", "Size": 5, "LastModified": WHEN}]},
               {"Contents": [{"Key": "dir/sub/b.txt", "Size": 3}]})
        events = list(_client("https://h/bkt/dir/", api).list(recursive=True))
        assert [e.content.url for e in events] == [
            "https://h/bkt/dir/a.txt",
            "https://h/bkt/dir/sub/b.txt",
        ]
        assert [e.content.size for e in events] == [5, 3]
        api.get_paginator.return_value.paginate.assert_called_once_with(Bucket="bkt", Prefix="dir/")
        api.head_object.assert_not_called()

    def test_not_recursive_uses_delimiter(self):
        api = MagicMock()
        _pages(api, {
            "Contents": [{"Key": "z.txt", "Size": 1}],
            "CommonPrefixes": [{"Prefix": "photos/"}],
        })
        events = list(_client("https://h/bkt", api).list(recursive=False))
        assert [(e.content.url, e.content.kind) for e in events] == [
            ("https://h/bkt/photos/", ContentKind.DIRECTORY),
            ("https://h/bkt/z.txt", ContentKind.FILE),
        ]
        api.get_paginator.return_value.paginate.assert_called_once_with(
            Bucket="bkt", Prefix="", Delimiter="/",
        )

    def test_object_lists_itself(self):
        api = MagicMock()
        api.head_object.return_value = {"ContentLength": 7}
        events = list(_client("https://h/bkt/f.bin", api).list(recursive=True))
        assert len(events) == 1
        assert events[0].content.url == "https://h/bkt/f.bin"
        assert events[0].content.size == 7

    def test_buckets(self):
        api = MagicMock()
        api.list_buckets.return_value = {"Buckets": [{"Name": "zeta"}, {"Name": "alpha"}]}
        events = list(_client("https://h", api).list())
        assert [e.content.url for e in events] == ["https://h/alpha/", "https://h/zeta/"]
        assert all(e.content.is_dir for e in events)

    def test_error_becomes_event(self):
        api = MagicMock()
        api.get_paginator.return_value.paginate.side_effect = _error("AccessDenied", "ListObjectsV2")
        events = list(_client("https://h/bkt/", api).list(recursive=True))
        assert len(events) == 1
        assert isinstance(events[0].error, ListingError)
        assert events[0].content is None


class TestReadWrite:
    def test_get(self):
        api = MagicMock()
        body = io.BytesIO(b"hello")
        api.get_object.return_value = {"Body": body, "ContentLength": 5}
        reader, size = _client("https://h/bkt/a.txt", api).get()
        assert reader is body
        assert size == 5

    def test_get_missing(self):
        api = MagicMock()
        api.get_object.side_effect = _error("NoSuchKey", "GetObject")
        with pytest.raises(PathNotFound):
            _client("https://h/bkt/a.txt", api).get()

    def test_put(self):
        api = MagicMock()
        data = io.BytesIO(b"abc")
        _client("https://h/bkt/dir/b.txt", api).put(3, data)
        api.put_object.assert_called_once_with(
            Bucket="bkt", Key="dir/b.txt", Body=data, ContentLength=3,
        )

    def test_put_needs_key(self):
        with pytest.raises(InvalidTarget):
            _client("https://h/bkt/").put(0, io.BytesIO())
        with pytest.raises(MissingBucket):
            _client("https://h/").put(0, io.BytesIO())

    def test_make_bucket(self):
        api = MagicMock()
        _client("https://h/newbucket", api).make_bucket()
        api.create_bucket.assert_called_once_with(Bucket="newbucket")

    def test_make_bucket_rejects_key(self):
        with pytest.raises(InvalidTarget):
            _client("https://h/bkt/key").make_bucket()
