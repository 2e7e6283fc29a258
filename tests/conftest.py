"""Pytest configuration and shared fixtures."""

import hashlib
import threading
from pathlib import Path

import pytest
from botocore.exceptions import ClientError

from cdnsync.services.aws import CloudFrontOperations, S3Operations

EMPTY_MD5 = "d41d8cd98f00b204e9800998ecf8427e"


def md5_hex(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


def client_error(code="AccessDenied", operation="PutObject"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class FakePaginator:
    """Mimics a boto3 paginator over a precomputed list of pages."""

    def __init__(self, pages, error=None):
        self._pages = pages
        self._error = error
        self.calls = []

    def paginate(self, **kwargs):
        self.calls.append(kwargs)
        for page in self._pages:
            yield page
        if self._error is not None:
            raise self._error


class FakeS3Client:
    """In-memory S3 bucket supporting list_objects_v2 pages and put_object.

    Args:
        objects: Initial {key: body bytes}
        page_size: Objects per listing page
    """

    def __init__(self, objects=None, page_size=2):
        self.objects = dict(objects or {})
        self.page_size = page_size
        self.put_calls = []
        self.fail_keys = {}
        self.list_error = None
        self._lock = threading.Lock()

    def etag(self, key):
        return f'"{md5_hex(self.objects[key])}"'

    def get_paginator(self, name):
        assert name == "list_objects_v2"
        keys = sorted(self.objects)
        pages = []
        for i in range(0, len(keys), self.page_size):
            chunk = keys[i:i + self.page_size]
            pages.append({"Contents": [{"Key": k, "ETag": self.etag(k)} for k in chunk]})
        if not pages:
            pages = [{"KeyCount": 0}]
        return FakePaginator(pages, error=self.list_error)

    def put_object(self, Body, Bucket, Key, **kwargs):
        data = Body.read()
        with self._lock:
            remaining = self.fail_keys.get(Key, 0)
            if remaining:
                self.fail_keys[Key] = remaining - 1
                raise client_error()
            self.objects[Key] = data
            self.put_calls.append(dict(Bucket=Bucket, Key=Key, Body=data, **kwargs))
        return {"ETag": self.etag(Key)}

    @property
    def uploaded_keys(self):
        return [call["Key"] for call in self.put_calls]


class FakeCloudFrontClient:
    """CloudFront fake with paginated distributions and recorded invalidations.

    Args:
        pages: List of lists of (distribution_id, [aliases])
    """

    def __init__(self, pages=None):
        self.pages = pages if pages is not None else [[("E123", ["www.example.com"])]]
        self.invalidations = []
        self.list_calls = 0
        self.list_error = None
        self.create_error = None

    def get_paginator(self, name):
        assert name == "list_distributions"
        self.list_calls += 1
        pages = []
        for page in self.pages:
            items = []
            for dist_id, aliases in page:
                alias_block = {"Quantity": len(aliases)}
                if aliases:
                    alias_block["Items"] = list(aliases)
                items.append({"Id": dist_id, "Aliases": alias_block})
            dist_list = {"Quantity": len(items)}
            if items:
                dist_list["Items"] = items
            pages.append({"DistributionList": dist_list})
        return FakePaginator(pages, error=self.list_error)

    def create_invalidation(self, DistributionId, InvalidationBatch):
        if self.create_error is not None:
            raise self.create_error
        self.invalidations.append({
            "DistributionId": DistributionId,
            "InvalidationBatch": InvalidationBatch,
        })
        return {"Invalidation": {"Id": f"I{len(self.invalidations)}", "Status": "InProgress"}}


class FakeSession:
    """Stand-in for boto3.Session handing out the fakes above."""

    region_name = "us-east-1"

    def __init__(self, s3=None, cloudfront=None):
        self.s3 = s3 or FakeS3Client()
        self.cloudfront = cloudfront or FakeCloudFrontClient()
        self.client_kwargs = {}

    def client(self, name, **kwargs):
        self.client_kwargs[name] = kwargs
        return {"s3": self.s3, "cloudfront": self.cloudfront}[name]


def make_tree(root: Path, files: dict) -> Path:
    """Create files under *root*. Values are bytes or str."""
    for rel_path, content in files.items():
        full = root / rel_path
        full.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode()
        full.write_bytes(content)
    return root


@pytest.fixture
def sync_root(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def temp_area(tmp_path, monkeypatch):
    """Redirect tempfile output so leaked compression files can be counted."""
    import tempfile

    area = tmp_path / "tmp"
    area.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(area))
    return area


@pytest.fixture
def s3_client():
    return FakeS3Client()


@pytest.fixture
def cloudfront_client():
    return FakeCloudFrontClient()


@pytest.fixture
def store(s3_client):
    return S3Operations(s3_client, "www.example.com")


@pytest.fixture
def cdn(cloudfront_client):
    return CloudFrontOperations(cloudfront_client)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config.json at a throwaway location."""
    path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("CDNSYNC_CONFIG", str(path))
    return path
