"""Tests for distribution lookup and invalidation batching."""

import pytest

from cdnsync.exceptions import DistributionNotFoundError, InvalidationError
from cdnsync.services.aws.cloudfront import CloudFrontOperations, make_caller_reference
from tests.conftest import FakeCloudFrontClient, client_error


class TestInvalidate:
    def test_empty_paths_is_a_no_op(self):
        client = FakeCloudFrontClient()

        assert CloudFrontOperations(client).invalidate("www.example.com", []) is None
        assert client.list_calls == 0
        assert client.invalidations == []

    def test_single_batch_with_every_path(self):
        client = FakeCloudFrontClient()
        paths = ["/a.txt", "/b.txt", "/css/site.css"]

        outcome = CloudFrontOperations(client).invalidate("www.example.com", paths)

        assert outcome == ("E123", "I1")
        (request,) = client.invalidations
        assert request["DistributionId"] == "E123"
        batch = request["InvalidationBatch"]
        assert batch["Paths"] == {"Quantity": 3, "Items": paths}
        assert batch["CallerReference"].startswith("cdnsync-")

    def test_unique_caller_reference_per_request(self):
        client = FakeCloudFrontClient()
        cdn = CloudFrontOperations(client)

        cdn.invalidate("www.example.com", ["/a"])
        cdn.invalidate("www.example.com", ["/a"])

        refs = {r["InvalidationBatch"]["CallerReference"] for r in client.invalidations}
        assert len(refs) == 2
        assert make_caller_reference() != make_caller_reference()


class TestDistributionLookup:
    def test_first_match_wins(self):
        client = FakeCloudFrontClient([[
            ("E_OTHER", ["other.example.com"]),
            ("E_FIRST", ["cdn.example.com", "www.example.com"]),
            ("E_SECOND", ["www.example.com"]),
        ]])
        assert CloudFrontOperations(client).find_distribution_id("www.example.com") == "E_FIRST"

    def test_searches_later_pages(self):
        client = FakeCloudFrontClient([
            [("E1", ["a.example.com"]), ("E2", [])],
            [("E3", ["www.example.com"])],
        ])
        assert CloudFrontOperations(client).find_distribution_id("www.example.com") == "E3"

    def test_no_match_is_fatal_and_sends_nothing(self):
        client = FakeCloudFrontClient([[("E1", ["a.example.com"])]])

        with pytest.raises(DistributionNotFoundError) as excinfo:
            CloudFrontOperations(client).invalidate("www.example.com", ["/a.txt"])

        assert excinfo.value.domain == "www.example.com"
        assert client.invalidations == []

    def test_empty_distribution_list(self):
        client = FakeCloudFrontClient([[]])
        with pytest.raises(DistributionNotFoundError):
            CloudFrontOperations(client).find_distribution_id("www.example.com")

    def test_listing_error_is_wrapped(self):
        client = FakeCloudFrontClient()
        client.list_error = client_error("AccessDenied", "ListDistributions")
        # The fake yields its pages before failing; make the match impossible
        client.pages = [[("E1", ["nope.example.com"])]]

        with pytest.raises(InvalidationError):
            CloudFrontOperations(client).find_distribution_id("www.example.com")

    def test_create_error_is_wrapped(self):
        client = FakeCloudFrontClient()
        client.create_error = client_error("TooManyInvalidationsInProgress", "CreateInvalidation")

        with pytest.raises(InvalidationError) as excinfo:
            CloudFrontOperations(client).invalidate("www.example.com", ["/a"])
        assert not isinstance(excinfo.value, DistributionNotFoundError)
