"""
CloudFront distribution lookup and invalidation batching.
"""
import time
import uuid

from botocore.exceptions import BotoCoreError, ClientError

from ...exceptions import DistributionNotFoundError, InvalidationError
from ...utils.logger import get_logger

log = get_logger(__name__)


def make_caller_reference():
    """Unique reference for one invalidation request."""
    return f"cdnsync-{time.time_ns()}-{uuid.uuid4().hex[:8]}"


class CloudFrontOperations:
    """Resolves distributions by alias and submits invalidation batches.

    Args:
        cloudfront_client: boto3 CloudFront client (or a compatible fake)
    """

    def __init__(self, cloudfront_client):
        self.cloudfront_client = cloudfront_client

    @classmethod
    def from_session(cls, session):
        """Build from a :class:`boto3.Session`."""
        return cls(session.client('cloudfront'))

    def find_distribution_id(self, domain):
        """Return the id of the first distribution whose aliases include *domain*.

        Every page of the distribution list is searched.  When several
        distributions carry the alias the first one listed wins.

        Raises:
            DistributionNotFoundError: no alias matched
            InvalidationError: the listing failed
        """
        try:
            paginator = self.cloudfront_client.get_paginator('list_distributions')
            for page in paginator.paginate():
                items = page.get('DistributionList', {}).get('Items', [])
                for distribution in items:
                    aliases = distribution.get('Aliases', {}).get('Items', [])
                    if domain in aliases:
                        return distribution['Id']
        except (ClientError, BotoCoreError) as e:
            raise InvalidationError(f"Failed to list CloudFront distributions: {e}") from e

        raise DistributionNotFoundError(domain)

    def create_invalidation(self, distribution_id, paths, caller_reference=None):
        """Submit one invalidation batch for *paths*.

        Returns:
            Invalidation id reported by CloudFront

        Raises:
            InvalidationError: the request failed
        """
        paths = list(paths)
        batch = {
            'Paths': {
                'Quantity': len(paths),
                'Items': paths,
            },
            'CallerReference': caller_reference or make_caller_reference(),
        }

        try:
            response = self.cloudfront_client.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch=batch,
            )
        except (ClientError, BotoCoreError) as e:
            raise InvalidationError(
                f"Failed to invalidate {len(paths)} path(s) on {distribution_id}: {e}"
            ) from e

        return response.get('Invalidation', {}).get('Id')

    def invalidate(self, domain, paths):
        """Invalidate *paths* on the distribution serving *domain*.

        No request of any kind is made when *paths* is empty.

        Args:
            domain: Alias (CNAME) of the distribution
            paths: Normalized remote paths, each starting with ``/``

        Returns:
            Tuple of (distribution_id, invalidation_id), or None for no-op
        """
        if not paths:
            log.info("No changed objects, skipping invalidation")
            return None

        distribution_id = self.find_distribution_id(domain)

        log.info("Sending invalidation to distribution %s (%d path(s))",
                 distribution_id, len(paths))
        for path in paths:
            log.debug("  %s", path)

        invalidation_id = self.create_invalidation(distribution_id, paths)
        log.info("Invalidation %s created", invalidation_id)
        return distribution_id, invalidation_id
