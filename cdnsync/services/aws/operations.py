"""
Low-level S3 primitive operations.

Provides the object-store side of a sync run: the paginated inventory
listing and the single-request object upload.
"""
from types import MappingProxyType

from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ...exceptions import InventoryError
from ...utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_RETRIES = 2


def strip_etag(etag):
    """Drop exactly one leading and one trailing character (the quotes)."""
    return etag[1:-1]


class S3Operations:
    """Thin wrapper over an S3 client bound to one bucket.

    Args:
        s3_client: boto3 S3 client (or a compatible fake)
        bucket_name: S3 bucket name
        cache_control: ``Cache-Control`` sent with every upload
        acl: Canned ACL sent with every upload
    """

    def __init__(self, s3_client, bucket_name, cache_control="max-age=900", acl="public-read"):
        self.s3_client = s3_client
        self.bucket_name = bucket_name
        self.cache_control = cache_control
        self.acl = acl

    @classmethod
    def from_session(cls, session, bucket_name, retries=DEFAULT_RETRIES, **kwargs):
        """Build from a :class:`boto3.Session`.

        Failed requests are retried by botocore itself (standard mode),
        *retries* times after the first attempt.
        """
        config = BotoConfig(retries={"max_attempts": retries, "mode": "standard"})
        return cls(session.client('s3', config=config), bucket_name, **kwargs)

    def fetch_inventory(self):
        """List every object in the bucket with its content digest.

        Drains all pages before returning.  The result is frozen: workers
        read it concurrently without locking.

        Returns:
            Read-only mapping of object key to ETag (quotes stripped)

        Raises:
            InventoryError: any listing failure; the run cannot decide
                what to upload without a complete baseline
        """
        inventory = {}

        try:
            paginator = self.s3_client.get_paginator('list_objects_v2')
            for page in paginator.paginate(Bucket=self.bucket_name):
                for obj in page.get('Contents', []):
                    inventory[obj['Key']] = strip_etag(obj['ETag'])
        except (ClientError, BotoCoreError) as e:
            raise InventoryError(self.bucket_name, e) from e

        log.info("Found %d object(s) in s3://%s", len(inventory), self.bucket_name)
        return MappingProxyType(inventory)

    def put_object(self, key, source_path, content_type, content_encoding=None):
        """Upload one file in a single request.

        A single ``PutObject`` keeps the resulting ETag equal to the MD5 of
        the body, which is what the next run compares against.

        Args:
            key: Object key
            source_path: File holding the exact bytes to upload
            content_type: ``Content-Type`` metadata
            content_encoding: ``Content-Encoding`` metadata, omitted when None

        Raises:
            ClientError, BotoCoreError: the upload failed
            OSError: the source file could not be opened
        """
        params = {
            'Bucket': self.bucket_name,
            'Key': key,
            'CacheControl': self.cache_control,
            'ContentType': content_type,
            'ACL': self.acl,
        }
        if content_encoding:
            params['ContentEncoding'] = content_encoding

        with open(source_path, 'rb') as body:
            self.s3_client.put_object(Body=body, **params)
