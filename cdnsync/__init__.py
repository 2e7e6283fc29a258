"""
cdnsync — incremental S3 upload with CloudFront invalidation.

Walks a local directory, uploads only the files whose content changed
since the last run, and invalidates the CDN paths that were touched.
"""

__version__ = "1.0.0"
