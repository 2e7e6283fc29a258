"""AWS utilities sub-package.

Contains AWS session management.
"""
from .aws_utils import create_boto3_session

__all__ = [
    'create_boto3_session',
]
