"""AWS utilities for session management.

Builds the boto3 session and ``s3`` client a mirror run talks to.
"""
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError

from ..errors import ConfigError


def create_boto3_session(
    region_name: str,
    access_key: Optional[str] = None,
    secret_key: Optional[str] = None,
    profile_name: Optional[str] = None,
):
    """Create a boto3 session.

    Static credentials win when both key and secret are given, then a
    named profile; otherwise boto3's default credential chain applies.

    Args:
        region_name: AWS region
        access_key: Optional access key ID
        secret_key: Optional secret access key
        profile_name: Optional AWS CLI profile name

    Returns:
        boto3.Session object

    Example:
        >>> session = create_boto3_session('us-west-2', profile_name='deploy')
        >>> s3 = session.client('s3')
    """
    if access_key and secret_key:
        return boto3.Session(
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region_name,
        )
    if profile_name:
        return boto3.Session(profile_name=profile_name, region_name=region_name)
    return boto3.Session(region_name=region_name)


def create_s3_client(config):
    """Create the ``s3`` client described by a :class:`SyncConfig`.

    Raises:
        ConfigError: If boto3 rejects the credentials setup (e.g. an
            unknown profile)
    """
    try:
        session = create_boto3_session(
            config.region,
            access_key=config.access_key,
            secret_key=config.secret_key,
            profile_name=config.profile,
        )
        if config.endpoint_url:
            return session.client('s3', endpoint_url=config.endpoint_url)
        return session.client('s3')
    except BotoCoreError as e:
        raise ConfigError("Could not initialize AWS session", original=e) from e
