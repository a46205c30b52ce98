"""
Low-level S3 primitive operations.

Provides the base class for all S3 interactions made by a mirror run:
listing pages, reading object headers and grants, writing objects,
copying in place, and deleting. Every call is synchronous and is made
exactly once; backend failures are re-raised tagged with their kind.
"""
from botocore.exceptions import BotoCoreError, ClientError

from ...utils.errors import ListingError, RemoteStateError, WriteError

BACKEND_ERRORS = (ClientError, BotoCoreError)


class S3Operations:
    """Base class providing primitive S3 operations.

    Args:
        bucket_name: S3 bucket name
        s3_client: boto3 ``s3`` client
    """

    def __init__(self, bucket_name, s3_client):
        self.bucket_name = bucket_name
        self.s3_client = s3_client

    def list_page(self, prefix, marker=None):
        """Fetch one page of keys under *prefix*.

        Args:
            prefix: Key prefix ('' for the whole bucket)
            marker: Key to continue listing after

        Returns:
            Raw ``ListObjects`` response

        Raises:
            ListingError: On any backend failure
        """
        params = {'Bucket': self.bucket_name}
        if prefix:
            params['Prefix'] = prefix
        if marker:
            params['Marker'] = marker

        try:
            return self.s3_client.list_objects(**params)
        except BACKEND_ERRORS as e:
            raise ListingError(
                f"Failed to list s3://{self.bucket_name}/{prefix}", original=e
            ) from e

    def head_object(self, key):
        """Fetch headers of an existing object.

        Raises:
            RemoteStateError: On any backend failure
        """
        try:
            return self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except BACKEND_ERRORS as e:
            raise RemoteStateError(f"Failed to read headers of \"{key}\"", original=e) from e

    def get_object_acl(self, key):
        """Fetch the access grants of an existing object.

        Raises:
            RemoteStateError: On any backend failure
        """
        try:
            return self.s3_client.get_object_acl(Bucket=self.bucket_name, Key=key)
        except BACKEND_ERRORS as e:
            raise RemoteStateError(f"Failed to read grants of \"{key}\"", original=e) from e

    def put_object(self, key, body, acl, content_type=None, metadata=None,
                   redirect_location=None):
        """Create or fully replace an object.

        Args:
            key: Target object key
            body: Readable binary file object or bytes
            acl: Canned ACL name
            content_type: Content-Type header (omitted when empty)
            metadata: User metadata mapping
            redirect_location: Website redirect location, if any

        Raises:
            WriteError: On any backend failure
        """
        params = {
            'Bucket': self.bucket_name,
            'Key': key,
            'Body': body,
            'ACL': acl,
        }
        if content_type:
            params['ContentType'] = content_type
        if metadata:
            params['Metadata'] = dict(metadata)
        if redirect_location:
            params['WebsiteRedirectLocation'] = redirect_location

        try:
            return self.s3_client.put_object(**params)
        except BACKEND_ERRORS as e:
            raise WriteError(f"Failed to write \"{key}\"", original=e) from e

    def copy_in_place(self, key, acl, content_type=None, metadata=None):
        """Rewrite an object's headers without transferring its bytes.

        Issues a copy whose source and destination are the same key,
        with the ``REPLACE`` metadata directive.

        Raises:
            WriteError: On any backend failure
        """
        params = {
            'Bucket': self.bucket_name,
            'Key': key,
            'CopySource': {'Bucket': self.bucket_name, 'Key': key},
            'ACL': acl,
            'Metadata': dict(metadata or {}),
            'MetadataDirective': 'REPLACE',
        }
        if content_type:
            params['ContentType'] = content_type

        try:
            return self.s3_client.copy_object(**params)
        except BACKEND_ERRORS as e:
            raise WriteError(f"Failed to update metadata of \"{key}\"", original=e) from e

    def delete_object(self, key):
        """Delete an object.

        Raises:
            WriteError: On any backend failure
        """
        try:
            return self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except BACKEND_ERRORS as e:
            raise WriteError(f"Failed to delete \"{key}\"", original=e) from e
