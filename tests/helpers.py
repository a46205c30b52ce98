"""Shared test helpers: an in-memory bucket behind a MagicMock s3 client."""
import hashlib

from botocore.exceptions import ClientError

ALL_USERS = "http://acs.amazonaws.com/groups/global/AllUsers"
AUTHENTICATED_USERS = "http://acs.amazonaws.com/groups/global/AuthenticatedUsers"


def etag_of(data: bytes) -> str:
    return f'"{hashlib.md5(data).hexdigest()}"'


def client_error(operation, code="AccessDenied"):
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


def group_grant(uri, permission):
    return {"Grantee": {"Type": "Group", "URI": uri}, "Permission": permission}


def owner_grant():
    return {
        "Grantee": {"Type": "CanonicalUser", "ID": "owner-id"},
        "Permission": "FULL_CONTROL",
    }


def grants_for(access):
    grants = [owner_grant()]
    if access == "public-read":
        grants.append(group_grant(ALL_USERS, "READ"))
    elif access == "public-read-write":
        grants.append(group_grant(ALL_USERS, "READ"))
        grants.append(group_grant(ALL_USERS, "WRITE"))
    elif access == "authenticated-read":
        grants.append(group_grant(AUTHENTICATED_USERS, "READ"))
    return grants


class FakeBucket:
    """Serves list/head/acl calls for a fixed set of objects.

    ``objects`` maps key -> dict(body=bytes, content_type=str|None,
    metadata=dict, access=str). Write calls are left as plain mocks so
    tests can assert on them.
    """

    def __init__(self, client, objects, page_size=1000):
        self.client = client
        self.objects = objects
        self.page_size = page_size
        client.list_objects.side_effect = self.list_objects
        client.head_object.side_effect = self.head_object
        client.get_object_acl.side_effect = self.get_object_acl

    def list_objects(self, Bucket, Prefix="", Marker=""):
        keys = sorted(k for k in self.objects if k.startswith(Prefix) and k > Marker)
        page = keys[:self.page_size]
        return {
            "IsTruncated": len(keys) > self.page_size,
            "Contents": [
                {"Key": k, "ETag": etag_of(self.objects[k]["body"])} for k in page
            ],
        }

    def head_object(self, Bucket, Key):
        obj = self.objects[Key]
        resp = {"ETag": etag_of(obj["body"]), "Metadata": dict(obj.get("metadata") or {})}
        if obj.get("content_type"):
            resp["ContentType"] = obj["content_type"]
        return resp

    def get_object_acl(self, Bucket, Key):
        return {"Grants": grants_for(self.objects[Key].get("access", "private"))}


def remote_object(body, content_type=None, metadata=None, access="private"):
    return {
        "body": body,
        "content_type": content_type,
        "metadata": metadata or {},
        "access": access,
    }
