"""Tests for the Upload / UpdateMetadata / Skip decision."""
import io

import pytest

from bucketmirror.models.objects import ObjectDescriptor, SyncAction
from bucketmirror.models.state import RemoteInventory
from bucketmirror.services.aws.operations import S3Operations
from bucketmirror.services.change_detector import (
    ChangeDetector,
    content_md5,
    content_type_changed,
    metadata_changed,
    previous_access,
)
from bucketmirror.utils.errors import RemoteStateError
from tests.helpers import (
    ALL_USERS,
    AUTHENTICATED_USERS,
    client_error,
    etag_of,
    group_grant,
    owner_grant,
    remote_object,
)

BODY = b"body { color: red; }"


def descriptor(content_type="text/css", access="private", metadata=None):
    return ObjectDescriptor(
        relative_path="style.css",
        source_path="/src/style.css",
        key="style.css",
        access=access,
        content_type=content_type,
        metadata=metadata or {},
    )


def inventory_of(objects):
    inventory = RemoteInventory()
    for key, obj in objects.items():
        inventory.add(key, etag_of(obj["body"]))
    return inventory


@pytest.fixture
def detector(s3_client):
    return ChangeDetector(S3Operations("bucket", s3_client))


class TestContentMd5:
    def test_matches_s3_etag_format(self):
        assert content_md5(io.BytesIO(BODY)) == etag_of(BODY)

    def test_streams_large_input(self):
        data = b"x" * (3 * 64 * 1024 + 17)
        assert content_md5(io.BytesIO(data)) == etag_of(data)


class TestPreviousAccess:
    def test_no_group_grant_is_private(self):
        assert previous_access([owner_grant()]) == "private"
        assert previous_access([]) == "private"

    def test_all_users_read(self):
        assert previous_access([owner_grant(), group_grant(ALL_USERS, "READ")]) == "public-read"

    def test_all_users_write_beats_read_in_any_order(self):
        grants = [group_grant(ALL_USERS, "WRITE"), group_grant(ALL_USERS, "READ")]
        assert previous_access(grants) == "public-read-write"
        assert previous_access(list(reversed(grants))) == "public-read-write"

    def test_authenticated_users_read(self):
        assert previous_access([group_grant(AUTHENTICATED_USERS, "READ")]) == "authenticated-read"

    def test_public_beats_authenticated(self):
        grants = [group_grant(AUTHENTICATED_USERS, "READ"), group_grant(ALL_USERS, "READ")]
        assert previous_access(grants) == "public-read"


class TestContentTypeChanged:
    def test_unset_to_set(self):
        assert content_type_changed(None, "text/css")

    def test_unset_to_unset(self):
        assert not content_type_changed(None, "")

    def test_empty_desired_accepts_backend_default(self):
        assert not content_type_changed("binary/octet-stream", "")

    def test_differs(self):
        assert content_type_changed("text/plain", "text/css")

    def test_same(self):
        assert not content_type_changed("text/css", "text/css")


class TestMetadataChanged:
    def test_count_differs(self):
        assert metadata_changed({"a": "1", "b": "2"}, {"a": "1"})

    def test_value_differs(self):
        assert metadata_changed({"a": "1"}, {"a": "2"})

    def test_key_missing_remotely_is_ignored(self):
        assert not metadata_changed({"other": "1"}, {"a": "1"})

    def test_remote_keys_are_lowercased(self):
        assert not metadata_changed({"cache-control": "max-age=60"}, {"Cache-Control": "max-age=60"})

    def test_same(self):
        assert not metadata_changed({"a": "1"}, {"a": "1"})


class TestDecide:
    def test_missing_remote_uploads_without_reading(self, detector, s3_client):
        handle = io.BytesIO(BODY)
        action = detector.decide(descriptor(), handle, RemoteInventory())

        assert action is SyncAction.UPLOAD
        assert handle.tell() == 0
        s3_client.head_object.assert_not_called()

    def test_changed_bytes_upload_and_rewind(self, detector, s3_client, fake_bucket):
        objects = {"style.css": remote_object(b"old bytes", content_type="text/css")}
        fake_bucket(objects)
        handle = io.BytesIO(BODY)

        action = detector.decide(descriptor(), handle, inventory_of(objects))

        assert action is SyncAction.UPLOAD
        assert handle.tell() == 0
        s3_client.head_object.assert_not_called()
        s3_client.get_object_acl.assert_not_called()

    def test_unchanged_skips(self, detector, s3_client, fake_bucket):
        objects = {"style.css": remote_object(BODY, content_type="text/css")}
        fake_bucket(objects)

        action = detector.decide(descriptor(), io.BytesIO(BODY), inventory_of(objects))

        assert action is SyncAction.SKIP
        s3_client.head_object.assert_called_once_with(Bucket="bucket", Key="style.css")
        s3_client.get_object_acl.assert_called_once_with(Bucket="bucket", Key="style.css")

    def test_content_type_change_updates_metadata(self, detector, fake_bucket):
        objects = {"style.css": remote_object(BODY)}
        fake_bucket(objects)

        action = detector.decide(descriptor(), io.BytesIO(BODY), inventory_of(objects))

        assert action is SyncAction.UPDATE_METADATA

    def test_metadata_change_updates_metadata(self, detector, fake_bucket):
        objects = {"style.css": remote_object(BODY, content_type="text/css", metadata={"a": "1"})}
        fake_bucket(objects)

        action = detector.decide(
            descriptor(metadata={"a": "2"}), io.BytesIO(BODY), inventory_of(objects)
        )

        assert action is SyncAction.UPDATE_METADATA

    def test_acl_change_updates_metadata(self, detector, fake_bucket):
        objects = {"style.css": remote_object(BODY, content_type="text/css", access="private")}
        fake_bucket(objects)

        action = detector.decide(
            descriptor(access="public-read"), io.BytesIO(BODY), inventory_of(objects)
        )

        assert action is SyncAction.UPDATE_METADATA

    def test_matching_public_acl_skips(self, detector, fake_bucket):
        objects = {"style.css": remote_object(BODY, content_type="text/css", access="public-read")}
        fake_bucket(objects)

        action = detector.decide(
            descriptor(access="public-read"), io.BytesIO(BODY), inventory_of(objects)
        )

        assert action is SyncAction.SKIP

    def test_head_failure_is_fatal(self, detector, s3_client):
        inventory = RemoteInventory()
        inventory.add("style.css", etag_of(BODY))
        s3_client.head_object.side_effect = client_error("HeadObject")

        with pytest.raises(RemoteStateError) as excinfo:
            detector.decide(descriptor(), io.BytesIO(BODY), inventory)

        assert excinfo.value.kind == "remote_state"
        assert excinfo.value.original is excinfo.value.__cause__

    def test_listing_without_etag_reads_headers_once(self, s3_client, fake_bucket):
        objects = {"style.css": remote_object(BODY, content_type="text/css")}
        fake_bucket(objects)
        inventory = RemoteInventory()
        inventory.add("style.css")
        detector = ChangeDetector(S3Operations("bucket", s3_client))

        action = detector.decide(descriptor(), io.BytesIO(BODY), inventory)

        assert action is SyncAction.SKIP
        assert s3_client.head_object.call_count == 1
