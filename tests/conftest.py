from unittest.mock import MagicMock

import pytest

from tests.helpers import FakeBucket


@pytest.fixture
def s3_client():
    return MagicMock()


@pytest.fixture
def fake_bucket(s3_client):
    def _make(objects, page_size=1000):
        return FakeBucket(s3_client, objects, page_size=page_size)
    return _make


@pytest.fixture
def source_tree(tmp_path):
    """Create files under a fresh source directory.

    Usage: ``root = source_tree({"index.html": b"<html>"})``
    """
    root = tmp_path / "site"
    root.mkdir()

    def _make(files):
        for rel, data in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return str(root)
    return _make
