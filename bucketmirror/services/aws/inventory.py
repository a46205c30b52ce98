"""
Remote inventory listing.

Pages through ``ListObjects`` under the target prefix, continuing from
the last key collected so far until the backend stops reporting
truncated results.
"""
from ...models.state import RemoteInventory
from ...utils.errors import ListingError
from ...utils.logger import get_logger
from .operations import S3Operations

log = get_logger(__name__)


class InventoryLister(S3Operations):
    """Extends :class:`S3Operations` with full-prefix listing."""

    def list_inventory(self, prefix):
        """Collect every key under *prefix*.

        Args:
            prefix: Key prefix to list ('' lists the whole bucket)

        Returns:
            :class:`RemoteInventory` in listing order

        Raises:
            ListingError: On any backend failure; no partial inventory
                is returned
        """
        inventory = RemoteInventory()
        marker = None
        pages = 0

        while True:
            resp = self.list_page(prefix, marker)
            pages += 1

            contents = resp.get('Contents', [])
            for item in contents:
                inventory.add(item['Key'], item.get('ETag'))

            if not resp.get('IsTruncated'):
                break

            next_marker = contents[-1]['Key'] if contents else None
            if not next_marker or next_marker == marker:
                raise ListingError(
                    f"Listing of s3://{self.bucket_name}/{prefix} is truncated "
                    f"but returned no new keys"
                )
            marker = next_marker

        log.debug("Listed %d remote object(s) in %d page(s) under \"%s\"",
                  len(inventory), pages, prefix)
        return inventory
