"""
One-way S3 mirroring engine.

Provides the main :class:`MirrorSyncService` that lists the remote
inventory once, reconciles every local file in turn, installs redirect
markers, and finally removes remote objects no longer referenced by
the local side. Any failure aborts the run; nothing already written is
rolled back.
"""
import posixpath

from ...models.objects import ObjectDescriptor, SyncAction
from ...models.state import LocalReferenceSet, SyncSummary, normalize_key
from ...utils.errors import WalkError
from ...utils.logger import get_logger
from ..change_detector import ChangeDetector
from ..policy_resolver import PolicyResolver
from ..tree_walker import walk_files
from .inventory import InventoryLister

log = get_logger(__name__)

REDIRECT_ACL = "public-read"


def normalize_prefix(target):
    return (target or "").strip("/")


class MirrorSyncService(InventoryLister):
    """Mirrors a local directory into an S3 bucket.

    Inherits primitive S3 operations from :class:`S3Operations` and
    inventory listing from :class:`InventoryLister`.

    Args:
        bucket_name: S3 bucket name
        s3_client: boto3 ``s3`` client
        source: Local source directory
        target: Key prefix to mirror into ('' for the bucket root)
        resolver: :class:`PolicyResolver` for access/content-type/metadata
        redirects: Ordered mapping of URL path -> redirect location
        delete: Remove orphaned remote objects after the walk
    """

    def __init__(self, bucket_name, s3_client, source, target="",
                 resolver=None, redirects=None, delete=True):
        super().__init__(bucket_name, s3_client)
        self.source = source
        self.target = normalize_prefix(target)
        self.resolver = resolver or PolicyResolver()
        self.redirects = dict(redirects or {})
        self.delete = delete
        self.detector = ChangeDetector(self)

    @classmethod
    def from_config(cls, config, s3_client=None):
        """Build a service from a :class:`SyncConfig`.

        Args:
            config: Loaded configuration
            s3_client: Optional pre-built client; created from *config*
                otherwise
        """
        if s3_client is None:
            from ...utils.aws.aws_utils import create_s3_client
            s3_client = create_s3_client(config)

        return cls(
            bucket_name=config.bucket,
            s3_client=s3_client,
            source=config.source,
            target=config.target,
            resolver=PolicyResolver(config.access, config.content_type, config.metadata),
            redirects=config.redirects,
            delete=config.delete,
        )

    def target_key(self, relative_path):
        """Remote key for a path relative to the source root."""
        relative_path = normalize_key(relative_path)
        if not self.target:
            return relative_path
        return posixpath.join(self.target, relative_path)

    def list_prefix(self):
        return f"{self.target}/" if self.target else ""

    # ── Per-file reconcile ─────────────────────────────────────────────

    def describe(self, local_file):
        """Resolve the upload parameters of one local file."""
        access, content_type, metadata = self.resolver.resolve(local_file.relative_path)
        return ObjectDescriptor(
            relative_path=local_file.relative_path,
            source_path=local_file.path,
            key=self.target_key(local_file.relative_path),
            access=access,
            content_type=content_type,
            metadata=metadata,
        )

    def reconcile_file(self, local_file, inventory, references, summary):
        """Decide on and apply the action for a single local file.

        The key is referenced before any write so a failed write never
        exposes it to cleanup.

        Returns:
            The :class:`SyncAction` taken
        """
        descriptor = self.describe(local_file)
        # act on the remote object as listed, e.g. "/foo" for local "foo"
        descriptor.key = inventory.listed_key(descriptor.key) or descriptor.key
        references.add(descriptor.key)

        try:
            handle = open(descriptor.source_path, 'rb')
        except OSError as e:
            raise WalkError(f"Cannot open \"{descriptor.source_path}\"", original=e) from e

        with handle:
            action = self.detector.decide(descriptor, handle, inventory)

            if action is SyncAction.UPLOAD:
                self.upload(descriptor, handle)
                summary.uploaded += 1
            elif action is SyncAction.UPDATE_METADATA:
                self.update_metadata(descriptor)
                summary.updated += 1
            else:
                summary.skipped += 1

        return action

    def upload(self, descriptor, handle):
        """Stream the file's bytes to its key, replacing any existing object."""
        log.info("Uploading \"%s\" with Content-Type \"%s\" and permissions \"%s\"",
                 descriptor.relative_path, descriptor.content_type, descriptor.access)
        self.put_object(
            descriptor.key,
            handle,
            descriptor.access,
            content_type=descriptor.content_type,
            metadata=descriptor.metadata,
        )

    def update_metadata(self, descriptor):
        """Replace headers and ACL in place; no bytes are transferred."""
        log.info("Updating metadata for \"%s\" Content-Type: \"%s\", ACL: \"%s\"",
                 descriptor.relative_path, descriptor.content_type, descriptor.access)
        self.copy_in_place(
            descriptor.key,
            descriptor.access,
            content_type=descriptor.content_type,
            metadata=descriptor.metadata,
        )

    # ── Redirects ──────────────────────────────────────────────────────

    def install_redirects(self, redirects, references, summary):
        """Create a zero-byte redirect marker for every mapping entry.

        Stops at the first failed write.

        Args:
            redirects: Mapping of URL path -> redirect location
            references: Run's :class:`LocalReferenceSet`
            summary: Run's :class:`SyncSummary`
        """
        for path, location in redirects.items():
            key = normalize_key(path)
            log.info("Adding redirect from \"%s\" to \"%s\"", path, location)
            references.add(key)
            self.put_object(key, b'', REDIRECT_ACL, redirect_location=location)
            summary.redirected += 1

    # ── Orphan cleanup ─────────────────────────────────────────────────

    def cleanup(self, inventory, references, summary):
        """Delete every inventoried key the run did not reference.

        Stops at the first failed delete.
        """
        for key in inventory:
            if key in references:
                continue
            log.info("Removing remote file \"%s\"", key)
            self.delete_object(key)
            inventory.discard(key)
            summary.deleted += 1

    # ── Main entry point ───────────────────────────────────────────────

    def run(self):
        """Mirror the source directory into the bucket.

        Returns:
            :class:`SyncSummary` of the actions taken

        Raises:
            SyncError: On the first listing, walk, remote-state or
                write failure
        """
        log.info("Mirroring \"%s\" to s3://%s/%s", self.source, self.bucket_name, self.target)

        inventory = self.list_inventory(self.list_prefix())
        references = LocalReferenceSet()
        summary = SyncSummary()

        for local_file in walk_files(self.source):
            self.reconcile_file(local_file, inventory, references, summary)

        if self.redirects:
            self.install_redirects(self.redirects, references, summary)

        if self.delete:
            self.cleanup(inventory, references, summary)
        else:
            for key in inventory:
                if key not in references:
                    log.debug("Keeping orphaned remote file \"%s\"", key)

        log.info("Sync completed - %d uploaded, %d updated, %d skipped, "
                 "%d redirect(s), %d deleted",
                 summary.uploaded, summary.updated, summary.skipped,
                 summary.redirected, summary.deleted)
        return summary
