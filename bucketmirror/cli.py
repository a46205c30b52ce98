"""
bucketmirror - Main CLI interface

Thin adapter: loads configuration, builds the S3 client and runs a
single mirror pass. Exits non-zero on the first failure.
"""
import argparse
import sys

from colorama import init, Fore, Style

from . import __version__
from .utils.errors import SyncError
from .utils.config_loader import ConfigLoader

# Initialize colorama
init(autoreset=True)

MIRROR_EXAMPLES = """\
Examples:
  bucketmirror --source public --bucket my-site
  bucketmirror --config mirror.json --verbose
  PLUGIN_ACCESS='{"*.html": "public-read"}' bucketmirror --source public --bucket my-site
  bucketmirror --config mirror.json --target docs/v2 --no-delete

Config file keys:
  source, target, bucket, region, access_key, secret_key, profile,
  endpoint_url, access, content_type, metadata, redirects, delete
"""


def create_argument_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog='bucketmirror',
        description='bucketmirror — mirror a local directory into an S3 bucket',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=MIRROR_EXAMPLES,
    )
    parser.add_argument('--config', help='Path to a JSON config file')
    parser.add_argument('--source', help='Local directory to mirror')
    parser.add_argument('--target', help='Key prefix inside the bucket')
    parser.add_argument('--bucket', help='Destination bucket name')
    parser.add_argument('--region', help='AWS region')
    parser.add_argument('--profile', help='AWS CLI profile name')
    parser.add_argument('--endpoint-url', dest='endpoint_url',
                        help='Endpoint for S3-compatible storage')
    parser.add_argument('--no-delete', dest='delete', action='store_false', default=None,
                        help='Keep remote objects that have no local counterpart')

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', action='store_true', help='Show skip decisions')
    verbosity.add_argument('--quiet', action='store_true', help='Only show warnings and errors')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def print_summary(summary):
    """Print the per-run action counts."""
    print(f"\n{Fore.GREEN}  ▸ Mirror — Complete{Style.RESET_ALL}\n")
    print(f"{Fore.CYAN}Summary:{Style.RESET_ALL}")
    print(f"  Uploaded: {summary.uploaded}")
    print(f"  Metadata updated: {summary.updated}")
    print(f"  Unchanged: {summary.skipped}")
    print(f"  Redirects: {summary.redirected}")
    print(f"  Deleted: {summary.deleted}")


def main(argv=None):
    """Main CLI entry point."""
    from .utils.logger import setup_logging, get_logger
    from .services.aws.sync_engine import MirrorSyncService

    parser = create_argument_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    log = get_logger(__name__)

    overrides = {
        'source': args.source,
        'target': args.target,
        'bucket': args.bucket,
        'region': args.region,
        'profile': args.profile,
        'endpoint_url': args.endpoint_url,
        'delete': args.delete,
    }

    try:
        config = ConfigLoader.load(args.config, overrides)
        summary = MirrorSyncService.from_config(config).run()
    except SyncError as e:
        log.error("%s failure: %s", e.kind, e)
        return 1

    if not args.quiet:
        print_summary(summary)
    return 0


if __name__ == '__main__':
    sys.exit(main())
