"""
Command Line Interface for indexing the share and warming the thumbnail cache.
"""

import argparse
import logging
from typing import List, Optional

from .errors import RemoteError
from .gallery import Gallery
from .image_index import ImageIndex
from .indexer import Indexer
from .smb_client import SMBClient
from .smb_config import SMBConfig
from .warmer import Warmer


def setup_logging(verbose: bool) -> logging.Logger:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    logging.getLogger('smbprotocol').setLevel(logging.WARNING)
    logging.getLogger('smbclient').setLevel(logging.WARNING)
    logging.getLogger('spnego').setLevel(logging.WARNING)

    return logging.getLogger('smbgallery')


def get_smb_config(args: argparse.Namespace) -> SMBConfig:
    """Get SMB configuration from environment and CLI overrides."""
    config = SMBConfig.from_env()

    if getattr(args, 'smb_server', None):
        config.server = args.smb_server
    if getattr(args, 'smb_share', None):
        config.share = args.smb_share
    if getattr(args, 'smb_username', None):
        config.username = args.smb_username
    if getattr(args, 'smb_password', None):
        config.password = args.smb_password
    if getattr(args, 'smb_domain', None):
        config.domain = args.smb_domain
    if getattr(args, 'root', None):
        config.root = args.root

    return config


def load_config(args: argparse.Namespace, logger: logging.Logger) -> Optional[SMBConfig]:
    """Return a validated configuration, or None after logging the problems."""
    config = get_smb_config(args)
    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
        return None
    return config


def add_smb_arguments(parser: argparse.ArgumentParser) -> None:
    """Add SMB connection arguments to a parser."""
    smb_group = parser.add_argument_group('SMB Share')
    smb_group.add_argument('--smb-server', help='Override SMB_SERVER_IP')
    smb_group.add_argument('--smb-share', help='Override SMB_SHARE_NAME')
    smb_group.add_argument('--smb-username', help='Override SMB_USERNAME')
    smb_group.add_argument('--smb-password', help='Override SMB_PASSWORD')
    smb_group.add_argument('--smb-domain', help='Override SMB_DOMAIN')
    smb_group.add_argument('--root', metavar='PATH',
                           help='Directory within the share to index (overrides SMB_DIRECTORY_PATH)')


def cmd_scan(args: argparse.Namespace) -> int:
    """Walk the share and report what the index would contain."""
    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    logger.info(f"Share: {config.share_path}")
    logger.info(f"Root: {config.root}")

    client = SMBClient(config, logger)
    indexer = Indexer(client, logger)
    try:
        client.connect()
        paths = indexer.walk(config.root)
    except RemoteError as e:
        logger.error(f"Scan failed: {e}")
        return 1

    index = ImageIndex.from_paths(paths, config.root, logger)

    if args.show_files:
        for image_id in index.list():
            print(image_id)

    stats = indexer.stats
    print()
    print(f"Images: {len(index)}")
    print(f"Directories: {stats.directories_listed}")
    print(f"Unreadable directories: {stats.directories_failed}")
    print(f"Skipped entries: {stats.entries_skipped}")
    print(f"Time: {stats.elapsed_seconds:.1f}s")
    return 0


def cmd_warm(args: argparse.Namespace) -> int:
    """Index the share and pre-generate missing thumbnails."""
    import settings

    logger = setup_logging(args.verbose)
    config = load_config(args, logger)
    if config is None:
        return 1

    cache_dir = args.cache_dir or settings.CACHE_DIR
    height = args.height or settings.THUMBNAIL_HEIGHT
    logger.info(f"Cache: {cache_dir}")
    logger.info(f"Thumbnail height: {height}px")
    logger.info(f"Cadence: {args.cadence}s")
    if args.limit:
        logger.info(f"Test mode: limiting to {args.limit} thumbnails")

    gallery = Gallery.build(config, cache_dir, height, settings.JPEG_QUALITY, logger)
    if gallery.index_error is not None:
        logger.error(f"Warm failed: {gallery.index_error}")
        return 1

    warmer = Warmer(gallery.cache, cadence=args.cadence, dry_run=args.dry_run, logger=logger)

    try:
        stats = warmer.warm(gallery.index, limit=args.limit)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130

    if not args.quiet:
        print()
        print(f"Generated: {stats.generated}")
        print(f"Already cached: {stats.skipped}")
        print(f"Errors: {stats.errors}")
        print(f"Time: {stats.elapsed_seconds:.1f}s")
        print(f"Rate: {stats.rate_per_minute:.1f}/min")

    return 0 if stats.errors == 0 else 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the HTTP server."""
    import server

    logger = logging.getLogger('smbgallery')
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    config = load_config(args, logger)
    if config is None:
        return 1

    return server.main(config)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='smbgallery',
        description='Browse images on an SMB share over HTTP',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  Scan:   python -m smbgallery scan --show-files
  Warm:   python -m smbgallery warm --cadence 0.5
  Serve:  python -m smbgallery serve

Connection settings come from SMB_* environment variables; the --smb-*
options override them.
"""
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    scan_parser = subparsers.add_parser('scan', help='Walk the share and report indexed images')
    scan_parser.add_argument('--show-files', action='store_true', help='Print every image identifier')
    scan_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_smb_arguments(scan_parser)

    warm_parser = subparsers.add_parser('warm', help='Pre-generate missing thumbnails')
    warm_parser.add_argument('-c', '--cadence', type=float, default=0.0,
                             help='Seconds between generated thumbnails')
    warm_parser.add_argument('--cache-dir', help='Thumbnail cache directory (overrides CACHE_DIR)')
    warm_parser.add_argument('--height', type=int, help='Thumbnail height (overrides THUMBNAIL_HEIGHT)')
    warm_parser.add_argument('-n', '--dry-run', action='store_true', help='Show what would be done')
    warm_parser.add_argument('-q', '--quiet', action='store_true', help='Suppress the summary')
    warm_parser.add_argument('--limit', type=int, metavar='N',
                             help='Limit to N thumbnails (for testing)')
    warm_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_smb_arguments(warm_parser)

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP server')
    serve_parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    add_smb_arguments(serve_parser)

    return parser


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    if parsed_args.command == 'scan':
        return cmd_scan(parsed_args)
    elif parsed_args.command == 'warm':
        return cmd_warm(parsed_args)
    elif parsed_args.command == 'serve':
        return cmd_serve(parsed_args)

    return 1
