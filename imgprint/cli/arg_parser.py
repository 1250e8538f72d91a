"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
imgprint command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from ..corners import HARRIS, METHODS
from ..user_config import get_user_config


def _add_store_argument(parser: argparse.ArgumentParser, default: str) -> None:
    parser.add_argument(
        '-s', '--store',
        type=Path,
        default=Path(default),
        help=f'Hash store JSON file. Default: {default}'
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Defaults come from the user configuration (environment variables and
    ~/.imgprint/config.json).

    Returns:
        Configured ArgumentParser instance
    """
    config = get_user_config()

    parser = argparse.ArgumentParser(
        prog='imgprint',
        description='Fingerprint images and search for visually similar ones',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hash-dir ~/Pictures --store pictures.json
      Fingerprint every image under ~/Pictures into pictures.json

  %(prog)s search query.png --store pictures.json -k 10 --rotations
      List the 10 stored images most similar to query.png in any orientation

  %(prog)s corners photo.png --window 5 --max 50 --output marked.png
      Detect Harris corners and save a copy with the corners marked
        """
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    # hash
    hash_parser = subparsers.add_parser('hash', help='Print the fingerprint of an image')
    hash_parser.add_argument('image', type=Path, help='Image file')
    hash_parser.add_argument(
        '--rotations',
        action='store_true',
        help='Also print the 90/180/270 degree fingerprints'
    )

    # hash-dir
    dir_parser = subparsers.add_parser('hash-dir', help='Fingerprint a directory into a store')
    dir_parser.add_argument('directory', type=Path, help='Directory to scan for images')
    _add_store_argument(dir_parser, config.store_file)
    dir_parser.add_argument(
        '-r', '--no-recursive',
        action='store_true',
        help='Do not scan subdirectories'
    )
    dir_parser.add_argument(
        '--rotations',
        action='store_true',
        help='Store one fingerprint per 90 degree rotation'
    )
    dir_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars (useful for piping output)'
    )

    # search
    search_parser = subparsers.add_parser('search', help='Find stored images similar to an image')
    search_parser.add_argument('image', type=Path, help='Query image')
    _add_store_argument(search_parser, config.store_file)
    search_parser.add_argument(
        '-k', '--results',
        type=int,
        default=config.search_results,
        help=f'Number of results. Default: {config.search_results}'
    )
    search_parser.add_argument(
        '--rotations',
        action='store_true',
        help='Match the query in all four orientations'
    )
    search_parser.add_argument(
        '--mirror',
        action='store_true',
        help='Also match brightness-inverted fingerprints'
    )

    # corners
    corner_parser = subparsers.add_parser('corners', help='Detect corners in an image')
    corner_parser.add_argument('image', type=Path, help='Image file')
    corner_parser.add_argument(
        '--method',
        choices=METHODS,
        default=HARRIS,
        help=f'Corner response. Default: {HARRIS}'
    )
    corner_parser.add_argument(
        '--blur',
        type=float,
        default=config.blur_sigma,
        help=f'Gaussian blur sigma. Default: {config.blur_sigma}'
    )
    corner_parser.add_argument(
        '-w', '--window',
        type=int,
        default=config.window_size,
        help=f'Odd window size. Default: {config.window_size}'
    )
    corner_parser.add_argument(
        '-m', '--max',
        type=int,
        default=config.max_corners,
        dest='max_corners',
        help=f'Maximum corners. Default: {config.max_corners}'
    )
    corner_parser.add_argument(
        '-t', '--threshold',
        type=float,
        default=config.corner_threshold,
        help=f'Minimum corner response. Default: {config.corner_threshold}'
    )
    corner_parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Save a copy of the image with corners marked'
    )

    # groups
    groups_parser = subparsers.add_parser('groups', help='List groups of similar stored images')
    _add_store_argument(groups_parser, config.store_file)
    groups_parser.add_argument(
        '-t', '--threshold',
        type=int,
        default=config.threshold,
        help=f'Maximum Hamming distance (0-64). Default: {config.threshold}'
    )
    lsh_group = groups_parser.add_mutually_exclusive_group()
    lsh_group.add_argument(
        '--lsh',
        action='store_true',
        dest='force_lsh',
        help='Force LSH acceleration on'
    )
    lsh_group.add_argument(
        '--no-lsh',
        action='store_true',
        dest='no_lsh',
        help='Force brute-force comparison'
    )

    # config
    config_parser = subparsers.add_parser('config', help='Show or create the user configuration')
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example configuration file'
    )

    return parser


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: List of argument strings (default: sys.argv)

    Examples:
        >>> args = parse_arguments(['search', 'query.png', '-k', '3'])
        >>> args.results
        3
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = [
    'create_parser',
    'parse_arguments',
]
