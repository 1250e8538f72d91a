"""
Allow running the package with: python -m imgprint

Examples:
    python -m imgprint hash photo.png
    python -m imgprint hash-dir ~/Pictures --store pictures.json
    python -m imgprint search query.png --store pictures.json -k 10
    python -m imgprint config --init
"""

import sys


def main():
    from .cli import main as cli_main
    sys.exit(cli_main())


if __name__ == '__main__':
    main()
