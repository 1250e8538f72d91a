"""
Report formatting and display for the CLI interface.
"""

from __future__ import annotations

from ..config import SIMILARITY_BASE
from ..models import Corner


def _print_section_header(title: str) -> None:
    """Print a section header with divider lines."""
    print("\n" + "-" * 70)
    print(title)
    print("-" * 70)


def print_matches(matches: list[tuple[int, str]]) -> None:
    """
    Print search results, most similar first.

    Args:
        matches: (similarity, path) pairs from ``HashStore.find_many_scored``
    """
    _print_section_header(f"SIMILAR IMAGES ({len(matches)})")
    if not matches:
        print("  (store is empty)")
        return
    for rank, (similarity, path) in enumerate(matches, 1):
        distance = SIMILARITY_BASE - similarity
        print(f"  {rank:>3}. [{distance:>2} bits] {path}")


def print_corners(corners: list[Corner], width: int) -> None:
    """Print detected corners as x, y and score."""
    _print_section_header(f"CORNERS ({len(corners)})")
    for corner in corners:
        x, y = corner.position(width)
        print(f"  ({x:>5}, {y:>5})  {corner.score:,.1f}")


def print_groups(groups: list[list[str]]) -> None:
    """Print groups of similar stored images."""
    _print_section_header(f"SIMILAR GROUPS ({len(groups)})")
    for i, paths in enumerate(groups, 1):
        print(f"\nGroup {i} ({len(paths)} files):")
        for path in paths:
            print(f"  {path}")


__all__ = ['print_matches', 'print_corners', 'print_groups']
