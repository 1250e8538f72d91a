"""
CLI package for imgprint.

Provides the command-line interface for fingerprinting images, searching a
hash store and detecting corners.

Public API:
- main: Entry point for CLI execution
- CLIOrchestrator: CLI workflow orchestration class
"""

from __future__ import annotations

from .orchestrator import CLIOrchestrator, setup_logging
from .arg_parser import create_parser, parse_arguments


def main(argv=None) -> int:
    """
    Main entry point for the CLI.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    orchestrator = CLIOrchestrator(argv)
    return orchestrator.run()


__all__ = [
    'main',
    'CLIOrchestrator',
    'setup_logging',
    'create_parser',
    'parse_arguments',
]
