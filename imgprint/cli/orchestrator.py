"""
CLI workflow orchestration for imgprint.

Provides the CLIOrchestrator class that parses arguments, configures
logging and runs one subcommand.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..corners import detect_corners, mark_corners
from ..errors import HashStoreError
from ..hashing import HashDirectoryTask, dhash_file, find_image_files
from ..hashing.dependencies import Image, progress_bar
from ..models import HashProgress, ProgressKind
from ..store import HashStore, find_similar_groups
from ..user_config import get_user_config
from ..utils.validators import (
    validate_directory,
    validate_image_file,
    validate_result_count,
    validate_threshold,
    validate_window_size,
)
from .arg_parser import parse_arguments
from .reporting import print_corners, print_groups, print_matches


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Runs a single CLI subcommand.

    Every command returns an exit code: 0 for success, 1 for a user-facing
    error (bad arguments, unreadable files).
    """

    def __init__(self, argv=None):
        self.argv = argv
        self.args = None
        self.logger: Optional[logging.Logger] = None

    def run(self) -> int:
        """Parse arguments, set up logging and dispatch the command."""
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

        handler = getattr(self, '_cmd_' + self.args.command.replace('-', '_'))
        try:
            return handler()
        except HashStoreError as e:
            self.logger.error(str(e))
            return 1

    def _load_store(self, create: bool = False) -> Optional[HashStore]:
        store_path = self.args.store
        if store_path.exists():
            return HashStore.from_file(store_path)
        if create:
            self.logger.info(f"Creating new hash store at {store_path}")
            return HashStore().save_as(store_path)
        self.logger.error(f"Hash store not found: {store_path}")
        return None

    def _hash_query(self, rotations: bool):
        is_valid, error = validate_image_file(str(self.args.image))
        if not is_valid:
            self.logger.error(error)
            return None
        try:
            return dhash_file(self.args.image, rotations=rotations)
        except OSError as e:
            self.logger.error(f"Cannot read image {self.args.image}: {e}")
            return None

    def _cmd_hash(self) -> int:
        hashes = self._hash_query(self.args.rotations)
        if hashes is None:
            return 1
        for fingerprint in hashes:
            print(f"{fingerprint}\t{fingerprint.to_hex()}")
        return 0

    def _cmd_hash_dir(self) -> int:
        is_valid, error = validate_directory(str(self.args.directory))
        if not is_valid:
            self.logger.error(error)
            return 1

        store = self._load_store(create=True)
        files = find_image_files(self.args.directory, recursive=not self.args.no_recursive)
        self.logger.info(f"Found {len(files):,} image files in {self.args.directory}")
        if not files:
            return 0

        pbar = progress_bar(100, "Hashing images", disable=self.args.no_progress)

        def on_progress(event: HashProgress):
            if pbar is not None and event.kind == ProgressKind.ADVANCED:
                pbar.update(event.percent - pbar.n)

        task = HashDirectoryTask(files, progress_callback=on_progress, rotations=self.args.rotations)
        try:
            task.wait()
        except KeyboardInterrupt:
            task.cancel()
            self.logger.warning("Interrupted - saving fingerprints hashed so far")
            task.wait()
        finally:
            if pbar is not None:
                pbar.close()

        for path, message in task.errors:
            self.logger.debug(f"Skipped {path}: {message}")
        store.extend(task.results)
        store.save()
        self.logger.info(f"Store now holds {len(store):,} fingerprints ({store.path})")
        return 0

    def _cmd_search(self) -> int:
        is_valid, error = validate_result_count(self.args.results)
        if not is_valid:
            self.logger.error(error)
            return 1

        hashes = self._hash_query(self.args.rotations)
        if hashes is None:
            return 1
        store = self._load_store()
        if store is None:
            return 1

        matches = store.find_many_scored(hashes, self.args.results, mirror=self.args.mirror)
        print_matches(matches)
        return 0

    def _cmd_corners(self) -> int:
        is_valid, error = validate_window_size(self.args.window)
        if not is_valid:
            self.logger.error(error)
            return 1
        if self.args.max_corners < 0:
            self.logger.error("--max must be >= 0")
            return 1
        is_valid, error = validate_image_file(str(self.args.image))
        if not is_valid:
            self.logger.error(error)
            return 1

        try:
            with Image.open(self.args.image) as img:
                img.load()
                if img.width < self.args.window or img.height < self.args.window:
                    self.logger.error(f"Image is smaller than the {self.args.window}px window")
                    return 1
                corners = detect_corners(
                    img,
                    blur_sigma=self.args.blur,
                    window_size=self.args.window,
                    max_corners=self.args.max_corners,
                    threshold=self.args.threshold,
                    method=self.args.method,
                )
                width = img.width
                if self.args.output:
                    mark_corners(img, corners).save(self.args.output)
                    self.logger.info(f"Saved marked image to {self.args.output}")
        except OSError as e:
            self.logger.error(f"Cannot process image {self.args.image}: {e}")
            return 1

        print_corners(corners, width)
        return 0

    def _cmd_groups(self) -> int:
        is_valid, error = validate_threshold(self.args.threshold)
        if not is_valid:
            self.logger.error(error)
            return 1
        store = self._load_store()
        if store is None:
            return 1

        use_lsh = None
        if self.args.force_lsh:
            use_lsh = True
        elif self.args.no_lsh:
            use_lsh = False

        groups = find_similar_groups(store, self.args.threshold, use_lsh=use_lsh, logger=self.logger)
        print_groups(groups)
        return 0

    def _cmd_config(self) -> int:
        config = get_user_config()
        if self.args.init:
            if not config.create_example_config():
                print("✗ Failed to create configuration file.")
                return 1
            print("✓ Created example configuration file at:")
            print(f"  {config.config_file_path}")
            return 0

        print(f"Configuration file: {config.config_file_path}")
        if config.config_file_path.exists():
            print("Status: ✓ Found")
        else:
            print("Status: ✗ Not found (using defaults)")
            print("\nRun 'imgprint config --init' to create one.")

        print("\nCurrent settings:")
        print(f"  store_file: {config.store_file}")
        print(f"  search_results: {config.search_results}")
        print(f"  threshold: {config.threshold}")
        print(f"  blur_sigma: {config.blur_sigma}")
        print(f"  window_size: {config.window_size}")
        print(f"  max_corners: {config.max_corners}")
        print(f"  corner_threshold: {config.corner_threshold}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
