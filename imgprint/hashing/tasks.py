"""
Background hashing of many image files.

One worker thread walks the file list, fingerprints each image and streams
the results through a single-producer/single-consumer queue. The consumer
calls ``poll()`` without blocking; the worker thread exiting is the
completion signal. ``cancel()`` sets a cancellation token that the worker
checks before each file.
"""

from __future__ import annotations

import queue
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..config import DEFAULT_POLL_INTERVAL
from ..models import Fingerprint, HashProgress, ProgressKind, TaskStatus
from .dependencies import _logger
from .dhash import DEFAULT_FILTER, dhash_file

if TYPE_CHECKING:
    from ..store import HashStore

HashPair = tuple[Fingerprint, str]

_OK = 'ok'
_ERROR = 'error'


class HashDirectoryTask:
    """
    Fingerprint a list of files on a background thread.

    Usage:
        task = HashDirectoryTask(find_image_files(directory))
        task.start()
        while not task.complete:
            for fingerprint, path in task.poll():
                store.add_hash(fingerprint, path)
            time.sleep(0.05)
    """

    def __init__(
        self,
        paths: Iterable[str | Path],
        progress_callback: Optional[Callable[[HashProgress], None]] = None,
        rotations: bool = False,
        resample=DEFAULT_FILTER,
    ):
        """
        Args:
            paths: Image files to hash, in order
            progress_callback: Optional callback receiving HashProgress events
            rotations: Store a fingerprint for every 90 degree rotation
            resample: Pillow resampling filter for the dHash resize
        """
        self.paths = [str(p) for p in paths]
        self.total = len(self.paths)
        self.progress_callback = progress_callback
        self.rotations = rotations
        self.resample = resample

        self._queue: queue.Queue = queue.Queue()
        self._cancel_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.status = TaskStatus.IDLE
        self.processed = 0
        self.results: list[HashPair] = []
        self.errors: list[tuple[str, str]] = []

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    @property
    def complete(self) -> bool:
        return self.status.is_terminal

    @property
    def progress(self) -> float:
        """Percentage of files received so far (100 for an empty list)."""
        if self.total == 0:
            return 100.0
        return self.processed / self.total * 100.0

    def start(self) -> 'HashDirectoryTask':
        """Spawn the worker thread. Calling start twice is an error."""
        if self._thread is not None:
            raise RuntimeError("Task already started")

        self.status = TaskStatus.HASHING
        self._thread = threading.Thread(
            target=self._worker,
            name='imgprint-hash-worker',
            daemon=True,
        )
        self._thread.start()
        self._emit(HashProgress(ProgressKind.STARTED, percent=0.0))
        return self

    def cancel(self):
        """Ask the worker to stop before its next file."""
        self._cancel_event.set()

    def _worker(self):
        for path in self.paths:
            if self._cancel_event.is_set():
                _logger.debug("Hashing cancelled")
                break
            try:
                hashes = dhash_file(path, rotations=self.rotations, resample=self.resample)
            except Exception as e:
                _logger.debug(f"Hashing failed for {path}: {e}")
                self._queue.put((_ERROR, path, str(e)))
            else:
                self._queue.put((_OK, path, hashes))

    def _drain(self) -> list[HashPair]:
        chunk: list[HashPair] = []
        while True:
            try:
                kind, path, payload = self._queue.get_nowait()
            except queue.Empty:
                break
            self.processed += 1
            if kind == _OK:
                chunk.extend((fingerprint, path) for fingerprint in payload)
            else:
                self.errors.append((path, payload))
        self.results.extend(chunk)
        return chunk

    def poll(self) -> list[HashPair]:
        """
        Collect whatever results the worker has produced so far.

        Never blocks. Once the worker thread has exited and the queue is
        empty the task moves to a terminal status.

        Returns:
            New (Fingerprint, path) pairs since the previous poll
        """
        if self._thread is None or self.complete:
            return []

        # Check liveness before draining so nothing queued before exit is missed
        worker_done = not self._thread.is_alive()
        before = self.processed
        chunk = self._drain()

        if chunk or self.processed != before:
            self._emit(HashProgress(ProgressKind.ADVANCED, percent=self.progress, results=chunk))

        if worker_done:
            self._finish()

        return chunk

    def _finish(self):
        if self._cancel_event.is_set() and self.processed < self.total:
            self.status = TaskStatus.CANCELLED
            self._emit(HashProgress(ProgressKind.CANCELLED, percent=self.progress))
        elif self.total > 0 and not self.results:
            self.status = TaskStatus.ERRORED
            message = f"No images could be hashed ({len(self.errors)} errors)"
            self._emit(HashProgress(ProgressKind.ERRORED, percent=self.progress, message=message))
        else:
            self.status = TaskStatus.FINISHED
            self._emit(HashProgress(ProgressKind.FINISHED, percent=self.progress))

        _logger.info(
            f"Hashing {self.status.value}: {len(self.results):,} fingerprints from "
            f"{self.processed - len(self.errors):,}/{self.total:,} files "
            f"({len(self.errors):,} errors)"
        )

    def _emit(self, event: HashProgress):
        if self.progress_callback:
            self.progress_callback(event)

    def wait(self, poll_interval: float = DEFAULT_POLL_INTERVAL) -> list[HashPair]:
        """Poll until the task is complete and return every result."""
        if self._thread is None:
            self.start()
        while not self.complete:
            self.poll()
            if not self.complete:
                time.sleep(poll_interval)
        return list(self.results)

    def run_into(self, store: 'HashStore', poll_interval: float = DEFAULT_POLL_INTERVAL) -> 'HashStore':
        """Run the task to completion, adding every result to ``store``."""
        if self._thread is None:
            self.start()
        while not self.complete:
            for fingerprint, path in self.poll():
                store.add_hash(fingerprint, path)
            if not self.complete:
                time.sleep(poll_interval)
        return store


def hash_files(
    paths: Iterable[str | Path],
    progress_callback: Optional[Callable[[HashProgress], None]] = None,
    rotations: bool = False,
) -> HashDirectoryTask:
    """Create and start a HashDirectoryTask for ``paths``."""
    return HashDirectoryTask(paths, progress_callback=progress_callback, rotations=rotations).start()


__all__ = ['HashPair', 'HashDirectoryTask', 'hash_files']
