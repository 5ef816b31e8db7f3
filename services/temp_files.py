"""
Temporary file lifecycle for file-based print jobs.

The Windows "Print" verb and CUPS `lp` both read the submitted file after
the submission call returns, so a decoded PDF has to outlive the request.
Each file gets a deferred deletion timer instead.

Thread Safety:
    - create_unique() uses exclusive create, so concurrent jobs can never
      write to the same path even if their timestamps collide
    - Pending timers are tracked under a private lock; a deletion is
      "claimed" by whoever removes it from the pending map first (the timer,
      flush() or cancel_all()), so no file is deleted twice

Usage:
    temp_files = TempFileManager()
    path = temp_files.create_unique(pdf_bytes)
    temp_files.schedule_delete(path, delay=20.0)

    # Tests: run every pending deletion now
    temp_files.flush()
"""

from __future__ import annotations

import itertools
import tempfile
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

from core.exceptions import CleanupError
from logging_config import get_logger


logger = get_logger(__name__)


class TempFileManager:
    """
    Creates uniquely named job files and deletes them after a delay.

    Deletion failures are logged and never raised: the job that created the
    file has already been answered by the time its timer fires.
    """

    PREFIX = "printrelay_"

    def __init__(self, directory: Optional[Path] = None, suffix: str = ".pdf"):
        """
        Args:
            directory: Where files are created (default: system temp dir)
            suffix: File extension, the print verb picks its handler by it
        """
        self._directory = Path(directory) if directory is not None else Path(tempfile.gettempdir())
        self._suffix = suffix
        self._pending: Dict[Path, threading.Timer] = {}
        self._lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def pending_count(self) -> int:
        """Number of deletions scheduled but not yet run."""
        with self._lock:
            return len(self._pending)

    def pending_paths(self) -> List[Path]:
        with self._lock:
            return list(self._pending)

    def create_unique(self, data: bytes) -> Path:
        """
        Write `data` to a new file named after a nanosecond timestamp.

        Raises:
            OSError: If the file cannot be created or written
        """
        stamp = time.time_ns()

        for attempt in itertools.count():
            suffix = f"_{attempt}" if attempt else ""
            path = self._directory / f"{self.PREFIX}{stamp}{suffix}{self._suffix}"
            try:
                handle = open(path, "xb")
            except FileExistsError:
                continue

            try:
                with handle:
                    handle.write(data)
            except OSError:
                path.unlink(missing_ok=True)
                raise
            return path

    def schedule_delete(self, path: Path, delay: float) -> threading.Timer:
        """
        Delete `path` after `delay` seconds on a daemon timer thread.

        Returns immediately. If the process exits first the file is left
        behind in the temp directory.
        """
        timer = threading.Timer(delay, self._run_deletion, args=(path,))
        timer.daemon = True
        timer.name = f"Cleanup-{path.name}"

        with self._lock:
            previous = self._pending.pop(path, None)
            self._pending[path] = timer

        if previous is not None:
            previous.cancel()

        timer.start()
        logger.debug(f"Scheduled cleanup of {path} in {delay:.1f}s")
        return timer

    def flush(self) -> int:
        """
        Run every pending deletion now.

        Returns:
            Number of deletions run
        """
        claimed = self._claim_all()
        for path, timer in claimed:
            timer.cancel()
            self._delete(path)
        return len(claimed)

    def cancel_all(self) -> int:
        """
        Cancel every pending deletion, leaving the files in place.

        Returns:
            Number of deletions cancelled
        """
        claimed = self._claim_all()
        for _path, timer in claimed:
            timer.cancel()
        if claimed:
            logger.info(f"Cancelled {len(claimed)} pending temp file cleanups")
        return len(claimed)

    def _claim_all(self):
        with self._lock:
            claimed = list(self._pending.items())
            self._pending.clear()
        return claimed

    def _run_deletion(self, path: Path) -> None:
        with self._lock:
            claimed = self._pending.pop(path, None) is not None
        if claimed:
            self._delete(path)

    def _delete(self, path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            logger.error(str(CleanupError(str(path), exc)))
            return
        logger.info(f"Cleaned up temp file: {path}")
