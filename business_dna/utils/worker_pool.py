"""Worker pool with exception handling for parallel image analysis.

Wraps ThreadPoolExecutor so one failing task never takes down the batch.
Results come back in input order regardless of completion order.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable


class WorkerPool:
    """ThreadPoolExecutor wrapper with per-item exception handling."""

    def __init__(self, max_workers: int = 3, logger=None):
        """
        Initialize worker pool.

        Args:
            max_workers: Maximum number of concurrent worker threads (default: 3)
            logger: Optional logger instance for logging
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {max_workers}")
        self.max_workers = max_workers
        self.logger = logger or logging.getLogger(__name__)
        self._stats_lock = threading.Lock()
        self.stats = {
            "max_workers": max_workers,
            "total_submitted": 0,
            "total_completed": 0,
            "total_successful": 0,
            "total_failed": 0,
        }

    def map(self, func: Callable[[Any], Any], items: list, desc: str = "Processing") -> list:
        """
        Process items in parallel with exception handling.

        Each worker writes into its own slot, so the output lines up with
        ``items`` even though tasks finish in any order.

        Args:
            func: Worker function to execute
            items: List of items to process
            desc: Description for progress reporting

        Returns:
            List of tuples in input order: (success: bool, item: any, result_or_error: any)
        """
        results: list = [None] * len(items)
        if not items:
            return results

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {executor.submit(func, item): i for i, item in enumerate(items)}
            with self._stats_lock:
                self.stats["total_submitted"] += len(items)

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                item = items[index]
                with self._stats_lock:
                    self.stats["total_completed"] += 1

                try:
                    result = future.result()
                    with self._stats_lock:
                        self.stats["total_successful"] += 1
                    results[index] = (True, item, result)
                    self.logger.debug(f"{desc}: Success for item {item}")

                except Exception as e:
                    with self._stats_lock:
                        self.stats["total_failed"] += 1
                    results[index] = (False, item, e)
                    self.logger.warning(f"{desc}: Failed for item {item}: {e}")

        self.logger.info(
            f"{desc} complete: {self.stats['total_successful']} successful, {self.stats['total_failed']} failed"
        )

        return results

    def get_stats(self) -> dict:
        """Get worker pool statistics."""
        return dict(self.stats)
