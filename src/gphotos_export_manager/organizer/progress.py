"""Progress tracking for asset materialization.

Reports processed/total assets with rate and ETA through the log.
"""

import logging
import time

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Tracks materialization progress and calculates ETA.

    Features:
    - Assets processed count
    - Processing rate (assets/sec)
    - Estimated time remaining
    - Periodic logging (every N assets)
    """

    def __init__(self, total_assets: int, log_interval: int = 100):
        """Initialize progress tracker.

        Args:
            total_assets: Total number of assets to process
            log_interval: Log progress every N assets
        """
        self.total_assets = total_assets
        self.log_interval = log_interval

        self.assets_processed = 0
        self.start_time = time.time()
        self.last_log_time = self.start_time
        self.last_log_count = 0

        logger.debug(f"ProgressTracker initialized (total_assets={total_assets})")

    def increment(self, count: int = 1) -> None:
        """Add to the processed counter, logging at every interval boundary."""
        self.assets_processed += count

        if self.assets_processed % self.log_interval == 0:
            self._log_progress()

    def get_progress(self) -> dict:
        """Get current progress statistics.

        Returns:
            Dict with progress metrics
        """
        elapsed_time = time.time() - self.start_time

        rate = self.assets_processed / elapsed_time if elapsed_time > 0 else 0.0

        if self.total_assets > 0:
            percentage = (self.assets_processed / self.total_assets) * 100
        else:
            percentage = 0.0

        remaining_assets = self.total_assets - self.assets_processed
        if rate > 0 and remaining_assets > 0:
            eta_seconds = remaining_assets / rate
        else:
            eta_seconds = 0.0

        return {
            "total_assets": self.total_assets,
            "assets_processed": self.assets_processed,
            "remaining_assets": remaining_assets,
            "percentage": percentage,
            "elapsed_seconds": elapsed_time,
            "rate_assets_per_sec": rate,
            "eta_seconds": eta_seconds,
        }

    def _log_progress(self) -> None:
        progress = self.get_progress()

        # Instantaneous rate since last log
        current_time = time.time()
        time_delta = current_time - self.last_log_time
        count_delta = self.assets_processed - self.last_log_count
        instant_rate = count_delta / time_delta if time_delta > 0 else 0.0

        logger.info(
            f"Progress: {self.assets_processed}/{self.total_assets} "
            f"({progress['percentage']:.1f}%) - "
            f"{progress['rate_assets_per_sec']:.1f} assets/sec (avg), "
            f"{instant_rate:.1f} assets/sec (current) - "
            f"ETA: {format_duration(progress['eta_seconds'])}"
        )

        self.last_log_time = current_time
        self.last_log_count = self.assets_processed

    def log_final_summary(self) -> None:
        """Log final progress summary."""
        elapsed_time = time.time() - self.start_time
        rate = self.assets_processed / elapsed_time if elapsed_time > 0 else 0.0

        logger.info(
            f"Materialization complete: {self.assets_processed}/{self.total_assets} assets processed "
            f"in {format_duration(elapsed_time)} "
            f"({rate:.1f} assets/sec average)"
        )


def format_duration(seconds: float) -> str:
    """Format seconds as e.g. "2h 15m 30s"."""
    if seconds <= 0:
        return "0s"

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    if secs > 0 or not parts:
        parts.append(f"{secs}s")

    return " ".join(parts)
