"""
Scoring config hot reload.

Polls a scoring config file for modification and pushes each valid new
version into a ScoringEngine. An invalid file is logged and ignored; the
engine keeps scoring with the last good config.

Usage:
    watcher = ScoringConfigWatcher(engine, "custom_scoring.yaml")
    watcher.start()
    ...
    watcher.stop()
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from config.config_loader import ConfigValidationError, load_scoring_config
from config.settings import get_settings
from scoring.engine import ScoringEngine

logger = logging.getLogger(__name__)


class ScoringConfigWatcher:
    """Reloads a scoring config file into an engine when the file changes."""

    def __init__(
        self,
        engine: ScoringEngine,
        path: Union[str, Path],
        interval: Optional[float] = None,
    ):
        self._engine = engine
        self._path = Path(path)
        self._interval = interval if interval is not None else get_settings().config_poll_interval
        self._last_mtime: Optional[float] = self._current_mtime()
        self._stop_event = threading.Event()
        self._worker_thread: Optional[threading.Thread] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_running(self) -> bool:
        return self._worker_thread is not None and self._worker_thread.is_alive()

    def _current_mtime(self) -> Optional[float]:
        try:
            return self._path.stat().st_mtime
        except FileNotFoundError:
            return None

    def check_for_changes(self) -> bool:
        """
        Reload the config if the file changed since the last check.

        Returns:
            True if a new config was applied to the engine
        """
        mtime = self._current_mtime()
        if mtime is None:
            if self._last_mtime is not None:
                logger.warning(f"Scoring config {self._path} disappeared; keeping current config")
                self._last_mtime = None
            return False

        if mtime == self._last_mtime:
            return False
        self._last_mtime = mtime

        try:
            new_config = load_scoring_config(self._path)
        except ConfigValidationError as e:
            logger.error(f"Failed to reload scoring config: {e}")
            return False

        self._engine.update_config(new_config)
        return True

    # =========================================================================
    # BACKGROUND WATCHER
    # =========================================================================

    def start(self) -> bool:
        """
        Start polling in a background thread.

        Does nothing unless hot reload is enabled in the settings.

        Returns:
            True if the watcher is running after the call
        """
        if not get_settings().hot_reload_enabled:
            logger.debug("Config hot reload disabled; watcher not started")
            return False
        if self.is_running:
            return True

        self._stop_event.clear()
        self._worker_thread = threading.Thread(
            target=self._watch_loop,
            daemon=True,
            name="scoring-config-watcher",
        )
        self._worker_thread.start()
        logger.info(f"Watching scoring config {self._path} every {self._interval}s")
        return True

    def stop(self) -> None:
        """Stop the background watcher."""
        self._stop_event.set()
        if self._worker_thread:
            self._worker_thread.join(timeout=5)
            self._worker_thread = None
        logger.info("Scoring config watcher stopped")

    def _watch_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                self.check_for_changes()
            except Exception as e:
                logger.error(f"Scoring config watcher error: {e}")
