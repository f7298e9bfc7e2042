"""
File delivery for exported payloads.

Download formats are saved to the downloads directory; viewable formats
(JSON, HTML) are written to a transient file, opened in the browser, and
removed after a fixed delay. The delay is time-based, not load-based, so a
slow browser may find the file already gone.
"""
import asyncio
import logging
import tempfile
import threading
import webbrowser
from pathlib import Path
from typing import Any, Callable, Optional

from interview_generator.core.config import settings
from interview_generator.schemas.interview import ExportedFile

logger = logging.getLogger(__name__)

VIEW_SUFFIXES = {"application/json": ".json", "text/html": ".html"}


class FileDelivery:
    """Saves or opens exported files."""

    def __init__(
        self,
        download_dir: Optional[Path] = None,
        cleanup_delay: Optional[float] = None,
        opener: Callable[[str], Any] = webbrowser.open,
    ):
        self.download_dir = Path(download_dir or settings.DOWNLOAD_DIR)
        self.cleanup_delay = settings.VIEW_CLEANUP_DELAY if cleanup_delay is None else cleanup_delay
        self._opener = opener

    def deliver(self, exported: ExportedFile, new_tab: bool) -> Path:
        if new_tab:
            suffix = VIEW_SUFFIXES.get(exported.media_type.split(";")[0].strip())
            return self.open_in_new_tab(exported.content, exported.filename, suffix=suffix)
        return self.download(exported.content, exported.filename)

    def download(self, content: bytes, filename: str) -> Path:
        """Save content under filename in the downloads directory without overwriting."""
        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self._available_path(self.download_dir / Path(filename).name)
        target.write_bytes(content)
        logger.info(f"Downloaded {target.name} ({len(content)} bytes) to {target.parent}")
        return target

    def open_in_new_tab(self, content: bytes, filename: str, suffix: Optional[str] = None) -> Path:
        """Open content in the browser from a transient file, removed after cleanup_delay."""
        suffix = suffix or Path(filename).suffix or ".html"
        with tempfile.NamedTemporaryFile(prefix="interviews-", suffix=suffix, delete=False) as handle:
            handle.write(content)
            path = Path(handle.name)

        self._opener(path.as_uri())
        self._schedule_cleanup(path)
        logger.info(f"Opened {path.name} in a new browser tab")
        return path

    def _schedule_cleanup(self, path: Path) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            timer = threading.Timer(self.cleanup_delay, self._remove, args=(path,))
            timer.daemon = True
            timer.start()
        else:
            loop.call_later(self.cleanup_delay, self._remove, path)

    @staticmethod
    def _remove(path: Path) -> None:
        path.unlink(missing_ok=True)
        logger.debug(f"Removed transient export file {path}")

    @staticmethod
    def _available_path(path: Path) -> Path:
        """Mimic browser downloads: 'name.csv' -> 'name (1).csv' if taken."""
        candidate = path
        counter = 1
        while candidate.exists():
            candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
            counter += 1
        return candidate
