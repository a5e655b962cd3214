"""Logging to the console and to a rolling log file."""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime
from pathlib import Path

from distribyted.config import Log

FILE_NAME = "distribyted.log"
_DEFAULT_MAX_SIZE_MB = 100
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_MARK = "_distribyted_handler"

_log = logging.getLogger(__name__)


class _RollingFileHandler(logging.handlers.RotatingFileHandler):
    """Rotates to timestamped backups and prunes them by count and age."""

    def __init__(self, filename: Path, max_bytes: int, max_backups: int, max_age_days: int) -> None:
        super().__init__(str(filename), maxBytes=max_bytes, backupCount=0, encoding="utf-8")
        self._max_backups = max_backups
        self._max_age_days = max_age_days

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None  # type: ignore[assignment]
        path = Path(self.baseFilename)
        if path.exists():
            stamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S.%f")[:-3]
            os.replace(path, path.with_name(f"{path.stem}-{stamp}{path.suffix}"))
        self._prune(path)
        if not self.delay:
            self.stream = self._open()

    def _prune(self, path: Path) -> None:
        backups = sorted(path.parent.glob(f"{path.stem}-*{path.suffix}"), reverse=True)
        doomed: list[Path] = []
        if self._max_age_days > 0:
            cutoff = time.time() - self._max_age_days * 86400
            fresh = []
            for backup in backups:
                (doomed if backup.stat().st_mtime < cutoff else fresh).append(backup)
            backups = fresh
        if self._max_backups > 0:
            doomed.extend(backups[self._max_backups:])
        for backup in doomed:
            backup.unlink(missing_ok=True)


def _rolling_file(config: Log) -> logging.Handler | None:
    directory = Path(config.path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        _log.error("can't create log directory %s: %s", config.path, exc)
        return None
    max_size = config.max_size if config.max_size > 0 else _DEFAULT_MAX_SIZE_MB
    return _RollingFileHandler(
        directory / FILE_NAME,
        max_bytes=max_size * 1024 * 1024,
        max_backups=config.max_backups,
        max_age_days=config.max_age,
    )


def setup_logging(config: Log) -> logging.Logger:
    """Send log records to stdout and the rolling file; return the root logger."""
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _MARK, False)]:
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    file_handler = _rolling_file(config)
    if file_handler is not None:
        handlers.append(file_handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _MARK, True)
        root.addHandler(handler)

    root.setLevel(logging.DEBUG if config.debug else logging.INFO)
    return root