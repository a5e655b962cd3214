import logging
import logging.handlers

import pytest

from distribyted.config import Log
from distribyted.logsetup import FILE_NAME, setup_logging


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)


def _file_handler(root):
    return next(h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler))


def test_writes_to_log_file(tmp_path, restore_root):
    log_dir = tmp_path / "logs"
    root = setup_logging(Log(path=str(log_dir)))
    assert root.level == logging.INFO
    logging.getLogger("distribyted.test").info("hello from test")
    _file_handler(root).flush()
    assert "hello from test" in (log_dir / FILE_NAME).read_text()


def test_debug_level(tmp_path, restore_root):
    root = setup_logging(Log(path=str(tmp_path), debug=True))
    assert root.level == logging.DEBUG


def test_repeated_setup_does_not_duplicate_handlers(tmp_path, restore_root):
    before = len(restore_root.handlers)
    setup_logging(Log(path=str(tmp_path)))
    root = setup_logging(Log(path=str(tmp_path)))
    assert len(root.handlers) == before + 2


def test_rollover_keeps_max_backups(tmp_path, restore_root):
    root = setup_logging(Log(path=str(tmp_path), max_backups=1))
    handler = _file_handler(root)
    logging.getLogger("distribyted.test").info("first")
    handler.doRollover()
    logging.getLogger("distribyted.test").info("second")
    handler.doRollover()
    backups = list(tmp_path.glob("distribyted-*.log"))
    assert len(backups) == 1
    assert (tmp_path / FILE_NAME).exists()