import logging

from totpcli.utils import logger


def test_file_logging(tmp_path):
    log = logger.setup_logger(console_level=logging.CRITICAL, log_to_file=True, log_dir=str(tmp_path))
    try:
        path = logger.get_log_file_path()
        assert path is not None
        assert path.startswith(str(tmp_path))

        logging.getLogger("totpcli.security.account_store").info("module message")
        logger.debug("facade message")
        for handler in log.handlers:
            handler.flush()

        with open(path, encoding="utf-8") as f:
            content = f.read()
        assert "log started" in content
        assert "module message" in content
        assert "facade message" in content
    finally:
        logger.close_logging()

    assert logger.get_log_file_path() is None


def test_console_only_logging():
    log = logger.setup_logger(log_to_file=False)
    try:
        assert logger.get_log_file_path() is None
        assert len(log.handlers) == 1
        assert log.propagate is False
    finally:
        logger.close_logging()
