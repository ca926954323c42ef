import json
import logging

import pytest

from fieldvault.core.config import LoggingConfig
from fieldvault.core.logging import (
    SecureLogFilter,
    SecureRotatingFileHandler,
    StructuredLogFormatter,
    configure_logging,
    get_secure_logger,
)


@pytest.fixture
def restore_logger():
    """Drop handlers added to named loggers during a test."""
    names = []

    def track(name):
        names.append(name)
        return name

    yield track

    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


def _record(msg, *args):
    return logging.LogRecord("fieldvault.test", logging.INFO, __file__, 1, msg, args, None)


def test_filter_redacts_hex_keys():
    record = _record("loaded key %s", "ab" * 32)
    SecureLogFilter().filter(record)
    assert "ab" * 32 not in record.getMessage()
    assert "[REDACTED]" in record.getMessage()


def test_filter_redacts_password_pairs():
    record = _record("login password=hunter2 ok")
    SecureLogFilter().filter(record)
    assert "hunter2" not in record.getMessage()


def test_filter_redacts_encryption_key_assignment():
    record = _record("ENCRYPTION_KEY=deadbeef")
    SecureLogFilter().filter(record)
    assert "deadbeef" not in record.getMessage()


def test_filter_keeps_ordinary_messages():
    record = _record("Field decryption rejected: %s", "authentication tag mismatch")
    assert SecureLogFilter().filter(record)
    assert record.getMessage() == "Field decryption rejected: authentication tag mismatch"


def test_filter_additional_patterns():
    import re

    record = _record("card 4155-1234-5678-9999")
    SecureLogFilter(additional_patterns=[re.compile(r"\d{4}(-\d{4}){3}")]).filter(record)
    assert record.getMessage() == "card [REDACTED]"


def test_filter_handles_dict_args():
    record = _record("%(token)s", {"token": "ff" * 20})
    record.args = {"token": "ff" * 20}
    SecureLogFilter().filter(record)
    assert "ff" * 20 not in record.getMessage()


def test_structured_formatter_outputs_json():
    record = _record("hello %s", "world")
    data = json.loads(StructuredLogFormatter().format(record))
    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "fieldvault.test"


def test_structured_formatter_omits_traceback():
    try:
        raise ValueError("inner detail")
    except ValueError:
        import sys
        record = logging.LogRecord(
            "fieldvault.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    data = json.loads(StructuredLogFormatter().format(record))
    assert data["exception"] == "ValueError"
    assert "inner detail" not in json.dumps(data)


def test_rotating_handler_rejects_traversal(tmp_path):
    with pytest.raises(ValueError):
        SecureRotatingFileHandler(tmp_path / ".." / "escape.log")


def test_get_secure_logger_writes_filtered_file(tmp_path, restore_logger):
    name = restore_logger("fieldvault.filetest")
    logger = get_secure_logger(name, log_dir=tmp_path, enable_console=False, enable_file=True)

    logger.info("salt=%s", "00" * 64)
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "fieldvault_filetest.log").read_text(encoding="utf-8")
    assert "00" * 64 not in content
    assert "[REDACTED]" in content


def test_get_secure_logger_is_idempotent(restore_logger):
    name = restore_logger("fieldvault.idempotent")
    first = get_secure_logger(name)
    count = len(first.handlers)
    assert get_secure_logger(name) is first
    assert len(first.handlers) == count


def test_configure_logging_json(tmp_path, restore_logger):
    restore_logger("fieldvault")
    logger = configure_logging(
        LoggingConfig(level="DEBUG", enable_console=False, enable_file=True,
                      log_dir=tmp_path, json_format=True)
    )
    logging.getLogger("fieldvault.keys").warning("insecure default key in use")
    for handler in logger.handlers:
        handler.flush()

    line = (tmp_path / "fieldvault.log").read_text(encoding="utf-8").splitlines()[-1]
    data = json.loads(line)
    assert data["logger"] == "fieldvault.keys"
    assert data["level"] == "WARNING"
