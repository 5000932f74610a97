import logging

from notedeck.logging_setup import SESSION_ID, EnsureSessionFilter, SessionAdapter, setup_logging
from notedeck.settings import APP_NAME


def test_filter_fills_missing_session():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    assert EnsureSessionFilter().filter(record)
    assert record.session == SESSION_ID


def test_adapter_keeps_explicit_session():
    adapter = SessionAdapter(logging.getLogger("x"), {})
    _, kwargs = adapter.process("m", {"extra": {"session": "other"}})
    assert kwargs["extra"]["session"] == "other"


def test_setup_logging_writes_module_records_to_file(tmp_path):
    logger = logging.getLogger(APP_NAME)
    saved = list(logger.handlers)
    for h in saved:
        logger.removeHandler(h)
    log_path = tmp_path / "logs" / "notedeck.log"
    try:
        setup_logging(log_path=log_path, console_level=logging.WARNING)
        logging.getLogger("notedeck.vault.store").debug("hello from store")
        for h in logger.handlers:
            h.flush()
        text = log_path.read_text(encoding="utf-8")
        assert "hello from store" in text
        assert f"sid={SESSION_ID}" in text
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()
        for h in saved:
            logger.addHandler(h)
