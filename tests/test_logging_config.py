import logging

from bistree.utils.logging_config import env_flag, setup_logging


def test_env_flag(monkeypatch):
    monkeypatch.delenv("BIST_TEST_FLAG", raising=False)
    assert env_flag("BIST_TEST_FLAG") is False
    for v in ("0", "false", "no", ""):
        monkeypatch.setenv("BIST_TEST_FLAG", v)
        assert env_flag("BIST_TEST_FLAG") is False
    monkeypatch.setenv("BIST_TEST_FLAG", "1")
    assert env_flag("BIST_TEST_FLAG") is True


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "bist.log"
    logger = setup_logging(level="DEBUG", log_file=log_file)
    assert logger.name == "bistree"
    logging.getLogger("bistree.core.runner").debug("spawned task %d", 3)
    for h in logging.getLogger().handlers:
        h.flush()
    assert "spawned task 3" in log_file.read_text()


def test_setup_logging_console_only():
    setup_logging(level="INFO")
    handlers = logging.getLogger().handlers
    assert not any(isinstance(h, logging.FileHandler) for h in handlers)
    assert any(h.level == logging.WARNING for h in handlers)
