"""ロギング設定のテスト"""

import logging

import pytest

from src.logger import LOG_FORMAT, setup_logging


@pytest.fixture
def restore_root_logger():
    """テスト後にルートロガーを元に戻す"""
    root = logging.getLogger()
    before = set(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestSetupLogging:
    def test_console_only(self, restore_root_logger):
        root = setup_logging("debug")

        assert root is logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT

    def test_no_duplicate_handlers(self, restore_root_logger):
        setup_logging("INFO")
        root = setup_logging("WARNING")

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_log_file(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "mcts.log"
        root = setup_logging("INFO", str(log_file))

        logging.getLogger("src.mcts.mcts").info("committed a1")
        for handler in root.handlers:
            handler.flush()

        assert len(root.handlers) == 2
        text = log_file.read_text()
        assert "src.mcts.mcts - INFO - committed a1" in text
