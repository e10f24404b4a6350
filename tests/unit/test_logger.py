import logging
import subprocess
from unittest.mock import patch

from common import logger
from common.logger import LOGGER_NAME, get_logger, log_debug, log_error, log_info, log_warn
from ssoharness.utils.container import db_manager
from ssoharness.utils.container.backend import Backend


class TestLogger:
    def test_levels_are_recorded(self, caplog):
        caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

        log_debug("[test] debug")
        log_info("[test] info")
        log_warn("[test] warn")
        log_error("[test] error")

        assert [(r.levelname, r.getMessage()) for r in caplog.records] == [
            ("DEBUG", "[test] debug"),
            ("INFO", "[test] info"),
            ("WARNING", "[test] warn"),
            ("ERROR", "[test] error"),
        ]
        assert {r.name for r in caplog.records} == {LOGGER_NAME}

    def test_debug_hidden_at_info(self, caplog):
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)

        log_debug("[test] hidden")
        log_info("[test] shown")

        assert caplog.messages == ["[test] shown"]

    def test_single_plain_stream_handler(self):
        get_logger()
        handlers = get_logger().handlers

        assert len(handlers) == 1
        assert type(handlers[0]) is logging.StreamHandler
        assert handlers[0].formatter._fmt == logger.LOG_FORMAT

    def test_module_logs_reach_caplog(self, caplog, config):
        caplog.set_level(logging.INFO, logger=LOGGER_NAME)
        failed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="No such container")
        with patch("ssoharness.utils.container.db_manager.subprocess.run", return_value=failed):
            db_manager.stop_server_db(config, Backend.POSTGRES)

        assert any(
            r.levelno == logging.WARNING and r.getMessage().startswith("[stop_db]")
            for r in caplog.records
        )
