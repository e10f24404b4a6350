"""
파일명: src/common/logger.py
목적: 하네스 전체에서 공통으로 사용하는 로그 함수 제공
설명:
  - 모든 모듈은 print 대신 log_debug/log_info/log_warn/log_error 사용
  - 메시지 앞에 "[함수명]" 접두어를 붙이는 것을 원칙으로 함
  - LOG_LEVEL 환경변수로 출력 수준 조정 (기본값: INFO)
"""

import logging
import os

LOGGER_NAME = "ssoharness"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    return logger


def log_debug(msg: str):
    get_logger().debug(msg)


def log_info(msg: str):
    get_logger().info(msg)


def log_warn(msg: str):
    get_logger().warning(msg)


def log_error(msg: str):
    get_logger().error(msg)
