#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container_manager.py
목적: cli.py, fixtures.py가 사용하는 구동/정리 함수를 한 곳에서 import 하도록 모아둔 파일
"""

from common.load_config import HarnessConfig, load_config, load_env
from ssoharness.utils.container.app_manager import (
    AppHandle,
    restart_app,
    start_app,
    stop_app,
)
from ssoharness.utils.container.backend import Backend, TestContext, db_config
from ssoharness.utils.container.compose_manager import STACKS, stack_down, stack_up
from ssoharness.utils.container.db_manager import (
    container_running,
    reset_db,
    start_db,
    stop_db,
)
from ssoharness.utils.container.healthcheck import app_url, wait_for

__all__ = [
    "AppHandle",
    "Backend",
    "HarnessConfig",
    "STACKS",
    "TestContext",
    "app_url",
    "container_running",
    "db_config",
    "load_config",
    "load_env",
    "reset_db",
    "restart_app",
    "stack_down",
    "stack_up",
    "start_app",
    "start_db",
    "stop_app",
    "stop_db",
    "wait_for",
]
