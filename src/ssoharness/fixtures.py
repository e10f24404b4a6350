"""
pytest 플러그인: 테스트 setup/teardown에 DB·애플리케이션 구동을 연결

사용법 (conftest.py):
    pytest_plugins = ["ssoharness.fixtures"]

    def test_login(app):
        ...
"""

import pytest

from ssoharness.utils.container_manager import (
    Backend,
    TestContext,
    load_config,
    start_app,
    stop_app,
)

APP_START_TIMEOUT = 60


def pytest_addoption(parser):
    group = parser.getgroup("ssoharness")
    group.addoption(
        "--db-backend",
        action="store",
        default=None,
        choices=[b.value for b in Backend],
        help="애플리케이션이 사용할 DB 백엔드 (미지정 시 테스트 이름에서 유도)",
    )
    group.addoption(
        "--env-file",
        action="store",
        default="test.env",
        help="하네스 설정파일 경로",
    )


@pytest.fixture(scope="session")
def harness_config(request):
    return load_config(request.config.getoption("--env-file"))


@pytest.fixture
def test_context(request):
    backend = request.config.getoption("--db-backend")
    return TestContext(name=request.node.nodeid, backend=Backend(backend) if backend else None)


@pytest.fixture
def app_env():
    """테스트별 추가 환경변수 (override 해서 사용)"""
    return {}


@pytest.fixture
def app(harness_config, test_context, app_env):
    handle = start_app(harness_config, test_context, env=app_env, timeout=APP_START_TIMEOUT)
    yield handle
    stop_app(handle, test_context)
