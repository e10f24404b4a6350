#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container/app_manager.py
목적: 테스트 대상 애플리케이션(vaultwarden) 프로세스 시작/중지/재시작
설명:
  - 시작 전 (선택) 백엔드별 DB 초기화 → 자식 프로세스 실행 → readiness poll
  - 자식 프로세스 환경 = os.environ ⊕ 설정파일 ⊕ 호출자 env ⊕ DB 접속정보 (뒤가 우선)
  - stdout/stderr는 하나의 로그파일(append)로, stdin은 부모 것을 그대로 사용
  - 반환된 AppHandle(프로세스 + 로그파일)은 호출자가 stop_app으로 정리
"""

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Optional

from common.logger import log_debug, log_error, log_info, log_warn
from ssoharness.utils.container.backend import Backend, TestContext, db_config
from ssoharness.utils.container.db_manager import reset_db, stop_db
from ssoharness.utils.container.healthcheck import app_url, wait_for

DEFAULT_APP_BINARY = "temp/vaultwarden"
DEFAULT_APP_LOG = "temp/logs/vaultwarden.log"
RESET_TIMEOUT = 20
STOP_GRACE = 10


@dataclass
class AppHandle:
    process: subprocess.Popen
    log_file: IO
    config: object
    backend: Backend

    @property
    def pid(self) -> int:
        return self.process.pid

    def is_running(self) -> bool:
        return self.process.poll() is None


def build_env(config, context: TestContext, env: Optional[dict] = None) -> dict:
    """자식 프로세스 환경 조립 (병합 우선순위: 상속 < 설정 < 호출자 < DB 접속정보)"""
    return {
        **os.environ,
        **config.as_env(),
        **{k: str(v) for k, v in (env or {}).items()},
        **db_config(context.backend, config),
    }


def start_app(
    config,
    context: TestContext,
    env: Optional[dict] = None,
    reset: bool = True,
    timeout: Optional[float] = None,
) -> AppHandle:
    """
    애플리케이션 기동 후 200 응답까지 대기

    주요단계:
    1) reset=True면 백엔드별 DB 초기화 (stop+start 전체 RESET_TIMEOUT초 제한)
    2) APP_LOG를 append 모드로 열고 APP_BINARY 실행
    3) DOMAIN 루트 경로에 readiness poll
    4) AppHandle 반환

    Raises
    ------
    FileNotFoundError
        APP_BINARY 없음
    subprocess.CalledProcessError
        DB 컨테이너 기동 실패 (롤백 없음, 다음 teardown에서 정리)
    TimeoutError
        timeout 안에 200 응답 없음 (자식 프로세스는 종료 후 전달)
    """
    backend = context.backend

    # 1) DB 초기화
    if reset:
        log_info(f"[start_app] {context.name}: {backend.value} DB 초기화")
        reset_db(backend, config, timeout=RESET_TIMEOUT)

    # 2) 프로세스 실행
    binary = config.get("APP_BINARY") or DEFAULT_APP_BINARY
    log_path = Path(config.get("APP_LOG") or DEFAULT_APP_LOG)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    log_file = open(log_path, "a", encoding="utf-8")
    try:
        process = subprocess.Popen(
            [binary],
            env=build_env(config, context, env),
            stdin=None,
            stdout=log_file,
            stderr=log_file,
        )
    except OSError as e:
        log_file.close()
        log_error(f"[start_app] {binary} 실행 실패: {e}")
        raise

    handle = AppHandle(process=process, log_file=log_file, config=config, backend=backend)
    log_debug(f"[start_app] pid={process.pid}, log={log_path}")

    # 3) readiness poll
    try:
        wait_for(app_url(config, "/"), timeout=timeout)
    except BaseException:
        terminate(handle)
        raise

    log_info(f"[start_app] 애플리케이션 실행 중: {config.get('DOMAIN')} (pid={process.pid})")
    return handle


def terminate(handle: AppHandle) -> Optional[int]:
    """SIGTERM → STOP_GRACE초 대기 → 응답 없으면 SIGKILL, 로그파일 닫기"""
    process = handle.process
    try:
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=STOP_GRACE)
            except subprocess.TimeoutExpired:
                log_warn(f"[terminate] pid={process.pid} {STOP_GRACE}초 내 종료 안 됨 → kill")
                process.kill()
                process.wait()
    finally:
        handle.log_file.close()
    return process.returncode


def stop_app(handle: AppHandle, context: TestContext, reset: bool = True) -> None:
    """애플리케이션 종료 후 (선택) 해당 백엔드 DB 정리"""
    log_info(f"[stop_app] 애플리케이션 중지 (pid={handle.pid})")
    returncode = terminate(handle)
    log_debug(f"[stop_app] 종료코드={returncode}")

    if reset:
        stop_db(context.backend, handle.config, timeout=RESET_TIMEOUT)


def restart_app(
    handle: AppHandle,
    config,
    context: TestContext,
    env: Optional[dict] = None,
    reset: bool = True,
    timeout: Optional[float] = None,
) -> AppHandle:
    """stop_app 완료 후 start_app (같은 설정 객체 사용 → DOMAIN/SSO 값 유지)"""
    stop_app(handle, context, reset=reset)
    return start_app(config, context, env=env, reset=reset, timeout=timeout)
