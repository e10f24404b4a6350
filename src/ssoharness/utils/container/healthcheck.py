#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container/healthcheck.py
목적: 애플리케이션이 HTTP 200을 응답할 때까지 반복 요청 (readiness poll)
설명:
  - 시도마다 새 requests.Session(격리된 컨텍스트)을 열고, 그 안에서 interval 만큼 대기 후 GET
  - connection refused 만 "아직 준비 안 됨"으로 보고 재시도
  - 그 외 예외는 즉시 전달
  - timeout(초)을 넘기면 TimeoutError, cancel 이벤트가 설정되면 InterruptedError
"""

import errno
import threading
import time
from typing import Optional

import requests

from common.logger import log_debug, log_info

DEFAULT_INTERVAL = 0.5
DEFAULT_REQUEST_TIMEOUT = 5


def is_connection_refused(exc: BaseException) -> bool:
    """
    requests → urllib3 → socket 으로 이어지는 예외 체인에서 connection refused 여부 확인

    SSLError, ProxyError, ConnectTimeout, DNS 실패도 requests.ConnectionError 이므로
    클래스만으로는 구분할 수 없다.
    """
    pending, seen = [exc], set()
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, ConnectionRefusedError):
            return True
        if isinstance(current, OSError) and current.errno == errno.ECONNREFUSED:
            return True
        pending += [current.__cause__, current.__context__, getattr(current, "reason", None)]
        pending += [a for a in getattr(current, "args", ()) if isinstance(a, BaseException)]
    return False


def app_url(config, path: str = "/") -> str:
    """DOMAIN(예: http://localhost:8000)과 경로 결합"""
    domain = config.require("DOMAIN").rstrip("/")
    return f"{domain}/{path.lstrip('/')}"


def wait_for(
    url: str,
    timeout: Optional[float] = None,
    interval: float = DEFAULT_INTERVAL,
    cancel: Optional[threading.Event] = None,
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
) -> int:
    """
    url이 200을 응답할 때까지 대기

    Parameters
    ----------
    url : str
        점검 대상 URL (상태코드만 확인)
    timeout : float, optional
        전체 대기 한도(초). None이면 무제한.
    interval : float
        매 시도 전 대기 시간(초)
    cancel : threading.Event, optional
        설정되면 다음 시도 없이 중단
    request_timeout : float
        요청 1회의 connect/read 한도(초)

    Returns
    -------
    int
        200을 받기까지의 시도 횟수 (즉시 성공이면 1)

    Raises
    ------
    TimeoutError
        timeout 초과
    InterruptedError
        cancel 이벤트 설정
    requests.RequestException
        connection refused 외의 요청 오류 (SSLError, DNS 실패 등)
    """
    cancel = cancel or threading.Event()
    deadline = None if timeout is None else time.monotonic() + timeout
    attempt = 0

    while True:
        attempt += 1
        with requests.Session() as session:
            if cancel.wait(interval):
                raise InterruptedError(f"[wait_for] {url}: 대기 취소됨 ({attempt}번째 시도 전)")
            try:
                status = session.get(url, timeout=request_timeout).status_code
            except requests.ConnectionError as e:
                if not is_connection_refused(e):
                    raise
                log_debug(f"[wait_for] {url}: 연결 거부 → 재시도 ({attempt})")
                status = None

        if status == 200:
            log_info(f"[wait_for] {url} 응답 정상(200) → {attempt}번째 시도")
            return attempt

        if status is not None:
            log_debug(f"[wait_for] {url}: 상태={status} → 재시도 ({attempt})")

        if deadline is not None and time.monotonic() >= deadline:
            raise TimeoutError(f"[wait_for] {url}: {timeout}초 안에 200 응답 없음 ({attempt}회 시도)")
