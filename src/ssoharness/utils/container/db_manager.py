#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container/db_manager.py
목적: 백엔드별 데이터베이스 시작/중지 (테스트마다 빈 DB에서 시작하도록 보장)
설명:
  - sqlite: start/stop 동일 → DATA_FOLDER의 db.sqlite3(+ -shm, -wal) 삭제
  - postgres/mariadb/mysql: docker run --rm -d 로 컨테이너 기동, docker stop 으로 정리
  - 준비 대기(readiness)는 하지 않음 → 애플리케이션의 재접속 또는 호출자 몫
  - docker run 실패는 CalledProcessError 그대로 전달, docker stop 실패는 로그만 남김
"""

import shlex
import subprocess
import time
from pathlib import Path
from typing import List, Optional

from common.logger import log_debug, log_error, log_info, log_warn
from ssoharness.utils.container.backend import (
    Backend,
    backend_spec,
    container_name,
    credential,
)

DEFAULT_DATA_FOLDER = "temp"


def docker_cmd(config) -> List[str]:
    """DOCKER_CMD 설정(기본값 docker, 예: "sudo docker")을 명령 리스트로 변환"""
    return shlex.split(config.get("DOCKER_CMD") or "docker")


def sqlite_files(config) -> List[Path]:
    data_folder = Path(config.get("DATA_FOLDER") or DEFAULT_DATA_FOLDER)
    return [data_folder / name for name in backend_spec(Backend.SQLITE)["files"]]


def start_stop_sqlite(config) -> None:
    """sqlite 저장소 파일 삭제 (이미 없으면 무시)"""
    for path in sqlite_files(config):
        path.unlink(missing_ok=True)
        log_debug(f"[start_stop_sqlite] 삭제(또는 없음): {path}")
    log_info("[start_stop_sqlite] SQLite 저장소 초기화 완료")


def run_args(config, backend: Backend) -> List[str]:
    """docker run 인자 조립 (이미지/포트/환경변수는 backends.yml 기준)"""
    spec = backend_spec(backend)
    name = container_name(config, backend)
    host_port = credential(config, backend, "PORT")

    args = docker_cmd(config) + ["run", "--rm", "--name", name]
    for env_key, suffix in spec["container_env"].items():
        args += ["-e", f"{env_key}={credential(config, backend, suffix)}"]
    args += [
        "-p", f"{host_port}:{spec['internal_port']}",
        "-d", f"{spec['image']['name']}:{spec['image']['tag']}",
    ]
    return args


def start_server_db(config, backend: Backend, timeout: Optional[float] = None) -> str:
    """
    서버형 DB 컨테이너 기동

    Returns
    -------
    str
        docker run -d 가 출력한 컨테이너 ID

    Raises
    ------
    subprocess.CalledProcessError
        docker run 실패 (이름 충돌, 이미지 pull 실패 등)
    subprocess.TimeoutExpired
        timeout 초과
    """
    name = container_name(config, backend)
    log_info(f"[start_db] {backend.value} 시작 → {name}")

    cmd = run_args(config, backend)
    log_debug(f"[start_db] 실행 명령: {' '.join(cmd[:-1])} ...")
    result = subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=timeout)

    container_id = result.stdout.strip()
    log_info(f"[start_db] {name} 컨테이너 시작됨 ({container_id[:12]})")
    return container_id


def stop_server_db(config, backend: Backend, timeout: Optional[float] = None) -> bool:
    """서버형 DB 컨테이너 중지 (이미 없으면 False, 예외 없음)"""
    name = container_name(config, backend)
    log_info(f"[stop_db] {backend.value} 중지 (DB 초기화) → {name}")

    result = subprocess.run(
        docker_cmd(config) + ["stop", name],
        capture_output=True, text=True, timeout=timeout
    )
    if result.returncode == 0:
        log_info(f"[stop_db] {name} 중지 완료")
        return True

    log_warn(f"[stop_db] {name} 중지 생략 (이미 중지됨?): {result.stderr.strip()}")
    return False


def start_db(backend: Backend, config, timeout: Optional[float] = None) -> None:
    if backend.is_server:
        start_server_db(config, backend, timeout=timeout)
    else:
        start_stop_sqlite(config)


def stop_db(backend: Backend, config, timeout: Optional[float] = None) -> None:
    if backend.is_server:
        stop_server_db(config, backend, timeout=timeout)
    else:
        start_stop_sqlite(config)


def time_left(deadline: Optional[float], timeout: Optional[float]) -> Optional[float]:
    """공유 deadline 까지 남은 시간 (이미 지났으면 TimeoutExpired)"""
    if deadline is None:
        return None
    left = deadline - time.monotonic()
    if left <= 0:
        raise subprocess.TimeoutExpired("docker", timeout)
    return left


def reset_db(backend: Backend, config, timeout: Optional[float] = None) -> None:
    """
    stop → start 순서로 빈 DB 준비 (sqlite는 파일 삭제만)

    timeout은 stop과 start를 합친 전체 한도(초)이며, 각 docker 호출에는 남은 시간만 준다.
    """
    if not backend.is_server:
        start_stop_sqlite(config)
        return

    deadline = None if timeout is None else time.monotonic() + timeout
    stop_server_db(config, backend, timeout=time_left(deadline, timeout))
    start_server_db(config, backend, timeout=time_left(deadline, timeout))


def container_running(config, name: str) -> bool:
    """docker ps 이름 필터로 실행 여부 확인 (정확히 같은 이름만 인정)"""
    cmd = docker_cmd(config) + [
        "ps",
        "--filter", f"name=^{name}$",
        "--format", "{{.Names}}",
    ]
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        log_error(f"[container_running] docker ps 실패: {result.stderr.strip()}")
        return False

    names = [c for c in result.stdout.strip().split("\n") if c]
    return name in names
