#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container/compose_manager.py
목적: IdP 스택(templates/<stack>/docker-compose.yml) 기동/정리
설명:
  - keycloak: keycloak + 설정 작업(keycloakSetup) + (profile VaultWarden) 애플리케이션
  - zitadel : zitadel + postgres (healthcheck 통과 후 zitadel 시작)
  - 서비스 정의 내용은 건드리지 않고 docker compose CLI로만 호출
"""

import os
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional, Union

from common.logger import log_debug, log_error, log_info, log_warn
from ssoharness.utils.container.db_manager import docker_cmd

STACKS = ("keycloak", "zitadel")
TEMPLATES_ENV = "SSOHARNESS_TEMPLATES"


def templates_root(templates_dir: Optional[Path] = None) -> Path:
    """인자 → SSOHARNESS_TEMPLATES → 현재 디렉터리/templates 순서 (호출 시점에 결정)"""
    if templates_dir:
        return Path(templates_dir)
    return Path(os.getenv(TEMPLATES_ENV) or Path.cwd() / "templates")


def compose_file(stack: str, templates_dir: Optional[Path] = None) -> Path:
    if stack not in STACKS:
        raise ValueError(f"알 수 없는 스택: {stack} (선택 가능: {', '.join(STACKS)})")
    return templates_root(templates_dir) / stack / "docker-compose.yml"


def compose_args(
    stack: str,
    config,
    profiles: Iterable[str] = (),
    templates_dir: Optional[Path] = None,
) -> List[str]:
    path = compose_file(stack, templates_dir)
    args = docker_cmd(config) + [
        "compose",
        "-f", str(path),
        "--project-directory", str(path.parent),
    ]
    for profile in profiles:
        args += ["--profile", profile]
    return args


def compose_env(config, env_file: Union[str, Path, None]) -> dict:
    """docker compose 변수 치환용 환경 (ENV_FILE은 절대경로)"""
    env = {**os.environ, **config.as_env()}
    source = env_file or config.source
    if source:
        env["ENV_FILE"] = str(Path(source).resolve())
    env.setdefault("ENV", "test")
    return env


def stack_up(
    stack: str,
    config,
    env_file: Union[str, Path, None] = None,
    profiles: Iterable[str] = (),
    templates_dir: Optional[Path] = None,
) -> None:
    """docker compose up -d (실패 시 CalledProcessError)"""
    path = compose_file(stack, templates_dir)
    if not path.exists():
        log_error(f"[stack_up] {stack} docker-compose.yml 없음: {path}")
        raise FileNotFoundError(path)

    cmd = compose_args(stack, config, profiles, templates_dir) + ["up", "-d"]
    log_debug(f"[stack_up] 실행 명령: {' '.join(cmd)}")

    result = subprocess.run(cmd, env=compose_env(config, env_file), capture_output=True, text=True)
    if result.returncode != 0:
        log_error(f"[stack_up] {stack} 시작 실패")
        log_error(f"[stack_up] 오류 내용: {result.stderr}")
        raise subprocess.CalledProcessError(result.returncode, cmd, result.stdout, result.stderr)

    log_info(f"[stack_up] {stack} 스택 시작됨")


def stack_down(
    stack: str,
    config,
    env_file: Union[str, Path, None] = None,
    profiles: Iterable[str] = (),
    templates_dir: Optional[Path] = None,
) -> bool:
    """docker compose down (이미 내려가 있어도 예외 없음)"""
    cmd = compose_args(stack, config, profiles, templates_dir) + ["down"]
    log_debug(f"[stack_down] 실행 명령: {' '.join(cmd)}")

    result = subprocess.run(cmd, env=compose_env(config, env_file), capture_output=True, text=True)
    if result.returncode == 0:
        log_info(f"[stack_down] {stack} 스택 중지 완료")
        return True

    log_warn(f"[stack_down] {stack} 중지 실패(무시): {result.stderr.strip()}")
    return False
