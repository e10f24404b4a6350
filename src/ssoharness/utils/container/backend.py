#!/usr/bin/env python3
"""
파일명: src/ssoharness/utils/container/backend.py
목적: 테스트 실행마다 사용할 데이터베이스 백엔드를 결정하고 접속정보(DATABASE_URL)를 계산
설명:
  - 백엔드는 문자열 대신 Backend 열거형으로 TestContext에 명시적으로 전달
  - 이름 기반 판별(from_name)은 기본값 유도용으로만 사용 (postgres → mariadb → mysql → sqlite 순)
  - 백엔드 정의(이미지, 포트, 컨테이너 환경변수)는 config/backends.yml에서 읽음
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

from common.logger import log_debug

BACKENDS_FILE = Path(__file__).resolve().parent.parent.parent / "config" / "backends.yml"


class Backend(str, Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MARIADB = "mariadb"
    MYSQL = "mysql"

    @classmethod
    def from_name(cls, name: str) -> "Backend":
        """테스트 실행 이름에 포함된 문자열로 백엔드 판별 (검사 순서 고정)"""
        lowered = (name or "").lower()
        for candidate in (cls.POSTGRES, cls.MARIADB, cls.MYSQL):
            if candidate.value in lowered:
                return candidate
        return cls.SQLITE

    @classmethod
    def parse(cls, value: str) -> "Backend":
        try:
            return cls(value.lower())
        except ValueError:
            choices = ", ".join(b.value for b in cls)
            raise ValueError(f"알 수 없는 백엔드: {value} (선택 가능: {choices})") from None

    @property
    def is_server(self) -> bool:
        return self is not Backend.SQLITE


@dataclass(frozen=True)
class TestContext:
    """
    테스트 한 건의 실행 정보

    backend를 지정하지 않으면 name에서 유도한다.
    """

    __test__ = False  # pytest 수집 대상 아님

    name: str
    backend: Optional[Backend] = None

    def __post_init__(self):
        if self.backend is None:
            object.__setattr__(self, "backend", Backend.from_name(self.name))
        elif not isinstance(self.backend, Backend):
            object.__setattr__(self, "backend", Backend.parse(self.backend))


@lru_cache(maxsize=None)
def load_backend_specs(path: Path = BACKENDS_FILE) -> dict:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    log_debug(f"[load_backend_specs] {path}: {sorted(data)}")
    return data


def backend_spec(backend: Backend) -> dict:
    specs = load_backend_specs()
    if backend.value not in specs:
        raise ValueError(f"[backend_spec] backends.yml에 {backend.value} 정의 없음")
    return specs[backend.value]


def credential(config, backend: Backend, suffix: str) -> str:
    """POSTGRES_USER 처럼 접두어_접미어 형태의 설정값 조회"""
    prefix = backend_spec(backend)["prefix"]
    return config.require(f"{prefix}_{suffix}")


def container_name(config, backend: Backend) -> str:
    prefix = backend_spec(backend)["prefix"]
    return config.get(f"{prefix}_CONTAINER") or f"ssoharness-{backend.value}"


def database_url(config, backend: Backend) -> str:
    spec = backend_spec(backend)
    user = credential(config, backend, "USER")
    pwd = credential(config, backend, "PWD")
    port = credential(config, backend, "PORT")
    db = credential(config, backend, "DB")
    return f"{spec['scheme']}://{user}:{pwd}@127.0.0.1:{port}/{db}"


def db_config(backend: Backend, config) -> dict:
    """
    애플리케이션 프로세스에 주입할 접속 설정 (키 1개)

    Returns
    -------
    dict
        서버형 백엔드: {"DATABASE_URL": "<scheme>://user:pwd@127.0.0.1:port/db"}
        sqlite: {"I_REALLY_WANT_VOLATILE_STORAGE": "true"}
    """
    if not backend.is_server:
        return {"I_REALLY_WANT_VOLATILE_STORAGE": "true"}
    return {"DATABASE_URL": database_url(config, backend)}
