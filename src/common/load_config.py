"""
파일명: src/common/load_config.py
목적: test.env 형식(key=value)의 설정파일을 읽어 불변 설정 객체로 제공
설명:
  - python-dotenv로 파싱하며 ${VAR}, ${VAR:-default} 형태의 변수 치환을 수행
  - 치환 시 파일 안의 값이 상속된 환경변수보다 우선함
  - 설정파일이 없으면 "추가 설정 없음"으로 간주하고 빈 설정을 반환
  - 형식이 잘못된 줄이 하나라도 있으면 ValueError (부분 적용 없음)
  - 전역 os.environ 주입은 load_env()를 명시적으로 호출할 때만 수행
"""

import io
import os
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, Optional, Union

from dotenv import dotenv_values
from dotenv.parser import parse_stream

from common.logger import log_debug, log_info

DEFAULT_ENV_FILE = "test.env"
TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


class HarnessConfig(Mapping):
    """
    읽기 전용 설정 매핑

    Parameters
    ----------
    values : Mapping[str, str]
        변수 치환이 끝난 key/value 쌍.
    source : Path, optional
        값을 읽어온 설정파일 경로. 파일이 없었다면 None.
    """

    def __init__(self, values: Optional[Mapping] = None, source: Optional[Path] = None):
        self._values = MappingProxyType(dict(values or {}))
        self.source = source

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"HarnessConfig(source={self.source}, keys={sorted(self._values)})"

    def require(self, key: str) -> str:
        if key not in self._values:
            raise KeyError(f"설정 키 누락: {key} (source={self.source})")
        return self._values[key]

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        value = self._values.get(key)
        if value is None or value == "":
            return default
        return int(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._values.get(key)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(f"{key}={value!r}: bool 값으로 해석할 수 없습니다")

    def as_env(self) -> dict:
        """subprocess env 인자로 넘길 수 있는 일반 dict 사본"""
        return dict(self._values)

    def with_overrides(self, **values) -> "HarnessConfig":
        merged = {**self._values, **{k: str(v) for k, v in values.items()}}
        return HarnessConfig(merged, self.source)


def _check_syntax(path: Path) -> None:
    """dotenv 파서가 오류로 표시한 줄이 있으면 ValueError"""
    text = path.read_text(encoding="utf-8")
    for binding in parse_stream(io.StringIO(text)):
        if binding.error:
            raise ValueError(
                f"[load_config] 설정파일 형식 오류: {path}:{binding.original.line} "
                f"→ {binding.original.string.strip()!r}"
            )


def load_config(path: Union[str, Path] = DEFAULT_ENV_FILE) -> HarnessConfig:
    """
    설정파일을 읽어 HarnessConfig로 반환

    주요단계:
    1) 파일이 없으면 빈 설정 반환
    2) 형식 검사 (오류 줄이 있으면 ValueError)
    3) dotenv_values(interpolate=True)로 변수 치환 후 값 확정

    Examples
    --------
    A=1, B=${A}2 → config["B"] == "12"
    """
    env_path = Path(path)
    if not env_path.is_file():
        log_debug(f"[load_config] 설정파일 없음 → 추가 설정 없이 진행: {env_path}")
        return HarnessConfig({}, None)

    _check_syntax(env_path)

    raw = dotenv_values(env_path, interpolate=True, encoding="utf-8")
    values = {k: ("" if v is None else v) for k, v in raw.items()}
    log_debug(f"[load_config] {env_path}: {len(values)}개 변수 로드")
    return HarnessConfig(values, env_path.resolve())


def load_env(path: Union[str, Path] = DEFAULT_ENV_FILE, override: bool = False) -> HarnessConfig:
    """설정파일을 읽고 모든 키를 한 번에 os.environ에 병합"""
    config = load_config(path)
    applied = {
        k: v for k, v in config.items()
        if override or k not in os.environ
    }
    os.environ.update(applied)
    if config:
        log_info(f"[load_env] {len(applied)}/{len(config)}개 변수 환경에 적용 ({config.source})")
    return config
