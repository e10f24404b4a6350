import yaml
import pytest
from pathlib import Path

# Project Root
PROJECT_ROOT = Path(__file__).parent.parent.parent
BACKENDS_FILE = PROJECT_ROOT / "src" / "ssoharness" / "config" / "backends.yml"
SERVER_BACKENDS = ["postgres", "mariadb", "mysql"]


@pytest.fixture(scope="module")
def backends():
    try:
        return yaml.safe_load(BACKENDS_FILE.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        pytest.fail(f"Invalid YAML Syntax in {BACKENDS_FILE.name}: {e}")


def test_sqlite_files(backends):
    """sqlite는 본 파일 + WAL/SHM 부속 파일 3개를 삭제 대상으로 가져야 함"""
    files = backends["sqlite"]["files"]
    assert files[0] == "db.sqlite3"
    assert set(files) == {"db.sqlite3", "db.sqlite3-shm", "db.sqlite3-wal"}


@pytest.mark.parametrize("name", SERVER_BACKENDS)
def test_server_backend_structure(backends, name):
    """
    [Config Check] 서버형 백엔드 정의 필수 키 검사
    - prefix, image(name/tag), internal_port, scheme, container_env
    """
    spec = backends[name]
    assert isinstance(spec["prefix"], str) and spec["prefix"].isupper()
    assert isinstance(spec["image"]["name"], str)
    assert isinstance(spec["image"]["tag"], str), "'image.tag' must be quoted (e.g. \"10.4\")"
    assert isinstance(spec["internal_port"], int)
    assert spec["scheme"] in {"postgresql", "mysql"}

    # container_env 값은 test.env 키 접미어여야 함
    for env_key, suffix in spec["container_env"].items():
        assert env_key.startswith(spec["prefix"]), f"{name}.{env_key}: unexpected env prefix"
        assert suffix in {"USER", "PWD", "DB"}, f"{name}.{env_key}: unknown suffix {suffix}"
