import warnings

import pytest
import urllib3

from common.load_config import HarnessConfig

pytest_plugins = ["ssoharness.fixtures"]


@pytest.fixture(autouse=True)
def suppress_insecure_request_warning():
    """
    Globally suppress InsecureRequestWarning for tests.
    Local IdP stacks may be served with self-signed certificates.
    """
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    warnings.simplefilter('ignore', urllib3.exceptions.InsecureRequestWarning)


@pytest.fixture
def base_values(tmp_path):
    return {
        "DOMAIN": "http://127.0.0.1:8003",
        "DATA_FOLDER": str(tmp_path / "data"),
        "APP_BINARY": str(tmp_path / "vaultwarden"),
        "APP_LOG": str(tmp_path / "logs" / "vaultwarden.log"),
        "DOCKER_CMD": "docker",
        "SSO_CLIENT_ID": "VaultWarden",
        "SSO_CLIENT_SECRET": "secret",
        "SSO_AUTHORITY": "http://127.0.0.1:8081/realms/test",
        "SSO_PKCE": "true",
        "POSTGRES_CONTAINER": "test-postgres",
        "POSTGRES_USER": "pg_user",
        "POSTGRES_PWD": "pg_pwd",
        "POSTGRES_DB": "pg_db",
        "POSTGRES_PORT": "6432",
        "MARIADB_CONTAINER": "test-mariadb",
        "MARIADB_USER": "maria_user",
        "MARIADB_PWD": "maria_pwd",
        "MARIADB_DB": "maria_db",
        "MARIADB_PORT": "3307",
        "MYSQL_CONTAINER": "test-mysql",
        "MYSQL_USER": "mysql_user",
        "MYSQL_PWD": "mysql_pwd",
        "MYSQL_DB": "mysql_db",
        "MYSQL_PORT": "3309",
    }


@pytest.fixture
def config(base_values):
    return HarnessConfig(base_values)
