"""ConfigurationLoader / load_from_envのユニットテスト。"""

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from rigging.models.errors import (
    ConfigurationConstraintError,
    EnvironmentNotFoundError,
    MissingFieldError,
    StorageError,
)
from rigging.storage.loader import ConfigurationLoader, load_from_env

_SECTION: dict[str, Any] = {
    "vpcCidr": "10.0.0.0/16",
    "instanceType": "t3.micro",
    "dbEngine": "postgres",
    "dbStorage": 20,
    "dbInstanceType": "db.t3.micro",
    "credentialRef": {"secretRef": "genai/dev/db-admin", "username": "admin"},
    "minCapacity": 1,
    "desiredCapacity": 2,
    "maxCapacity": 4,
}


def _write_yaml(tmp_path: Path, document: dict[str, Any]) -> Path:
    path = tmp_path / "environments.yaml"
    path.write_text(yaml.safe_dump(document), encoding="utf-8")
    return path


class TestConfigurationLoader:
    def test_bundled_environments(self, loader: ConfigurationLoader) -> None:
        assert loader.environments() == ["dev", "staging", "prod"]
        records = loader.load_all()
        assert records["dev"].database_engine == "mysql"
        assert records["prod"].database_engine == "postgres"

    def test_json_document(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"dev": _SECTION}), encoding="utf-8")
        record = ConfigurationLoader(path).load("dev")
        assert record.network_range == "10.0.0.0/16"
        assert record.credential_ref.secret_ref == "genai/dev/db-admin"

    def test_unknown_environment(self, tmp_path: Path) -> None:
        loader = ConfigurationLoader(_write_yaml(tmp_path, {"dev": _SECTION}))
        with pytest.raises(EnvironmentNotFoundError) as exc_info:
            loader.load("prod")
        assert exc_info.value.environment == "prod"

    def test_missing_field(self, tmp_path: Path) -> None:
        section = {k: v for k, v in _SECTION.items() if k != "vpcCidr"}
        loader = ConfigurationLoader(_write_yaml(tmp_path, {"dev": section}))
        with pytest.raises(MissingFieldError) as exc_info:
            loader.load("dev")
        assert exc_info.value.field == "vpcCidr"
        assert exc_info.value.environment == "dev"

    def test_wrong_type(self, tmp_path: Path) -> None:
        loader = ConfigurationLoader(_write_yaml(tmp_path, {"dev": {**_SECTION, "dbStorage": "lots"}}))
        with pytest.raises(ConfigurationConstraintError, match="dbStorage"):
            loader.load("dev")

    def test_plaintext_password_rejected(self, tmp_path: Path) -> None:
        loader = ConfigurationLoader(_write_yaml(tmp_path, {"dev": {**_SECTION, "dbAdminPassword": "hunter2"}}))
        with pytest.raises(ConfigurationConstraintError) as exc_info:
            loader.load("dev")
        assert "hunter2" not in str(exc_info.value)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StorageError, match="not found"):
            ConfigurationLoader(tmp_path / "absent.yaml").environments()

    def test_malformed_document(self, tmp_path: Path) -> None:
        path = tmp_path / "environments.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(StorageError, match="must map environment names"):
            ConfigurationLoader(path).environments()


class TestLoadFromEnv:
    @pytest.fixture
    def env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        values = {
            "VPC_CIDR": "10.9.0.0/16",
            "INSTANCE_TYPE": "t3.small",
            "DB_ENGINE": "mysql",
            "DB_STORAGE": "30",
            "DB_INSTANCE_TYPE": "db.t3.small",
            "DB_CREDENTIAL_SECRET": "genai/local/db-admin",
            "MIN_CAPACITY": "1",
            "DESIRED_CAPACITY": "1",
            "MAX_CAPACITY": "3",
        }
        for key, value in values.items():
            monkeypatch.setenv(key, value)
        monkeypatch.delenv("DB_ADMIN_PASSWORD", raising=False)
        monkeypatch.delenv("DB_PORT", raising=False)
        monkeypatch.delenv("DB_ADMIN_USERNAME", raising=False)

    def test_reads_environment(self, env_vars: None) -> None:
        record = load_from_env("local", env_file=None)
        assert record.network_range == "10.9.0.0/16"
        assert record.database_storage_gb == 30
        assert record.credential_ref.secret_ref == "genai/local/db-admin"
        assert record.credential_ref.username == "admin"
        assert record.max_capacity == 3

    def test_missing_variable(self, env_vars: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("VPC_CIDR")
        with pytest.raises(MissingFieldError) as exc_info:
            load_from_env("local", env_file=None)
        assert exc_info.value.field == "VPC_CIDR"

    def test_plaintext_password_rejected(self, env_vars: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_ADMIN_PASSWORD", "hunter2")
        with pytest.raises(ConfigurationConstraintError):
            load_from_env("local", env_file=None)

    def test_dotenv_file(self, tmp_path: Path, env_vars: None, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DB_ENGINE")
        env_file = tmp_path / ".env"
        env_file.write_text("DB_ENGINE=postgres\n", encoding="utf-8")
        record = load_from_env("local", env_file=env_file)
        assert record.database_engine == "postgres"
