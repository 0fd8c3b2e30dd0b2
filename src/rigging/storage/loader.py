"""環境別構成ドキュメントおよび環境変数から構成レコードを読み込む。"""

import json
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from rigging.models.configuration import ConfigurationRecord
from rigging.models.errors import (
    ConfigurationConstraintError,
    EnvironmentNotFoundError,
    MissingFieldError,
    StorageError,
)

logger = structlog.get_logger(__name__)

# 平文の認証情報として拒否するキー
_PLAINTEXT_SECRET_KEYS = frozenset({"dbAdminPassword", "db_admin_password"})


def _to_record(data: dict[str, Any], environment: str) -> ConfigurationRecord:
    """辞書を構成レコードに変換し、pydanticのエラーをRiggingの例外に変換する。"""
    leaked = _PLAINTEXT_SECRET_KEYS.intersection(data)
    if leaked:
        raise ConfigurationConstraintError(
            f"Plaintext credentials are not accepted ({', '.join(sorted(leaked))}); use credentialRef",
            environment=environment,
        )

    try:
        return ConfigurationRecord.model_validate(data)
    except ValidationError as e:
        for error in e.errors():
            if error["type"] == "missing":
                field = ".".join(str(part) for part in error["loc"])
                raise MissingFieldError(field, environment=environment) from None
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        raise ConfigurationConstraintError(f"{field}: {first['msg']}", environment=environment) from None


class ConfigurationLoader:
    """環境名をキーとする構成ドキュメント（JSON/YAML）を読み込む。"""

    def __init__(self, config_file: Path) -> None:
        self._config_file = config_file
        self._document: dict[str, Any] | None = None

    def _load_document(self) -> dict[str, Any]:
        """構成ドキュメントを読み込む。拡張子が .json の場合はJSON、それ以外はYAMLとして扱う。"""
        if self._document is not None:
            return self._document

        try:
            with open(self._config_file, encoding="utf-8") as f:
                if self._config_file.suffix == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except FileNotFoundError:
            raise StorageError(f"Configuration file not found: {self._config_file}") from None
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise StorageError(f"Cannot parse configuration file {self._config_file}: {e}") from None

        if not isinstance(data, dict):
            raise StorageError(f"Configuration file must map environment names to sections: {self._config_file}")

        self._document = data
        return data

    def environments(self) -> list[str]:
        """構成ドキュメントに定義された環境名の一覧を返す。"""
        return list(self._load_document())

    def load(self, environment: str) -> ConfigurationRecord:
        """指定環境の構成レコードを読み込む。

        Raises:
            EnvironmentNotFoundError: 環境が定義されていない場合。
            MissingFieldError: 必須フィールドが無い場合。
            ConfigurationConstraintError: 値の型が不正、または平文の認証情報を含む場合。
        """
        section = self._load_document().get(environment)
        if not isinstance(section, dict):
            raise EnvironmentNotFoundError(environment)

        record = _to_record(section, environment)
        logger.debug("configuration_loaded", environment=environment, source=str(self._config_file))
        return record

    def load_all(self) -> dict[str, ConfigurationRecord]:
        """全環境の構成レコードを読み込む。"""
        return {env: self.load(env) for env in self.environments()}


class EnvRecordSettings(BaseSettings):
    """環境変数と .env ファイルから読み込む単一環境分の構成。"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    vpc_cidr: str
    instance_type: str
    db_engine: str
    db_storage: int
    db_instance_type: str
    db_admin_username: str = "admin"
    db_credential_secret: str
    db_admin_password: str | None = None
    db_port: int | None = None
    min_capacity: int
    desired_capacity: int
    max_capacity: int


def load_from_env(environment: str, env_file: Path | str | None = ".env") -> ConfigurationRecord:
    """環境変数（VPC_CIDR, DB_ENGINE, ...）から構成レコードを作成する。

    Raises:
        MissingFieldError: 必須の環境変数が無い場合。
        ConfigurationConstraintError: 値の型が不正、または DB_ADMIN_PASSWORD が設定されている場合。
    """
    try:
        settings = EnvRecordSettings(_env_file=env_file)  # type: ignore[call-arg]
    except ValidationError as e:
        for error in e.errors():
            if error["type"] == "missing":
                raise MissingFieldError(str(error["loc"][0]).upper(), environment=environment) from None
        first = e.errors()[0]
        raise ConfigurationConstraintError(
            f"{str(first['loc'][0]).upper()}: {first['msg']}", environment=environment
        ) from None

    if settings.db_admin_password is not None:
        raise ConfigurationConstraintError(
            "Plaintext credentials are not accepted (DB_ADMIN_PASSWORD); use DB_CREDENTIAL_SECRET",
            environment=environment,
        )

    return _to_record(
        {
            "network_range": settings.vpc_cidr,
            "compute_size_class": settings.instance_type,
            "database_engine": settings.db_engine,
            "database_storage_gb": settings.db_storage,
            "database_size_class": settings.db_instance_type,
            "credential_ref": {"secret_ref": settings.db_credential_secret, "username": settings.db_admin_username},
            "min_capacity": settings.min_capacity,
            "desired_capacity": settings.desired_capacity,
            "max_capacity": settings.max_capacity,
            "database_port": settings.db_port,
        },
        environment,
    )
