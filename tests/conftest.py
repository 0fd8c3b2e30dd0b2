"""テスト共通フィクスチャ。"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from rigging.config import ServerConfig
from rigging.models.configuration import ConfigurationRecord, CredentialRef
from rigging.services.resolver import TopologyResolver
from rigging.storage.loader import ConfigurationLoader
from rigging.storage.service import OutputStore


@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """テスト用の一時データディレクトリ。"""
    return tmp_path / "rigging-test"


@pytest.fixture
def config_file() -> Path:
    """リポジトリ同梱の環境別構成ファイル。"""
    return Path(__file__).parent.parent / "config" / "environments.yaml"


@pytest.fixture
def loader(config_file: Path) -> ConfigurationLoader:
    """テスト用ConfigurationLoader。"""
    return ConfigurationLoader(config_file=config_file)


@pytest.fixture
def store(tmp_data_dir: Path) -> OutputStore:
    """テスト用OutputStore。"""
    return OutputStore(data_dir=tmp_data_dir)


@pytest.fixture
def resolver() -> TopologyResolver:
    """テスト用TopologyResolver。"""
    return TopologyResolver(stack_name="genai")


@pytest.fixture
def make_record() -> Callable[..., ConfigurationRecord]:
    """上書き可能な既定値付きの構成レコードを作成する。"""

    def _make(**overrides: Any) -> ConfigurationRecord:
        values: dict[str, Any] = {
            "network_range": "10.0.0.0/16",
            "compute_size_class": "t3.micro",
            "database_engine": "postgres",
            "database_storage_gb": 20,
            "database_size_class": "db.t3.micro",
            "credential_ref": CredentialRef(secret_ref="genai/test/db-admin"),
            "min_capacity": 1,
            "desired_capacity": 2,
            "max_capacity": 4,
        }
        values.update(overrides)
        return ConfigurationRecord(**values)

    return _make


@pytest.fixture
def server_config(tmp_data_dir: Path, config_file: Path) -> ServerConfig:
    """テスト用ServerConfig。"""
    return ServerConfig(data_dir=tmp_data_dir, config_file=config_file)
