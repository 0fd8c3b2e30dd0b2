"""Riggingサーバーの設定管理。"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数から読み込み可能。"""

    model_config = {"env_prefix": "RIGGING_", "populate_by_name": True}

    data_dir: Path = _REPO_ROOT / ".rigging"
    config_file: Path = _REPO_ROOT / "config" / "environments.yaml"
    # 既定の対象環境。DEPLOY_ENV も受け付ける
    environment: str = Field(default="dev", validation_alias=AliasChoices("RIGGING_ENVIRONMENT", "DEPLOY_ENV"))
    stack_name: str = "genai"
    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
