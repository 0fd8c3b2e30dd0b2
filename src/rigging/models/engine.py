"""データベースエンジン関連のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

EngineFamily = Literal["postgres", "mysql"]


class EngineDescriptor(BaseModel):
    """選択済みのバージョン付きデータベースエンジン。"""

    model_config = ConfigDict(frozen=True)

    family: EngineFamily
    version: str
    port: int
