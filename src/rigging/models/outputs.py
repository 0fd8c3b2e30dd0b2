"""出力マップ関連のデータモデル。"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class OutputEntry(BaseModel):
    """シンボリック名と解決済みの値。"""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    description: str = ""
    export_name: str | None = None
    resolved: bool = True


class OutputMap(BaseModel):
    """環境単位の出力マップ。作成後は変更しない。"""

    model_config = ConfigDict(frozen=True)

    environment: str
    entries: tuple[OutputEntry, ...]
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def values(self) -> dict[str, str]:
        """シンボリック名 → 値 のマッピングを返す。"""
        return {e.name: e.value for e in self.entries}

    def exports(self) -> dict[str, str]:
        """エクスポート名 → 値 のマッピングを返す。"""
        return {e.export_name: e.value for e in self.entries if e.export_name is not None}

    def __getitem__(self, name: str) -> str:
        for entry in self.entries:
            if entry.name == name:
                return entry.value
        raise KeyError(name)
