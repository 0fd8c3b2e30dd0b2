"""ローカルファイルシステムベースの出力マップストア。"""

import json
import shutil
from pathlib import Path

from rigging.models.errors import ExportNameConflictError, StorageError
from rigging.models.outputs import OutputMap


class OutputStore:
    """環境横断で参照される出力マップの保存先。

    環境ごとに1つのJSONファイルへ保存する。
    エクスポート名は保存済みの全環境を通して一意でなければならない。
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir
        self._outputs_dir = data_dir / "outputs"

    def _environment_dir(self, environment: str) -> Path:
        # ディレクトリトラバーサル防止
        safe_name = Path(environment).name
        if safe_name != environment or safe_name in {"", ".", ".."}:
            raise StorageError(f"Invalid environment name: {environment}")
        return self._outputs_dir / safe_name

    def _outputs_file(self, environment: str) -> Path:
        return self._environment_dir(environment) / "outputs.json"

    async def save_outputs(self, output_map: OutputMap) -> None:
        """出力マップを保存する。同じ環境の既存マップは上書きする。

        Raises:
            ExportNameConflictError: 他の環境が同じエクスポート名を公開済みの場合。
        """
        exports = set(output_map.exports())
        for environment in await self.list_environments():
            if environment == output_map.environment:
                continue
            existing = await self.load_outputs(environment)
            conflicts = exports.intersection(existing.exports())
            if conflicts:
                raise ExportNameConflictError(sorted(conflicts)[0], environment).with_environment(
                    output_map.environment
                )

        env_dir = self._environment_dir(output_map.environment)
        env_dir.mkdir(parents=True, exist_ok=True)
        self._outputs_file(output_map.environment).write_text(output_map.model_dump_json(indent=2), encoding="utf-8")

    async def load_outputs(self, environment: str) -> OutputMap:
        """出力マップを読み込む。

        Raises:
            StorageError: 出力マップが保存されていない場合。
        """
        outputs_file = self._outputs_file(environment)
        if not outputs_file.exists():
            raise StorageError(f"Outputs not found for environment: {environment}", environment=environment)
        data = json.loads(outputs_file.read_text(encoding="utf-8"))
        return OutputMap.model_validate(data)

    async def delete_outputs(self, environment: str) -> None:
        """出力マップを削除する。"""
        env_dir = self._environment_dir(environment)
        if env_dir.exists():
            shutil.rmtree(env_dir)

    async def list_environments(self) -> list[str]:
        """出力マップが保存されている環境名の一覧を返す。"""
        if not self._outputs_dir.exists():
            return []
        return sorted(d.name for d in self._outputs_dir.iterdir() if (d / "outputs.json").is_file())
