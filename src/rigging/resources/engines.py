"""エンジン関連のMCPリソース定義。"""

import yaml
from fastmcp import FastMCP

from rigging.services.engine import supported_engines


def register_engine_resources(mcp: FastMCP) -> None:
    """エンジン関連のMCPリソースを登録する。"""

    @mcp.resource("rigging://engines")
    async def engines() -> str:
        """サポートしているデータベースエンジンの一覧を取得する。

        各エンジンにはエンジン種別、固定バージョン、待ち受けポートが含まれます。
        """
        data = {"engines": [e.model_dump() for e in supported_engines()]}
        return yaml.dump(data, allow_unicode=True, default_flow_style=False)
