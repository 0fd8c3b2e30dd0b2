"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from rigging.config import ServerConfig
from rigging.resources.engines import register_engine_resources
from rigging.services.resolver import TopologyResolver
from rigging.storage.loader import ConfigurationLoader
from rigging.storage.service import OutputStore
from rigging.tools.topology import register_topology_tools


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """Rigging MCPサーバーを作成し、ツール・リソースを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。
    """
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("rigging")

    # データアクセス層
    loader = ConfigurationLoader(config_file=config.config_file)
    store = OutputStore(data_dir=config.data_dir)

    # サービス層
    resolver = TopologyResolver(stack_name=config.stack_name)

    # MCPインターフェース登録
    register_topology_tools(mcp, loader, resolver, store, default_environment=config.environment)
    register_engine_resources(mcp)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "environment": config.environment})

    return mcp
