"""トポロジー解決のMCPツール定義。"""

from typing import Any, Literal

from fastmcp import FastMCP

from rigging.models.errors import RiggingError
from rigging.services.provisioning import ProvisioningService, ReportedIdentifiers
from rigging.services.resolver import TopologyResolver
from rigging.storage.loader import ConfigurationLoader
from rigging.storage.service import OutputStore


def _error(e: Exception) -> dict[str, Any]:
    return {
        "error": type(e).__name__,
        "message": str(e),
        "environment": getattr(e, "environment", None),
    }


def register_topology_tools(
    mcp: FastMCP,
    loader: ConfigurationLoader,
    resolver: TopologyResolver,
    store: OutputStore,
    *,
    default_environment: str = "dev",
) -> None:
    """トポロジー関連のMCPツールを登録する。"""

    @mcp.tool()
    async def list_environments() -> dict[str, Any]:
        """構成ファイルに定義された環境名の一覧を取得する。"""
        try:
            return {"environments": loader.environments()}
        except RiggingError as e:
            return _error(e)

    @mcp.tool()
    async def resolve_topology(environment: str | None = None) -> dict[str, Any]:
        """指定環境のトポロジーグラフと出力マップを解決する。

        ネットワーク分割、セキュリティバウンダリ、エンジン選択を経て、
        依存順に並んだリソース記述子の列と出力マップを返します。
        プロビジョニング前のため、出力値は参照トークン（例: "${database.endpoint}"）になります。

        Args:
            environment: 環境名（例: "dev", "prod"）。省略時はサーバー設定の既定環境。
        """
        environment = environment or default_environment
        try:
            record = loader.load(environment)
            resolution = resolver.resolve(record, environment)
            return {
                "environment": environment,
                "resources": [r.model_dump(mode="json") for r in resolution.graph.resources],
                "outputs": resolution.outputs.model_dump(mode="json"),
            }
        except (RiggingError, ValueError) as e:
            return _error(e)

    @mcp.tool()
    async def resolve_all_environments(policy: Literal["fail_fast", "collect"] = "collect") -> dict[str, Any]:
        """構成ファイルの全環境を解決し、環境ごとの成否を返す。

        Args:
            policy: "fail_fast" は最初の失敗で中断、"collect" は失敗を記録して続行する。
        """
        try:
            batch = resolver.resolve_all(loader.load_all(), policy=policy)
        except (RiggingError, ValueError) as e:
            return _error(e)
        return {
            "resolved": sorted(batch.resolutions),
            "failures": [f.model_dump() for f in batch.failures],
        }

    @mcp.tool()
    async def publish_environment_outputs(environment: str) -> dict[str, Any]:
        """指定環境の出力マップを解決してストアに保存する。

        エクスポート名が他の環境と衝突する場合は保存せずエラーを返します。

        Args:
            environment: 環境名。
        """
        try:
            record = loader.load(environment)
            resolution = resolver.resolve(record, environment)
            await store.save_outputs(resolution.outputs)
            return resolution.outputs.model_dump(mode="json")
        except (RiggingError, ValueError) as e:
            return _error(e)

    @mcp.tool()
    async def record_provisioned_identifiers(
        environment: str, identifiers: dict[str, dict[str, str]]
    ) -> dict[str, Any]:
        """外部エンジンが報告したリソース識別子で出力マップを確定し、ストアに保存する。

        トポロジーを解決し直し、依存順にリソースを引き渡して識別子を記録します。
        報告の無いリソースの出力は参照トークンのまま残ります。

        Args:
            environment: 環境名。
            identifiers: リソースID → {属性: 値}（例: {"database": {"endpoint": "..."}}）。
        """
        try:
            record = loader.load(environment)
            resolution = resolver.resolve(record, environment)
            service = ProvisioningService(ReportedIdentifiers(identifiers))
            output_map = await service.provision_and_publish(resolution.graph)
            await store.save_outputs(output_map)
            return output_map.model_dump(mode="json")
        except (RiggingError, ValueError) as e:
            return _error(e)

    @mcp.tool()
    async def get_outputs(environment: str) -> dict[str, Any]:
        """保存済みの出力マップを取得する。

        Args:
            environment: 環境名。
        """
        try:
            output_map = await store.load_outputs(environment)
            return output_map.model_dump(mode="json")
        except RiggingError as e:
            return _error(e)
