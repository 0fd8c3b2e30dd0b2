"""トポロジーグラフを外部のプロビジョニングエンジンへ順に引き渡すサービス。"""

from collections.abc import Mapping
from typing import Protocol

import structlog
from pydantic import BaseModel, Field

from rigging.models.errors import ActuationError
from rigging.models.outputs import OutputMap
from rigging.models.topology import ResourceDescriptor, TopologyGraph
from rigging.services.outputs import publish_outputs
from rigging.validators.topology import TopologyValidator

logger = structlog.get_logger(__name__)


class Actuator(Protocol):
    """リソース記述子を実リソースに変換する外部エンジン。"""

    async def allocate(self, resource: ResourceDescriptor) -> dict[str, str]:
        """リソースを割り当て、確定した識別子（属性 → 値）を返す。"""
        ...


class ReportedIdentifiers:
    """外部で割り当て済みのリソース識別子を返すアクチュエータ。

    実際の割り当ては外部エンジンが行い、その報告値をグラフの順序で引き渡す。
    報告の無いリソースは空の識別子として扱う。
    """

    def __init__(self, identifiers: Mapping[str, Mapping[str, str]]) -> None:
        self._identifiers = identifiers

    async def allocate(self, resource: ResourceDescriptor) -> dict[str, str]:
        return dict(self._identifiers.get(resource.id, {}))


class ProvisioningReport(BaseModel):
    """プロビジョニング結果。"""

    environment: str
    allocated: list[str] = Field(default_factory=list)
    identifiers: dict[str, dict[str, str]] = Field(default_factory=dict)


class ProvisioningService:
    """トポロジーグラフを出力順にアクチュエータへ引き渡す。

    リトライ、削除順序の管理、ドリフト検出は行わない。
    """

    def __init__(self, actuator: Actuator) -> None:
        self._actuator = actuator
        self._validator = TopologyValidator()

    async def provision(self, graph: TopologyGraph) -> ProvisioningReport:
        """グラフのリソースを1つずつ割り当てる。

        Args:
            graph: 完成したトポロジーグラフ。

        Returns:
            割り当て済みリソースと報告された識別子。

        Raises:
            DependencyOrderViolation: グラフの依存順序が壊れている場合。
            PortEngineMismatchError: dataバウンダリのポートがエンジンと一致しない場合。
            ActuationError: アクチュエータが失敗した場合。
        """
        self._validator.validate(graph)

        report = ProvisioningReport(environment=graph.environment)
        for resource in graph.resources:
            try:
                identifiers = await self._actuator.allocate(resource)
            except Exception as e:
                raise ActuationError(resource.id, str(e)).with_environment(graph.environment) from e
            report.allocated.append(resource.id)
            report.identifiers[resource.id] = dict(identifiers)
            logger.debug("resource_allocated", environment=graph.environment, resource=resource.id)

        logger.info("topology_provisioned", environment=graph.environment, resources=len(report.allocated))
        return report

    async def provision_and_publish(self, graph: TopologyGraph, *, export: bool = True) -> OutputMap:
        """プロビジョニング後、報告された識別子で出力マップを作成する。"""
        report = await self.provision(graph)
        return publish_outputs(graph, identifiers=report.identifiers, export=export)
