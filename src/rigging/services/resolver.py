"""構成レコードからトポロジーと出力マップを解決するパイプライン。"""

from collections.abc import Mapping
from typing import Literal

import structlog
from pydantic import BaseModel, ConfigDict

from rigging.models.configuration import ConfigurationRecord
from rigging.models.errors import RiggingError
from rigging.models.outputs import OutputMap
from rigging.models.topology import TopologyGraph
from rigging.services.engine import reconcile_data_port, select_engine
from rigging.services.network import plan_network
from rigging.services.outputs import check_export_collisions, publish_outputs
from rigging.services.security import build_security_boundaries
from rigging.services.topology import assemble_topology
from rigging.validators.configuration import check_constraints

logger = structlog.get_logger(__name__)

FailurePolicy = Literal["fail_fast", "collect"]


class Resolution(BaseModel):
    """1環境分の解決結果。"""

    model_config = ConfigDict(frozen=True)

    environment: str
    graph: TopologyGraph
    outputs: OutputMap


class ResolutionFailure(BaseModel):
    """1環境分の解決失敗。"""

    model_config = ConfigDict(frozen=True)

    environment: str
    error: str
    message: str


class BatchResolution(BaseModel):
    """複数環境の解決結果。"""

    resolutions: dict[str, Resolution]
    failures: list[ResolutionFailure]

    @property
    def ok(self) -> bool:
        return not self.failures


class TopologyResolver:
    """構成レコード → ネットワークプラン → バウンダリ → エンジン → トポロジー → 出力 の順に解決する。"""

    def __init__(self, stack_name: str) -> None:
        self._stack_name = stack_name

    def resolve(self, record: ConfigurationRecord, environment: str) -> Resolution:
        """1環境分のトポロジーと出力マップを解決する。

        Args:
            record: 構成レコード。
            environment: 環境名。

        Returns:
            解決結果。

        Raises:
            RiggingError: いずれかの段階で失敗した場合。environment属性に環境名が設定される。
        """
        log = logger.bind(environment=environment)
        try:
            check_constraints(record)
            plan = plan_network(record.network_range)
            boundaries = build_security_boundaries(plan, data_port=record.database_port)
            engine = select_engine(record.database_engine)
            boundaries = reconcile_data_port(boundaries, engine)
            graph = assemble_topology(
                record,
                plan,
                boundaries,
                engine,
                environment=environment,
                stack_name=self._stack_name,
            )
            outputs = publish_outputs(graph)
        except RiggingError as e:
            log.warning("resolution_failed", error=type(e).__name__, message=str(e))
            raise e.with_environment(environment)

        log.info("resolution_completed", resources=len(graph.resources))
        return Resolution(environment=environment, graph=graph, outputs=outputs)

    def resolve_all(
        self,
        records: Mapping[str, ConfigurationRecord],
        policy: FailurePolicy = "fail_fast",
    ) -> BatchResolution:
        """複数環境を独立に解決する。

        Args:
            records: 環境名 → 構成レコード。
            policy: "fail_fast" は最初の失敗で例外を送出する。
                "collect" は失敗を記録して残りの環境を続行する。

        Returns:
            環境ごとの解決結果と失敗の一覧。

        Raises:
            RiggingError: policy が "fail_fast" で失敗した場合、またはエクスポート名が衝突した場合。
        """
        resolutions: dict[str, Resolution] = {}
        failures: list[ResolutionFailure] = []
        for environment, record in records.items():
            try:
                resolutions[environment] = self.resolve(record, environment)
            except RiggingError as e:
                if policy == "fail_fast":
                    raise
                failures.append(ResolutionFailure(environment=environment, error=type(e).__name__, message=str(e)))

        check_export_collisions(r.outputs for r in resolutions.values())
        return BatchResolution(resolutions=resolutions, failures=failures)
