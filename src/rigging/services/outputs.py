"""トポロジーグラフから公開用の識別子を抽出するサービス。"""

from collections.abc import Iterable, Mapping

import structlog

from rigging.models.errors import DependencyOrderViolation, ExportNameConflictError
from rigging.models.outputs import OutputEntry, OutputMap
from rigging.models.topology import ResourceKind, TopologyGraph
from rigging.validators.topology import TopologyValidator

logger = structlog.get_logger(__name__)

# シンボリック名 → (リソース種別, 属性, 説明)
OUTPUT_DEFINITIONS: tuple[tuple[str, ResourceKind, str, str], ...] = (
    ("NetworkId", "network", "id", "Network identifier"),
    ("DbInstanceEndpoint", "database", "endpoint", "Database connection endpoint address"),
    ("Ec2InstanceId", "compute", "id", "Compute instance identifier"),
    ("AutoScalingGroupId", "scaling_pool", "name", "Auto scaling group name"),
    ("LoadBalancerDnsName", "load_balancer", "dns_name", "Load balancer DNS name"),
)

# プロビジョニング後の識別子: リソースID → 属性 → 値
Identifiers = Mapping[str, Mapping[str, str]]


def deferred_token(resource_id: str, attribute: str) -> str:
    """未解決の値を表す参照トークンを返す。"""
    return f"${{{resource_id}.{attribute}}}"


def export_name_for(stack_name: str, environment: str, output_name: str) -> str:
    """環境名から導出したエクスポート名を返す。"""
    return f"{stack_name}-{environment}-{output_name}"


def publish_outputs(
    graph: TopologyGraph,
    *,
    identifiers: Identifiers | None = None,
    export: bool = True,
) -> OutputMap:
    """トポロジーグラフから出力マップを作成する。

    プロビジョニングエンジンが報告した識別子があればそれを値とし、
    無い場合は参照トークン（例: "${database.endpoint}"）を値とする。

    Args:
        graph: 完成したトポロジーグラフ。
        identifiers: プロビジョニング後の識別子。
        export: Trueの場合、環境名から導出したエクスポート名を付与する。

    Returns:
        出力マップ。

    Raises:
        DependencyOrderViolation: グラフの依存順序が壊れている場合、または出力元のリソースが1つに定まらない場合。
    """
    TopologyValidator.check_order(graph)
    identifiers = identifiers or {}

    entries: list[OutputEntry] = []
    for name, kind, attribute, description in OUTPUT_DEFINITIONS:
        matches = graph.of_kind(kind)
        if len(matches) != 1:
            raise DependencyOrderViolation(name, [kind]).with_environment(graph.environment)
        resource = matches[0]
        reported = identifiers.get(resource.id, {})
        value = reported.get(attribute)
        entries.append(
            OutputEntry(
                name=name,
                value=value if value is not None else deferred_token(resource.id, attribute),
                description=description,
                export_name=export_name_for(graph.stack_name, graph.environment, name) if export else None,
                resolved=value is not None,
            )
        )

    output_map = OutputMap(environment=graph.environment, entries=tuple(entries))
    logger.info(
        "outputs_published",
        environment=graph.environment,
        resolved=sum(1 for e in entries if e.resolved),
        total=len(entries),
    )
    return output_map


def check_export_collisions(output_maps: Iterable[OutputMap]) -> None:
    """複数の出力マップ間でエクスポート名が衝突していないか検証する。

    Raises:
        ExportNameConflictError: 同じエクスポート名が2つの環境に現れた場合。
    """
    owners: dict[str, str] = {}
    for output_map in output_maps:
        for export_name in output_map.exports():
            owner = owners.get(export_name)
            if owner is not None:
                raise ExportNameConflictError(export_name, owner).with_environment(output_map.environment)
            owners[export_name] = output_map.environment
