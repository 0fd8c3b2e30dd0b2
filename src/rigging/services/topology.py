"""構成・ネットワークプラン・バウンダリ・エンジンからトポロジーグラフを組み立てるサービス。"""

import structlog

from rigging.models.configuration import ConfigurationRecord
from rigging.models.engine import EngineDescriptor
from rigging.models.errors import DependencyOrderViolation
from rigging.models.network import NetworkPlan, Zone
from rigging.models.security import SecurityBoundary, SecurityBoundarySet
from rigging.models.topology import (
    ComputeResource,
    DatabaseResource,
    LoadBalancerResource,
    NetworkResource,
    ResourceDescriptor,
    ScalingPoolResource,
    SecurityBoundaryResource,
    TopologyGraph,
    ZoneResource,
)
from rigging.validators.topology import TopologyValidator

logger = structlog.get_logger(__name__)

NETWORK_ID = "network"
COMPUTE_ID = "compute-instance"
DATABASE_ID = "database"
SCALING_POOL_ID = "scaling-pool"
LOAD_BALANCER_ID = "load-balancer"


def zone_resource_id(zone: Zone) -> str:
    return f"zone-{zone.name}"


def boundary_resource_id(boundary: SecurityBoundary) -> str:
    return f"boundary-{boundary.kind}"


class _TopologyBuilder:
    """出力済みリソースを追跡し、未出力リソースへの参照を拒否する。"""

    def __init__(self) -> None:
        self._emitted: dict[str, ResourceDescriptor] = {}

    def emit(self, resource: ResourceDescriptor) -> str:
        missing = [dep for dep in resource.depends_on if dep not in self._emitted]
        if missing:
            raise DependencyOrderViolation(resource.id, missing)
        if resource.id in self._emitted:
            raise DependencyOrderViolation(resource.id, [f"{resource.id} (duplicate)"])
        self._emitted[resource.id] = resource
        return resource.id

    @property
    def resources(self) -> tuple[ResourceDescriptor, ...]:
        return tuple(self._emitted.values())


def assemble_topology(
    record: ConfigurationRecord,
    plan: NetworkPlan,
    boundaries: SecurityBoundarySet,
    engine: EngineDescriptor,
    *,
    environment: str,
    stack_name: str,
) -> TopologyGraph:
    """リソースを依存順に並べたトポロジーグラフを組み立てる。

    出力順: ネットワーク → ゾーン → セキュリティバウンダリ → Compute → Database
    → ScalingPool → LoadBalancer。

    Args:
        record: 検証済みの構成レコード。
        plan: ネットワークプラン。
        boundaries: セキュリティバウンダリのセット（エンジンによる補正後）。
        engine: 選択済みエンジン。
        environment: 環境名。
        stack_name: 表示名に使用するスタック名。

    Returns:
        完成したトポロジーグラフ。

    Raises:
        PortEngineMismatchError: dataバウンダリのポートがエンジンと一致しない場合。
        DependencyOrderViolation: 未出力のリソースを参照した場合。
    """
    prefix = f"{stack_name}-{environment}"
    builder = _TopologyBuilder()

    network_id = builder.emit(
        NetworkResource(
            id=NETWORK_ID,
            display_name=f"{prefix}-network",
            cidr=plan.network_range,
            max_zones=plan.redundancy,
        )
    )

    zone_ids: dict[str, str] = {}
    for zone in plan.zones:
        zone_ids[zone.name] = builder.emit(
            ZoneResource(
                id=zone_resource_id(zone),
                display_name=f"{prefix}-{zone.name}",
                depends_on=(network_id,),
                zone=zone,
            )
        )
    public_ids = tuple(zone_ids[z.name] for z in plan.public_zones)
    isolated_ids = tuple(zone_ids[z.name] for z in plan.isolated_zones)

    # バウンダリは送信元として参照するバウンダリに依存する
    boundary_ids: dict[str, str] = {}
    for boundary in boundaries.ordered():
        refs = tuple(boundary_ids[s] for s in sorted(boundary.sources()) if s in boundary_ids)
        boundary_ids[boundary.kind] = builder.emit(
            SecurityBoundaryResource(
                id=boundary_resource_id(boundary),
                display_name=f"{prefix}-{boundary.kind}-sg",
                depends_on=(network_id, *refs),
                boundary=boundary,
            )
        )

    compute_zone = public_ids[0]
    builder.emit(
        ComputeResource(
            id=COMPUTE_ID,
            display_name=f"{prefix}-instance",
            depends_on=(compute_zone, boundary_ids["compute"]),
            size_class=record.compute_size_class,
            zone_id=compute_zone,
            boundary_id=boundary_ids["compute"],
        )
    )

    builder.emit(
        DatabaseResource(
            id=DATABASE_ID,
            display_name=f"{prefix}-db",
            depends_on=(*isolated_ids, boundary_ids["data"]),
            engine=engine,
            size_class=record.database_size_class,
            storage_gb=record.database_storage_gb,
            zone_ids=isolated_ids,
            boundary_id=boundary_ids["data"],
            credential=record.credential_ref,
        )
    )

    TopologyValidator.check_port_engine(boundaries.data, engine)

    builder.emit(
        ScalingPoolResource(
            id=SCALING_POOL_ID,
            display_name=f"{prefix}-asg",
            depends_on=(*public_ids, boundary_ids["compute"]),
            size_class=record.compute_size_class,
            zone_ids=public_ids,
            boundary_id=boundary_ids["compute"],
            min_capacity=record.min_capacity,
            desired_capacity=record.desired_capacity,
            max_capacity=record.max_capacity,
        )
    )

    builder.emit(
        LoadBalancerResource(
            id=LOAD_BALANCER_ID,
            display_name=f"{prefix}-alb",
            depends_on=(*public_ids, boundary_ids["edge"]),
            zone_ids=public_ids,
            boundary_id=boundary_ids["edge"],
        )
    )

    graph = TopologyGraph(environment=environment, stack_name=stack_name, resources=builder.resources)
    logger.info(
        "topology_assembled",
        environment=environment,
        resources=len(graph.resources),
        engine=engine.family,
    )
    return graph
