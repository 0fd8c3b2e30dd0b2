"""トポロジーグラフ関連のデータモデル。"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from rigging.models.configuration import CredentialRef
from rigging.models.engine import EngineDescriptor
from rigging.models.network import Zone
from rigging.models.security import SecurityBoundary

# Compute / ScalingPoolで使用するマシンイメージ
DEFAULT_MACHINE_IMAGE = "amazon-linux-2"


class ResourceDescriptor(BaseModel):
    """プロビジョニングエンジンに渡すリソース記述子の基底。"""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str
    depends_on: tuple[str, ...] = ()


class NetworkResource(ResourceDescriptor):
    kind: Literal["network"] = "network"
    cidr: str
    max_zones: int


class ZoneResource(ResourceDescriptor):
    kind: Literal["zone"] = "zone"
    zone: Zone


class SecurityBoundaryResource(ResourceDescriptor):
    kind: Literal["security_boundary"] = "security_boundary"
    boundary: SecurityBoundary


class ComputeResource(ResourceDescriptor):
    """単体のComputeインスタンス。publicゾーン1つとcomputeバウンダリに紐づく。"""

    kind: Literal["compute"] = "compute"
    size_class: str
    machine_image: str = DEFAULT_MACHINE_IMAGE
    zone_id: str
    boundary_id: str


class DatabaseResource(ResourceDescriptor):
    """マネージドデータベース。両isolatedゾーンにまたがって配置される。"""

    kind: Literal["database"] = "database"
    engine: EngineDescriptor
    size_class: str
    storage_gb: int
    multi_zone: bool = True
    zone_ids: tuple[str, ...]
    boundary_id: str
    credential: CredentialRef


class ScalingPoolResource(ResourceDescriptor):
    """オートスケーリングプール。キャパシティは構成レコードの値をそのまま保持する。"""

    kind: Literal["scaling_pool"] = "scaling_pool"
    size_class: str
    machine_image: str = DEFAULT_MACHINE_IMAGE
    zone_ids: tuple[str, ...]
    boundary_id: str
    min_capacity: int
    desired_capacity: int
    max_capacity: int


class LoadBalancerResource(ResourceDescriptor):
    kind: Literal["load_balancer"] = "load_balancer"
    internet_facing: bool = True
    zone_ids: tuple[str, ...]
    boundary_id: str


Resource = Annotated[
    NetworkResource
    | ZoneResource
    | SecurityBoundaryResource
    | ComputeResource
    | DatabaseResource
    | ScalingPoolResource
    | LoadBalancerResource,
    Field(discriminator="kind"),
]

ResourceKind = Literal[
    "network", "zone", "security_boundary", "compute", "database", "scaling_pool", "load_balancer"
]


class TopologyGraph(BaseModel):
    """依存順に並んだリソース記述子の列。

    各リソースの depends_on は、列の中でそれより前に現れるリソースのみを指す。
    """

    model_config = ConfigDict(frozen=True)

    environment: str
    stack_name: str
    resources: tuple[Resource, ...]

    def get(self, resource_id: str) -> ResourceDescriptor:
        """IDでリソースを取得する。

        Raises:
            KeyError: 該当リソースが無い場合。
        """
        for resource in self.resources:
            if resource.id == resource_id:
                return resource
        raise KeyError(resource_id)

    def of_kind(self, kind: ResourceKind) -> list[ResourceDescriptor]:
        """指定種別のリソースを出現順に返す。"""
        return [r for r in self.resources if r.kind == kind]

    def single(self, kind: ResourceKind) -> ResourceDescriptor:
        """指定種別のリソースがちょうど1つであることを確認して返す。"""
        matches = self.of_kind(kind)
        if len(matches) != 1:
            raise KeyError(f"expected exactly one {kind} resource, found {len(matches)}")
        return matches[0]

    @property
    def resource_ids(self) -> list[str]:
        return [r.id for r in self.resources]
