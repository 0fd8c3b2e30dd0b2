"""ネットワーク分割プラン関連のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

ZoneTag = Literal["public", "isolated"]


class Zone(BaseModel):
    """独立した障害ドメインに配置されるサブネット範囲。"""

    model_config = ConfigDict(frozen=True)

    name: str
    tag: ZoneTag
    cidr: str
    failure_domain: int


class NetworkPlan(BaseModel):
    """ネットワーク範囲とゾーン分割の結果。"""

    model_config = ConfigDict(frozen=True)

    network_range: str
    redundancy: int
    zones: tuple[Zone, ...]

    def zones_tagged(self, tag: ZoneTag) -> tuple[Zone, ...]:
        """指定タグのゾーンを障害ドメイン順に返す。"""
        return tuple(z for z in self.zones if z.tag == tag)

    @property
    def public_zones(self) -> tuple[Zone, ...]:
        return self.zones_tagged("public")

    @property
    def isolated_zones(self) -> tuple[Zone, ...]:
        return self.zones_tagged("isolated")
