"""セキュリティバウンダリ関連のデータモデル。"""

from typing import Literal

from pydantic import BaseModel, ConfigDict

BoundaryKind = Literal["edge", "compute", "data"]
TrafficSource = Literal["anywhere", "edge", "compute", "data"]


class AllowRule(BaseModel):
    """受信許可ルール。"""

    model_config = ConfigDict(frozen=True)

    source: TrafficSource
    protocol: Literal["tcp"] = "tcp"
    port: int
    description: str


class EgressRule(BaseModel):
    """送信許可ルール。"""

    model_config = ConfigDict(frozen=True)

    destination: Literal["anywhere"] = "anywhere"
    protocol: Literal["all"] = "all"
    description: str


class SecurityBoundary(BaseModel):
    """トラフィックスコープ単位のファイアウォールポリシーグループ。"""

    model_config = ConfigDict(frozen=True)

    kind: BoundaryKind
    description: str
    ingress: tuple[AllowRule, ...]
    egress: tuple[EgressRule, ...] = ()

    @property
    def allow_all_outbound(self) -> bool:
        return len(self.egress) > 0

    def sources(self) -> set[str]:
        """ルールの送信元バウンダリ名を返す。"""
        return {rule.source for rule in self.ingress}


class SecurityBoundarySet(BaseModel):
    """edge / compute / data の3バウンダリ。

    reconciled が False の場合、dataバウンダリのポートはエンジン未選択時の既定値であり、
    エンジン選択後に補正される必要がある。pinned が True の場合は構成で明示的に
    固定されたポートであり、補正の対象外となる。
    """

    model_config = ConfigDict(frozen=True)

    edge: SecurityBoundary
    compute: SecurityBoundary
    data: SecurityBoundary
    reconciled: bool = False
    pinned: bool = False

    def ordered(self) -> tuple[SecurityBoundary, SecurityBoundary, SecurityBoundary]:
        """参照関係の順（edge → compute → data）で返す。"""
        return (self.edge, self.compute, self.data)

    @property
    def data_port(self) -> int:
        return self.data.ingress[0].port
