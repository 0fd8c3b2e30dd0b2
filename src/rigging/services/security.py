"""セキュリティバウンダリとその許可ルールグラフを構築するサービス。"""

import structlog

from rigging.models.network import NetworkPlan
from rigging.models.security import AllowRule, EgressRule, SecurityBoundary, SecurityBoundarySet

logger = structlog.get_logger(__name__)

# エンジン未選択時のdataバウンダリ既定ポート（MySQL）
DEFAULT_DATA_PORT = 3306

# edge / compute が受け付けるWebポート
_WEB_PORTS: tuple[tuple[int, str], ...] = ((80, "HTTP"), (443, "HTTPS"))

_ALLOW_ALL_OUTBOUND = (EgressRule(description="Allow all outbound traffic"),)


def build_data_boundary(port: int) -> SecurityBoundary:
    """computeバウンダリからの指定ポートのみを受け付けるdataバウンダリを作成する。

    送信ルールは持たない（データベースから外部への接続を許可しない）。
    """
    return SecurityBoundary(
        kind="data",
        description="Allow traffic only from compute instances on database port",
        ingress=(
            AllowRule(source="compute", port=port, description=f"Allow database traffic on {port} from compute"),
        ),
        egress=(),
    )


def build_security_boundaries(plan: NetworkPlan, data_port: int | None = None) -> SecurityBoundarySet:
    """edge / compute / data の3バウンダリを構築する。

    ネットワークプランはゾーン配置のためだけに受け取り、ルールの決定には使用しない。

    Args:
        plan: ネットワークプラン。
        data_port: dataバウンダリの受信ポート。Noneの場合は既定値（3306）を使用し、
            エンジン選択後の補正が必要な未補正状態として返す。

    Returns:
        3バウンダリのセット。
    """
    edge = SecurityBoundary(
        kind="edge",
        description="Allow HTTP and HTTPS traffic from the internet to the load balancer",
        ingress=tuple(
            AllowRule(source="anywhere", port=port, description=f"Allow {label} traffic")
            for port, label in _WEB_PORTS
        ),
        egress=_ALLOW_ALL_OUTBOUND,
    )
    compute = SecurityBoundary(
        kind="compute",
        description="Allow traffic only from the edge boundary on ports 80/443",
        ingress=tuple(
            AllowRule(source="edge", port=port, description=f"Allow {label} traffic from edge")
            for port, label in _WEB_PORTS
        ),
        egress=_ALLOW_ALL_OUTBOUND,
    )

    pinned = data_port is not None
    port = data_port if data_port is not None else DEFAULT_DATA_PORT
    data = build_data_boundary(port)

    logger.debug(
        "security_boundaries_built",
        network_range=plan.network_range,
        data_port=port,
        pinned=pinned,
    )
    return SecurityBoundarySet(edge=edge, compute=compute, data=data, reconciled=pinned, pinned=pinned)
