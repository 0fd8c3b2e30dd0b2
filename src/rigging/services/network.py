"""ネットワーク範囲をpublic/isolatedゾーンに分割するサービス。"""

import ipaddress

import structlog

from rigging.models.errors import InvalidRangeError
from rigging.models.network import NetworkPlan, Zone, ZoneTag

logger = structlog.get_logger(__name__)

# 障害ドメイン数（固定）
REDUNDANCY = 2

# 各ゾーンのプレフィックス長
ZONE_PREFIX = 24

# ゾーングループの割り当て順。グループ → 障害ドメインの順にインデックスを振る
_ZONE_GROUPS: tuple[ZoneTag, ...] = ("public", "isolated")


def _domain_suffix(index: int) -> str:
    return chr(ord("a") + index)


def plan_network(network_range: str, redundancy: int = REDUNDANCY) -> NetworkPlan:
    """ネットワーク範囲から public ×2 / isolated ×2 の /24 ゾーンを切り出す。

    範囲をアドレス順に /24 で分割し、publicゾーンにインデックス 0, 1、
    isolatedゾーンに 2, 3 を割り当てる。

    Args:
        network_range: IPv4 CIDR文字列（例: "10.0.0.0/16"）。
        redundancy: 障害ドメイン数。2のみサポート。

    Returns:
        4ゾーンを含むネットワークプラン。

    Raises:
        InvalidRangeError: 範囲が不正、または4つの /24 を収容できない場合。
    """
    if redundancy != REDUNDANCY:
        raise InvalidRangeError(network_range, f"redundancy factor is fixed at {REDUNDANCY}")

    try:
        network = ipaddress.ip_network(network_range, strict=True)
    except ValueError as e:
        raise InvalidRangeError(network_range, str(e)) from None

    if not isinstance(network, ipaddress.IPv4Network):
        raise InvalidRangeError(network_range, "only IPv4 ranges are supported")

    required = len(_ZONE_GROUPS) * redundancy
    if network.prefixlen > ZONE_PREFIX or 2 ** (ZONE_PREFIX - network.prefixlen) < required:
        raise InvalidRangeError(network_range, f"cannot hold {required} non-overlapping /{ZONE_PREFIX} blocks")

    blocks = network.subnets(new_prefix=ZONE_PREFIX)
    zones: list[Zone] = []
    for tag in _ZONE_GROUPS:
        for domain in range(redundancy):
            block = next(blocks)
            zones.append(
                Zone(
                    name=f"{tag}-{_domain_suffix(domain)}",
                    tag=tag,
                    cidr=str(block),
                    failure_domain=domain,
                )
            )

    logger.debug("network_planned", network_range=network_range, zones=[z.cidr for z in zones])
    return NetworkPlan(network_range=str(network), redundancy=redundancy, zones=tuple(zones))
