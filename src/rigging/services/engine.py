"""データベースエンジンの選択とdataバウンダリのポート補正。"""

from functools import lru_cache

import structlog

from rigging.models.engine import EngineDescriptor
from rigging.models.errors import UnsupportedEngineError
from rigging.models.security import SecurityBoundarySet
from rigging.services.security import build_data_boundary

logger = structlog.get_logger(__name__)

# エンジントークン → バージョン付きエンジン記述子（閉じた集合）
_ENGINES: dict[str, EngineDescriptor] = {
    "postgres": EngineDescriptor(family="postgres", version="12.22", port=5432),
    "mysql": EngineDescriptor(family="mysql", version="8.0.23", port=3306),
}


@lru_cache(maxsize=None)
def select_engine(token: str) -> EngineDescriptor:
    """エンジントークンをバージョン付きエンジン記述子に変換する。

    Raises:
        UnsupportedEngineError: postgres / mysql 以外のトークンの場合。
    """
    try:
        return _ENGINES[token]
    except KeyError:
        raise UnsupportedEngineError(token) from None


def supported_engines() -> list[EngineDescriptor]:
    """サポートしているエンジン記述子の一覧を返す。"""
    return list(_ENGINES.values())


def reconcile_data_port(boundaries: SecurityBoundarySet, engine: EngineDescriptor) -> SecurityBoundarySet:
    """dataバウンダリの既定ポートを選択エンジンのポートで置き換える。

    未補正（エンジン未選択時に構築された）セットのみを書き換える。
    構成でポートが固定されたセットはそのまま返すため、不一致はアセンブル時に検出される。

    Args:
        boundaries: セキュリティバウンダリのセット。
        engine: 選択済みエンジン。

    Returns:
        補正済みのセキュリティバウンダリのセット。
    """
    if boundaries.pinned or boundaries.reconciled:
        return boundaries

    if boundaries.data_port != engine.port:
        logger.info(
            "data_port_reconciled",
            engine=engine.family,
            default_port=boundaries.data_port,
            port=engine.port,
        )
    return boundaries.model_copy(update={"data": build_data_boundary(engine.port), "reconciled": True})
