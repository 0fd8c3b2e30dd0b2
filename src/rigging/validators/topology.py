"""トポロジーグラフの整合性チェック。"""

from rigging.models.engine import EngineDescriptor
from rigging.models.errors import DependencyOrderViolation, PortEngineMismatchError
from rigging.models.security import SecurityBoundary
from rigging.models.topology import DatabaseResource, SecurityBoundaryResource, TopologyGraph


class TopologyValidator:
    """完成したトポロジーグラフの依存順序とポート整合性を検証する。"""

    @staticmethod
    def check_port_engine(boundary: SecurityBoundary, engine: EngineDescriptor) -> None:
        """dataバウンダリの受信ポートが選択エンジンのポートと一致するか検証する。

        Raises:
            PortEngineMismatchError: 一致しないルールがある場合。
        """
        for rule in boundary.ingress:
            if rule.port != engine.port:
                raise PortEngineMismatchError(rule.port, engine.family, engine.port)

    @staticmethod
    def check_order(graph: TopologyGraph) -> None:
        """各リソースの依存先が列の中でそれより前に現れるか検証する。

        Raises:
            DependencyOrderViolation: 未出力のリソースを参照している場合。
        """
        seen: set[str] = set()
        for resource in graph.resources:
            missing = [dep for dep in resource.depends_on if dep not in seen]
            if missing:
                raise DependencyOrderViolation(resource.id, missing)
            seen.add(resource.id)

    def validate(self, graph: TopologyGraph) -> None:
        """依存順序とポート整合性をまとめて検証する。

        Raises:
            DependencyOrderViolation: 依存順序が壊れている場合、またはデータベースか
                そのセキュリティバウンダリがグラフに無い場合。
            PortEngineMismatchError: dataバウンダリのポートがエンジンと一致しない場合。
        """
        self.check_order(graph)

        databases = graph.of_kind("database")
        if len(databases) != 1 or not isinstance(databases[0], DatabaseResource):
            raise DependencyOrderViolation("database", ["database"]).with_environment(graph.environment)
        database = databases[0]

        boundary = next((r for r in graph.resources if r.id == database.boundary_id), None)
        if not isinstance(boundary, SecurityBoundaryResource):
            raise DependencyOrderViolation(database.id, [database.boundary_id]).with_environment(graph.environment)
        self.check_port_engine(boundary.boundary, database.engine)
