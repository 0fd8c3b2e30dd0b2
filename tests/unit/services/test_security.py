"""build_security_boundariesのユニットテスト。"""

import pytest

from rigging.models.network import NetworkPlan
from rigging.services.network import plan_network
from rigging.services.security import DEFAULT_DATA_PORT, build_security_boundaries


@pytest.fixture
def plan() -> NetworkPlan:
    return plan_network("10.0.0.0/16")


class TestBuildSecurityBoundaries:
    def test_edge_accepts_web_from_anywhere(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        assert [(r.source, r.protocol, r.port) for r in boundaries.edge.ingress] == [
            ("anywhere", "tcp", 80),
            ("anywhere", "tcp", 443),
        ]
        assert boundaries.edge.allow_all_outbound is True

    def test_compute_accepts_web_from_edge_only(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        assert boundaries.compute.sources() == {"edge"}
        assert sorted(r.port for r in boundaries.compute.ingress) == [80, 443]
        assert boundaries.compute.allow_all_outbound is True

    def test_data_accepts_compute_only_and_has_no_egress(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        assert boundaries.data.sources() == {"compute"}
        assert boundaries.data.egress == ()
        assert boundaries.data.allow_all_outbound is False

    def test_default_port_is_mysql_and_unreconciled(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        assert DEFAULT_DATA_PORT == 3306
        assert boundaries.data_port == 3306
        assert boundaries.reconciled is False
        assert boundaries.pinned is False

    def test_pinned_port(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan, data_port=5432)
        assert boundaries.data_port == 5432
        assert boundaries.pinned is True

    def test_every_rule_has_description(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        for boundary in boundaries.ordered():
            assert boundary.description
            assert all(rule.description for rule in boundary.ingress)

    def test_ordered_by_reference(self, plan: NetworkPlan) -> None:
        boundaries = build_security_boundaries(plan)
        assert [b.kind for b in boundaries.ordered()] == ["edge", "compute", "data"]
