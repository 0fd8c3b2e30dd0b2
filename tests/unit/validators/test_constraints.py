"""check_constraintsのユニットテスト。"""

from collections.abc import Callable

import pytest

from rigging.models.configuration import ConfigurationRecord
from rigging.models.errors import ConfigurationConstraintError
from rigging.validators.configuration import check_constraints


class TestCheckConstraints:
    @pytest.mark.parametrize("bounds", [(0, 0, 0), (1, 2, 4), (2, 2, 2), (0, 3, 3)])
    def test_valid_bounds(self, make_record: Callable[..., ConfigurationRecord], bounds: tuple[int, int, int]) -> None:
        record = make_record(min_capacity=bounds[0], desired_capacity=bounds[1], max_capacity=bounds[2])
        assert check_constraints(record) is record

    @pytest.mark.parametrize("bounds", [(3, 2, 4), (1, 5, 4), (-1, 0, 1), (5, 5, 4)])
    def test_invalid_bounds(
        self, make_record: Callable[..., ConfigurationRecord], bounds: tuple[int, int, int]
    ) -> None:
        record = make_record(min_capacity=bounds[0], desired_capacity=bounds[1], max_capacity=bounds[2])
        with pytest.raises(ConfigurationConstraintError):
            check_constraints(record)

    @pytest.mark.parametrize("storage", [0, -20])
    def test_non_positive_storage(self, make_record: Callable[..., ConfigurationRecord], storage: int) -> None:
        with pytest.raises(ConfigurationConstraintError, match="dbStorage"):
            check_constraints(make_record(database_storage_gb=storage))

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_override_out_of_range(self, make_record: Callable[..., ConfigurationRecord], port: int) -> None:
        with pytest.raises(ConfigurationConstraintError, match="dbPort"):
            check_constraints(make_record(database_port=port))
