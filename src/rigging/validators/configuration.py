"""構成レコードの制約チェック。"""

from rigging.models.configuration import ConfigurationRecord
from rigging.models.errors import ConfigurationConstraintError


def check_constraints(record: ConfigurationRecord) -> ConfigurationRecord:
    """構成レコードがトポロジー解決の前提を満たすか検証する。

    キャパシティは 0 ≤ min ≤ desired ≤ max を満たす必要がある。
    値の補正は行わず、違反があれば拒否する。

    Args:
        record: 検証対象の構成レコード。

    Returns:
        検証済みの構成レコード（同一インスタンス）。

    Raises:
        ConfigurationConstraintError: 制約に違反している場合。
    """
    if record.min_capacity < 0:
        raise ConfigurationConstraintError(f"minCapacity must be >= 0, got {record.min_capacity}")
    if record.min_capacity > record.desired_capacity:
        raise ConfigurationConstraintError(
            f"minCapacity ({record.min_capacity}) must not exceed desiredCapacity ({record.desired_capacity})"
        )
    if record.desired_capacity > record.max_capacity:
        raise ConfigurationConstraintError(
            f"desiredCapacity ({record.desired_capacity}) must not exceed maxCapacity ({record.max_capacity})"
        )
    if record.database_storage_gb <= 0:
        raise ConfigurationConstraintError(f"dbStorage must be positive, got {record.database_storage_gb}")
    if record.database_port is not None and not 0 < record.database_port < 65536:
        raise ConfigurationConstraintError(f"dbPort out of range: {record.database_port}")
    return record
