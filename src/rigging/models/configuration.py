"""構成レコード関連のデータモデル。"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# シークレット名（K8s/Secrets Manager互換）
SECRET_REF_PATTERN = r"^[a-zA-Z0-9][a-zA-Z0-9_/-]{0,252}$"


class CredentialRef(BaseModel):
    """データベース認証情報への参照。

    シークレットの名前のみを保持し、値そのものは保持しない。
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    secret_ref: str = Field(..., pattern=SECRET_REF_PATTERN)
    username: str = "admin"


class ConfigurationRecord(BaseModel):
    """環境単位の構成レコード。

    キーは元の構成ドキュメントに合わせてcamelCaseでも受け付ける。
    キャパシティの順序などの制約は check_constraints で検証する。
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    network_range: str = Field(..., alias="vpcCidr")
    compute_size_class: str = Field(..., alias="instanceType")
    database_engine: str = Field(..., alias="dbEngine")
    database_storage_gb: int = Field(..., alias="dbStorage")
    database_size_class: str = Field(..., alias="dbInstanceType")
    credential_ref: CredentialRef
    min_capacity: int
    desired_capacity: int
    max_capacity: int
    # 指定時はdataバウンダリのポートを固定し、エンジンによる補正を行わない
    database_port: int | None = Field(default=None, alias="dbPort")
