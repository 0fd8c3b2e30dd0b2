"""Riggingのカスタム例外クラス。"""


class RiggingError(Exception):
    """Riggingの基底例外クラス。

    解決パスを中断したエラーには、呼び出し側が環境名を付与する。
    """

    def __init__(self, message: str, *, environment: str | None = None) -> None:
        super().__init__(message)
        self.environment = environment

    def with_environment(self, environment: str) -> "RiggingError":
        """環境名を付与して自身を返す。既に付与済みの場合は上書きしない。"""
        if self.environment is None:
            self.environment = environment
        return self


class ConfigurationConstraintError(RiggingError):
    """構成レコードの制約違反（キャパシティ順序など）。"""


class MissingFieldError(RiggingError):
    """構成ドキュメントに必須フィールドが無い場合の例外。"""

    def __init__(self, field: str, *, environment: str | None = None) -> None:
        super().__init__(f"Missing required field: {field}", environment=environment)
        self.field = field


class EnvironmentNotFoundError(RiggingError):
    """構成ドキュメントに指定環境が無い場合の例外。"""

    def __init__(self, environment: str) -> None:
        super().__init__(
            f"Configuration for environment '{environment}' is missing",
            environment=environment,
        )


class InvalidRangeError(RiggingError):
    """ネットワーク範囲が不正、または4つの/24ブロックを収容できない場合の例外。"""

    def __init__(self, network_range: str, reason: str) -> None:
        super().__init__(f"Invalid network range {network_range!r}: {reason}")
        self.network_range = network_range


class UnsupportedEngineError(RiggingError):
    """未対応のデータベースエンジントークン。"""

    def __init__(self, token: str) -> None:
        super().__init__(f"Unsupported database engine: {token!r}")
        self.token = token


class PortEngineMismatchError(RiggingError):
    """dataバウンダリの受信ポートと選択エンジンのポートが一致しない場合の例外。"""

    def __init__(self, port: int, engine_family: str, expected_port: int) -> None:
        super().__init__(
            f"Data boundary allows port {port} but engine {engine_family} listens on {expected_port}"
        )
        self.port = port
        self.engine_family = engine_family
        self.expected_port = expected_port


class DependencyOrderViolation(RiggingError):
    """未出力のリソースを参照しようとした場合の例外。"""

    def __init__(self, resource_id: str, missing: list[str]) -> None:
        super().__init__(
            f"Resource {resource_id} references resources not yet emitted: {', '.join(missing)}"
        )
        self.resource_id = resource_id
        self.missing = missing


class ExportNameConflictError(RiggingError):
    """エクスポート名が他の環境と衝突した場合の例外。"""

    def __init__(self, export_name: str, owner: str) -> None:
        super().__init__(f"Export name {export_name} is already published by environment: {owner}")
        self.export_name = export_name
        self.owner = owner


class ActuationError(RiggingError):
    """プロビジョニングエンジンがリソースの割り当てに失敗した場合の例外。"""

    def __init__(self, resource_id: str, reason: str) -> None:
        super().__init__(f"Actuator failed to allocate {resource_id}: {reason}")
        self.resource_id = resource_id


class StorageError(RiggingError):
    """ストレージ操作のエラー。"""
