"""構造化ログの設定。"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO") -> None:
    """標準loggingとstructlogをJSON出力で設定する。

    Raises:
        ValueError: 未知のログレベル名が指定された場合。
    """
    levels = logging.getLevelNamesMapping()
    name = log_level.upper()
    if name not in levels:
        raise ValueError(f"Unknown log level: {log_level}")
    level = levels[name]

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
