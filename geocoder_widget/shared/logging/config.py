"""ロギング設定"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 通信ライブラリのロガー（キー入力ごとのリクエストログを抑える）
LIBRARY_LOGGERS = ("urllib3", "requests", "googlemaps", "geopy", "asyncio")

_handler: Optional[logging.Handler] = None


def _to_level(level: str, default: int) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else default


def setup_logging(level: str = "INFO", library_level: str = "WARNING") -> None:
    """
    ルートロガーに標準出力ハンドラーを1つだけ設定

    2回目以降の呼び出しはレベルの変更のみ行う

    Args:
        level: アプリケーションのログレベル
        library_level: 通信ライブラリのログレベル
    """
    global _handler

    log_level = _to_level(level, logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.handlers.clear()
        root_logger.addHandler(_handler)
    _handler.setLevel(log_level)

    quiet_level = _to_level(library_level, logging.WARNING)
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={level}, library_level={library_level}"
    )


def get_logger(name: str) -> logging.Logger:
    """指定名のロガーを取得（通常は__name__を指定）"""
    return logging.getLogger(name)
