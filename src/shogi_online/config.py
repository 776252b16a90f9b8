"""Server configuration.

Web サーバの設定。デフォルト値はプリセット DEFAULT_SERVER_CONFIG で、
環境変数（SHOGI_HOST など）で上書きできる。
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerConfig:
    """Configuration for the web service.

    Attributes:
        host:      待ち受けアドレス
        port:      待ち受けポート
        log_level: logging のレベル名
        max_games: メモリ上に保持する対局の上限（超えたら古い対局から破棄）
    """

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    max_games: int = 1000

    def __post_init__(self) -> None:
        if self.log_level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {self.log_level}")
        if self.max_games < 1:
            raise ValueError("max_games must be positive")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerConfig:
        """環境変数から設定を読み込む。未設定の項目はデフォルト値。"""
        env = os.environ if environ is None else environ
        default = DEFAULT_SERVER_CONFIG
        return cls(
            host=env.get("SHOGI_HOST", default.host),
            port=int(env.get("SHOGI_PORT", default.port)),
            log_level=env.get("SHOGI_LOG_LEVEL", default.log_level).upper(),
            max_games=int(env.get("SHOGI_MAX_GAMES", default.max_games)),
        )


DEFAULT_SERVER_CONFIG = ServerConfig()
