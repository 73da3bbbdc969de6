"""アプリケーション設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """アプリケーション設定"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Project
    project_name: str = Field(
        default="geocoder-widget",
        description="プロジェクト名",
    )
    environment: str = Field(
        default="development",
        description="環境 (development, staging, production)",
    )

    # Geocoding
    geocoder_engine: str = Field(
        default="google",
        description="ウィジェットでエンジン未指定時に使うジオコーディングエンジン",
    )
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API Key",
    )
    bing_api_key: Optional[str] = Field(
        default=None,
        description="Bing Maps API Key",
    )
    mapquest_api_key: Optional[str] = Field(
        default=None,
        description="MapQuest API Key",
    )
    yandex_api_key: Optional[str] = Field(
        default=None,
        description="Yandex Geocoder API Key",
    )
    nominatim_user_agent: str = Field(
        default="geocoder-widget/1.0",
        description="Nominatim利用時のUser-Agent",
    )
    geocoding_timeout: int = Field(
        default=10,
        description="ジオコーディングのタイムアウト（秒）",
    )
    geocoding_region: Optional[str] = Field(
        default=None,
        description="地域バイアス（例: fr）",
    )

    # Autocomplete
    autocomplete_min_length: int = Field(
        default=1,
        description="検索を開始する最小文字数",
    )
    autocomplete_delay: float = Field(
        default=0.3,
        description="最後のキー入力から検索までの待機時間（秒）",
    )
    discard_stale_responses: bool = Field(
        default=True,
        description="新しい検索より前に発行された検索の応答を破棄するか",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    library_log_level: str = Field(
        default="WARNING",
        description="googlemaps・geopyなど通信ライブラリのログレベル",
    )

    def get_api_key(self, engine: str) -> Optional[str]:
        """エンジン名に対応するAPIキーを取得（未設定ならNone）"""
        keys = {
            "google": self.google_maps_api_key,
            "bing": self.bing_api_key,
            "mapquest": self.mapquest_api_key,
            "yandex": self.yandex_api_key,
        }
        return keys.get(engine.lower()) or None
