"""ジオコーディングエンジンのレジストリ"""
from typing import Optional, Protocol

from ..domain.models import GeoLocation
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import ConfigurationError
from .geopy_geocoder import GeopyGeocoder
from .google_maps_geocoder import GoogleMapsGeocoder

# エンジン名 -> geopyのサービス名（googleはgooglemapsライブラリを直接使う）
ENGINES = {
    "google": None,
    "openstreetmap": "nominatim",
    "bing": "bing",
    "mapquest": "openmapquest",
    "yandex": "yandex",
    "arcgis": "arcgis",
}


class GeocodingProvider(Protocol):
    def geocode(self, address: str) -> list[GeoLocation]: ...


def create_provider(
    engine: str,
    api_key: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> GeocodingProvider:
    """
    エンジン名からプロバイダーを生成（通信は発生しない）

    Args:
        engine: エンジン名（google, openstreetmap, bing, mapquest, yandex, arcgis）
        api_key: APIキー（Noneの場合は設定から取得）
        settings: アプリケーション設定

    Returns:
        GeocodingProvider: プロバイダー

    Raises:
        ConfigurationError: 未知のエンジン名の場合
    """
    name = (engine or "").strip().lower()
    if name not in ENGINES:
        raise ConfigurationError(
            f"Unknown geocoder engine '{engine}'. Available: {', '.join(ENGINES)}"
        )

    settings = settings or Settings()
    key = api_key or settings.get_api_key(name)

    if name == "google":
        return GoogleMapsGeocoder(
            api_key=key,
            timeout=settings.geocoding_timeout,
            region=settings.geocoding_region,
        )

    return GeopyGeocoder(
        service=ENGINES[name],
        api_key=key,
        user_agent=settings.nominatim_user_agent,
        timeout=settings.geocoding_timeout,
    )
