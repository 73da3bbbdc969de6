"""geopy経由のジオコーダー実装（Google以外のエンジン）"""
from typing import Any, Optional

from geopy.exc import GeopyError
from geopy.geocoders import get_geocoder_for_service

from ..domain.models import GeoLocation
from ....shared.exceptions.errors import GeocodingError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# Nominatimのaddressdetailsで市区町村・地域として扱うキー（優先順）
NOMINATIM_CITY_KEYS = ["city", "town", "village", "municipality", "hamlet"]
NOMINATIM_REGION_KEYS = ["state", "region", "province", "county"]

# コンストラクタがapi_keyを受け取るサービス（nominatim, arcgisはキー不要）
API_KEY_SERVICES = frozenset({"bing", "openmapquest", "yandex"})


class GeopyGeocoder:
    """
    geopyのジオコーダーをラップした実装

    geopyのサービス名（nominatim, bing, openmapquest, yandex, arcgis）を指定する
    """

    def __init__(
        self,
        service: str,
        api_key: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: int = 10,
        geocoder: Optional[Any] = None,
    ) -> None:
        """
        Args:
            service: geopyのサービス名
            api_key: APIキー（サービスが要求する場合）
            user_agent: User-Agent（Nominatim用）
            timeout: リクエストタイムアウト（秒）
            geocoder: geopyジオコーダー互換オブジェクト（テスト用、Noneなら初回検索時に生成）
        """
        self.service = service
        self.api_key = api_key
        self.user_agent = user_agent
        self.timeout = timeout
        self._geocoder = geocoder

        logger.debug(f"GeopyGeocoder initialized: service={service}")

    @property
    def geocoder(self) -> Any:
        """geopyジオコーダーを遅延生成して返す"""
        if self._geocoder is None:
            try:
                geocoder_cls = get_geocoder_for_service(self.service)
                kwargs: dict[str, Any] = {"timeout": self.timeout}
                if self.api_key and self.service in API_KEY_SERVICES:
                    kwargs["api_key"] = self.api_key
                if self.service == "nominatim":
                    kwargs["user_agent"] = self.user_agent
                self._geocoder = geocoder_cls(**kwargs)
            except Exception as e:
                raise GeocodingError(
                    f"Failed to initialize geopy geocoder '{self.service}': {e}"
                ) from e
        return self._geocoder

    def geocode(self, address: str) -> list[GeoLocation]:
        """
        住所をジオコーディング

        Args:
            address: 住所文字列

        Returns:
            list[GeoLocation]: プロバイダー応答順の位置情報リスト

        Raises:
            GeocodingError: リクエストに失敗した場合
        """
        if not address:
            logger.warning("Empty address provided for geocoding")
            return []

        try:
            logger.debug(f"Geocoding address via {self.service}: {address}")

            if self.service == "nominatim":
                results = self.geocoder.geocode(address, exactly_one=False, addressdetails=True)
            else:
                results = self.geocoder.geocode(address, exactly_one=False)

        except GeocodingError:
            raise
        except GeopyError as e:
            raise GeocodingError(f"{self.service} geocoder error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during geocoding: {e}") from e

        locations = [self._to_geo_location(location) for location in results or []]

        logger.debug(f"Geocoded: {address} -> {len(locations)} result(s)")

        return locations

    def _to_geo_location(self, location: Any) -> GeoLocation:
        """geopyのLocationをGeoLocationに変換"""
        city, region = self._extract_city_region(location)
        raw = location.raw if isinstance(location.raw, dict) else {}

        return GeoLocation(
            latitude=float(location.latitude),
            longitude=float(location.longitude),
            city=city,
            region=region,
            formatted_address=location.address,
            place_id=str(raw["place_id"]) if "place_id" in raw else None,
        )

    def _extract_city_region(self, location: Any) -> tuple[Optional[str], Optional[str]]:
        """
        市区町村と地域を取り出す

        Nominatimはaddressdetailsを使い、それ以外は住所文字列の先頭2要素を使う
        """
        raw = location.raw if isinstance(location.raw, dict) else {}
        details = raw.get("address")
        if isinstance(details, dict):
            city = next((details[k] for k in NOMINATIM_CITY_KEYS if details.get(k)), None)
            region = next((details[k] for k in NOMINATIM_REGION_KEYS if details.get(k)), None)
            return city, region

        parts = [part.strip() for part in (location.address or "").split(",") if part.strip()]
        city = parts[0] if parts else None
        region = parts[1] if len(parts) > 1 else None
        return city, region
