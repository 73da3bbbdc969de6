"""Google Maps Geocoding API実装"""
from typing import Any, Optional

import googlemaps

from ..domain.models import GeoLocation
from ....shared.exceptions.errors import GeocodingError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# 市区町村として扱うaddress_componentsのtype（優先順）
CITY_TYPES = ["locality", "postal_town", "sublocality", "administrative_area_level_2"]
REGION_TYPES = ["administrative_area_level_1"]


class GoogleMapsGeocoder:
    """Google Maps Geocoding API実装"""

    def __init__(
        self,
        api_key: Optional[str],
        timeout: int = 10,
        region: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Args:
            api_key: Google Maps API キー
            timeout: リクエストタイムアウト（秒）
            region: 地域バイアス
            client: googlemaps.Client互換オブジェクト（テスト用、Noneなら初回検索時に生成）
        """
        self.api_key = api_key
        self.timeout = timeout
        self.region = region
        self._client = client

        logger.debug("GoogleMapsGeocoder initialized")

    @property
    def client(self) -> Any:
        """googlemaps.Clientを遅延生成して返す（生成時に通信は発生しない）"""
        if self._client is None:
            try:
                self._client = googlemaps.Client(key=self.api_key, timeout=self.timeout)
            except Exception as e:
                raise GeocodingError(f"Failed to initialize Google Maps client: {e}") from e
        return self._client

    def geocode(self, address: str) -> list[GeoLocation]:
        """
        住所をジオコーディング

        Args:
            address: 住所文字列

        Returns:
            list[GeoLocation]: API応答順の位置情報リスト（0件なら空リスト）

        Raises:
            GeocodingError: APIリクエストに失敗した場合
        """
        if not address:
            logger.warning("Empty address provided for geocoding")
            return []

        try:
            logger.debug(f"Geocoding address: {address}")

            if self.region:
                results = self.client.geocode(address, region=self.region)
            else:
                results = self.client.geocode(address)

        except GeocodingError:
            raise
        except googlemaps.exceptions.ApiError as e:
            raise GeocodingError(f"Google Maps API error: {e}") from e
        except googlemaps.exceptions.TransportError as e:
            raise GeocodingError(f"Google Maps transport error: {e}") from e
        except Exception as e:
            raise GeocodingError(f"Unexpected error during geocoding: {e}") from e

        locations = []
        for result in results or []:
            location = self._parse_result(result)
            if location is None:
                logger.warning(f"Invalid geocoding result (missing lat/lng): {address}")
                continue
            locations.append(location)

        logger.debug(f"Geocoded: {address} -> {len(locations)} result(s)")

        return locations

    def _parse_result(self, result: dict[str, Any]) -> Optional[GeoLocation]:
        """Geocoding APIの結果1件をGeoLocationに変換"""
        location = result.get("geometry", {}).get("location", {})

        latitude = location.get("lat")
        longitude = location.get("lng")
        if latitude is None or longitude is None:
            return None

        components = result.get("address_components", [])

        return GeoLocation(
            latitude=float(latitude),
            longitude=float(longitude),
            city=self._find_component(components, CITY_TYPES),
            region=self._find_component(components, REGION_TYPES),
            formatted_address=result.get("formatted_address"),
            place_id=result.get("place_id"),
        )

    @staticmethod
    def _find_component(components: list[dict[str, Any]], types: list[str]) -> Optional[str]:
        """優先順にaddress_componentsからlong_nameを探す"""
        for wanted in types:
            for component in components:
                if wanted in component.get("types", []):
                    return component.get("long_name")
        return None
