"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass
from typing import Optional

from ....shared.exceptions.errors import ProviderError


@dataclass(frozen=True)
class GeoLocation:
    """プロバイダーが返す地理的位置情報"""

    latitude: float  # 緯度
    longitude: float  # 経度
    city: Optional[str] = None  # 市区町村
    region: Optional[str] = None  # 都道府県・州など
    formatted_address: Optional[str] = None  # 正規化された住所
    place_id: Optional[str] = None  # プロバイダー固有ID（オプション）

    def __repr__(self) -> str:
        return f"GeoLocation(city={self.city!r}, lat={self.latitude}, lng={self.longitude})"

    def to_tuple(self) -> tuple[float, float]:
        """(緯度, 経度)のタプルとして返す"""
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class LookupOutcome:
    """ジオコーディング1回分の結果（失敗時はerrorに理由を保持）"""

    term: str
    locations: tuple[GeoLocation, ...] = ()
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
