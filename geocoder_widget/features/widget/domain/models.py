"""ウィジェット機能のドメインモデル"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...geocoding.domain.models import GeoLocation
from ....shared.exceptions.errors import (
    ConfigurationError,
    MisconfiguredBindingError,
    MissingDestinationElementError,
    ProviderError,
)
from .enums import SourceType


class FieldBinding(BaseModel):
    """ソースのテキスト入力と、書き込み先の座標フィールドの組"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source_field_id: str = Field(..., alias="sourceField", min_length=1)
    destination_field_id: str = Field(..., alias="destinationField", min_length=1)
    source_type: SourceType = Field(default=SourceType.GEOFIELD, alias="sourceType")


class GeocoderConfig(BaseModel):
    """
    ページに埋め込まれたジオコーダー設定

    サーバーから渡される `{engine, api_key?, fields: [...]}` を表す。
    ページ表示中は不変
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    engine: str = Field(..., min_length=1)
    api_key: Optional[str] = None
    fields: tuple[FieldBinding, ...] = ()

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> "GeocoderConfig":
        """
        シリアライズされた設定から生成

        Args:
            settings: `{engine, api_key?, fields}` 形式の辞書

        Returns:
            GeocoderConfig: 設定オブジェクト

        Raises:
            ConfigurationError: 設定が不正な場合
        """
        try:
            return cls.model_validate(settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid geocoder settings: {e}") from e

    def to_settings(self) -> dict[str, Any]:
        """ページ埋め込み用の辞書に変換"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


@dataclass(frozen=True)
class CoordinatePair:
    """書き込み先フィールドが保持する緯度・経度"""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Candidate:
    """サジェストとしてユーザーに提示する候補1件"""

    label: str  # "<市区町村>, <地域>"
    latitude: float
    longitude: float

    @classmethod
    def from_location(cls, location: GeoLocation) -> "Candidate":
        """
        GeoLocationから候補を生成

        市区町村か地域が欠けている場合は整形済み住所をラベルにする
        """
        if location.city and location.region:
            label = f"{location.city}, {location.region}"
        else:
            parts = [part for part in (location.city, location.region) if part]
            label = location.formatted_address or ", ".join(parts)
        return cls(label=label, latitude=location.latitude, longitude=location.longitude)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Candidate":
        """オートコンプリートの項目辞書から復元"""
        return cls(label=item["label"], latitude=float(item["lat"]), longitude=float(item["lon"]))

    def to_item(self) -> dict[str, Any]:
        """オートコンプリートUIに渡す項目辞書に変換"""
        return {
            "label": self.label,
            "value": self.label,
            "lat": self.latitude,
            "lon": self.longitude,
        }

    @property
    def coordinates(self) -> CoordinatePair:
        return CoordinatePair(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class SuggestionOutcome:
    """サジェスト取得の結果"""

    term: str
    candidates: tuple[Candidate, ...] = ()
    error: Optional[ProviderError] = None
    stale: bool = False  # より新しい検索が発行済みのため破棄された

    def to_items(self) -> list[dict[str, Any]]:
        return [candidate.to_item() for candidate in self.candidates]


@dataclass(frozen=True)
class WriteOutcome:
    """座標書き込みの結果"""

    destination_field_id: str
    coordinates: Optional[CoordinatePair] = None
    error: Optional[MissingDestinationElementError] = None

    @property
    def written(self) -> bool:
        return self.coordinates is not None and self.error is None


@dataclass(frozen=True)
class BindOutcome:
    """フィールド1件分のバインド結果"""

    binding: FieldBinding
    controller: Optional[Any] = None  # AutocompleteController
    skipped: bool = False  # 以前のattachで処理済み
    error: Optional[MisconfiguredBindingError] = None

    @property
    def bound(self) -> bool:
        return self.controller is not None
