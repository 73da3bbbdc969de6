"""ジオコーダー フィールドウィジェット（ホスト側プラグイン）"""

from dataclasses import dataclass
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

from ..domain.enums import SourceType
from ..domain.models import FieldBinding, GeocoderConfig
from ....infrastructure.config.settings import Settings
from ....shared.logging.config import get_logger
from ....shared.utils.text import to_element_id

logger = get_logger(__name__)

GEOFIELD_TYPE = "field_item:geofield"


@dataclass
class WidgetSettings:
    """ウィジェットインスタンスごとの設定（管理者が設定）"""

    destination_field: str = ""
    placeholder: str = ""
    geocoder_engine: str = ""


class GeocoderWidget:
    """
    テキストフィールド用のジオコーダーウィジェット

    入力欄を描画し、ビヘイビアが読み取るページ設定を生成する
    """

    WIDGET_ID = "geocoder_widget"
    LABEL = "Geocoder"
    FIELD_TYPES = ("text",)
    SOURCE_CLASS = "geocoder-source"

    def __init__(
        self,
        field_name: str,
        widget_settings: Optional[WidgetSettings] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Args:
            field_name: ウィジェットを付けるフィールド名（例: field_address）
            widget_settings: ウィジェットインスタンスの設定
            settings: アプリケーション設定（APIキー、既定エンジン）
        """
        self.field_name = field_name
        self.widget_settings = widget_settings or WidgetSettings()
        self.settings = settings or Settings()

    @property
    def engine(self) -> str:
        return self.widget_settings.geocoder_engine or self.settings.geocoder_engine

    def settings_form(self, field_definitions: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """
        ウィジェット設定フォームの定義を生成

        Args:
            field_definitions: 同じバンドルのフィールド定義（ID -> {type, label}）

        Returns:
            dict: フォーム要素の定義
        """
        options = {
            field_id: definition.get("label", field_id)
            for field_id, definition in field_definitions.items()
            if definition.get("type") == GEOFIELD_TYPE
        }

        return {
            "destination_field": {
                "type": "select",
                "title": "Destination Geo Field",
                "default_value": self.widget_settings.destination_field,
                "required": True,
                "options": options,
            },
            "placeholder": {
                "type": "textfield",
                "title": "Placeholder",
                "default_value": self.widget_settings.placeholder,
                "description": (
                    "Text that will be shown inside the field until a value is entered. "
                    "This hint is usually a sample value or a brief description of the "
                    "expected format."
                ),
            },
        }

    def settings_summary(self) -> list[str]:
        """管理画面に表示する設定サマリー"""
        summary = [f"Destination Geofield: {self.widget_settings.destination_field}"]
        if self.widget_settings.placeholder:
            summary.append(f"Placeholder: {self.widget_settings.placeholder}")
        return summary

    def source_field_id(self, delta: int) -> str:
        """ソース入力欄の要素ID（edit-<field>-<delta>-value）"""
        return f"edit-{to_element_id(self.field_name)}-{delta}-value"

    def destination_field_id(self) -> str:
        """書き込み先フィールドのラッパー要素ID（edit-<field>-wrapper）"""
        return f"edit-{to_element_id(self.widget_settings.destination_field)}-wrapper"

    def form_element(self, delta: int = 0, default_value: Optional[str] = None) -> tuple[Tag, dict[str, Any]]:
        """
        入力欄と、ページに埋め込む設定を生成

        Args:
            delta: フィールド値のインデックス
            default_value: 既存の値

        Returns:
            tuple[Tag, dict]: input要素と `{engine, api_key?, fields}` 形式の設定
        """
        soup = BeautifulSoup("", "html.parser")
        attrs = {
            "type": "text",
            "id": self.source_field_id(delta),
            "name": f"{self.field_name}[{delta}][value]",
            "class": self.SOURCE_CLASS,
        }
        if default_value is not None:
            attrs["value"] = default_value
        if self.widget_settings.placeholder:
            attrs["placeholder"] = self.widget_settings.placeholder
        element = soup.new_tag("input", attrs=attrs)

        return element, self.attached_settings(delta)

    def attached_settings(self, delta: int = 0) -> dict[str, Any]:
        """ビヘイビアが読み取るページ設定を生成"""
        config = GeocoderConfig(
            engine=self.engine,
            api_key=self.settings.get_api_key(self.engine),
            fields=(
                FieldBinding(
                    source_field_id=self.source_field_id(delta),
                    destination_field_id=self.destination_field_id(),
                    source_type=SourceType.GEOFIELD,
                ),
            ),
        )
        return config.to_settings()


def merge_page_settings(payloads: list[dict[str, Any]]) -> dict[str, Any]:
    """
    同じページに描画された複数ウィジェットの設定を1つにまとめる

    fieldsは描画順に連結し、engineとapi_keyは最初に見つかった値を使う
    """
    merged: dict[str, Any] = {"fields": []}
    for payload in payloads:
        for key in ("engine", "api_key"):
            if payload.get(key) and not merged.get(key):
                merged[key] = payload[key]
        merged["fields"].extend(payload.get("fields", []))

    logger.debug(f"Merged {len(payloads)} widget setting(s): {len(merged['fields'])} field(s)")

    return merged
