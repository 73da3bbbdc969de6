"""ウィジェット機能の列挙型"""

from enum import Enum


class SourceType(str, Enum):
    """ソースフィールドの種類"""

    FREEFORM = "freeform"  # 自由入力テキスト
    GEOFIELD = "geofield"  # Geofieldに紐づくテキスト


class FieldState(str, Enum):
    """バインド済みフィールドの状態"""

    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"
