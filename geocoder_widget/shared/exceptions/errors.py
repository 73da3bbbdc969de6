"""カスタム例外定義"""


class GeocoderWidgetError(Exception):
    """ジオコーダーウィジェット基底例外"""

    pass


class ConfigurationError(GeocoderWidgetError):
    """設定エラー"""

    pass


class GeocodingError(GeocoderWidgetError):
    """ジオコーディングライブラリ呼び出しのエラー"""

    pass


class ProviderError(GeocoderWidgetError):
    """
    ジオコーディングプロバイダーの失敗

    候補0件として扱われ、ユーザーには表示されない
    """

    def __init__(self, term: str, message: str) -> None:
        self.term = term
        super().__init__(message)


class MissingDestinationElementError(GeocoderWidgetError):
    """書き込み先の緯度・経度サブフィールドが存在しない"""

    def __init__(self, destination_field_id: str, missing: list[str]) -> None:
        self.destination_field_id = destination_field_id
        self.missing = missing
        super().__init__(
            f"Destination '{destination_field_id}' has no sub-field(s): {', '.join(missing)}"
        )


class MisconfiguredBindingError(GeocoderWidgetError):
    """ソース/デスティネーションIDがコンテキスト内で解決できない"""

    def __init__(self, source_field_id: str, destination_field_id: str, message: str) -> None:
        self.source_field_id = source_field_id
        self.destination_field_id = destination_field_id
        super().__init__(message)
