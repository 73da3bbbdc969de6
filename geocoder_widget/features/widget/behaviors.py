"""ジオコーダービヘイビア（ページ/コンテキストへのattach）"""

from typing import Any, Callable, Optional

from ..geocoding.providers.registry import GeocodingProvider
from ..geocoding.services.geocoding_client import GeocodingClient, create_client
from ...infrastructure.config.settings import Settings
from ...shared.exceptions.errors import (
    ConfigurationError,
    GeocoderWidgetError,
    MisconfiguredBindingError,
)
from ...shared.logging.config import get_logger
from .controllers.autocomplete_controller import AutocompleteController
from .domain.models import BindOutcome, FieldBinding, GeocoderConfig
from .page.autocomplete import AutocompleteWidget
from .page.context import RenderingContext

logger = get_logger(__name__)


class GeocoderBehavior:
    """
    ホストがコンテキストごとに呼び出すattachエントリーポイント

    初回のページ読み込みと、部分的に挿入されたフォームのそれぞれで
    attachが呼ばれる。バインドはコンテキスト内に限定され、
    処理済みの要素は再バインドしない
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        on_error: Optional[Callable[[GeocoderWidgetError], None]] = None,
        provider: Optional[GeocodingProvider] = None,
    ) -> None:
        """
        Args:
            settings: アプリケーション設定
            on_error: エラー通知先（Noneならログ出力のみ）
            provider: プロバイダー（テスト用、Noneなら設定のエンジンから生成）
        """
        self.settings = settings or Settings()
        self.on_error = on_error
        self.provider = provider
        self.widgets: dict[str, AutocompleteWidget] = {}

    def attach(self, context: RenderingContext, geocoder_settings: dict[str, Any]) -> list[BindOutcome]:
        """
        設定されたフィールドごとにオートコンプリートをバインド

        Args:
            context: レンダリングコンテキスト
            geocoder_settings: `{engine, api_key?, fields}` 形式の設定

        Returns:
            list[BindOutcome]: フィールドごとのバインド結果（設定順）
        """
        try:
            config = GeocoderConfig.from_settings(geocoder_settings)
            client = create_client(config, settings=self.settings, provider=self.provider)
        except ConfigurationError as e:
            logger.error(f"Geocoder attach skipped: {e}")
            self._report(e)
            return []

        outcomes = [self._bind(binding, client, context) for binding in config.fields]

        bound = sum(1 for outcome in outcomes if outcome.bound)
        logger.info(f"Geocoder attached: {bound}/{len(outcomes)} field(s) bound")

        return outcomes

    def _bind(
        self, binding: FieldBinding, client: GeocodingClient, context: RenderingContext
    ) -> BindOutcome:
        """フィールド1件をバインド（失敗は他のフィールドに影響しない）"""
        source = context.find_by_id(binding.source_field_id)
        if source is None:
            return self._misconfigured(
                binding, f"Source field '{binding.source_field_id}' not found in context"
            )

        if RenderingContext.is_processed(source):
            logger.debug(f"Source field '{binding.source_field_id}' already bound, skipping")
            return BindOutcome(binding=binding, skipped=True)

        if context.find_by_id(binding.destination_field_id) is None:
            return self._misconfigured(
                binding, f"Destination field '{binding.destination_field_id}' not found in context"
            )

        controller = AutocompleteController(
            binding=binding,
            client=client,
            context=context,
            source_element=source,
            on_error=self.on_error,
            discard_stale_responses=self.settings.discard_stale_responses,
        )
        self.widgets[binding.source_field_id] = AutocompleteWidget(
            source,
            source=controller.source,
            select=controller.select,
            change=controller.change,
            min_length=self.settings.autocomplete_min_length,
            delay=self.settings.autocomplete_delay,
        )
        RenderingContext.mark_processed(source)

        logger.debug(
            f"Bound '{binding.source_field_id}' -> '{binding.destination_field_id}' "
            f"({binding.source_type.value})"
        )

        return BindOutcome(binding=binding, controller=controller)

    def _misconfigured(self, binding: FieldBinding, message: str) -> BindOutcome:
        error = MisconfiguredBindingError(
            binding.source_field_id, binding.destination_field_id, message
        )
        logger.warning(message)
        self._report(error)
        return BindOutcome(binding=binding, error=error)

    def _report(self, error: GeocoderWidgetError) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(error)
        except Exception as e:
            logger.error(f"Error handler failed for {type(error).__name__}: {e}", exc_info=True)
