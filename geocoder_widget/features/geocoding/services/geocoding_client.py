"""ジオコーディングクライアント（非同期）"""

import asyncio
from typing import Callable, Optional

from ...widget.domain.models import GeocoderConfig
from ..domain.models import LookupOutcome
from ..providers.registry import GeocodingProvider, create_provider
from ....infrastructure.config.settings import Settings
from ....shared.exceptions.errors import GeocodingError, ProviderError
from ....shared.logging.config import get_logger

logger = get_logger(__name__)

LookupCallback = Callable[[LookupOutcome], None]


class GeocodingClient:
    """
    ページ内の全バインドで共有するジオコーディングクライアント

    プロバイダー呼び出しはワーカースレッドで実行し、
    イベントループをブロックしない。生成後は読み取り専用
    """

    def __init__(self, provider: GeocodingProvider, engine: str) -> None:
        """
        Args:
            provider: ジオコーディングプロバイダー
            engine: エンジン名
        """
        self.provider = provider
        self.engine = engine

        logger.info(f"GeocodingClient initialized: engine={engine}")

    async def lookup(self, term: str) -> LookupOutcome:
        """
        検索語をジオコーディング

        失敗しても例外は送出せず、ProviderErrorを保持したLookupOutcomeを返す

        Args:
            term: 検索語

        Returns:
            LookupOutcome: 結果（プロバイダー応答順）
        """
        try:
            locations = await asyncio.to_thread(self.provider.geocode, term)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for '{term}': {e}")
            return LookupOutcome(term=term, error=ProviderError(term, str(e)))
        except Exception as e:
            logger.error(f"Unexpected error during geocoding for '{term}': {e}")
            return LookupOutcome(term=term, error=ProviderError(term, str(e)))

        return LookupOutcome(term=term, locations=tuple(locations))

    def geocode(self, term: str, callback: LookupCallback) -> "asyncio.Task[LookupOutcome]":
        """
        非同期にジオコーディングし、完了時にcallbackを呼び出す

        実行中のイベントループ上から呼び出すこと

        Args:
            term: 検索語
            callback: 結果を受け取るコールバック

        Returns:
            asyncio.Task: 実行中の検索タスク
        """
        loop = asyncio.get_running_loop()
        return loop.create_task(self._geocode_with_callback(term, callback))

    async def _geocode_with_callback(self, term: str, callback: LookupCallback) -> LookupOutcome:
        outcome = await self.lookup(term)
        callback(outcome)
        return outcome


def create_client(
    config: GeocoderConfig,
    settings: Optional[Settings] = None,
    provider: Optional[GeocodingProvider] = None,
) -> GeocodingClient:
    """
    設定からクライアントを生成（通信は発生しない）

    Args:
        config: ジオコーダー設定
        settings: アプリケーション設定
        provider: プロバイダー（Noneの場合はエンジン名から生成）

    Returns:
        GeocodingClient: クライアント

    Raises:
        ConfigurationError: 未知のエンジン名の場合
    """
    if provider is None:
        provider = create_provider(config.engine, api_key=config.api_key, settings=settings)
    return GeocodingClient(provider, engine=config.engine)
