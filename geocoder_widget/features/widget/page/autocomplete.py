"""オートコンプリートUIコンポーネント（ホスト側）"""

import asyncio
import inspect
from typing import Any, Callable, Optional

from bs4 import Tag

from ....shared.logging.config import get_logger
from .context import RenderingContext

logger = get_logger(__name__)

Item = dict[str, Any]
SourceHook = Callable[[dict[str, str], Callable[[list[Item]], None]], Any]
EventHook = Callable[[dict[str, Any], dict[str, Any]], Any]


class AutocompleteWidget:
    """
    テキスト入力に付与するオートコンプリート

    最小文字数と入力待機時間による絞り込み、候補メニュー、選択、
    確定時のchangeイベントを担当する。候補の取得と選択時の処理は
    フック（source, select, change）に委譲する
    """

    def __init__(
        self,
        element: Tag,
        source: SourceHook,
        select: Optional[EventHook] = None,
        change: Optional[EventHook] = None,
        min_length: int = 1,
        delay: float = 0.3,
    ) -> None:
        """
        Args:
            element: 対象のinput要素
            source: 候補取得フック `source(request, respond)`
            select: 候補選択時フック `select(event, ui)`
            change: 値確定時フック `change(event, ui)`
            min_length: 検索を開始する最小文字数
            delay: 最後の入力から検索までの待機時間（秒）
        """
        self.element = element
        self.source = source
        self.on_select = select
        self.on_change = change
        self.min_length = min_length
        self.delay = delay

        self.menu: list[Item] = []
        self.selected_item: Optional[Item] = None
        self._committed_value = RenderingContext.get_value(element)
        self._timer: Optional[asyncio.Task] = None
        self._pending: set[asyncio.Future] = set()

    @property
    def value(self) -> str:
        return RenderingContext.get_value(self.element)

    def type(self, text: str) -> None:
        """
        ユーザー入力をシミュレート

        入力待機時間後に検索する。待機中に再入力された場合は前の検索を取り消す
        """
        RenderingContext.set_value(self.element, text)
        self.selected_item = None
        self._cancel_timer()

        if len(text) < self.min_length:
            self.close()
            return

        self._timer = asyncio.get_running_loop().create_task(self._delayed_search(text))

    async def _delayed_search(self, term: str) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self.search(term)

    def search(self, term: str) -> None:
        """待機時間なしで検索を実行"""
        if len(term) < self.min_length:
            self.close()
            return

        logger.debug(f"Autocomplete search: {term}")
        self._track(self.source({"term": term}, self._respond))

    def _respond(self, items: Optional[list[Item]]) -> None:
        self.menu = list(items or [])

    def close(self) -> None:
        """候補メニューを閉じる"""
        self.menu = []

    def select(self, index: int) -> Item:
        """
        メニューの候補を選択

        Args:
            index: メニュー内の位置

        Returns:
            Item: 選択された候補
        """
        item = self.menu[index]
        RenderingContext.set_value(self.element, str(item.get("value", item.get("label", ""))))
        self.selected_item = item
        self.close()

        if self.on_select is not None:
            event = {"type": "autocompleteselect", "target": self.element}
            self._track(self.on_select(event, {"item": item}))
        return item

    def blur(self) -> None:
        """フォーカスを外す（値が変わっていればchangeイベントを発火）"""
        self._cancel_timer()
        self.close()

        value = self.value
        if value == self._committed_value:
            return
        self._committed_value = value

        if self.on_change is not None:
            event = {"type": "autocompletechange", "target": self.element}
            self._track(self.on_change(event, {"item": self.selected_item}))

    async def settle(self) -> None:
        """待機中の検索と実行中のフック処理がすべて終わるまで待つ"""
        while self._timer is not None or self._pending:
            if self._timer is not None:
                await self._timer
                continue
            await asyncio.gather(*list(self._pending))

    def _track(self, result: Any) -> None:
        """フックが返したawaitableを完了待ちの対象に加える"""
        if not inspect.isawaitable(result):
            return
        future = asyncio.ensure_future(result)
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
