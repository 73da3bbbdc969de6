"""オートコンプリートコントローラー"""

import asyncio
from functools import partial
from typing import Any, Callable, Optional

from bs4 import Tag

from ...geocoding.domain.models import LookupOutcome
from ...geocoding.services.geocoding_client import GeocodingClient
from ..domain.enums import FieldState
from ..domain.models import (
    Candidate,
    CoordinatePair,
    FieldBinding,
    SuggestionOutcome,
    WriteOutcome,
)
from ..page.context import RenderingContext
from ....shared.exceptions.errors import GeocoderWidgetError, MissingDestinationElementError
from ....shared.logging.config import get_logger
from ....shared.utils.text import format_coordinate, normalize_term

logger = get_logger(__name__)

ErrorHandler = Callable[[GeocoderWidgetError], None]
Respond = Callable[[list[dict[str, Any]]], None]


class AutocompleteController:
    """
    バインド1件分のオートコンプリート処理

    オートコンプリートUIのフック（source, select, change）を実装し、
    選択された候補の緯度・経度を書き込み先フィールドに反映する。
    エラーは送出せず、結果オブジェクトとon_errorで通知する
    """

    def __init__(
        self,
        binding: FieldBinding,
        client: GeocodingClient,
        context: RenderingContext,
        source_element: Tag,
        on_error: Optional[ErrorHandler] = None,
        discard_stale_responses: bool = True,
    ) -> None:
        """
        Args:
            binding: フィールドバインド
            client: 共有ジオコーディングクライアント
            context: バインド時のレンダリングコンテキスト
            source_element: ソースのinput要素
            on_error: エラー通知先（Noneならログ出力のみ）
            discard_stale_responses: 古い検索の応答を破棄するか
        """
        self.binding = binding
        self.client = client
        self.context = context
        self.source_element = source_element
        self.on_error = on_error
        self.discard_stale_responses = discard_stale_responses

        self.state = FieldState.IDLE
        self.last_suggestions: Optional[SuggestionOutcome] = None
        self.last_write: Optional[WriteOutcome] = None
        self._sequence = 0
        self._write_sequence = 0
        self._in_flight = 0

    # ---- オートコンプリートのフック ----

    def source(self, request: dict[str, str], respond: Respond) -> "asyncio.Task[LookupOutcome]":
        """
        入力中の文字列で候補を検索し、結果をrespondに渡す

        失敗時は空の候補リストを渡す
        """
        term = request.get("term", "")
        self._sequence += 1
        self._in_flight += 1
        self.state = FieldState.AWAITING_RESPONSE

        logger.debug(f"[{self.binding.source_field_id}] lookup #{self._sequence}: {term}")

        return self.client.geocode(term, partial(self._handle_lookup, self._sequence, respond))

    def select(self, event: dict[str, Any], ui: dict[str, Any]) -> Optional[WriteOutcome]:
        """候補が選択されたら座標を書き込む"""
        item = (ui or {}).get("item")
        if item is None:
            return None
        return self.write(Candidate.from_item(item).coordinates)

    def change(self, event: dict[str, Any], ui: dict[str, Any]) -> Any:
        """
        値が確定したら座標を書き込む

        候補を選ばずに確定した場合は入力値をジオコーディングし、
        先頭の結果を書き込む
        """
        item = (ui or {}).get("item")
        if item is not None:
            return self.write(Candidate.from_item(item).coordinates)

        term = normalize_term(RenderingContext.get_value(self.source_element))
        if not term:
            return None

        self._write_sequence += 1
        logger.debug(
            f"[{self.binding.source_field_id}] geocoding committed value #{self._write_sequence}: {term}"
        )
        callback = partial(self._handle_commit, self._write_sequence, self._sequence)
        return self.client.geocode(term, callback)

    # ---- 結果の処理 ----

    def _handle_lookup(self, token: int, respond: Respond, outcome: LookupOutcome) -> None:
        self._in_flight -= 1
        if self._in_flight == 0:
            self.state = FieldState.IDLE

        stale = token < self._sequence
        suggestions = SuggestionOutcome(
            term=outcome.term,
            candidates=tuple(Candidate.from_location(location) for location in outcome.locations),
            error=outcome.error,
            stale=stale,
        )

        if stale and self.discard_stale_responses:
            logger.debug(
                f"[{self.binding.source_field_id}] discarding stale response #{token} "
                f"(latest #{self._sequence})"
            )
            return

        self.last_suggestions = suggestions
        if outcome.error is not None:
            self._report(outcome.error)

        respond(suggestions.to_items())

    def _handle_commit(self, write_token: int, lookup_token: int, outcome: LookupOutcome) -> None:
        # 確定後により新しい書き込みか検索があれば、その結果を優先する
        stale = write_token < self._write_sequence or lookup_token < self._sequence
        if stale and self.discard_stale_responses:
            logger.debug(
                f"[{self.binding.source_field_id}] discarding stale commit #{write_token} "
                f"for '{outcome.term}'"
            )
            return

        if outcome.error is not None:
            self._report(outcome.error)
            return
        if not outcome.locations:
            logger.debug(f"[{self.binding.source_field_id}] no result for '{outcome.term}'")
            return

        first = outcome.locations[0]
        self.write(CoordinatePair(latitude=first.latitude, longitude=first.longitude))

    def write(self, coordinates: CoordinatePair) -> WriteOutcome:
        """
        書き込み先の緯度・経度サブフィールドに座標を書き込む

        サブフィールドが片方でも見つからない場合は何も書き込まない

        Args:
            coordinates: 書き込む座標

        Returns:
            WriteOutcome: 書き込み結果
        """
        self._write_sequence += 1
        destination_id = self.binding.destination_field_id
        container = self.context.find_by_id(destination_id)

        lat_field = lon_field = None
        if container is not None:
            lat_field = RenderingContext.find_sub_field(container, "lat")
            lon_field = RenderingContext.find_sub_field(container, "lon")

        missing = [name for name, field in (("lat", lat_field), ("lon", lon_field)) if field is None]
        if missing:
            error = MissingDestinationElementError(destination_id, missing)
            self.last_write = WriteOutcome(destination_field_id=destination_id, error=error)
            self._report(error)
            return self.last_write

        RenderingContext.set_value(lat_field, format_coordinate(coordinates.latitude))
        RenderingContext.set_value(lon_field, format_coordinate(coordinates.longitude))

        logger.debug(
            f"[{destination_id}] coordinates written: "
            f"({coordinates.latitude}, {coordinates.longitude})"
        )

        self.last_write = WriteOutcome(destination_field_id=destination_id, coordinates=coordinates)
        return self.last_write

    def _report(self, error: GeocoderWidgetError) -> None:
        """エラーをログに残し、on_errorが指定されていれば通知する"""
        logger.debug(f"[{self.binding.source_field_id}] {type(error).__name__}: {error}")

        if self.on_error is None:
            return
        try:
            self.on_error(error)
        except Exception as e:
            logger.error(f"Error handler failed for {type(error).__name__}: {e}", exc_info=True)
