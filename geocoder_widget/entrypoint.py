"""CLIエントリーポイント（フォームにビヘイビアをattachして動作確認する）"""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from .features.widget.behaviors import GeocoderBehavior
from .features.widget.page.context import RenderingContext
from .infrastructure.config.settings import Settings
from .shared.exceptions.errors import GeocoderWidgetError
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)


def load_geocoder_settings(path: str) -> dict[str, Any]:
    """
    YAMLファイルからページ設定を読み込む

    `geocoder:` キーの下にあればその中身を使う
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if isinstance(data, dict) and "geocoder" in data:
        data = data["geocoder"]
    return data


async def run_session(
    behavior: GeocoderBehavior,
    context: RenderingContext,
    geocoder_settings: dict[str, Any],
    term: str,
    field: Optional[str] = None,
    select: Optional[int] = None,
    commit: bool = False,
) -> list[dict[str, Any]]:
    """
    attachから入力、選択までを1回実行

    Args:
        behavior: ビヘイビア
        context: フォームのコンテキスト
        geocoder_settings: ページ設定
        term: 入力する文字列
        field: 対象のソースフィールドID（Noneなら最初にバインドされたもの）
        select: 選択する候補の位置
        commit: 候補を選ばずに値を確定するか

    Returns:
        list[dict]: 表示された候補
    """
    outcomes = behavior.attach(context, geocoder_settings)
    bound = [outcome for outcome in outcomes if outcome.bound]
    if not bound:
        raise GeocoderWidgetError("No field could be bound")

    source_id = field or bound[0].binding.source_field_id
    widget = behavior.widgets[source_id]

    widget.type(term)
    await widget.settle()
    suggestions = list(widget.menu)

    if select is not None:
        widget.select(select)
        widget.blur()
    elif commit:
        widget.blur()
    await widget.settle()

    return suggestions


def main() -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 成功, 1: 失敗）
    """
    parser = argparse.ArgumentParser(description="ジオコーダーウィジェットの動作確認ツール")

    parser.add_argument("--form", type=str, required=True, help="フォームのHTMLファイル")
    parser.add_argument(
        "--settings",
        type=str,
        required=True,
        help="ページ設定のYAMLファイル（engine, api_key, fields）",
    )
    parser.add_argument("--term", type=str, required=True, help="入力する文字列")
    parser.add_argument("--field", type=str, help="対象のソースフィールドID")
    parser.add_argument("--select", type=int, help="選択する候補の位置（0始まり）")
    parser.add_argument(
        "--commit",
        action="store_true",
        help="候補を選ばずに入力値を確定する",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    args = parser.parse_args()

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # ログレベルを上書き
        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level, library_level=settings.library_log_level)

        logger.info("Starting geocoder widget session")
        logger.info(f"Environment: {settings.environment}")
        logger.info(f"Project: {settings.project_name}")

        context = RenderingContext.from_html(Path(args.form).read_text(encoding="utf-8"))
        geocoder_settings = load_geocoder_settings(args.settings)
        behavior = GeocoderBehavior(settings)

        suggestions = asyncio.run(
            run_session(
                behavior,
                context,
                geocoder_settings,
                term=args.term,
                field=args.field,
                select=args.select,
                commit=args.commit,
            )
        )

        for index, item in enumerate(suggestions):
            print(f"[{index}] {item['label']} ({item['lat']}, {item['lon']})")
        if not suggestions:
            print("No suggestions")

        if args.select is not None or args.commit:
            print(context.html())

        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
