"""レンダリングコンテキスト（BeautifulSoupのDOMツリー）"""

from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ....shared.logging.config import get_logger

logger = get_logger(__name__)

# attach済みのソース要素に付けるマーカー属性
PROCESSED_ATTR = "data-geocoder-processed"


class RenderingContext:
    """
    フォームの一部（またはページ全体）を表すコンテキスト

    要素の検索はこのコンテキストの配下に限定される
    """

    def __init__(self, root: Union[BeautifulSoup, Tag]) -> None:
        """
        Args:
            root: コンテキストのルート要素
        """
        self.root = root

    @classmethod
    def from_html(cls, html: str) -> "RenderingContext":
        """HTML文字列からページ全体のコンテキストを作成"""
        return cls(BeautifulSoup(html, "html.parser"))

    def subcontext(self, element_id: str) -> Optional["RenderingContext"]:
        """
        指定IDの要素をルートとする部分コンテキストを作成

        動的に挿入されたフォーム部分へのattachで使う
        """
        element = self.find_by_id(element_id)
        if element is None:
            return None
        return RenderingContext(element)

    def find_by_id(self, element_id: str) -> Optional[Tag]:
        """
        コンテキスト内で指定IDの要素を取得

        Args:
            element_id: 要素ID

        Returns:
            Optional[Tag]: 要素（見つからない場合はNone）
        """
        if isinstance(self.root, Tag) and self.root.get("id") == element_id:
            return self.root
        return self.root.find(id=element_id)

    @staticmethod
    def find_sub_field(container: Tag, suffix: str) -> Optional[Tag]:
        """
        コンテナ配下で、クラス名が `suffix` または `-suffix` で終わる要素を取得

        例: suffix="lat" は "lat" と "geofield-lat" に一致する
        """

        def matches(css_class: Optional[str]) -> bool:
            if not css_class:
                return False
            return css_class == suffix or css_class.endswith(f"-{suffix}")

        return container.find(class_=matches)

    @staticmethod
    def is_processed(element: Tag) -> bool:
        return element.has_attr(PROCESSED_ATTR)

    @staticmethod
    def mark_processed(element: Tag) -> None:
        element[PROCESSED_ATTR] = "true"

    @staticmethod
    def get_value(element: Tag) -> str:
        """入力要素の値を取得"""
        return str(element.get("value", ""))

    @staticmethod
    def set_value(element: Tag, value: str) -> None:
        """入力要素の値を設定"""
        element["value"] = value

    def html(self) -> str:
        """コンテキストをHTML文字列として返す"""
        return str(self.root)
