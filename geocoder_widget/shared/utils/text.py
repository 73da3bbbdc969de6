"""テキスト処理ユーティリティ"""

from typing import Optional


def normalize_term(text: Optional[str]) -> Optional[str]:
    """
    確定された入力値を検索語に整える

    全角スペースを含む空白の連続を1つにまとめ、前後の空白とカンマを除く。
    何も残らなければNone

    例: "  Paris ,  France, " -> "Paris , France"
    """
    if not text:
        return None

    term = " ".join(text.split()).strip(" ,")
    return term or None


def to_element_id(name: str) -> str:
    """
    フィールド名をHTML要素IDの表記に変換

    例: field_geo_point -> field-geo-point
    """
    return name.replace("_", "-")


def format_coordinate(value: float) -> str:
    """
    座標値をフォーム入力値の文字列に変換

    37.77 -> "37.77"、-122.0 -> "-122"
    """
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
