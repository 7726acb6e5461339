"""品目テキストの解析モジュール

1行 = 「品名, 数量, 単価」の形式。区切りはカンマ・全角カンマ・タブ。

特殊品目:
- 法定福利費: 数量・単価を無視し、課税対象小計の16.5%を後で計算
- 諸経費 + 「7%」などの数量: 課税対象小計に対する割合で後で計算
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .normalizer import normalize

WELFARE_LEVY_NAME = "法定福利費"
SURCHARGE_NAME = "諸経費"
LUMP_SUM = "一式"

_FIELD_SEPARATOR = re.compile(r"[,，\t]+")
_LEADING_NUMBER = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)(.*)$")
_BARE_NUMBER = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)$")
_LEADING_INT = re.compile(r"^\d+")


class Category(Enum):
    """品目の種別"""
    STANDARD = "standard"
    PERCENTAGE_SURCHARGE = "percentage_surcharge"
    WELFARE_LEVY = "welfare_levy"

    @property
    def is_derived(self) -> bool:
        """課税対象小計から金額を算出する種別か"""
        return self is not Category.STANDARD


@dataclass(frozen=True)
class LineItem:
    """解析済み・未計算の品目"""
    name: str  # 品名
    raw_quantity_text: str  # 入力された数量文字列
    quantity: float  # 数量（諸経費の場合はパーセント値）
    unit: str  # 単位（本, 式, %, m など）
    unit_price: int  # 単価
    category: Category = Category.STANDARD


def _parse_unit_price(token: str) -> int:
    """単価を整数として解析（先頭の数字のみ、解析不能なら0）"""
    match = _LEADING_INT.match(token)
    return int(match.group()) if match else 0


def _parse_quantity(token: str) -> tuple[float, str]:
    """数量文字列を (数量, 単位) に分解

    例: "100m" → (100.0, "m")、"一式" → (1.0, "式")、"たくさん" → (0.0, "")
    """
    if token == LUMP_SUM:
        return 1.0, "式"
    match = _LEADING_NUMBER.match(token)
    if not match:
        return 0.0, ""
    return float(match.group(1)), match.group(2).strip()


def _is_percentage_token(token: str) -> bool:
    return token.endswith("%") or bool(_BARE_NUMBER.match(token))


def parse_line(normalized: str) -> Optional[LineItem]:
    """正規化済みの1行を LineItem に変換（品名が空なら None）"""
    fields = [field.strip() for field in _FIELD_SEPARATOR.split(normalized)]
    name = fields[0] if fields else ""
    if not name:
        return None

    quantity_text = fields[1] if len(fields) > 1 and fields[1] else "0"
    unit_price = _parse_unit_price(fields[2]) if len(fields) > 2 else 0

    # 品名による特殊品目の判定（法定福利費が優先）
    if WELFARE_LEVY_NAME in name:
        return LineItem(
            name=WELFARE_LEVY_NAME,
            raw_quantity_text=quantity_text,
            quantity=1.0,
            unit="式",
            unit_price=0,
            category=Category.WELFARE_LEVY,
        )

    if SURCHARGE_NAME in name and _is_percentage_token(quantity_text):
        rate, _ = _parse_quantity(quantity_text.rstrip("%").strip())
        return LineItem(
            name=SURCHARGE_NAME,
            raw_quantity_text=quantity_text,
            quantity=rate,
            unit="%",
            unit_price=unit_price,
            category=Category.PERCENTAGE_SURCHARGE,
        )

    quantity, unit = _parse_quantity(quantity_text)
    return LineItem(
        name=name,
        raw_quantity_text=quantity_text,
        quantity=quantity,
        unit=unit,
        unit_price=unit_price,
    )


def interpret(items_text: str) -> Iterator[LineItem]:
    """複数行の品目テキストを1行ずつ解析して LineItem を返す

    空行・品名のない行は読み飛ばす。不正な数量・単価は0として扱い、例外は出さない。
    """
    for raw in (items_text or "").split("\n"):
        line = raw.strip()
        if not line:
            continue
        item = parse_line(normalize(line))
        if item is not None:
            yield item
