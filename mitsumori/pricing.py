"""金額計算モジュール

2段階で計算する:
1. 通常品目の金額 = floor(数量 × 単価)、その合計が課税対象小計
2. 諸経費・法定福利費は課税対象小計から算出し、通常品目の後ろに並べる
"""
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from .config import TAX_RATE, WELFARE_LEVY_RATE
from .line_parser import Category, LineItem


@dataclass(frozen=True)
class Entry:
    """金額計算済みの明細行"""
    name: str
    raw_quantity_text: str
    quantity: float
    unit: str
    unit_price: int
    category: Category
    amount: int  # 金額（円未満切り捨て）

    @property
    def quantity_hidden(self) -> bool:
        return self.category.is_derived

    @property
    def unit_price_hidden(self) -> bool:
        return self.category.is_derived


@dataclass(frozen=True)
class PricedResult:
    """計算結果"""
    entries: tuple[Entry, ...]
    taxable_subtotal: int  # 通常品目のみの小計
    subtotal: int  # 全明細の小計（税抜）
    tax: int  # 消費税
    grand_total: int  # 合計（税込）
    tax_rate: Decimal = TAX_RATE  # 適用した消費税率


def _floor(value: Decimal) -> int:
    return int(math.floor(value))


def _to_entry(item: LineItem, amount: int, **changes) -> Entry:
    fields = {
        "name": item.name,
        "raw_quantity_text": item.raw_quantity_text,
        "quantity": item.quantity,
        "unit": item.unit,
        "unit_price": item.unit_price,
        "category": item.category,
    }
    fields.update(changes)
    return Entry(amount=amount, **fields)


def price_standard(items: Iterable[LineItem]) -> tuple[list[Entry], int]:
    """通常品目の金額を計算し、(明細, 課税対象小計) を返す"""
    entries = []
    for item in items:
        if item.category is not Category.STANDARD:
            continue
        amount = _floor(Decimal(str(item.quantity)) * item.unit_price)
        entries.append(_to_entry(item, amount))
    return entries, sum(entry.amount for entry in entries)


def price_derived(
    items: Iterable[LineItem],
    taxable_subtotal: int,
    welfare_rate: Decimal = WELFARE_LEVY_RATE,
) -> list[Entry]:
    """諸経費・法定福利費の金額を課税対象小計から計算"""
    entries = []
    for item in items:
        if item.category is Category.PERCENTAGE_SURCHARGE:
            amount = _floor(Decimal(taxable_subtotal) * Decimal(str(item.quantity)) / 100)
            entries.append(_to_entry(item, amount, unit_price=0))
        elif item.category is Category.WELFARE_LEVY:
            amount = _floor(Decimal(taxable_subtotal) * welfare_rate)
            entries.append(_to_entry(item, amount, unit_price=amount, quantity=1.0, unit="式"))
    return entries


def calculate_tax(subtotal: int, tax_rate: Decimal = TAX_RATE) -> int:
    """消費税（切り捨て）"""
    return _floor(Decimal(subtotal) * tax_rate)


def price(
    items: Iterable[LineItem],
    tax_rate: Optional[Decimal] = None,
    welfare_rate: Optional[Decimal] = None,
) -> PricedResult:
    """品目リストから明細と合計を計算"""
    items = list(items)
    standard, taxable_subtotal = price_standard(items)
    derived = price_derived(
        items,
        taxable_subtotal,
        welfare_rate=WELFARE_LEVY_RATE if welfare_rate is None else welfare_rate,
    )

    entries = tuple(standard + derived)
    subtotal = sum(entry.amount for entry in entries)
    tax_rate = TAX_RATE if tax_rate is None else tax_rate
    tax = calculate_tax(subtotal, tax_rate)
    return PricedResult(
        entries=entries,
        taxable_subtotal=taxable_subtotal,
        subtotal=subtotal,
        tax=tax,
        grand_total=subtotal + tax,
        tax_rate=tax_rate,
    )
