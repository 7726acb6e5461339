"""帳票レイアウト（ページ分割対応）

座標は上端基準の pt。描画位置は Cursor（ページ番号・y座標）で受け渡し、
キャンバス側の状態には依存しない。
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from .canvas import GOTHIC, MINCHO, Canvas
from .config import (
    LAYOUT_BLOCK_BOTTOM,
    LAYOUT_MIN_ROW_HEIGHT,
    LAYOUT_MIN_TABLE_TOP,
    LAYOUT_PAGE_TOP,
    LAYOUT_ROW_BOTTOM,
    LAYOUT_ROW_PADDING,
    LAYOUT_TABLE_GAP,
    LAYOUT_TABLE_START_LIMIT,
    TAX_RATE,
)
from .document import Document
from .pricing import Entry

TABLE_HEADERS = (
    ("品  名  ・  規  格", "name"),
    ("数  量", "quantity"),
    ("単  価", "price"),
    ("金  額", "amount"),
)
HEADER_FILL = "#f0f0f0"
ROW_RULE_COLOR = "#cccccc"
DEFAULT_REMARKS_COLOR = "#666666"


@dataclass(frozen=True)
class LayoutParams:
    """レイアウト寸法・閾値"""
    margin_left: float = 40
    content_width: float = 515
    min_table_top: float = LAYOUT_MIN_TABLE_TOP
    table_gap: float = LAYOUT_TABLE_GAP
    table_start_limit: float = LAYOUT_TABLE_START_LIMIT
    row_bottom: float = LAYOUT_ROW_BOTTOM
    block_bottom: float = LAYOUT_BLOCK_BOTTOM
    page_top: float = LAYOUT_PAGE_TOP
    min_row_height: float = LAYOUT_MIN_ROW_HEIGHT
    row_padding: float = LAYOUT_ROW_PADDING
    header_height: float = 20
    name_column_width: float = 250
    font_size: float = 10
    line_gap: float = 2
    summary_gap: float = 20
    summary_row_height: float = 25
    remarks_gap: float = 40
    remarks_box_height: float = 80

    @property
    def column_x(self) -> dict:
        left = self.margin_left
        return {"name": left + 10, "quantity": left + 260, "price": left + 340, "amount": left + 430}

    @property
    def right(self) -> float:
        return self.margin_left + self.content_width


@dataclass(frozen=True)
class Cursor:
    """描画位置"""
    page: int
    y: float

    def advance(self, dy: float) -> "Cursor":
        return replace(self, y=self.y + dy)

    def next_page(self, top: float) -> "Cursor":
        return Cursor(page=self.page + 1, y=top)


def table_top(previous_bottom: float, params: LayoutParams) -> float:
    """明細表の開始位置（最低位置より上には置かない）"""
    return max(params.min_table_top, previous_bottom + params.table_gap)


def row_height(measured_name_height: float, params: LayoutParams) -> float:
    """品名の折り返し高さに合わせた行の高さ"""
    return max(params.min_row_height, measured_name_height + params.row_padding)


def fits(cursor: Cursor, height: float, bottom: float) -> bool:
    return cursor.y + height <= bottom


def format_yen(amount: int) -> str:
    return f"¥ {amount:,}"


def format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return f"{int(quantity):,}"
    return f"{quantity:,}"


def quantity_text(entry: Entry) -> str:
    """数量欄の表示（式・%は「1 式」）"""
    if entry.unit in ("式", "%"):
        return "1 式"
    return f"{format_quantity(entry.quantity)} {entry.unit}".strip()


def tax_label(tax_rate: Decimal = TAX_RATE) -> str:
    return f"消費税 ({(tax_rate * 100).normalize():f}%)"


class DocumentRenderer:
    """Document をキャンバスに描画する"""

    def __init__(self, params: Optional[LayoutParams] = None):
        self.params = params or LayoutParams()

    def render(self, doc: Document, canvas: Canvas) -> Cursor:
        """帳票全体を描画し、最後の描画位置を返す"""
        cursor = Cursor(page=1, y=40)
        cursor = self._draw_title(canvas, doc, cursor)
        cursor = self._draw_date(canvas, doc, cursor)

        start = cursor.advance(20)
        client_bottom = self._draw_client(canvas, doc, start)
        issuer_bottom = self._draw_issuer(canvas, doc, start)

        cursor = self._start_table(canvas, max(client_bottom, issuer_bottom), start)
        for i, entry in enumerate(doc.entries):
            cursor = self._draw_row(canvas, entry, cursor, fresh=(i == 0))

        return self._draw_summary_and_remarks(canvas, doc, cursor)

    def _new_page(self, canvas: Canvas, cursor: Cursor) -> Cursor:
        canvas.add_page()
        return cursor.next_page(self.params.page_top)

    # ── ヘッダー ──

    def _draw_title(self, canvas: Canvas, doc: Document, cursor: Cursor) -> Cursor:
        size = 22
        canvas.draw_text(doc.doc_type.title, 0, cursor.y, font=MINCHO, size=size, width=canvas.page_width, align="center")

        # タイトル下線（二重線）
        line_y = cursor.y + canvas.measure_text_height(doc.doc_type.title, None, MINCHO, size) + 5
        center = canvas.page_width / 2
        canvas.draw_line(center - 77.5, line_y, center + 77.5, line_y, line_width=2)
        canvas.draw_line(center - 77.5, line_y + 3, center + 77.5, line_y + 3, line_width=0.5)
        return Cursor(page=cursor.page, y=line_y + 30)

    def _draw_date(self, canvas: Canvas, doc: Document, cursor: Cursor) -> Cursor:
        p = self.params
        canvas.draw_text(doc.date_text, p.margin_left, cursor.y, size=10, width=p.content_width, align="right")
        return cursor.advance(canvas.measure_text_height(doc.date_text, None, GOTHIC, 10))

    def _draw_client(self, canvas: Canvas, doc: Document, start: Cursor) -> float:
        """宛先・挨拶文・合計金額を描画し、下端を返す"""
        x = 50
        y = start.y
        canvas.draw_text(f"{doc.client_company}  御中", x, y, font=MINCHO, size=14, width=250)
        company_height = canvas.measure_text_height(f"{doc.client_company}  御中", 250, MINCHO, 14)
        y += max(25, company_height + 8)

        canvas.draw_text(f"{doc.client_person}  様", x, y, font=MINCHO, size=11, width=250)
        y += 20
        canvas.draw_line(x, y, 300, y, line_width=0.5)

        canvas.draw_text(doc.doc_type.greeting, x, y + 15, size=10)

        # 金額（大きく強調）
        amount_y = y + 50
        canvas.draw_text(doc.doc_type.amount_label, x, amount_y, font=MINCHO, size=12)
        canvas.draw_text(f"¥ {doc.grand_total:,} (税込)", 130, amount_y - 3, font=MINCHO, size=18)
        canvas.draw_line(x, amount_y + 20, 300, amount_y + 20, line_width=1)
        return amount_y + 20

    def _draw_issuer(self, canvas: Canvas, doc: Document, start: Cursor) -> float:
        """自社情報と社印を描画し、下端を返す"""
        issuer = doc.issuer
        x = 360
        width = self.params.right - x

        canvas.draw_text(issuer.company_name, x, start.y + 40, font=MINCHO, size=13)
        if issuer.seal_columns:
            canvas.draw_seal(x + 110, start.y + 25, issuer.seal_columns)

        lines = [
            issuer.representative,
            f"〒{issuer.postal_code}" if issuer.postal_code else "",
            issuer.address,
            f"TEL: {issuer.phone}" if issuer.phone else "",
            f"MAIL: {issuer.email}" if issuer.email else "",
        ]
        y = start.y + 60
        for line in lines:
            if not line:
                continue
            canvas.draw_text(line, x, y, size=9, width=width)
            y += max(15, canvas.measure_text_height(line, width, GOTHIC, 9))
        return y

    # ── 明細表 ──

    def _start_table(self, canvas: Canvas, previous_bottom: float, cursor: Cursor) -> Cursor:
        p = self.params
        top = table_top(previous_bottom, p)
        cursor = Cursor(page=cursor.page, y=top)
        if top > p.table_start_limit or not fits(cursor, p.header_height + p.min_row_height, p.row_bottom):
            cursor = self._new_page(canvas, cursor)
        return self._draw_table_header(canvas, cursor)

    def _draw_table_header(self, canvas: Canvas, cursor: Cursor) -> Cursor:
        p = self.params
        canvas.draw_rect(p.margin_left, cursor.y, p.content_width, p.header_height, fill=HEADER_FILL, line_width=0.5)
        for label, column in TABLE_HEADERS:
            canvas.draw_text(label, p.column_x[column], cursor.y + 6, size=p.font_size)
        return cursor.advance(p.header_height)

    def _draw_row(self, canvas: Canvas, entry: Entry, cursor: Cursor, fresh: bool = False) -> Cursor:
        """明細1行を描画（1ページに収まらない品名は行を分けて続きのページに描く）

        fresh: 表ヘッダーの直後（改ページしても空きが増えない位置）
        """
        p = self.params
        lines = canvas.wrap_lines(entry.name, p.name_column_width, GOTHIC, p.font_size)
        line_height = canvas.measure_text_height(lines[0], None, GOTHIC, p.font_size, p.line_gap)
        columns = p.column_x
        first = True

        while lines:
            room = p.row_bottom - cursor.y
            if row_height(len(lines) * line_height, p) > room and not fresh:
                cursor = self._draw_table_header(canvas, self._new_page(canvas, cursor))
                fresh = True
                continue

            capacity = max(1, int((room - p.row_padding) // line_height))
            chunk, lines = lines[:capacity], lines[capacity:]
            height = row_height(len(chunk) * line_height, p)
            name = entry.name if first and not lines else "\n".join(chunk)

            y = cursor.y
            canvas.draw_line(p.margin_left, y + height, p.right, y + height, color=ROW_RULE_COLOR, line_width=0.5)
            canvas.draw_text(name, columns["name"], y + 8, size=p.font_size, width=p.name_column_width, line_gap=p.line_gap)
            if first:
                if not entry.quantity_hidden:
                    canvas.draw_text(quantity_text(entry), columns["quantity"], y + 8, size=p.font_size)
                if not entry.unit_price_hidden:
                    canvas.draw_text(format_yen(entry.unit_price), columns["price"], y + 8, size=p.font_size)
                canvas.draw_text(format_yen(entry.amount), columns["amount"], y + 8, size=p.font_size)

            cursor = cursor.advance(height)
            first = False
            fresh = False
        return cursor

    # ── 合計欄・備考欄 ──

    def _remarks_style(self, doc: Document) -> dict:
        if doc.remarks_is_default:
            return {"size": 8, "color": DEFAULT_REMARKS_COLOR, "line_gap": 5}
        return {"size": 9, "color": "black", "line_gap": 2}

    def _draw_summary_and_remarks(self, canvas: Canvas, doc: Document, cursor: Cursor) -> Cursor:
        p = self.params
        needed = p.summary_gap + 2 * p.summary_row_height + p.remarks_gap + p.remarks_box_height

        # 合計欄と備考欄（最初の枠）は同じページに置く
        if not fits(cursor, needed, p.block_bottom):
            cursor = self._new_page(canvas, cursor)

        cursor = cursor.advance(p.summary_gap)
        box_x = 280
        label_x = box_x + 20
        amount_x = box_x + 190

        rows = (("小  計", doc.subtotal), (tax_label(doc.tax_rate), doc.tax))
        for label, value in rows:
            canvas.draw_text(label, label_x, cursor.y, size=p.font_size)
            canvas.draw_text(format_yen(value), amount_x, cursor.y, size=p.font_size)
            canvas.draw_line(box_x, cursor.y + 15, p.right, cursor.y + 15, line_width=0.5)
            cursor = cursor.advance(p.summary_row_height)

        canvas.draw_text("合  計", label_x, cursor.y + 5, font=MINCHO, size=12)
        canvas.draw_text(format_yen(doc.grand_total), amount_x, cursor.y + 5, font=MINCHO, size=12)
        canvas.draw_line(box_x, cursor.y + 25, p.right, cursor.y + 25, line_width=0.5)
        canvas.draw_line(box_x, cursor.y + 28, p.right, cursor.y + 28, line_width=0.5)

        return self._draw_remarks(canvas, doc, cursor.advance(p.remarks_gap))

    def _draw_remarks(self, canvas: Canvas, doc: Document, cursor: Cursor) -> Cursor:
        """備考欄を描画（収まらない分は次のページに枠を続ける）"""
        p = self.params
        style = self._remarks_style(doc)
        text_width = p.content_width - 20
        lines = canvas.wrap_lines(doc.remarks, text_width, GOTHIC, style["size"])
        line_height = canvas.measure_text_height(lines[0], None, GOTHIC, style["size"], style["line_gap"])
        title = "備  考"

        while lines:
            room = p.block_bottom - cursor.y
            capacity = int((room - 25) // line_height)
            if capacity < 1 and cursor.y > p.page_top:
                cursor = self._new_page(canvas, cursor)
                continue

            capacity = max(1, capacity)
            chunk, lines = lines[:capacity], lines[capacity:]
            text = doc.remarks if title == "備  考" and not lines else "\n".join(chunk)
            height = max(len(chunk) * line_height + 25, min(p.remarks_box_height, room))
            canvas.draw_rect(p.margin_left, cursor.y, p.content_width, height, line_width=0.5)
            canvas.draw_text(title, p.margin_left + 10, cursor.y + 5, size=9)
            canvas.draw_text(text, p.margin_left + 10, cursor.y + 20, width=text_width, **style)
            cursor = cursor.advance(height)

            title = "備  考（続き）"
            if lines:
                cursor = self._new_page(canvas, cursor)
        return cursor
