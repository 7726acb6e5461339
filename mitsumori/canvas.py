"""描画キャンバス

レイアウトは上端基準（y は下向きに増加）の座標で描画命令を出し、
ReportLabCanvas が PDF 座標（下端基準）に変換して reportlab に渡す。
"""
import random
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .config import PDF_GOTHIC_FONT_PATH, PDF_MINCHO_FONT_PATH
from .errors import CanvasError

GOTHIC = "gothic"
MINCHO = "mincho"

LINE_HEIGHT_RATIO = 1.2
ASCENT_RATIO = 0.88
SEAL_COLOR = "#b22222"

# 論理フォント名 → (TrueTypeファイル, 代替CIDフォント)
_FONT_SOURCES = {
    GOTHIC: (PDF_GOTHIC_FONT_PATH, "HeiseiKakuGo-W5"),
    MINCHO: (PDF_MINCHO_FONT_PATH, "HeiseiMin-W3"),
}
_registered_fonts: dict[str, str] = {}


def register_font(logical_name: str) -> str:
    """日本語フォントを登録し、reportlab上のフォント名を返す"""
    if logical_name in _registered_fonts:
        return _registered_fonts[logical_name]

    font_path, fallback = _FONT_SOURCES[logical_name]
    font_name = f"Mitsumori-{logical_name}"
    try:
        if not Path(font_path).exists():
            raise FileNotFoundError(font_path)
        pdfmetrics.registerFont(TTFont(font_name, str(font_path)))
        print(f"[DEBUG] Font '{font_name}' registered: {font_path}")
    except Exception as e:
        # TrueTypeフォントが無い場合は内蔵CIDフォントを使用
        print(f"[DEBUG] フォント登録をスキップ ({type(e).__name__}: {e}) → {fallback} を使用します")
        if fallback not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(UnicodeCIDFont(fallback))
        font_name = fallback

    _registered_fonts[logical_name] = font_name
    return font_name


def wrap_text(text: str, font_name: str, size: float, width: Optional[float]) -> list[str]:
    """指定幅に収まるよう1文字単位で折り返す（改行はそのまま維持）"""
    lines = []
    for paragraph in text.split("\n"):
        if width is None:
            lines.append(paragraph)
            continue
        current = ""
        for char in paragraph:
            candidate = current + char
            if current and pdfmetrics.stringWidth(candidate, font_name, size) > width:
                lines.append(current)
                current = char
            else:
                current = candidate
        lines.append(current)
    return lines


class Canvas(ABC):
    """レイアウトエンジンが使う描画機能"""

    page_width: float
    page_height: float

    @property
    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def add_page(self) -> None:
        ...

    @abstractmethod
    def text_width(self, text: str, font: str = GOTHIC, size: float = 10) -> float:
        ...

    @abstractmethod
    def wrap_lines(self, text: str, width: Optional[float], font: str = GOTHIC, size: float = 10) -> list[str]:
        ...

    @abstractmethod
    def measure_text_height(
        self, text: str, width: Optional[float], font: str = GOTHIC, size: float = 10, line_gap: float = 0
    ) -> float:
        ...

    @abstractmethod
    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font: str = GOTHIC,
        size: float = 10,
        width: Optional[float] = None,
        align: str = "left",
        color: str = "black",
        line_gap: float = 0,
    ) -> None:
        ...

    @abstractmethod
    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        stroke: Optional[str] = "black",
        fill: Optional[str] = None,
        line_width: float = 1,
    ) -> None:
        ...

    @abstractmethod
    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, *, color: str = "black", line_width: float = 1
    ) -> None:
        ...

    @abstractmethod
    def draw_seal(self, x: float, y: float, columns: Sequence[str], size: float = 56) -> None:
        ...

    @abstractmethod
    def finish(self) -> bytes:
        ...


class ReportLabCanvas(Canvas):
    """reportlab による PDF キャンバス（帳票1件につき1インスタンス）"""

    def __init__(self, page_size=A4, rng: Optional[random.Random] = None):
        self.page_width, self.page_height = page_size
        self._buffer = BytesIO()
        self._canvas = canvas.Canvas(self._buffer, pagesize=page_size)
        self._fonts = {name: register_font(name) for name in _FONT_SOURCES}
        self._rng = rng or random.Random()
        self._pages = 1

    @property
    def page_count(self) -> int:
        return self._pages

    def _flip(self, y: float) -> float:
        return self.page_height - y

    def add_page(self) -> None:
        self._canvas.showPage()
        self._pages += 1

    def text_width(self, text: str, font: str = GOTHIC, size: float = 10) -> float:
        return pdfmetrics.stringWidth(text, self._fonts[font], size)

    def wrap_lines(self, text, width, font=GOTHIC, size=10):
        return wrap_text(text, self._fonts[font], size, width)

    def measure_text_height(self, text, width, font=GOTHIC, size=10, line_gap=0):
        lines = wrap_text(text, self._fonts[font], size, width)
        return len(lines) * (size * LINE_HEIGHT_RATIO + line_gap)

    def draw_text(self, text, x, y, *, font=GOTHIC, size=10, width=None, align="left", color="black", line_gap=0):
        font_name = self._fonts[font]
        c = self._canvas
        c.setFont(font_name, size)
        c.setFillColor(colors.toColor(color))

        line_height = size * LINE_HEIGHT_RATIO + line_gap
        baseline = self._flip(y) - size * ASCENT_RATIO
        for line in wrap_text(text, font_name, size, width):
            if align == "center" and width is not None:
                c.drawCentredString(x + width / 2, baseline, line)
            elif align == "right" and width is not None:
                c.drawRightString(x + width, baseline, line)
            else:
                c.drawString(x, baseline, line)
            baseline -= line_height

    def draw_rect(self, x, y, width, height, *, stroke="black", fill=None, line_width=1):
        c = self._canvas
        c.setLineWidth(line_width)
        if stroke:
            c.setStrokeColor(colors.toColor(stroke))
        if fill:
            c.setFillColor(colors.toColor(fill))
        c.rect(x, self._flip(y + height), width, height, stroke=1 if stroke else 0, fill=1 if fill else 0)

    def draw_line(self, x1, y1, x2, y2, *, color="black", line_width=1):
        c = self._canvas
        c.setLineWidth(line_width)
        c.setStrokeColor(colors.toColor(color))
        c.line(x1, self._flip(y1), x2, self._flip(y2))

    def draw_seal(self, x, y, columns, size=56):
        """社印を描画（少し傾けた二重枠・縦書き・かすれ）"""
        c = self._canvas
        seal_color = colors.toColor(SEAL_COLOR)
        font_name = self._fonts[MINCHO]
        font_size = 11
        spacing = 12

        c.saveState()
        center_x, center_y = x + size / 2, self._flip(y + size / 2)
        c.translate(center_x, center_y)
        c.rotate(2)
        c.translate(-center_x, -center_y)

        # 枠
        c.setStrokeColor(seal_color, alpha=0.85)
        c.setLineWidth(2.5)
        c.rect(x, self._flip(y + size), size, size, stroke=1, fill=0)
        c.setLineWidth(1)
        c.rect(x + 3, self._flip(y + size - 3), size - 6, size - 6, stroke=1, fill=0)

        # 文字（右の列から縦書き）
        c.setFillColor(seal_color, alpha=0.85)
        c.setFont(font_name, font_size)
        step = (size - 22) / (len(columns) - 1) if len(columns) > 1 else 0
        for i, column in enumerate(columns):
            col_x = x + size - 16 - i * step
            col_y = y + (size - len(column) * spacing) / 2
            for j, char in enumerate(column):
                top = col_y + j * spacing
                c.drawString(col_x, self._flip(top) - font_size * ASCENT_RATIO, char)

        # かすれ
        c.setFillColor(colors.white)
        for _ in range(50):
            nx = x + self._rng.random() * size
            ny = y + self._rng.random() * size
            radius = self._rng.random() * 1.5
            c.circle(nx, self._flip(ny), radius, stroke=0, fill=1)

        c.restoreState()

    def finish(self) -> bytes:
        try:
            self._canvas.save()
        except Exception as e:
            raise CanvasError(f"PDFの書き出しに失敗しました: {e}") from e
        return self._buffer.getvalue()


def start_document(page_size=A4, rng: Optional[random.Random] = None) -> ReportLabCanvas:
    """新しいPDFキャンバスを作成"""
    return ReportLabCanvas(page_size=page_size, rng=rng)
