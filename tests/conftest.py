from datetime import date

import pytest

from mitsumori.canvas import Canvas
from mitsumori.document import Issuer


class RecordingCanvas(Canvas):
    """描画命令を記録するだけのキャンバス（文字幅は1文字 = size pt）"""

    def __init__(self, page_width=595.28, page_height=841.89):
        self.page_width = page_width
        self.page_height = page_height
        self.pages = 1
        self.ops = []
        self.finished = False

    @property
    def page_count(self):
        return self.pages

    def add_page(self):
        self.pages += 1
        self.ops.append(("page", self.pages))

    def text_width(self, text, font="gothic", size=10):
        return len(text) * size

    def wrap_lines(self, text, width, font="gothic", size=10):
        lines = []
        for paragraph in text.split("\n"):
            if width is None or not paragraph:
                lines.append(paragraph)
                continue
            per_line = max(1, int(width // size))
            lines.extend(paragraph[i:i + per_line] for i in range(0, len(paragraph), per_line))
        return lines

    def measure_text_height(self, text, width, font="gothic", size=10, line_gap=0):
        return len(self.wrap_lines(text, width, font, size)) * (size * 1.2 + line_gap)

    def draw_text(self, text, x, y, *, font="gothic", size=10, width=None, align="left", color="black", line_gap=0):
        self.ops.append(("text", self.pages, text, x, y, size, color))

    def draw_rect(self, x, y, width, height, *, stroke="black", fill=None, line_width=1):
        self.ops.append(("rect", self.pages, x, y, width, height, fill))

    def draw_line(self, x1, y1, x2, y2, *, color="black", line_width=1):
        self.ops.append(("line", self.pages, x1, y1, x2, y2))

    def draw_seal(self, x, y, columns, size=56):
        self.ops.append(("seal", self.pages, x, y, tuple(columns)))

    def finish(self):
        self.finished = True
        return b"%PDF-recorded"

    def texts(self, page=None):
        return [op[2] for op in self.ops if op[0] == "text" and (page is None or op[1] == page)]

    def text_ops(self, text):
        return [op for op in self.ops if op[0] == "text" and op[2] == text]


@pytest.fixture
def recording_canvas():
    return RecordingCanvas()


@pytest.fixture
def issuer():
    return Issuer(
        company_name="株式会社ミナト安全施設",
        representative="代表取締役 湊崎義美",
        postal_code="680-0914",
        address="鳥取県鳥取市南安長１丁目２０番３６号",
        phone="0857-30-1121",
        email="info@example.com",
        bank_info="〇〇銀行 〇〇支店 普通 1234567",
        seal_columns=("㈱ミナト", "安全施設", "之印"),
    )


@pytest.fixture
def issued_on():
    return date(2025, 3, 1)


SAMPLE_ITEMS = """コーン標識, 10, 3500
安全ベスト, 20, 2800
諸経費, 7%
法定福利費
"""


@pytest.fixture
def sample_items():
    return SAMPLE_ITEMS
