from decimal import Decimal

import pytest

from mitsumori.document import build_document
from mitsumori.layout import (
    Cursor,
    DocumentRenderer,
    LayoutParams,
    fits,
    quantity_text,
    row_height,
    table_top,
    tax_label,
)
from mitsumori.line_parser import interpret
from mitsumori.pricing import price

HEADER = "品  名  ・  規  格"


def make_document(items_text, issuer, issued_on, remarks=None, doc_type="estimate"):
    priced = price(interpret(items_text))
    return build_document(doc_type, "株式会社テスト商事", "山田太郎", priced, remarks, issued_on, issuer)


def entry_pages(canvas, names):
    return sorted({op[1] for op in canvas.ops if op[0] == "text" and op[2] in names})


def test_table_top_never_above_minimum():
    params = LayoutParams(min_table_top=280, table_gap=40)

    assert table_top(100, params) == 280
    assert table_top(300, params) == 340


def test_row_height_grows_with_wrapped_name():
    params = LayoutParams(min_row_height=30, row_padding=16)

    assert row_height(10, params) == 30
    assert row_height(40, params) == 56


def test_fits_uses_explicit_cursor():
    assert fits(Cursor(page=1, y=650), 50, 700)
    assert not fits(Cursor(page=1, y=651), 50, 700)
    assert Cursor(page=1, y=10).next_page(50) == Cursor(page=2, y=50)


def test_quantity_text():
    entries = price(interpret("A, 一式, 1\nB, 10本, 1\nC, 1.5, 1\nD, 1000, 1\n諸経費, 5%")).entries

    assert [quantity_text(e) for e in entries] == ["1 式", "10 本", "1.5", "1,000", "1 式"]


def test_single_page_document(recording_canvas, issuer, issued_on, sample_items):
    doc = make_document(sample_items, issuer, issued_on)

    DocumentRenderer().render(doc, recording_canvas)

    texts = recording_canvas.texts()
    assert recording_canvas.page_count == 1
    assert texts.count(HEADER) == 1
    assert "御 見 積 書" in texts
    assert "2025年 3月 1日" in texts
    assert "株式会社テスト商事  御中" in texts
    assert "¥ 123,623 (税込)" in texts
    assert "¥ 112,385" in texts
    assert "¥ 11,238" in texts
    assert "消費税 (10%)" in texts
    # 諸経費・法定福利費は数量・単価を表示しない
    assert "1 式" not in texts
    assert "¥ 0" not in texts
    assert texts.count("¥ 15,015") == 1
    assert "10" in texts and "¥ 3,500" in texts


def test_seal_drawn_once_near_issuer(recording_canvas, issuer, issued_on, sample_items):
    DocumentRenderer().render(make_document(sample_items, issuer, issued_on), recording_canvas)

    seals = [op for op in recording_canvas.ops if op[0] == "seal"]
    assert len(seals) == 1
    assert seals[0][4] == ("㈱ミナト", "安全施設", "之印")
    name_op = recording_canvas.text_ops(issuer.company_name)[0]
    assert seals[0][2] == name_op[3] + 110


def test_rows_break_across_pages_with_header(recording_canvas, issuer, issued_on):
    names = [f"品目{i:02d}" for i in range(40)]
    doc = make_document("\n".join(f"{n}, 1, 100" for n in names), issuer, issued_on)
    params = LayoutParams()

    DocumentRenderer(params).render(doc, recording_canvas)

    pages = entry_pages(recording_canvas, set(names))
    assert len(pages) > 1
    for page in pages:
        assert HEADER in recording_canvas.texts(page)
    for name in names:
        op = recording_canvas.text_ops(name)[0]
        assert op[4] - 8 + params.min_row_height <= params.row_bottom


def test_header_is_first_text_after_break(recording_canvas, issuer, issued_on):
    doc = make_document("\n".join(f"品目{i}, 1, 100" for i in range(40)), issuer, issued_on)

    DocumentRenderer().render(doc, recording_canvas)

    ops = recording_canvas.ops
    for i, op in enumerate(ops):
        if op[0] == "page":
            following = [o for o in ops[i + 1:] if o[0] == "text"]
            if following and following[0][2].startswith("品目"):
                pytest.fail("row drawn before table header on a new page")


def test_long_names_make_taller_rows(recording_canvas, issuer, issued_on):
    long_name = "長" * 100
    doc = make_document(f"{long_name}, 1, 100\n次の品目, 1, 100", issuer, issued_on)

    DocumentRenderer().render(doc, recording_canvas)

    first = recording_canvas.text_ops(long_name)[0]
    second = recording_canvas.text_ops("次の品目")[0]
    # 100文字 / 1行25文字 = 4行 → 4 × (12 + 2) + 16
    assert second[4] - first[4] == 72


def test_table_moves_to_new_page_when_start_is_too_low(recording_canvas, issuer, issued_on, sample_items):
    doc = make_document(sample_items, issuer, issued_on)

    DocumentRenderer(LayoutParams(table_start_limit=200)).render(doc, recording_canvas)

    assert "御 見 積 書" in recording_canvas.texts(1)
    assert HEADER not in recording_canvas.texts(1)
    assert HEADER in recording_canvas.texts(2)


def test_summary_and_remarks_stay_together(recording_canvas, issuer, issued_on, sample_items):
    doc = make_document(sample_items, issuer, issued_on)

    DocumentRenderer(LayoutParams(block_bottom=450)).render(doc, recording_canvas)

    assert "コーン標識" in recording_canvas.texts(1)
    assert "小  計" in recording_canvas.texts(2)
    assert "備  考" in recording_canvas.texts(2)
    assert HEADER not in recording_canvas.texts(2)


def test_default_remarks_are_grey(recording_canvas, issuer, issued_on, sample_items):
    DocumentRenderer().render(make_document(sample_items, issuer, issued_on), recording_canvas)

    remarks_op = [op for op in recording_canvas.ops if op[0] == "text" and "有効期限" in op[2]][0]
    assert remarks_op[6] == "#666666"


def test_user_remarks_are_black(recording_canvas, issuer, issued_on, sample_items):
    doc = make_document(sample_items, issuer, issued_on, remarks="現場: 鳥取市")

    DocumentRenderer().render(doc, recording_canvas)

    op = recording_canvas.text_ops("現場: 鳥取市")[0]
    assert op[6] == "black"


def test_long_remarks_continue_on_new_pages(recording_canvas, issuer, issued_on, sample_items):
    remarks = "\n".join(f"備考{i:03d}: 搬入経路・作業時間帯の確認事項" for i in range(120))
    doc = make_document(sample_items, issuer, issued_on, remarks=remarks)
    params = LayoutParams()

    DocumentRenderer(params).render(doc, recording_canvas)

    assert recording_canvas.page_count > 1
    for op in recording_canvas.ops:
        if op[0] == "rect":
            assert op[3] + op[5] <= params.block_bottom
    remarks_ops = [op for op in recording_canvas.ops if op[0] == "text" and op[2].startswith("備考")]
    for op in remarks_ops:
        height = recording_canvas.measure_text_height(op[2], None, size=op[5], line_gap=2)
        assert op[4] + height <= params.block_bottom
    assert "\n".join(op[2] for op in remarks_ops) == remarks
    continued = [page for page in range(2, recording_canvas.page_count + 1) if "備  考（続き）" in recording_canvas.texts(page)]
    assert continued == list(range(2, recording_canvas.page_count + 1))


def test_oversized_row_is_split_without_empty_header_page(recording_canvas, issuer, issued_on):
    long_name = "長" * 3000
    doc = make_document(f"{long_name}, 2, 150", issuer, issued_on)
    params = LayoutParams()

    DocumentRenderer(params).render(doc, recording_canvas)

    chunks = [op for op in recording_canvas.ops if op[0] == "text" and op[2] and set(op[2]) <= {"長", "\n"}]
    assert chunks[0][1] == 1
    assert "".join(op[2] for op in chunks).replace("\n", "") == long_name
    for op in chunks:
        lines = op[2].count("\n") + 1
        assert op[4] - 8 + row_height(lines * 14, params) <= params.row_bottom
        assert HEADER in recording_canvas.texts(op[1])
    assert len(recording_canvas.text_ops("¥ 150")) == 1
    assert recording_canvas.text_ops("¥ 150")[0][1] == 1


def test_oversized_row_after_other_rows_starts_on_new_page(recording_canvas, issuer, issued_on):
    long_name = "長" * 3000
    doc = make_document(f"先頭の品目, 1, 100\n{long_name}, 1, 100", issuer, issued_on)

    DocumentRenderer().render(doc, recording_canvas)

    chunks = [op for op in recording_canvas.ops if op[0] == "text" and op[2] and set(op[2]) <= {"長", "\n"}]
    assert recording_canvas.text_ops("先頭の品目")[0][1] == 1
    assert chunks[0][1] == 2
    for page in range(1, recording_canvas.page_count + 1):
        texts = recording_canvas.texts(page)
        if HEADER in texts:
            assert any(t == "先頭の品目" or set(t) <= {"長", "\n"} for t in texts if t)


def test_tax_label_follows_document_rate(recording_canvas, issuer, issued_on, sample_items):
    priced = price(interpret(sample_items), tax_rate=Decimal("0.08"))
    doc = build_document("estimate", "株式会社テスト商事", "山田太郎", priced, None, issued_on, issuer)

    DocumentRenderer().render(doc, recording_canvas)

    texts = recording_canvas.texts()
    assert doc.tax_rate == Decimal("0.08")
    assert "消費税 (8%)" in texts
    assert "消費税 (10%)" not in texts
    assert tax_label(Decimal("0.1")) == "消費税 (10%)"
