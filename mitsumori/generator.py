"""帳票PDF生成モジュール

品目テキスト → 解析 → 金額計算 → 帳票データ → PDF
"""
from dataclasses import dataclass
from datetime import date
from typing import Optional

from .canvas import start_document
from .document import Document, DocumentType, Issuer, build_document
from .errors import EmptyItemsError
from .layout import DocumentRenderer, LayoutParams
from .line_parser import interpret
from .pricing import price


@dataclass
class Submission:
    """帳票作成の入力"""
    client_company: str  # 宛先（社名）
    client_person: str  # 担当者名
    items_text: str  # 品目（1行に1品目）
    remarks: Optional[str] = None  # 備考（任意）
    document_type: str = "estimate"  # estimate / invoice / receipt


@dataclass
class DocumentSummary:
    """生成結果の概要（通知メッセージ用）"""
    item_count: int
    grand_total: int
    filename: str
    document_type: DocumentType


def make_filename(doc_type: DocumentType, issued_on: date) -> str:
    """ファイル名を生成（例: Estimate_20250301.pdf）"""
    return f"{doc_type.file_prefix}_{issued_on.strftime('%Y%m%d')}.pdf"


def format_notification(summary: DocumentSummary, submission: Submission) -> str:
    """作成完了メッセージ"""
    return (
        f"📄 *{summary.document_type.display_name}を作成しました*\n\n"
        f"• 宛先: {submission.client_company} / {submission.client_person} 様\n"
        f"• 品目数: {summary.item_count}件\n"
        f"• 合計金額: ¥{summary.grand_total:,}（税込）"
    )


class DocumentGenerator:
    """見積書・請求書・領収書のPDF生成クラス"""

    def __init__(self, layout_params: Optional[LayoutParams] = None, issuer: Optional[Issuer] = None):
        self.renderer = DocumentRenderer(layout_params)
        self.issuer = issuer

    def prepare(self, submission: Submission, issued_on: Optional[date] = None) -> Document:
        """入力を解析・計算して帳票データを作成

        Raises:
            EmptyItemsError: 有効な品目が1件もない
            ValidationError: 宛先・担当者・帳票の種類が不正
        """
        doc_type = DocumentType.parse(submission.document_type)
        items = list(interpret(submission.items_text))
        if not items:
            raise EmptyItemsError()

        priced = price(items)
        return build_document(
            doc_type,
            submission.client_company,
            submission.client_person,
            priced,
            remarks=submission.remarks,
            issued_on=issued_on or date.today(),
            issuer=self.issuer,
        )

    def render(self, document: Document) -> bytes:
        """帳票データをPDFに描画"""
        canvas = start_document()
        self.renderer.render(document, canvas)
        return canvas.finish()

    def summarize(self, document: Document) -> DocumentSummary:
        return DocumentSummary(
            item_count=len(document.entries),
            grand_total=document.grand_total,
            filename=make_filename(document.doc_type, document.issued_on),
            document_type=document.doc_type,
        )

    def generate(self, submission: Submission, issued_on: Optional[date] = None) -> tuple[bytes, DocumentSummary]:
        """PDFを生成し、(PDFバイト列, 概要) を返す"""
        document = self.prepare(submission, issued_on)
        return self.render(document), self.summarize(document)
