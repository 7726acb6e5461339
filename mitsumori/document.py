"""帳票データの組み立て（見積書・請求書・領収書）"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from .config import ESTIMATE_VALIDITY_NOTE, INVOICE_PAYMENT_DUE_NOTE, TAX_RATE, load_company_config
from .errors import ValidationError
from .pricing import Entry, PricedResult


class DocumentType(Enum):
    """帳票の種類"""
    ESTIMATE = "estimate"
    INVOICE = "invoice"
    RECEIPT = "receipt"

    @classmethod
    def parse(cls, value) -> "DocumentType":
        if isinstance(value, cls):
            return value
        try:
            return cls((value or "estimate").strip().lower())
        except ValueError:
            raise ValidationError(f"帳票の種類が不正です: {value}")

    @property
    def title(self) -> str:
        return _TEXTS[self]["title"]

    @property
    def greeting(self) -> str:
        return _TEXTS[self]["greeting"]

    @property
    def amount_label(self) -> str:
        return _TEXTS[self]["amount_label"]

    @property
    def display_name(self) -> str:
        return _TEXTS[self]["display_name"]

    @property
    def file_prefix(self) -> str:
        return _TEXTS[self]["file_prefix"]


_TEXTS = {
    DocumentType.ESTIMATE: {
        "title": "御 見 積 書",
        "greeting": "下記のとおり御見積申し上げます。",
        "amount_label": "御見積金額",
        "display_name": "見積書",
        "file_prefix": "Estimate",
    },
    DocumentType.INVOICE: {
        "title": "御 請 求 書",
        "greeting": "下記のとおりご請求申し上げます。",
        "amount_label": "御請求金額",
        "display_name": "請求書",
        "file_prefix": "Invoice",
    },
    DocumentType.RECEIPT: {
        "title": "領  収  書",
        "greeting": "下記正に領収いたしました。",
        "amount_label": "領収金額",
        "display_name": "領収書",
        "file_prefix": "Receipt",
    },
}


@dataclass(frozen=True)
class Issuer:
    """発行元（自社）情報"""
    company_name: str
    representative: str = ""
    postal_code: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    bank_info: str = ""
    seal_columns: tuple[str, ...] = ()  # 社印の縦書き列（右から）

    @classmethod
    def from_config(cls, config: Optional[dict] = None) -> "Issuer":
        """company_config.json の内容から作成"""
        config = config if config is not None else load_company_config()
        seal_text = config.get("seal_text", "") or ""
        return cls(
            company_name=config.get("company_name", ""),
            representative=config.get("representative", ""),
            postal_code=config.get("postal_code", ""),
            address=config.get("address", ""),
            phone=config.get("phone", ""),
            email=config.get("email", ""),
            bank_info=config.get("bank_info", ""),
            seal_columns=tuple(col.strip() for col in seal_text.split("/") if col.strip()),
        )


@dataclass(frozen=True)
class Document:
    """描画用の帳票データ（生成後は変更しない）"""
    doc_type: DocumentType
    client_company: str
    client_person: str
    entries: tuple[Entry, ...]
    subtotal: int
    tax: int
    grand_total: int
    remarks: str
    remarks_is_default: bool
    issued_on: date
    issuer: Issuer
    tax_rate: Decimal = TAX_RATE

    @property
    def date_text(self) -> str:
        return f"{self.issued_on.year}年 {self.issued_on.month}月 {self.issued_on.day}日"


def default_remarks(doc_type: DocumentType, issuer: Issuer) -> str:
    """帳票の種類ごとの備考欄デフォルト文言"""
    if doc_type is DocumentType.RECEIPT:
        return "但し、上記正に領収いたしました。"
    if doc_type is DocumentType.INVOICE:
        return f"{INVOICE_PAYMENT_DUE_NOTE}\n振込先： {issuer.bank_info}"
    return f"{ESTIMATE_VALIDITY_NOTE}\n支払条件： 弊社指定口座への振り込み・現金"


def build_document(
    doc_type,
    client_company: str,
    client_person: str,
    priced: PricedResult,
    remarks: Optional[str] = None,
    issued_on: Optional[date] = None,
    issuer: Optional[Issuer] = None,
) -> Document:
    """帳票データを組み立てる

    Args:
        doc_type: DocumentType または "estimate" / "invoice" / "receipt"
        client_company: 宛先（社名）
        client_person: 担当者名
        priced: 金額計算結果
        remarks: 備考（省略時は種類ごとのデフォルト文言）
        issued_on: 発行日（省略時は今日）
        issuer: 自社情報（省略時は company_config.json）

    Raises:
        ValidationError: 宛先・担当者が空、または明細が0件
    """
    doc_type = DocumentType.parse(doc_type)
    client_company = (client_company or "").strip()
    client_person = (client_person or "").strip()

    if not client_company:
        raise ValidationError("宛先（社名）が入力されていません")
    if not client_person:
        raise ValidationError("担当者名が入力されていません")
    if not priced.entries:
        raise ValidationError("明細が1件もありません")

    issuer = issuer or Issuer.from_config()
    remarks = (remarks or "").strip()

    return Document(
        doc_type=doc_type,
        client_company=client_company,
        client_person=client_person,
        entries=tuple(priced.entries),
        subtotal=priced.subtotal,
        tax=priced.tax,
        grand_total=priced.grand_total,
        remarks=remarks or default_remarks(doc_type, issuer),
        remarks_is_default=not remarks,
        issued_on=issued_on or date.today(),
        issuer=issuer,
        tax_rate=priced.tax_rate,
    )
