"""帳票生成関連のエンドポイント"""
from io import BytesIO
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from mitsumori.errors import CanvasError, EmptyItemsError, ValidationError
from mitsumori.generator import DocumentGenerator, Submission, format_notification, make_filename

router = APIRouter()


class DocumentRequest(BaseModel):
    client_company: str
    client_person: str
    items_text: str
    remarks: Optional[str] = None
    document_type: str = "estimate"

    def to_submission(self) -> Submission:
        return Submission(
            client_company=self.client_company,
            client_person=self.client_person,
            items_text=self.items_text,
            remarks=self.remarks,
            document_type=self.document_type,
        )


class EntryResponse(BaseModel):
    name: str
    quantity: float
    unit: str
    unit_price: int
    amount: int
    category: str
    quantity_hidden: bool
    unit_price_hidden: bool


class PreviewResponse(BaseModel):
    document_type: str
    entries: list[EntryResponse]
    subtotal: int
    tax: int
    grand_total: int
    remarks: str
    filename: str


@router.post("/documents/preview", response_model=PreviewResponse)
async def preview_document(request: DocumentRequest):
    """品目を解析・計算した結果を返す（PDFは生成しない）"""
    try:
        document = DocumentGenerator().prepare(request.to_submission())
    except (EmptyItemsError, ValidationError) as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})

    return PreviewResponse(
        document_type=document.doc_type.value,
        entries=[
            EntryResponse(
                name=entry.name,
                quantity=entry.quantity,
                unit=entry.unit,
                unit_price=entry.unit_price,
                amount=entry.amount,
                category=entry.category.value,
                quantity_hidden=entry.quantity_hidden,
                unit_price_hidden=entry.unit_price_hidden,
            )
            for entry in document.entries
        ],
        subtotal=document.subtotal,
        tax=document.tax,
        grand_total=document.grand_total,
        remarks=document.remarks,
        filename=make_filename(document.doc_type, document.issued_on),
    )


@router.post("/documents")
async def create_document(request: DocumentRequest):
    """帳票PDFを生成してダウンロード"""
    submission = request.to_submission()
    try:
        pdf_bytes, summary = DocumentGenerator().generate(submission)
    except (EmptyItemsError, ValidationError) as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})
    except CanvasError as e:
        print(f"PDF生成エラー: {e}")
        raise HTTPException(status_code=500, detail={"error": str(e)})

    print(format_notification(summary, submission))

    return StreamingResponse(
        BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(summary.filename)}",
            "X-Item-Count": str(summary.item_count),
            "X-Grand-Total": str(summary.grand_total),
        },
    )
