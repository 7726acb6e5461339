"""見積書・請求書・領収書 PDF 生成"""
from .document import Document, DocumentType, Issuer, build_document
from .errors import CanvasError, DocumentError, EmptyItemsError, ValidationError
from .generator import DocumentGenerator, DocumentSummary, Submission
from .line_parser import Category, LineItem, interpret, parse_line
from .normalizer import normalize
from .pricing import Entry, PricedResult, price

__all__ = [
    "CanvasError",
    "Category",
    "Document",
    "DocumentError",
    "DocumentGenerator",
    "DocumentSummary",
    "DocumentType",
    "EmptyItemsError",
    "Entry",
    "Issuer",
    "LineItem",
    "PricedResult",
    "Submission",
    "ValidationError",
    "build_document",
    "interpret",
    "normalize",
    "parse_line",
    "price",
]
