"""帳票生成のエラー定義"""


class DocumentError(Exception):
    """帳票生成エラーの基底クラス"""


class EmptyItemsError(DocumentError):
    """有効な品目が1件もない"""

    def __init__(self, message: str = "品目が正しく入力されていません。「品名, 数量, 単価」の形式で入力してください。"):
        super().__init__(message)


class ValidationError(DocumentError):
    """宛先などの必須項目が未入力"""


class CanvasError(DocumentError):
    """描画先（PDFキャンバス）の障害"""
