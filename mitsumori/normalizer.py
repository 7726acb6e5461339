"""入力行の正規化（全角→半角）"""

_COMMA_TABLE = str.maketrans({"、": ",", "，": ","})

# 全角数字 ０-９ を半角に（コードポイント差 0xFEE0）
_DIGIT_TABLE = {code: code - 0xFEE0 for code in range(0xFF10, 0xFF1A)}


def normalize(raw: str) -> str:
    """全角カンマ・全角数字を半角に置き換える

    それ以外の文字はそのまま返す（前後の空白除去は呼び出し側で行う）
    """
    return raw.translate(_COMMA_TABLE).translate(_DIGIT_TABLE)
