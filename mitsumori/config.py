"""設定ファイル"""
import os
import json
from decimal import Decimal
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# パス設定
BASE_DIR = Path(__file__).parent.parent
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", str(BASE_DIR / "output")))
COMPANY_CONFIG_PATH = Path(os.getenv("COMPANY_CONFIG_PATH", str(BASE_DIR / "company_config.json")))

# PDF設定（日本語フォント）
# ファイルが無い場合は reportlab 内蔵のCIDフォントを使用
PDF_GOTHIC_FONT_PATH = os.getenv("PDF_GOTHIC_FONT_PATH", str(BASE_DIR / "fonts" / "ipaexg.ttf"))
PDF_MINCHO_FONT_PATH = os.getenv("PDF_MINCHO_FONT_PATH", str(BASE_DIR / "fonts" / "ipaexm.ttf"))

# 税率・法定福利費率
TAX_RATE = Decimal(os.getenv("TAX_RATE", "0.1"))
WELFARE_LEVY_RATE = Decimal(os.getenv("WELFARE_LEVY_RATE", "0.165"))

# レイアウト閾値（pt、上端基準）
LAYOUT_MIN_TABLE_TOP = float(os.getenv("LAYOUT_MIN_TABLE_TOP", "280"))
LAYOUT_TABLE_GAP = float(os.getenv("LAYOUT_TABLE_GAP", "40"))
LAYOUT_TABLE_START_LIMIT = float(os.getenv("LAYOUT_TABLE_START_LIMIT", "600"))
LAYOUT_ROW_BOTTOM = float(os.getenv("LAYOUT_ROW_BOTTOM", "700"))
LAYOUT_BLOCK_BOTTOM = float(os.getenv("LAYOUT_BLOCK_BOTTOM", "780"))
LAYOUT_PAGE_TOP = float(os.getenv("LAYOUT_PAGE_TOP", "50"))
LAYOUT_MIN_ROW_HEIGHT = float(os.getenv("LAYOUT_MIN_ROW_HEIGHT", "30"))
LAYOUT_ROW_PADDING = float(os.getenv("LAYOUT_ROW_PADDING", "16"))

# 備考欄のデフォルト文言
ESTIMATE_VALIDITY_NOTE = os.getenv("ESTIMATE_VALIDITY_NOTE", "有効期限： 御見積提出日より30日間")
INVOICE_PAYMENT_DUE_NOTE = os.getenv("INVOICE_PAYMENT_DUE_NOTE", "お振込期限： 翌月末日")


def default_company_config() -> dict:
    """.envから自社情報の初期値を作成"""
    return {
        "company_name": os.getenv("OWN_COMPANY_NAME", "株式会社サンプル"),
        "representative": os.getenv("OWN_REPRESENTATIVE", "代表取締役 山田一郎"),
        "postal_code": os.getenv("OWN_POSTAL_CODE", "000-0000"),
        "address": os.getenv("OWN_ADDRESS", "東京都〇〇区〇〇1-2-3"),
        "phone": os.getenv("OWN_PHONE", "00-0000-0000"),
        "email": os.getenv("OWN_EMAIL", "info@example.com"),
        "bank_info": os.getenv("OWN_BANK_INFO", "〇〇銀行 〇〇支店 普通 1234567"),
        "seal_text": os.getenv("OWN_SEAL_TEXT", "㈱サン/プル/之印"),
    }


# 自社情報（JSON管理）
def load_company_config() -> dict:
    """自社情報をJSONファイルから読み込む

    足りないキーは.envの値で補完する
    """
    config = default_company_config()
    if COMPANY_CONFIG_PATH.exists():
        try:
            with open(COMPANY_CONFIG_PATH, 'r', encoding='utf-8') as f:
                config.update(json.load(f))
        except Exception as e:
            print(f"警告: company_config.jsonの読み込みエラー: {e}")
    return config


def save_company_config(config: dict) -> bool:
    """自社情報をJSONファイルに保存"""
    try:
        with open(COMPANY_CONFIG_PATH, 'w', encoding='utf-8') as f:
            json.dump(config, f, ensure_ascii=False, indent=2)
        return True
    except Exception as e:
        print(f"エラー: company_config.jsonの保存エラー: {e}")
        return False
