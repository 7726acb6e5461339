"""見積書作成システム - Webアプリ

機能:
1. 品目テキストから見積書・請求書・領収書PDFを作成
2. 自社情報（発行元・社印）の編集
"""
import streamlit as st

from mitsumori.config import load_company_config, save_company_config
from mitsumori.document import DocumentType
from mitsumori.errors import CanvasError, EmptyItemsError, ValidationError
from mitsumori.generator import DocumentGenerator, Submission, format_notification
from mitsumori.layout import format_yen, quantity_text

# ページ設定
st.set_page_config(
    page_title="見積書作成システム",
    page_icon="📄",
    layout="wide",
)


def show_document_form():
    """帳票作成フォーム"""
    st.header("📄 帳票作成")

    with st.form("document_form"):
        doc_type = st.radio(
            "帳票の種類",
            list(DocumentType),
            format_func=lambda t: t.display_name,
            horizontal=True,
        )
        col1, col2 = st.columns(2)
        with col1:
            client_company = st.text_input("宛先（社名）", placeholder="例: 株式会社〇〇")
        with col2:
            client_person = st.text_input("担当者名", placeholder="例: 山田太郎")
        items_text = st.text_area(
            "品目（1行に1品目）",
            placeholder="品名, 数量, 単価\n例:\nコーン標識, 10, 3500\n安全ベスト, 20, 2800",
            help="「品名, 数量, 単価」の形式で1行ずつ入力してください（「、」や全角数字も可）",
            height=200,
        )
        remarks = st.text_area("備考（任意）", placeholder="備考を入力（省略時はデフォルト文言）")
        submitted = st.form_submit_button("PDF生成", type="primary")

    if not submitted:
        return

    submission = Submission(
        client_company=client_company,
        client_person=client_person,
        items_text=items_text,
        remarks=remarks,
        document_type=doc_type.value,
    )

    generator = DocumentGenerator()
    try:
        with st.spinner("📄 PDFを生成中..."):
            document = generator.prepare(submission)
            pdf_bytes = generator.render(document)
    except (EmptyItemsError, ValidationError) as e:
        st.warning(f"⚠️ {e}")
        return
    except CanvasError as e:
        st.error(f"❌ {doc_type.display_name}の生成中にエラーが発生しました。\n\n{e}")
        return

    summary = generator.summarize(document)
    st.success(format_notification(summary, submission))

    # 明細を表示
    st.table([
        {
            "品名": entry.name,
            "数量": "" if entry.quantity_hidden else quantity_text(entry),
            "単価": "" if entry.unit_price_hidden else format_yen(entry.unit_price),
            "金額": format_yen(entry.amount),
        }
        for entry in document.entries
    ])
    col1, col2, col3 = st.columns(3)
    col1.metric("小計", format_yen(document.subtotal))
    col2.metric("消費税", format_yen(document.tax))
    col3.metric("合計", format_yen(document.grand_total))

    st.download_button(
        "📥 PDFをダウンロード",
        data=pdf_bytes,
        file_name=summary.filename,
        mime="application/pdf",
    )


def show_company_settings():
    """自社情報の編集"""
    with st.sidebar:
        st.header("🏢 自社情報")
        config = load_company_config()
        with st.form("company_config"):
            labels = {
                "company_name": "会社名",
                "representative": "代表者",
                "postal_code": "郵便番号",
                "address": "住所",
                "phone": "電話番号",
                "email": "メール",
                "bank_info": "振込先",
                "seal_text": "社印（列を / で区切る）",
            }
            values = {key: st.text_input(label, value=config.get(key, "")) for key, label in labels.items()}
            if st.form_submit_button("保存"):
                if save_company_config(values):
                    st.success("✅ 自社情報を保存しました")
                else:
                    st.error("❌ 保存に失敗しました")


show_company_settings()
show_document_form()
