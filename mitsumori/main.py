"""メインスクリプト

品目テキストから見積書・請求書・領収書のPDFを生成する

使用方法:
    python -m mitsumori.main items.txt --company 株式会社テスト商事 --person 山田太郎
    python -m mitsumori.main items.txt --type invoice --company ... --person ...
    cat items.txt | python -m mitsumori.main - --type receipt --company ... --person ...
"""
import argparse
import sys
from pathlib import Path

from .config import OUTPUT_DIR
from .document import DocumentType
from .errors import CanvasError, EmptyItemsError, ValidationError
from .generator import DocumentGenerator, Submission, format_notification


def read_items(source: str) -> str:
    """品目テキストを読み込む（"-" の場合は標準入力）"""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def main(argv=None) -> int:
    """メイン関数"""
    parser = argparse.ArgumentParser(
        description="品目テキストから見積書・請求書・領収書のPDFを生成"
    )
    parser.add_argument("items_file", help="品目ファイル（1行に「品名, 数量, 単価」、- で標準入力）")
    parser.add_argument("--company", required=True, help="宛先（社名）")
    parser.add_argument("--person", required=True, help="担当者名")
    parser.add_argument(
        "--type",
        dest="document_type",
        choices=["estimate", "invoice", "receipt"],
        default="estimate",
        help="帳票の種類",
    )
    parser.add_argument("--remarks", default=None, help="備考（省略時はデフォルト文言）")
    parser.add_argument("--output", default=None, help="出力パス（省略時はoutputディレクトリ）")

    args = parser.parse_args(argv)

    try:
        items_text = read_items(args.items_file)
    except OSError as e:
        print(f"エラー: 品目ファイルを読み込めません: {e}")
        return 1

    submission = Submission(
        client_company=args.company,
        client_person=args.person,
        items_text=items_text,
        remarks=args.remarks,
        document_type=args.document_type,
    )

    print(f"処理中: {args.items_file}")
    generator = DocumentGenerator()
    try:
        pdf_bytes, summary = generator.generate(submission)
    except (EmptyItemsError, ValidationError) as e:
        print(f"エラー: {e}")
        return 1
    except CanvasError as e:
        print(f"エラー: {DocumentType.parse(args.document_type).display_name}の生成中にエラーが発生しました: {e}")
        return 1

    if args.output:
        output_path = Path(args.output)
    else:
        OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
        output_path = OUTPUT_DIR / summary.filename
    output_path.write_bytes(pdf_bytes)

    print(format_notification(summary, submission))
    print(f"出力: {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
