"""FastAPI バックエンド - 見積書・請求書・領収書作成API"""
import os
import sys
from pathlib import Path

# プロジェクトルートを追加（mitsumoriパッケージを使用するため）
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from routes import config, documents

app = FastAPI(
    title="見積書作成 API",
    description="品目テキストから見積書・請求書・領収書PDFを生成するAPI",
    version="1.0.0",
)

# CORS設定
allowed_origins = ["http://localhost:3000", "http://localhost:3001"]
# 本番環境のドメインも許可
if os.getenv("ENVIRONMENT") == "production":
    render_url = os.getenv("RENDER_EXTERNAL_URL")
    if render_url:
        allowed_origins.append(render_url)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Item-Count", "X-Grand-Total"],
)

# ルーター登録（APIは /api プレフィックス）
app.include_router(documents.router, prefix="/api", tags=["帳票作成"])
app.include_router(config.router, prefix="/api", tags=["設定"])


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/api")
async def api_root():
    """API情報エンドポイント"""
    return {
        "message": "見積書作成 API",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
