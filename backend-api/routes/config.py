"""設定関連のエンドポイント"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from mitsumori.config import load_company_config, save_company_config

router = APIRouter()


class CompanyConfig(BaseModel):
    company_name: str
    representative: str = ""
    postal_code: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    bank_info: str = ""
    seal_text: str = ""


@router.get("/company-config", response_model=CompanyConfig)
async def get_company_config():
    """自社情報を取得"""

    try:
        config = load_company_config()
        return CompanyConfig(**{key: config.get(key, "") for key in CompanyConfig.model_fields})

    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/company-config")
async def save_company_config_endpoint(config: CompanyConfig):
    """自社情報を保存"""

    try:
        success = save_company_config(config.model_dump())

        if not success:
            raise HTTPException(status_code=500, detail="保存に失敗しました")

        return {
            "success": True,
            "message": "自社情報を保存しました",
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
