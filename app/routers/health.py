# app/routers/health.py

# ========================
# --- Importações ---
# ========================
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from app.db.mongodb_utils import check_mongo_connection

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter()

# ========================
# --- Rotas da API ---
# ========================
@router.get("/health", tags=["Health"])
async def health_check():
    if not await check_mongo_connection():
        return JSONResponse(
            content={"status": "error", "message": "MongoDB não está disponível"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    return JSONResponse(content={"status": "ok"})
