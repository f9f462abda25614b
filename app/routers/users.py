# app/routers/users.py
"""
Rotas do usuário autenticado.
"""

# ========================
# --- Importações ---
# ========================
from fastapi import APIRouter, status

# --- Módulos da Aplicação ---
from app.core.dependencies import CurrentClaims, SessionDep
from app.models.user import UserProfile

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        status.HTTP_401_UNAUTHORIZED: {"description": "Token ausente."},
        status.HTTP_403_FORBIDDEN: {"description": "Token inválido ou expirado."},
    },
)

@router.get(
    "/me",
    response_model=UserProfile,
    summary="Obtém o perfil do usuário autenticado",
    response_description="Nome completo, nome de usuário e e-mail (nunca a senha).",
    responses={status.HTTP_404_NOT_FOUND: {"description": "Usuário do token não existe mais."}},
)
async def read_users_me(session: SessionDep, claims: CurrentClaims):
    return await session.get_profile(claims.sub)
