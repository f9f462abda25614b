# app/routers/auth.py
"""
Este módulo define as rotas de autenticação: registro de usuários e
login (emissão do token JWT), em JSON e no formulário OAuth2.
"""

# ========================
# --- Importações ---
# ========================
from typing import Annotated

from fastapi import APIRouter, Body, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

# --- Módulos da Aplicação ---
from app.core.dependencies import SessionDep
from app.models.token import LoginRequest, LoginResponse, Token
from app.models.user import UserCreate, UserPublic

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    tags=["Authentication"],
)

# ========================
# --- Rotas da API ---
# ========================

# --- Endpoint de Registro ---
@router.post(
    "/register",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Registra um novo usuário no sistema",
    response_description="Dados do usuário recém-registrado (sem senha).",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Campos obrigatórios ausentes ou inválidos."},
        status.HTTP_409_CONFLICT: {"description": "E-mail ou nome de usuário já registrado."},
    },
)
async def register_user(
    session: SessionDep,
    user_in: Annotated[UserCreate, Body(description="Dados do novo usuário para registro.")]
):
    """
    Registra um usuário. A senha é armazenada apenas como hash bcrypt.
    """
    created_user = await session.register(user_in)
    return UserPublic(
        id=created_user.id,
        full_name=created_user.full_name,
        username=created_user.username,
        email=created_user.email,
    )

# --- Endpoint de Login (JSON) ---
@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Autentica o usuário e obtém um token de acesso JWT",
    description="Aceita nome de usuário ou e-mail em `usernameOrEmail`. O token vale 1 hora.",
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Credenciais ausentes."},
        status.HTTP_401_UNAUTHORIZED: {"description": "Credenciais inválidas."},
    },
)
async def login(
    session: SessionDep,
    credentials: Annotated[LoginRequest, Body(description="Usuário (ou e-mail) e senha.")]
):
    token = await session.authenticate(credentials.username_or_email, credentials.password)
    return LoginResponse(token=token)

# --- Endpoint de Login (Formulário OAuth2) ---
@router.post(
    "/login/access-token",
    response_model=Token,
    summary="Login no formato OAuth2 (form data)",
    description="Variante usada pelo botão 'Authorize' da documentação. Envie 'username' e 'password' como form data.",
)
async def login_for_access_token(
    session: SessionDep,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
):
    token = await session.authenticate(form_data.username, form_data.password)
    return Token(access_token=token, token_type="bearer")
