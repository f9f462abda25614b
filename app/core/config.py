# app/core/config.py

# ========================
# --- Importações ---
# ========================
import os
import logging
from typing import Optional, List
from pydantic_settings import BaseSettings
from pydantic import Field, ValidationError, model_validator, HttpUrl
from dotenv import load_dotenv

# ===============================
# --- Configuração do Logger ---
# ===============================
logger = logging.getLogger(__name__)

# ===============================
# --- Carregamento do .env ---
# ===============================
# Define o caminho para o arquivo .env na raiz do projeto
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), '.env')
# Carrega as variáveis do arquivo .env para o ambiente, se o arquivo existir
loaded = load_dotenv(dotenv_path=dotenv_path)

# ======================================
# --- Definição das Configurações ---
# ======================================
class Settings(BaseSettings):
    """
    Configurações da aplicação lidas do ambiente usando Pydantic BaseSettings.
    Procura variáveis de ambiente ou variáveis em um arquivo .env.
    Docs Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    """
    # =========================
    # --- Config Gerais ---
    # =========================
    PROJECT_NAME: str = Field("SR-Robot Monitoring API", description="Nome do Projeto")
    API_V1_STR: str = Field("/api/v1", description="Prefixo para a versão 1 da API")

    # =============================
    # --- Configurações MongoDB ---
    # =============================
    MONGODB_URL: str = Field(..., description="URL de conexão completa do MongoDB (obrigatória)")
    DATABASE_NAME: str = Field("srrobot_db", description="Nome do banco de dados MongoDB")
    MONGODB_TIMEOUT_MS: int = Field(5000, ge=100, description="Timeout de seleção de servidor do MongoDB, em milissegundos")

    # ===========================
    # --- Configurações JWT ---
    # ===========================
    JWT_SECRET_KEY: str = Field(..., min_length=1, description="Chave secreta forte para assinar tokens JWT (obrigatória)")
    JWT_ALGORITHM: str = Field("HS256", description="Algoritmo de assinatura JWT")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, ge=1, description="Validade do token de acesso em minutos (padrão: 1 hora)")

    # ======================================
    # --- Configurações de Monitoramento ---
    # ======================================
    RECORD_SEQUENCE_NAME: str = Field(
        "idDatos",
        min_length=1,
        description="Nome do contador usado para gerar os IDs numéricos dos registros de monitoramento."
    )

    # ==============================
    # --- Configuração Webhook ---
    # ==============================
    WEBHOOK_URL: Optional[HttpUrl] = Field(
        default=None,
        description="URL opcional para replicar os eventos de monitoramento (webhooks)."
    )
    WEBHOOK_SECRET: Optional[str] = Field(
        default=None,
        description="Segredo opcional usado para assinar payloads de webhook (HMAC-SHA256)."
    )

    # ===============================
    # --- Configuração de Logging ---
    # ===============================
    LOG_LEVEL: str = Field(default="INFO", description="Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)")

    # ===================================
    # --- Configurações CORS ---
    # ===================================
    # No .env a lista deve ser escrita em JSON, ex: ["http://localhost:8081"]
    CORS_ALLOWED_ORIGINS: List[str] = Field(default=[], description="Lista de origens CORS permitidas")

    # ====================================================
    # --- Configuração do Modelo Pydantic BaseSettings ---
    # ====================================================
    model_config = {
        "case_sensitive": False,
    }

    # ===============================
    # --- Validadores ---
    # ===============================
    @model_validator(mode='after')
    def check_log_level(self) -> 'Settings':
        """Normaliza o nível de log e rejeita valores desconhecidos."""
        level = self.LOG_LEVEL.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL inválido: '{self.LOG_LEVEL}'.")
        self.LOG_LEVEL = level
        return self

    @model_validator(mode='after')
    def check_webhook_config(self) -> 'Settings':
        """Avisa quando um segredo de webhook é definido sem URL."""
        if self.WEBHOOK_SECRET and not self.WEBHOOK_URL:
            logger.warning("WEBHOOK_SECRET definido, mas WEBHOOK_URL está vazia. Nenhum webhook será enviado.")
        return self

# ================================
# --- Criação da Instância ---
# ================================
try:
    # Pydantic BaseSettings lê do ambiente ou .env na instanciação
    settings = Settings()
except ValidationError as e:
    # Campos obrigatórios faltando, tipos inválidos ou erros dos validadores
    logger.critical(f"Erro fatal de validação ao carregar configurações: {e}")
    raise e
except Exception as e:
    logger.critical(f"Erro inesperado ao carregar configurações: {e}", exc_info=True)
    raise e
