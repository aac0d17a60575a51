import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)


def _bool_env(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# Ambiente: production | development | test
APP_ENV = os.getenv("APP_ENV", "production").lower()
IS_DEVELOPMENT = APP_ENV == "development"

# Banco de dados
# DATABASE_URL tem prioridade (útil para testes com SQLite)
DATABASE_URL = os.getenv("DATABASE_URL")

DB_CONFIG = {
    'database': os.getenv('DB_NAME'),
    'user': os.getenv('DB_USER'),
    'password': os.getenv('DB_PASSWORD'),
    'host': os.getenv('DB_HOST'),
    'port': int(os.getenv('DB_PORT', 5432)),
}

# SSL do banco (opcional)
DB_SSL_MODE = os.getenv('DB_SSL_MODE')  # ex.: require, verify-ca, verify-full

# JWT / Segurança
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 90))

# Usuário administrador inicial (opcional)
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = _bool_env("CORS_ALLOW_ALL", "false")

# Proxies reversos cujo X-Forwarded-For é aceito (IPs separados por vírgula)
TRUSTED_PROXIES = {p.strip() for p in os.getenv("TRUSTED_PROXIES", "").split(",") if p.strip()}

# FastAPI / App
BASE_URL = os.getenv("BASE_URL", "")
ENABLE_DOCS = _bool_env("ENABLE_DOCS", "true")

# PrimePag (gateway Pix)
PRIMEPAG_TOKEN = os.getenv("PRIMEPAG_TOKEN")
PRIMEPAG_API_URL = os.getenv("PRIMEPAG_API_URL", "https://api.primepag.com.br/v1")
PRIMEPAG_WEBHOOK_SECRET = os.getenv("PRIMEPAG_WEBHOOK_SECRET", "")
PRIMEPAG_TIMEOUT_SECONDS = int(os.getenv("PRIMEPAG_TIMEOUT_SECONDS", 20))

# Checkout
ORDER_EXPIRE_MINUTES = int(os.getenv("ORDER_EXPIRE_MINUTES", 30))
CHECKOUT_RATE_LIMIT = int(os.getenv("CHECKOUT_RATE_LIMIT", 5))
CHECKOUT_RATE_WINDOW_SECONDS = int(os.getenv("CHECKOUT_RATE_WINDOW_SECONDS", 60))

# SMTP
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")
SMTP_FROM = os.getenv("SMTP_FROM", "")
SMTP_FROM_NAME = os.getenv("SMTP_FROM_NAME", "Checkout Pix")

# MinIO
MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "minio:9000")
MINIO_PUBLIC_ENDPOINT = os.getenv("MINIO_PUBLIC_ENDPOINT", "")
MINIO_ROOT_USER = os.getenv("MINIO_ROOT_USER", "")
MINIO_ROOT_PASSWORD = os.getenv("MINIO_ROOT_PASSWORD", "")
MINIO_SECURE = _bool_env("MINIO_SECURE", "false")

# Jobs em background
ENABLE_BACKGROUND_JOBS = _bool_env("ENABLE_BACKGROUND_JOBS", "true")
EXPIRE_ORDERS_INTERVAL_SECONDS = int(os.getenv("EXPIRE_ORDERS_INTERVAL_SECONDS", 60))
REPORTS_INTERVAL_SECONDS = int(os.getenv("REPORTS_INTERVAL_SECONDS", 300))

# Logs
LOG_DIR = os.getenv("LOG_DIR", "")
