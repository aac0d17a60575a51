# pixcheckout/database/db_connection.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from pixcheckout.config.settings import DATABASE_URL, DB_CONFIG, DB_SSL_MODE
from pixcheckout.utils.logger import logger

# Base única para todos os models
Base = declarative_base()


def _montar_url() -> str:
    if DATABASE_URL:
        return DATABASE_URL

    # Validação mínima de config
    missing = [k for k in ('database', 'user', 'password', 'host', 'port') if not DB_CONFIG.get(k)]
    if missing:
        raise RuntimeError(f"Configuração do banco inválida, faltando variáveis: {', '.join(missing)}")

    ssl_query = f"?sslmode={DB_SSL_MODE}" if DB_SSL_MODE else ""
    return (
        f"postgresql://{DB_CONFIG['user']}:{DB_CONFIG['password']}"
        f"@{DB_CONFIG['host']}:{DB_CONFIG['port']}/{DB_CONFIG['database']}{ssl_query}"
    )


connection_string = _montar_url()

if connection_string.startswith("sqlite"):
    # SQLite em memória precisa compartilhar a mesma conexão entre threads
    engine = create_engine(
        connection_string,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    # Cria o engine com configuração de timezone
    engine = create_engine(
        connection_string,
        pool_pre_ping=True,
        connect_args={
            "options": "-c timezone=America/Sao_Paulo"
        }
    )

# Configura o sessionmaker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# Dependency para FastAPI
def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def abrir_sessao():
    """Sessão avulsa para jobs em background (fora do ciclo de request)."""
    try:
        return SessionLocal()
    except Exception as e:
        logger.error(f"[DB] Erro ao abrir sessão ORM: {e}")
        raise
