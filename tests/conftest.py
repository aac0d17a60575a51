import os
import tempfile
from decimal import Decimal

# Ambiente de teste precisa estar definido antes de importar a aplicação
os.environ["RUNNING_IN_DOCKER"] = "1"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "chave-de-teste"
os.environ["APP_ENV"] = "test"
os.environ["PRIMEPAG_WEBHOOK_SECRET"] = "segredo-webhook"
os.environ["PRIMEPAG_TOKEN"] = ""
os.environ["ENABLE_BACKGROUND_JOBS"] = "false"
os.environ["SMTP_HOST"] = ""
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="pixcheckout-logs-"))

import pytest
from fastapi.testclient import TestClient

from pixcheckout.api.cadastros.models.model_cliente import ClienteModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.notificacoes.channels.base_channel import BaseNotificationChannel, NotificationResult
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService
from pixcheckout.api.pagamentos.services.gateway_pix import GatewayPix, get_gateway_pix
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.seguranca.rate_limit import checkout_rate_limiter
from pixcheckout.api.usuarios.models.model_usuario import UserModel
from pixcheckout.core.security import create_access_token, hash_password
from pixcheckout.database.db_connection import Base, SessionLocal, engine
from pixcheckout.database.init_db import importar_models
from pixcheckout.main import app

importar_models()
Base.metadata.create_all(bind=engine)

CPF_VALIDO = "52998224725"


class CanalFake(BaseNotificationChannel):
    """Canal de notificação em memória; registra os envios."""

    def __init__(self, config=None, sucesso: bool = True):
        super().__init__(config or {})
        self.sucesso = sucesso
        self.enviados = []

    async def send(self, recipient, title, message, channel_metadata=None):
        self.enviados.append({"to": recipient, "title": title, "message": message, "meta": channel_metadata})
        if self.sucesso:
            return NotificationResult(True, "Enviado", external_id=f"fake-{len(self.enviados)}")
        return NotificationResult(False, "Falha simulada")

    def validate_config(self, config):
        return True

    def get_channel_name(self):
        return "fake"


class MinioFake:
    """Subconjunto da API do cliente MinIO usado pelo storage."""

    def __init__(self):
        self.buckets = set()
        self.objetos = {}

    def bucket_exists(self, bucket_name):
        return bucket_name in self.buckets

    def make_bucket(self, bucket_name):
        self.buckets.add(bucket_name)

    def set_bucket_policy(self, bucket_name, policy):
        pass

    def put_object(self, bucket_name, object_name, data, length, content_type=None):
        self.objetos[(bucket_name, object_name)] = data.read()

    def remove_object(self, bucket_name, object_name):
        self.objetos.pop((bucket_name, object_name), None)

    def list_buckets(self):
        return sorted(self.buckets)


def _limpar_tabelas():
    db = SessionLocal()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()
    finally:
        db.close()


@pytest.fixture(autouse=True)
def ambiente_limpo():
    _limpar_tabelas()
    checkout_rate_limiter.reset()
    app.dependency_overrides[get_gateway_pix] = lambda: GatewayPix(usar_mock=True)
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def canal_email(monkeypatch):
    canal = CanalFake()
    monkeypatch.setattr(EmailService, "_criar_canal", lambda self: canal)
    return canal


@pytest.fixture
def canal_whatsapp(monkeypatch):
    canal = CanalFake()
    monkeypatch.setattr(WhatsappService, "_criar_canal", lambda self, config: canal)
    return canal


@pytest.fixture
def minio_fake():
    return MinioFake()


def _criar_usuario(db, username: str, type_user: str) -> UserModel:
    user = UserModel(username=username, type_user=type_user, hashed_password=hash_password("senha123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin(db):
    return _criar_usuario(db, "admin", "admin")


@pytest.fixture
def operador(db):
    return _criar_usuario(db, "operador", "operador")


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(admin.id)})}"}


@pytest.fixture
def operador_headers(operador):
    return {"Authorization": f"Bearer {create_access_token({'sub': str(operador.id)})}"}


@pytest.fixture
def produto(db):
    produto = ProdutoModel(name="Curso de Python", description="Curso online", price=Decimal("100.00"), type="product")
    db.add(produto)
    db.commit()
    db.refresh(produto)
    return produto


@pytest.fixture
def cliente(db):
    cliente = ClienteModel(name="Maria Silva", email="maria@example.com", cpf=CPF_VALIDO, phone="11987654321")
    db.add(cliente)
    db.commit()
    db.refresh(cliente)
    return cliente


@pytest.fixture
def criar_pedido(db, produto, cliente):
    """Fábrica de pedidos persistidos."""

    def _criar(status: str = "pending", amount: str = "100.00", **extra) -> PedidoModel:
        pedido = PedidoModel(
            customer_id=cliente.id,
            product_id=produto.id,
            amount=Decimal(amount),
            discount_amount=Decimal("0"),
            status=status,
            payment_method="pix",
            **extra,
        )
        db.add(pedido)
        db.commit()
        db.refresh(pedido)
        return pedido

    return _criar


@pytest.fixture
def proxy_confiavel(monkeypatch):
    """Trata o TestClient como proxy reverso confiável, liberando X-Forwarded-For."""
    from pixcheckout.core import admin_dependencies

    monkeypatch.setattr(admin_dependencies, "TRUSTED_PROXIES", {"testclient"})
