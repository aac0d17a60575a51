from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from pixcheckout.config.settings import CORS_ORIGINS, CORS_ALLOW_ALL, BASE_URL, ENABLE_DOCS
from pixcheckout.core.exception_handlers import (
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)
from pixcheckout.utils.logger import logger
from pixcheckout.utils.minio_client import verificar_conexao_minio
from pixcheckout.utils.prometheus_metrics import PrometheusMiddleware

from pixcheckout.api.auth import auth_controller
from pixcheckout.api.usuarios.router.router_usuarios import router as usuarios_router
from pixcheckout.api.seguranca.router.router_seguranca import router as seguranca_router
from pixcheckout.api.cadastros.router.router import api_cadastros
from pixcheckout.api.checkout.router.router_checkout import router as checkout_router
from pixcheckout.api.pagamentos.router.router_webhook import router as webhook_router
from pixcheckout.api.pedidos.router.router_pedidos import router as pedidos_router
from pixcheckout.api.notificacoes.core.websocket_manager import websocket_manager
from pixcheckout.api.notificacoes.router.router_notificacoes import (
    router as notificacoes_router,
    router_ws as notificacoes_ws_router,
)
from pixcheckout.api.configuracoes.router.router_configuracoes import router as configuracoes_router
from pixcheckout.api.auditoria.router.router_auditoria import router as auditoria_router
from pixcheckout.api.storage.router.router_storage import router as storage_router
from pixcheckout.api.automacao.router.router_automacao import router as automacao_router
from pixcheckout.api.analytics.router.router_analytics import router as analytics_router
from pixcheckout.api.acessos.router.router_acessos import (
    router as acessos_router,
    router_public as acessos_public_router,
)
from pixcheckout.api.backup.router.router_backup import router as backup_router
from pixcheckout.api.relatorios.router.router_relatorios import router as relatorios_router
from pixcheckout.api.monitoring.router import (
    router as monitoring_router,
    router_public as monitoring_router_public,
)

# ──────────────────────────
# Instância FastAPI
# ──────────────────────────
app = FastAPI(
    title="Checkout Pix",
    version="1.0.0",
    description="Checkout de produtos digitais com pagamento Pix e painel administrativo",
    docs_url=("/swagger" if ENABLE_DOCS else None),
    redoc_url=("/redoc" if ENABLE_DOCS else None),
    openapi_url=("/openapi.json" if ENABLE_DOCS else None),
    servers=[{"url": BASE_URL, "description": "Base URL do ambiente"}] if BASE_URL else None,
    redirect_slashes=False,
)

# ───────────────────────────
# Exception Handlers Globais
# ───────────────────────────
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# ───────────────────────────
# Middlewares (executados na ordem reversa da adição)
# ───────────────────────────
app.add_middleware(PrometheusMiddleware)

# CORS_ALLOW_ALL=true => allow_origins=["*"] sem credenciais
if CORS_ALLOW_ALL:
    allowed_origins = ["*"]
    allow_credentials = False
else:
    allowed_origins = CORS_ORIGINS or ["*"]
    allow_credentials = bool(CORS_ORIGINS)
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────────────────────────
# Startup / Shutdown
# ───────────────────────────
@app.on_event("startup")
async def startup():
    from pixcheckout.core.background_jobs import iniciar_jobs
    from pixcheckout.database.init_db import inicializar_banco

    logger.info("Iniciando API e banco de dados...")
    inicializar_banco()

    try:
        await iniciar_jobs()
    except Exception as e:
        logger.error(f"Erro ao iniciar jobs em background: {e}")

    logger.info("API iniciada com sucesso.")


@app.on_event("shutdown")
async def shutdown():
    from pixcheckout.core.background_jobs import encerrar_jobs

    logger.info("Encerrando API...")
    await encerrar_jobs()
    logger.info("API encerrada.")


# ───────────────────────────
# Rotas
# ───────────────────────────
@app.get("/")
async def root():
    return {"status": "ok", "message": "API is running"}


@app.get("/health")
def health():
    # def síncrono: o teste do MinIO é bloqueante e roda no threadpool
    minio_ok = verificar_conexao_minio()
    return {
        "status": "healthy" if minio_ok else "degraded",
        "minio": minio_ok,
        "websocket_connections": websocket_manager.get_connection_count(),
    }


app.include_router(monitoring_router_public)  # Métricas públicas (sem auth)
app.include_router(monitoring_router)

app.include_router(auth_controller.router)
app.include_router(usuarios_router)
app.include_router(seguranca_router)
app.include_router(api_cadastros)
app.include_router(checkout_router)
app.include_router(webhook_router)
app.include_router(pedidos_router)
app.include_router(notificacoes_router)
app.include_router(notificacoes_ws_router)
app.include_router(configuracoes_router)
app.include_router(auditoria_router)
app.include_router(storage_router)
app.include_router(automacao_router)
app.include_router(analytics_router)
app.include_router(acessos_router)
app.include_router(acessos_public_router)
app.include_router(backup_router)
app.include_router(relatorios_router)


# ───────────────────────────
# OpenAPI: Segurança Bearer/JWT no Swagger
# ───────────────────────────
PUBLIC_PREFIXES = ("/api/checkout", "/api/pagamentos/webhook", "/api/cadastros/public", "/api/monitoring/metrics")
PUBLIC_PATHS = {"/", "/health", "/api/auth/token", "/api/acessos/solicitacoes"}


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
        servers=app.servers,
    )

    components = openapi_schema.get("components", {})
    security_schemes = components.get("securitySchemes", {})
    security_schemes.update({
        "bearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    })
    components["securitySchemes"] = security_schemes
    openapi_schema["components"] = components
    openapi_schema["security"] = [{"bearerAuth": []}]

    # Remove exigência de token dos endpoints públicos
    for path, methods in openapi_schema.get("paths", {}).items():
        if path in PUBLIC_PATHS or path.startswith(PUBLIC_PREFIXES):
            for method_obj in methods.values():
                method_obj["security"] = []

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi
