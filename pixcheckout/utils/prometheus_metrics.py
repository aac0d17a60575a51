"""
Métricas Prometheus do checkout: HTTP (via middleware), logs e eventos de negócio.
"""
import re
from time import perf_counter
from typing import Callable

from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

UUID_NA_ROTA = re.compile(r"/[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")
NUMERO_NA_ROTA = re.compile(r"/\d+")

# ---------------- HTTP ----------------
http_requests_total = Counter(
    "pixcheckout_http_requests_total",
    "Requisições HTTP atendidas",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "pixcheckout_http_request_duration_seconds",
    "Tempo de resposta das requisições HTTP",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

http_errors_total = Counter(
    "pixcheckout_http_errors_total",
    "Respostas HTTP com status >= 400",
    ["method", "endpoint", "status_code"],
)

requisicoes_em_andamento = Gauge(
    "pixcheckout_requisicoes_em_andamento",
    "Requisições sendo processadas no momento",
)

# ---------------- LOGS ----------------
log_messages_total = Counter(
    "pixcheckout_log_messages_total",
    "Registros de log emitidos por nível",
    ["level"],
)

# ---------------- NEGÓCIO ----------------
pedidos_criados_total = Counter(
    "pixcheckout_pedidos_criados_total",
    "Pedidos criados no checkout",
)

pagamentos_confirmados_total = Counter(
    "pixcheckout_pagamentos_confirmados_total",
    "Pagamentos confirmados pelo gateway",
)

webhooks_rejeitados_total = Counter(
    "pixcheckout_webhooks_rejeitados_total",
    "Webhooks do gateway rejeitados",
    ["motivo"],
)

pedidos_expirados_total = Counter(
    "pixcheckout_pedidos_expirados_total",
    "Pedidos expirados sem pagamento",
)


def normalizar_rota(path: str) -> str:
    """/api/pedidos/admin/123 -> /api/pedidos/admin/{id}; evita cardinalidade alta nos labels."""
    return NUMERO_NA_ROTA.sub("/{id}", UUID_NA_ROTA.sub("/{uuid}", path))


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        # /api/monitoring fica fora para o scrape não contar a si mesmo
        if request.url.path.startswith("/api/monitoring"):
            return await call_next(request)

        method = request.method
        rota = normalizar_rota(request.url.path)
        inicio = perf_counter()
        status_code = 500
        requisicoes_em_andamento.inc()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            requisicoes_em_andamento.dec()
            http_requests_total.labels(method=method, endpoint=rota, status_code=status_code).inc()
            http_request_duration_seconds.labels(method=method, endpoint=rota).observe(perf_counter() - inicio)
            if status_code >= 400:
                http_errors_total.labels(method=method, endpoint=rota, status_code=status_code).inc()


def get_metrics() -> bytes:
    return generate_latest()


def record_log(level: str):
    log_messages_total.labels(level=level).inc()
