"""
Router para monitoramento: métricas Prometheus e consulta aos logs da aplicação.
"""
import re
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from pixcheckout.core.admin_dependencies import get_current_user
from pixcheckout.utils.logger import LOG_FILE, logger
from pixcheckout.utils.prometheus_metrics import CONTENT_TYPE_LATEST, get_metrics

router = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring - Monitoramento"],
    dependencies=[Depends(get_current_user)],
)

# Router público para métricas (sem autenticação)
router_public = APIRouter(
    prefix="/api/monitoring",
    tags=["Monitoring - Monitoramento"],
)

LINHA_LOG = re.compile(r"\[(.*?)\] \[(.*?)\] (.*?): (.*)")


@router_public.get("/metrics")
async def metrics():
    """Endpoint de métricas Prometheus: /api/monitoring/metrics"""
    return StreamingResponse(iter([get_metrics()]), media_type=CONTENT_TYPE_LATEST)


@router.get("/logs")
async def get_logs(
    lines: int = Query(100, ge=1, le=1000, description="Número de linhas para exibir"),
    level: Optional[str] = Query(None, description="Filtrar por nível (INFO, ERROR, WARNING, DEBUG)"),
    search: Optional[str] = Query(None, description="Buscar texto nas linhas"),
):
    """Retorna as últimas linhas do log em JSON."""
    if not LOG_FILE.exists():
        raise HTTPException(status.HTTP_404_NOT_FOUND, "Arquivo de log não encontrado")

    try:
        with open(LOG_FILE, "r", encoding="utf-8") as f:
            all_lines = f.readlines()
    except OSError as e:
        logger.error(f"[Monitoring] Erro ao ler logs: {e}")
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, f"Erro ao ler logs: {e}")

    log_lines = all_lines[-lines:]
    if level:
        log_lines = [line for line in log_lines if f"[{level.upper()}]" in line.upper()]
    if search:
        log_lines = [line for line in log_lines if search.lower() in line.lower()]

    parsed = []
    for line in log_lines:
        line = line.strip()
        if not line:
            continue
        match = LINHA_LOG.match(line)
        if match:
            timestamp, log_level, logger_name, message = match.groups()
            parsed.append({"timestamp": timestamp, "level": log_level, "logger": logger_name, "message": message})
        else:
            parsed.append({"raw": line})

    return {
        "total": len(parsed),
        "lines": lines,
        "filters": {"level": level, "search": search},
        "logs": parsed,
    }
