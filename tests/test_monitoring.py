from pathlib import Path

from pixcheckout.api.monitoring import router as monitoring_router
from pixcheckout.utils.logger import logger
from pixcheckout.utils.prometheus_metrics import CONTENT_TYPE_LATEST


def test_metricas_sao_publicas(client):
    resp = client.get("/api/monitoring/metrics")

    assert resp.status_code == 200
    assert resp.headers["content-type"] == CONTENT_TYPE_LATEST
    assert "# TYPE" in resp.text


def test_logs_exigem_autenticacao(client):
    assert client.get("/api/monitoring/logs").status_code == 401


def test_logs_filtrados(client, admin_headers):
    logger.warning("[Monitoring] linha de teste para filtro")

    resp = client.get(
        "/api/monitoring/logs",
        params={"level": "warning", "search": "linha de teste para filtro", "lines": 1000},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    dados = resp.json()
    assert dados["filters"] == {"level": "warning", "search": "linha de teste para filtro"}
    assert dados["total"] >= 1
    ultimo = dados["logs"][-1]
    assert ultimo["level"] == "WARNING"
    assert ultimo["logger"] == "pixcheckout"
    assert ultimo["message"] == "[Monitoring] linha de teste para filtro"


def test_logs_sem_arquivo(client, admin_headers, monkeypatch, tmp_path):
    monkeypatch.setattr(monitoring_router, "LOG_FILE", Path(tmp_path) / "inexistente.log")

    resp = client.get("/api/monitoring/logs", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Arquivo de log não encontrado"


def test_health_reporta_minio_e_websockets(client, minio_fake, monkeypatch):
    from pixcheckout.utils import minio_client

    monkeypatch.setattr(minio_client, "client", minio_fake)
    resp = client.get("/health")

    assert resp.status_code == 200
    corpo = resp.json()
    assert corpo["status"] == "healthy"
    assert corpo["minio"] is True
    assert isinstance(corpo["websocket_connections"], int)


def test_health_degradado_sem_minio(client, minio_fake, monkeypatch):
    from pixcheckout.utils import minio_client

    def _fora_do_ar():
        raise ConnectionError("minio fora do ar")

    minio_fake.list_buckets = _fora_do_ar
    monkeypatch.setattr(minio_client, "client", minio_fake)
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "degraded"
    assert resp.json()["minio"] is False
