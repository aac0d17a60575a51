from datetime import timedelta

from pixcheckout.utils.database_utils import now_trimmed


def _periodo():
    agora = now_trimmed()
    return (agora - timedelta(days=1)).isoformat(), (agora + timedelta(minutes=1)).isoformat()


def _calcular(client, headers, nome="vendas"):
    inicio, fim = _periodo()
    return client.post(
        "/api/analytics/admin/metricas/calcular",
        json={"name": nome, "period": "daily", "start_date": inicio, "end_date": fim},
        headers=headers,
    )


def test_eventos(client, admin, admin_headers):
    resp = client.post(
        "/api/analytics/admin/eventos",
        json={"event_type": "page_view", "data": {"path": "/checkout"}, "session_id": "s1"},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    assert resp.json()["user_id"] == admin.id

    client.post("/api/analytics/admin/eventos", json={"event_type": "click"}, headers=admin_headers)
    eventos = client.get("/api/analytics/admin/eventos", params={"event_type": "page_view"}, headers=admin_headers)
    assert [e["data"] for e in eventos.json()] == [{"path": "/checkout"}]


def test_metricas_consolidam_pedidos_do_periodo(client, criar_pedido, admin_headers):
    criar_pedido(status="paid", amount="100.00")
    criar_pedido(status="pending", amount="50.50")

    resp = _calcular(client, admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"totalOrders": 2, "totalAmount": 150.5, "paidOrders": 1, "conversionRate": 50.0}

    historico = client.get("/api/analytics/admin/metricas/vendas", headers=admin_headers).json()
    assert len(historico) == 1
    assert historico[0]["value"] == 150.5
    assert historico[0]["metadata"]["paidOrders"] == 1


def test_metricas_sem_pedidos(client, admin_headers):
    assert _calcular(client, admin_headers).json() == {
        "totalOrders": 0, "totalAmount": 0.0, "paidOrders": 0, "conversionRate": 0.0,
    }


def test_periodo_invertido_e_recusado(client, admin_headers):
    inicio, fim = _periodo()
    resp = client.post(
        "/api/analytics/admin/metricas/calcular",
        json={"name": "x", "period": "daily", "start_date": fim, "end_date": inicio},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_previsao_por_media_movel(client, criar_pedido, admin_headers):
    resp = client.post("/api/analytics/admin/previsoes", json={"target_metric": "vendas"}, headers=admin_headers)
    assert resp.status_code == 400

    criar_pedido(amount="100.00")
    _calcular(client, admin_headers)
    criar_pedido(amount="200.00")
    _calcular(client, admin_headers)

    resp = client.post("/api/analytics/admin/previsoes", json={"target_metric": "vendas"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"value": 200.0, "confidence": 0.95}


def test_dashboard_com_widgets(client, criar_pedido, admin_headers):
    criar_pedido(amount="10.00")
    _calcular(client, admin_headers)

    resp = client.post(
        "/api/analytics/admin/dashboards",
        json={"name": "Vendas", "widgets": [{"type": "line", "metric": "vendas"}, {"type": "text"}]},
        headers=admin_headers,
    )
    assert resp.status_code == 201
    dashboard_id = resp.json()["id"]

    dados = client.get(f"/api/analytics/admin/dashboards/{dashboard_id}", headers=admin_headers).json()
    assert dados["widgets"][0]["limit"] == 30
    assert [m["value"] for m in dados["widgets"][0]["data"]] == [10.0]
    assert dados["widgets"][1]["data"] == []

    assert client.get("/api/analytics/admin/dashboards/999", headers=admin_headers).status_code == 404
