import asyncio
import json

import httpx

from pixcheckout.api.automacao.schemas.schema_automacao import WorkflowCreate
from pixcheckout.api.automacao.services.acoes import ExecutorAcoes
from pixcheckout.api.automacao.services.condicoes import achatar, avaliar_condicao, avaliar_condicoes, obter_valor
from pixcheckout.api.automacao.services.service_automacao import AutomacaoService
from pixcheckout.api.notificacoes.models.model_notificacao import NotificacaoModel

CONTEXTO = {"order": {"id": 10, "amount": 150.0, "status": "paid", "tags": ["vip"]}, "customer": {"name": "Ana"}}


def test_obter_valor_por_caminho():
    assert obter_valor(CONTEXTO, "order.amount") == 150.0
    assert obter_valor(CONTEXTO, "order.tags.0") == "vip"
    assert obter_valor(CONTEXTO, "order.inexistente") is None
    assert obter_valor(CONTEXTO, "customer.name.x") is None


def test_operadores():
    assert avaliar_condicao({"campo": "order.status", "operador": "equals", "valor": "paid"}, CONTEXTO)
    assert avaliar_condicao({"campo": "order.status", "operador": "not_equals", "valor": "failed"}, CONTEXTO)
    assert avaliar_condicao({"campo": "order.amount", "operador": "greater_than", "valor": "100"}, CONTEXTO)
    assert not avaliar_condicao({"campo": "order.amount", "operador": "less_than", "valor": 100}, CONTEXTO)
    assert avaliar_condicao({"campo": "customer.name", "operador": "contains", "valor": "An"}, CONTEXTO)
    assert avaliar_condicao({"campo": "order.status", "operador": "in", "valor": ["paid", "expired"]}, CONTEXTO)
    assert not avaliar_condicao({"campo": "order.status", "operador": "regex", "valor": "."}, CONTEXTO)
    assert not avaliar_condicao({"campo": "customer.name", "operador": "greater_than", "valor": 1}, CONTEXTO)


def test_todas_as_condicoes_precisam_passar():
    assert avaliar_condicoes([], CONTEXTO)
    assert not avaliar_condicoes(
        [
            {"campo": "order.status", "operador": "equals", "valor": "paid"},
            {"campo": "order.amount", "operador": "less_than", "valor": 10},
        ],
        CONTEXTO,
    )


def test_achatar_contexto():
    assert achatar({"order": {"id": 1, "x": {"y": 2}}, "event": "e"}) == {"order.id": 1, "order.x.y": 2, "event": "e"}


def test_acao_desconhecida(db):
    resultado = asyncio.run(ExecutorAcoes(db).executar({"type": "sms"}, {}))
    assert resultado == {"type": "sms", "success": False, "error": "Ação desconhecida: sms"}


def test_regras_avaliadas_por_prioridade(client, db, admin_headers):
    for nome, prioridade, minimo in (("Baixa", 1, 10), ("Alta", 5, 100), ("Nunca", 9, 1000)):
        resp = client.post(
            "/api/automacao/admin/regras",
            json={
                "name": nome,
                "priority": prioridade,
                "conditions": [{"campo": "order.amount", "operador": "greater_than", "valor": minimo}],
                "actions": [{"type": "notification", "config": {"title": f"{nome} {{order.id}}", "content": "ok"}}],
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201, resp.text

    resp = client.post("/api/automacao/admin/regras/avaliar", json={"contexto": CONTEXTO}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert [e["status"] for e in resp.json()] == ["success", "success"]

    db.expire_all()
    titulos = [n.title for n in db.query(NotificacaoModel).order_by(NotificacaoModel.id).all()]
    assert titulos == ["Alta 10", "Baixa 10"]

    execucoes = client.get("/api/automacao/admin/execucoes", headers=admin_headers).json()
    assert len(execucoes) == 2


def test_workflow_executado_manualmente(client, admin_headers):
    workflow = client.post(
        "/api/automacao/admin/workflows",
        json={
            "name": "Aviso",
            "trigger_type": "manual",
            "actions": [{"type": "notification", "config": {"title": "Manual"}}, {"type": "email", "config": {}}],
        },
        headers=admin_headers,
    ).json()

    resp = client.post(
        f"/api/automacao/admin/workflows/{workflow['id']}/executar", json={"contexto": {}}, headers=admin_headers
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["workflow_id"] == workflow["id"]
    assert body["status"] == "failed"
    assert body["result"][1] == {"type": "email", "success": False, "error": "Destinatário não informado"}

    resp = client.put(
        f"/api/automacao/admin/workflows/{workflow['id']}", json={"active": False}, headers=admin_headers
    )
    assert resp.json()["active"] is False
    assert client.delete(f"/api/automacao/admin/workflows/{workflow['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/automacao/admin/workflows/{workflow['id']}", headers=admin_headers).status_code == 404


def test_acao_webhook_e_evento_disparado(db):
    recebidos = []

    def handler(request: httpx.Request):
        recebidos.append((str(request.url), json.loads(request.content)))
        return httpx.Response(204)

    service = AutomacaoService(db, http_transport=httpx.MockTransport(handler))
    service.criar_workflow(
        WorkflowCreate(
            name="Integração",
            trigger_type="order_paid",
            trigger_config={"conditions": [{"campo": "order.amount", "operador": "greater_than", "valor": 50}]},
            actions=[{"type": "webhook", "config": {"url": "https://erp.test/hook"}}],
        )
    )

    execucoes = asyncio.run(service.disparar_evento("order_paid", CONTEXTO))
    assert [e.status for e in execucoes] == ["success"]
    assert recebidos[0][0] == "https://erp.test/hook"
    assert recebidos[0][1]["event"] == "order_paid"
    assert recebidos[0][1]["data"]["order"]["id"] == 10

    assert asyncio.run(service.disparar_evento("order_expired", CONTEXTO)) == []
