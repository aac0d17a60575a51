import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from pixcheckout.api.notificacoes.core import websocket_manager as realtime
from pixcheckout.api.notificacoes.models.model_notificacao import EmailLogModel, NotificacaoModel, WhatsappLogModel
from pixcheckout.api.notificacoes.services.service_email import EmailService
from pixcheckout.api.notificacoes.services.service_notificacao import NotificacoesService
from pixcheckout.api.notificacoes.services.service_whatsapp import WhatsappService, renderizar_mensagem
from pixcheckout.core.security import create_access_token

WHATSAPP_ATIVO = {
    "whatsapp_settings": {
        "enabled": True,
        "api_url": "https://whats.test",
        "api_key": "k",
        "instance_id": "i",
    }
}


def test_renderizacao_substitui_todas_as_ocorrencias():
    texto = renderizar_mensagem("{nome}, {nome}! Total {valor} {faltando}", {"nome": "Ana", "valor": 10})
    assert texto == "Ana, Ana! Total 10 {faltando}"


def test_notificacoes_in_app(client, admin, operador, admin_headers, operador_headers):
    client.post("/api/notificacoes/admin", json={"title": "Geral", "content": "para todos"}, headers=admin_headers)
    client.post(
        "/api/notificacoes/admin",
        json={"title": "Privada", "content": "só do operador", "user_id": operador.id},
        headers=admin_headers,
    )

    titulos_admin = [n["title"] for n in client.get("/api/notificacoes/admin", headers=admin_headers).json()]
    titulos_operador = [n["title"] for n in client.get("/api/notificacoes/admin", headers=operador_headers).json()]
    assert titulos_admin == ["Geral"]
    assert set(titulos_operador) == {"Geral", "Privada"}

    assert client.get("/api/notificacoes/admin/nao-lidas/total", headers=operador_headers).json() == {"total": 2}
    assert client.put("/api/notificacoes/admin/lidas/todas", headers=operador_headers).json() == {"atualizadas": 2}
    assert client.get("/api/notificacoes/admin/nao-lidas/total", headers=operador_headers).json() == {"total": 0}


def test_marcar_lida_e_remover(client, admin_headers):
    criada = client.post(
        "/api/notificacoes/admin", json={"type": "payment", "title": "T", "content": "C"}, headers=admin_headers
    ).json()
    resp = client.put(f"/api/notificacoes/admin/{criada['id']}/lida", headers=admin_headers)
    assert resp.json()["read"] is True

    assert client.delete(f"/api/notificacoes/admin/{criada['id']}", headers=admin_headers).status_code == 204
    assert client.put(f"/api/notificacoes/admin/{criada['id']}/lida", headers=admin_headers).status_code == 404


def test_email_sem_smtp_registra_falha(client, db, admin_headers):
    resp = client.post(
        "/api/notificacoes/admin/email/enviar",
        json={"to": "a@example.com", "template": "order_confirmation", "data": {"orderId": 1}},
        headers=admin_headers,
    )
    assert resp.json() == {"success": False, "error": "SMTP não configurado"}

    db.expire_all()
    log = db.query(EmailLogModel).one()
    assert (log.status, log.error) == ("failed", "SMTP não configurado")


def test_email_enviado_e_template_invalido(client, canal_email, admin_headers):
    resp = client.post(
        "/api/notificacoes/admin/email/enviar",
        json={"to": "a@example.com", "template": "payment_received", "data": {"orderId": 1, "amount": 10}},
        headers=admin_headers,
    )
    assert resp.json() == {"success": True, "error": None}
    assert canal_email.enviados[0]["to"] == "a@example.com"

    resp = client.post(
        "/api/notificacoes/admin/email/enviar",
        json={"to": "a@example.com", "template": "nao_existe"},
        headers=admin_headers,
    )
    assert resp.json() == {"success": False, "error": "Template inválido"}

    logs = client.get("/api/notificacoes/admin/email/logs", params={"status": "sent"}, headers=admin_headers).json()
    assert [log["template"] for log in logs] == ["payment_received"]


def test_email_respeita_flags_de_notificacao(db, admin):
    service = EmailService(db)
    assert service.template_habilitado("order_confirmation")
    assert not service.template_habilitado("daily_summary")


def test_whatsapp_desabilitado_por_padrao(client, db, admin_headers):
    resp = client.post(
        "/api/notificacoes/admin/whatsapp/enviar",
        json={"to": "11999990000", "template": "order_confirmation", "data": {}},
        headers=admin_headers,
    )
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "Notificações por WhatsApp estão desabilitadas"

    db.expire_all()
    assert db.query(WhatsappLogModel).one().status == "failed"


def test_whatsapp_envia_template_renderizado(client, canal_whatsapp, admin_headers):
    assert client.put("/api/configuracoes/admin", json=WHATSAPP_ATIVO, headers=admin_headers).status_code == 200

    resp = client.post(
        "/api/notificacoes/admin/whatsapp/enviar",
        json={
            "to": "11999990000",
            "template": "order_confirmation",
            "data": {"customer_name": "Ana", "order_id": 5, "amount": "10.00"},
        },
        headers=admin_headers,
    )
    assert resp.json() == {"success": True, "message_id": "fake-1", "error": None}
    assert canal_whatsapp.enviados[0]["message"] == "Olá Ana, seu pedido #5 foi confirmado! Valor: R$ 10.00"

    resp = client.post(
        "/api/notificacoes/admin/whatsapp/enviar",
        json={"to": "11999990000", "template": "inexistente"},
        headers=admin_headers,
    )
    assert resp.json()["error"] == "Template inválido"


def test_reenvio_de_falhas_do_whatsapp(client, db, canal_whatsapp, admin_headers):
    client.put("/api/configuracoes/admin", json=WHATSAPP_ATIVO, headers=admin_headers)
    canal_whatsapp.sucesso = False
    client.post(
        "/api/notificacoes/admin/whatsapp/enviar",
        json={"to": "11999990000", "template": "payment_received", "data": {"customer_name": "Ana"}},
        headers=admin_headers,
    )

    canal_whatsapp.sucesso = True
    resp = client.post("/api/notificacoes/admin/whatsapp/reenviar-falhas", headers=admin_headers)
    assert resp.json() == {"total": 1, "success": 1, "failed": 0}

    logs = client.get("/api/notificacoes/admin/whatsapp/logs", params={"status": "sent"}, headers=admin_headers).json()
    assert len(logs) == 1


def test_whatsapp_notifica_pedido_do_cliente(db, criar_pedido, canal_whatsapp, admin):
    pedido = criar_pedido()
    service = WhatsappService(db)
    service._config = lambda: {**WHATSAPP_ATIVO["whatsapp_settings"], "templates": {"payment_received": "Pago {order_id}"}}
    resultado = asyncio.run(service.notificar_pedido(pedido, "payment_received"))
    assert resultado.success
    assert canal_whatsapp.enviados[0] == {
        "to": "11987654321", "title": "payment_received", "message": f"Pago {pedido.id}", "meta": None,
    }


def test_websocket_exige_token_valido(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/api/notificacoes/ws?token=invalido") as ws:
            ws.receive_text()


def test_websocket_responde_ping(client, admin):
    token = create_access_token({"sub": str(admin.id)})
    with client.websocket_connect(f"/api/notificacoes/ws?token={token}") as ws:
        ws.send_text("ping")
        assert ws.receive_text() == "pong"


def test_tempo_real_so_publica_apos_commit(db, monkeypatch):
    publicadas = []
    monkeypatch.setattr(realtime.websocket_manager, "publicar", lambda message, user_id=None: publicadas.append(message))

    NotificacoesService(db).criar(tipo="system", titulo="Backup concluído", conteudo="ok")
    assert publicadas == []
    db.commit()
    assert [m["event"] for m in publicadas] == ["notification"]
    assert publicadas[0]["data"]["title"] == "Backup concluído"

    NotificacoesService(db).criar(tipo="system", titulo="Descartada", conteudo="rollback")
    db.rollback()
    db.commit()
    assert len(publicadas) == 1


def test_tempo_real_guarda_tasks_e_registra_falhas(monkeypatch):
    erros = []
    monkeypatch.setattr(realtime.logger, "error", lambda msg: erros.append(msg))

    async def cenario():
        manager = realtime.ConnectionManager()
        manager._loop = asyncio.get_running_loop()
        manager.websocket_to_user[object()] = "1"
        recebidas = []

        async def broadcast(message):
            if message.get("falhar"):
                raise RuntimeError("socket fechado")
            recebidas.append(message)

        manager.broadcast = broadcast
        manager.publicar({"event": "ok"})
        manager.publicar({"event": "erro", "falhar": True})
        assert len(manager._tasks) == 2

        await asyncio.gather(*list(manager._tasks), return_exceptions=True)
        await asyncio.sleep(0)
        return manager, recebidas

    manager, recebidas = asyncio.run(cenario())
    assert manager._tasks == set()
    assert recebidas == [{"event": "ok"}]
    assert any("socket fechado" in e for e in erros)
