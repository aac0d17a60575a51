import json

from pixcheckout.api.notificacoes.models.model_notificacao import NotificacaoModel
from pixcheckout.api.pagamentos.services.service_webhook import assinar, mapear_status, verificar_assinatura
from pixcheckout.api.pedidos.models.model_pedido import AtualizacaoPedidoModel, PedidoModel

SEGREDO = "segredo-webhook"
URL = "/api/pagamentos/webhook/primepag"


def _enviar(client, payload, assinatura=None):
    corpo = json.dumps(payload).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    headers["x-primepag-signature"] = assinatura if assinatura is not None else assinar(corpo, SEGREDO)
    return client.post(URL, content=corpo, headers=headers)


def test_mapeamento_de_status():
    assert mapear_status("PAID") == "paid"
    assert mapear_status("pending") == "processing"
    assert mapear_status("processing") == "processing"
    assert mapear_status("refused") == "failed"
    assert mapear_status("failed") == "failed"
    assert mapear_status("qualquer") == "expired"


def test_verificacao_de_assinatura():
    corpo = b'{"a": 1}'
    assert verificar_assinatura(corpo, assinar(corpo, "s"), "s")
    assert verificar_assinatura(corpo, assinar(corpo, "s").upper(), "s")
    assert not verificar_assinatura(corpo, assinar(corpo, "outro"), "s")
    assert not verificar_assinatura(corpo, assinar(corpo, "s"), "")


def test_pagamento_confirmado(client, db, criar_pedido, canal_email):
    pedido = criar_pedido()
    resp = _enviar(client, {
        "id": "tx_1",
        "external_id": str(pedido.id),
        "status": "paid",
        "paid_at": "2026-10-19T12:00:00Z",
        "amount": 100.0,
    })
    assert resp.status_code == 200, resp.text
    assert resp.json() == {
        "success": True, "order_id": pedido.id, "status": "paid", "duplicado": False, "ignorado": False,
    }

    db.expire_all()
    atualizado = db.get(PedidoModel, pedido.id)
    assert atualizado.status == "paid"
    assert atualizado.transaction_id == "tx_1"
    assert atualizado.paid_at is not None

    atualizacoes = db.query(AtualizacaoPedidoModel).filter_by(order_id=pedido.id).all()
    assert [(a.status, a.data["previous_status"]) for a in atualizacoes] == [("paid", "pending")]

    titulos = [n.title for n in db.query(NotificacaoModel).all()]
    assert titulos == ["Pagamento Confirmado"]
    assert [e["to"] for e in canal_email.enviados] == ["maria@example.com"]


def test_reenvio_do_mesmo_status_e_idempotente(client, db, criar_pedido):
    pedido = criar_pedido()
    payload = {"id": "tx_2", "external_id": str(pedido.id), "status": "paid"}
    assert _enviar(client, payload).json()["duplicado"] is False

    resp = _enviar(client, payload)
    assert resp.status_code == 200
    assert resp.json()["duplicado"] is True

    db.expire_all()
    assert db.query(AtualizacaoPedidoModel).filter_by(order_id=pedido.id).count() == 1
    assert db.query(NotificacaoModel).count() == 1


def test_transicao_nao_permitida_e_ignorada(client, db, criar_pedido):
    pedido = criar_pedido(status="paid")
    resp = _enviar(client, {"id": "tx_3", "external_id": str(pedido.id), "status": "refused"})
    assert resp.status_code == 200
    assert resp.json()["ignorado"] is True
    assert resp.json()["status"] == "paid"

    db.expire_all()
    assert db.get(PedidoModel, pedido.id).status == "paid"


def test_pedido_expirado_ainda_pode_ser_pago(client, db, criar_pedido):
    pedido = criar_pedido(status="expired")
    resp = _enviar(client, {"id": "tx_4", "external_id": str(pedido.id), "status": "paid"})
    assert resp.json()["status"] == "paid"
    db.expire_all()
    assert db.get(PedidoModel, pedido.id).status == "paid"


def test_assinatura_ausente_ou_invalida(client, criar_pedido):
    pedido = criar_pedido()
    payload = {"id": "tx_5", "external_id": str(pedido.id), "status": "paid"}

    resp = _enviar(client, payload, assinatura="")
    assert resp.status_code == 400

    resp = _enviar(client, payload, assinatura="00" * 32)
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Assinatura inválida"


def test_payload_incompleto_ou_pedido_inexistente(client):
    resp = _enviar(client, {"id": "tx_6", "status": "paid"})
    assert resp.status_code == 400

    corpo = b"nao e json"
    resp = client.post(URL, content=corpo, headers={"x-primepag-signature": assinar(corpo, SEGREDO)})
    assert resp.status_code == 400

    resp = _enviar(client, {"id": "tx_7", "external_id": "999", "status": "paid"})
    assert resp.status_code == 404


def test_ids_numericos_sao_aceitos(client, db, criar_pedido, canal_email):
    pedido = criar_pedido()
    resp = _enviar(client, {"id": 987654, "external_id": pedido.id, "status": "paid", "amount": 100.0})
    assert resp.status_code == 200, resp.text
    assert resp.json()["order_id"] == pedido.id
    assert resp.json()["status"] == "paid"

    db.expire_all()
    atualizado = db.get(PedidoModel, pedido.id)
    assert atualizado.status == "paid"
    assert atualizado.transaction_id == "987654"
