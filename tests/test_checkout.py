from datetime import timedelta
from decimal import Decimal

from pixcheckout.api.cadastros.models.model_cupom import CupomModel
from pixcheckout.api.cadastros.models.model_link_pagamento import LinkPagamentoModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.notificacoes.models.model_notificacao import NotificacaoModel
from pixcheckout.api.pagamentos.services.gateway_pix import MOCK_PAYMENT_CODE, MOCK_QR_CODE
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.utils.database_utils import now_trimmed

CPF_VALIDO = "52998224725"


def _payload(produto_id: int, **extra) -> dict:
    payload = {
        "product_id": produto_id,
        "name": "João Souza",
        "email": "joao@example.com",
        "document": CPF_VALIDO,
        "phone": "(11) 98888-7777",
    }
    payload.update(extra)
    return payload


def _cupom(db, **campos) -> CupomModel:
    dados = {"code": "DESC10", "type": "percentage", "value": Decimal("10"), "current_uses": 0, "active": True}
    dados.update(campos)
    cupom = CupomModel(**dados)
    db.add(cupom)
    db.commit()
    db.refresh(cupom)
    return cupom


def test_criar_pedido_com_cobranca_simulada(client, db, produto, canal_email):
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id))
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["status"] == "pending"
    assert Decimal(body["amount"]) == Decimal("100.00")
    assert Decimal(body["discount_amount"]) == Decimal("0")
    assert body["qr_code"] == MOCK_QR_CODE
    assert body["payment_code"] == MOCK_PAYMENT_CODE
    assert body["expires_at"]

    db.expire_all()
    pedido = db.get(PedidoModel, body["order_id"])
    assert pedido.customer.email == "joao@example.com"
    assert pedido.customer.phone == "11988887777"

    notificacoes = db.query(NotificacaoModel).all()
    assert [n.title for n in notificacoes] == ["Novo Pedido"]
    assert notificacoes[0].type == "payment"

    assert [e["to"] for e in canal_email.enviados] == ["joao@example.com"]


def test_pedido_reaproveita_cliente_pelo_email(client, db, produto):
    client.post("/api/checkout/pedidos", json=_payload(produto.id))
    client.post("/api/checkout/pedidos", json=_payload(produto.id, name="João S.", email="JOAO@example.com"))

    db.expire_all()
    pedidos = db.query(PedidoModel).all()
    assert len(pedidos) == 2
    assert pedidos[0].customer_id == pedidos[1].customer_id
    assert pedidos[1].customer.name == "João S."


def test_cupom_percentual_aplica_desconto_e_conta_uso(client, db, produto):
    cupom = _cupom(db)
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, coupon_code="desc10"))
    assert resp.status_code == 201, resp.text
    assert Decimal(resp.json()["amount"]) == Decimal("90.00")
    assert Decimal(resp.json()["discount_amount"]) == Decimal("10.00")

    db.expire_all()
    assert db.get(CupomModel, cupom.id).current_uses == 1
    assert db.get(PedidoModel, resp.json()["order_id"]).coupon_id == cupom.id


def test_cupom_invalido_nao_cria_pedido(client, db, produto):
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, coupon_code="NAOEXISTE"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cupom inválido"
    db.expire_all()
    assert db.query(PedidoModel).count() == 0


def test_pedido_suspeito_e_recusado(client, produto):
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, email="x@tempmail.com"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email temporário detectado"

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, tentativas=5))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Múltiplas tentativas de pagamento"


def test_rate_limit_por_ip(client, produto, proxy_confiavel):
    headers = {"x-forwarded-for": "200.1.1.1"}
    invalido = _payload(produto.id, document="123")
    for _ in range(5):
        assert client.post("/api/checkout/pedidos", json=invalido, headers=headers).status_code == 400

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id), headers=headers)
    assert resp.status_code == 429

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id), headers={"x-forwarded-for": "200.1.1.2"})
    assert resp.status_code == 201


def test_x_forwarded_for_sem_proxy_confiavel_nao_reinicia_limite(client, produto):
    invalido = _payload(produto.id, document="123")
    for i in range(5):
        resp = client.post("/api/checkout/pedidos", json=invalido, headers={"x-forwarded-for": f"10.0.0.{i}"})
        assert resp.status_code == 400

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id), headers={"x-forwarded-for": "10.0.0.99"})
    assert resp.status_code == 429


def test_produto_inativo_nao_e_vendido(client, db, produto):
    produto.active = False
    db.commit()

    assert client.get(f"/api/checkout/produtos/{produto.id}").status_code == 404
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Produto não encontrado"


def test_telefone_invalido_gera_422(client, produto):
    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, phone="123"))
    assert resp.status_code == 422
    assert resp.json()["message"] == "Erro de validação nos dados fornecidos"


def test_link_de_pagamento_e_consumido(client, db, produto):
    link = LinkPagamentoModel(
        product_id=produto.id, url_token="tok-1", status="active", expires_at=now_trimmed() + timedelta(hours=1)
    )
    db.add(link)
    db.commit()

    resp = client.get("/api/checkout/link/tok-1")
    assert resp.status_code == 200
    assert resp.json()["product"]["id"] == produto.id

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, payment_link_token="tok-1"))
    assert resp.status_code == 201, resp.text

    resp = client.get("/api/checkout/link/tok-1")
    assert resp.status_code == 410
    assert resp.json()["detail"] == "Link de pagamento já utilizado"


def test_link_de_outro_produto_e_recusado(client, db, produto):
    outro = ProdutoModel(name="Outro", price=Decimal("50.00"), type="service")
    db.add(outro)
    db.commit()
    db.add(LinkPagamentoModel(
        product_id=outro.id, url_token="tok-2", status="active", expires_at=now_trimmed() + timedelta(hours=1)
    ))
    db.commit()

    resp = client.post("/api/checkout/pedidos", json=_payload(produto.id, payment_link_token="tok-2"))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Link de pagamento não corresponde ao produto"


def test_link_vencido(client, db, produto):
    db.add(LinkPagamentoModel(
        product_id=produto.id, url_token="tok-3", status="active", expires_at=now_trimmed() - timedelta(minutes=1)
    ))
    db.commit()

    resp = client.get("/api/checkout/link/tok-3")
    assert resp.status_code == 410
    assert resp.json()["detail"] == "Link de pagamento expirado"


def test_status_expira_pedido_vencido_na_leitura(client, criar_pedido):
    pedido = criar_pedido(expires_at=now_trimmed() - timedelta(minutes=5))
    resp = client.get(f"/api/checkout/pedidos/{pedido.id}/status")
    assert resp.status_code == 200
    assert resp.json()["status"] == "expired"


def test_status_de_pedido_inexistente(client):
    resp = client.get("/api/checkout/pedidos/999/status")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Pedido não encontrado"


def test_simulacao_bloqueada_fora_de_desenvolvimento(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.post(f"/api/checkout/pedidos/{pedido.id}/simular")
    assert resp.status_code == 403


def test_simulacao_repetida_nao_altera_pagamento(client, db, criar_pedido, canal_email, monkeypatch):
    from pixcheckout.config import settings

    monkeypatch.setattr(settings, "IS_DEVELOPMENT", True)
    pedido = criar_pedido()

    primeira = client.post(f"/api/checkout/pedidos/{pedido.id}/simular")
    assert primeira.status_code == 200, primeira.text
    assert primeira.json()["status"] == "paid"
    db.expire_all()
    pago = db.get(PedidoModel, pedido.id)
    transaction_id, paid_at = pago.transaction_id, pago.paid_at

    segunda = client.post(f"/api/checkout/pedidos/{pedido.id}/simular")
    assert segunda.status_code == 200
    assert segunda.json()["status"] == "paid"

    db.expire_all()
    pago = db.get(PedidoModel, pedido.id)
    assert pago.transaction_id == transaction_id
    assert pago.paid_at == paid_at
    notificacoes = db.query(NotificacaoModel).filter(NotificacaoModel.title == "Pagamento Confirmado").all()
    assert len(notificacoes) == 1


def test_comprovante_de_pedido_pago(client, criar_pedido):
    pedido = criar_pedido(status="paid", paid_at=now_trimmed(), transaction_id="tx_9")
    resp = client.get(f"/api/checkout/pedidos/{pedido.id}/comprovante")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/pdf"
    assert f"comprovante-{pedido.id}.pdf" in resp.headers["content-disposition"]
    assert resp.content.startswith(b"%PDF")


def test_comprovante_exige_pedido_pago(client, criar_pedido):
    pedido = criar_pedido()
    resp = client.get(f"/api/checkout/pedidos/{pedido.id}/comprovante")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Comprovante disponível apenas para pedidos pagos"

    assert client.get("/api/checkout/pedidos/999/comprovante").status_code == 404
