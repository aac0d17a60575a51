from datetime import timedelta
from decimal import Decimal
from typing import List, get_type_hints

import pytest

from pixcheckout.api.auditoria.models.model_auditoria import AuditoriaModel
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.notificacoes.models.model_notificacao import NotificacaoModel
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel
from pixcheckout.api.pedidos.repositories.repo_pedido import PedidoRepository
from pixcheckout.api.pedidos.services.service_pedido import PedidosService, transicao_permitida
from pixcheckout.core.background_jobs import expirar_pedidos_pendentes
from pixcheckout.utils.database_utils import now_trimmed


@pytest.mark.parametrize(
    "atual,novo,permitido",
    [
        ("pending", "paid", True),
        ("pending", "processing", True),
        ("processing", "expired", True),
        ("expired", "paid", True),
        ("expired", "pending", False),
        ("paid", "failed", False),
        ("failed", "paid", False),
        ("cancelled", "pending", False),
    ],
)
def test_ciclo_de_vida_do_pedido(atual, novo, permitido):
    assert transicao_permitida(atual, novo) is permitido


def test_listagem_com_filtros(client, db, criar_pedido, admin_headers):
    criar_pedido(status="paid", amount="100.00")
    criar_pedido(status="pending", amount="30.00")

    resp = client.get("/api/pedidos/admin", params={"status": "paid"}, headers=admin_headers)
    assert resp.status_code == 200
    assert [p["status"] for p in resp.json()] == ["paid"]

    resp = client.get("/api/pedidos/admin", params={"valor_max": "50"}, headers=admin_headers)
    assert [Decimal(p["amount"]) for p in resp.json()] == [Decimal("30.00")]

    resp = client.get("/api/pedidos/admin", params={"busca": "maria"}, headers=admin_headers)
    assert len(resp.json()) == 2

    resp = client.get("/api/pedidos/admin", params={"tipo_produto": "service"}, headers=admin_headers)
    assert resp.json() == []


def test_alteracao_manual_de_status_e_auditada(client, db, criar_pedido, admin, admin_headers):
    pedido = criar_pedido()
    resp = client.put(
        f"/api/pedidos/admin/{pedido.id}/status",
        json={"status": "paid", "motivo": "comprovante enviado"},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "paid"
    assert resp.json()["paid_at"] is not None

    db.expire_all()
    auditoria = db.query(AuditoriaModel).filter_by(table_name="orders").one()
    assert auditoria.action == "UPDATE"
    assert auditoria.old_data == {"status": "pending"}
    assert auditoria.user_id == admin.id

    notificacao = db.query(NotificacaoModel).one()
    assert notificacao.title == "Status do Pedido Atualizado"

    detalhe = client.get(f"/api/pedidos/admin/{pedido.id}", headers=admin_headers).json()
    assert [n["content"] for n in detalhe["notes"]] == ["Status alterado para paid: comprovante enviado"]

    atualizacoes = client.get(f"/api/pedidos/admin/{pedido.id}/atualizacoes", headers=admin_headers).json()
    assert atualizacoes[0]["data"]["source"] == "admin"


def test_transicao_invalida_retorna_409(client, criar_pedido, admin_headers):
    pedido = criar_pedido(status="paid")
    resp = client.put(f"/api/pedidos/admin/{pedido.id}/status", json={"status": "pending"}, headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Transição de status inválida: paid -> pending"


def test_notas_do_pedido(client, criar_pedido, admin, admin_headers):
    pedido = criar_pedido()
    resp = client.post(f"/api/pedidos/admin/{pedido.id}/notas", json={"content": "Cliente ligou"}, headers=admin_headers)
    assert resp.status_code == 201
    assert resp.json()["author_id"] == admin.id

    resp = client.post("/api/pedidos/admin/999/notas", json={"content": "x"}, headers=admin_headers)
    assert resp.status_code == 404


def test_expiracao_em_lote(client, db, criar_pedido, admin_headers):
    vencido = criar_pedido(expires_at=now_trimmed() - timedelta(minutes=1))
    vigente = criar_pedido(expires_at=now_trimmed() + timedelta(minutes=30))
    pago = criar_pedido(status="paid", expires_at=now_trimmed() - timedelta(minutes=1))

    resp = client.post("/api/pedidos/admin/expirar", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"expirados": 1}

    db.expire_all()
    assert db.get(PedidoModel, vencido.id).status == "expired"
    assert db.get(PedidoModel, vigente.id).status == "pending"
    assert db.get(PedidoModel, pago.id).status == "paid"
    assert [n.title for n in db.query(NotificacaoModel).all()] == ["Pedido Expirado"]

    assert client.post("/api/pedidos/admin/expirar", headers=admin_headers).json() == {"expirados": 0}


def test_job_de_expiracao_usa_sessao_propria(db, criar_pedido):
    pedido = criar_pedido(expires_at=now_trimmed() - timedelta(minutes=1))
    assert expirar_pedidos_pendentes() == 1
    db.expire_all()
    assert db.get(PedidoModel, pedido.id).status == "expired"


def test_aplicar_mesmo_status_nao_gera_atualizacao(db, criar_pedido):
    pedido = criar_pedido()
    assert PedidosService(db).aplicar_status(pedido, "pending") is False


def test_produto_com_pedidos_e_apenas_desativado(client, db, produto, criar_pedido, admin_headers):
    criar_pedido()
    resp = client.delete(f"/api/cadastros/admin/produtos/{produto.id}", headers=admin_headers)
    assert resp.status_code == 204

    db.expire_all()
    assert db.get(ProdutoModel, produto.id).active is False


def test_repositorio_anota_listas_com_typing(db, criar_pedido):
    dicas = get_type_hints(PedidoRepository.pendentes_vencidos)
    assert dicas["return"] == List[PedidoModel]

    vencido = criar_pedido(expires_at=now_trimmed() - timedelta(minutes=1))
    criar_pedido(expires_at=now_trimmed() + timedelta(minutes=30))
    assert [p.id for p in PedidoRepository(db).pendentes_vencidos(now_trimmed())] == [vencido.id]
