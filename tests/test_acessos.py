from datetime import timedelta

from pixcheckout.api.acessos.models.model_acesso import SolicitacaoAcessoModel
from pixcheckout.api.storage.models.model_arquivo import ArquivoModel
from pixcheckout.utils.database_utils import now_trimmed


def _arquivo(db) -> ArquivoModel:
    arquivo = ArquivoModel(bucket="files", path="product/ebook.pdf", name="ebook.pdf", size=10, url="http://x/ebook.pdf")
    db.add(arquivo)
    db.commit()
    return arquivo


def _solicitar(client, pedido, cliente):
    return client.post("/api/acessos/solicitacoes", json={"order_id": pedido.id, "customer_id": cliente.id})


def test_fluxo_de_aprovacao_e_registro(client, db, criar_pedido, cliente, admin_headers, canal_email, proxy_confiavel):
    pedido = criar_pedido(status="paid")
    arquivo = _arquivo(db)

    resp = _solicitar(client, pedido, cliente)
    assert resp.status_code == 201, resp.text
    solicitacao = resp.json()
    assert solicitacao["status"] == "pending"

    resp = client.post(
        f"/api/acessos/solicitacoes/{solicitacao['id']}/registros",
        json={"file_id": arquivo.id, "action": "download"},
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Acesso não aprovado"

    resp = client.post(f"/api/acessos/admin/solicitacoes/{solicitacao['id']}/aprovar", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "approved"
    assert resp.json()["expires_at"] is not None
    assert [e["to"] for e in canal_email.enviados] == ["maria@example.com"]

    resp = client.post(
        f"/api/acessos/solicitacoes/{solicitacao['id']}/registros",
        json={"file_id": arquivo.id, "action": "download"},
        headers={"x-forwarded-for": "177.0.0.1"},
    )
    assert resp.status_code == 201
    assert resp.json()["ip_address"] == "177.0.0.1"

    resp = client.post(
        f"/api/acessos/solicitacoes/{solicitacao['id']}/registros", json={"file_id": 999, "action": "view"}
    )
    assert resp.status_code == 404

    logs = client.get("/api/acessos/admin/logs", headers=admin_headers).json()
    assert [log["action"] for log in logs] == ["download"]


def test_solicitacao_duplicada_ou_de_outro_cliente(client, criar_pedido, cliente):
    pedido = criar_pedido()
    assert _solicitar(client, pedido, cliente).status_code == 201

    resp = _solicitar(client, pedido, cliente)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Já existe uma solicitação pendente"

    resp = client.post("/api/acessos/solicitacoes", json={"order_id": pedido.id, "customer_id": cliente.id + 1})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Pedido não encontrado para este cliente"


def test_rejeicao_guarda_motivo(client, criar_pedido, cliente, admin_headers):
    solicitacao = _solicitar(client, criar_pedido(), cliente).json()

    resp = client.post(
        f"/api/acessos/admin/solicitacoes/{solicitacao['id']}/rejeitar",
        json={"motivo": "Pagamento não identificado"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"
    assert resp.json()["metadata"] == {"reason": "Pagamento não identificado"}

    resp = client.post(f"/api/acessos/admin/solicitacoes/{solicitacao['id']}/aprovar", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.json()["detail"] == "Solicitação já foi processada"

    pendentes = client.get("/api/acessos/admin/solicitacoes", params={"status": "pending"}, headers=admin_headers)
    assert pendentes.json() == []


def test_acesso_expirado(client, db, criar_pedido, cliente):
    pedido = criar_pedido(status="paid")
    arquivo = _arquivo(db)
    solicitacao = SolicitacaoAcessoModel(
        order_id=pedido.id,
        customer_id=cliente.id,
        status="approved",
        approved_at=now_trimmed() - timedelta(days=31),
        expires_at=now_trimmed() - timedelta(days=1),
        meta={},
    )
    db.add(solicitacao)
    db.commit()

    resp = client.post(
        f"/api/acessos/solicitacoes/{solicitacao.id}/registros", json={"file_id": arquivo.id, "action": "view"}
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Acesso expirado"
