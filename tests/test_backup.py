import json

import pytest

from pixcheckout.api.backup.models.model_backup import BackupLogModel
from pixcheckout.api.backup.services.service_backup import BackupService
from pixcheckout.api.cadastros.models.model_produto import ProdutoModel
from pixcheckout.api.pedidos.models.model_pedido import PedidoModel


def _gerar(client, headers, tabelas=None):
    corpo = {"tables": tabelas} if tabelas else {}
    return client.post("/api/backup/admin/gerar", json=corpo, headers=headers)


def _restaurar(client, headers, conteudo: bytes, nome="backup.json"):
    return client.post(
        "/api/backup/admin/restaurar",
        files={"file": (nome, conteudo, "application/json")},
        headers=headers,
    )


def test_gerar_backup_em_json(client, criar_pedido, admin_headers):
    criar_pedido()
    resp = _gerar(client, admin_headers, ["products", "orders"])
    assert resp.status_code == 200, resp.text
    assert resp.headers["content-type"].startswith("application/json")
    assert 'filename="backup-' in resp.headers["content-disposition"]

    backup = resp.json()
    assert backup["version"] == "1.0"
    assert backup["timestamp"]
    assert set(backup["data"]) == {"products", "orders"}
    assert backup["data"]["products"][0]["name"] == "Curso de Python"
    assert backup["data"]["orders"][0]["amount"] == "100.00"

    logs = client.get("/api/backup/admin/logs", headers=admin_headers).json()
    assert [(log["type"], log["status"]) for log in logs] == [("backup", "success")]


def test_restaurar_substitui_os_dados(client, db, produto, criar_pedido, admin_headers):
    pedido = criar_pedido()
    conteudo = _gerar(client, admin_headers).content

    produto.name = "Nome alterado"
    db.add(ProdutoModel(name="Produto novo", price=1, type="service"))
    db.commit()

    resp = _restaurar(client, admin_headers, conteudo)
    assert resp.status_code == 200, resp.text
    assert resp.json()["success"] is True
    assert resp.json()["tables"] == ["products", "customers", "coupons", "settings", "files", "orders"]

    db.expire_all()
    assert [p.name for p in db.query(ProdutoModel).all()] == ["Curso de Python"]
    assert db.get(PedidoModel, pedido.id).status == "pending"

    contagem = client.get("/api/backup/admin/contagem", headers=admin_headers).json()
    assert contagem["products"] == 1
    assert contagem["orders"] == 1
    assert contagem["customers"] == 1


@pytest.mark.parametrize(
    "conteudo,mensagem",
    [
        (b"nao e json", "Arquivo de backup inválido"),
        (json.dumps({"version": "1.0", "data": {}}).encode(), "Arquivo de backup inválido"),
        (json.dumps({"version": "2.0", "timestamp": "x", "data": {}}).encode(), "Versão de backup não suportada: 2.0"),
        (
            json.dumps({"version": "1.0", "timestamp": "x", "data": {"users": []}}).encode(),
            "Tabela desconhecida no backup: users",
        ),
    ],
)
def test_validacao_do_arquivo(conteudo, mensagem):
    with pytest.raises(ValueError, match=mensagem):
        BackupService.validar(conteudo)


def test_restauracao_invalida_e_registrada(client, db, produto, admin_headers):
    resp = _restaurar(client, admin_headers, b"{}")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Arquivo de backup inválido"

    db.expire_all()
    log = db.query(BackupLogModel).one()
    assert (log.type, log.status) == ("restore", "failed")
    assert db.query(ProdutoModel).count() == 1


def test_backup_exige_admin(client, operador_headers):
    assert _gerar(client, operador_headers).status_code == 403
