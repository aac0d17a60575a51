import pytest
from fastapi import Depends
from sqlalchemy.orm import Session

from pixcheckout.api.storage.router.router_storage import get_storage_service
from pixcheckout.api.storage.services.service_storage import StorageService
from pixcheckout.database.db_connection import get_db
from pixcheckout.main import app


@pytest.fixture
def storage_fake(minio_fake):
    def _storage(db: Session = Depends(get_db)) -> StorageService:
        return StorageService(db, client=minio_fake)

    app.dependency_overrides[get_storage_service] = _storage
    return minio_fake


def _upload(client, headers, nome="contrato.pdf", conteudo=b"%PDF-1.4 teste", **form):
    return client.post(
        "/api/storage/admin/arquivos",
        files={"file": (nome, conteudo, "application/pdf")},
        data=form,
        headers=headers,
    )


def test_montar_caminho_usa_tipo_relacionado_e_extensao():
    caminho = StorageService.montar_caminho("Produto Digital", "Manual.PDF")
    prefixo, nome = caminho.split("/")
    assert prefixo == "produto-digital"
    assert nome.endswith(".pdf")
    assert StorageService.montar_caminho(None, "sem_extensao", "image/png").startswith("geral/")


def test_upload_registra_arquivo_e_envia_ao_bucket(client, storage_fake, admin, admin_headers):
    resp = _upload(client, admin_headers, bucket="Documentos", related_type="order", related_id="7", tags="nf, 2026")
    assert resp.status_code == 201, resp.text
    arquivo = resp.json()
    assert arquivo["bucket"] == "documentos"
    assert arquivo["path"].startswith("order/")
    assert arquivo["size"] == len(b"%PDF-1.4 teste")
    assert arquivo["tags"] == ["nf", "2026"]
    assert arquivo["uploaded_by"] == admin.id

    assert "documentos" in storage_fake.buckets
    assert storage_fake.objetos[("documentos", arquivo["path"])] == b"%PDF-1.4 teste"


def test_listagem_filtros_e_metadata(client, storage_fake, admin_headers):
    primeiro = _upload(client, admin_headers, related_type="order", related_id="1", tags="nf").json()
    _upload(client, admin_headers, related_type="product", related_id="2")

    resp = client.get("/api/storage/admin/arquivos", params={"related_type": "order"}, headers=admin_headers)
    assert [a["id"] for a in resp.json()] == [primeiro["id"]]

    resp = client.get("/api/storage/admin/arquivos", params={"tags": "nf"}, headers=admin_headers)
    assert [a["id"] for a in resp.json()] == [primeiro["id"]]

    resp = client.put(
        f"/api/storage/admin/arquivos/{primeiro['id']}/metadata",
        json={"metadata": {"origem": "painel"}, "tags": ["nf", "pago"]},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["metadata"] == {"origem": "painel"}
    assert resp.json()["tags"] == ["nf", "pago"]

    resp = client.get(f"/api/storage/admin/arquivos/{primeiro['id']}/url", headers=admin_headers)
    assert resp.json()["url"].endswith(primeiro["path"])


def test_remocao_apaga_objeto_e_registro(client, storage_fake, admin_headers):
    arquivo = _upload(client, admin_headers).json()
    assert client.delete(f"/api/storage/admin/arquivos/{arquivo['id']}", headers=admin_headers).status_code == 204
    assert ("files", arquivo["path"]) not in storage_fake.objetos
    assert client.get(f"/api/storage/admin/arquivos/{arquivo['id']}/url", headers=admin_headers).status_code == 404


def test_imagem_do_produto(client, storage_fake, produto, admin_headers):
    resp = client.post(
        f"/api/cadastros/admin/produtos/{produto.id}/imagem",
        files={"file": ("capa.png", b"\x89PNG", "image/png")},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["image_url"].endswith(".png")

    resp = client.post(
        f"/api/cadastros/admin/produtos/{produto.id}/imagem",
        files={"file": ("nota.txt", b"texto", "text/plain")},
        headers=admin_headers,
    )
    assert resp.status_code == 400
