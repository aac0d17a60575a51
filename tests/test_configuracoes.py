from pixcheckout.api.configuracoes.defaults import DEFAULT_SETTINGS
from pixcheckout.api.configuracoes.services.service_configuracao import ConfiguracoesService, _merge

URL = "/api/configuracoes/admin"


def test_merge_preenche_chaves_ausentes():
    padrao = {"a": 1, "b": {"c": 2, "d": 3}}

    assert _merge(padrao, {"b": {"c": 9}, "e": 5}) == {"a": 1, "b": {"c": 9, "d": 3}, "e": 5}
    assert padrao == {"a": 1, "b": {"c": 2, "d": 3}}


def test_sem_linha_retorna_padroes(client, admin_headers):
    resp = client.get(URL, headers=admin_headers)

    assert resp.status_code == 200
    assert resp.json() == DEFAULT_SETTINGS


def test_atualizar_mescla_secoes(client, db, admin_headers):
    resp = client.put(
        URL,
        json={
            "checkout_settings": {"auto_expire_time": 45, "pix_key": "pix@example.com", "pix_key_type": "email"},
            "whatsapp_settings": {"enabled": True, "templates": {"order_confirmation": "Pedido #{order_id} ok"}},
        },
        headers=admin_headers,
    )

    assert resp.status_code == 200
    dados = resp.json()
    assert dados["checkout_settings"]["auto_expire_time"] == 45
    assert dados["whatsapp_settings"]["enabled"] is True
    assert dados["whatsapp_settings"]["templates"]["order_confirmation"] == "Pedido #{order_id} ok"
    # templates não enviados continuam com o padrão
    assert dados["whatsapp_settings"]["templates"]["payment_received"] == (
        DEFAULT_SETTINGS["whatsapp_settings"]["templates"]["payment_received"]
    )
    assert dados["notification_settings"] == DEFAULT_SETTINGS["notification_settings"]

    db.expire_all()
    assert ConfiguracoesService(db).secao("checkout_settings")["pix_key"] == "pix@example.com"


def test_atualizacao_e_auditada(client, admin, admin_headers):
    client.put(URL, json={"checkout_settings": {"auto_expire_time": 60}}, headers=admin_headers)

    resp = client.get("/api/auditoria/admin", params={"tabela": "settings"}, headers=admin_headers)

    assert resp.status_code == 200
    registros = resp.json()
    assert len(registros) == 1
    assert registros[0]["action"] == "UPDATE"
    assert registros[0]["user_id"] == admin.id
    assert registros[0]["old_data"]["checkout_settings"]["auto_expire_time"] == 30
    assert registros[0]["new_data"]["checkout_settings"]["auto_expire_time"] == 60


def test_validacao_de_configuracoes(client, admin_headers):
    resp = client.put(URL, json={"checkout_settings": {"auto_expire_time": 0}}, headers=admin_headers)
    assert resp.status_code == 422

    resp = client.put(URL, json={"checkout_settings": {"pix_key_type": "boleto"}}, headers=admin_headers)
    assert resp.status_code == 422


def test_operador_apenas_le(client, operador_headers):
    assert client.get(URL, headers=operador_headers).status_code == 200

    resp = client.put(URL, json={"checkout_settings": {"auto_expire_time": 10}}, headers=operador_headers)
    assert resp.status_code == 403

    assert client.get("/api/auditoria/admin", headers=operador_headers).status_code == 403


def test_configuracoes_exigem_autenticacao(client):
    assert client.get(URL).status_code == 401
