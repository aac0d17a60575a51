from starlette.requests import Request

from pixcheckout.api.seguranca.fraude import detectar_fraude
from pixcheckout.api.seguranca.rate_limit import RateLimiter
from pixcheckout.api.seguranca.models.model_seguranca import IpBloqueadoModel, TentativaLoginModel
from pixcheckout.core import admin_dependencies
from pixcheckout.core.admin_dependencies import get_client_ip


class Relogio:
    def __init__(self):
        self.agora = 1000.0

    def __call__(self):
        return self.agora


def test_rate_limiter_recusa_acima_do_limite():
    relogio = Relogio()
    limiter = RateLimiter(clock=relogio)
    resultados = [limiter.check("1.1.1.1", 3, 60) for _ in range(4)]
    assert resultados == [True, True, True, False]


def test_rate_limiter_abre_nova_janela_contando_a_chamada():
    relogio = Relogio()
    limiter = RateLimiter(clock=relogio)
    assert limiter.check("ip", 2, 60)
    assert limiter.check("ip", 2, 60)
    assert not limiter.check("ip", 2, 60)

    relogio.agora += 61
    assert limiter.check("ip", 2, 60)
    assert limiter.check("ip", 2, 60)
    assert not limiter.check("ip", 2, 60)


def test_rate_limiter_chaves_independentes_e_reset():
    limiter = RateLimiter(clock=Relogio())
    assert limiter.check("a", 1, 60)
    assert not limiter.check("a", 1, 60)
    assert limiter.check("b", 1, 60)

    limiter.reset("a")
    assert limiter.check("a", 1, 60)


def test_rate_limiter_descarta_janelas_vencidas():
    relogio = Relogio()
    limiter = RateLimiter(clock=relogio)
    for i in range(1000):
        limiter.check(f"10.0.{i // 256}.{i % 256}", 5, 60)
    assert len(limiter) == 1000

    relogio.agora += 10_000
    assert limiter.check("novo", 5, 60)
    assert len(limiter) == 1


def test_rate_limiter_mantem_janelas_ativas_na_limpeza():
    relogio = Relogio()
    limiter = RateLimiter(clock=relogio, intervalo_limpeza=10)
    limiter.check("curta", 5, 5)
    limiter.check("longa", 1, 300)

    relogio.agora += 30
    limiter.check("outra", 5, 60)
    assert len(limiter) == 2
    assert not limiter.check("longa", 1, 300)


def test_fraude_multiplas_tentativas_tem_prioridade():
    resultado = detectar_fraude("x@tempmail.com", "123", tentativas=4)
    assert resultado.suspeito
    assert resultado.motivo == "Múltiplas tentativas de pagamento"


def test_fraude_email_temporario():
    resultado = detectar_fraude("alguem@throwaway.com", "52998224725")
    assert resultado.suspeito
    assert resultado.motivo == "Email temporário detectado"


def test_fraude_documento_invalido():
    resultado = detectar_fraude("alguem@example.com", "12345678900")
    assert resultado.suspeito
    assert resultado.motivo == "Documento inválido"


def test_fraude_pedido_legitimo():
    resultado = detectar_fraude("alguem@example.com", "52998224725", tentativas=3)
    assert not resultado.suspeito
    assert resultado.motivo is None


def test_bloqueio_de_ip_impede_login(client, admin, admin_headers, proxy_confiavel):
    resp = client.post(
        "/api/seguranca/admin/ips-bloqueados",
        json={"ip": "10.0.0.9", "motivo": "abuso"},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    bloqueio_id = resp.json()["id"]

    resp = client.post(
        "/api/auth/token",
        json={"username": "admin", "password": "senha123"},
        headers={"x-forwarded-for": "10.0.0.9"},
    )
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Acesso bloqueado para este IP"

    resp = client.delete(f"/api/seguranca/admin/ips-bloqueados/{bloqueio_id}", headers=admin_headers)
    assert resp.status_code == 204

    resp = client.post(
        "/api/auth/token",
        json={"username": "admin", "password": "senha123"},
        headers={"x-forwarded-for": "10.0.0.9"},
    )
    assert resp.status_code == 200


def test_rotas_de_seguranca_exigem_admin(client, operador_headers):
    resp = client.get("/api/seguranca/admin/ips-bloqueados", headers=operador_headers)
    assert resp.status_code == 403


def test_tentativas_de_login_sao_registradas(client, db, admin, admin_headers):
    client.post("/api/auth/token", json={"username": "admin", "password": "errada"})
    client.post("/api/auth/token", json={"username": "admin", "password": "senha123"})

    db.expire_all()
    tentativas = db.query(TentativaLoginModel).order_by(TentativaLoginModel.id).all()
    assert [t.sucesso for t in tentativas] == [False, True]

    resp = client.get("/api/seguranca/admin/tentativas-login", params={"sucesso": False}, headers=admin_headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def _request(peer: str, forwarded: str = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": (peer, 5000)})


def test_ip_do_cliente_ignora_cabecalho_de_origem_nao_confiavel(monkeypatch):
    monkeypatch.setattr(admin_dependencies, "TRUSTED_PROXIES", {"10.0.0.1"})

    assert get_client_ip(_request("200.1.1.1", "1.2.3.4")) == "200.1.1.1"
    assert get_client_ip(_request("10.0.0.1")) == "10.0.0.1"
    # cliente forja o início da cadeia; vale o IP anotado pelo proxy
    assert get_client_ip(_request("10.0.0.1", "1.2.3.4, 200.1.1.1")) == "200.1.1.1"
    assert get_client_ip(_request("10.0.0.1", "200.1.1.1, 10.0.0.1")) == "200.1.1.1"


def test_ip_bloqueado_nao_escapa_com_cabecalho_forjado(client, db, admin):
    db.add(IpBloqueadoModel(ip="testclient", motivo="abuso"))
    db.commit()

    resp = client.post(
        "/api/auth/token",
        json={"username": "admin", "password": "senha123"},
        headers={"x-forwarded-for": "8.8.8.8"},
    )
    assert resp.status_code == 403
