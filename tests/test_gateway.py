import asyncio
import json
from decimal import Decimal

import httpx
import pytest
from fastapi import HTTPException

from pixcheckout.api.pagamentos.services.gateway_pix import MOCK_PAYMENT_CODE, MOCK_QR_CODE, GatewayPix
from pixcheckout.integrations.primepag.client import PrimePagClient, valor_em_centavos
from pixcheckout.utils.retry import retry_operation


def _gateway(handler, **kwargs) -> GatewayPix:
    gateway = GatewayPix(token="tok", api_url="https://primepag.test/v1", usar_mock=False, retry_delay=0, **kwargs)
    gateway._criar_cliente = lambda: PrimePagClient(
        token="tok", base_url="https://primepag.test/v1", transport=httpx.MockTransport(handler)
    )
    return gateway


def _cobrar(gateway: GatewayPix):
    return asyncio.run(
        gateway.gerar_cobranca(
            pedido_id=7,
            valor=Decimal("99.90"),
            descricao="Curso",
            cliente={"name": "Maria"},
            expiracao_minutos=30,
        )
    )


def test_valor_em_centavos():
    assert valor_em_centavos(Decimal("99.90")) == 9990
    assert valor_em_centavos(Decimal("0.005")) == 1


def test_retry_repete_ate_conseguir():
    chamadas = []

    async def operacao():
        chamadas.append(1)
        if len(chamadas) < 3:
            raise RuntimeError("falhou")
        return "ok"

    assert asyncio.run(retry_operation(operacao, max_retries=3, delay=0)) == "ok"
    assert len(chamadas) == 3


def test_retry_relanca_o_ultimo_erro():
    async def operacao():
        raise RuntimeError("sempre falha")

    with pytest.raises(RuntimeError, match="sempre falha"):
        asyncio.run(retry_operation(operacao, max_retries=2, delay=0))

    with pytest.raises(ValueError):
        asyncio.run(retry_operation(operacao, max_retries=0))


def test_gateway_sem_token_usa_cobranca_simulada():
    cobranca = _cobrar(GatewayPix(token="", usar_mock=None))
    assert cobranca.mock
    assert cobranca.qr_code == MOCK_QR_CODE
    assert cobranca.payment_code == MOCK_PAYMENT_CODE


def test_gateway_envia_payload_em_centavos():
    recebidos = []

    def handler(request: httpx.Request):
        recebidos.append(json.loads(request.content))
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"id": "ch_1", "status": "pending", "pix": {"qr_code": "QR", "code": "PIX"}})

    cobranca = _cobrar(_gateway(handler))
    assert (cobranca.qr_code, cobranca.payment_code, cobranca.transaction_id) == ("QR", "PIX", "ch_1")
    assert not cobranca.mock
    assert recebidos[0]["amount"] == 9990
    assert recebidos[0]["external_id"] == "7"
    assert recebidos[0]["expiration"] == 1800


def test_gateway_repete_e_converte_falha_em_502():
    chamadas = []

    def handler(request):
        chamadas.append(1)
        return httpx.Response(500, json={"error": "indisponivel"})

    with pytest.raises(HTTPException) as exc:
        _cobrar(_gateway(handler, max_retries=2))
    assert exc.value.status_code == 502
    assert len(chamadas) == 2


def test_gateway_sem_dados_pix_e_502():
    def handler(request):
        return httpx.Response(200, json={"id": "ch_2", "status": "pending", "pix": {}})

    with pytest.raises(HTTPException) as exc:
        _cobrar(_gateway(handler, max_retries=1))
    assert exc.value.status_code == 502


def test_cliente_consulta_cobranca():
    caminhos = []

    def handler(request: httpx.Request):
        caminhos.append((request.method, request.url.path))
        return httpx.Response(200, json={"id": "ch_5", "status": "paid", "pix": {"qr_code": "QR", "code": "PIX"}})

    async def consultar():
        async with PrimePagClient(
            token="tok", base_url="https://primepag.test/v1/", transport=httpx.MockTransport(handler)
        ) as cliente:
            return await cliente.get_charge("ch_5")

    cobranca = asyncio.run(consultar())
    assert caminhos == [("GET", "/v1/charges/ch_5")]
    assert (cobranca.id, cobranca.status, cobranca.qr_code, cobranca.code) == ("ch_5", "paid", "QR", "PIX")


def test_cliente_consulta_cobranca_inexistente():
    def handler(request):
        return httpx.Response(404, json={"error": "not found"})

    async def consultar():
        async with PrimePagClient(
            token="tok", base_url="https://primepag.test/v1", transport=httpx.MockTransport(handler)
        ) as cliente:
            return await cliente.get_charge("ch_x")

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(consultar())
