from datetime import timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from pixcheckout.api.cadastros.models.model_cupom import CupomModel
from pixcheckout.api.cadastros.schemas.schema_cupom import CupomUpdate
from pixcheckout.api.cadastros.services.service_cupom import CuponsService, calcular_desconto
from pixcheckout.utils.database_utils import now_trimmed


def _cupom(db, **campos) -> CupomModel:
    dados = {"code": "PROMO", "type": "fixed", "value": Decimal("15"), "current_uses": 0, "active": True}
    dados.update(campos)
    cupom = CupomModel(**dados)
    db.add(cupom)
    db.commit()
    return cupom


def _erro(db, codigo="PROMO", valor="100", produto_id=None) -> str:
    with pytest.raises(HTTPException) as exc:
        CuponsService(db).validar_cupom(codigo, valor, produto_id)
    assert exc.value.status_code == 400
    return exc.value.detail


def test_calculo_de_desconto():
    assert calcular_desconto("percentage", 10, 100) == Decimal("10.00")
    assert calcular_desconto("percentage", 33, "99.99") == Decimal("33.00")
    assert calcular_desconto("fixed", 15, 100) == Decimal("15.00")
    assert calcular_desconto("fixed", 150, 100) == Decimal("100.00")


def test_cupom_valido(db):
    cupom = _cupom(db)
    resultado = CuponsService(db).validar_cupom("promo", Decimal("80"))
    assert resultado == {"cupom_id": cupom.id, "desconto": Decimal("15.00")}


def test_cupom_inexistente_ou_inativo(db):
    assert _erro(db) == "Cupom inválido"
    _cupom(db, active=False)
    assert _erro(db) == "Cupom inválido"


def test_cupom_fora_da_vigencia(db):
    _cupom(db, code="FUTURO", starts_at=now_trimmed() + timedelta(days=1))
    _cupom(db, code="VENCIDO", expires_at=now_trimmed() - timedelta(days=1))
    assert _erro(db, "FUTURO") == "Cupom ainda não está válido"
    assert _erro(db, "VENCIDO") == "Cupom expirado"


def test_cupom_esgotado(db):
    _cupom(db, max_uses=2, current_uses=2)
    assert _erro(db) == "Cupom esgotado"


def test_cupom_com_valor_minimo(db):
    _cupom(db, min_purchase_amount=Decimal("50"))
    assert _erro(db, valor="49.99") == "Valor mínimo para este cupom: R$ 50.00"


def test_cupom_restrito_a_produto(db, produto):
    _cupom(db, product_id=produto.id)
    assert _erro(db, produto_id=produto.id + 1) == "Cupom não válido para este produto"
    assert CuponsService(db).validar_cupom("PROMO", 100, produto.id)["desconto"] == Decimal("15.00")


def test_registrar_uso_incrementa_contador(db):
    cupom = _cupom(db)
    CuponsService(db).registrar_uso(cupom.id)
    db.commit()
    db.expire_all()
    assert db.get(CupomModel, cupom.id).current_uses == 1


def test_validar_cupom_pela_api_publica(client, db):
    _cupom(db, type="percentage", value=Decimal("20"))
    resp = client.post("/api/checkout/cupom/validar", json={"code": "PROMO", "amount": "50.00"})
    assert resp.status_code == 200, resp.text
    assert Decimal(resp.json()["desconto"]) == Decimal("10.00")


def test_admin_cria_cupom_com_codigo_normalizado(client, admin_headers):
    resp = client.post(
        "/api/cadastros/admin/cupons",
        json={"code": " black ", "type": "percentage", "value": "25"},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["code"] == "BLACK"

    resp = client.post(
        "/api/cadastros/admin/cupons",
        json={"code": "BLACK", "type": "fixed", "value": "5"},
        headers=admin_headers,
    )
    assert resp.status_code == 400


def test_percentual_acima_de_100_e_recusado(client, admin_headers):
    resp = client.post(
        "/api/cadastros/admin/cupons",
        json={"code": "ERRADO", "type": "percentage", "value": "150"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


def test_atualizacao_respeita_limite_do_percentual(client, db, admin_headers):
    cupom = _cupom(db, code="DEZ", type="percentage", value=Decimal("10"))
    resp = client.put(f"/api/cadastros/admin/cupons/{cupom.id}", json={"value": "150"}, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Percentual de desconto não pode ser maior que 100"

    fixo = _cupom(db, code="FIXO", type="fixed", value=Decimal("150"))
    resp = client.put(f"/api/cadastros/admin/cupons/{fixo.id}", json={"type": "percentage"}, headers=admin_headers)
    assert resp.status_code == 400

    db.expire_all()
    assert db.get(CupomModel, cupom.id).value == Decimal("10")
    assert db.get(CupomModel, fixo.id).type == "fixed"


def test_atualizacao_valida_vigencia(db):
    cupom = _cupom(db, code="VIGENCIA", starts_at=now_trimmed())
    with pytest.raises(HTTPException) as exc:
        CuponsService(db).update(cupom.id, CupomUpdate(expires_at=now_trimmed() - timedelta(days=1)))
    assert exc.value.status_code == 400
