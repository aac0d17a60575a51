from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from pixcheckout.api.cadastros.models.model_cupom import CupomModel
from pixcheckout.api.cadastros.repositories.repo_cupom import CupomRepository
from pixcheckout.api.cadastros.schemas.schema_cupom import CupomCreate, CupomUpdate
from pixcheckout.utils.database_utils import now_trimmed, as_aware
from pixcheckout.utils.logger import logger

CENTAVOS = Decimal("0.01")


def calcular_desconto(tipo: str, valor_cupom, valor) -> Decimal:
    """
    percentage: valor * pct / 100; fixed: min(valor_cupom, valor).
    O desconto nunca ultrapassa o valor do pedido e é arredondado para centavos.
    """
    valor = Decimal(str(valor))
    valor_cupom = Decimal(str(valor_cupom))

    if tipo == "percentage":
        desconto = valor * valor_cupom / Decimal("100")
    else:
        desconto = min(valor_cupom, valor)

    desconto = min(desconto, valor)
    return desconto.quantize(CENTAVOS, rounding=ROUND_HALF_UP)


class CuponsService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = CupomRepository(db)

    # ---------------- CUPOM ----------------
    def create(self, data: CupomCreate) -> CupomModel:
        if self.repo.get_by_code(data.code):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Já existe um cupom com este código")
        cupom = self.repo.create(CupomModel(**data.model_dump(), current_uses=0))
        logger.info(f"[Cupons] Cupom criado id={cupom.id} code={cupom.code}")
        return cupom

    def update(self, cupom_id: int, data: CupomUpdate) -> CupomModel:
        cupom = self.get(cupom_id)
        valores = data.model_dump(exclude_unset=True)
        tipo = valores.get("type", cupom.type)
        valor = valores.get("value", cupom.value)
        if tipo == "percentage" and valor is not None and Decimal(str(valor)) > 100:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Percentual de desconto não pode ser maior que 100")
        inicio = valores.get("starts_at", cupom.starts_at)
        fim = valores.get("expires_at", cupom.expires_at)
        if inicio and fim and as_aware(fim) <= as_aware(inicio):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "expires_at deve ser posterior a starts_at")

        for key, value in valores.items():
            setattr(cupom, key, value)
        return self.repo.update(cupom)

    def toggle(self, cupom_id: int) -> CupomModel:
        cupom = self.get(cupom_id)
        cupom.active = not cupom.active
        return self.repo.update(cupom)

    def list(self) -> List[CupomModel]:
        return self.repo.list()

    def get(self, cupom_id: int) -> CupomModel:
        cupom = self.repo.get(cupom_id)
        if not cupom:
            raise HTTPException(status.HTTP_404_NOT_FOUND, "Cupom não encontrado")
        return cupom

    def delete(self, cupom_id: int):
        self.repo.delete(self.get(cupom_id))

    # ---------------- VALIDAÇÃO ----------------
    def validar_cupom(self, codigo: str, valor, produto_id: Optional[int] = None) -> dict:
        """
        Valida o cupom para o valor e produto informados.
        Retorna {"cupom_id", "desconto"}; erros viram HTTP 400 com a mensagem da regra.
        """
        valor = Decimal(str(valor))
        cupom = self.repo.get_ativo_by_code((codigo or "").strip().upper())
        if not cupom:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom inválido")

        agora = now_trimmed()
        if cupom.starts_at and as_aware(cupom.starts_at) > agora:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom ainda não está válido")

        if cupom.expires_at and as_aware(cupom.expires_at) < agora:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom expirado")

        if cupom.max_uses and cupom.current_uses >= cupom.max_uses:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom esgotado")

        if cupom.min_purchase_amount and valor < Decimal(str(cupom.min_purchase_amount)):
            minimo = Decimal(str(cupom.min_purchase_amount)).quantize(CENTAVOS)
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                f"Valor mínimo para este cupom: R$ {minimo}",
            )

        if cupom.product_id and cupom.product_id != produto_id:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Cupom não válido para este produto")

        return {
            "cupom_id": cupom.id,
            "desconto": calcular_desconto(cupom.type, cupom.value, valor),
        }

    def registrar_uso(self, cupom_id: int):
        atualizados = self.repo.incrementar_uso(cupom_id)
        if not atualizados:
            logger.warning(f"[Cupons] Uso não registrado: cupom {cupom_id} não encontrado")
