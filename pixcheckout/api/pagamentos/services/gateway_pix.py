from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx
from fastapi import HTTPException, status

from pixcheckout.config import settings
from pixcheckout.integrations.primepag.client import PrimePagClient
from pixcheckout.utils.logger import logger
from pixcheckout.utils.retry import retry_operation

MOCK_QR_CODE = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
)
MOCK_PAYMENT_CODE = "00020126580014BR.GOV.BCB.PIX0136123e4567-e89b-12d3-a456-426614174000"


@dataclass(slots=True)
class CobrancaPix:
    qr_code: str
    payment_code: str
    transaction_id: Optional[str] = None
    mock: bool = False


class GatewayPix:
    """Gera cobranças Pix na PrimePag, com payload fixo quando não configurada."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[int] = None,
        usar_mock: Optional[bool] = None,
        max_retries: int = 3,
        retry_delay: float = 1.0,
    ):
        self.token = token if token is not None else settings.PRIMEPAG_TOKEN
        self.api_url = api_url or settings.PRIMEPAG_API_URL
        self.timeout = timeout or settings.PRIMEPAG_TIMEOUT_SECONDS
        self.usar_mock = usar_mock if usar_mock is not None else (not self.token or settings.IS_DEVELOPMENT)
        self.max_retries = max_retries
        self.retry_delay = retry_delay

    def _criar_cliente(self) -> PrimePagClient:
        return PrimePagClient(token=self.token, base_url=self.api_url, timeout=self.timeout)

    @staticmethod
    def cobranca_mock() -> CobrancaPix:
        return CobrancaPix(qr_code=MOCK_QR_CODE, payment_code=MOCK_PAYMENT_CODE, mock=True)

    async def gerar_cobranca(
        self,
        pedido_id: int,
        valor: Decimal,
        descricao: str,
        cliente: Dict[str, Any],
        expiracao_minutos: int,
    ) -> CobrancaPix:
        if self.usar_mock:
            logger.warning(f"[Gateway] PrimePag não configurada; usando cobrança simulada para pedido {pedido_id}")
            return self.cobranca_mock()

        callback_url = f"{settings.BASE_URL.rstrip('/')}/api/pagamentos/webhook/primepag" if settings.BASE_URL else None

        async def _criar():
            async with self._criar_cliente() as client:
                return await client.create_charge(
                    external_id=str(pedido_id),
                    amount=valor,
                    description=descricao,
                    customer=cliente,
                    expiration_seconds=expiracao_minutos * 60,
                    callback_url=callback_url,
                )

        try:
            charge = await retry_operation(_criar, max_retries=self.max_retries, delay=self.retry_delay)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"[Gateway] Falha ao criar cobrança do pedido {pedido_id}: {e}")
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, "Falha ao gerar cobrança Pix no gateway de pagamento")

        if not charge.qr_code or not charge.code:
            logger.error(f"[Gateway] Resposta sem dados Pix para pedido {pedido_id}: {charge.raw}")
            raise HTTPException(status.HTTP_502_BAD_GATEWAY, "Gateway de pagamento retornou cobrança sem dados Pix")

        logger.info(f"[Gateway] Cobrança criada pedido={pedido_id} charge={charge.id}")
        return CobrancaPix(qr_code=charge.qr_code, payment_code=charge.code, transaction_id=charge.id or None)


def get_gateway_pix() -> GatewayPix:
    """Dependency FastAPI; sobrescrita nos testes."""
    return GatewayPix()
