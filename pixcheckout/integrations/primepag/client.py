from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional

import httpx


def valor_em_centavos(valor: Decimal) -> int:
    return int((Decimal(str(valor)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(slots=True)
class PrimePagCharge:
    """Representa uma resposta simplificada de cobrança Pix da PrimePag."""

    id: str
    status: str
    qr_code: str | None
    code: str | None
    raw: Dict[str, Any]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrimePagCharge":
        pix = data.get("pix", {}) or {}
        return cls(
            id=str(data.get("id", "")),
            status=data.get("status", "pending"),
            qr_code=pix.get("qr_code"),
            code=pix.get("code"),
            raw=data,
        )


class PrimePagClient:
    """Cliente HTTP simples para a API de cobranças da PrimePag."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str,
        timeout: int = 20,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not token:
            raise ValueError("token é obrigatório para a PrimePag")

        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PrimePagClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def create_charge(
        self,
        *,
        external_id: str,
        amount: Decimal,
        description: str,
        customer: Dict[str, Any] | None = None,
        expiration_seconds: int = 1800,
        callback_url: str | None = None,
    ) -> PrimePagCharge:
        """
        Cria uma cobrança Pix.

        - `external_id` é o ID do pedido; volta no webhook.
        - `amount` é convertido para centavos.
        """
        payload: Dict[str, Any] = {
            "amount": valor_em_centavos(amount),
            "currency": "BRL",
            "payment_method": "pix",
            "description": description,
            "external_id": external_id,
            "customer": customer or {},
            "expiration": expiration_seconds,
            "callback_url": callback_url,
        }

        resp = await self._client.post("/charges", json=payload)
        resp.raise_for_status()
        return PrimePagCharge.from_dict(resp.json())

    async def get_charge(self, charge_id: str) -> PrimePagCharge:
        resp = await self._client.get(f"/charges/{charge_id}")
        resp.raise_for_status()
        return PrimePagCharge.from_dict(resp.json())
