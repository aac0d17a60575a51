from typing import Optional, Union

from pydantic import BaseModel, field_validator


class PrimePagWebhookPayload(BaseModel):
    id: Optional[Union[str, int]] = None
    external_id: Optional[Union[str, int]] = None
    status: Optional[str] = None
    paid_at: Optional[str] = None
    amount: Optional[float] = None
    payment_method: Optional[str] = None

    @field_validator("id", "external_id", mode="before")
    @classmethod
    def _ids_como_texto(cls, valor):
        # o gateway manda ids ora como texto, ora como número
        if isinstance(valor, int) and not isinstance(valor, bool):
            return str(valor)
        return valor


class WebhookResponse(BaseModel):
    success: bool = True
    order_id: Optional[int] = None
    status: Optional[str] = None
    duplicado: bool = False
    ignorado: bool = False
