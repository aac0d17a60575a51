from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from pixcheckout.utils.validacoes import validar_telefone


class CheckoutRequest(BaseModel):
    product_id: int
    name: str = Field(..., min_length=2, max_length=150)
    email: EmailStr
    document: str = Field(..., description="CPF ou CNPJ")
    phone: Optional[str] = None
    coupon_code: Optional[str] = None
    payment_link_token: Optional[str] = None
    tentativas: Optional[int] = Field(None, ge=0, description="Tentativas de pagamento do cliente nesta sessão")

    @field_validator("name")
    @classmethod
    def _limpar_nome(cls, v: str):
        return v.strip()

    @field_validator("phone")
    @classmethod
    def _validar_telefone(cls, v: Optional[str]):
        if v and not validar_telefone(v):
            raise ValueError("Telefone inválido")
        return v or None


class PedidoCriadoResponse(BaseModel):
    order_id: int
    status: str
    amount: Decimal
    discount_amount: Decimal
    qr_code: str
    payment_code: str
    expires_at: datetime


class StatusPedidoResponse(BaseModel):
    order_id: int
    status: str
    amount: Decimal
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
