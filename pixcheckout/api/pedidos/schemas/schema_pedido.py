from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from pixcheckout.api.cadastros.schemas.schema_cliente import ClienteOut
from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoOut

StatusPedido = Literal["pending", "processing", "paid", "expired", "failed", "cancelled"]


class NotaCreate(BaseModel):
    content: str = Field(..., min_length=1)


class NotaOut(BaseModel):
    id: int
    order_id: int
    content: str
    author_id: Optional[int] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class PedidoOut(BaseModel):
    id: int
    customer_id: int
    product_id: int
    amount: Decimal
    status: str
    payment_method: Optional[str] = None
    transaction_id: Optional[str] = None
    coupon_id: Optional[int] = None
    discount_amount: Decimal = Decimal("0")
    expires_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    customer: Optional[ClienteOut] = None
    product: Optional[ProdutoOut] = None
    model_config = ConfigDict(from_attributes=True)


class PedidoDetalhe(PedidoOut):
    payment_code: Optional[str] = None
    qr_code: Optional[str] = None
    notes: List[NotaOut] = []


class AtualizarStatusRequest(BaseModel):
    status: StatusPedido
    motivo: Optional[str] = None


class AtualizacaoPedidoOut(BaseModel):
    id: int
    order_id: int
    status: str
    data: Optional[Dict[str, Any]] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ExpiracaoResponse(BaseModel):
    expirados: int
