from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ClienteOut(BaseModel):
    id: int
    name: str
    email: str
    cpf: Optional[str] = None
    phone: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClienteResumo(BaseModel):
    id: int
    name: str
    email: str
    total_pedidos: int
    total_gasto: float


class PedidoDoCliente(BaseModel):
    id: int
    product_id: int
    amount: Decimal
    status: str
    created_at: datetime
    paid_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ClienteDetalhe(BaseModel):
    cliente: ClienteOut
    pedidos: List[PedidoDoCliente]
    total_pedidos: int
    total_gasto: float
