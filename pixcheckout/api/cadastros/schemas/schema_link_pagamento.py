from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from pixcheckout.api.cadastros.schemas.schema_produto import ProdutoOut


class LinkPagamentoCreate(BaseModel):
    product_id: int
    expira_em_minutos: int = 30


class LinkPagamentoOut(BaseModel):
    id: int
    product_id: int
    url_token: str
    status: str
    expires_at: datetime
    created_at: datetime
    url: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class LinkPagamentoPublico(BaseModel):
    url_token: str
    status: str
    expires_at: datetime
    product: ProdutoOut
    model_config = ConfigDict(from_attributes=True)
