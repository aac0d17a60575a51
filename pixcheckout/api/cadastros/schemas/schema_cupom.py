from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pixcheckout.utils.database_utils import as_aware

TipoCupom = Literal["percentage", "fixed"]


class CupomBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=30)
    type: TipoCupom
    value: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, ge=1)
    min_purchase_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    product_id: Optional[int] = None
    active: bool = True

    @field_validator("code")
    @classmethod
    def _normalizar_codigo(cls, v: str):
        return v.strip().upper()

    @model_validator(mode="after")
    def _validar_regras(self):
        if self.type == "percentage" and self.value > 100:
            raise ValueError("Percentual de desconto não pode ser maior que 100")
        if self.starts_at and self.expires_at and as_aware(self.expires_at) <= as_aware(self.starts_at):
            raise ValueError("expires_at deve ser posterior a starts_at")
        return self


class CupomCreate(CupomBase):
    pass


class CupomUpdate(BaseModel):
    type: Optional[TipoCupom] = None
    value: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    starts_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, ge=1)
    min_purchase_amount: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    product_id: Optional[int] = None
    active: Optional[bool] = None


class CupomOut(CupomBase):
    id: int
    current_uses: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ValidarCupomRequest(BaseModel):
    code: str
    amount: Decimal = Field(..., gt=0)
    product_id: Optional[int] = None


class CupomValidadoResponse(BaseModel):
    cupom_id: int
    desconto: Decimal
