from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class CheckoutSettings(BaseModel):
    auto_expire_time: int = Field(30, ge=1, le=1440)
    pix_key: str = ""
    pix_key_type: Literal["cpf", "cnpj", "email", "phone", "random"] = "cpf"


class NotificationSettings(BaseModel):
    email_notifications: bool = True
    payment_confirmation: bool = True
    payment_expiration: bool = True
    new_order: bool = True
    daily_summary: bool = False
    weekly_report: bool = True
    send_copy_to: List[str] = []


class ConfiguracoesUpdate(BaseModel):
    whatsapp_settings: Optional[Dict[str, Any]] = None
    notification_settings: Optional[NotificationSettings] = None
    integration_settings: Optional[Dict[str, Any]] = None
    checkout_settings: Optional[CheckoutSettings] = None


class ConfiguracoesOut(BaseModel):
    whatsapp_settings: Dict[str, Any]
    notification_settings: Dict[str, Any]
    integration_settings: Dict[str, Any]
    checkout_settings: Dict[str, Any]
